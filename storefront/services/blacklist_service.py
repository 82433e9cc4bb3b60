# storefront/services/blacklist_service.py
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.blacklist import BlacklistEntryModel
from storefront.repos.blacklist_repo import BlacklistRepo
from storefront.utils.logging import get_logger
from storefront.utils.security import token_expiry

logger = get_logger(__name__)


class BlacklistService:
    """
    Set of revoked tokens.
    Every entry carries the expiry of its token so it can be pruned
    once the token would be rejected on its own.
    """

    def __init__(self, db: Session):
        self.repo = BlacklistRepo(db)

    def revoke(self, token: str, expires_at: datetime | None = None) -> None:
        if self.repo.get_entry(token):
            return

        entry = BlacklistEntryModel(
            token=token,
            expires_at=expires_at or token_expiry(token),
        )
        try:
            self.repo.add_entry(entry)
        except IntegrityError:
            # concurrent logout of the same token won the insert
            self.repo.rollback()
            logger.info("Token already revoked by a concurrent request")
            return

        logger.info(f"Token revoked until {entry.expires_at.isoformat()}")

    def is_revoked(self, token: str) -> bool:
        return self.repo.get_entry(token) is not None

    def prune(self, now: datetime | None = None) -> int:
        now = now or datetime.now(timezone.utc)
        removed = self.repo.delete_expired(now)
        logger.info(f"Pruned {removed} expired blacklist entries")
        return removed
