# storefront/services/auth_service.py
import jwt
from sqlalchemy.orm import Session

from storefront.domain.errors import UnauthorizedError
from storefront.services.blacklist_service import BlacklistService
from storefront.utils.logging import get_logger
from storefront.utils.security import ACCESS, decode_token

logger = get_logger(__name__)


class AuthService:
    def __init__(self, db: Session):
        self.blacklist = BlacklistService(db)

    def authenticate(self, token: str | None) -> str:
        """Returns the user id carried by a valid, non-revoked access token."""
        if not token:
            raise UnauthorizedError("Access denied, token required")

        try:
            claims = decode_token(token, ACCESS)
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected token: {e}")
            raise UnauthorizedError("Invalid token")

        # checked on every request so logout takes effect immediately
        if self.blacklist.is_revoked(token):
            raise UnauthorizedError("Token has been blacklisted, access denied")

        return claims["userId"]
