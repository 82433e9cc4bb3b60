# storefront/repos/blacklist_repo.py
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from storefront.data.models.blacklist import BlacklistEntryModel


class BlacklistRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_entry(self, token: str) -> BlacklistEntryModel | None:
        return self.db.execute(
            select(BlacklistEntryModel).where(BlacklistEntryModel.token == token)
        ).scalar_one_or_none()

    def add_entry(self, entry: BlacklistEntryModel) -> BlacklistEntryModel:
        self.db.add(entry)
        self.db.commit()
        return entry

    def delete_expired(self, now: datetime) -> int:
        result = self.db.execute(
            delete(BlacklistEntryModel).where(BlacklistEntryModel.expires_at < now)
        )
        self.db.commit()
        return result.rowcount

    def rollback(self):
        self.db.rollback()
