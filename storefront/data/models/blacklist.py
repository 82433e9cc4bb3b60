from sqlalchemy import Column, Integer, Text, DateTime

from storefront.data.database import Base, utcnow


class BlacklistEntryModel(Base):
    __tablename__ = "blacklist_tokens"

    id = Column(Integer, primary_key=True)
    token = Column(Text, nullable=False, unique=True)
    # revoked token's own expiry, after which the entry is useless
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
