# storefront/data/models/cart.py
from decimal import Decimal

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base, new_id, utcnow

CART_ACTIVE = "ACTIVE"
CART_CONVERTING = "CONVERTING"


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(String(32), primary_key=True, default=new_id)
    # one live cart per user
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, unique=True)

    status = Column(String(20), nullable=False, default=CART_ACTIVE)
    version = Column(Integer, nullable=False, default=1)
    total = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )
