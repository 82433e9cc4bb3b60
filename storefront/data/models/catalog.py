from sqlalchemy import Boolean, Column, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from storefront.data.database import Base, new_id


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(150), nullable=False, unique=True)
    image = Column(String(1024), nullable=True)

    products = relationship("ProductModel", back_populates="category")


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=False)
    availability = Column(Boolean, nullable=False, default=True)
    image = Column(String(1024), nullable=False)
    category_id = Column(String(32), ForeignKey("categories.id"), nullable=False, index=True)

    category = relationship("CategoryModel", back_populates="products")
