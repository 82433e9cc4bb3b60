# storefront/repos/catalog_repo.py
from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.data.models.catalog import CategoryModel, ProductModel


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_categories(self) -> List[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.name)).scalars())

    def count_categories(self) -> int:
        return self.db.execute(select(func.count()).select_from(CategoryModel)).scalar_one()

    def list_products_by_category(self, category_id: str) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .where(ProductModel.category_id == category_id)
                .order_by(ProductModel.title)
            ).scalars()
        )

    def get_product(self, product_id: str) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def add_all(self, rows: list):
        self.db.add_all(rows)
        self.db.commit()
