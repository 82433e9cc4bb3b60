# storefront/services/catalog_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.catalog import CategoryModel, ProductModel
from storefront.domain.errors import NotFoundError
from storefront.repos.catalog_repo import CatalogRepo


def category_to_dict(category: CategoryModel) -> Dict[str, Any]:
    return {"id": category.id, "name": category.name, "image": category.image}


def product_to_dict(product: ProductModel) -> Dict[str, Any]:
    return {
        "id": product.id,
        "title": product.title,
        "price": product.price,
        "description": product.description,
        "availability": product.availability,
        "image": product.image,
        "category_id": product.category_id,
    }


class CatalogService:
    """Read-only queries over categories and products."""

    def __init__(self, db: Session):
        self.repo = CatalogRepo(db)

    def list_categories(self) -> List[Dict[str, Any]]:
        return [category_to_dict(c) for c in self.repo.list_categories()]

    def list_products_by_category(self, category_id: str) -> List[Dict[str, Any]]:
        products = self.repo.list_products_by_category(category_id.strip())
        # an empty category is reported as missing, clients rely on the 404
        if not products:
            raise NotFoundError("No products found for the given category ID")
        return [product_to_dict(p) for p in products]

    def get_product(self, product_id: str) -> Dict[str, Any]:
        product = self.find_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product_to_dict(product)

    def find_product(self, product_id: str) -> ProductModel | None:
        return self.repo.get_product(product_id.strip())
