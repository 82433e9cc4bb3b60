# storefront/api/routers/catalog.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.errors import http_error
from storefront.data.database import get_db
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import CategoryOut, ProductOut
from storefront.services.catalog_service import CatalogService

router = APIRouter(tags=["catalog"])


def get_service(db: Session):
    return CatalogService(db)


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return get_service(db).list_categories()


@router.get("/products/{category_id}", response_model=List[ProductOut])
def list_products(category_id: str, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.list_products_by_category(category_id)
    except NotFoundError as e:
        raise http_error(e)


@router.get("/product/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_product(product_id)
    except NotFoundError as e:
        raise http_error(e)
