# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user_id
from storefront.api.errors import http_error
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import AddItemIn, CartOut, UpdateItemIn
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut | None)
def get_cart(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    # no cart yet is a valid answer, the body is null
    return get_service(db).get_cart(user_id)


@router.post("/add", response_model=CartOut)
def add_item(
    payload: AddItemIn,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_item(
            user_id=user_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
            price=payload.price,
            title=payload.title,
            image=payload.image,
        )
    except StorefrontError as e:
        raise http_error(e)


@router.api_route("/update/{product_id}", methods=["PATCH", "POST"], response_model=CartOut)
def update_item(
    product_id: str,
    payload: UpdateItemIn,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_item(user_id, product_id, payload.quantity)
    except StorefrontError as e:
        raise http_error(e)


@router.api_route("/remove/{product_id}", methods=["DELETE", "POST"], response_model=CartOut)
def remove_item(
    product_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.remove_item(user_id, product_id)
    except StorefrontError as e:
        raise http_error(e)
