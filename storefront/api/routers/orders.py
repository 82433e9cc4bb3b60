# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user_id
from storefront.api.errors import http_error
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import OrderOut
from storefront.services.order_service import OrderService

router = APIRouter(tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("/order/{cart_id}", response_model=OrderOut, status_code=201)
def place_order(
    cart_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Places an order from the given cart and removes the cart.
    The notification is sent asynchronously.
    """
    svc = get_service(db)
    try:
        return svc.place_order(user_id, cart_id)
    except StorefrontError as e:
        raise http_error(e)


@router.get("/orders", response_model=List[OrderOut])
def list_orders(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return get_service(db).list_orders(user_id)


@router.get("/order/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Returns one order of the current user.
    """
    svc = get_service(db)
    try:
        return svc.get_order(user_id, order_id)
    except StorefrontError as e:
        raise http_error(e)
