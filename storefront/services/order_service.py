# storefront/services/order_service.py
from datetime import datetime, timedelta
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.database import utcnow
from storefront.data.models.cart import CART_ACTIVE, CART_CONVERTING, CartModel
from storefront.data.models.order import ORDER_ACTIVE, OrderItemModel, OrderModel
from storefront.domain.errors import ConcurrencyConflict, ConflictError, InternalError, NotFoundError
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.cart_service import line_item_to_dict
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger
from storefront.utils.settings import CONVERSION_GRACE_SECONDS

logger = get_logger(__name__)


def order_to_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "items": [line_item_to_dict(i) for i in order.items],
        "total": order.total,
        "date": order.date,
        "status": order.status,
    }


class OrderService:
    """
    Order domain, kept apart from CartService.
    Turning a cart into an order is a small saga:
    mark the cart CONVERTING, write the order, delete the cart.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.notification_service = notification_service or NotificationService()

    def place_order(self, user_id: str, cart_id: str) -> Dict[str, Any]:
        """
        Use case: place an order from the user's cart.

        1. claims the cart and marks it CONVERTING
        2. writes the order snapshot (cart goes back to ACTIVE if that fails)
        3. deletes the cart (a failure here is left to the reconciliation sweep)
        4. queues the notification
        """
        cart = self.cart_repo.get_cart(cart_id)

        # someone else's cart is reported the same way as a missing one
        if not cart or cart.user_id != user_id:
            raise NotFoundError("Cart not found!")

        if cart.status == CART_CONVERTING:
            raise ConflictError("Cart is already being converted to an order")

        rowcount = self.cart_repo.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={
                "status": CART_CONVERTING,
                "version": cart.version + 1,
                "updated_at": utcnow(),
            },
        )

        if rowcount == 0:
            self.cart_repo.rollback()
            logger.warning(f"Version conflict while converting cart {cart_id}")
            raise ConcurrencyConflict("Cart was modified by another request, try again")

        self.cart_repo.commit()

        try:
            created = self.repo.create_order(self._snapshot(cart))
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Could not write order for cart {cart_id}: {e}")
            self._release_cart(cart_id)
            raise InternalError("Error placing order") from e

        logger.info(f"Order {created.id} created from cart {cart_id}, total {created.total}")

        try:
            self.cart_repo.delete_cart(cart)
        except SQLAlchemyError as e:
            self.cart_repo.rollback()
            logger.warning(f"Cart {cart_id} left in {CART_CONVERTING} after order {created.id}: {e}")

        self.notification_service.send_order_notification(user_id, created.id)

        return order_to_dict(created)

    def list_orders(self, user_id: str) -> List[Dict[str, Any]]:
        return [order_to_dict(o) for o in self.repo.list_orders_by_user(user_id)]

    def get_order(self, user_id: str, order_id: str) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)

        if not order or order.user_id != user_id:
            raise NotFoundError("Order not found!")

        return order_to_dict(order)

    def reconcile_converting_carts(self, older_than: datetime | None = None) -> Dict[str, int]:
        """
        Finishes or undoes conversions that stopped half way.
        A stuck cart whose order exists is deleted, any other goes back to ACTIVE.
        """
        older_than = older_than or utcnow() - timedelta(seconds=CONVERSION_GRACE_SECONDS)
        stuck = self.cart_repo.list_carts_by_status(CART_CONVERTING, updated_before=older_than)

        deleted = reactivated = 0
        for cart in stuck:
            order = self.repo.get_order_by_cart(cart.id)
            if order:
                logger.info(f"Deleting cart {cart.id}, already converted to order {order.id}")
                self.cart_repo.delete_cart(cart)
                deleted += 1
            else:
                logger.info(f"Reactivating cart {cart.id}, no order was written for it")
                self.cart_repo.set_cart_status(cart.id, CART_CONVERTING, CART_ACTIVE, utcnow())
                self.cart_repo.commit()
                reactivated += 1

        return {"deleted": deleted, "reactivated": reactivated}

    @staticmethod
    def _snapshot(cart: CartModel) -> OrderModel:
        return OrderModel(
            user_id=cart.user_id,
            source_cart_id=cart.id,
            status=ORDER_ACTIVE,
            total=cart.total,
            date=utcnow(),
            items=[
                OrderItemModel(
                    product_id=i.product_id,
                    quantity=i.quantity,
                    price=i.price,
                    total=i.total,
                    title=i.title,
                    image=i.image,
                )
                for i in cart.items
            ],
        )

    def _release_cart(self, cart_id: str) -> None:
        try:
            self.cart_repo.set_cart_status(cart_id, CART_CONVERTING, CART_ACTIVE, utcnow())
            self.cart_repo.commit()
        except SQLAlchemyError as e:
            self.cart_repo.rollback()
            logger.error(f"Cart {cart_id} stays {CART_CONVERTING} until reconciliation: {e}")
