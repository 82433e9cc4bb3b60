# storefront/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.database import utcnow
from storefront.data.models.cart import CART_ACTIVE, CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import ConcurrencyConflict, ConflictError, NotFoundError
from storefront.repos.cart_repo import CartRepo
from storefront.services.catalog_service import CatalogService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT)


def line_total(quantity: int, price: Decimal) -> Decimal:
    return to_money(price * quantity)


def line_item_to_dict(item) -> Dict[str, Any]:
    return {
        "product_id": item.product_id,
        "quantity": item.quantity,
        "price": item.price,
        "total": item.total,
        "title": item.title,
        "image": item.image,
    }


def cart_to_dict(cart: CartModel) -> Dict[str, Any]:
    return {
        "id": cart.id,
        "user_id": cart.user_id,
        "status": cart.status,
        "items": [line_item_to_dict(i) for i in cart.items],
        "total": cart.total,
    }


class CartService:
    """
    Use cases of the cart domain.
    commands (add, update, remove) claim the cart with a version check
    before touching its lines, query (get) only reads.
    """

    def __init__(self, db: Session, catalog: CatalogService | None = None):
        self.repo = CartRepo(db)
        self.catalog = catalog or CatalogService(db)

    # query
    def get_cart(self, user_id: str) -> Dict[str, Any] | None:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            return None
        return cart_to_dict(cart)

    # commands
    def add_item(
        self,
        user_id: str,
        product_id: str,
        quantity: int,
        price,
        title: str | None = None,
        image: str | None = None,
    ) -> Dict[str, Any]:
        price = to_money(price)
        title, image = self._display_fields(product_id, title, image)

        cart = self.repo.get_cart_by_user(user_id)

        if not cart:
            item = CartItemModel(
                product_id=product_id,
                quantity=quantity,
                price=price,
                total=line_total(quantity, price),
                title=title,
                image=image,
            )
            cart = CartModel(
                user_id=user_id,
                status=CART_ACTIVE,
                version=1,
                items=[item],
                total=item.total,
            )
            try:
                created = self.repo.create_cart(cart)
            except IntegrityError:
                self.repo.rollback()
                # only the unique user_id means a concurrent request created the cart first
                if self.repo.get_cart_by_user(user_id) is None:
                    raise
                logger.warning(f"Lost cart creation race for user {user_id}")
                raise ConcurrencyConflict("Cart was modified by another request, try again")

            logger.info(f"Created cart {created.id} for user {user_id} with product {product_id}")
            return cart_to_dict(created)

        self._claim(cart)

        existing = self._find_item(cart, product_id)
        if existing:
            logger.info(
                f"Product {product_id} already in cart {cart.id}, quantity "
                f"{existing.quantity} -> {existing.quantity + quantity}"
            )
            # the stored unit price wins over the one in the request
            existing.quantity += quantity
            existing.total = line_total(existing.quantity, existing.price)
        else:
            logger.info(f"Adding product {product_id} to cart {cart.id}")
            cart.items.append(
                CartItemModel(
                    product_id=product_id,
                    quantity=quantity,
                    price=price,
                    total=line_total(quantity, price),
                    title=title,
                    image=image,
                )
            )

        self._recompute_total(cart)
        self.repo.commit()
        return cart_to_dict(cart)

    def update_item(self, user_id: str, product_id: str, quantity: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found!")

        item = self._find_item(cart, product_id)
        if not item:
            raise NotFoundError("Item not found!")

        self._claim(cart)

        item.quantity = quantity
        item.total = line_total(quantity, item.price)

        self._recompute_total(cart)
        self.repo.commit()

        logger.info(f"Product {product_id} in cart {cart.id} set to quantity {quantity}")
        return cart_to_dict(cart)

    def remove_item(self, user_id: str, product_id: str) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found!")

        item = self._find_item(cart, product_id)
        if not item:
            return cart_to_dict(cart)

        self._claim(cart)
        cart.items.remove(item)

        self._recompute_total(cart)
        self.repo.commit()

        logger.info(f"Product {product_id} removed from cart {cart.id}")
        return cart_to_dict(cart)

    # helpers
    def _claim(self, cart: CartModel) -> None:
        """Bumps the cart version if nobody else did since we read it.

        UPDATE carts SET version = v + 1 WHERE id = :id AND version = v
        Zero rows means a concurrent command got there first.
        """
        if cart.status != CART_ACTIVE:
            raise ConflictError("Cart is being converted to an order")

        old_version = cart.version
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=old_version,
            new_data={"version": old_version + 1, "updated_at": utcnow()},
        )

        if rowcount == 0:
            self.repo.rollback()
            logger.warning(f"Version conflict on cart {cart.id} (expected version {old_version})")
            raise ConcurrencyConflict("Cart was modified by another request, try again")

    @staticmethod
    def _find_item(cart: CartModel, product_id: str) -> CartItemModel | None:
        for item in cart.items:
            if item.product_id == product_id:
                return item
        return None

    @staticmethod
    def _recompute_total(cart: CartModel) -> None:
        cart.total = sum((i.total for i in cart.items), Decimal("0.00"))

    def _display_fields(self, product_id: str, title: str | None, image: str | None):
        if title is not None and image is not None:
            return title, image

        product = self.catalog.find_product(product_id)
        if not product:
            return title, image

        return (
            title if title is not None else product.title,
            image if image is not None else product.image,
        )
