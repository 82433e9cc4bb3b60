"""
Unit tests for CartService against a real session.
"""
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from storefront.data.database import SessionLocal
from storefront.data.models.cart import CART_CONVERTING, CartModel
from storefront.domain.errors import ConcurrencyConflict, ConflictError, NotFoundError
from storefront.repos.cart_repo import CartRepo
from storefront.services.cart_service import CartService


def assert_totals_consistent(cart: dict):
    for item in cart["items"]:
        assert item["total"] == item["quantity"] * item["price"]
    assert cart["total"] == sum((i["total"] for i in cart["items"]), Decimal("0"))


class TestAddItem:
    def test_first_add_creates_cart_with_single_item(self, db):
        cart = CartService(db).add_item("u1", "p1", 2, 10)

        assert cart["user_id"] == "u1"
        assert cart["status"] == "ACTIVE"
        assert len(cart["items"]) == 1
        item = cart["items"][0]
        assert item["product_id"] == "p1"
        assert item["quantity"] == 2
        assert item["price"] == Decimal("10.00")
        assert item["total"] == Decimal("20.00")
        assert cart["total"] == Decimal("20.00")

    def test_repeat_add_increments_quantity_and_keeps_stored_price(self, db):
        svc = CartService(db)
        svc.add_item("u1", "p1", 2, 10)

        cart = svc.add_item("u1", "p1", 3, 99)

        assert len(cart["items"]) == 1
        item = cart["items"][0]
        assert item["quantity"] == 5
        assert item["price"] == Decimal("10.00")
        assert item["total"] == Decimal("50.00")
        assert cart["total"] == Decimal("50.00")

    def test_new_product_is_appended_in_insertion_order(self, db):
        svc = CartService(db)
        svc.add_item("u1", "p1", 1, "2.50")
        svc.add_item("u1", "p2", 4, "1.25")
        cart = svc.add_item("u1", "p3", 1, 7)

        assert [i["product_id"] for i in cart["items"]] == ["p1", "p2", "p3"]
        assert cart["total"] == Decimal("14.50")
        assert_totals_consistent(cart)

    def test_zero_quantity_keeps_a_zero_total_line(self, db):
        cart = CartService(db).add_item("u1", "p1", 0, 10)

        assert len(cart["items"]) == 1
        assert cart["items"][0]["total"] == Decimal("0.00")
        assert cart["total"] == Decimal("0.00")

    def test_display_fields_are_filled_from_catalog(self, catalog):
        svc = CartService(catalog)
        product = svc.catalog.repo.list_categories()[0].products[0]

        cart = svc.add_item("u1", product.id, 1, product.price)

        item = cart["items"][0]
        assert item["title"] == product.title
        assert item["image"] == product.image

    def test_explicit_display_fields_win_over_catalog(self, catalog):
        svc = CartService(catalog)
        product = svc.catalog.repo.list_categories()[0].products[0]

        cart = svc.add_item("u1", product.id, 1, 5, title="Custom", image="custom.png")

        assert cart["items"][0]["title"] == "Custom"
        assert cart["items"][0]["image"] == "custom.png"

    def test_carts_are_per_user(self, db):
        svc = CartService(db)
        svc.add_item("u1", "p1", 1, 10)
        svc.add_item("u2", "p1", 3, 10)

        assert svc.get_cart("u1")["total"] == Decimal("10.00")
        assert svc.get_cart("u2")["total"] == Decimal("30.00")


class TestGetCart:
    def test_missing_cart_is_none(self, db):
        assert CartService(db).get_cart("nobody") is None


class TestUpdateItem:
    def test_quantity_is_replaced(self, db):
        svc = CartService(db)
        svc.add_item("u1", "p1", 2, 10)
        svc.add_item("u1", "p2", 1, 5)

        cart = svc.update_item("u1", "p1", 7)

        item = cart["items"][0]
        assert item["quantity"] == 7
        assert item["total"] == Decimal("70.00")
        assert cart["total"] == Decimal("75.00")
        assert_totals_consistent(cart)

    def test_missing_cart_raises_not_found(self, db):
        with pytest.raises(NotFoundError):
            CartService(db).update_item("u1", "p1", 1)

    def test_unknown_product_raises_not_found_and_leaves_cart(self, db):
        svc = CartService(db)
        before = svc.add_item("u1", "p1", 2, 10)

        with pytest.raises(NotFoundError):
            svc.update_item("u1", "nope", 5)

        assert svc.get_cart("u1") == before


class TestRemoveItem:
    def test_matching_item_is_removed(self, db):
        svc = CartService(db)
        svc.add_item("u1", "p1", 2, 10)
        svc.add_item("u1", "p2", 1, 5)

        cart = svc.remove_item("u1", "p1")

        assert [i["product_id"] for i in cart["items"]] == ["p2"]
        assert cart["total"] == Decimal("5.00")

    def test_removing_last_item_leaves_empty_cart(self, db):
        svc = CartService(db)
        svc.add_item("u1", "p1", 2, 10)

        cart = svc.remove_item("u1", "p1")

        assert cart["items"] == []
        assert cart["total"] == Decimal("0.00")

    def test_unknown_product_is_a_no_op(self, db):
        svc = CartService(db)
        before = svc.add_item("u1", "p1", 2, 10)

        cart = svc.remove_item("u1", "nope")

        assert cart == before

    def test_missing_cart_raises_not_found(self, db):
        with pytest.raises(NotFoundError):
            CartService(db).remove_item("u1", "p1")


class TestConcurrency:
    def test_stale_version_is_rejected_and_nothing_changes(self, db):
        """
        A cart read before another request committed cannot be claimed
        """
        svc = CartService(db)
        created = svc.add_item("u1", "p1", 1, 10)
        stale = db.get(CartModel, created["id"])
        assert stale.version == 1
        db.commit()

        other = SessionLocal()
        try:
            CartService(other).add_item("u1", "p1", 1, 10)
        finally:
            other.close()

        with pytest.raises(ConcurrencyConflict):
            svc._claim(stale)

        fresh = SessionLocal()
        try:
            cart = CartService(fresh).get_cart("u1")
        finally:
            fresh.close()
        assert cart["items"][0]["quantity"] == 2
        assert cart["total"] == Decimal("20.00")

    def test_version_claim_with_old_version_affects_no_rows(self, db):
        svc = CartService(db)
        created = svc.add_item("u1", "p1", 1, 10)
        repo = CartRepo(db)

        assert repo.update_cart_version(created["id"], 1, {"version": 2}) == 1
        assert repo.update_cart_version(created["id"], 1, {"version": 2}) == 0
        repo.rollback()

    def test_converting_cart_cannot_be_changed(self, db):
        svc = CartService(db)
        created = svc.add_item("u1", "p1", 1, 10)
        repo = CartRepo(db)
        repo.update_cart_version(created["id"], 1, {"status": CART_CONVERTING, "version": 2})
        repo.commit()

        with pytest.raises(ConflictError):
            svc.add_item("u1", "p2", 1, 10)
        with pytest.raises(ConflictError):
            svc.update_item("u1", "p1", 3)
        with pytest.raises(ConflictError):
            svc.remove_item("u1", "p1")

    def test_losing_the_creation_race_is_a_conflict(self, db, monkeypatch):
        svc = CartService(db)

        def create_cart_after_rival(cart):
            other = SessionLocal()
            try:
                CartService(other).add_item("u1", "p9", 1, 5)
            finally:
                other.close()
            raise IntegrityError("INSERT INTO carts", {}, Exception("UNIQUE constraint failed: carts.user_id"))

        monkeypatch.setattr(svc.repo, "create_cart", create_cart_after_rival)

        with pytest.raises(ConcurrencyConflict):
            svc.add_item("u1", "p1", 1, 10)
        assert [i["product_id"] for i in svc.get_cart("u1")["items"]] == ["p9"]

    def test_other_integrity_errors_are_not_reported_as_conflicts(self, db, monkeypatch):
        svc = CartService(db)

        def failing_create_cart(cart):
            raise IntegrityError("INSERT INTO cart_items", {}, Exception("NOT NULL constraint failed"))

        monkeypatch.setattr(svc.repo, "create_cart", failing_create_cart)

        with pytest.raises(IntegrityError):
            svc.add_item("u1", "p1", 1, 10)
        assert svc.get_cart("u1") is None
