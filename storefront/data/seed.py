# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal, init_db
from storefront.data.models.catalog import CategoryModel, ProductModel
from storefront.repos.catalog_repo import CatalogRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CATALOG = {
    "Electronics": [
        ("Keyboard", "199.99", "Mechanical keyboard with brown switches"),
        ("Mouse", "49.50", "Wireless optical mouse"),
        ("Monitor", "899.00", "27 inch IPS monitor"),
    ],
    "Books": [
        ("Fluent Python", "59.90", "Clear, concise and effective programming"),
        ("Designing Data-Intensive Applications", "64.00", "The big ideas behind reliable systems"),
    ],
}


def seed(db=None) -> int:
    """Loads the demo catalog into an empty database, returns the number of products added."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        repo = CatalogRepo(db)
        # not forcing: only seed if empty
        if repo.count_categories():
            return 0

        rows = []
        for name, products in CATALOG.items():
            category = CategoryModel(name=name)
            rows.append(category)
            for title, price, description in products:
                rows.append(
                    ProductModel(
                        title=title,
                        price=Decimal(price),
                        description=description,
                        image=f"https://cdn.example.com/products/{title.lower().replace(' ', '-')}.jpg",
                        category=category,
                    )
                )

        repo.add_all(rows)
        added = len(rows) - len(CATALOG)
        logger.info(f"Seeded {len(CATALOG)} categories and {added} products")
        return added
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    init_db()
    seed()
