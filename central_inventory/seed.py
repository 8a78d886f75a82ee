"""
Seed the inventory table with the default demo SKUs.

Run directly with:
    python -m central_inventory.seed
"""
import logging
from typing import Dict, Optional
from sqlalchemy.orm import Session
from . import crud
from .config import get_settings
from .database import Database

logger = logging.getLogger(__name__)

DEFAULT_INVENTORY: Dict[str, int] = {
    "sku123": 100,
    "sku456": 200,
}


def seed_inventory(db: Session, items: Optional[Dict[str, int]] = None) -> int:
    """
    Insert inventory rows for SKUs that do not exist yet.

    Existing rows are left alone, so running the seed twice is harmless.

    Args:
        db: Database session
        items: Mapping of SKU to initial quantity (defaults to DEFAULT_INVENTORY)

    Returns:
        Number of rows created
    """
    items = DEFAULT_INVENTORY if items is None else items
    created_count = 0
    for sku, qty in items.items():
        if crud.get_inventory_item(db, sku) is None:
            crud.create_inventory_item(db, sku, qty)
            created_count += 1
    db.commit()
    logger.info(f"Seeded {created_count} inventory items")
    return created_count


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    database = Database(settings.database_url, settings.sqlite_busy_timeout, settings.db_pool_size)
    database.create_all()
    db = database.session()
    try:
        seed_inventory(db)
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    main()
