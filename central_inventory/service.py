"""
Reservation orchestration and administrative inventory operations.

Each public function validates its input, runs its store and ledger calls in a
single transaction on the given session, and commits once. Any failure rolls
the whole transaction back.
"""
import logging
from typing import Tuple
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from . import crud, models
from .errors import (
    InsufficientStock,
    InvalidArgument,
    InvalidSku,
    NotFound,
    SkuAlreadyExists,
    SkuNotFound,
    StorageFault,
)
from .validators import validate_reservation_qty, validate_sku, validate_stock_qty

logger = logging.getLogger(__name__)


def _require(result: Tuple[bool, str]) -> None:
    is_valid, error_message = result
    if not is_valid:
        raise InvalidArgument(error_message)


def create_reservation(db: Session, sku: str, qty: int) -> Tuple[models.Reservation, int]:
    """
    Reserve qty units of sku and record the reservation in the ledger.

    The conditional decrement and the ledger insert commit together; a
    decremented quantity never exists without its reservation row, and the
    reverse.

    Args:
        db: Database session, with no transaction work pending
        sku: SKU to reserve from
        qty: Number of units, at least 1

    Returns:
        Tuple of (reservation, remaining_stock)

    Raises:
        InvalidArgument: sku or qty is malformed; storage is not touched
        InvalidSku: sku does not exist
        InsufficientStock: fewer than qty units are available
        StorageFault: the database failed; nothing was changed
    """
    _require(validate_sku(sku))
    _require(validate_reservation_qty(qty))

    try:
        remaining = crud.reserve_atomic(db, sku, qty)
        reservation = crud.append_reservation(db, sku, qty)
        db.commit()
    except SkuNotFound:
        db.rollback()
        logger.warning(f"Reservation rejected, unknown SKU '{sku}'")
        raise InvalidSku(sku)
    except InsufficientStock as e:
        db.rollback()
        logger.warning(f"Out of stock for '{sku}'. Requested: {qty}, available: {e.available}")
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Storage failure while reserving {qty} of '{sku}'")
        raise StorageFault("Failed to create reservation") from e

    db.refresh(reservation)
    logger.info(f"Reserved {qty} of '{sku}' as reservation {reservation.id}. Remaining: {remaining}")
    return reservation, remaining


def set_inventory_quantity(db: Session, sku: str, qty: int) -> models.InventoryItem:
    """
    Overwrite the stock level of an existing SKU.

    Args:
        db: Database session
        sku: SKU to update
        qty: New quantity, must not be negative

    Returns:
        Updated InventoryItem

    Raises:
        InvalidArgument: qty is negative or not an integer
        NotFound: sku does not exist
        StorageFault: the database failed
    """
    _require(validate_sku(sku))
    _require(validate_stock_qty(qty))

    try:
        db_item = crud.set_quantity(db, sku, qty)
        if db_item is None:
            db.rollback()
            raise NotFound(f"Inventory item '{sku}' not found", {"sku": sku})
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Storage failure while setting quantity of '{sku}'")
        raise StorageFault("Failed to update inventory item") from e

    db.refresh(db_item)
    logger.info(f"Set quantity of '{sku}' to {qty}")
    return db_item


def create_inventory_item(db: Session, sku: str, qty: int) -> models.InventoryItem:
    """
    Create a new SKU with an initial stock level.

    Raises:
        InvalidArgument: sku empty or qty negative
        SkuAlreadyExists: an item with this SKU is already stored
        StorageFault: the database failed
    """
    _require(validate_sku(sku))
    _require(validate_stock_qty(qty))

    try:
        if crud.get_inventory_item(db, sku) is not None:
            db.rollback()
            raise SkuAlreadyExists(sku)
        db_item = crud.create_inventory_item(db, sku, qty)
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent create of the same SKU
        db.rollback()
        raise SkuAlreadyExists(sku)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Storage failure while creating '{sku}'")
        raise StorageFault("Failed to create inventory item") from e

    db.refresh(db_item)
    logger.info(f"Created inventory item '{sku}' with quantity {qty}")
    return db_item
