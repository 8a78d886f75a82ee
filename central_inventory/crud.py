"""
Database operations for the inventory store and the reservation ledger.

None of these functions commit. They run inside the caller's transaction so a
stock decrement and its ledger row always land (or roll back) together; the
service layer owns commit and rollback.
"""
from typing import Dict, List, Optional
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session
from . import models
from .errors import InsufficientStock, SkuNotFound


# Inventory store

def get_inventory_item(db: Session, sku: str) -> Optional[models.InventoryItem]:
    """
    Retrieve an inventory item by SKU.

    Args:
        db: Database session
        sku: SKU to search for

    Returns:
        InventoryItem object or None if not found
    """
    return db.query(models.InventoryItem).filter(models.InventoryItem.sku == sku).first()


def get_inventory_items(db: Session) -> List[models.InventoryItem]:
    """
    Retrieve every inventory item ordered by SKU ascending.

    Args:
        db: Database session

    Returns:
        List of InventoryItem objects
    """
    return db.query(models.InventoryItem).order_by(models.InventoryItem.sku.asc()).all()


def create_inventory_item(db: Session, sku: str, qty: int) -> models.InventoryItem:
    """
    Insert a new inventory row.

    Args:
        db: Database session
        sku: SKU of the new item
        qty: Initial quantity on hand

    Returns:
        Created InventoryItem object (flushed, not committed)
    """
    db_item = models.InventoryItem(sku=sku, qty=qty)
    db.add(db_item)
    db.flush()
    return db_item


def set_quantity(db: Session, sku: str, qty: int) -> Optional[models.InventoryItem]:
    """
    Overwrite the quantity on hand for a SKU (administrative correction).

    Args:
        db: Database session
        sku: SKU to update
        qty: New quantity, already validated as non-negative

    Returns:
        Updated InventoryItem object or None if not found
    """
    # Write first so the row lock is taken before anything is read
    stmt = (
        update(models.InventoryItem)
        .where(models.InventoryItem.sku == sku)
        .values(qty=qty)
        .returning(models.InventoryItem.id)
        .execution_options(synchronize_session=False)
    )
    if db.execute(stmt).scalar_one_or_none() is None:
        return None

    return (
        db.query(models.InventoryItem)
        .populate_existing()
        .filter(models.InventoryItem.sku == sku)
        .one()
    )


def reserve_atomic(db: Session, sku: str, qty: int) -> int:
    """
    Decrement a SKU's quantity by qty if and only if enough stock is on hand.

    The check and the write are one conditional UPDATE, so concurrent callers
    on the same row are serialized by the database and only one of them can
    observe any given pre-decrement quantity. Rows for other SKUs are untouched.

    Args:
        db: Database session (transaction owned by the caller)
        sku: SKU to reserve from
        qty: Positive number of units

    Returns:
        Quantity remaining after the decrement

    Raises:
        SkuNotFound: No inventory row exists for sku
        InsufficientStock: Fewer than qty units are available; nothing changed
    """
    stmt = (
        update(models.InventoryItem)
        .where(models.InventoryItem.sku == sku, models.InventoryItem.qty >= qty)
        .values(qty=models.InventoryItem.qty - qty)
        .returning(models.InventoryItem.qty)
        .execution_options(synchronize_session=False)
    )
    remaining = db.execute(stmt).scalar_one_or_none()
    if remaining is not None:
        return remaining

    current = db.execute(
        select(models.InventoryItem.qty).where(models.InventoryItem.sku == sku)
    ).scalar_one_or_none()
    if current is None:
        raise SkuNotFound(sku)
    raise InsufficientStock(sku, requested=qty, available=current)


# Reservation ledger

def append_reservation(
    db: Session,
    sku: str,
    qty: int,
    status: models.ReservationStatus = models.ReservationStatus.RESERVED,
) -> models.Reservation:
    """
    Append a reservation record to the ledger.

    Args:
        db: Database session (transaction owned by the caller)
        sku: Reserved SKU
        qty: Reserved units
        status: Initial status

    Returns:
        Created Reservation object with its id assigned (flushed, not committed)
    """
    db_reservation = models.Reservation(sku=sku, qty=qty, status=status.value)
    db.add(db_reservation)
    db.flush()
    return db_reservation


def get_reservation(db: Session, reservation_id: int) -> Optional[models.Reservation]:
    return db.query(models.Reservation).filter(models.Reservation.id == reservation_id).first()


def get_reservations(
    db: Session,
    sku: Optional[str] = None,
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[models.Reservation]:
    """
    List reservations, newest first.

    Args:
        db: Database session
        sku: Only return reservations for this SKU when given
        skip: Number of records to skip (offset)
        limit: Maximum number of records to return, None for all

    Returns:
        List of Reservation objects ordered by created_at descending
    """
    query = db.query(models.Reservation)
    if sku is not None:
        query = query.filter(models.Reservation.sku == sku)
    query = query.order_by(models.Reservation.created_at.desc(), models.Reservation.id.desc())
    if skip:
        query = query.offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def count_reservations(db: Session) -> int:
    return db.query(func.count(models.Reservation.id)).scalar() or 0


def reserved_units_by_sku(db: Session) -> Dict[str, int]:
    """
    Sum the units held by reservations in the reserved state, per SKU.

    Args:
        db: Database session

    Returns:
        Mapping of SKU to total reserved units
    """
    rows = (
        db.query(models.Reservation.sku, func.sum(models.Reservation.qty))
        .filter(models.Reservation.status == models.ReservationStatus.RESERVED.value)
        .group_by(models.Reservation.sku)
        .all()
    )
    return {sku: int(total or 0) for sku, total in rows}
