"""
SQLAlchemy ORM models for the Central Inventory service.

Defines the database schema for the inventory and reservation tables.
"""
import enum
from datetime import datetime
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from .database import Base


class ReservationStatus(str, enum.Enum):
    """Lifecycle states of a reservation. Only RESERVED is produced today."""
    RESERVED = "reserved"
    CANCELLED = "cancelled"
    FULFILLED = "fulfilled"


class InventoryItem(Base):
    """
    Inventory item model representing stock on hand for one SKU.

    Attributes:
        id (int): Primary key, auto-incremented inventory item ID
        sku (str): Stock Keeping Unit (unique identifier for the product)
        qty (int): Quantity available for reservation, never negative
        created_at (datetime): Timestamp when the item was created
        updated_at (datetime): Timestamp of the last quantity change
    """
    __tablename__ = "inventory"
    __table_args__ = (
        CheckConstraint("qty >= 0", name="ck_inventory_qty_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String, unique=True, index=True, nullable=False)
    qty = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class Reservation(Base):
    """
    Reservation model, one row per successful claim against a SKU's stock.

    Attributes:
        id (int): Primary key, monotonically assigned
        sku (str): SKU the units were reserved from
        qty (int): Number of units reserved, always positive
        status (str): One of the ReservationStatus values
        created_at (datetime): Timestamp when the reservation was made
    """
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("qty > 0", name="ck_reservations_qty_positive"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    sku = Column(String, ForeignKey("inventory.sku"), nullable=False, index=True)
    qty = Column(Integer, nullable=False)
    status = Column(String, nullable=False, default=ReservationStatus.RESERVED.value)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
