"""
Pydantic schemas for request/response validation in the Central Inventory service.

These schemas define the structure of data for API requests and responses.
Range checks on quantities live in validators.py so that violations are
reported as INVALID_ARGUMENT by the service layer.
"""
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, StrictInt


class InventoryItem(BaseModel):
    """Public view of an inventory row."""
    sku: str
    qty: int

    class Config:
        from_attributes = True


class InventoryItemCreate(BaseModel):
    """Schema for creating a new inventory item."""
    sku: str
    qty: StrictInt


class InventoryItemUpdate(BaseModel):
    """Schema for overwriting the stock level of a SKU."""
    qty: StrictInt


class ReservationCreate(BaseModel):
    """Schema for a reservation request."""
    sku: str
    qty: StrictInt


class Reservation(BaseModel):
    """
    Schema for reservation responses.

    Attributes:
        id (int): Reservation identifier
        sku (str): Reserved SKU
        qty (int): Reserved units
        status (str): reserved, cancelled or fulfilled
        created_at (datetime): When the reservation was made
    """
    id: int
    sku: str
    qty: int
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class ReservationResult(BaseModel):
    """Response for a successful reservation."""
    reservation: Reservation
    remaining_stock: int


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    error: ErrorDetail
