"""
Error types for the Central Inventory service.

Every business failure carries a machine-readable code and the HTTP status the
API answers with, so route handlers can simply let these propagate.
"""
from typing import Any, Dict, Optional


class InventoryServiceError(Exception):
    """Base class for all errors raised by the inventory core."""
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidArgument(InventoryServiceError):
    """Malformed caller input, detected before touching storage."""
    code = "INVALID_ARGUMENT"
    status_code = 400


class NotFound(InventoryServiceError):
    """A requested inventory item or reservation does not exist."""
    code = "NOT_FOUND"
    status_code = 404


class SkuNotFound(NotFound):
    """Raised by the store when a reserve targets an unknown SKU."""

    def __init__(self, sku: str):
        super().__init__(f"SKU '{sku}' not found", {"sku": sku})
        self.sku = sku


class InvalidSku(InventoryServiceError):
    """A reservation referenced a SKU that does not exist."""
    code = "INVALID_SKU"
    status_code = 404

    def __init__(self, sku: str):
        super().__init__(f"SKU '{sku}' does not exist", {"sku": sku})
        self.sku = sku


class InsufficientStock(InventoryServiceError):
    """The SKU exists but holds fewer units than requested."""
    code = "INSUFFICIENT_STOCK"
    status_code = 409

    def __init__(self, sku: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for SKU '{sku}'. Available: {available}, Requested: {requested}",
            {"sku": sku, "requested": requested, "available": available},
        )
        self.sku = sku
        self.requested = requested
        self.available = available


class SkuAlreadyExists(InventoryServiceError):
    code = "SKU_ALREADY_EXISTS"
    status_code = 409

    def __init__(self, sku: str):
        super().__init__(f"SKU '{sku}' already exists", {"sku": sku})
        self.sku = sku


class StorageFault(InventoryServiceError):
    """The database failed or rejected a statement unexpectedly."""
    code = "STORAGE_FAULT"
    status_code = 500
