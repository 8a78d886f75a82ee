"""
Input validation for inventory and reservation requests.

These checks run before any database call.
"""
from typing import Any, Tuple

# Upper bound of the 32-bit qty columns
MAX_QTY = 2**31 - 1


def validate_sku(sku: Any) -> Tuple[bool, str]:
    """
    Validate a SKU identifier.

    Args:
        sku: Candidate SKU value

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(sku, str):
        return False, "SKU must be a string"
    if not sku.strip():
        return False, "SKU must not be empty"
    return True, ""


def _is_int(value: Any) -> bool:
    # bool is an int subclass; True must not pass as a quantity of 1
    return isinstance(value, int) and not isinstance(value, bool)


def validate_reservation_qty(qty: Any) -> Tuple[bool, str]:
    """
    Validate the quantity of a reservation request.

    Args:
        qty: Requested number of units

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not _is_int(qty):
        return False, "Quantity must be an integer"
    if qty < 1:
        return False, f"Quantity must be at least 1, got {qty}"
    if qty > MAX_QTY:
        return False, f"Quantity cannot exceed {MAX_QTY}, got {qty}"
    return True, ""


def validate_stock_qty(qty: Any) -> Tuple[bool, str]:
    """
    Validate an administrative stock level.

    Args:
        qty: New quantity on hand

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not _is_int(qty):
        return False, "Quantity must be an integer"
    if qty < 0:
        return False, f"Quantity cannot be negative, got {qty}"
    if qty > MAX_QTY:
        return False, f"Quantity cannot exceed {MAX_QTY}, got {qty}"
    return True, ""
