"""Central Inventory service: per-SKU stock with oversell-safe reservations."""

__version__ = "1.0.0"
