"""
Prometheus metrics for the Central Inventory service.

Metrics are a read-only projection over the inventory and reservation tables,
collected fresh on every scrape.
"""
import logging
from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily
from . import crud
from .database import Database

logger = logging.getLogger(__name__)


class InventoryCollector:
    """Custom collector reading current counts through the Database handle."""

    def __init__(self, database: Database):
        self.database = database

    def collect(self):
        db = self.database.session()
        try:
            total = crud.count_reservations(db)
            items = crud.get_inventory_items(db)
            reserved = crud.reserved_units_by_sku(db)
        finally:
            db.close()

        created = CounterMetricFamily(
            "reservations_created",
            "Total number of reservations created",
        )
        created.add_metric([], total)
        yield created

        stock = GaugeMetricFamily(
            "inventory_stock",
            "Units currently available per SKU",
            labels=["sku"],
        )
        for item in items:
            stock.add_metric([item.sku], item.qty)
        yield stock

        reserved_units = CounterMetricFamily(
            "inventory_reserved_units",
            "Units held by reservations in the reserved state per SKU",
            labels=["sku"],
        )
        for sku, units in sorted(reserved.items()):
            reserved_units.add_metric([sku], units)
        yield reserved_units


def build_registry(database: Database) -> CollectorRegistry:
    """
    Create a registry holding only the inventory collector.

    A private registry per app keeps test apps from colliding on the
    process-wide default registry.
    """
    registry = CollectorRegistry(auto_describe=False)
    registry.register(InventoryCollector(database))
    return registry


def render_metrics(registry: CollectorRegistry) -> bytes:
    return generate_latest(registry)
