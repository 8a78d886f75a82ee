"""
Shared fixtures for the Central Inventory tests.

Every test gets its own SQLite file so threads in the concurrency tests use
real, separate connections.
"""
import pytest
from fastapi.testclient import TestClient

from central_inventory.config import Settings
from central_inventory.database import Database
from central_inventory.main import create_app
from central_inventory.seed import seed_inventory


@pytest.fixture
def database(tmp_path):
    """Provide a fresh Database handle with the schema created"""
    db_handle = Database(f"sqlite:///{tmp_path / 'inventory.db'}", busy_timeout=30.0)
    db_handle.create_all()
    yield db_handle
    db_handle.dispose()


@pytest.fixture
def db(database):
    """Provide a session on the test database"""
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def seeded_db(db):
    """Session on a database holding sku123=100, sku456=5 and sku789=1"""
    seed_inventory(db, {"sku123": 100, "sku456": 5, "sku789": 1})
    return db


@pytest.fixture
def settings(database):
    return Settings(database_url=database.url, log_level="WARNING")


@pytest.fixture
def client(database, settings):
    """Provide a TestClient with the app lifespan running"""
    app = create_app(database=database, settings=settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def seeded_client(client, database):
    session = database.session()
    try:
        seed_inventory(session, {"sku123": 100, "sku456": 5})
    finally:
        session.close()
    return client
