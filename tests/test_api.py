"""HTTP tests for the Central Inventory API."""
import pytest

from central_inventory import main


def test_importing_main_builds_no_app():
    # uvicorn builds the app through the create_app factory
    assert not hasattr(main, "app")


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "central-inventory"}


def test_health_reports_database_down(client, monkeypatch):
    monkeypatch.setattr(client.app.state.database, "ping", lambda: False)
    response = client.get("/health")
    assert response.status_code == 503
    assert response.json()["status"] == "error"


# ====================
# Inventory
# ====================


def test_list_inventory(seeded_client):
    response = seeded_client.get("/inventory")
    assert response.status_code == 200
    assert response.json() == [{"sku": "sku123", "qty": 100}, {"sku": "sku456", "qty": 5}]


def test_list_inventory_empty(client):
    response = client.get("/inventory")
    assert response.status_code == 200
    assert response.json() == []


def test_get_inventory_item(seeded_client):
    response = seeded_client.get("/inventory/sku123")
    assert response.status_code == 200
    assert response.json() == {"sku": "sku123", "qty": 100}


def test_get_inventory_item_not_found(seeded_client):
    response = seeded_client.get("/inventory/ghost")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_create_inventory_item(client):
    response = client.post("/inventory", json={"sku": "fresh", "qty": 3})
    assert response.status_code == 201
    assert response.json() == {"sku": "fresh", "qty": 3}

    duplicate = client.post("/inventory", json={"sku": "fresh", "qty": 9})
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "SKU_ALREADY_EXISTS"


def test_put_inventory_quantity(seeded_client):
    response = seeded_client.put("/inventory/sku456", json={"qty": 20})
    assert response.status_code == 200
    assert response.json() == {"sku": "sku456", "qty": 20}
    assert seeded_client.get("/inventory/sku456").json()["qty"] == 20


def test_put_negative_quantity(seeded_client):
    response = seeded_client.put("/inventory/sku456", json={"qty": -1})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_ARGUMENT"


@pytest.mark.parametrize("qty", [2**31, 2**63])
def test_put_quantity_beyond_column_range(seeded_client, qty):
    response = seeded_client.put("/inventory/sku123", json={"qty": qty})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_ARGUMENT"
    assert seeded_client.get("/inventory/sku123").json()["qty"] == 100


def test_put_unknown_sku(seeded_client):
    response = seeded_client.put("/inventory/ghost", json={"qty": 1})
    assert response.status_code == 404


# ====================
# Reservations
# ====================


def test_create_reservation(seeded_client):
    response = seeded_client.post("/reservations", json={"sku": "sku123", "qty": 10})
    assert response.status_code == 201

    body = response.json()
    assert body["remaining_stock"] == 90
    assert body["reservation"]["sku"] == "sku123"
    assert body["reservation"]["qty"] == 10
    assert body["reservation"]["status"] == "reserved"
    assert "id" in body["reservation"]
    assert "created_at" in body["reservation"]


def test_reservation_scenario_over_http(seeded_client):
    assert seeded_client.post("/reservations", json={"sku": "sku123", "qty": 10}).status_code == 201

    short = seeded_client.post("/reservations", json={"sku": "sku123", "qty": 95})
    assert short.status_code == 409
    error = short.json()["error"]
    assert error["code"] == "INSUFFICIENT_STOCK"
    assert error["details"]["available"] == 90

    last = seeded_client.post("/reservations", json={"sku": "sku123", "qty": 90})
    assert last.json()["remaining_stock"] == 0

    listed = seeded_client.get("/reservations", params={"sku": "sku123"}).json()
    assert len(listed) == 2
    assert sum(r["qty"] for r in listed) == 100
    assert listed[0]["id"] > listed[1]["id"]


def test_reservation_zero_qty(seeded_client):
    response = seeded_client.post("/reservations", json={"sku": "sku123", "qty": 0})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_ARGUMENT"


def test_reservation_malformed_body(seeded_client):
    response = seeded_client.post("/reservations", json={"sku": "sku123", "qty": "lots"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_ARGUMENT"

    missing = seeded_client.post("/reservations", json={"qty": 1})
    assert missing.status_code == 400


@pytest.mark.parametrize("qty", [2**31, 2**63])
def test_reservation_qty_beyond_column_range(seeded_client, qty):
    response = seeded_client.post("/reservations", json={"sku": "sku123", "qty": qty})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_ARGUMENT"
    assert seeded_client.get("/reservations").json() == []


def test_reservation_unknown_sku(seeded_client):
    response = seeded_client.post("/reservations", json={"sku": "ghost", "qty": 1})
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "INVALID_SKU"


def test_get_reservation(seeded_client):
    created = seeded_client.post("/reservations", json={"sku": "sku456", "qty": 2}).json()
    reservation_id = created["reservation"]["id"]

    response = seeded_client.get(f"/reservations/{reservation_id}")
    assert response.status_code == 200
    assert response.json()["qty"] == 2

    assert seeded_client.get("/reservations/9999").status_code == 404


@pytest.mark.parametrize("params", [{"limit": -1}, {"skip": -3}, {"limit": 0}, {"limit": -1, "skip": -3}])
def test_list_reservations_rejects_bad_paging(seeded_client, params):
    response = seeded_client.get("/reservations", params=params)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_ARGUMENT"


def test_list_reservations_unfiltered(seeded_client):
    seeded_client.post("/reservations", json={"sku": "sku123", "qty": 1})
    seeded_client.post("/reservations", json={"sku": "sku456", "qty": 1})

    listed = seeded_client.get("/reservations").json()
    assert [r["sku"] for r in listed] == ["sku456", "sku123"]


def test_storage_error_is_generic_500(seeded_client, monkeypatch):
    from sqlalchemy.exc import OperationalError
    from central_inventory import crud

    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    monkeypatch.setattr(crud, "get_inventory_items", broken)
    response = seeded_client.get("/inventory")
    assert response.status_code == 500
    assert response.json()["error"]["code"] == "STORAGE_FAULT"
    assert "connection refused" not in response.text
