from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from catalog.core.errors import StoreUnavailable
from catalog.main import app, get_catalog_service
from catalog.services.catalog_service import CatalogService
from catalog.services.catalog_store import InMemoryCatalogStore

WIDGET = {
    "name": "Widget",
    "sku": "W-1",
    "description": "A small blue widget",
    "price": "9.99",
    "stock": 10,
    "category_id": 1,
}


@pytest.fixture
def api_service(memory_store, memory_categories):
    return CatalogService(memory_store, memory_categories)


@pytest.fixture
def client(api_service):
    app.dependency_overrides[get_catalog_service] = lambda: api_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/").json() == {"status": "ok"}


def test_create_then_get(client):
    resp = client.post("/products", json=WIDGET)
    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "Widget"
    assert body["stock"] == 10

    fetched = client.get(f"/products/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["sku"] == "W-1"


def test_list_products(client):
    client.post("/products", json=WIDGET)
    assert [p["name"] for p in client.get("/products").json()] == ["Widget"]


def test_missing_product_is_404(client):
    assert client.get("/products/77").status_code == 404


@pytest.mark.parametrize(
    "payload, error",
    [
        ({**WIDGET, "sku": "W-2"}, "duplicate_name"),
        ({**WIDGET, "name": "Other", "sku": "W-2", "category_id": 999}, "unknown_category"),
        ({**WIDGET, "name": "Other"}, "duplicate_sku"),
        ({**WIDGET, "name": " ", "sku": "W-3"}, "invalid_field"),
    ],
)
def test_rejected_creates_are_400(client, payload, error):
    client.post("/products", json=WIDGET)

    resp = client.post("/products", json=payload)

    assert resp.status_code == 400
    assert resp.json()["error"] == error


def test_race_lost_insert_is_400(client, api_service, monkeypatch):
    # Validation passes but the store already holds the name
    monkeypatch.setattr(api_service.store, "get_by_name", lambda name: None)
    client.post("/products", json=WIDGET)

    resp = client.post("/products", json={**WIDGET, "sku": "W-2"})

    assert resp.status_code == 400
    assert resp.json()["error"] == "conflict"


def test_search(client):
    client.post("/products", json=WIDGET)

    assert client.get("/products/search/BLUE").json()[0]["name"] == "Widget"
    assert client.get("/products/search/nothing").status_code == 404


def test_search_by_category(client):
    client.post("/products", json=WIDGET)

    assert len(client.get("/products/category/1").json()) == 1
    assert client.get("/products/category/2").status_code == 404


def test_buy(client):
    client.post("/products", json=WIDGET)

    resp = client.patch("/products/buy/Widget/6")
    assert resp.status_code == 200
    assert resp.json() == {"remaining_stock": 4, "message": "Purchased 6 units of 'Widget'"}

    one = client.patch("/products/buy/Widget/1")
    assert one.json()["message"] == "Purchased 1 unit of 'Widget'"


@pytest.mark.parametrize(
    "path, status, error",
    [
        ("/products/buy/Widget/6", 400, "insufficient_stock"),
        ("/products/buy/Widget/0", 400, "invalid_request"),
        ("/products/buy/Widget/-1", 400, "invalid_request"),
        ("/products/buy/Ghost/1", 404, "product_not_found"),
    ],
)
def test_buy_failures(client, path, status, error):
    client.post("/products", json={**WIDGET, "stock": 5})

    resp = client.patch(path)

    assert resp.status_code == status
    assert resp.json()["error"] == error


def test_store_outage_is_503(client, api_service, monkeypatch):
    def boom():
        raise StoreUnavailable("down")

    monkeypatch.setattr(api_service.store, "list_all", boom)

    resp = client.get("/products")

    assert resp.status_code == 503
    assert resp.json()["error"] == "store_unavailable"


def test_oversized_path_integers(client):
    client.post("/products", json=WIDGET)

    assert client.get(f"/products/{2**64}").status_code == 404
    resp = client.patch(f"/products/buy/Widget/{2**64}")
    assert resp.status_code == 400
    assert resp.json()["error"] == "insufficient_stock"


def test_sub_cent_price_is_400(client):
    resp = client.post("/products", json={**WIDGET, "price": "1.005"})

    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_field"
