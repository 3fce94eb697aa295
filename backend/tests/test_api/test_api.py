"""
HTTP API tests via TestClient

The application's session factories are overridden with the per-test
database; the startup schema bootstrap is not run.
"""
import pytest
from fastapi.testclient import TestClient

from garment_exchange import main
from garment_exchange.core.database import get_read_session_factory, get_session_factory
from garment_exchange.main import app


@pytest.fixture
def client(session_factory, read_session_factory):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_read_session_factory] = lambda: read_session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestOrdersAPI:

    def test_place_order(self, client, catalog):
        response = client.post("/api/v1/orders", json={
            "retailer_name": "RetailerX",
            "items": [{"item_id": catalog["A"], "qty": 3}],
        })

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        order_id = body["order_id"]

        order = client.get(f"/api/v1/orders/{order_id}").json()["data"]
        assert order["retailer_name"] == "RetailerX"
        assert order["items"][0]["qty"] == 3
        assert order["items"][0]["price_at_purchase"] == 10.0
        assert order["total"] == 30.0

        item = client.get(f"/api/v1/items/{catalog['A']}").json()["data"]
        assert item["quantity"] == 2

    def test_insufficient_stock_is_409_with_offending_item(self, client, catalog):
        response = client.post("/api/v1/orders", json={
            "retailer_name": "RetailerY",
            "items": [{"item_id": catalog["A"], "qty": 6}],
        })

        assert response.status_code == 409
        body = response.json()
        assert body["kind"] == "insufficient_stock"
        assert body["item_id"] == catalog["A"]
        assert body["available"] == 5
        assert client.get("/api/v1/orders").json()["total"] == 0

    def test_missing_item_is_404(self, client, catalog):
        response = client.post("/api/v1/orders", json={
            "retailer_name": "RetailerZ",
            "items": [{"item_id": catalog["A"], "qty": 1}, {"item_id": 9999, "qty": 1}],
        })

        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"
        assert response.json()["item_id"] == 9999
        assert client.get(f"/api/v1/items/{catalog['A']}").json()["data"]["quantity"] == 5

    @pytest.mark.parametrize("payload", [
        {"items": [{"item_id": 1, "qty": 1}]},
        {"retailer_name": "", "items": [{"item_id": 1, "qty": 1}]},
        {"retailer_name": "RetailerX", "items": []},
        {"retailer_name": "RetailerX"},
        {"retailer_name": "RetailerX", "items": [{"item_id": 1, "qty": 0}]},
    ])
    def test_invalid_request_is_400(self, client, catalog, payload):
        response = client.post("/api/v1/orders", json=payload)

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_request"

    def test_malformed_line_is_422(self, client, catalog):
        response = client.post("/api/v1/orders", json={
            "retailer_name": "RetailerX",
            "items": [{"item_id": "abc", "qty": 1}],
        })

        assert response.status_code == 422

    def test_order_history(self, client, catalog):
        client.post("/api/v1/orders", json={"retailer_name": "RetailerX", "items": [{"item_id": catalog["A"], "qty": 1}]})
        client.post("/api/v1/orders", json={"retailer_name": "RetailerY", "items": [{"item_id": catalog["B"], "qty": 2}]})

        body = client.get("/api/v1/orders").json()
        assert body["total"] == 2
        assert [o["retailer_name"] for o in body["data"]] == ["RetailerY", "RetailerX"]

        filtered = client.get("/api/v1/orders", params={"retailer": "RetailerX"}).json()
        assert filtered["count"] == 1

    def test_unknown_order_is_404(self, client):
        assert client.get("/api/v1/orders/12345").status_code == 404


class TestCatalogAPI:

    def test_vendor_summaries(self, client, catalog):
        body = client.get("/api/v1/vendors").json()

        assert body["count"] == 2
        sunrise = next(v for v in body["data"] if v["name"] == "Sunrise Textiles")
        assert sunrise["ready_item_count"] == 2
        assert sunrise["total_quantity"] == 25

    def test_register_vendor_and_add_item(self, client):
        vendor = client.post("/api/v1/vendors", json={"name": "Nordic Knits", "contact": "nk@example.com"}).json()["data"]

        response = client.post(f"/api/v1/vendors/{vendor['id']}/items", json={
            "name": "Wool Sweater", "size": "L", "color": "Grey", "price": 59.9, "quantity": 4,
        })
        assert response.status_code == 200
        item = response.json()["data"]
        assert item["vendor_id"] == vendor["id"]
        assert item["is_sellable"] is True

        items = client.get(f"/api/v1/vendors/{vendor['id']}/items").json()
        assert [i["name"] for i in items["data"]] == ["Wool Sweater"]

    def test_get_vendor(self, client, catalog):
        response = client.get(f"/api/v1/vendors/{catalog['metro']}")

        assert response.status_code == 200
        vendor = response.json()["data"]
        assert vendor["name"] == "Metro Garments"
        assert vendor["contact"] == "metro@example.com"

    def test_unknown_vendor_is_404(self, client):
        assert client.get("/api/v1/vendors/404").status_code == 404

    def test_register_vendor_requires_name(self, client):
        assert client.post("/api/v1/vendors", json={"contact": "x"}).status_code == 422
        assert client.post("/api/v1/vendors", json={"name": "  "}).status_code == 422

    def test_add_item_requires_name_and_price(self, client, catalog):
        response = client.post(f"/api/v1/vendors/{catalog['sunrise']}/items", json={"name": "No Price"})
        assert response.status_code == 422

    def test_add_item_to_unknown_vendor_is_404(self, client):
        response = client.post("/api/v1/vendors/404/items", json={"name": "Ghost", "price": 1})
        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"

    def test_vendor_items_all_flag(self, client, catalog):
        sellable = client.get(f"/api/v1/vendors/{catalog['sunrise']}/items").json()
        everything = client.get(f"/api/v1/vendors/{catalog['sunrise']}/items", params={"all": 1}).json()

        assert sellable["count"] == 2
        assert everything["count"] == 3

    def test_sellable_items_across_vendors(self, client, catalog):
        body = client.get("/api/v1/items").json()
        assert [i["vendor_name"] for i in body["data"]] == ["Metro Garments", "Sunrise Textiles", "Sunrise Textiles"]

        metro = client.get("/api/v1/items", params={"vendor": catalog["metro"]}).json()
        assert [i["id"] for i in metro["data"]] == [catalog["D"]]

    def test_update_item_partially(self, client, catalog):
        response = client.put(f"/api/v1/items/{catalog['C']}", json={"available": True, "price": 40})

        assert response.status_code == 200
        item = response.json()["data"]
        assert item["available"] is True
        assert item["price"] == 40.0
        assert item["quantity"] == 8
        assert item["name"] == "Linen Scarf"

    def test_update_item_rejects_negative_quantity(self, client, catalog):
        assert client.put(f"/api/v1/items/{catalog['A']}", json={"quantity": -1}).status_code == 422

    def test_update_unknown_item_is_404(self, client):
        assert client.put("/api/v1/items/9999", json={"quantity": 1}).status_code == 404

    def test_unknown_item_is_404(self, client):
        assert client.get("/api/v1/items/9999").status_code == 404


class TestServiceEndpoints:

    def test_root(self, client):
        assert client.get("/").json()["status"] == "online"

    def test_health_reports_database(self, client, monkeypatch):
        monkeypatch.setattr(main, "check_database", lambda **kwargs: 1.5)

        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["database"]["latency_ms"] == 1.5
