"""
Sale and settings endpoint tests: status codes and error bodies.
"""

from retailpos.extensions import db
from retailpos.models import Product


class TestSalesEndpoint:

    def test_settle_sale(self, client, make_product):
        product = make_product(price_cents=1000, quantity=5)

        resp = client.post("/api/sales", json={"product_id": product.id, "quantity": 3})

        assert resp.status_code == 201
        data = resp.get_json()
        assert data["total_cents"] == 3000
        assert data["quantity"] == 3
        assert db.session.get(Product, product.id).quantity == 2

    def test_insufficient_stock_returns_details(self, client, make_product):
        product = make_product(quantity=2)

        resp = client.post("/api/sales", json={"product_id": product.id, "quantity": 3})

        assert resp.status_code == 400
        body = resp.get_json()
        assert body["error"] == "Insufficient stock"
        assert body["details"]["on_hand"] == 2
        assert body["details"]["requested_quantity"] == 3

    def test_invalid_body(self, client, db_session):
        resp = client.post("/api/sales", data="not json", content_type="application/json")
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid sale data"

        resp = client.post("/api/sales", json=[1, 2])
        assert resp.status_code == 400

    def test_bad_quantity(self, client, make_product):
        product = make_product()
        resp = client.post("/api/sales", json={"product_id": product.id, "quantity": 0})
        assert resp.status_code == 400

    def test_unknown_product(self, client, db_session):
        resp = client.post("/api/sales", json={"product_id": 4040, "quantity": 1})
        assert resp.status_code == 404

    def test_loyalty_through_api(self, client, make_product, loyalty_enabled):
        product = make_product(price_cents=2500, quantity=5)

        resp = client.post("/api/sales", json={
            "product_id": product.id,
            "quantity": 2,
            "customer_name": "Alice",
        })

        assert resp.status_code == 201
        lookup = client.get("/api/customers?search=alice").get_json()
        assert lookup["count"] == 1
        assert lookup["items"][0]["loyalty_points"] == 50.0
        assert lookup["items"][0]["total_spent_cents"] == 5000

    def test_list_and_get_sales(self, client, make_product):
        product = make_product(quantity=5)
        created = client.post("/api/sales", json={"product_id": product.id, "quantity": 1}).get_json()

        listing = client.get("/api/sales?period=month").get_json()
        assert listing["period"] == "month"
        assert [s["id"] for s in listing["items"]] == [created["id"]]

        assert client.get(f"/api/sales/{created['id']}").get_json()["product_id"] == product.id
        assert client.get("/api/sales/9999").status_code == 404


class TestSettingsEndpoint:

    def test_get_creates_defaults(self, client, db_session):
        data = client.get("/api/settings").get_json()

        assert data["low_stock_threshold"] == 5
        assert data["moderate_stock_threshold"] == 10
        assert data["high_stock_threshold"] == 20
        assert data["loyalty_points_enabled"] is False

    def test_put_validates_ordering(self, client, db_session):
        resp = client.put("/api/settings", json={"low_stock_threshold": 10, "moderate_stock_threshold": 5})

        assert resp.status_code == 400
        assert client.get("/api/settings").get_json()["low_stock_threshold"] == 5

    def test_put_updates(self, client, db_session):
        resp = client.put("/api/settings", json={"loyalty_points_enabled": True, "loyalty_points_per_dollar": 1.5})

        assert resp.status_code == 200
        assert resp.get_json()["loyalty_points_enabled"] is True
        assert resp.get_json()["loyalty_points_per_dollar"] == 1.5


def test_unknown_route_is_json_404(client, db_session):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Not found"}


def test_overlong_customer_name_is_bad_request(client, make_product, loyalty_enabled):
    product = make_product(quantity=5)

    resp = client.post("/api/sales", json={
        "product_id": product.id,
        "quantity": 1,
        "customer_name": "x" * 256,
    })

    assert resp.status_code == 400
    assert "customer_name" in resp.get_json()["error"]
    assert db.session.get(Product, product.id).quantity == 5
