"""
Product API tests: validation, uniqueness, stock levels, deletion rules.
"""

from retailpos.services.sales_service import settle_sale


class TestProductCreate:

    def test_create_product(self, client, db_session):
        resp = client.post("/api/products", json={
            "name": "Widget",
            "barcode": "0001",
            "price_cents": 1999,
            "quantity": 7,
        })

        assert resp.status_code == 201
        data = resp.get_json()
        assert data["name"] == "Widget"
        assert data["price_cents"] == 1999
        assert data["quantity"] == 7
        assert data["stock_level"] == "moderate"
        assert data["created_at"].endswith("Z")

    def test_quantity_defaults_to_zero(self, client, db_session):
        resp = client.post("/api/products", json={"name": "Gadget", "price_cents": 500})

        assert resp.status_code == 201
        assert resp.get_json()["quantity"] == 0
        assert resp.get_json()["stock_level"] == "out"

    def test_missing_required_fields(self, client, db_session):
        resp = client.post("/api/products", json={"name": "No price"})

        assert resp.status_code == 400
        assert "price_cents" in resp.get_json()["error"]

    def test_rejects_bad_numbers(self, client, db_session):
        for payload in (
            {"name": "A", "price_cents": "12.5"},
            {"name": "A", "price_cents": -1},
            {"name": "A", "price_cents": 100, "quantity": -3},
            {"name": "A", "price_cents": 1_000_000_000},
        ):
            resp = client.post("/api/products", json=payload)
            assert resp.status_code == 400, payload

    def test_rejects_unknown_fields(self, client, db_session):
        resp = client.post("/api/products", json={"name": "A", "price_cents": 1, "cost": 2})

        assert resp.status_code == 400
        assert "cost" in resp.get_json()["error"]

    def test_blank_name_rejected(self, client, db_session):
        resp = client.post("/api/products", json={"name": "   ", "price_cents": 1})
        assert resp.status_code == 400

    def test_duplicate_barcode_conflict(self, client, make_product):
        make_product(name="First", barcode="DUP")

        resp = client.post("/api/products", json={"name": "Second", "price_cents": 1, "barcode": "DUP"})

        assert resp.status_code == 409

    def test_blank_barcodes_do_not_collide(self, client, db_session):
        first = client.post("/api/products", json={"name": "A", "price_cents": 1, "barcode": ""})
        second = client.post("/api/products", json={"name": "B", "price_cents": 1, "barcode": "  "})

        assert first.status_code == 201
        assert second.status_code == 201
        assert first.get_json()["barcode"] is None


class TestProductRead:

    def test_list_sorted_by_name_with_search(self, client, make_product):
        make_product(name="Banana")
        make_product(name="Apple")
        make_product(name="Cherry", barcode="777")

        names = [p["name"] for p in client.get("/api/products").get_json()["items"]]
        assert names == ["Apple", "Banana", "Cherry"]

        resp = client.get("/api/products?search=AN")
        assert [p["name"] for p in resp.get_json()["items"]] == ["Banana"]

        resp = client.get("/api/products?search=777")
        assert [p["name"] for p in resp.get_json()["items"]] == ["Cherry"]

    def test_pagination(self, client, make_product):
        for i in range(5):
            make_product(name=f"Item {i}")

        data = client.get("/api/products?page=2&per_page=2").get_json()

        assert [p["name"] for p in data["items"]] == ["Item 2", "Item 3"]
        assert data["pagination"]["total"] == 5
        assert data["pagination"]["total_pages"] == 3
        assert data["pagination"]["has_next"] is True
        assert data["pagination"]["has_prev"] is True

    def test_get_by_id_and_barcode(self, client, make_product):
        product = make_product(name="Scanner", barcode="123456")

        assert client.get(f"/api/products/{product.id}").get_json()["name"] == "Scanner"
        assert client.get("/api/products/barcode/123456").get_json()["id"] == product.id
        assert client.get("/api/products/barcode/000").status_code == 404
        assert client.get("/api/products/9999").status_code == 404

    def test_stock_level_follows_settings(self, client, make_product):
        product = make_product(quantity=15)
        assert client.get(f"/api/products/{product.id}").get_json()["stock_level"] == "sufficient"

        client.put("/api/settings", json={"high_stock_threshold": 15})
        assert client.get(f"/api/products/{product.id}").get_json()["stock_level"] == "high"

    def test_notifications(self, client, make_product):
        make_product(name="Gone", quantity=0)
        make_product(name="Few", quantity=2)
        make_product(name="Many", quantity=50)

        data = client.get("/api/products/notifications").get_json()

        assert [p["name"] for p in data["out_of_stock"]] == ["Gone"]
        assert [p["name"] for p in data["low_stock"]] == ["Few"]
        assert data["out_of_stock"][0]["stock_level"] == "out"
        assert data["low_stock"][0]["stock_level"] == "low"
        assert data["count"] == 2


class TestProductUpdateDelete:

    def test_partial_update(self, client, make_product):
        product = make_product(name="Old", price_cents=100, quantity=3)

        resp = client.put(f"/api/products/{product.id}", json={"quantity": 12})

        assert resp.status_code == 200
        data = resp.get_json()
        assert data["quantity"] == 12
        assert data["name"] == "Old"
        assert data["price_cents"] == 100

    def test_update_missing_product(self, client, db_session):
        assert client.put("/api/products/9999", json={"name": "x"}).status_code == 404

    def test_update_to_taken_barcode_conflicts(self, client, make_product):
        make_product(name="A", barcode="AAA")
        other = make_product(name="B", barcode="BBB")

        resp = client.put(f"/api/products/{other.id}", json={"barcode": "AAA"})

        assert resp.status_code == 409

    def test_delete_product(self, client, make_product):
        product = make_product()

        assert client.delete(f"/api/products/{product.id}").status_code == 200
        assert client.get(f"/api/products/{product.id}").status_code == 404

    def test_delete_product_with_sales_conflicts(self, client, make_product):
        product = make_product(quantity=5)
        settle_sale(product_id=product.id, quantity=1)

        resp = client.delete(f"/api/products/{product.id}")

        assert resp.status_code == 409
        assert client.get(f"/api/products/{product.id}").status_code == 200
