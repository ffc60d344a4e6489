"""
Supplier and supplier price API tests.
"""


def _create_supplier(client, **overrides):
    payload = {"name": "Acme Wholesale", "email": "orders@acme.test"}
    payload.update(overrides)
    return client.post("/api/suppliers", json=payload)


def test_supplier_crud(client, db_session):
    resp = _create_supplier(client, phone="555-0100", contact_name="Wile")
    assert resp.status_code == 201
    supplier_id = resp.get_json()["id"]

    resp = client.put(f"/api/suppliers/{supplier_id}", json={"address": "1 Desert Rd"})
    assert resp.status_code == 200
    assert resp.get_json()["address"] == "1 Desert Rd"
    assert resp.get_json()["phone"] == "555-0100"

    listing = client.get("/api/suppliers").get_json()
    assert listing["count"] == 1

    assert client.delete(f"/api/suppliers/{supplier_id}").status_code == 200
    assert client.get(f"/api/suppliers/{supplier_id}").status_code == 404


def test_supplier_requires_name_and_email(client, db_session):
    assert client.post("/api/suppliers", json={"name": "No Email"}).status_code == 400
    assert client.post("/api/suppliers", json={"email": "x@y.z"}).status_code == 400


def test_supplier_with_orders_cannot_be_deleted(client, make_supplier):
    supplier = make_supplier()
    client.post("/api/purchase-orders", json={
        "supplier_id": supplier.id,
        "items": [{"product_name": "Bolts", "quantity": 1, "unit_price_cents": 10}],
    })

    assert client.delete(f"/api/suppliers/{supplier.id}").status_code == 409


def test_supplier_price_upsert(client, make_supplier, make_product):
    supplier = make_supplier()
    product = make_product()

    first = client.post("/api/supplier-products", json={
        "supplier_id": supplier.id, "product_id": product.id, "price_cents": 450,
    })
    second = client.post("/api/supplier-products", json={
        "supplier_id": supplier.id, "product_id": product.id, "price_cents": 425,
    })

    assert first.status_code == 201
    assert second.status_code == 201
    assert first.get_json()["id"] == second.get_json()["id"]

    listing = client.get(f"/api/supplier-products?supplier_id={supplier.id}").get_json()
    assert listing["count"] == 1
    assert listing["items"][0]["price_cents"] == 425
    assert listing["items"][0]["product"]["id"] == product.id


def test_supplier_price_validation(client, make_supplier, make_product):
    supplier = make_supplier()
    product = make_product()

    resp = client.post("/api/supplier-products", json={
        "supplier_id": supplier.id, "product_id": product.id, "price_cents": 0,
    })
    assert resp.status_code == 400

    resp = client.post("/api/supplier-products", json={
        "supplier_id": supplier.id, "product_id": 9999, "price_cents": 10,
    })
    assert resp.status_code == 404

    assert client.get("/api/supplier-products").status_code == 400


def test_supplier_price_delete(client, make_supplier, make_product):
    supplier = make_supplier()
    product = make_product()
    client.post("/api/supplier-products", json={
        "supplier_id": supplier.id, "product_id": product.id, "price_cents": 450,
    })

    url = f"/api/supplier-products?supplier_id={supplier.id}&product_id={product.id}"
    assert client.delete(url).status_code == 200
    assert client.delete(url).status_code == 404


def test_deleting_supplier_removes_its_prices(client, make_supplier, make_product):
    supplier = make_supplier()
    product = make_product()
    client.post("/api/supplier-products", json={
        "supplier_id": supplier.id, "product_id": product.id, "price_cents": 450,
    })

    assert client.delete(f"/api/suppliers/{supplier.id}").status_code == 200
    listing = client.get(f"/api/supplier-products?supplier_id={supplier.id}").get_json()
    assert listing["count"] == 0
