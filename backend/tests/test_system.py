"""
Health endpoint, app factory configuration, and CLI command tests.
"""

import pytest

from retailpos import create_app
from retailpos.extensions import db
from retailpos.models import Customer, StoreSettings


def test_health_degraded_until_settings_exist(client, db_session):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "degraded"

    client.get("/api/settings")

    resp = client.get("/api/health")
    body = resp.get_json()
    assert body["status"] == "healthy"
    assert body["checks"]["database"]["details"]["settings_initialized"] is True


def test_version(client, db_session):
    assert client.get("/api/version").get_json()["api_version"]


def test_invalid_missing_customer_policy_rejected():
    with pytest.raises(ValueError):
        create_app({
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "MISSING_CUSTOMER_POLICY": "shrug",
        })


def test_cors_header_for_allowed_origin(app, client, db_session):
    origin = app.config["CORS_ALLOWED_ORIGINS"][0]

    allowed = client.get("/api/version", headers={"Origin": origin})
    blocked = client.get("/api/version", headers={"Origin": "http://evil.test"})

    assert allowed.headers["Access-Control-Allow-Origin"] == origin
    assert "Access-Control-Allow-Origin" not in blocked.headers


class TestCommands:

    def test_system_init_creates_settings(self, app, db_session):
        result = app.test_cli_runner().invoke(args=["system", "init"])

        assert result.exit_code == 0
        assert "Initialized" in result.output
        assert db.session.get(StoreSettings, StoreSettings.SINGLETON_ID) is not None

    def test_low_stock_listing(self, app, make_product):
        make_product(name="Gone", quantity=0)
        make_product(name="Few", quantity=2)

        result = app.test_cli_runner().invoke(args=["products", "low-stock"])

        assert result.exit_code == 0
        assert "OUT" in result.output and "Gone" in result.output
        assert "LOW" in result.output and "Few" in result.output

    def test_low_stock_all_clear(self, app, make_product):
        make_product(name="Plenty", quantity=100)

        result = app.test_cli_runner().invoke(args=["products", "low-stock"])

        assert "No products below" in result.output

    def test_customers_list(self, app, make_customer):
        make_customer(name="Alice", card_number="C-1")

        result = app.test_cli_runner().invoke(args=["customers", "list", "--search", "ali"])

        assert result.exit_code == 0
        assert "Alice" in result.output
        assert "C-1" in result.output

    def test_reset_db_requires_confirmation(self, app, make_customer):
        make_customer(name="Keep")

        result = app.test_cli_runner().invoke(args=["system", "reset-db"], input="n\n")

        assert result.exit_code != 0
        assert db.session.query(Customer).count() == 1
