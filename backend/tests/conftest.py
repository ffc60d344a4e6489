"""
Pytest fixtures for retailpos backend tests.

Provides the application on an in-memory database, a test client, a
per-test clean database, and small factories for products, customers
and settings.
"""

import pytest

from retailpos import create_app
from retailpos.extensions import db
from retailpos.models import Product, Customer, Supplier
from retailpos.services.settings_service import load_settings


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def make_product(db_session):
    """Factory: make_product(name="Widget", price_cents=1000, quantity=5, barcode=None)."""
    def _make(name="Widget", price_cents=1000, quantity=5, barcode=None):
        product = Product(name=name, price_cents=price_cents, quantity=quantity, barcode=barcode)
        db_session.add(product)
        db_session.commit()
        return product
    return _make


@pytest.fixture(scope='function')
def make_customer(db_session):
    """Factory: make_customer(name="Alice", card_number=None)."""
    def _make(name="Alice", card_number=None, loyalty_points=0, total_spent_cents=0):
        customer = Customer(
            name=name,
            card_number=card_number,
            loyalty_points=loyalty_points,
            total_spent_cents=total_spent_cents,
        )
        db_session.add(customer)
        db_session.commit()
        return customer
    return _make


@pytest.fixture(scope='function')
def make_supplier(db_session):
    def _make(name="Acme Wholesale", email="orders@acme.test", **extra):
        supplier = Supplier(name=name, email=email, **extra)
        db_session.add(supplier)
        db_session.commit()
        return supplier
    return _make


@pytest.fixture(scope='function')
def loyalty_enabled(db_session):
    """Settings row with loyalty on at 1 point per dollar."""
    settings = load_settings()
    settings.loyalty_points_enabled = True
    settings.loyalty_points_per_dollar = 1.0
    db_session.commit()
    return settings
