"""Pytest fixtures for the POS API tests."""

import pytest
from fastapi.testclient import TestClient

from config import Settings
from demo_data import DEMO_MEMBERS, DEMO_PRODUCTS
from models.product import Product
from store import AppStore


@pytest.fixture
def settings():
    """Settings isolated from any local .env, with simulated providers and no delays."""
    return Settings(
        _env_file=None,
        INVOICE_API_URL=None,
        INVOICE_API_KEY="",
        INVOICE_SIMULATED_LATENCY_SECONDS=0,
        MARKETPLACE_API_URL=None,
        SHOPEE_API_KEY="",
        MARKETPLACE_SIMULATED_LATENCY_SECONDS=0,
        GEMINI_API_KEY="",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def store(settings):
    return AppStore(settings, products=DEMO_PRODUCTS, members=DEMO_MEMBERS)


@pytest.fixture
def client(settings, store):
    from main import create_app

    return TestClient(create_app(settings, store))


def _login(client, username, password):
    response = client.post("/login", json={"username": username, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def cashier_headers(client):
    return _login(client, "cashier", "1234")


@pytest.fixture
def admin_headers(client):
    return _login(client, "admin", "admin")


@pytest.fixture
def coffee():
    """Discounted product: list 200, sells for 180."""
    return Product(id="1", name="Roost Coffee", price=200, discount_price=180, stock=50, category="Drinks")


@pytest.fixture
def apple():
    """Full-price product."""
    return Product(id="2", name="Special Apple", price=500, stock=20, category="Fruit")
