import time
from decimal import Decimal

import pytest
from jose import jwt

import storage
from app import create_app
from config import TestConfig
from models import db


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def admin_client(app):
    """Test client with an admin session opened through the login route."""
    client = app.test_client()
    response = client.post("/api/auth/admin-login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 200
    return client


@pytest.fixture()
def make_product(app):
    def _make(**overrides):
        fields = {
            "name": "Fresh Duck Eggs (Dozen)",
            "description": "Free-range duck eggs.",
            "price": Decimal("6.99"),
            "category": "Eggs",
            "stock": 50,
        }
        fields.update(overrides)
        with app.app_context():
            return storage.create_product(fields).id

    return _make


@pytest.fixture()
def make_token():
    def _make(sub="user-123", email=None, expires_in=3600, **claims):
        payload = {
            "sub": sub,
            "email": email or f"{sub}@duckfan.com",
            "iss": TestConfig.TOKEN_ISSUER,
            "aud": TestConfig.TOKEN_AUDIENCE,
            "exp": int(time.time()) + expires_in,
        }
        payload.update(claims)
        # a None claim means "leave it out"
        payload = {k: v for k, v in payload.items() if v is not None}
        return jwt.encode(payload, TestConfig.TOKEN_SECRET, algorithm="HS256")

    return _make


def order_payload(items=None, total="13.98", **order_fields):
    """Body for POST /api/orders."""
    order = {
        "customerName": "Jane Mallard",
        "customerEmail": "jane@duckfan.com",
        "customerPhone": "555-0100",
        "customerAddress": "1 Pond Lane, Featherby",
        "totalAmount": total,
        "paymentMethod": "cash_on_delivery",
    }
    order.update(order_fields)
    if items is None:
        items = [{"productId": 1, "quantity": 2, "pricePerUnit": "6.99", "totalPrice": "13.98"}]
    return {"order": order, "items": items}
