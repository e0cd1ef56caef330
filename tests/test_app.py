"""App wiring: CORS, errors, seeding and the small helpers in services.py."""

import smtplib
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

import storage
from app import create_app
from config import TestConfig
from conftest import order_payload
from models import BlogPost, Product, db
from seed import SAMPLE_BLOG_POSTS, SAMPLE_PRODUCTS, seed_sample_data
from services import format_money, send_email, slugify


def test_health(client):
    assert client.get("/api/health").get_json() == {"status": "ok"}


def test_cors_headers_on_api_responses(client):
    response = client.get("/api/products")

    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert "PUT" in response.headers["Access-Control-Allow-Methods"]
    assert "Access-Control-Allow-Credentials" not in response.headers


def test_allowed_origin_is_echoed_with_credentials(client):
    response = client.get("/api/products", headers={"Origin": "https://admin.modernagro.com"})

    assert response.headers["Access-Control-Allow-Origin"] == "https://admin.modernagro.com"
    assert response.headers["Access-Control-Allow-Credentials"] == "true"
    assert "Origin" in response.headers["Vary"]


def test_unknown_origin_gets_wildcard_without_credentials(client):
    response = client.options("/api/admin/stats", headers={"Origin": "https://evil.example.com"})

    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert "Access-Control-Allow-Credentials" not in response.headers


def test_preflight_skips_admin_gate(client):
    response = client.options("/api/admin/stats")

    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Headers"].endswith("Authorization")


def test_unknown_route_is_json_404(client):
    response = client.get("/api/nowhere")

    assert response.status_code == 404
    assert "message" in response.get_json()


def test_database_error_is_generic_500(client, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT secret FROM products", {}, Exception("connection refused"))

    monkeypatch.setattr(storage, "list_products", broken)

    response = client.get("/api/products")

    assert response.status_code == 500
    assert response.get_json() == {"message": "Something broke on our end"}
    assert "SELECT" not in response.get_data(as_text=True)


class SeededConfig(TestConfig):
    SEED_SAMPLE_DATA = True


class TestSeed:
    def test_seeds_empty_tables_once(self):
        app = create_app(SeededConfig)
        with app.app_context():
            assert Product.query.count() == len(SAMPLE_PRODUCTS)
            assert BlogPost.query.count() == len(SAMPLE_BLOG_POSTS)
            assert seed_sample_data() == (0, 0)
            assert BlogPost.query.first().author_id == "admin"
            db.drop_all()

    def test_seeded_catalog_is_listed(self):
        client = create_app(SeededConfig).test_client()

        products = client.get("/api/products?category=Eggs").get_json()

        assert {p["name"] for p in products} == {"Fresh Duck Eggs (Dozen)", "Organic Duck Eggs (Half Dozen)"}

    def test_cli_command(self, app):
        result = app.test_cli_runner().invoke(args=["seed"])

        assert "6 products, 2 blog posts added" in result.output


class TestServices:
    @pytest.mark.parametrize("text, slug", [
        ("The Benefits of Duck Eggs", "the-benefits-of-duck-eggs"),
        ("  Farm-to-Table: Our Practices!  ", "farm-to-table-our-practices"),
        ("!!!", ""),
    ])
    def test_slugify(self, text, slug):
        assert slugify(text) == slug

    def test_format_money(self):
        assert format_money(Decimal("13.9")) == "$13.90"
        assert format_money(None) == "$0.00"

    def test_send_email_skipped_without_config(self, app):
        with app.app_context():
            assert send_email("Subject", "Body", "staff@modernagro.com") is False

    def test_send_email_failure_is_logged_not_raised(self, app, monkeypatch):
        app.config.update(EMAIL_USER="orders@modernagro.com", EMAIL_PASS="pw")

        def refuse(*args, **kwargs):
            raise smtplib.SMTPConnectError(421, "try later")

        monkeypatch.setattr(smtplib, "SMTP", refuse)

        with app.app_context():
            assert send_email("Subject", "Body", "staff@modernagro.com") is False

    def test_order_notification_sent_when_configured(self, app, client, make_product, monkeypatch):
        sent = []
        app.config.update(ORDER_NOTIFY_EMAIL="staff@modernagro.com")
        monkeypatch.setattr("storage.send_email", lambda subject, body, to: sent.append((subject, body, to)))
        make_product()

        order = client.post("/api/orders", json=order_payload()).get_json()

        assert sent[0][0] == f"New Order {order['orderNumber']}"
        assert "Jane Mallard" in sent[0][1]
        assert sent[0][2] == "staff@modernagro.com"
