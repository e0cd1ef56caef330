"""Session cart and checkout."""

from decimal import Decimal

from cart import Cart
from models import Order

CUSTOMER = {
    "customerName": "Jane Mallard",
    "customerPhone": "555-0100",
    "customerAddress": "1 Pond Lane, Featherby",
}


class TestCartApi:
    def test_empty_cart(self, client):
        assert client.get("/api/cart").get_json() == {"items": [], "totalItems": 0, "totalPrice": "0.00"}

    def test_add_accumulates_quantity(self, client, make_product):
        product_id = make_product(price=Decimal("6.99"))

        client.post("/api/cart/items", json={"productId": product_id})
        cart = client.post("/api/cart/items", json={"productId": product_id, "quantity": 2}).get_json()

        assert cart["totalItems"] == 3
        assert cart["items"][0]["quantity"] == 3
        assert cart["items"][0]["subtotal"] == "20.97"
        assert cart["totalPrice"] == "20.97"

    def test_cart_is_per_client(self, app, client, make_product):
        product_id = make_product()
        client.post("/api/cart/items", json={"productId": product_id})

        other = app.test_client()

        assert other.get("/api/cart").get_json()["totalItems"] == 0

    def test_add_unknown_product_is_404(self, client):
        assert client.post("/api/cart/items", json={"productId": 99}).status_code == 404

    def test_add_inactive_product_is_404(self, client, admin_client, make_product):
        product_id = make_product()
        admin_client.delete(f"/api/admin/products/{product_id}")

        assert client.post("/api/cart/items", json={"productId": product_id}).status_code == 404

    def test_add_rejects_non_positive_quantity(self, client, make_product):
        product_id = make_product()

        response = client.post("/api/cart/items", json={"productId": product_id, "quantity": 0})

        assert response.status_code == 400

    def test_update_and_remove(self, client, make_product):
        eggs = make_product(name="Duck Eggs", price=Decimal("6.99"))
        fat = make_product(name="Duck Fat", price=Decimal("8.99"))
        client.post("/api/cart/items", json={"productId": eggs})
        client.post("/api/cart/items", json={"productId": fat})

        cart = client.put(f"/api/cart/items/{eggs}", json={"quantity": 4}).get_json()
        assert cart["totalPrice"] == "36.95"

        cart = client.delete(f"/api/cart/items/{fat}").get_json()
        assert [i["product"]["name"] for i in cart["items"]] == ["Duck Eggs"]

        cart = client.put(f"/api/cart/items/{eggs}", json={"quantity": 0}).get_json()
        assert cart["items"] == []

    def test_clear(self, client, make_product):
        client.post("/api/cart/items", json={"productId": make_product()})

        assert client.delete("/api/cart").get_json()["totalItems"] == 0

    def test_deactivated_product_drops_out_of_cart(self, client, admin_client, make_product):
        product_id = make_product()
        client.post("/api/cart/items", json={"productId": product_id})

        admin_client.delete(f"/api/admin/products/{product_id}")

        assert client.get("/api/cart").get_json()["items"] == []


class TestCheckout:
    def test_checkout_places_order_and_clears_cart(self, app, client, make_product):
        eggs = make_product(name="Duck Eggs", price=Decimal("6.99"))
        client.post("/api/cart/items", json={"productId": eggs, "quantity": 2})

        response = client.post("/api/cart/checkout", json={"order": CUSTOMER})

        assert response.status_code == 201
        order = response.get_json()
        assert order["totalAmount"] == "13.98"
        assert order["items"][0]["pricePerUnit"] == "6.99"
        assert order["items"][0]["totalPrice"] == "13.98"
        assert client.get("/api/cart").get_json()["totalItems"] == 0
        with app.app_context():
            assert Order.query.count() == 1

    def test_checkout_ignores_client_total(self, client, make_product):
        client.post("/api/cart/items", json={"productId": make_product(price=Decimal("6.99"))})

        order = client.post("/api/cart/checkout", json={"order": {**CUSTOMER, "totalAmount": "0.01"}}).get_json()

        assert order["totalAmount"] == "6.99"

    def test_empty_cart_checkout_rejected(self, app, client):
        response = client.post("/api/cart/checkout", json={"order": CUSTOMER})

        assert response.status_code == 400
        assert response.get_json()["message"] == "Your cart is empty!"
        with app.app_context():
            assert Order.query.count() == 0

    def test_invalid_customer_keeps_cart(self, client, make_product):
        client.post("/api/cart/items", json={"productId": make_product()})

        response = client.post("/api/cart/checkout", json={"order": {"customerName": "Jane"}})

        assert response.status_code == 400
        assert client.get("/api/cart").get_json()["totalItems"] == 1


class TestCartObject:
    def test_plain_dict_store(self, app, make_product):
        eggs = make_product(price=Decimal("6.99"))
        store = {}

        with app.app_context():
            cart = Cart(store)
            cart.add(eggs, 2)
            cart.add(eggs)
            assert store == {"cart": {str(eggs): 3}}
            assert cart.total() == Decimal("20.97")
            assert cart.to_order_items() == [{
                "product_id": eggs,
                "quantity": 3,
                "price_per_unit": Decimal("6.99"),
                "total_price": Decimal("20.97"),
            }]

    def test_unknown_products_are_skipped(self, app):
        with app.app_context():
            cart = Cart({"cart": {"404": 1}})
            assert cart.lines() == []
            assert cart.is_empty()
            assert cart.quantity(404) == 1
