# routes_shop.py
from flask import Blueprint, jsonify, request, session

import storage
from cart import Cart
from errors import NotFound, ValidationFailed
from schemas import (
    CartItemIn, CartQuantity, ContactMessageIn, OrderIn, PlaceOrder, parse,
)

bp = Blueprint("shop", __name__, url_prefix="/api")


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# ---------- Catalog ----------

@bp.get("/products")
def list_products():
    products = storage.list_products(
        search=request.args.get("search", "").strip() or None,
        category=request.args.get("category", "").strip() or None,
    )
    return jsonify([p.to_dict() for p in products])


@bp.get("/products/categories")
def list_categories():
    return jsonify(storage.list_categories())


@bp.get("/products/<int:product_id>")
def get_product(product_id):
    product = storage.get_product(product_id)
    if product is None:
        raise NotFound("Product not found")
    return jsonify(product.to_dict())


# ---------- Cart ----------

@bp.get("/cart")
def view_cart():
    return jsonify(Cart(session).to_dict())


@bp.post("/cart/items")
def add_to_cart():
    data = parse(CartItemIn, _json_body(), "Invalid cart item")
    product = storage.get_product(data.product_id)
    if product is None or not product.is_active:
        raise NotFound("Product not found")
    cart = Cart(session)
    cart.add(product.id, data.quantity)
    return jsonify(cart.to_dict())


@bp.put("/cart/items/<int:product_id>")
def update_cart_item(product_id):
    data = parse(CartQuantity, _json_body(), "Invalid cart item")
    cart = Cart(session)
    cart.update(product_id, data.quantity)
    return jsonify(cart.to_dict())


@bp.delete("/cart/items/<int:product_id>")
def remove_from_cart(product_id):
    cart = Cart(session)
    cart.remove(product_id)
    return jsonify(cart.to_dict())


@bp.delete("/cart")
def clear_cart():
    cart = Cart(session)
    cart.clear()
    return jsonify(cart.to_dict())


@bp.post("/cart/checkout")
def checkout():
    cart = Cart(session)
    items = cart.to_order_items()
    if not items:
        raise ValidationFailed(
            "Your cart is empty!",
            [{"field": "items", "message": "An order needs at least one item"}],
        )

    order_data = _json_body().get("order")
    order_data = dict(order_data) if isinstance(order_data, dict) else {}
    order_data["totalAmount"] = str(cart.total())
    order_in = parse(OrderIn, order_data, "Invalid order data")

    order = storage.place_order(order_in.model_dump(), items)
    cart.clear()
    return jsonify(order.to_dict()), 201


# ---------- Orders ----------

@bp.post("/orders")
def place_order():
    data = parse(PlaceOrder, _json_body(), "Invalid order data")
    order = storage.place_order(
        data.order.model_dump(),
        [item.model_dump() for item in data.items],
    )
    return jsonify(order.to_dict()), 201


# ---------- Blog ----------

@bp.get("/blog")
def list_blog_posts():
    return jsonify([p.to_dict() for p in storage.list_blog_posts(published_only=True)])


@bp.get("/blog/<slug>")
def get_blog_post(slug):
    post = storage.get_blog_post(slug)
    if post is None or not post.is_published:
        raise NotFound("Blog post not found")
    return jsonify(post.to_dict())


# ---------- Contact ----------

@bp.post("/contact")
def contact():
    data = parse(ContactMessageIn, _json_body(), "Invalid contact data")
    message = storage.create_contact_message(data.model_dump())
    return jsonify(message.to_dict()), 201
