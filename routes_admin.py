# routes_admin.py
from flask import Blueprint, jsonify, request

import storage
from auth import require_admin, resolve_identity
from errors import NotFound
from schemas import (
    BlogPostIn, BlogPostUpdate, ProductIn, ProductUpdate, StatusUpdate, parse,
)

bp = Blueprint("admin", __name__)


@bp.before_request
def admin_gate():
    require_admin()


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# ---------- Products ----------

@bp.post("/products")
def create_product():
    data = parse(ProductIn, _json_body(), "Invalid product data")
    product = storage.create_product(data.model_dump())
    return jsonify(product.to_dict()), 201


@bp.put("/products/<int:product_id>")
def update_product(product_id):
    data = parse(ProductUpdate, _json_body(), "Invalid product data")
    product = storage.update_product(product_id, data.model_dump(exclude_unset=True))
    return jsonify(product.to_dict())


@bp.delete("/products/<int:product_id>")
def delete_product(product_id):
    storage.deactivate_product(product_id)
    return jsonify({"message": "Product deleted successfully"})


# ---------- Orders ----------

@bp.get("/orders")
def list_orders():
    return jsonify([o.to_dict() for o in storage.list_orders()])


@bp.get("/orders/<int:order_id>")
def get_order(order_id):
    order = storage.get_order(order_id)
    if order is None:
        raise NotFound("Order not found")
    return jsonify(order.to_dict())


@bp.put("/orders/<int:order_id>/status")
def update_order_status(order_id):
    data = parse(StatusUpdate, _json_body(), "Invalid order status")
    order = storage.update_order_status(order_id, data.status)
    return jsonify(order.to_dict())


# ---------- Blog ----------

@bp.get("/blog")
def list_blog_posts():
    return jsonify([p.to_dict() for p in storage.list_blog_posts(published_only=False)])


@bp.get("/blog/<int:post_id>")
def get_blog_post(post_id):
    post = storage.get_blog_post_by_id(post_id)
    if post is None:
        raise NotFound("Blog post not found")
    return jsonify(post.to_dict())


@bp.post("/blog")
def create_blog_post():
    data = parse(BlogPostIn, _json_body(), "Invalid blog post data")
    post = storage.create_blog_post(data.model_dump(), author_id=resolve_identity().user.id)
    return jsonify(post.to_dict()), 201


@bp.put("/blog/<int:post_id>")
def update_blog_post(post_id):
    data = parse(BlogPostUpdate, _json_body(), "Invalid blog post data")
    post = storage.update_blog_post(post_id, data.model_dump(exclude_unset=True))
    return jsonify(post.to_dict())


@bp.delete("/blog/<int:post_id>")
def delete_blog_post(post_id):
    storage.delete_blog_post(post_id)
    return jsonify({"message": "Blog post deleted successfully"})


# ---------- Contact messages ----------

@bp.get("/contact")
def list_contact_messages():
    return jsonify([m.to_dict() for m in storage.list_contact_messages()])


@bp.put("/contact/<int:message_id>/read")
def mark_contact_message_read(message_id):
    return jsonify(storage.mark_contact_message_read(message_id).to_dict())


# ---------- Dashboard ----------

@bp.get("/stats")
def stats():
    return jsonify(storage.compute_stats())
