"""Database operations behind the storefront and admin routes.

Every write commits its own unit of work. ``place_order`` is the only
multi-row write: the order header and its line items go out in a single
commit, and any failure rolls the whole order back.
"""
from decimal import Decimal

from flask import current_app
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from errors import Conflict, NotFound, ValidationFailed
from models import (
    db, BlogPost, ContactMessage, Order, OrderItem, Product, User,
    ORDER_STATUSES,
)
from services import generate_order_number, order_summary, send_email, slugify

ALL_CATEGORIES = "All Categories"


def _escape_like(term):
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# ---------- Users ----------

def get_user(user_id):
    return db.session.get(User, user_id)


def upsert_user(user_id, email=None, first_name=None, last_name=None,
                profile_image_url=None, is_admin=None):
    """Create or refresh the user row for an authenticated identity.

    ``is_admin=None`` keeps whatever flag the row already has.
    """
    user = db.session.get(User, user_id)
    if user is None:
        user = User(id=user_id, is_admin=False)
        db.session.add(user)
    user.email = email
    user.first_name = first_name
    user.last_name = last_name
    user.profile_image_url = profile_image_url
    if is_admin is not None:
        user.is_admin = is_admin
    db.session.commit()
    return user


# ---------- Products ----------

def list_products(search=None, category=None):
    query = Product.query.filter(Product.is_active.is_(True))
    if search:
        query = query.filter(Product.name.ilike(f"%{_escape_like(search)}%", escape="\\"))
    if category and category != ALL_CATEGORIES:
        query = query.filter(Product.category == category)
    return query.order_by(desc(Product.created_at), desc(Product.id)).all()


def list_categories():
    rows = (
        db.session.query(Product.category)
        .filter(Product.is_active.is_(True))
        .distinct()
        .order_by(Product.category)
        .all()
    )
    return [category for (category,) in rows]


def get_product(product_id):
    # inactive products stay reachable by id so old order items resolve
    return db.session.get(Product, product_id)


def _product_or_404(product_id):
    product = get_product(product_id)
    if product is None:
        raise NotFound("Product not found")
    return product


def create_product(fields):
    product = Product(**fields)
    db.session.add(product)
    db.session.commit()
    current_app.logger.info("Created product %s (%s)", product.id, product.name)
    return product


def update_product(product_id, fields):
    product = _product_or_404(product_id)
    for name, value in fields.items():
        setattr(product, name, value)
    db.session.commit()
    return product


def deactivate_product(product_id):
    product = _product_or_404(product_id)
    product.is_active = False
    db.session.commit()
    current_app.logger.info("Deactivated product %s", product_id)
    return product


# ---------- Orders ----------

def place_order(order_fields, line_items):
    """Persist an order header plus its line items atomically.

    Prices are taken as sent: ``price_per_unit`` is the caller's snapshot and
    ``total_price`` is stored verbatim. Stock is not decremented.
    """
    if not line_items:
        raise ValidationFailed(
            "Invalid order data",
            [{"field": "items", "message": "An order needs at least one item"}],
        )

    fields = {k: v for k, v in order_fields.items() if k not in ("status", "order_number")}
    order = Order(order_number=generate_order_number(), status="pending", **fields)
    order.items = [OrderItem(**item) for item in line_items]
    try:
        db.session.add(order)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise

    current_app.logger.info(
        "Placed order %s: %d item(s), total %s",
        order.order_number, len(line_items), order.total_amount,
    )
    send_email(f"New Order {order.order_number}", order_summary(order),
               current_app.config.get("ORDER_NOTIFY_EMAIL"))
    return order


def list_orders():
    return (
        Order.query.options(selectinload(Order.items))
        .order_by(desc(Order.created_at), desc(Order.id))
        .all()
    )


def get_order(order_id):
    return db.session.get(Order, order_id)


def update_order_status(order_id, status):
    # any status may follow any other; only the value itself is checked
    if status not in ORDER_STATUSES:
        raise ValidationFailed(
            "Invalid order status",
            [{"field": "status", "message": f"Must be one of: {', '.join(ORDER_STATUSES)}"}],
        )
    order = get_order(order_id)
    if order is None:
        raise NotFound("Order not found")
    previous = order.status
    order.status = status
    db.session.commit()
    current_app.logger.info("Order %s status %s -> %s", order.order_number, previous, status)
    return order


# ---------- Blog ----------

def list_blog_posts(published_only=True):
    query = BlogPost.query
    if published_only:
        query = query.filter(BlogPost.is_published.is_(True))
    return query.order_by(desc(BlogPost.created_at), desc(BlogPost.id)).all()


def get_blog_post(slug):
    return BlogPost.query.filter_by(slug=slug).first()


def get_blog_post_by_id(post_id):
    return db.session.get(BlogPost, post_id)


def _ensure_slug_free(slug, post_id=None):
    existing = get_blog_post(slug)
    if existing is not None and existing.id != post_id:
        raise Conflict("A blog post with this slug already exists")


def create_blog_post(fields, author_id=None):
    fields = dict(fields)
    fields["slug"] = fields.get("slug") or slugify(fields["title"])
    if not fields["slug"]:
        raise ValidationFailed(
            "Invalid blog post data",
            [{"field": "slug", "message": "Could not derive a slug from the title"}],
        )
    _ensure_slug_free(fields["slug"])
    post = BlogPost(author_id=author_id, **fields)
    db.session.add(post)
    db.session.commit()
    return post


def update_blog_post(post_id, fields):
    post = get_blog_post_by_id(post_id)
    if post is None:
        raise NotFound("Blog post not found")
    if fields.get("slug"):
        _ensure_slug_free(fields["slug"], post_id=post.id)
    for name, value in fields.items():
        setattr(post, name, value)
    db.session.commit()
    return post


def delete_blog_post(post_id):
    post = get_blog_post_by_id(post_id)
    if post is None:
        raise NotFound("Blog post not found")
    db.session.delete(post)
    db.session.commit()


# ---------- Contact ----------

def create_contact_message(fields):
    message = ContactMessage(**fields)
    db.session.add(message)
    db.session.commit()

    body = (
        f"Name: {message.name}\nEmail: {message.email}\n"
        f"Phone: {message.phone or '-'}\nMessage: {message.message}"
    )
    send_email("New Contact Form Submission", body,
               current_app.config.get("CONTACT_NOTIFY_EMAIL"))
    return message


def list_contact_messages():
    return ContactMessage.query.order_by(desc(ContactMessage.created_at), desc(ContactMessage.id)).all()


def mark_contact_message_read(message_id):
    message = db.session.get(ContactMessage, message_id)
    if message is None:
        raise NotFound("Message not found")
    message.is_read = True
    db.session.commit()
    return message


# ---------- Dashboard ----------

def compute_stats():
    """Dashboard totals, recomputed on every call.

    ``totalProducts`` reuses the public listing, so deactivated products are
    not counted. ``totalRevenue`` includes every order whatever its status,
    cancelled ones too.
    """
    revenue = sum(
        (amount for (amount,) in db.session.query(Order.total_amount)),
        Decimal("0"),
    )
    return {
        "totalProducts": len(list_products()),
        "totalOrders": Order.query.count(),
        "totalRevenue": f"{revenue:.2f}",
        "totalBlogPosts": BlogPost.query.count(),
    }
