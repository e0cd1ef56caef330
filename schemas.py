"""
Request payload schemas for the storefront API.

Payloads arrive in camelCase (``customerName``, ``pricePerUnit``); the
schemas expose snake_case attributes so ``model_dump()`` lines up with the
SQLAlchemy columns in ``models.py``.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated, List, Literal, Optional

from pydantic import (
    AfterValidator, BaseModel, ConfigDict, EmailStr, Field,
    StringConstraints, ValidationError, field_validator, model_validator,
)

from errors import ValidationFailed, field_errors

CENT = Decimal("0.01")
SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


def _to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _positive(value: Decimal) -> Decimal:
    # checked after rounding, so 0.004 is rejected rather than stored as 0.00
    if value <= 0:
        raise ValueError("Input should be greater than 0")
    return value


Money = Annotated[Decimal, AfterValidator(_to_cents)]
Price = Annotated[Money, AfterValidator(_positive)]
Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]


class Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# ---------- Products ----------

class ProductIn(Schema):
    name: Text
    description: Optional[str] = None
    price: Price
    category: Text
    image_url: Optional[str] = Field(None, alias="imageUrl")
    stock: int = Field(0, ge=0)
    is_active: bool = Field(True, alias="isActive")
    nutritional_facts: Optional[str] = Field(None, alias="nutritionalFacts")


class ProductUpdate(Schema):
    name: Optional[Text] = None
    description: Optional[str] = None
    price: Optional[Price] = None
    category: Optional[Text] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = Field(None, alias="isActive")
    nutritional_facts: Optional[str] = Field(None, alias="nutritionalFacts")

    @model_validator(mode="after")
    def required_columns_not_null(self):
        for name in ("name", "price", "category", "stock", "is_active"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} may not be null")
        return self


# ---------- Orders ----------

class OrderIn(Schema):
    customer_name: Text = Field(alias="customerName")
    customer_email: Optional[str] = Field(None, alias="customerEmail")
    customer_phone: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=20)] = Field(
        alias="customerPhone"
    )
    customer_address: Text = Field(alias="customerAddress")
    total_amount: Money = Field(alias="totalAmount", ge=0)
    payment_method: Literal["cash_on_delivery"] = Field("cash_on_delivery", alias="paymentMethod")
    notes: Optional[str] = None

    blank_optional_text = field_validator("customer_email", "notes", mode="before")(_blank_to_none)


class OrderItemIn(Schema):
    product_id: int = Field(alias="productId")
    quantity: int = Field(ge=1)
    price_per_unit: Money = Field(alias="pricePerUnit", ge=0)
    total_price: Money = Field(alias="totalPrice", ge=0)


class PlaceOrder(Schema):
    order: OrderIn
    items: List[OrderItemIn] = Field(min_length=1)


class StatusUpdate(Schema):
    status: OrderStatus


# ---------- Cart ----------

class CartItemIn(Schema):
    product_id: int = Field(alias="productId")
    quantity: int = Field(1, ge=1)


class CartQuantity(Schema):
    quantity: int


# ---------- Blog ----------

class BlogPostIn(Schema):
    title: Text
    content: Text
    excerpt: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    slug: Optional[str] = Field(None, pattern=SLUG_PATTERN, max_length=255)
    is_published: bool = Field(True, alias="isPublished")


class BlogPostUpdate(Schema):
    title: Optional[Text] = None
    content: Optional[Text] = None
    excerpt: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    slug: Optional[str] = Field(None, pattern=SLUG_PATTERN, max_length=255)
    is_published: Optional[bool] = Field(None, alias="isPublished")

    @model_validator(mode="after")
    def required_columns_not_null(self):
        for name in ("title", "content", "slug", "is_published"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} may not be null")
        return self


# ---------- Contact ----------

class ContactMessageIn(Schema):
    name: Text
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    message: Text

    blank_phone = field_validator("phone", mode="before")(_blank_to_none)


def parse(schema, data, message="Invalid data"):
    """Validate ``data`` against ``schema`` or raise ValidationFailed."""
    try:
        return schema.model_validate(data if data is not None else {})
    except ValidationError as e:
        raise ValidationFailed(message, field_errors(e))
