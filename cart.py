from decimal import Decimal

import storage

SESSION_KEY = "cart"


class Cart:
    """Shopping cart held client-side in the signed session cookie.

    ``store`` is the Flask session (or any dict); the cart lives under
    ``store["cart"]`` as ``{"<product id>": quantity}``. Nothing is written to
    the database until checkout turns the cart into an order.
    """

    def __init__(self, store):
        self.store = store

    def _items(self):
        if SESSION_KEY not in self.store:
            self.store[SESSION_KEY] = {}
        return self.store[SESSION_KEY]

    def _touch(self):
        # nested dict edits are invisible to the session otherwise
        if hasattr(self.store, "modified"):
            self.store.modified = True

    def quantity(self, product_id):
        return self._items().get(str(product_id), 0)

    def add(self, product_id, quantity=1):
        items = self._items()
        key = str(product_id)
        items[key] = items.get(key, 0) + quantity
        self._touch()

    def update(self, product_id, quantity):
        if quantity <= 0:
            self.remove(product_id)
            return
        self._items()[str(product_id)] = quantity
        self._touch()

    def remove(self, product_id):
        self._items().pop(str(product_id), None)
        self._touch()

    def clear(self):
        self.store[SESSION_KEY] = {}
        self._touch()

    def is_empty(self):
        return not self.lines()

    def lines(self):
        """(product, quantity) pairs; products gone or deactivated are skipped."""
        lines = []
        for product_id, quantity in self._items().items():
            product = storage.get_product(int(product_id))
            if product is not None and product.is_active:
                lines.append((product, quantity))
        return lines

    def total(self) -> Decimal:
        return sum((product.price * quantity for product, quantity in self.lines()), Decimal("0"))

    def to_order_items(self):
        return [
            {
                "product_id": product.id,
                "quantity": quantity,
                "price_per_unit": product.price,
                "total_price": product.price * quantity,
            }
            for product, quantity in self.lines()
        ]

    def to_dict(self):
        lines = self.lines()
        return {
            "items": [
                {
                    "product": product.to_dict(),
                    "quantity": quantity,
                    "subtotal": f"{product.price * quantity:.2f}",
                }
                for product, quantity in lines
            ],
            "totalItems": sum(quantity for _, quantity in lines),
            "totalPrice": f"{sum((p.price * q for p, q in lines), Decimal('0')):.2f}",
        }
