import logging
import threading
from decimal import Decimal, ROUND_HALF_UP

from pydantic import ValidationError as PydanticValidationError

from errors import NoPendingRemoval, ProductNotFound, RemovalPending, ValidationError
from models import Product, ProductForm
from storage import load_records, save_records

logger = logging.getLogger(__name__)

INVENTORY_KEY = "inventory"
TWO_DP = Decimal("0.01")


class InventoryStore:
    """
    Ordered product list, persisted whole under the "inventory" key after every change.

    Removal is two-step: request_remove() opens a confirmation for one product and
    confirm_remove() / cancel_remove() resolve it. While a confirmation is open no
    other change to the list is accepted.
    """

    def __init__(self, storage):
        self._storage = storage
        self._lock = threading.Lock()
        self._products = load_records(storage, INVENTORY_KEY, Product)
        self._next_id = self._number_products()
        self._pending_id = None
        logger.info("Loaded %d products", len(self._products))

    def _number_products(self):
        # records without an id, or with a repeated one, get fresh ids after the highest seen
        next_id = max((p.id for p in self._products if p.id is not None), default=0) + 1
        seen = set()
        for product in self._products:
            if product.id is None or product.id in seen:
                product.id = next_id
                next_id += 1
            seen.add(product.id)
        return next_id

    def _save(self):
        save_records(self._storage, INVENTORY_KEY, self._products)

    def _index_of(self, product_id):
        for index, product in enumerate(self._products):
            if product.id == product_id:
                return index
        return None

    # ------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------

    def products(self):
        return [p.model_copy() for p in self._products]

    def pending(self):
        """The product awaiting removal confirmation, or None."""
        if self._pending_id is None:
            return None
        index = self._index_of(self._pending_id)
        return self._products[index].model_copy() if index is not None else None

    def total_products(self):
        return len(self._products)

    def total_value(self):
        total = sum(
            (Decimal(str(p.price)) * p.quantity for p in self._products),
            Decimal("0"),
        )
        return total.quantize(TWO_DP, rounding=ROUND_HALF_UP)

    # ------------------------------------------------------------
    # Changes
    # ------------------------------------------------------------

    def add(self, name, description, category, price_text, quantity_text):
        values = {
            "name": name,
            "description": description,
            "category": category,
            "price": price_text,
            "quantity": quantity_text,
        }
        with self._lock:
            if self._pending_id is not None:
                raise RemovalPending()
            try:
                form = ProductForm(**values)
            except PydanticValidationError:
                raise ValidationError(form=values)

            product = Product(id=self._next_id, **form.model_dump())
            self._next_id += 1
            self._products.append(product)
            self._save()
        logger.info("Added product %d (%s)", product.id, product.name)
        return product.model_copy()

    def request_remove(self, index):
        with self._lock:
            if self._pending_id is not None:
                raise RemovalPending()
            if not isinstance(index, int) or not 0 <= index < len(self._products):
                raise ProductNotFound(f"No product at position {index}")
            product = self._products[index]
            self._pending_id = product.id
        return product.model_copy()

    def confirm_remove(self):
        with self._lock:
            if self._pending_id is None:
                raise NoPendingRemoval()
            index = self._index_of(self._pending_id)
            self._pending_id = None
            if index is None:
                raise ProductNotFound()
            product = self._products.pop(index)
            self._save()
        logger.info("Removed product %d (%s)", product.id, product.name)
        return product

    def cancel_remove(self):
        with self._lock:
            self._pending_id = None


def format_money(amount, symbol="M"):
    return f"{symbol} {Decimal(str(amount)).quantize(TWO_DP, rounding=ROUND_HALF_UP)}"
