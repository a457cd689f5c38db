# services/draft_service.py

import copy
import uuid
from datetime import date
from typing import Any

from domain.models import Order, OrderItem, PricingMode
from services.pricing_service import classify
from utils.numbers import to_number

DEFAULT_UNIT = "Cái"
ROLL_UNIT = "Cuộn"

NUMERIC_FIELDS = ("width", "length", "quantity", "price_buy", "price_import")
TEXT_FIELDS = ("name", "unit")


def new_id() -> str:
    return uuid.uuid4().hex[:9]


def today() -> str:
    return date.today().isoformat()


def new_item() -> OrderItem:
    return OrderItem(id=new_id(), name="", mode=PricingMode.UNIT, quantity=1.0, unit=DEFAULT_UNIT)


def new_draft() -> Order:
    """An empty draft: today's date and one blank line."""
    return Order(date=today(), items=[new_item()])


def add_item(order: Order) -> OrderItem:
    item = new_item()
    order.items.append(item)
    return item


def remove_item(order: Order, index: int) -> bool:
    """Remove the line at `index`. The last remaining line is never removed."""
    if len(order.items) <= 1:
        return False
    del order.items[index]
    return True


def update_item(order: Order, index: int, **fields: Any) -> OrderItem:
    """
    Edit one line in place. Numeric fields go through to_number; a rename
    re-classifies the pricing mode, and an area-priced name switches the
    unit to rolls.
    """
    item = order.items[index]

    for key, value in fields.items():
        if key in NUMERIC_FIELDS:
            setattr(item, key, to_number(value))
        elif key in TEXT_FIELDS:
            setattr(item, key, "" if value is None else str(value))
        else:
            raise KeyError(f"Unknown item field: {key}")

    if "name" in fields:
        item.mode = classify(item.name)
        if item.mode is PricingMode.AREA:
            item.unit = ROLL_UNIT

    return item


def update_order_fields(order: Order, **fields: Any) -> Order:
    numeric = ("shipping_collection", "shipping_cost", "discount_percent")
    text = ("customer_name", "phone", "address", "notes", "date", "order_no")
    for key, value in fields.items():
        if key in numeric:
            setattr(order, key, to_number(value))
        elif key in text:
            setattr(order, key, "" if value is None else str(value))
        else:
            raise KeyError(f"Unknown order field: {key}")
    return order


def duplicate_order(order: Order) -> Order:
    """New draft from an existing order: blank identity and order no, today's date, fresh item ids."""
    dup = copy.deepcopy(order)
    dup.id = ""
    dup.order_no = ""
    dup.date = today()
    dup.created_at = 0
    for item in dup.items:
        item.id = new_id()
    if not dup.items:
        dup.items.append(new_item())
    return dup
