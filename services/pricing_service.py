# services/pricing_service.py
"""
Pricing and validation rules for an order.

Everything here is a pure function of its arguments: no I/O, no logging,
no mutation. Numbers are expected to be real floats already (see
utils.numbers.to_number); results are unrounded.
"""

import unicodedata
from typing import Iterable, Optional

import config
from domain.models import (
    DraftState,
    ItemValidation,
    Order,
    OrderItem,
    OrderTotals,
    OrderValidation,
    PricingMode,
)


def _fold(text: str) -> str:
    return unicodedata.normalize("NFC", text).casefold()


def is_area_priced(name: Optional[str], keywords: Optional[Iterable[str]] = None) -> bool:
    """True when `name` contains one of the area keywords (case-insensitive)."""
    if not name or not isinstance(name, str):
        return False
    if keywords is None:
        keywords = config.AREA_KEYWORDS
    folded = _fold(name)
    return any(_fold(k) in folded for k in keywords if k)


def classify(name: Optional[str], keywords: Optional[Iterable[str]] = None) -> PricingMode:
    return PricingMode.AREA if is_area_priced(name, keywords) else PricingMode.UNIT


# ---------------------------------------------------------------------------
# Per item
# ---------------------------------------------------------------------------

def item_area(item: OrderItem) -> float:
    """m² billed for an AREA item; 0 for UNIT items (never divide by it)."""
    if item.mode is not PricingMode.AREA:
        return 0.0
    return item.width * item.length * item.quantity


def _billable_quantity(item: OrderItem) -> float:
    if item.mode is PricingMode.AREA:
        return item_area(item)
    return item.quantity


def item_total(item: OrderItem) -> float:
    return _billable_quantity(item) * item.price_buy


def item_import_cost(item: OrderItem) -> float:
    return _billable_quantity(item) * item.price_import


# ---------------------------------------------------------------------------
# Per order
# ---------------------------------------------------------------------------

def compute_totals(order: Order) -> OrderTotals:
    subtotal = sum(item_total(item) for item in order.items)
    total_import_cost = sum(item_import_cost(item) for item in order.items)

    discount_amount = subtotal * order.discount_percent / 100
    after_discount = subtotal - discount_amount

    # shipping_collection is reimbursed by the customer: not part of profit
    profit = after_discount - (total_import_cost + order.shipping_cost)
    profit_margin = profit / after_discount * 100 if after_discount > 0 else 0.0

    grand_total = after_discount + order.shipping_cost + order.shipping_collection

    return OrderTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        after_discount=after_discount,
        total_import_cost=total_import_cost,
        profit=profit,
        profit_margin=profit_margin,
        grand_total=grand_total,
    )


def validate_item(item: OrderItem) -> ItemValidation:
    paper_error = item.mode is PricingMode.AREA and (item.width <= 0 or item.length <= 0)
    return ItemValidation(
        item_id=item.id,
        paper_error=paper_error,
        zero_total=item_total(item) <= 0,
        price_warning=0 < item.price_buy < item.price_import,
    )


def validate_order(order: Order) -> OrderValidation:
    items = [validate_item(item) for item in order.items]
    return OrderValidation(
        items=items,
        has_blocking_error=any(v.is_blocking for v in items),
        has_price_warning=any(v.price_warning for v in items),
    )


def draft_state(order: Order, committed: bool = False) -> DraftState:
    """
    EDITING -> FINALIZABLE -> COMMITTED. A committed order stays COMMITTED;
    any blocking condition puts a draft back to EDITING.
    """
    if committed:
        return DraftState.COMMITTED
    if not order.items or validate_order(order).has_blocking_error:
        return DraftState.EDITING
    return DraftState.FINALIZABLE


def has_area_items(order: Order) -> bool:
    return any(item.mode is PricingMode.AREA for item in order.items)
