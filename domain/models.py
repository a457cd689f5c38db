# domain/models.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from utils.numbers import to_number


class PricingMode(str, Enum):
    """How a line item is billed. Chosen when the item is created or renamed."""
    UNIT = "unit"  # quantity * price
    AREA = "area"  # width * length * quantity * price


class Role(str, Enum):
    SALE = "SALE"
    OWNER = "OWNER"


class DraftState(str, Enum):
    EDITING = "EDITING"
    FINALIZABLE = "FINALIZABLE"
    COMMITTED = "COMMITTED"


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    # snake_case first, then the camelCase keys of the browser export
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass
class OrderItem:
    """
    One line of an order.
    width / length are in meters and only count for AREA items.
    price_buy / price_import are per m² for AREA items, per unit otherwise.
    """
    id: str
    name: str = ""
    mode: PricingMode = PricingMode.UNIT
    width: float = 0.0
    length: float = 0.0
    quantity: float = 1.0
    unit: str = "Cái"
    price_buy: float = 0.0
    price_import: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "mode": self.mode.value,
            "width": self.width,
            "length": self.length,
            "quantity": self.quantity,
            "unit": self.unit,
            "price_buy": self.price_buy,
            "price_import": self.price_import,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], mode: Optional[PricingMode] = None) -> "OrderItem":
        stored_mode = _pick(data, "mode")
        if mode is None:
            mode = PricingMode(stored_mode) if stored_mode in ("unit", "area") else PricingMode.UNIT
        return cls(
            id=str(_pick(data, "id", default="")),
            name=str(_pick(data, "name", default="")),
            mode=mode,
            width=to_number(_pick(data, "width", default=0)),
            length=to_number(_pick(data, "length", default=0)),
            quantity=to_number(_pick(data, "quantity", default=0)),
            unit=str(_pick(data, "unit", default="Cái")),
            price_buy=to_number(_pick(data, "price_buy", "priceBuy", default=0)),
            price_import=to_number(_pick(data, "price_import", "priceImport", default=0)),
        )


@dataclass
class Order:
    """
    A quotation / invoice. `items` keeps entry order and is never empty
    while the order sits in the draft slot.
    """
    id: str = ""
    customer_name: str = ""
    phone: str = ""
    address: str = ""
    notes: str = ""
    date: str = ""  # YYYY-MM-DD
    order_no: str = ""  # display only, not unique
    shipping_collection: float = 0.0  # collected for the carrier, pass-through
    shipping_cost: float = 0.0  # borne by the shop
    discount_percent: float = 0.0
    items: List[OrderItem] = field(default_factory=list)
    created_at: int = 0  # epoch milliseconds, set on commit

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "customer_name": self.customer_name,
            "phone": self.phone,
            "address": self.address,
            "notes": self.notes,
            "date": self.date,
            "order_no": self.order_no,
            "shipping_collection": self.shipping_collection,
            "shipping_cost": self.shipping_cost,
            "discount_percent": self.discount_percent,
            "items": [item.to_dict() for item in self.items],
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(
            cls,
            data: Dict[str, Any],
            classify: Optional[Callable[[str], PricingMode]] = None,
    ) -> "Order":
        """
        Build an Order from stored data. Every field defaults, so records
        written by older versions (or the browser export, camelCase) load.
        Items without a stored mode are classified with `classify` when given.
        """
        raw_items = _pick(data, "items", default=[]) or []
        return cls(
            id=str(_pick(data, "id", default="")),
            customer_name=str(_pick(data, "customer_name", "customerName", default="")),
            phone=str(_pick(data, "phone", default="")),
            address=str(_pick(data, "address", default="")),
            notes=str(_pick(data, "notes", default="")),
            date=str(_pick(data, "date", default="")),
            order_no=str(_pick(data, "order_no", "orderNo", default="")),
            shipping_collection=to_number(_pick(data, "shipping_collection", "shippingCollection", default=0)),
            shipping_cost=to_number(_pick(data, "shipping_cost", "shippingCost", default=0)),
            discount_percent=to_number(_pick(data, "discount_percent", "discountPercent", default=0)),
            items=[_item_from_dict(raw, classify) for raw in raw_items if isinstance(raw, dict)],
            created_at=int(to_number(_pick(data, "created_at", "createdAt", default=0))),
        )


@dataclass(frozen=True)
class OrderTotals:
    """Derived from an Order on every read, never stored."""
    subtotal: float
    discount_amount: float
    after_discount: float
    total_import_cost: float
    profit: float
    profit_margin: float  # percent of after_discount
    grand_total: float  # what the customer pays


@dataclass(frozen=True)
class ItemValidation:
    item_id: str
    paper_error: bool  # area item missing a dimension (blocking)
    zero_total: bool  # line total <= 0 (blocking)
    price_warning: bool  # sold below import price (non-blocking)

    @property
    def is_blocking(self) -> bool:
        return self.paper_error or self.zero_total


@dataclass(frozen=True)
class OrderValidation:
    items: List[ItemValidation]
    has_blocking_error: bool
    has_price_warning: bool

    def for_item(self, item_id: str) -> Optional[ItemValidation]:
        return next((v for v in self.items if v.item_id == item_id), None)


def _item_from_dict(
        data: Dict[str, Any],
        classify: Optional[Callable[[str], PricingMode]],
) -> OrderItem:
    if classify is not None and data.get("mode") not in ("unit", "area"):
        return OrderItem.from_dict(data, mode=classify(str(data.get("name") or "")))
    return OrderItem.from_dict(data)
