# services/history_service.py

import copy
import time
from typing import List, Optional, Tuple

from data_integrator import HISTORY_KEY, LocalStore
from domain.models import Order, Role
from services import draft_service
from services.pricing_service import classify, validate_order
from utils.logger import get_logger

logger = get_logger("history_service")


class OrderHistoryRepository:
    """
    Append-only order history plus the single "current draft" slot.

    Saved orders are never updated in place: editing one loads a copy into
    the draft, and saving that draft appends a new entry. Only the owner
    may delete.
    """

    def __init__(self, store: LocalStore):
        self.store = store
        self.draft: Order = draft_service.new_draft()
        self._orders: List[Order] = []
        self.load_error: Optional[str] = None
        self.reload()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def reload(self) -> None:
        ok, msg, raw = self.store.read(HISTORY_KEY, default=[])
        if not ok:
            self.load_error = msg
            self._orders = []
            return

        self.load_error = None
        self._orders = [
            Order.from_dict(entry, classify=classify)
            for entry in (raw or [])
            if isinstance(entry, dict)
        ]

    def list_orders(self) -> List[Order]:
        """Newest first. Returns copies; the stored history can't be edited through them."""
        return [copy.deepcopy(o) for o in self._orders]

    def get(self, order_id: str) -> Optional[Order]:
        found = next((o for o in self._orders if o.id == order_id), None)
        return copy.deepcopy(found) if found else None

    def search(self, term: str) -> List[Order]:
        """Customer name (case-insensitive) or phone substring."""
        term = (term or "").strip()
        if not term:
            return self.list_orders()
        needle = term.casefold()
        return [
            copy.deepcopy(o)
            for o in self._orders
            if needle in o.customer_name.casefold() or term in o.phone
        ]

    def __len__(self) -> int:
        return len(self._orders)

    # ------------------------------------------------------------------
    # Draft slot
    # ------------------------------------------------------------------

    def new_draft(self) -> Order:
        self.draft = draft_service.new_draft()
        return self.draft

    def load_into_draft(self, order_id: str) -> Optional[Order]:
        order = self.get(order_id)
        if order is None:
            return None
        if not order.items:
            order.items.append(draft_service.new_item())
        self.draft = order
        return self.draft

    def duplicate_into_draft(self, order_id: str) -> Optional[Order]:
        order = self.get(order_id)
        if order is None:
            return None
        self.draft = draft_service.duplicate_order(order)
        return self.draft

    @staticmethod
    def needs_save_confirmation(order: Order, role: Role) -> bool:
        """Below-cost lines are only shown to the owner, so only the owner is asked."""
        return role is Role.OWNER and validate_order(order).has_price_warning

    def commit_draft(
            self,
            role: Role = Role.SALE,
            confirmed: bool = False,
    ) -> Tuple[bool, str, Optional[Order]]:
        """
        Append a snapshot of the draft to history with a fresh id and
        timestamp. Refuses while the draft has a blocking error, or when the
        owner has not confirmed a below-cost sale. The draft stays as it is.
        """
        validation = validate_order(self.draft)
        if validation.has_blocking_error:
            return False, "Đơn hàng còn lỗi, chưa thể lưu.", None

        if self.needs_save_confirmation(self.draft, role) and not confirmed:
            return False, "Có sản phẩm bán thấp hơn giá nhập, cần xác nhận.", None

        # other sessions share the file: rebuild from what is on disk now
        self.reload()
        if self.load_error:
            return False, self.load_error, None

        committed = copy.deepcopy(self.draft)
        committed.id = draft_service.new_id()
        committed.created_at = int(time.time() * 1000)

        new_history = [committed] + self._orders
        ok, msg, _ = self.store.write(HISTORY_KEY, [o.to_dict() for o in new_history])
        if not ok:
            return False, msg, None

        self._orders = new_history
        logger.info(f"Committed order {committed.id} ({committed.customer_name or '-'})")
        return True, "Đã lưu vào lịch sử thành công!", copy.deepcopy(committed)

    # ------------------------------------------------------------------
    # Owner-only destructive operations
    # ------------------------------------------------------------------

    def delete(self, order_id: str, role: Role) -> Tuple[bool, str, None]:
        if role is not Role.OWNER:
            return False, "Chỉ chủ shop được xoá đơn.", None

        self.reload()
        if self.load_error:
            return False, self.load_error, None

        remaining = [o for o in self._orders if o.id != order_id]
        if len(remaining) == len(self._orders):
            return False, "Không tìm thấy đơn hàng.", None

        ok, msg, _ = self.store.write(HISTORY_KEY, [o.to_dict() for o in remaining])
        if not ok:
            return False, msg, None

        self._orders = remaining
        logger.info(f"Deleted order {order_id}")
        return True, "Đã xoá đơn hàng.", None

    def clear(self, role: Role) -> Tuple[bool, str, None]:
        if role is not Role.OWNER:
            return False, "Chỉ chủ shop được xoá lịch sử.", None

        self.reload()
        count = len(self._orders)

        ok, msg, _ = self.store.remove(HISTORY_KEY)
        if not ok:
            return False, msg, None

        self._orders = []
        logger.info(f"Cleared history ({count} orders)")
        return True, "Đã xoá toàn bộ lịch sử.", None
