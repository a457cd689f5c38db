# services/sheet_sync_service.py

from typing import Any, Dict, Optional, Tuple

import requests

import config
from domain.models import Order
from services.pricing_service import compute_totals
from utils.logger import get_logger

logger = get_logger("sheet_sync_service")


def build_sheet_payload(order: Order) -> Dict[str, Any]:
    """Whole order plus the computed totals, so the sheet never re-derives money."""
    totals = compute_totals(order)
    payload = order.to_dict()
    payload["totals"] = {
        "subtotal": totals.subtotal,
        "discount_amount": totals.discount_amount,
        "after_discount": totals.after_discount,
        "grand_total": totals.grand_total,
    }
    return payload


def post_order_to_sheet(
        order: Order,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
) -> Tuple[bool, str, Optional[int]]:
    """
    POST the order as JSON to the spreadsheet web-hook.
    Returns (ok, message, http_status). Network errors are reported, not raised.
    """
    url = url or config.SHEET_WEBHOOK_URL
    if not url:
        return False, "SHEET_WEBHOOK_URL chưa được cấu hình", None

    try:
        resp = requests.post(
            url,
            json=build_sheet_payload(order),
            timeout=timeout or config.SHEET_WEBHOOK_TIMEOUT,
        )
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Sheet sync failed for order {order.id or '-'}: {e}")
        return False, f"Lỗi đồng bộ: {e}", getattr(e.response, "status_code", None)

    logger.info(f"Synced order {order.id or '-'} to sheet")
    return True, "Đã đồng bộ lên Google Sheets", resp.status_code
