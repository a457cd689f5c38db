# services/export_service.py

import time
from typing import List, Tuple

import pandas as pd

from domain.models import Order, PricingMode
from services.pricing_service import compute_totals, item_area, item_total, validate_order
from utils.formatting import format_area, format_number, format_vnd

CSV_COLUMNS = ["Ngày", "Số Đơn", "Khách Hàng", "SĐT", "Tổng Cộng", "Lợi Nhuận"]


def _item_line(item) -> str:
    price = format_vnd(item.price_buy)
    total = format_vnd(item_total(item))
    if item.mode is PricingMode.AREA:
        return f"- {item.name}: {format_area(item_area(item))} m² x {price} = {total}"
    return f"- {item.name}: {format_number(item.quantity)} {item.unit} x {price} = {total}"


def generate_share_text(order: Order) -> Tuple[bool, str, str]:
    """
    Plain-text quotation to paste into a chat app (Zalo).
    Returns (ok, message, text); refused while the order has a blocking error.
    """
    if validate_order(order).has_blocking_error:
        return False, "Đơn hàng còn lỗi, chưa thể chia sẻ.", ""

    totals = compute_totals(order)
    items_text = "\n".join(_item_line(item) for item in order.items)

    text = (
        "BÁO GIÁ VẬT TƯ\n"
        f"Ngày: {order.date}\n"
        f"Đơn số: {order.order_no or 'N/A'}\n"
        f"Khách hàng: {order.customer_name}\n"
        f"SĐT: {order.phone}\n"
        f"Địa chỉ: {order.address}\n"
        "\n"
        "DANH SÁCH HÀNG:\n"
        f"{items_text}\n"
        "\n"
        "-------------------\n"
        f"Tạm tính: {format_vnd(totals.subtotal)}\n"
        f"Chiết khấu ({format_number(order.discount_percent)}%): {format_vnd(totals.discount_amount)}\n"
        f"Phí ship: {format_vnd(order.shipping_cost)}\n"
        f"Tiền xe (thu hộ): {format_vnd(order.shipping_collection)}\n"
        f"TỔNG THANH TOÁN: {format_vnd(totals.grand_total)}\n"
    )
    return True, "", text


def history_to_dataframe(history: List[Order]) -> pd.DataFrame:
    rows = []
    for order in history:
        totals = compute_totals(order)
        rows.append([
            order.date,
            order.order_no,
            order.customer_name,
            order.phone,
            totals.grand_total,
            totals.profit,
        ])
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def history_to_csv(history: List[Order]) -> bytes:
    # BOM so Excel opens the Vietnamese text correctly
    return history_to_dataframe(history).to_csv(index=False).encode("utf-8-sig")


def csv_file_name() -> str:
    return f"lich_su_bao_gia_{int(time.time() * 1000)}.csv"
