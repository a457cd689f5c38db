# services/invoice_service.py

import io
from typing import List, Tuple

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

import config
from domain.models import Order, PricingMode
from services.pricing_service import (
    compute_totals,
    has_area_items,
    item_area,
    item_total,
    validate_order,
)
from utils.docx_helpers import add_label_value, set_cell_text
from utils.formatting import format_area, format_number, format_vnd

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

RIGHT = WD_ALIGN_PARAGRAPH.RIGHT
CENTER = WD_ALIGN_PARAGRAPH.CENTER

PAPER_HEADERS = ["Mô tả hàng hóa", "Q.Cách", "C.Dài", "SL", "ĐVT", "Số m²", "Đơn giá", "Thành tiền"]
UNIT_HEADERS = ["Mô tả hàng hóa", "Số lượng", "Đơn giá", "Thành tiền"]
DASH = "—"


def _item_row(item, paper_mode: bool) -> List[str]:
    is_area = item.mode is PricingMode.AREA
    price = format_vnd(item.price_buy)
    total = format_vnd(item_total(item))
    if paper_mode:
        return [
            item.name,
            format_number(item.width) if is_area else DASH,
            format_number(item.length) if is_area else DASH,
            format_number(item.quantity),
            item.unit.upper(),
            format_area(item_area(item)) if is_area else DASH,
            price,
            total,
        ]
    return [item.name, format_number(item.quantity), price, total]


def _totals_rows(order: Order) -> List[Tuple[str, str]]:
    totals = compute_totals(order)
    rows = [("Tạm tính:", f"{format_vnd(totals.subtotal)} đ")]
    if totals.discount_amount > 0:
        rows.append((
            f"Chiết khấu ({format_number(order.discount_percent)}%):",
            f"- {format_vnd(totals.discount_amount)} đ",
        ))
    rows.append(("Phí vận chuyển:", f"{format_vnd(order.shipping_cost)} đ"))
    rows.append(("Tiền xe (thu hộ):", f"{format_vnd(order.shipping_collection)} đ"))
    rows.append(("TỔNG CỘNG:", f"{format_vnd(totals.grand_total)} đ"))
    return rows


def build_invoice_document(order: Order) -> Document:
    """
    Customer-facing invoice. Cost and profit figures never appear here.
    Width / length / m² columns are shown only when a line is area priced.
    """
    doc = Document()
    style = doc.styles["Normal"]
    style.font.size = Pt(10)

    # Header
    header = doc.add_table(rows=1, cols=2)
    left, right = header.rows[0].cells
    set_cell_text(left, config.SHOP_NAME, bold=True, size=12)
    left.add_paragraph(config.SHOP_TAGLINE.upper())
    set_cell_text(right, "BÁO GIÁ VẬT TƯ", bold=True, align=RIGHT, size=16)
    order_no = right.add_paragraph(f"Số đơn: {order.order_no or 'N/A'}")
    order_no.alignment = RIGHT

    # Customer block
    add_label_value(doc, "Khách hàng:", order.customer_name or "................................")
    add_label_value(doc, "Ngày:", order.date)
    add_label_value(doc, "Số ĐT:", order.phone or "................")
    add_label_value(doc, "Địa chỉ:", order.address or "................")

    # Items
    paper_mode = has_area_items(order)
    headers = PAPER_HEADERS if paper_mode else UNIT_HEADERS
    table = doc.add_table(rows=1, cols=len(headers))
    table.style = "Table Grid"
    for cell, title in zip(table.rows[0].cells, headers):
        set_cell_text(cell, title.upper(), bold=True, align=CENTER if title == "ĐVT" else None)

    for item in order.items:
        cells = table.add_row().cells
        for idx, (cell, value) in enumerate(zip(cells, _item_row(item, paper_mode))):
            if idx == 0:
                set_cell_text(cell, value, bold=True)
            else:
                set_cell_text(cell, value, bold=idx == len(headers) - 1, align=RIGHT)

    # Totals
    doc.add_paragraph()
    totals_table = doc.add_table(rows=0, cols=2)
    for label, value in _totals_rows(order):
        is_grand = label.startswith("TỔNG")
        cells = totals_table.add_row().cells
        set_cell_text(cells[0], label, bold=is_grand)
        set_cell_text(cells[1], value, bold=is_grand, align=RIGHT, size=14 if is_grand else None)

    # Signatures
    doc.add_paragraph()
    signatures = doc.add_table(rows=2, cols=2)
    set_cell_text(signatures.rows[0].cells[0], "NGƯỜI LẬP BIỂU", bold=True, align=CENTER)
    set_cell_text(signatures.rows[0].cells[1], "KHÁCH HÀNG XÁC NHẬN", bold=True, align=CENTER)
    set_cell_text(signatures.rows[1].cells[0], config.SHOP_NAME, bold=True, align=CENTER)
    set_cell_text(signatures.rows[1].cells[1], "(Ký và ghi rõ họ tên)", align=CENTER)

    if order.notes:
        doc.add_paragraph()
        add_label_value(doc, "GHI CHÚ:", order.notes)

    return doc


def render_invoice_docx(order: Order) -> Tuple[bool, str, bytes]:
    """
    Returns (ok, message, docx_bytes). Refused while the order has a
    blocking error, so printed figures always match a valid order.
    """
    if validate_order(order).has_blocking_error:
        return False, "Đơn hàng còn lỗi, chưa thể in.", b""

    buffer = io.BytesIO()
    build_invoice_document(order).save(buffer)
    return True, "", buffer.getvalue()


def invoice_file_name(order: Order) -> str:
    safe_customer = (order.customer_name or "khach").strip().replace(" ", "_")
    return f"Bao_gia_{order.order_no or 'NA'}_{safe_customer}_{order.date}.docx"
