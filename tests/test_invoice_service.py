import io
import os
import sys
import tempfile
import unittest
from pathlib import Path

from docx import Document

PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from data_integrator import LocalStore
from domain.models import Order, OrderItem, PricingMode
from services.history_service import OrderHistoryRepository
from services.invoice_service import (
    PAPER_HEADERS,
    UNIT_HEADERS,
    build_invoice_document,
    invoice_file_name,
    render_invoice_docx,
)


def unit_item(**kwargs):
    fields = dict(id="m", name="Mực in", mode=PricingMode.UNIT, quantity=2, price_buy=150000,
                  price_import=100000)
    fields.update(kwargs)
    return OrderItem(**fields)


def paper_item(**kwargs):
    fields = dict(id="p", name="Giấy in bạt", mode=PricingMode.AREA, width=1.5, length=20, quantity=1,
                  unit="Cuộn", price_buy=10000, price_import=7000)
    fields.update(kwargs)
    return OrderItem(**fields)


def all_text(doc) -> str:
    parts = [p.text for p in doc.paragraphs]
    for table in doc.tables:
        for row in table.rows:
            for cell in row.cells:
                parts.append(cell.text)
    return "\n".join(parts)


class TestInvoice(unittest.TestCase):
    def test_unit_only_layout(self):
        order = Order(customer_name="Chị Mai", date="2026-10-19", order_no="5", items=[unit_item()])
        doc = build_invoice_document(order)
        items_table = doc.tables[1]
        headers = [c.text for c in items_table.rows[0].cells]
        self.assertEqual(headers, [h.upper() for h in UNIT_HEADERS])
        self.assertEqual(len(items_table.rows), 2)
        self.assertEqual(items_table.rows[1].cells[-1].text, "300.000")

    def test_paper_layout_and_totals(self):
        order = Order(
            customer_name="Xưởng A",
            date="2026-10-19",
            discount_percent=10,
            shipping_cost=20000,
            shipping_collection=40000,
            notes="Giao trước 5h",
            items=[paper_item(), unit_item()],
        )
        doc = build_invoice_document(order)
        items_table = doc.tables[1]
        headers = [c.text for c in items_table.rows[0].cells]
        self.assertEqual(headers, [h.upper() for h in PAPER_HEADERS])

        paper_row = [c.text for c in items_table.rows[1].cells]
        self.assertEqual(paper_row[1:6], ["1.5", "20", "1", "CUỘN", "30.00"])
        unit_row = [c.text for c in items_table.rows[2].cells]
        self.assertEqual(unit_row[1], "—")
        self.assertEqual(unit_row[5], "—")

        text = all_text(doc)
        # 300.000 + 300.000 = 600.000, -60.000, +20.000 +40.000
        self.assertIn("- 60.000 đ", text)
        self.assertIn("600.000 đ", text)
        self.assertIn("TỔNG CỘNG:", text)
        self.assertIn("600.000 đ", text)
        self.assertIn("Giao trước 5h", text)

    def test_no_discount_line_without_discount(self):
        order = Order(date="2026-10-19", items=[unit_item()])
        text = all_text(build_invoice_document(order))
        self.assertNotIn("Chiết khấu", text)

    def test_cost_figures_never_printed(self):
        order = Order(date="2026-10-19", items=[unit_item(price_import=123456)])
        self.assertNotIn("123.456", all_text(build_invoice_document(order)))

    def test_render_refuses_blocking_error(self):
        order = Order(date="2026-10-19", items=[paper_item(width=0)])
        ok, msg, data = render_invoice_docx(order)
        self.assertFalse(ok)
        self.assertEqual(data, b"")

    def test_render_produces_docx(self):
        order = Order(date="2026-10-19", items=[unit_item()])
        ok, _, data = render_invoice_docx(order)
        self.assertTrue(ok)
        reopened = Document(io.BytesIO(data))
        self.assertGreaterEqual(len(reopened.tables), 3)

    def test_saved_order_renders_from_history(self):
        with tempfile.TemporaryDirectory() as tmp:
            repo = OrderHistoryRepository(LocalStore(Path(tmp) / "store.json"))
            repo.draft.customer_name = "Chị Hoa"
            repo.draft.items = [paper_item()]
            ok, _, committed = repo.commit_draft()
            self.assertTrue(ok)

            saved = OrderHistoryRepository(LocalStore(Path(tmp) / "store.json")).get(committed.id)
        ok, _, data = render_invoice_docx(saved)
        self.assertTrue(ok)
        self.assertIn("Chị Hoa", all_text(Document(io.BytesIO(data))))

    def test_file_name(self):
        order = Order(customer_name="Anh Ba", date="2026-10-19", order_no="9")
        self.assertEqual(invoice_file_name(order), "Bao_gia_9_Anh_Ba_2026-10-19.docx")


if __name__ == "__main__":
    unittest.main()
