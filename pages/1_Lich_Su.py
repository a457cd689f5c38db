import streamlit as st

from element_component import (
    confirm_clear_dialog,
    confirm_delete_dialog,
    get_repo,
    init_session,
    is_owner,
    money,
    reset_form_widgets,
    role_badge,
    show_result,
)
from services.export_service import csv_file_name, generate_share_text, history_to_csv
from services.invoice_service import DOCX_MIME, invoice_file_name, render_invoice_docx
from services.pricing_service import compute_totals

st.set_page_config(page_title="Lịch sử báo giá", page_icon="📚", layout="wide")
init_session()

st.sidebar.header("📚 Lịch sử báo giá")
role_badge()

repo = get_repo()
st.title("📚 Lịch sử báo giá")

if repo.load_error:
    st.error(f"Không đọc được dữ liệu lịch sử: {repo.load_error}")

show_result("history_result")

col_search, col_export, col_clear = st.columns([4, 1, 1])
with col_search:
    term = st.text_input("Tìm khách hàng, số điện thoại...", key="history_search")

if is_owner():
    with col_export:
        st.download_button(
            "Xuất Excel (CSV)",
            data=history_to_csv(repo.list_orders()),
            file_name=csv_file_name(),
            mime="text/csv",
            disabled=len(repo) == 0,
        )
    with col_clear:
        if st.button("Xoá Hết", disabled=len(repo) == 0):
            confirm_clear_dialog()

orders = repo.search(term)
if not orders:
    st.info("Chưa có đơn hàng nào.")
    st.stop()

cols = st.columns(3)
for i, order in enumerate(orders):
    totals = compute_totals(order)
    with cols[i % 3]:
        with st.container(border=True):
            st.caption(f"{order.date} · #{order.order_no or 'NO-ID'}")
            st.markdown(f"**{order.customer_name or 'Khách chưa đặt tên'}**")
            st.write(f"📞 {order.phone or 'N/A'}")
            st.markdown(f"Tổng: **{money(totals.grand_total)}**")
            if is_owner():
                st.caption(f"Lợi nhuận: {money(totals.profit)} ({totals.profit_margin:.1f}%)")

            b_edit, b_dup, b_share, b_print, b_del = st.columns(5)
            with b_edit:
                if st.button("✏️", key=f"edit_{order.id}", help="Mở chỉnh sửa"):
                    repo.load_into_draft(order.id)
                    reset_form_widgets()
                    st.switch_page("Bao_Gia.py")
            with b_dup:
                if st.button("📄", key=f"dup_{order.id}", help="Nhân bản đơn"):
                    repo.duplicate_into_draft(order.id)
                    reset_form_widgets()
                    st.session_state["save_result"] = (True, "Đã tạo đơn mới từ đơn cũ (Nhân bản)")
                    st.switch_page("Bao_Gia.py")
            with b_share:
                share = st.button("💬", key=f"share_{order.id}", help="Copy Zalo")
            if is_owner():
                with b_print:
                    ok, _, docx_bytes = render_invoice_docx(order)
                    st.download_button(
                        "🖨️",
                        data=docx_bytes,
                        file_name=invoice_file_name(order),
                        mime=DOCX_MIME,
                        key=f"print_{order.id}",
                        help="In báo giá",
                        disabled=not ok,
                    )
                with b_del:
                    if st.button("🗑️", key=f"del_{order.id}", help="Xoá đơn"):
                        confirm_delete_dialog(order.id, order.customer_name or order.id)

            if share:
                ok, msg, text = generate_share_text(order)
                if ok:
                    st.code(text, language=None)
                else:
                    st.error(msg)
