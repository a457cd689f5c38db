import streamlit as st
from datetime import date

from domain.models import PricingMode
from element_component import (
    get_repo,
    init_session,
    is_owner,
    money,
    reset_form_widgets,
    role_badge,
    save_draft,
    show_result,
)
from services import draft_service
from services.export_service import generate_share_text
from services.invoice_service import DOCX_MIME, invoice_file_name, render_invoice_docx
from services.pricing_service import compute_totals, item_area, item_total, validate_item, validate_order
from utils.formatting import format_area, format_number

import config

st.set_page_config(page_title=f"{config.SHOP_NAME} - Lập báo giá", page_icon="🧾", layout="wide")
init_session()

st.sidebar.header("🧾 Lập báo giá")
role_badge()

repo = get_repo()
draft = repo.draft
v = st.session_state["form_version"]
show_cost = is_owner() and st.session_state["pin_gate"].get_show_cost()

st.title(f"🧾 {config.SHOP_NAME}")
show_result("save_result")
show_result("sync_result")

# -----------------------------------------------------------------------------
# 1) Customer
# -----------------------------------------------------------------------------
st.subheader("Thông tin khách hàng")
col_name, col_phone, col_date, col_no = st.columns([3, 2, 1.5, 1])

with col_name:
    customer_name = st.text_input("Khách hàng / Xưởng", value=draft.customer_name,
                                  placeholder="Tên khách hàng...", key=f"customer_name_{v}")
with col_phone:
    phone = st.text_input("Số điện thoại", value=draft.phone, placeholder="09xxx...", key=f"phone_{v}")
with col_date:
    try:
        initial_date = date.fromisoformat(draft.date)
    except ValueError:
        initial_date = date.today()
    order_date = st.date_input("Ngày", value=initial_date, key=f"date_{v}")
with col_no:
    order_no = st.text_input("Số đơn", value=draft.order_no, placeholder="No.", key=f"order_no_{v}")

address = st.text_area("Địa chỉ & Ghi chú giao nhận", value=draft.address, height=68,
                       placeholder="Địa chỉ, Chành xe, ghi chú đơn hàng...", key=f"address_{v}")
notes = st.text_input("Ghi chú in trên báo giá", value=draft.notes, key=f"notes_{v}")

draft_service.update_order_fields(
    draft,
    customer_name=customer_name,
    phone=phone,
    date=order_date.isoformat(),
    order_no=order_no,
    address=address,
    notes=notes,
)

st.divider()

# -----------------------------------------------------------------------------
# 2) Items
# -----------------------------------------------------------------------------
st.subheader("Danh sách hàng")

remove_index = None
for idx, item in enumerate(draft.items):
    widths = [3, 1, 1, 1, 1, 1.5] + ([1.5] if show_cost else []) + [1.5, 0.5]
    cols = st.columns(widths)
    k = f"{item.id}_{v}"

    with cols[0]:
        name = st.text_input(f"Vật tư #{idx + 1}", value=item.name, placeholder="Vật tư...", key=f"name_{k}")
    if name != item.name:
        draft_service.update_item(draft, idx, name=name)
        if item.mode is PricingMode.AREA:
            st.session_state[f"unit_{k}"] = item.unit
    st.session_state.setdefault(f"unit_{k}", item.unit)

    is_area = item.mode is PricingMode.AREA
    with cols[1]:
        width = st.number_input("Q.Cách (m)", min_value=0.0, value=float(item.width), step=0.1,
                                disabled=not is_area, key=f"width_{k}")
    with cols[2]:
        length = st.number_input("C.Dài (m)", min_value=0.0, value=float(item.length), step=1.0,
                                 disabled=not is_area, key=f"length_{k}")
    with cols[3]:
        quantity = st.number_input("SL", min_value=0.0, value=float(item.quantity), step=1.0, key=f"qty_{k}")
    with cols[4]:
        unit = st.text_input("ĐVT", key=f"unit_{k}")
    with cols[5]:
        price_buy = st.number_input("Đơn giá", min_value=0.0, value=float(item.price_buy), step=1000.0,
                                    key=f"price_buy_{k}")
    fields = dict(width=width, length=length, quantity=quantity, unit=unit, price_buy=price_buy)

    if show_cost:
        with cols[6]:
            fields["price_import"] = st.number_input("Giá nhập", min_value=0.0, value=float(item.price_import),
                                                     step=1000.0, key=f"price_import_{k}")

    draft_service.update_item(draft, idx, **fields)
    check = validate_item(item)

    with cols[-2]:
        st.markdown("Thành tiền")
        st.markdown(f"**{money(item_total(item))}**")
        if is_area:
            st.caption(f"{format_area(item_area(item))} m²")
    with cols[-1]:
        st.markdown("&nbsp;")
        if st.button("✖", key=f"remove_{k}", disabled=len(draft.items) <= 1):
            remove_index = idx

    if check.paper_error:
        st.error("Thiếu kích thước (Q.Cách / C.Dài)")
    if check.zero_total:
        st.warning("⚠️ Thành tiền = 0")
    if is_owner() and check.price_warning:
        st.warning("⚠️ Lỗ vốn: giá bán thấp hơn giá nhập")

if remove_index is not None:
    draft_service.remove_item(draft, remove_index)
    st.rerun()

if st.button("➕ Thêm dòng hàng"):
    draft_service.add_item(draft)
    st.rerun()

st.divider()

# -----------------------------------------------------------------------------
# 3) Costs & discount
# -----------------------------------------------------------------------------
st.subheader("Chi phí & Chiết khấu")
col_ship, col_collect, col_discount = st.columns(3)
with col_ship:
    shipping_cost = st.number_input("Phí ship", min_value=0.0, value=float(draft.shipping_cost),
                                    step=1000.0, key=f"shipping_cost_{v}")
with col_collect:
    shipping_collection = st.number_input("Tiền xe (thu hộ)", min_value=0.0,
                                          value=float(draft.shipping_collection), step=1000.0,
                                          key=f"shipping_collection_{v}")
with col_discount:
    discount_percent = st.number_input("Chiết khấu (%)", min_value=0.0, max_value=100.0,
                                       value=float(draft.discount_percent), step=1.0,
                                       key=f"discount_percent_{v}")

draft_service.update_order_fields(
    draft,
    shipping_cost=shipping_cost,
    shipping_collection=shipping_collection,
    discount_percent=discount_percent,
)

# -----------------------------------------------------------------------------
# 4) Totals & actions
# -----------------------------------------------------------------------------
totals = compute_totals(draft)
validation = validate_order(draft)

col_sub, col_disc, col_grand = st.columns(3)
col_sub.metric("Tạm tính", money(totals.subtotal))
col_disc.metric(f"Chiết khấu ({format_number(draft.discount_percent)}%)", money(totals.discount_amount))
col_grand.metric("Tổng thanh toán", money(totals.grand_total))

if show_cost:
    col_cost, col_profit = st.columns(2)
    col_cost.metric("Tổng vốn", money(totals.total_import_cost))
    col_profit.metric(f"Lợi nhuận ({totals.profit_margin:.1f}%)", money(totals.profit))

if validation.has_blocking_error:
    st.info("Đơn hàng còn lỗi: sửa các dòng được đánh dấu để lưu, in hoặc chia sẻ.")

col_new, col_share, col_save, col_print = st.columns(4)

with col_new:
    if st.button("🗑️ Làm mới form"):
        repo.new_draft()
        reset_form_widgets()
        st.rerun()

with col_share:
    share_clicked = st.button("Copy Zalo", disabled=validation.has_blocking_error)

with col_save:
    if st.button("Lưu Đơn", disabled=validation.has_blocking_error):
        save_draft()
        if "save_result" in st.session_state:
            st.rerun()

with col_print:
    ok, msg, docx_bytes = render_invoice_docx(draft)
    st.download_button(
        "In Báo Giá",
        data=docx_bytes,
        file_name=invoice_file_name(draft),
        mime=DOCX_MIME,
        type="primary",
        disabled=not ok,
    )

if share_clicked:
    ok, msg, text = generate_share_text(draft)
    if ok:
        st.code(text, language=None)
    else:
        st.error(msg)
