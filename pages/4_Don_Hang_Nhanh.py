import streamlit as st
import pandas as pd

from domain.models import PricingMode
from element_component import init_session, money, role_badge
from services import draft_service
from services.pricing_service import compute_totals, item_area, item_total, validate_order
from services.sheet_sync_service import post_order_to_sheet
from utils.formatting import format_area

import config

# -----------------------------------------------------------------------------
# Page config
# -----------------------------------------------------------------------------
st.set_page_config(page_title="Đơn hàng nhanh", page_icon="⚡")
init_session()

st.sidebar.header("⚡ Đơn hàng nhanh")
role_badge()

st.title("⚡ Đơn hàng nhanh")
st.caption("Form rút gọn: gửi thẳng đơn lên Google Sheets, không lưu lịch sử.")

if not config.SHEET_WEBHOOK_URL:
    st.warning("Chưa cấu hình SHEET_WEBHOOK_URL, không thể gửi đơn.")

if "quick_order" not in st.session_state:
    st.session_state["quick_order"] = draft_service.new_draft()
    st.session_state["quick_version"] = st.session_state.get("quick_version", -1) + 1

order = st.session_state["quick_order"]
qv = st.session_state["quick_version"]

# -----------------------------------------------------------------------------
# 1) Customer
# -----------------------------------------------------------------------------
col_name, col_phone = st.columns(2)
with col_name:
    customer_name = st.text_input("Khách hàng", key=f"quick_customer_{qv}")
with col_phone:
    phone = st.text_input("Số điện thoại", key=f"quick_phone_{qv}")
address = st.text_input("Địa chỉ", key=f"quick_address_{qv}")

draft_service.update_order_fields(order, customer_name=customer_name, phone=phone, address=address)

st.divider()

# -----------------------------------------------------------------------------
# 2) Items
# -----------------------------------------------------------------------------
if st.button("➕ Thêm Item"):
    draft_service.add_item(order)

for i, item in enumerate(order.items):
    col_item, col_w, col_l, col_qty, col_price = st.columns([3, 1, 1, 1, 1.5])
    with col_item:
        name = st.text_input(f"Item {i + 1}", key=f"quick_name_{item.id}")
    draft_service.update_item(order, i, name=name)
    is_area = item.mode is PricingMode.AREA
    with col_w:
        width = st.number_input("Q.Cách", min_value=0.0, step=0.1, disabled=not is_area,
                                key=f"quick_w_{item.id}")
    with col_l:
        length = st.number_input("C.Dài", min_value=0.0, step=1.0, disabled=not is_area,
                                 key=f"quick_l_{item.id}")
    with col_qty:
        qty = st.number_input("SL", min_value=0.0, value=1.0, step=1.0, key=f"quick_qty_{item.id}")
    with col_price:
        price = st.number_input("Đơn giá", min_value=0.0, step=1000.0, key=f"quick_price_{item.id}")

    draft_service.update_item(order, i, width=width, length=length, quantity=qty, price_buy=price)

st.divider()

# -----------------------------------------------------------------------------
# 3) Summary & submit
# -----------------------------------------------------------------------------
validation = validate_order(order)
totals = compute_totals(order)

rows = [
    {
        "Item": item.name,
        "m²": format_area(item_area(item)) if item.mode is PricingMode.AREA else "-",
        "SL": item.quantity,
        "Thành tiền": money(item_total(item)),
    }
    for item in order.items
]
st.dataframe(pd.DataFrame(rows), hide_index=True, width="stretch")
st.metric("Tổng cộng", money(totals.grand_total))

if validation.has_blocking_error:
    st.info("Mỗi dòng cần thành tiền > 0 (giấy cần đủ Q.Cách và C.Dài).")

submitted = st.button("Gửi đơn", type="primary",
                      disabled=validation.has_blocking_error or not config.SHEET_WEBHOOK_URL)

if submitted:
    order.id = draft_service.new_id()
    ok, msg, _ = post_order_to_sheet(order)
    if ok:
        st.success(msg)
        del st.session_state["quick_order"]
    else:
        st.error(msg)
