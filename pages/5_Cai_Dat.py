import streamlit as st

from domain.models import Role
from element_component import get_repo, init_session, is_owner, role_badge, show_result

st.set_page_config(page_title="Cài đặt", page_icon="⚙️")
init_session()

st.sidebar.header("⚙️ Cài đặt")
role_badge()

gate = st.session_state["pin_gate"]

st.title("⚙️ Cài đặt")
show_result("settings_result")

if not is_owner():
    has_pin = gate.has_pin()
    st.subheader("Mở khoá chủ shop" if has_pin else "Thiết lập PIN chủ shop")

    with st.form("pin_form", enter_to_submit=True):
        pin = st.text_input("PIN (4-6 số)", type="password", max_chars=6)
        submitted = st.form_submit_button("Xác nhận")

    if submitted:
        ok, msg, role = gate.verify(pin) if has_pin else gate.setup(pin)
        if ok:
            st.session_state["role"] = role
            st.session_state["settings_result"] = (True, msg or "Đã mở khoá chủ shop")
            st.rerun()
        else:
            st.error(msg)
    st.stop()

st.subheader("Chủ shop")

show_cost = st.toggle("Hiện giá nhập & lợi nhuận trên màn hình", value=gate.get_show_cost())
if show_cost != gate.get_show_cost():
    ok, msg, _ = gate.set_show_cost(show_cost)
    if not ok:
        st.error(msg)

with st.form("change_pin_form", clear_on_submit=True):
    new_pin = st.text_input("Đổi mã PIN (4-6 số)", type="password", max_chars=6)
    change_clicked = st.form_submit_button("Đổi PIN")

if change_clicked:
    ok, msg, _ = gate.change_pin(new_pin, st.session_state["role"])
    if ok:
        st.success(msg)
    else:
        st.error(msg)

if st.button("Đăng xuất"):
    st.session_state["role"] = Role.SALE
    st.rerun()

st.divider()
st.subheader("Vùng nguy hiểm")
st.caption("Xoá TOÀN BỘ dữ liệu đơn hàng và cài đặt PIN.")
confirm = st.checkbox("Tôi hiểu thao tác này không thể hoàn tác")
if st.button("Xoá toàn bộ dữ liệu", type="primary", disabled=not confirm):
    ok, msg, _ = gate.reset_all()
    if ok:
        get_repo().reload()
        st.session_state["role"] = Role.SALE
        st.session_state["settings_result"] = (True, "Đã xoá toàn bộ dữ liệu")
        st.rerun()
    else:
        st.error(msg)
