import streamlit as st
import pandas as pd

from data_integrator import LocalStore
from domain.models import Role
from services.assistant_service import OrderAssistant
from services.auth_service import PinGate
from services.history_service import OrderHistoryRepository
from services.sheet_sync_service import post_order_to_sheet
from utils.formatting import format_vnd

import config


def init_session() -> None:
    """Create the per-session repository, role and assistant once."""
    if "store" not in st.session_state:
        st.session_state["store"] = LocalStore()
    if "repo" not in st.session_state:
        st.session_state["repo"] = OrderHistoryRepository(st.session_state["store"])
    if "pin_gate" not in st.session_state:
        st.session_state["pin_gate"] = PinGate(st.session_state["store"])
    if "role" not in st.session_state:
        st.session_state["role"] = Role.SALE
    if "assistant" not in st.session_state:
        st.session_state["assistant"] = OrderAssistant()
    if "form_version" not in st.session_state:
        st.session_state["form_version"] = 0


def get_repo() -> OrderHistoryRepository:
    return st.session_state["repo"]


def get_role() -> Role:
    return st.session_state["role"]


def is_owner() -> bool:
    return get_role() is Role.OWNER


def reset_form_widgets() -> None:
    # widget keys carry the version, bumping it drops stale widget values
    st.session_state["form_version"] += 1


def role_badge() -> None:
    label = "Chủ Shop" if is_owner() else "Nhân Viên"
    st.sidebar.caption(f"Vai trò: **{label}**")


def _commit_and_sync(confirmed: bool) -> None:
    repo = get_repo()
    ok, msg, order = repo.commit_draft(role=get_role(), confirmed=confirmed)
    st.session_state["save_result"] = (ok, msg)
    if ok and config.SHEET_WEBHOOK_URL:
        sync_ok, sync_msg, _ = post_order_to_sheet(order)
        st.session_state["sync_result"] = (sync_ok, sync_msg)


@st.dialog("Xác nhận lưu đơn")
def confirm_below_cost_dialog(item_names):
    st.warning("⚠️ Có sản phẩm bán thấp hơn giá nhập. Bạn vẫn muốn lưu?")
    df = pd.DataFrame({"Sản phẩm": item_names})
    st.dataframe(df, hide_index=True)

    col_yes, col_no = st.columns(2)
    with col_yes:
        if st.button("Lưu", type="primary", key="confirm_save_yes"):
            _commit_and_sync(confirmed=True)
            st.rerun()
    with col_no:
        if st.button("Huỷ", key="confirm_save_no"):
            st.rerun()


def save_draft() -> None:
    """Save button handler: asks for confirmation when the owner sells below cost."""
    repo = get_repo()
    if repo.needs_save_confirmation(repo.draft, get_role()):
        validation_names = [
            item.name or f"Dòng {idx + 1}"
            for idx, item in enumerate(repo.draft.items)
            if 0 < item.price_buy < item.price_import
        ]
        confirm_below_cost_dialog(validation_names)
    else:
        _commit_and_sync(confirmed=False)


@st.dialog("Xác nhận xoá")
def confirm_delete_dialog(order_id: str, label: str):
    st.write(f"Bạn có chắc muốn xoá đơn **{label}**?")

    col_yes, col_no = st.columns(2)
    with col_yes:
        if st.button("Xoá", type="primary", key="confirm_delete_yes"):
            ok, msg, _ = get_repo().delete(order_id, get_role())
            st.session_state["history_result"] = (ok, msg)
            st.rerun()
    with col_no:
        if st.button("Huỷ", key="confirm_delete_no"):
            st.rerun()


@st.dialog("Xoá toàn bộ lịch sử")
def confirm_clear_dialog():
    st.write("Xoá toàn bộ lịch sử?")

    col_yes, col_no = st.columns(2)
    with col_yes:
        if st.button("Xoá hết", type="primary", key="confirm_clear_yes"):
            ok, msg, _ = get_repo().clear(get_role())
            st.session_state["history_result"] = (ok, msg)
            st.rerun()
    with col_no:
        if st.button("Huỷ", key="confirm_clear_no"):
            st.rerun()


def show_result(state_name: str) -> None:
    """Show and consume an (ok, message) result stored before a rerun."""
    result = st.session_state.pop(state_name, None)
    if not result:
        return
    ok, msg = result
    if ok:
        st.success(msg)
    else:
        st.error(msg)


def money(n: float) -> str:
    return f"{format_vnd(n)} đ"
