import streamlit as st

from element_component import get_repo, get_role, init_session, is_owner, role_badge
from services.assistant_service import QUICK_PROMPTS
from services.stats_service import monthly_stats

st.set_page_config(page_title="Trợ lý AI", page_icon="✨")
init_session()

st.sidebar.header("✨ Trợ lý AI")
role_badge()

st.title("✨ Trợ lý AI")

assistant = st.session_state["assistant"]
repo = get_repo()

if not assistant.enabled:
    st.warning("Chưa cấu hình GEMINI_API_KEY, trợ lý AI đang tắt.")


def ask(prompt: str) -> None:
    stats = monthly_stats(repo.list_orders()) if is_owner() else None
    with st.spinner("Đang suy nghĩ..."):
        assistant.ask(prompt, repo.draft, get_role(), stats)


if not assistant.messages:
    st.caption("Gợi ý:")
    cols = st.columns(len(QUICK_PROMPTS))
    for col, (label, (prompt, owner_only)) in zip(cols, QUICK_PROMPTS.items()):
        if owner_only and not is_owner():
            continue
        with col:
            if st.button(label, key=f"quick_{label}"):
                ask(prompt)
                st.rerun()

for msg in assistant.messages:
    with st.chat_message("user" if msg["role"] == "user" else "assistant"):
        st.write(msg["text"])

prompt = st.chat_input("Hỏi trợ lý...")
if prompt:
    ask(prompt)
    st.rerun()

if assistant.messages and st.button("Xoá hội thoại"):
    assistant.reset()
    st.rerun()
