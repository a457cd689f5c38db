import streamlit as st
import pandas as pd

from element_component import get_repo, init_session, is_owner, money, role_badge
from services.stats_service import monthly_stats

st.set_page_config(page_title="Thống kê", page_icon="📈")
init_session()

st.sidebar.header("📈 Thống kê")
role_badge()

st.title("📈 Thống kê tháng")

if not is_owner():
    st.warning("Chỉ chủ shop được xem thống kê. Mở khoá tại trang Cài đặt.")
    st.stop()

stats = monthly_stats(get_repo().list_orders())

st.caption(f"Tháng {stats.month}")
col_rev, col_profit, col_count = st.columns(3)
col_rev.metric("Doanh thu", money(stats.revenue))
col_profit.metric("Lợi nhuận", money(stats.profit))
col_count.metric("Số đơn", stats.count)

st.subheader("Top khách hàng")
if stats.top_customers:
    df = pd.DataFrame(stats.top_customers, columns=["Khách hàng", "Doanh thu"])
    df["Doanh thu"] = df["Doanh thu"].apply(money)
    st.dataframe(df, hide_index=True, width="stretch")
else:
    st.info("Chưa có đơn hàng trong tháng này.")
