import logging
from datetime import date

import pandas as pd
import plotly.express as px
import streamlit as st

from lifetrack.activity import frequent_categories
from lifetrack.config import get_settings
from lifetrack.dates import month_title, shift_month, today_str
from lifetrack.domain import CALORIES, HEALTH_TYPES, LEDGER_TYPES, STEPS, EmergencyTransaction, Expense, HealthLog
from lifetrack.health import goal_logs
from lifetrack.ledger import history
from lifetrack.services import default_dashboard
from lifetrack.store import Store
from lifetrack.transforms import load_app_data, new_id

settings = get_settings()
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(page_title="LifeTrack", layout="wide")

if "store" not in st.session_state:
    st.session_state.store = Store(load_app_data(settings.data_path))
if "view_month" not in st.session_state:
    today = date.today()
    st.session_state.view_month = (today.year, today.month - 1)

store: Store = st.session_state.store
data = store.data

nav_prev, nav_title, nav_next = st.sidebar.columns([1, 3, 1])
if nav_prev.button("◀"):
    st.session_state.view_month = shift_month(*st.session_state.view_month, -1)
    st.rerun()
if nav_next.button("▶"):
    st.session_state.view_month = shift_month(*st.session_state.view_month, 1)
    st.rerun()
year, month0 = st.session_state.view_month
nav_title.markdown(f"**{month_title(year, month0)}**")

menu = st.sidebar.radio("Menu", ["🏠 Home", "📈 Investments", "💸 Money", "❤️ Health"])

report = default_dashboard(settings).report(data, year, month0)
result = report["result"]
for err in report["errors"]:
    st.sidebar.warning(f"{err['calculator']}: {err['error']}")


def trend_chart(trend, title: str, unit: str):
    df = pd.DataFrame(
        [{"Month": p.label, "Value": p.value, "Current": p.is_anchor} for p in trend]
    )
    fig = px.bar(df, x="Month", y="Value", color="Current", title=title,
                 labels={"Value": unit}, template="plotly_dark")
    fig.update_layout(showlegend=False, margin=dict(t=30, b=10, l=10, r=10))
    st.plotly_chart(fig, use_container_width=True)


if menu == "🏠 Home":
    nw = result["net_worth"]
    k1, k2, k3, k4 = st.columns(4)
    k1.metric("Net Worth", f"{nw.total.amount:,.0f} {nw.currency}")
    k2.metric("Investments", f"{nw.investments.amount:,.0f} {nw.currency}")
    k3.metric("Savings", f"{nw.savings.amount:,.0f} {nw.currency}")
    k4.metric("Emergency", f"{nw.emergency.amount:,.0f} {nw.currency}")

    s1, s2 = st.columns(2)
    s1.metric("Money", result["money_status"])
    s2.metric("Health", result["health_status"])
    st.info(result["coaching"])

    weight = result["weight"]
    if weight.projected is not None:
        st.caption(f"Projected weight in {settings.projection_periods} weigh-ins: {weight.projected:.1f} kg")

elif menu == "📈 Investments":
    portfolio = result["portfolio"]
    c1, c2, c3 = st.columns(3)
    c1.metric("Portfolio", f"€{portfolio.current_value:,.2f}")
    c2.metric("Invested", f"€{portfolio.invested_amount:,.2f}")
    c3.metric("Return", f"€{portfolio.change:,.2f}", f"{portfolio.change_percent:.1f}%")

    rows = [
        {
            "Asset": a.name,
            "Invested": a.invested_amount,
            "Value": a.current_value,
            "Return %": round(a.price_change_percent, 1),
            "Priced": a.has_price,
        }
        for a in portfolio.assets
    ]
    st.dataframe(pd.DataFrame(rows), use_container_width=True)

    month = result["investments"]
    m1, m2, m3 = st.columns(3)
    m1.metric("Net flow", f"€{month.flow.net_flow:,.2f}", month.comparison.percent_str)
    m2.metric("Month-end value", f"€{month.end_value:,.2f}", f"€{month.value_change:,.2f}")
    m3.metric("Withdrawn", f"€{month.flow.withdrawn:,.2f}")
    trend_chart(month.trend, "Net flow", "EUR")

    if month.movers:
        st.subheader("Top movers")
        st.table(pd.DataFrame([{"Asset": m.name, "Flow": m.amount} for m in month.movers]))

    st.subheader("Update prices")
    with st.form("prices"):
        prices = {
            a.asset_id: st.number_input(a.name, value=float(a.latest_price), step=0.01)
            for a in portfolio.assets
        }
        if st.form_submit_button("Save prices"):
            for asset_id, price in prices.items():
                if price > 0:
                    store.upsert_snapshot(asset_id, today_str(), price)
            st.rerun()

elif menu == "💸 Money":
    comparison = result["expense_comparison"]
    e1, e2 = st.columns(2)
    e1.metric("Spent", f"{result['expense_total']:,.2f} RON")
    e2.metric("vs last month", f"{comparison.diff:+,.2f} RON", comparison.percent_str, delta_color="inverse")
    trend_chart(result["expense_trend"], "Spending", "RON")

    if result["top_categories"]:
        df_cat = pd.DataFrame(result["top_categories"], columns=["Category", "Total"])
        st.plotly_chart(px.pie(df_cat, values="Total", names="Category", title="Top categories"),
                        use_container_width=True)

    st.subheader("Add expense")
    common = frequent_categories(data.settings.expense_categories, data.expenses, settings.top_categories_limit)
    ordered = list(common) + [c for c in data.settings.expense_categories if c not in common]
    with st.form("expense", clear_on_submit=True):
        amount = st.number_input("Amount (RON)", min_value=0.0, step=1.0)
        category = st.selectbox("Category", ordered)
        merchant = st.text_input("Merchant")
        spent_on = st.date_input("Date", value=date.today())
        if st.form_submit_button("Add") and amount > 0:
            store.add("expenses", Expense(id=new_id(), amount=amount, date=spent_on.isoformat(),
                                          category=category, merchant=merchant))
            st.rerun()

    st.subheader("Savings")
    for bucket in result["savings"]:
        st.metric(bucket.name, f"{bucket.balance:,.2f} RON")
        if bucket.progress is not None:
            st.progress(max(0.0, bucket.progress) / 100)

    emergency = result["emergency"]
    st.subheader("Emergency fund")
    st.metric("Balance", f"{emergency.balance:,.2f} RON", f"{emergency.remaining:,.2f} RON to go")
    if emergency.progress is not None:
        st.progress(max(0.0, emergency.progress) / 100)
    for alert in store.alerts:
        st.success(alert["alert"])

    with st.form("emergency", clear_on_submit=True):
        amount = st.number_input("Amount (RON)", min_value=0.0, step=10.0)
        type_ = st.radio("Type", LEDGER_TYPES, horizontal=True)
        if st.form_submit_button("Record") and amount > 0:
            store.add("emergency_transactions", EmergencyTransaction(
                id=new_id(), amount=amount, date=today_str(), type=type_))
            st.rerun()
    rows = history(data.emergency_transactions)
    if rows:
        st.dataframe(pd.DataFrame([{"Date": t.date, "Type": t.type, "Amount": t.amount} for t in rows]),
                     use_container_width=True)

elif menu == "❤️ Health":
    weight = result["weight"]
    h1, h2, h3 = st.columns(3)
    h1.metric("Weight", f"{weight.current or '--'} kg", f"{weight.change:+.1f} kg")
    h2.metric("BMI", weight.bmi.map(lambda v: f"{v:.1f}").get_or_else("--"),
              weight.category.get_or_else(""))
    h3.metric("Trend / entry", f"{weight.trend:+.2f} kg")

    for type_, target in ((STEPS, data.settings.step_target), (CALORIES, data.settings.calorie_target)):
        rows = goal_logs(data.health_logs, type_, target)
        if not rows:
            continue
        st.subheader(type_)
        st.table(pd.DataFrame([
            {"Date": r.log.date, "Value": r.log.value, "Goal %": r.progress} for r in rows[:14]
        ]))

    st.subheader("Log")
    with st.form("health", clear_on_submit=True):
        type_ = st.selectbox("Type", HEALTH_TYPES)
        value = st.number_input("Value", min_value=0.0, step=0.1)
        if st.form_submit_button("Save") and value > 0:
            store.add("health_logs", HealthLog(id=new_id(), date=today_str(), type=type_, value=value))
            st.rerun()
