"""
Registration Reports: Interactive Admin Screen

Run with:  streamlit run app.py
"""

import logging
import sys
from pathlib import Path

import plotly.graph_objects as go
import streamlit as st

sys.path.insert(0, str(Path(__file__).resolve().parent))

from registration_reports.config import SCREEN_TITLE, get_settings
from registration_reports.dashboard import (
    export_excel,
    export_pdf,
    get_category_performance,
    get_empty_table_message,
    get_panchayath_performance,
    get_registration_table,
    get_report_overview,
)
from registration_reports.loaders import make_source
from registration_reports.state import ReportState

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title=SCREEN_TITLE,
    page_icon="📋",
    layout="wide",
)

CARD_COLORS = {
    "total_registrations": "#2563eb",
    "total_categories": "#9333ea",
    "total_panchayaths": "#2563eb",
    "total_fees_collected": "#16a34a",
    "pending_amount": "#ea580c",
    "performance": "#16a34a",
}


def notify_error(message: str) -> None:
    st.toast(message, icon="❌")


def notify_success(message: str) -> None:
    st.toast(message, icon="✅")


# ---------------------------------------------------------------------------
# State (one per browser session, loaded once)
# ---------------------------------------------------------------------------
PENDING_POLL_SECONDS = 1

if "report_state" not in st.session_state:
    state = ReportState(tz=settings.report_timezone)
    with st.spinner("Loading reports..."):
        state.load(make_source(settings), notify_error)
    st.session_state["report_state"] = state

state: ReportState = st.session_state["report_state"]
state.collect_pending()


@st.fragment(run_every=PENDING_POLL_SECONDS)
def _watch_pending():
    # Rerun the whole screen once, so the pending amount card picks it up
    if state.collect_pending():
        st.rerun()


def _on_clear():
    st.session_state["date_from"] = None
    st.session_state["date_to"] = None
    state.clear_range()


# ---------------------------------------------------------------------------
# Helper: metric card
# ---------------------------------------------------------------------------
def metric_card(label: str, value: str, caption: str, color: str):
    st.markdown(
        f"""
        <div style="background: {color}11; border-left: 4px solid {color};
                    border-radius: 8px; padding: 16px; margin-bottom: 8px;">
            <div style="font-size: 13px; color: #666; font-weight: 600;">{label}</div>
            <div style="font-size: 26px; font-weight: 700; color: {color}; margin: 4px 0;">{value}</div>
            <div style="font-size: 12px; color: #888;">{caption}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


st.title(SCREEN_TITLE)

# ===========================================================================
# Date Range Filter
# ===========================================================================
st.subheader("Date Range Filter")
col_from, col_to, col_clear = st.columns([2, 2, 1])
with col_from:
    date_from = st.date_input("From:", value=None, format="DD/MM/YYYY", key="date_from")
with col_to:
    date_to = st.date_input("To:", value=None, format="DD/MM/YYYY", key="date_to")
with col_clear:
    st.write("")
    st.button("Clear", type="primary", on_click=_on_clear)

state.set_range(date_from, date_to)
st.caption("Filters Total Registrations, Fee Collection, and Pending Amount")

result = state.report()
filtered = result.filtered

# ===========================================================================
# Dashboard Metrics
# ===========================================================================
cols = st.columns(6)
for i, card in enumerate(get_report_overview(result)):
    with cols[i]:
        metric_card(card["label"], card["value"], card["caption"], CARD_COLORS[card["key"]])

if state.pending_loading:
    st.caption("Loading pending registrations...")
    _watch_pending()

st.divider()

# ===========================================================================
# Performance Reports
# ===========================================================================
tab_panchayath, tab_category = st.tabs(
    ["Panchayath Performance Report", "Category Performance Report"]
)

with tab_panchayath:
    st.caption("Performance grading based on registrations and revenue collection")
    panchayaths = get_panchayath_performance(filtered)
    if panchayaths.empty:
        st.info("No panchayath data in the selected range.")
    else:
        fig = go.Figure(go.Bar(
            x=panchayaths["panchayath"],
            y=panchayaths["registrations"],
            marker_color="#ca8a04",
            text=panchayaths["performance"],
            textposition="outside",
        ))
        fig.update_layout(
            height=350,
            yaxis_title="Registrations",
            plot_bgcolor="rgba(0,0,0,0)",
            margin=dict(l=10, r=10, t=10, b=40),
        )
        st.plotly_chart(fig, use_container_width=True)
        st.dataframe(panchayaths, use_container_width=True, hide_index=True)

    b1, b2, _ = st.columns([1, 1, 4])
    with b1:
        st.button("Export Excel", key="panchayath_excel",
                  on_click=export_excel, args=(filtered, notify_success))
    with b2:
        st.button("Export PDF", key="panchayath_pdf",
                  on_click=export_pdf, args=(filtered, notify_success))

with tab_category:
    st.caption("Total fee collected and registration count for each category")
    categories = get_category_performance(filtered)
    if categories.empty:
        st.info("No category data in the selected range.")
    else:
        fig = go.Figure()
        fig.add_trace(go.Bar(
            x=categories["category"],
            y=categories["fees_collected"],
            name="Fees Collected",
            marker_color="#16a34a",
        ))
        fig.add_trace(go.Scatter(
            x=categories["category"],
            y=categories["registrations"],
            name="Registrations",
            mode="markers",
            marker=dict(size=10, color="#2563eb"),
            yaxis="y2",
        ))
        fig.update_layout(
            height=350,
            yaxis=dict(title="Fees"),
            yaxis2=dict(title="Registrations", overlaying="y", side="right"),
            plot_bgcolor="rgba(0,0,0,0)",
            margin=dict(l=10, r=10, t=10, b=40),
        )
        st.plotly_chart(fig, use_container_width=True)
        st.dataframe(categories, use_container_width=True, hide_index=True)

st.divider()

# ===========================================================================
# Approved Registrations Table
# ===========================================================================
head, b1, b2 = st.columns([4, 1, 1])
with head:
    st.subheader(f"Approved Registrations in Date Range ({len(filtered)})")
with b1:
    st.button("Export Excel", key="table_excel",
              on_click=export_excel, args=(filtered, notify_success))
with b2:
    st.button("Export PDF", key="table_pdf",
              on_click=export_pdf, args=(filtered, notify_success))

if filtered.empty:
    st.info(get_empty_table_message(state.date_from, state.date_to))
else:
    st.dataframe(
        get_registration_table(filtered, tz=settings.report_timezone),
        use_container_width=True,
        hide_index=True,
    )
