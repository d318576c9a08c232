"""
Dashboard-ready output functions.

These are the entry points for the Streamlit front end. Each function
returns plain dicts, strings or DataFrames suitable for rendering cards,
tables and charts.
"""

import logging
from datetime import date
from typing import Callable

import pandas as pd

from .config import (
    CURRENCY_SYMBOL,
    DISPLAY_DATE_FORMAT,
    MISSING_LABEL,
    MSG_EXPORT_EXCEL,
    MSG_EXPORT_PDF,
    MSG_NO_MATCHES,
    MSG_NO_RANGE,
    TABLE_COLUMNS,
    get_settings,
)
from .kpis import ReportResult, classify_performance

logger = logging.getLogger(__name__)


def format_currency(amount: float | None) -> str:
    """Format an amount with the rupee prefix and grouped thousands.

    Whole amounts carry no decimals; anything else is shown to 2 places.
    """
    if amount is None or pd.isna(amount):
        amount = 0
    if float(amount).is_integer():
        return f"{CURRENCY_SYMBOL}{int(amount):,}"
    return f"{CURRENCY_SYMBOL}{amount:,.2f}"


def format_date(value, tz: str | None = None) -> str:
    """Render a timestamp as dd/mm/YYYY in the report timezone, or N/A."""
    if value is None or pd.isna(value):
        return MISSING_LABEL
    ts = pd.Timestamp(value)
    if ts.tzinfo is not None:
        ts = ts.tz_convert(tz or get_settings().report_timezone)
    return ts.strftime(DISPLAY_DATE_FORMAT)


def _label(value) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)) or value == "":
        return MISSING_LABEL
    return str(value)


def get_report_overview(result: ReportResult) -> list[dict]:
    """Card definitions for the six summary metrics, in display order.

    Returns
    -------
    List of dicts: {"key", "label", "value", "caption"} where value is the
    display string.
    """
    m = result.metrics
    return [
        {
            "key": "total_registrations",
            "label": "Total Registrations",
            "value": str(m["total_registrations"]),
            "caption": "Filtered by date range",
        },
        {
            "key": "total_categories",
            "label": "Total Categories",
            "value": str(m["total_categories"]),
            "caption": "In filtered data",
        },
        {
            "key": "total_panchayaths",
            "label": "Total Panchayaths",
            "value": str(m["total_panchayaths"]),
            "caption": "In filtered data",
        },
        {
            "key": "total_fees_collected",
            "label": "Total Fees Collected",
            "value": format_currency(m["total_fees_collected"]),
            "caption": "Filtered by date range",
        },
        {
            "key": "pending_amount",
            "label": "Pending Amount",
            "value": format_currency(m["pending_amount"]),
            "caption": "Total pending fees",
        },
        {
            "key": "performance",
            "label": "Performance",
            "value": m["performance"],
            "caption": "Active registrations",
        },
    ]


def get_registration_table(filtered: pd.DataFrame, tz: str | None = None) -> pd.DataFrame:
    """Approved registrations table for display.

    Returns
    -------
    DataFrame with columns:
        Name, Mobile Number, Category, Fee Paid, Approved By, Approved Date
    """
    if filtered.empty:
        return pd.DataFrame(columns=TABLE_COLUMNS)

    table = pd.DataFrame({
        "Name": filtered["name"].map(_label),
        "Mobile Number": filtered["mobile_number"].map(_label),
        "Category": filtered["category_name"].map(_label),
        "Fee Paid": filtered["fee_paid"].map(format_currency),
        "Approved By": filtered["approved_by"].map(_label),
        "Approved Date": filtered["approved_at"].map(lambda v: format_date(v, tz)),
    })
    return table.reset_index(drop=True)


def get_empty_table_message(date_from: date | None, date_to: date | None) -> str:
    """Message shown in place of the table when no rows match."""
    if date_from is None and date_to is None:
        return MSG_NO_RANGE
    return MSG_NO_MATCHES


def get_category_performance(filtered: pd.DataFrame) -> pd.DataFrame:
    """Registration count and fee collected for each category.

    Returns
    -------
    DataFrame with columns:
        category, registrations, fees_collected
    sorted by fees_collected then registrations, descending.
    """
    columns = ["category", "registrations", "fees_collected"]
    if filtered.empty:
        return pd.DataFrame(columns=columns)

    df = filtered.copy()
    df["category"] = df["category_name"].map(_label)
    df["fee_paid"] = pd.to_numeric(df["fee_paid"], errors="coerce").fillna(0)

    result = (
        df.groupby("category", dropna=False)
        .agg(registrations=("id", "size"), fees_collected=("fee_paid", "sum"))
        .reset_index()
        .sort_values(["fees_collected", "registrations"], ascending=False, kind="stable")
        .reset_index(drop=True)
    )
    return result[columns]


def get_panchayath_performance(filtered: pd.DataFrame) -> pd.DataFrame:
    """Registrations, fees and performance grade for each panchayath.

    Registrations without a panchayath are left out.

    Returns
    -------
    DataFrame with columns:
        panchayath, district, registrations, fees_collected, performance
    """
    columns = ["panchayath", "district", "registrations", "fees_collected", "performance"]
    if filtered.empty:
        return pd.DataFrame(columns=columns)

    df = filtered[filtered["panchayath_id"].map(lambda v: _label(v) != MISSING_LABEL)].copy()
    if df.empty:
        return pd.DataFrame(columns=columns)

    df["panchayath"] = df["panchayath_name"].map(_label)
    df["district"] = df["panchayath_district"].map(_label)
    df["fee_paid"] = pd.to_numeric(df["fee_paid"], errors="coerce").fillna(0)

    result = (
        df.groupby(["panchayath_id", "panchayath", "district"])
        .agg(registrations=("id", "size"), fees_collected=("fee_paid", "sum"))
        .reset_index()
    )
    result["performance"] = result["registrations"].map(classify_performance)
    result = result.sort_values(
        ["registrations", "fees_collected"], ascending=False, kind="stable"
    ).reset_index(drop=True)

    logger.debug("Built panchayath performance for %d panchayaths", len(result))
    return result[columns]


def _export(kind: str, message: str, filtered, notify_success: Callable[[str], None]) -> None:
    rows = 0 if filtered is None else len(filtered)
    logger.info("Exporting %d registrations to %s", rows, kind)
    notify_success(message)


def export_excel(filtered: pd.DataFrame | None, notify_success: Callable[[str], None]) -> None:
    """Spreadsheet export placeholder: logs the request and notifies success."""
    _export("Excel", MSG_EXPORT_EXCEL, filtered, notify_success)


def export_pdf(filtered: pd.DataFrame | None, notify_success: Callable[[str], None]) -> None:
    """Document export placeholder: logs the request and notifies success."""
    _export("PDF", MSG_EXPORT_PDF, filtered, notify_success)
