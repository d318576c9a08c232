from datetime import date

import pytest

from registration_reports.config import (
    MSG_EXPORT_EXCEL,
    MSG_EXPORT_PDF,
    MSG_NO_MATCHES,
    MSG_NO_RANGE,
    TABLE_COLUMNS,
)
from registration_reports.dashboard import (
    export_excel,
    export_pdf,
    format_currency,
    format_date,
    get_category_performance,
    get_empty_table_message,
    get_panchayath_performance,
    get_registration_table,
    get_report_overview,
)
from registration_reports.kpis import ReportInputs, build_report, compute_metrics
from registration_reports.loaders.utils import empty_registrations


@pytest.fixture
def approved(registrations):
    return registrations([
        {"name": "Anitha", "fee_paid": 500, "approved_at": "2024-01-05T10:00:00+00:00",
         "category_id": "c1", "category_name": "Farmelife", "panchayath_id": "p1"},
        {"name": "Biju", "fee_paid": 1000, "approved_at": "2024-01-06T10:00:00+00:00",
         "category_id": "c2", "category_name": "Entrelife", "panchayath_id": "p1"},
        {"name": "Fathima", "fee_paid": None, "approved_at": None, "approved_by": None,
         "category_id": None, "category_name": None, "panchayath_id": None,
         "panchayath_name": None, "panchayath_district": None},
    ])


@pytest.mark.parametrize(
    "amount, expected",
    [(0, "₹0"), (1234, "₹1,234"), (1234.5, "₹1,234.50"), (None, "₹0"), (1_000_000.0, "₹1,000,000")],
)
def test_format_currency(amount, expected):
    assert format_currency(amount) == expected


def test_format_date_uses_day_month_year():
    assert format_date("2024-01-05T10:00:00+00:00", tz="UTC") == "05/01/2024"
    assert format_date(None) == "N/A"


def test_overview_cards_in_display_order(approved):
    result = build_report(ReportInputs(approved, empty_registrations(), tz="UTC"))

    cards = get_report_overview(result)

    assert [c["label"] for c in cards] == [
        "Total Registrations", "Total Categories", "Total Panchayaths",
        "Total Fees Collected", "Pending Amount", "Performance",
    ]
    values = {c["key"]: c["value"] for c in cards}
    assert values["total_registrations"] == "3"
    assert values["total_fees_collected"] == "₹1,500"
    assert values["pending_amount"] == "₹0"
    assert values["performance"] == "Fair"


def test_registration_table_columns_and_fallbacks(approved):
    table = get_registration_table(approved, tz="UTC")

    assert list(table.columns) == TABLE_COLUMNS
    assert table.loc[0].tolist() == ["Anitha", "9000000000", "Farmelife", "₹500", "admin", "05/01/2024"]
    assert table.loc[2, "Category"] == "N/A"
    assert table.loc[2, "Fee Paid"] == "₹0"
    assert table.loc[2, "Approved By"] == "N/A"
    assert table.loc[2, "Approved Date"] == "N/A"


def test_registration_table_empty():
    table = get_registration_table(empty_registrations())

    assert table.empty
    assert list(table.columns) == TABLE_COLUMNS


def test_empty_table_message_depends_on_range():
    assert get_empty_table_message(None, None) == MSG_NO_RANGE
    assert get_empty_table_message(date(2024, 1, 1), None) == MSG_NO_MATCHES
    assert get_empty_table_message(None, date(2024, 1, 1)) == MSG_NO_MATCHES


def test_category_performance_totals_match_metrics(approved):
    breakdown = get_category_performance(approved)
    metrics = compute_metrics(approved, empty_registrations())

    assert breakdown["registrations"].sum() == metrics["total_registrations"]
    assert breakdown["fees_collected"].sum() == metrics["total_fees_collected"]
    assert breakdown.loc[0, "category"] == "Entrelife"
    assert "N/A" in breakdown["category"].tolist()


def test_panchayath_performance_skips_unassigned(approved):
    breakdown = get_panchayath_performance(approved)

    assert len(breakdown) == 1
    row = breakdown.loc[0]
    assert row["panchayath"] == "Kodur"
    assert row["district"] == "Malappuram"
    assert row["registrations"] == 2
    assert row["fees_collected"] == 1500
    assert row["performance"] == "Fair"


def test_breakdowns_on_empty_input():
    assert get_category_performance(empty_registrations()).empty
    assert get_panchayath_performance(empty_registrations()).empty


@pytest.mark.parametrize("export, message", [(export_excel, MSG_EXPORT_EXCEL), (export_pdf, MSG_EXPORT_PDF)])
@pytest.mark.parametrize("rows", ["empty", "none", "full"])
def test_exports_always_notify_success(export, message, rows, approved, notifier):
    frames = {"empty": empty_registrations(), "none": None, "full": approved}

    export(frames[rows], notifier)

    assert notifier.messages == [message]
