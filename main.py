"""
Registration Reports: end-to-end reporting pipeline.

Loads registrations from the configured source, applies an optional
approval date range, and prints the dashboard outputs.

Usage:
    python main.py
    python main.py --from 2026-09-01 --to 2026-09-30
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from registration_reports.config import SCREEN_TITLE, get_settings
from registration_reports.dashboard import (
    export_excel,
    get_category_performance,
    get_empty_table_message,
    get_panchayath_performance,
    get_registration_table,
    get_report_overview,
)
from registration_reports.loaders import make_source
from registration_reports.state import ReportState

logger = logging.getLogger(__name__)


app = typer.Typer(help="Registration Reports pipeline.")


@app.command()
def report(
    date_from: Optional[datetime] = typer.Option(
        None, "--from", formats=["%Y-%m-%d"], help="First approval day to include."
    ),
    date_to: Optional[datetime] = typer.Option(
        None, "--to", formats=["%Y-%m-%d"], help="Last approval day to include."
    ),
) -> None:
    """Run the reporting pipeline and print the screen contents."""
    day_from = date_from.date() if date_from else None
    day_to = date_to.date() if date_to else None
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
    )

    print("=" * 70)
    print(f"  {SCREEN_TITLE.upper()}")
    print(f"  Source: {settings.report_source}")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Load registrations
    # ------------------------------------------------------------------
    print("[ 1 ] LOADING REGISTRATIONS")
    print("-" * 40)

    state = ReportState(tz=settings.report_timezone)
    state.load(make_source(settings), lambda msg: print(f"  [ERROR] {msg}"))
    print(f"\nApproved: {len(state.approved)} rows")
    state.collect_pending(timeout=None)
    print(f"Pending:  {len(state.pending)} rows")

    # ------------------------------------------------------------------
    # 2. Filter & aggregate
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] SUMMARY")
    print("-" * 40)

    state.set_range(day_from, day_to)
    result = state.report()

    print(f"\nDate range: {day_from or '-'} .. {day_to or '-'}\n")
    for card in get_report_overview(result):
        print(f"  {card['label']:22s} | {card['value']}")

    # ------------------------------------------------------------------
    # 3. Performance reports
    # ------------------------------------------------------------------
    print("\n")
    print("[ 3 ] PERFORMANCE REPORTS")
    print("-" * 40)

    panchayaths = get_panchayath_performance(result.filtered)
    print("\nPanchayath Performance:")
    if not panchayaths.empty:
        print(panchayaths.to_string(index=False))

    categories = get_category_performance(result.filtered)
    print("\nCategory Performance:")
    if not categories.empty:
        print(categories.to_string(index=False))

    # ------------------------------------------------------------------
    # 4. Approved registrations table
    # ------------------------------------------------------------------
    print("\n")
    print(f"[ 4 ] APPROVED REGISTRATIONS IN DATE RANGE ({len(result.filtered)})")
    print("-" * 40)

    if result.filtered.empty:
        print(f"\n{get_empty_table_message(state.date_from, state.date_to)}")
    else:
        table = get_registration_table(result.filtered, tz=settings.report_timezone)
        print(table.head(20).to_string(index=False))

    export_excel(result.filtered, lambda msg: print(f"\n  [OK] {msg}"))

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
