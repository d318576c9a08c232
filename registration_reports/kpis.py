"""
KPI computation functions: pure functions with no side effects.

Provides the approval date-range filter, the summary metrics shown on the
report cards, and the performance grade.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime

import pandas as pd

from .config import PERFORMANCE_FLOOR, PERFORMANCE_THRESHOLDS, get_settings

logger = logging.getLogger(__name__)

DateLike = date | datetime | pd.Timestamp | str


def _local_midnight(day: DateLike, tz: str) -> pd.Timestamp:
    """Naive wall-clock midnight of the calendar day `day` falls on in `tz`."""
    ts = pd.Timestamp(day)
    if ts.tzinfo is not None:
        ts = ts.tz_convert(tz).tz_localize(None)
    return ts.normalize()


def _localize(wall_clock: pd.Timestamp, tz: str) -> pd.Timestamp:
    # Midnight can be skipped or repeated where DST changes at 00:00: take
    # the first instant of the day that exists.
    return wall_clock.tz_localize(tz, ambiguous=True, nonexistent="shift_forward")


def start_of_day(day: DateLike, tz: str) -> pd.Timestamp:
    """Return the first instant of `day` in timezone `tz`.

    Timezone-aware inputs are first converted to `tz`, so the calendar day
    is the one seen in the report timezone. This is local midnight, or the
    first valid wall-clock time when a DST jump skips midnight.
    """
    return _localize(_local_midnight(day, tz), tz)


def end_of_day(day: DateLike, tz: str) -> pd.Timestamp:
    """Return the last representable instant of `day` in timezone `tz`."""
    next_day = _localize(_local_midnight(day, tz) + pd.Timedelta(days=1), tz)
    return next_day - pd.Timedelta(1, unit="ns")


def filter_by_date_range(
    approved: pd.DataFrame,
    date_from: DateLike | None = None,
    date_to: DateLike | None = None,
    tz: str | None = None,
) -> pd.DataFrame:
    """Select approved registrations whose approved_at falls in the range.

    Rules
    -----
    - no bounds:   every row, including rows without approved_at
    - from only:   approved_at >= start_of_day(from)
    - to only:     approved_at <= end_of_day(to)
    - both:        start_of_day(from) <= approved_at <= end_of_day(to)

    Once any bound is set, rows without approved_at are excluded. The input
    frame is not modified and row order is preserved.
    """
    if date_from is None and date_to is None:
        return approved.copy()

    if approved.empty:
        return approved.copy()

    if tz is None:
        tz = get_settings().report_timezone

    approved_at = pd.to_datetime(approved["approved_at"], utc=True, errors="coerce")
    mask = approved_at.notna()

    if date_from is not None:
        mask &= approved_at >= start_of_day(date_from, tz)
    if date_to is not None:
        mask &= approved_at <= end_of_day(date_to, tz)

    filtered = approved[mask.to_numpy()].copy()
    logger.debug(
        "Date filter %s..%s kept %d of %d registrations",
        date_from, date_to, len(filtered), len(approved),
    )
    return filtered


def total_fees(df: pd.DataFrame) -> float:
    """Sum fee_paid with missing values counted as 0."""
    if df.empty or "fee_paid" not in df.columns:
        return 0.0
    return float(pd.to_numeric(df["fee_paid"], errors="coerce").fillna(0).sum())


def _is_blank(val) -> bool:
    if val is None:
        return True
    if isinstance(val, str):
        return not val
    return bool(pd.isna(val))


def count_categories(df: pd.DataFrame) -> int:
    """Count distinct category_id values.

    Missing and empty ids are NOT dropped: all missing ids count as one
    value, and the empty string counts as another. Panchayath counting
    differs, see count_panchayaths().
    """
    if df.empty:
        return 0
    ids = df["category_id"].astype(object)
    ids = ids.where(ids.notna(), None)
    return int(ids.nunique(dropna=False))


def count_panchayaths(df: pd.DataFrame) -> int:
    """Count distinct non-empty panchayath_id values."""
    if df.empty:
        return 0
    ids = df["panchayath_id"]
    return int(ids[~ids.map(_is_blank)].nunique())


def classify_performance(total_registrations: int) -> str:
    """Return 'Excellent', 'Good', or 'Fair' for a registration count.

    Logic
    -----
    Excellent  if count > 50
    Good       if count > 20
    Fair       otherwise
    """
    for threshold, label in PERFORMANCE_THRESHOLDS:
        if total_registrations > threshold:
            return label
    return PERFORMANCE_FLOOR


def compute_metrics(filtered: pd.DataFrame, pending: pd.DataFrame) -> dict:
    """Return the six summary metrics for the report cards.

    Parameters
    ----------
    filtered : Approved registrations after the date-range filter.
    pending : The full pending set. The date range never applies here.

    Returns
    -------
    Dict with structure:
    {
        "total_registrations": 12,
        "total_fees_collected": 4500.0,
        "total_categories": 3,
        "total_panchayaths": 4,
        "pending_amount": 750.0,
        "performance": "Fair",
    }
    """
    total_registrations = len(filtered)
    return {
        "total_registrations": total_registrations,
        "total_fees_collected": total_fees(filtered),
        "total_categories": count_categories(filtered),
        "total_panchayaths": count_panchayaths(filtered),
        "pending_amount": total_fees(pending),
        "performance": classify_performance(total_registrations),
    }


@dataclass(frozen=True, eq=False)
class ReportInputs:
    """Everything the report is computed from."""

    approved: pd.DataFrame
    pending: pd.DataFrame
    date_from: date | None = None
    date_to: date | None = None
    tz: str | None = None

    @property
    def has_range(self) -> bool:
        return self.date_from is not None or self.date_to is not None


@dataclass(frozen=True, eq=False)
class ReportResult:
    filtered: pd.DataFrame
    metrics: dict
    has_range: bool


def build_report(inputs: ReportInputs) -> ReportResult:
    """Filter the approved set and compute metrics in one pass."""
    filtered = filter_by_date_range(
        inputs.approved, inputs.date_from, inputs.date_to, tz=inputs.tz
    )
    metrics = compute_metrics(filtered, inputs.pending)
    return ReportResult(filtered=filtered, metrics=metrics, has_range=inputs.has_range)
