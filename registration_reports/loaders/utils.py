"""
Shared utilities for registration sources: timestamp and fee coercion,
schema enforcement.
"""

import logging
from datetime import datetime
from typing import Any

import pandas as pd

from ..config import REGISTRATION_COLUMNS, TIMESTAMP_COLUMNS

logger = logging.getLogger(__name__)


def normalise_timestamp(val: Any) -> pd.Timestamp:
    """Convert an ISO string or datetime to a UTC pd.Timestamp.

    Naive values are assumed to be UTC, which is how the backend stores
    them. Returns NaT for missing or unparseable values.
    """
    if val is None:
        return pd.NaT
    if isinstance(val, str):
        val = val.strip()
        if not val:
            return pd.NaT
    elif not isinstance(val, datetime) and pd.isna(val):
        return pd.NaT

    try:
        ts = pd.Timestamp(val)
    except (ValueError, TypeError):
        logger.warning("Could not parse timestamp value: %s", val)
        return pd.NaT

    if ts is pd.NaT:
        return pd.NaT
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def safe_float(val: Any) -> float | None:
    """Coerce a value to float, returning None for non-numeric values."""
    if val is None:
        return None
    if isinstance(val, str):
        val = val.strip().replace(",", "")
        if not val:
            return None
        try:
            return float(val)
        except ValueError:
            return None
    try:
        result = float(val)
    except (ValueError, TypeError):
        return None
    if pd.isna(result):
        return None
    return result


def empty_registrations() -> pd.DataFrame:
    """Return an empty registrations frame with the full column schema."""
    df = pd.DataFrame({col: pd.Series(dtype="object") for col in REGISTRATION_COLUMNS})
    df["fee_paid"] = pd.Series(dtype="float64")
    for col in TIMESTAMP_COLUMNS:
        df[col] = pd.Series(dtype="datetime64[ns, UTC]")
    return df


def normalise_registrations(rows: pd.DataFrame | list[dict]) -> pd.DataFrame:
    """Coerce raw source rows into the registration schema.

    - Missing schema columns are added as None.
    - fee_paid becomes float with missing / non-numeric values set to 0.
    - created_at, approved_at and expires_at become UTC timestamps (NaT
      when absent).
    - Row order is preserved; extra source columns are dropped.
    """
    df = rows.copy() if isinstance(rows, pd.DataFrame) else pd.DataFrame(rows)

    if df.empty:
        return empty_registrations()

    for col in REGISTRATION_COLUMNS:
        if col not in df.columns:
            df[col] = None

    df = df[REGISTRATION_COLUMNS].reset_index(drop=True)

    df["fee_paid"] = [safe_float(v) or 0.0 for v in df["fee_paid"]]
    df["fee_paid"] = df["fee_paid"].astype("float64")

    for col in TIMESTAMP_COLUMNS:
        df[col] = pd.to_datetime(
            [normalise_timestamp(v) for v in df[col]], utc=True
        )

    return df
