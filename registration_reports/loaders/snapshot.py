"""
Excel snapshot source for registration records.

Reads an offline export of the backend tables, one table per sheet:

    registrations : one row per registration, header in row 1
    categories    : id, name
    panchayaths   : id, name, district

The joins and ordering mirror the Postgres query so either source can
feed the same screen.
"""

import logging
from pathlib import Path

import openpyxl
import pandas as pd

from .utils import normalise_registrations

logger = logging.getLogger(__name__)

REGISTRATIONS_SHEET = "registrations"
CATEGORIES_SHEET = "categories"
PANCHAYATHS_SHEET = "panchayaths"


class SnapshotFormatError(ValueError):
    """Raised when the snapshot workbook is missing a required sheet."""


def _read_sheet(wb, sheet_name: str, required: bool = True) -> pd.DataFrame:
    """Read a header-first sheet into a DataFrame.

    Fully blank rows are skipped. Header cells are stripped and lower-cased.
    """
    if sheet_name not in wb.sheetnames:
        if required:
            raise SnapshotFormatError(f"Snapshot is missing the '{sheet_name}' sheet")
        logger.warning("Sheet '%s' not found; joined columns will be empty", sheet_name)
        return pd.DataFrame()

    rows = list(wb[sheet_name].iter_rows(values_only=True))
    if not rows:
        return pd.DataFrame()

    header = [str(h).strip().lower() if h is not None else "" for h in rows[0]]
    records = []
    for row in rows[1:]:
        if all(v is None or (isinstance(v, str) and not v.strip()) for v in row):
            continue
        records.append(dict(zip(header, row)))

    return pd.DataFrame(records, columns=header)


def load_snapshot_tables(path: str | Path) -> dict[str, pd.DataFrame]:
    """Load the three snapshot tables from the workbook at `path`."""
    try:
        wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    except Exception:
        logger.exception("Failed to open registrations snapshot: %s", path)
        raise

    try:
        tables = {
            REGISTRATIONS_SHEET: _read_sheet(wb, REGISTRATIONS_SHEET),
            CATEGORIES_SHEET: _read_sheet(wb, CATEGORIES_SHEET, required=False),
            PANCHAYATHS_SHEET: _read_sheet(wb, PANCHAYATHS_SHEET, required=False),
        }
    finally:
        wb.close()

    logger.info(
        "Loaded snapshot %s: %d registrations, %d categories, %d panchayaths",
        path,
        len(tables[REGISTRATIONS_SHEET]),
        len(tables[CATEGORIES_SHEET]),
        len(tables[PANCHAYATHS_SHEET]),
    )
    return tables


def join_lookups(
    registrations: pd.DataFrame,
    categories: pd.DataFrame,
    panchayaths: pd.DataFrame,
) -> pd.DataFrame:
    """Left-join category name and panchayath name/district onto registrations."""
    df = registrations.copy()
    blank = pd.Series(None, index=df.index, dtype="object")

    if not categories.empty and {"id", "name"}.issubset(categories.columns):
        names = dict(zip(categories["id"], categories["name"]))
        df["category_name"] = df.get("category_id", blank).map(names)
    else:
        df["category_name"] = None

    if not panchayaths.empty and {"id", "name"}.issubset(panchayaths.columns):
        lookup = panchayaths.set_index("id")
        panchayath_ids = df.get("panchayath_id", blank)
        df["panchayath_name"] = panchayath_ids.map(lookup["name"].to_dict())
        if "district" in lookup.columns:
            df["panchayath_district"] = panchayath_ids.map(lookup["district"].to_dict())
        else:
            df["panchayath_district"] = None
    else:
        df["panchayath_name"] = None
        df["panchayath_district"] = None

    return df


class ExcelSnapshotSource:
    """Registration queries answered from an Excel snapshot."""

    name = "snapshot"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def fetch(self, status: str, order_by: str) -> pd.DataFrame:
        tables = load_snapshot_tables(self.path)
        registrations = tables[REGISTRATIONS_SHEET]

        if registrations.empty or "status" not in registrations.columns:
            logger.warning("Snapshot %s has no registration rows", self.path)
            return normalise_registrations([])

        matched = registrations[registrations["status"] == status]
        joined = join_lookups(
            matched, tables[CATEGORIES_SHEET], tables[PANCHAYATHS_SHEET]
        )
        df = normalise_registrations(joined)

        # Postgres orders NULLs first under DESC
        df = df.sort_values(
            order_by, ascending=False, na_position="first", kind="stable"
        ).reset_index(drop=True)

        logger.info("Fetched %d %s registrations from snapshot", len(df), status)
        return df
