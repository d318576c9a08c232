from datetime import datetime
from pathlib import Path

import openpyxl
import pandas as pd
import pytest

from registration_reports.loaders import ExcelSnapshotSource, SnapshotFormatError

REG_HEADER = ["id", "name", "status", "fee_paid", "created_at", "approved_at",
              "approved_by", "category_id", "panchayath_id"]


def _write_snapshot(path: Path, registrations: list[list], with_lookups: bool = True) -> Path:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "registrations"
    ws.append(REG_HEADER)
    for row in registrations:
        ws.append(row)

    if with_lookups:
        cats = wb.create_sheet("categories")
        cats.append(["id", "name"])
        cats.append(["c1", "Farmelife"])
        cats.append(["c2", "Entrelife"])

        pans = wb.create_sheet("panchayaths")
        pans.append(["id", "name", "district"])
        pans.append(["p1", "Kodur", "Malappuram"])

    wb.save(path)
    return path


@pytest.fixture
def snapshot(tmp_path):
    return _write_snapshot(tmp_path / "snapshot.xlsx", [
        ["r1", "Anitha", "approved", 500, datetime(2024, 1, 1), datetime(2024, 1, 3), "admin", "c1", "p1"],
        ["r2", "Biju", "approved", 1000, datetime(2024, 1, 2), datetime(2024, 1, 9), "admin", "c2", None],
        ["r3", "Nisha", "pending", 300, datetime(2024, 1, 4), None, None, "c1", "p1"],
        [None, None, None, None, None, None, None, None, None],
        ["r4", "Haris", "pending", 750, datetime(2024, 1, 6), None, None, "c9", "p1"],
    ])


def test_snapshot_approved_rows_are_joined_and_sorted(snapshot):
    df = ExcelSnapshotSource(snapshot).fetch("approved", "approved_at")

    assert df["id"].tolist() == ["r2", "r1"]
    assert df["category_name"].tolist() == ["Entrelife", "Farmelife"]
    assert df.loc[1, "panchayath_name"] == "Kodur"
    assert df.loc[1, "panchayath_district"] == "Malappuram"
    assert pd.isna(df.loc[0, "panchayath_name"])
    assert df.loc[0, "approved_at"] == pd.Timestamp("2024-01-09", tz="UTC")


def test_snapshot_pending_rows_sorted_by_creation(snapshot):
    df = ExcelSnapshotSource(snapshot).fetch("pending", "created_at")

    assert df["id"].tolist() == ["r4", "r3"]
    assert df["fee_paid"].sum() == 1050
    assert pd.isna(df.loc[0, "category_name"])
    assert df["approved_at"].isna().all()


def test_snapshot_without_lookup_sheets_leaves_names_empty(tmp_path):
    path = _write_snapshot(
        tmp_path / "bare.xlsx",
        [["r1", "Anitha", "approved", 500, None, datetime(2024, 1, 3), "admin", "c1", "p1"]],
        with_lookups=False,
    )

    df = ExcelSnapshotSource(path).fetch("approved", "approved_at")

    assert len(df) == 1
    assert df["category_name"].isna().all()
    assert df["panchayath_name"].isna().all()


def test_snapshot_missing_registrations_sheet(tmp_path):
    path = tmp_path / "wrong.xlsx"
    wb = openpyxl.Workbook()
    wb.active.title = "Sheet1"
    wb.save(path)

    with pytest.raises(SnapshotFormatError):
        ExcelSnapshotSource(path).fetch("approved", "approved_at")


def test_snapshot_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ExcelSnapshotSource(tmp_path / "absent.xlsx").fetch("approved", "approved_at")
