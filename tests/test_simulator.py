import pandas as pd
import pytest
from pydantic import ValidationError

from registration_reports.config import REGISTRATION_COLUMNS, Settings
from registration_reports.simulator import SimulatedRegistrationSource, generate_registrations


def test_generated_approved_rows_carry_approval_fields():
    df = generate_registrations("approved", n=25, seed=7)

    assert list(df.columns) == REGISTRATION_COLUMNS
    assert len(df) == 25
    assert df["approved_at"].notna().all()
    assert df["approved_by"].notna().all()
    assert (df["approved_at"] > df["created_at"]).all()
    assert (df["fee_paid"] >= 0).all()


def test_generated_pending_rows_have_no_approval_fields():
    df = generate_registrations("pending", n=10, seed=7)

    assert df["approved_at"].isna().all()
    assert df["approved_by"].isna().all()


def test_generation_is_reproducible():
    a = generate_registrations("approved", n=5, seed=3)
    b = generate_registrations("approved", n=5, seed=3)

    pd.testing.assert_frame_equal(a, b)


def test_simulated_source_orders_descending():
    source = SimulatedRegistrationSource(n_approved=20, n_pending=8)

    approved = source.fetch("approved", "approved_at")
    pending = source.fetch("pending", "created_at")

    assert len(approved) == 20
    assert len(pending) == 8
    assert approved["approved_at"].is_monotonic_decreasing
    assert pending["created_at"].is_monotonic_decreasing
    assert set(approved["status"]) == {"approved"}
    assert set(pending["status"]) == {"pending"}


def test_settings_defaults_and_validation(monkeypatch):
    for var in ("REPORT_SOURCE", "REPORT_TIMEZONE", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)

    settings = Settings()

    assert settings.report_source == "demo"
    assert settings.report_timezone == "Asia/Kolkata"
    assert settings.log_level == "INFO"

    with pytest.raises(ValidationError):
        Settings(REPORT_SOURCE="mongodb")


def test_unknown_report_timezone_is_rejected(monkeypatch):
    monkeypatch.delenv("REPORT_TIMEZONE", raising=False)

    with pytest.raises(ValidationError, match="unknown timezone"):
        Settings(REPORT_TIMEZONE="Asia/Kolkatta")

    assert Settings(REPORT_TIMEZONE="America/Santiago").report_timezone == "America/Santiago"
