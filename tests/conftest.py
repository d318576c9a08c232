"""
Pytest configuration for Registration Reports.

Provides fixtures for:
- Building registration frames from a few keyword fields
- Fake data sources with scripted results or failures
- Recording notifiers standing in for the UI toasts
"""

from __future__ import annotations

import threading
from typing import Callable

import pandas as pd
import pytest

from registration_reports.loaders.utils import normalise_registrations


def make_registration(**fields) -> dict:
    """Return a registration row with sensible defaults for unspecified fields."""
    row = {
        "id": fields.pop("id", None),
        "name": "Test Person",
        "mobile_number": "9000000000",
        "status": "approved",
        "fee_paid": 0,
        "category_id": "cat-1",
        "category_name": "Farmelife",
        "panchayath_id": "pan-1",
        "panchayath_name": "Kodur",
        "panchayath_district": "Malappuram",
        "approved_by": "admin",
    }
    row.update(fields)
    return row


def make_frame(rows: list[dict]) -> pd.DataFrame:
    for i, row in enumerate(rows):
        if row.get("id") is None:
            row["id"] = f"reg-{i}"
    return normalise_registrations(rows)


@pytest.fixture
def registrations() -> Callable[[list[dict]], pd.DataFrame]:
    """Factory turning a list of partial rows into a normalised frame."""
    return lambda rows: make_frame([make_registration(**r) for r in rows])


class Recorder:
    """Collects notification messages."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def notifier() -> Recorder:
    return Recorder()


class FakeSource:
    """Scripted RegistrationSource.

    `results` maps status -> DataFrame, or -> Exception instance to raise.
    `hooks` maps status -> callable run before returning.
    """

    name = "fake"

    def __init__(self, results: dict, hooks: dict | None = None) -> None:
        self.results = results
        self.hooks = hooks or {}
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def fetch(self, status: str, order_by: str) -> pd.DataFrame:
        with self._lock:
            self.calls.append((status, order_by))
        hook = self.hooks.get(status)
        if hook is not None:
            hook()
        result = self.results[status]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_source() -> type[FakeSource]:
    return FakeSource
