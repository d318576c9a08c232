"""
Screen state for the reports view.

Holds the four pieces of mutable state the screen owns (approved set,
pending set, date bounds, loading flag) and hands an immutable
ReportInputs snapshot to the pure report builder on every render.

Only the approved query gates loading. The pending query keeps running
after `load` returns; `collect_pending` picks its result up on a later
render.
"""

import logging
from concurrent.futures import Future, wait
from datetime import date
from typing import Callable

import pandas as pd

from .kpis import ReportInputs, ReportResult, build_report
from .loaders import (
    RegistrationSource,
    empty_registrations,
    resolve_approved,
    resolve_pending,
    start_registrations,
)

logger = logging.getLogger(__name__)


class ReportState:
    def __init__(self, tz: str | None = None) -> None:
        self.approved: pd.DataFrame = empty_registrations()
        self.pending: pd.DataFrame = empty_registrations()
        self.date_from: date | None = None
        self.date_to: date | None = None
        self.loading: bool = True
        self.tz = tz
        self._pending_future: Future | None = None

    def load(
        self,
        source: RegistrationSource,
        notify_error: Callable[[str], None],
    ) -> None:
        """Start both queries and return once the approved set resolves."""
        self.loading = True
        approved_future, self._pending_future = start_registrations(source)
        self.approved, _ = resolve_approved(approved_future, notify_error)
        self.loading = False

    @property
    def pending_loading(self) -> bool:
        return self._pending_future is not None

    def collect_pending(self, timeout: float | None = 0) -> bool:
        """Take the pending set once its query has finished.

        Waits at most `timeout` seconds (`None` waits until it is done).
        Returns True when the pending set is in place.
        """
        future = self._pending_future
        if future is None:
            return True
        done, _ = wait([future], timeout=timeout)
        if not done:
            return False
        self.pending, _ = resolve_pending(future)
        self._pending_future = None
        return True

    def set_range(self, date_from: date | None, date_to: date | None) -> None:
        self.date_from = date_from
        self.date_to = date_to

    def clear_range(self) -> None:
        """Unset both bounds, so every approved registration is shown."""
        self.date_from = None
        self.date_to = None

    def inputs(self) -> ReportInputs:
        return ReportInputs(
            approved=self.approved,
            pending=self.pending,
            date_from=self.date_from,
            date_to=self.date_to,
            tz=self.tz,
        )

    def report(self) -> ReportResult:
        return build_report(self.inputs())
