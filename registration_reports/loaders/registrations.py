"""
Registration loader: fetches the approved and pending sets concurrently.

The two fetches fail differently on purpose. An approved-query failure is
reported to the user through `notify_error`; a pending-query failure is
only logged, since the pending set feeds nothing but the pending-fee card.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable

import pandas as pd

from ..config import (
    MSG_FETCH_ERROR,
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_SORT_KEYS,
    Settings,
)
from .database import PostgresRegistrationSource
from .snapshot import ExcelSnapshotSource
from .utils import empty_registrations

logger = logging.getLogger(__name__)


@runtime_checkable
class RegistrationSource(Protocol):
    """A read-only store answering one status-filtered, sorted query."""

    name: str

    def fetch(self, status: str, order_by: str) -> pd.DataFrame:
        """Return registrations with `status`, ordered by `order_by` descending."""
        ...


@dataclass(frozen=True)
class LoadResult:
    approved: pd.DataFrame
    pending: pd.DataFrame
    approved_error: str | None = None
    pending_error: str | None = None


def _fetch(source: RegistrationSource, status: str) -> pd.DataFrame:
    return source.fetch(status, STATUS_SORT_KEYS[status])


def start_registrations(source: RegistrationSource) -> tuple[Future, Future]:
    """Submit the approved and pending queries and return without waiting.

    The worker threads are released once both queries finish; nothing here
    joins them.
    """
    pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="registrations")
    try:
        approved_future = pool.submit(_fetch, source, STATUS_APPROVED)
        pending_future = pool.submit(_fetch, source, STATUS_PENDING)
    finally:
        pool.shutdown(wait=False)
    return approved_future, pending_future


def resolve_approved(
    future: Future, notify_error: Callable[[str], None]
) -> tuple[pd.DataFrame, str | None]:
    """Wait for the approved query. A failure is shown to the user."""
    try:
        approved = future.result()
    except Exception as e:
        logger.error("Error fetching registrations: %s", e, exc_info=True)
        notify_error(MSG_FETCH_ERROR)
        return empty_registrations(), str(e)

    logger.info("Loaded %d approved registrations", len(approved))
    return approved, None


def resolve_pending(future: Future) -> tuple[pd.DataFrame, str | None]:
    """Wait for the pending query. A failure is only logged."""
    try:
        pending = future.result()
    except Exception as e:
        logger.error("Error fetching pending registrations: %s", e, exc_info=True)
        return empty_registrations(), str(e)

    logger.info("Loaded %d pending registrations", len(pending))
    return pending, None


def load_registrations(
    source: RegistrationSource,
    notify_error: Callable[[str], None],
) -> LoadResult:
    """Run the approved and pending queries concurrently and wait for both.

    Parameters
    ----------
    source : Any RegistrationSource.
    notify_error : Called with a user-facing message when the approved
        query fails. Runs on the calling thread.

    Returns
    -------
    LoadResult with both sets; a failed query leaves its set empty and
    records the error text.
    """
    approved_future, pending_future = start_registrations(source)

    approved, approved_error = resolve_approved(approved_future, notify_error)
    pending, pending_error = resolve_pending(pending_future)

    return LoadResult(
        approved=approved,
        pending=pending,
        approved_error=approved_error,
        pending_error=pending_error,
    )


def make_source(settings: Settings) -> RegistrationSource:
    """Build the data source selected by REPORT_SOURCE."""
    if settings.report_source == "postgres":
        return PostgresRegistrationSource(settings.database_url)
    if settings.report_source == "snapshot":
        return ExcelSnapshotSource(settings.snapshot_path)

    # simulator imports loaders.utils, so resolve it lazily
    from ..simulator import SimulatedRegistrationSource

    return SimulatedRegistrationSource()
