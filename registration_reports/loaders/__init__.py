"""Registration sources and the concurrent approved/pending loader."""

from .database import PostgresRegistrationSource
from .registrations import (
    LoadResult,
    RegistrationSource,
    load_registrations,
    make_source,
    resolve_approved,
    resolve_pending,
    start_registrations,
)
from .snapshot import ExcelSnapshotSource, SnapshotFormatError
from .utils import empty_registrations, normalise_registrations

__all__ = [
    "PostgresRegistrationSource",
    "ExcelSnapshotSource",
    "SnapshotFormatError",
    "RegistrationSource",
    "LoadResult",
    "load_registrations",
    "start_registrations",
    "resolve_approved",
    "resolve_pending",
    "make_source",
    "empty_registrations",
    "normalise_registrations",
]
