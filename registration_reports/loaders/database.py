"""
Postgres source for registration records.

Reads the hosted backend's `registrations` table directly, resolving the
category name and panchayath name/district through left joins. One query
per status; the caller picks the sort column from config.STATUS_SORT_KEYS.
"""

import logging
from typing import Callable

import pandas as pd
import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from ..config import STATUS_SORT_KEYS
from .utils import normalise_registrations

logger = logging.getLogger(__name__)

_REGISTRATIONS_QUERY = """
SELECT
    r.*,
    c.name AS category_name,
    p.name AS panchayath_name,
    p.district AS panchayath_district
FROM registrations AS r
LEFT JOIN categories AS c ON c.id = r.category_id
LEFT JOIN panchayaths AS p ON p.id = r.panchayath_id
WHERE r.status = %s
ORDER BY r.{order_by} DESC
"""


def build_registrations_query(order_by: str) -> sql.Composed:
    """Compose the status-filtered registrations query.

    Only the sort columns listed in STATUS_SORT_KEYS are accepted.
    """
    if order_by not in STATUS_SORT_KEYS.values():
        raise ValueError(f"Unsupported sort column: {order_by!r}")
    return sql.SQL(_REGISTRATIONS_QUERY).format(order_by=sql.Identifier(order_by))


class PostgresRegistrationSource:
    """Read-only registration queries against the Postgres backend.

    A fresh connection is opened per fetch so the approved and pending
    queries can run on separate threads without sharing a connection.
    """

    name = "postgres"

    def __init__(
        self,
        dsn: str,
        connect: Callable[..., psycopg.Connection] = psycopg.connect,
    ) -> None:
        self._dsn = dsn
        self._connect = connect

    def fetch(self, status: str, order_by: str) -> pd.DataFrame:
        query = build_registrations_query(order_by)

        try:
            with self._connect(self._dsn, row_factory=dict_row) as conn:
                with conn.cursor() as cur:
                    cur.execute(query, (status,))
                    rows = cur.fetchall()
        except psycopg.Error:
            logger.exception("Registration query failed (status=%s)", status)
            raise

        df = normalise_registrations(rows)
        logger.info("Fetched %d %s registrations from Postgres", len(df), status)
        return df
