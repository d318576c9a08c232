"""
Simulated registration generator for demo mode.

Generates plausible approved and pending registrations across a handful
of categories and panchayaths. All values are synthetic.
"""

import logging

import numpy as np
import pandas as pd

from .config import STATUS_APPROVED, STATUS_PENDING
from .loaders.utils import normalise_registrations

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------
_CATEGORIES = [
    ("cat-01", "Pennyekart Free Registration", 0),
    ("cat-02", "Pennyekart Paid Registration", 300),
    ("cat-03", "Farmelife", 500),
    ("cat-04", "Organelife", 500),
    ("cat-05", "Foodelife", 750),
    ("cat-06", "Entrelife", 1000),
]

_PANCHAYATHS = [
    ("pan-01", "Kodur", "Malappuram"),
    ("pan-02", "Kuruva", "Malappuram"),
    ("pan-03", "Ponmundam", "Malappuram"),
    ("pan-04", "Kunnamangalam", "Kozhikode"),
    ("pan-05", "Chelannur", "Kozhikode"),
    ("pan-06", "Mundur", "Palakkad"),
]

_FIRST_NAMES = [
    "Anitha", "Biju", "Fathima", "Haris", "Jameela", "Lakshmi",
    "Muhammed", "Nisha", "Rajesh", "Safiya", "Shibu", "Sreeja",
]
_LAST_NAMES = ["K", "P", "M", "T", "V", "C", "N"]
_APPROVERS = ["admin", "coordinator1", "coordinator2"]


def _registration_row(
    rng: np.random.Generator,
    idx: int,
    status: str,
    created_at: pd.Timestamp,
) -> dict:
    cat_id, cat_name, fee = _CATEGORIES[rng.integers(len(_CATEGORIES))]
    # About one in ten registrations has no panchayath assigned
    if rng.random() < 0.1:
        pan_id, pan_name, district = None, None, None
    else:
        pan_id, pan_name, district = _PANCHAYATHS[rng.integers(len(_PANCHAYATHS))]

    name = f"{rng.choice(_FIRST_NAMES)} {rng.choice(_LAST_NAMES)}"
    approved = status == STATUS_APPROVED
    approved_at = (
        created_at + pd.Timedelta(hours=int(rng.integers(1, 96))) if approved else None
    )

    return {
        "id": f"reg-{status[:3]}-{idx:04d}",
        "customer_id": f"ESC{int(rng.integers(10_000, 99_999))}",
        "name": name,
        "mobile_number": f"9{int(rng.integers(100_000_000, 999_999_999))}",
        "address": f"House {int(rng.integers(1, 400))}, Ward {int(rng.integers(1, 20))}",
        "ward": str(int(rng.integers(1, 20))),
        "agent_pro": rng.choice(["", "PRO-01", "PRO-02", "PRO-07"]),
        "status": status,
        "fee_paid": float(fee),
        "created_at": created_at,
        "approved_at": approved_at,
        "approved_by": rng.choice(_APPROVERS) if approved else None,
        "expires_at": created_at + pd.DateOffset(years=1),
        "category_id": cat_id,
        "panchayath_id": pan_id,
        "category_name": cat_name,
        "panchayath_name": pan_name,
        "panchayath_district": district,
    }


def generate_registrations(
    status: str,
    n: int = 60,
    end: str = "2026-10-15",
    days: int = 90,
    seed: int = 42,
) -> pd.DataFrame:
    """Generate n simulated registrations with the given status.

    Creation times are spread uniformly over the `days` before `end`.
    Rows are returned unsorted; sources apply the query ordering.
    """
    rng = np.random.default_rng(seed)
    end_ts = pd.Timestamp(end, tz="UTC")
    offsets = rng.uniform(0, days * 24 * 3600, size=n)

    rows = [
        _registration_row(rng, i, status, end_ts - pd.Timedelta(seconds=float(off)))
        for i, off in enumerate(offsets)
    ]
    return normalise_registrations(rows)


class SimulatedRegistrationSource:
    """Registration queries answered from generated demo data."""

    name = "demo"

    def __init__(self, n_approved: int = 60, n_pending: int = 15, seed: int = 42) -> None:
        self._counts = {STATUS_APPROVED: n_approved, STATUS_PENDING: n_pending}
        self._seed = seed

    def fetch(self, status: str, order_by: str) -> pd.DataFrame:
        n = self._counts.get(status, 0)
        # Distinct seeds keep the approved and pending sets independent
        seed = self._seed + (0 if status == STATUS_APPROVED else 1)
        df = generate_registrations(status, n=n, seed=seed)
        df = df.sort_values(
            order_by, ascending=False, na_position="first", kind="stable"
        ).reset_index(drop=True)
        logger.info("Generated %d %s demo registrations", len(df), status)
        return df
