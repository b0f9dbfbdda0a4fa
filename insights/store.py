"""
Read access to the gym's members, attendance and payments.

The engine only ever reads. Any object implementing ``DataStore`` can be
plugged in; ``FrameStore`` serves validated pandas DataFrames from memory
(CSV exports, fixtures, sample data).
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Protocol

import numpy as np
import pandas as pd

from .config import BASIC, PRO, PREMIUM, ONE_DAY_PASS, DEFAULT_CONFIG
from .schemas import MEMBERS_SCHEMA, ATTENDANCE_SCHEMA, PAYMENTS_SCHEMA

logger = logging.getLogger(__name__)


class DataAccessError(RuntimeError):
    """The store could not answer a query."""


@dataclass(frozen=True)
class QueryFilter:
    """
    Filter understood by every store.

    Attributes:
        status: Equality filter on the ``status`` column
        date_field: Column the date bounds apply to
        gte: Inclusive lower bound
        lte: Inclusive upper bound
        lt: Exclusive upper bound
        order_by: Column to sort on
        descending: Sort direction for ``order_by``
    """

    status: Optional[str] = None
    date_field: Optional[str] = None
    gte: Optional[date] = None
    lte: Optional[date] = None
    lt: Optional[date] = None
    order_by: Optional[str] = None
    descending: bool = False


ALL = QueryFilter()


class DataStore(Protocol):
    def query_members(self, flt: QueryFilter = ALL) -> pd.DataFrame: ...

    def query_attendance(self, flt: QueryFilter = ALL) -> pd.DataFrame: ...

    def query_payments(self, flt: QueryFilter = ALL) -> pd.DataFrame: ...


class FrameStore:
    """
    In-memory store over pandas DataFrames.

    Frames are validated (and coerced) once at construction; a frame that
    violates its schema raises ``pandera.errors.SchemaError``.
    """

    MEMBER_COLUMNS = ["id", "name", "membership_plan", "join_date", "expiration_date", "status"]
    ATTENDANCE_COLUMNS = ["member_id", "date", "status"]
    PAYMENT_COLUMNS = ["member_id", "amount", "payment_date", "plan"]

    def __init__(
        self,
        members: Optional[pd.DataFrame] = None,
        attendance: Optional[pd.DataFrame] = None,
        payments: Optional[pd.DataFrame] = None,
    ):
        self.members = MEMBERS_SCHEMA.validate(self._frame(members, self.MEMBER_COLUMNS))
        self.attendance = ATTENDANCE_SCHEMA.validate(
            self._frame(attendance, self.ATTENDANCE_COLUMNS)
        )
        self.payments = PAYMENTS_SCHEMA.validate(self._frame(payments, self.PAYMENT_COLUMNS))
        logger.debug(
            "FrameStore loaded %d members, %d attendance rows, %d payments",
            len(self.members), len(self.attendance), len(self.payments),
        )

    @staticmethod
    def _frame(df: Optional[pd.DataFrame], columns: list[str]) -> pd.DataFrame:
        if df is None:
            return pd.DataFrame(columns=columns)
        return df.copy()

    @classmethod
    def from_csv(
        cls,
        members_path=None,
        attendance_path=None,
        payments_path=None,
    ) -> "FrameStore":
        """Load store exports from CSV files (missing paths mean no rows)."""
        def read(path):
            return pd.read_csv(path, dtype=str) if path else None

        return cls(read(members_path), read(attendance_path), read(payments_path))

    def query_members(self, flt: QueryFilter = ALL) -> pd.DataFrame:
        return self._query(self.members, flt)

    def query_attendance(self, flt: QueryFilter = ALL) -> pd.DataFrame:
        return self._query(self.attendance, flt)

    def query_payments(self, flt: QueryFilter = ALL) -> pd.DataFrame:
        return self._query(self.payments, flt)

    @staticmethod
    def _query(df: pd.DataFrame, flt: QueryFilter) -> pd.DataFrame:
        for column in (flt.date_field, flt.order_by):
            if column is not None and column not in df.columns:
                raise DataAccessError(f"Unknown column: {column}")

        mask = pd.Series(True, index=df.index)
        if flt.status is not None:
            if "status" not in df.columns:
                raise DataAccessError("Records have no status column")
            mask &= df["status"] == flt.status

        if flt.date_field is not None:
            dates = df[flt.date_field]
            if flt.gte is not None:
                mask &= dates >= pd.Timestamp(flt.gte)
            if flt.lte is not None:
                mask &= dates <= pd.Timestamp(flt.lte)
            if flt.lt is not None:
                mask &= dates < pd.Timestamp(flt.lt)

        result = df[mask]
        if flt.order_by is not None:
            result = result.sort_values(flt.order_by, ascending=not flt.descending, kind="stable")
        return result.reset_index(drop=True)


def generate_sample_data(
    n_members: int = 100,
    seed: int = 42,
    today: Optional[date] = None,
) -> dict[str, pd.DataFrame]:
    """
    Generate realistic members, attendance and payments for demos and tests.

    Distributions:
    - Plans: Basic 50%, Pro 30%, Premium 15%, One-Day Pass 5%
    - Tenure up to two years, roughly half the memberships still running
    - Visit frequency varies per member from a couple to ~20 per month
    """
    rng = np.random.default_rng(seed)
    today = today or date.today()
    today_ts = pd.Timestamp(today)

    plans = rng.choice([BASIC, PRO, PREMIUM, ONE_DAY_PASS], size=n_members, p=[0.5, 0.3, 0.15, 0.05])
    tenure_days = rng.integers(1, 730, size=n_members)
    join_dates = today_ts - pd.to_timedelta(tenure_days, unit="D")
    # Expiration spread from ~4 months ago to ~4 months ahead, never before joining
    offsets = rng.integers(-120, 120, size=n_members)
    expiration_dates = pd.DatetimeIndex(
        np.maximum(
            (today_ts + pd.to_timedelta(offsets, unit="D")).values,
            join_dates.values,
        )
    )
    status = np.where(
        (expiration_dates >= today_ts) & (rng.random(n_members) < 0.95),
        "active",
        np.where(expiration_dates < today_ts, "expired", "inactive"),
    )

    members = pd.DataFrame({
        "id": [f"MEM_{i:04d}" for i in range(n_members)],
        "name": [f"Member {i}" for i in range(n_members)],
        "membership_plan": plans,
        "join_date": join_dates,
        "expiration_date": expiration_dates,
        "status": status,
    })

    # Attendance over the last 90 days for members that have joined by then
    rows = []
    visits_per_month = rng.uniform(1, 22, size=n_members)
    for i, member in members.iterrows():
        since = max(member["join_date"], today_ts - pd.Timedelta(days=90))
        span = (today_ts - since).days
        if span <= 0:
            continue
        n_visits = int(visits_per_month[i] * span / 30)
        if n_visits == 0:
            continue
        visit_days = rng.choice(span, size=min(n_visits, span), replace=False)
        for day in visit_days:
            rows.append({
                "member_id": member["id"],
                "date": since + pd.Timedelta(days=int(day)),
                "status": "Present" if rng.random() < 0.9 else "Absent",
            })
    attendance = pd.DataFrame(rows, columns=["member_id", "date", "status"])

    payments = pd.DataFrame({
        "member_id": members["id"],
        "amount": pd.Series(plans).map(DEFAULT_CONFIG.plan_prices).astype(float),
        "payment_date": members["join_date"],
        "plan": plans,
    })

    return {"members": members, "attendance": attendance, "payments": payments}

