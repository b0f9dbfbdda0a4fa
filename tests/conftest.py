"""
Pytest fixtures for insights engine tests.
"""

from datetime import date, timedelta

import numpy as np
import pandas as pd
import pytest

# Add package to path
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from insights.config import EngineConfig
from insights.store import FrameStore, generate_sample_data


TODAY = date(2026, 6, 15)


def make_member(
    member_id: str,
    plan: str = "Basic",
    joined_days_ago: int = 100,
    expires_in_days: int = 60,
    status: str = "active",
    name: str | None = None,
) -> dict:
    """Member row relative to TODAY."""
    return {
        "id": member_id,
        "name": name or f"Name {member_id}",
        "membership_plan": plan,
        "join_date": pd.Timestamp(TODAY - timedelta(days=joined_days_ago)),
        "expiration_date": pd.Timestamp(TODAY + timedelta(days=expires_in_days)),
        "status": status,
    }


def make_visits(member_id: str, days_ago, status: str = "Present") -> list[dict]:
    """Attendance rows for a member on each of the given days before TODAY."""
    return [
        {
            "member_id": member_id,
            "date": pd.Timestamp(TODAY - timedelta(days=d)),
            "status": status,
        }
        for d in days_ago
    ]


def frame(rows: list[dict], columns: list[str]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=columns)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def default_config():
    """Default engine configuration."""
    return EngineConfig()


@pytest.fixture
def quiet_config():
    """Configuration with occupancy jitter switched off."""
    return EngineConfig(occupancy_jitter=0.0)


@pytest.fixture
def empty_store():
    """Store with no members, attendance or payments."""
    return FrameStore()


@pytest.fixture
def sample_store():
    """150 generated members with attendance and payments."""
    return FrameStore(**generate_sample_data(n_members=150, seed=42, today=TODAY))


@pytest.fixture
def seeded_rng():
    return np.random.default_rng(1234)


@pytest.fixture
def scenario_store():
    """
    Hand-built gym covering the headline scenarios.

    - HEAVY_BASIC: Basic, 40 days tenure, 15 visits in the last month
    - QUIET_EXPIRING: 20 days since last visit, expires in 10 days
    - REGULAR: visits every few days, far from expiry
    - LOYAL_PRO: Pro for 8 months, renewing in 12 days
    - LAPSED: expired two months ago
    """
    members = frame(
        [
            make_member("HEAVY_BASIC", "Basic", joined_days_ago=40, expires_in_days=20),
            make_member("QUIET_EXPIRING", "Pro", joined_days_ago=100, expires_in_days=10),
            make_member("REGULAR", "Premium", joined_days_ago=300, expires_in_days=200),
            make_member("LOYAL_PRO", "Pro", joined_days_ago=240, expires_in_days=12),
            make_member("LAPSED", "Basic", joined_days_ago=400, expires_in_days=-60, status="expired"),
        ],
        FrameStore.MEMBER_COLUMNS,
    )
    attendance = frame(
        make_visits("HEAVY_BASIC", range(1, 16))
        + make_visits("QUIET_EXPIRING", [20, 25, 33])
        + make_visits("QUIET_EXPIRING", [2], status="Absent")
        + make_visits("REGULAR", [1, 4, 8, 12])
        + make_visits("LOYAL_PRO", [3, 9]),
        FrameStore.ATTENDANCE_COLUMNS,
    )
    payments = frame(
        [
            {"member_id": "HEAVY_BASIC", "amount": 1000.0,
             "payment_date": pd.Timestamp(TODAY - timedelta(days=40)), "plan": "Basic"},
            {"member_id": "REGULAR", "amount": 7000.0,
             "payment_date": pd.Timestamp(TODAY - timedelta(days=165)), "plan": "Premium"},
        ],
        FrameStore.PAYMENT_COLUMNS,
    )
    return FrameStore(members, attendance, payments)
