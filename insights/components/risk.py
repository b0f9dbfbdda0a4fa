"""Retention risk scoring component."""

from datetime import date

import numpy as np
import pandas as pd

from ..primitives import as_timestamp, days_between, last_date_by_member
from ..results import RetentionRisk
from ..store import QueryFilter
from .base import BaseAnalyzer


class RiskScorer(BaseAnalyzer):
    """
    Score active members on how likely they are to drop off.

    Factors add up (a member can trip all three):
    - Inactivity: >14 days since last check-in adds min(days, 60)
    - Approaching expiration: 0 < days left < 14 adds (14 - days) * 3
    - New member, low engagement: <30 days tenure and >7 days
      since last check-in adds a flat 20

    Members without any Present record count from their join date.
    Scores are capped at 100; only scores above 30 are reported, top 10.
    """

    name = "retention_risks"

    def fetch(self, store, today: date) -> tuple:
        members = store.query_members(QueryFilter(status="active"))
        attendance = store.query_attendance(QueryFilter(order_by="date", descending=True))
        return members, attendance

    def analyze(self, members: pd.DataFrame, attendance: pd.DataFrame, *, today: date) -> list:
        if members.empty:
            return []

        cfg = self.config
        today_ts = as_timestamp(today)

        present = attendance[attendance["status"] == "Present"]
        last_present = last_date_by_member(present)

        df = pd.DataFrame({
            "member_id": members["id"].values,
            "name": (
                members["name"].fillna("").values
                if "name" in members.columns
                else members["id"].values
            ),
            "plan": members["membership_plan"].values,
            "join_date": members["join_date"].dt.normalize().values,
            "expiration_date": members["expiration_date"].dt.normalize().values,
        })
        # Members without a Present record count from their join date
        df["last_check_in"] = (
            pd.to_datetime(df["member_id"].map(last_present))
            .fillna(df["join_date"])
            .dt.normalize()
        )

        inactive_days = days_between(df["last_check_in"], today_ts)
        days_left = days_between(today_ts, df["expiration_date"])
        tenure_days = days_between(df["join_date"], today_ts)

        inactive = inactive_days > cfg.inactivity_days
        expiring = (days_left > 0) & (days_left < cfg.expiration_warning_days)
        new_and_quiet = (
            (tenure_days < cfg.new_member_days)
            & (inactive_days > cfg.new_member_inactivity_days)
        )

        raw_score = (
            np.where(inactive, np.minimum(inactive_days, cfg.inactivity_points_cap), 0)
            + np.where(
                expiring,
                (cfg.expiration_warning_days - days_left) * cfg.expiration_points_per_day,
                0,
            )
            + np.where(new_and_quiet, cfg.new_member_points, 0)
        )
        df["raw_score"] = raw_score
        df["risk_score"] = np.minimum(raw_score, cfg.max_risk_score)

        flagged = df[df["raw_score"] > cfg.min_risk_score]
        risks = []
        for idx, row in flagged.iterrows():
            factors = []
            if inactive[idx]:
                factors.append(f"No check-ins for {inactive_days[idx]} days")
            if expiring[idx]:
                factors.append(f"Membership expires in {days_left[idx]} days")
            if new_and_quiet[idx]:
                factors.append("New member with low engagement")

            risks.append(RetentionRisk(
                member_id=row["member_id"],
                member_name=row["name"],
                current_plan=row["plan"],
                join_date=row["join_date"].strftime("%Y-%m-%d"),
                last_check_in=row["last_check_in"].strftime("%Y-%m-%d"),
                risk_score=int(row["risk_score"]),
                risk_factors=tuple(factors),
            ))

        risks.sort(key=lambda r: (-r.risk_score, r.member_id))
        return risks[: cfg.max_risks]
