"""Plan upgrade opportunity scoring."""

from datetime import date

import numpy as np
import pandas as pd

from ..config import BASIC, PRO, PREMIUM, ONE_DAY_PASS
from ..primitives import as_timestamp, days_between, group_by_member, window_start
from ..results import RevenueOpportunity
from ..store import QueryFilter
from .base import BaseAnalyzer


# (reason when visits qualify, reason when tenure qualifies)
REASONS = {
    BASIC: ("High gym usage ({freq}+ visits per month)", "Loyal member ({tenure}+ months)"),
    PRO: ("Very high gym usage ({freq}+ visits per month)", "Long-term member ({tenure}+ months)"),
    ONE_DAY_PASS: ("Frequent one-day pass purchases", "Frequent one-day pass purchases"),
}
DEFAULT_REASONS = ("Frequent visits ({freq}+ per month)", "Long-standing member ({tenure}+ months)")


class OpportunityScorer(BaseAnalyzer):
    """
    Find active members worth offering the next plan up.

    Signals:
    - Check-in frequency: Present check-ins over the trailing window,
      expressed as visits per month
    - Tenure: months since joining

    Rules (per current plan, see EngineConfig.upgrade_rules):
    - Basic -> Pro: >12 visits/month or >3 months; score f*5 + t*3
    - Pro -> Premium: >20 visits/month or >6 months; score f*3 + t*2
    - One-Day Pass -> Basic: >3 visits/month; score f*15
    - Premium: top tier, never suggested

    Scores are capped at 95 and are a ranking heuristic, not a probability.
    """

    name = "revenue_opportunities"

    def fetch(self, store, today: date) -> tuple:
        members = store.query_members(QueryFilter(status="active"))
        attendance = store.query_attendance(QueryFilter(
            status="Present",
            date_field="date",
            gte=window_start(today, self.config.frequency_window_days),
            lte=today,
        ))
        return members, attendance

    def analyze(self, members: pd.DataFrame, attendance: pd.DataFrame, *, today: date) -> list:
        if members.empty:
            return []

        cfg = self.config
        today_ts = as_timestamp(today)
        since = as_timestamp(window_start(today, cfg.frequency_window_days))
        present = attendance[
            (attendance["status"] == "Present")
            & (attendance["date"] >= since)
            & (attendance["date"] <= today_ts)
        ]
        visits = group_by_member(present)

        frame = pd.DataFrame({
            "member_id": members["id"].values,
            "name": (
                members["name"].fillna("").values
                if "name" in members.columns
                else members["id"].values
            ),
            "plan": members["membership_plan"].values,
            "frequency": (
                visits.reindex(members["id"]).fillna(0).values
                * cfg.days_per_month / cfg.frequency_window_days
            ),
            "tenure": days_between(members["join_date"], today_ts).values / cfg.days_per_month,
        })
        # Premium is the top tier
        frame = frame[frame["plan"] != PREMIUM]

        opportunities = []
        matched: set[str] = set()
        for current, suggested, min_freq, min_tenure, freq_weight, tenure_weight in cfg.upgrade_rules:
            if suggested == current or current == PREMIUM:
                continue

            on_plan = (frame["plan"] == current) & ~frame["member_id"].isin(list(matched))
            by_frequency = frame["frequency"] > min_freq
            by_tenure = (
                frame["tenure"] > min_tenure
                if min_tenure is not None
                else pd.Series(False, index=frame.index)
            )
            chosen = frame[on_plan & (by_frequency | by_tenure)]
            if chosen.empty:
                continue

            scores = np.minimum(
                chosen["frequency"] * freq_weight + chosen["tenure"] * tenure_weight,
                cfg.max_upgrade_score,
            ).round(1)
            freq_reason, tenure_reason = REASONS.get(current, DEFAULT_REASONS)
            reasons = np.where(
                by_frequency.loc[chosen.index],
                freq_reason.format(freq=min_freq, tenure=min_tenure),
                tenure_reason.format(freq=min_freq, tenure=min_tenure),
            )

            for (_, row), score, reason in zip(chosen.iterrows(), scores, reasons):
                opportunities.append(RevenueOpportunity(
                    member_id=row["member_id"],
                    member_name=row["name"],
                    current_plan=current,
                    suggested_plan=suggested,
                    current_revenue=cfg.price_of(current),
                    potential_revenue=cfg.price_of(suggested),
                    upgrade_reason=str(reason),
                    upgrade_score=float(score),
                ))
            matched.update(chosen["member_id"])

        return sorted(opportunities, key=lambda o: (-o.upgrade_score, o.member_id))
