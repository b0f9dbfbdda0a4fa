"""Revenue forecasting by plan."""

from datetime import date

import pandas as pd

from ..config import PLANS
from ..primitives import month_bounds, month_label, round_half_up
from ..results import RevenueForecastPoint
from ..store import QueryFilter
from .base import BaseAnalyzer


class RevenueForecaster(BaseAnalyzer):
    """
    Linear projection of billed revenue for the next few months.

    Per forecast month and plan:
    - Renewals: members whose membership expires that month, 90% of
      whom are expected to renew at the plan price
    - Recurring: everyone else on a subscription plan (one-time plans
      such as the One-Day Pass bring no recurring revenue)
    - New members: 5 + horizon sign-ups, split 60/30/10 across
      Basic/Pro/Premium

    Deliberately simple: explainable and deterministic rather than a
    statistical model. Confidence drops 10 points per month out.

    Revenue comes from active memberships and the plan price table only;
    payment history is not read.
    """

    name = "revenue_forecast"

    def fetch(self, store, today: date) -> tuple:
        return (store.query_members(QueryFilter(status="active")),)

    def analyze(self, members: pd.DataFrame, *, today: date) -> list:
        if members.empty:
            return []

        cfg = self.config
        plans = list(dict.fromkeys(PLANS + list(cfg.plan_prices)))
        by_plan = {plan: members[members["membership_plan"] == plan] for plan in plans}
        expirations = {plan: df["expiration_date"].dt.normalize() for plan, df in by_plan.items()}

        forecast = []
        for horizon in range(1, cfg.forecast_months + 1):
            start, end = month_bounds(today, horizon)
            new_members = cfg.base_new_members + horizon

            revenue_by_plan = {}
            renewal_count = 0
            for plan in plans:
                price = cfg.price_of(plan)
                plan_count = len(by_plan[plan])
                renewing = int(expirations[plan].between(start, end).sum())
                renewal_count += renewing

                revenue = renewing * cfg.renewal_rate * price
                if plan not in cfg.one_time_plans:
                    revenue += (plan_count - renewing) * price
                revenue += new_members * cfg.new_member_mix.get(plan, 0) * price
                revenue_by_plan[plan] = round_half_up(revenue)

            forecast.append(RevenueForecastPoint(
                month=month_label(today, horizon),
                total_revenue=sum(revenue_by_plan.values()),
                revenue_by_plan=revenue_by_plan,
                renewal_count=renewal_count,
                new_member_count=new_members,
                confidence=cfg.revenue_base_confidence - cfg.revenue_confidence_step * horizon,
            ))
        return forecast
