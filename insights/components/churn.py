"""Churn trend forecasting."""

from datetime import date

import pandas as pd

from ..config import PLANS
from ..primitives import month_key, month_label, round_half_up
from ..results import ChurnForecastPoint
from ..store import QueryFilter
from .base import BaseAnalyzer


HORIZON_NOTES = {
    1: "End of month membership cycles",
    2: "Seasonal variation (historical pattern)",
}


class ChurnForecaster(BaseAnalyzer):
    """
    Project monthly churn for the next few months.

    Every membership whose expiration date has passed counts as a churn
    event in the month it expired. For each month with events the rate is

        events_in_month / (active_now + events_in_that_and_later_months)

    which approximates the member base at the start of that month. The
    forecast is the mean of the last three monthly rates scaled by a
    per-horizon seasonal factor (1.1, 0.9, 1.0).

    With fewer than three months of history every horizon falls back to
    the default 5% rate at confidence 50.
    """

    name = "churn_forecast"

    def fetch(self, store, today: date) -> tuple:
        expired = store.query_members(QueryFilter(date_field="expiration_date", lt=today))
        active = store.query_members(QueryFilter(status="active"))
        return expired, len(active)

    def historical_rates(self, expired: pd.DataFrame, active_count: int) -> pd.Series:
        """Churn rate per calendar month, oldest first."""
        if expired.empty:
            return pd.Series(dtype=float)
        events = expired.groupby(month_key(expired["expiration_date"])).size().sort_index()
        # Members still around at the start of each month: everyone active now
        # plus everyone who left that month or later
        cohort = active_count + events[::-1].cumsum()[::-1]
        return events / cohort

    def analyze(self, expired: pd.DataFrame, active_count: int, *, today: date) -> list:
        if expired.empty and active_count == 0:
            return []

        cfg = self.config
        rates = self.historical_rates(expired, active_count)
        has_history = len(rates) >= cfg.min_history_months
        recent_rate = rates.iloc[-cfg.trailing_months:].mean() if has_history else None
        top_plan = self._highest_churn_plan(expired)

        forecast = []
        for horizon in range(1, cfg.forecast_months + 1):
            if has_history:
                factor = (
                    cfg.seasonal_factors[horizon - 1]
                    if horizon <= len(cfg.seasonal_factors)
                    else 1.0
                )
                rate = float(recent_rate) * factor
            else:
                rate = cfg.default_churn_rate

            factors = []
            if horizon in HORIZON_NOTES:
                factors.append(HORIZON_NOTES[horizon])
            if rate > cfg.high_churn_rate:
                factors.append("Higher than average churn rate")
            if top_plan is not None:
                factors.append(f"{top_plan} plan has highest historical churn")

            forecast.append(ChurnForecastPoint(
                month=month_label(today, horizon),
                predicted_churn_rate=round(rate * 100, 1),
                predicted_churn_count=round_half_up(active_count * rate),
                contributing_factors=tuple(factors),
                confidence=cfg.churn_confidence if has_history else cfg.churn_fallback_confidence,
            ))
        return forecast

    def _highest_churn_plan(self, expired: pd.DataFrame):
        """Plan with the most churn events over the trailing months, if any."""
        if expired.empty:
            return None
        months = month_key(expired["expiration_date"])
        recent = sorted(months.unique())[-self.config.trailing_months:]
        counts = expired.loc[months.isin(recent), "membership_plan"].value_counts()
        if counts.empty:
            return None
        # Ties go to the plan listed first
        best = counts.max()
        return next(plan for plan in PLANS + list(counts.index) if counts.get(plan, 0) == best)
