"""Peak hour occupancy forecasting."""

from datetime import date
from typing import Optional

import numpy as np
import pandas as pd

from ..primitives import add_months, as_timestamp, round_half_up
from ..results import HourlyOccupancy, PeakHourForecast
from ..store import QueryFilter
from .base import BaseAnalyzer


DAYS_OF_WEEK = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
WEEKEND = {"Saturday", "Sunday"}


class OccupancyForecaster(BaseAnalyzer):
    """
    Hour-by-day occupancy heatmap with peak-hour flags.

    Attendance is recorded per day without a clock time, so the hourly
    curve is a parameterised model (every forecast is marked synthetic):
    a base load plus morning, lunch and evening bumps, weekend and
    day-specific adjustments, and an optional +/-10% display jitter.

    Attendance only gates the model: without any check-ins in the
    look-back window there is nothing to forecast.

    An hour is a peak hour when its occupancy exceeds 70%. Jitter is
    applied before the peak test, so flags always match the reported
    occupancy.
    """

    name = "peak_hour_forecast"

    def __init__(self, config, rng: Optional[np.random.Generator] = None):
        super().__init__(config)
        self.rng = rng if rng is not None else np.random.default_rng()

    def fetch(self, store, today: date) -> tuple:
        attendance = store.query_attendance(QueryFilter(
            status="Present",
            date_field="date",
            gte=add_months(today, -self.config.lookback_months),
            lte=today,
        ))
        return (attendance,)

    def base_occupancy(self, day: str, hour: int) -> int:
        """Modelled occupancy (%) before jitter."""
        cfg = self.config
        occupancy = cfg.base_occupancy
        for first, last, bump in cfg.occupancy_bumps:
            if first <= hour <= last:
                occupancy += bump

        if day in WEEKEND:
            if hour < cfg.weekend_morning_until:
                occupancy += cfg.weekend_morning_delta
            else:
                occupancy += cfg.weekend_day_delta

        if hour >= cfg.evening_from:
            occupancy += cfg.evening_day_deltas.get(day, 0)
        return occupancy

    def _jitter(self, size: int) -> np.ndarray:
        spread = self.config.occupancy_jitter
        if spread <= 0:
            return np.ones(size)
        return self.rng.uniform(1 - spread, 1 + spread, size=size)

    def analyze(self, attendance: pd.DataFrame, *, today: date) -> list:
        cfg = self.config
        since = as_timestamp(add_months(today, -cfg.lookback_months))
        recent = attendance[
            (attendance["status"] == "Present")
            & (attendance["date"] >= since)
            & (attendance["date"] <= as_timestamp(today))
        ]
        if recent.empty:
            return []

        hours = list(range(cfg.opening_hour, cfg.closing_hour + 1))
        forecast = []
        for day in DAYS_OF_WEEK:
            modelled = np.array([self.base_occupancy(day, hour) for hour in hours], dtype=float)
            occupancy = [round_half_up(v) for v in modelled * self._jitter(len(hours))]

            hourly = tuple(
                HourlyOccupancy(
                    hour=f"{hour}:00",
                    occupancy_percentage=pct,
                    member_count=round_half_up(pct * cfg.gym_capacity / 100),
                )
                for hour, pct in zip(hours, occupancy)
            )
            peak_hours = tuple(
                f"{hour}:00 - {hour + 1}:00"
                for hour, pct in zip(hours, occupancy)
                if pct > cfg.peak_threshold
            )

            forecast.append(PeakHourForecast(
                day=day,
                hourly_data=hourly,
                peak_hours=peak_hours,
                suggested_actions=self.suggest_actions(day, peak_hours, max(occupancy)),
            ))
        return forecast

    def suggest_actions(self, day: str, peak_hours: tuple, max_occupancy: int) -> tuple:
        cfg = self.config
        actions = []
        if peak_hours:
            actions.append(f"Consider staff increases during peak hours: {', '.join(peak_hours)}")
        if max_occupancy > cfg.crowded_threshold:
            actions.append("Implement appointment system for peak hours to manage capacity")
        if day in cfg.promotion_days:
            actions.append("Offer special promotions for off-peak hours to balance attendance")
        return tuple(actions)
