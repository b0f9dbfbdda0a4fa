"""
Value objects produced by the analyzers.

All results are frozen snapshots recomputed on every call. Attribute names
are snake_case; ``to_dict()`` renders the camelCase keys the dashboard API
has always served.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Dict, List, Tuple


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class _Serializable:
    """Mixin rendering dataclass fields with camelCase keys."""

    def to_dict(self) -> dict:
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                value = [v.to_dict() if hasattr(v, "to_dict") else v for v in value]
            elif isinstance(value, Mapping):
                value = dict(value)
            out[_camel(f.name)] = value
        return out


@dataclass(frozen=True)
class RevenueOpportunity(_Serializable):
    member_id: str
    member_name: str
    current_plan: str
    suggested_plan: str
    current_revenue: int
    potential_revenue: int
    upgrade_reason: str
    upgrade_score: float

    @property
    def revenue_delta(self) -> int:
        return self.potential_revenue - self.current_revenue


@dataclass(frozen=True)
class RetentionRisk(_Serializable):
    member_id: str
    member_name: str
    current_plan: str
    join_date: str
    last_check_in: str
    risk_score: int
    risk_factors: Tuple[str, ...]


@dataclass(frozen=True)
class ChurnForecastPoint(_Serializable):
    month: str
    predicted_churn_rate: float  # percent
    predicted_churn_count: int
    contributing_factors: Tuple[str, ...]
    confidence: int


@dataclass(frozen=True)
class RevenueForecastPoint(_Serializable):
    month: str
    total_revenue: int
    revenue_by_plan: Mapping[str, int]
    renewal_count: int
    new_member_count: int
    confidence: int

    def __post_init__(self):
        # Read-only view over a private copy
        object.__setattr__(self, "revenue_by_plan", MappingProxyType(dict(self.revenue_by_plan)))


@dataclass(frozen=True)
class HourlyOccupancy(_Serializable):
    hour: str
    occupancy_percentage: int
    member_count: int


@dataclass(frozen=True)
class PeakHourForecast(_Serializable):
    day: str
    hourly_data: Tuple[HourlyOccupancy, ...]
    peak_hours: Tuple[str, ...]
    suggested_actions: Tuple[str, ...]
    # The hourly curve is modelled, not measured from check-in clock times
    synthetic: bool = True


@dataclass(frozen=True)
class RenewalOffer(_Serializable):
    member_id: str
    member_name: str
    current_plan: str
    renewal_date: str
    offer_type: str
    offer_description: str
    email_status: str = "pending"


@dataclass(frozen=True)
class InsightsSummary(_Serializable):
    potential_revenue_increase: int = 0
    high_risk_member_count: int = 0
    average_churn_rate: float = 0
    next_month_revenue: int = 0
    upcoming_renewals: int = 0


@dataclass(frozen=True)
class InsightsReport:
    """Combined output of all six analyzers plus summary KPIs."""

    revenue_opportunities: List[RevenueOpportunity] = field(default_factory=list)
    retention_risks: List[RetentionRisk] = field(default_factory=list)
    churn_forecast: List[ChurnForecastPoint] = field(default_factory=list)
    revenue_forecast: List[RevenueForecastPoint] = field(default_factory=list)
    peak_hour_forecast: List[PeakHourForecast] = field(default_factory=list)
    renewal_offers: List[RenewalOffer] = field(default_factory=list)
    summary: InsightsSummary = field(default_factory=InsightsSummary)
    # Analyzers that failed or timed out and were replaced by empty lists
    degraded: Tuple[str, ...] = ()

    LISTS = (
        "revenue_opportunities",
        "retention_risks",
        "churn_forecast",
        "revenue_forecast",
        "peak_hour_forecast",
        "renewal_offers",
    )

    @classmethod
    def empty(cls) -> "InsightsReport":
        return cls()

    def sizes(self) -> Dict[str, int]:
        return {name: len(getattr(self, name)) for name in self.LISTS}

    def to_dict(self) -> dict:
        out = {
            _camel(name): [item.to_dict() for item in getattr(self, name)]
            for name in self.LISTS
        }
        out["summary"] = self.summary.to_dict()
        return out
