"""
Engine configuration for gym operations insights.

All thresholds, weights and the plan price table are defined here so they
can be tuned without touching the analyzers. Values mirror the rules the
front desk has been using:
- 14-day inactivity window before a member counts as at risk
- 70% occupancy marks a peak hour
- 90% of members due for renewal are expected to renew
- 5% monthly churn when there is too little history to model it
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, List, Tuple

import yaml


BASIC = "Basic"
PRO = "Pro"
PREMIUM = "Premium"
ONE_DAY_PASS = "One-Day Pass"

PLANS = [BASIC, PRO, PREMIUM, ONE_DAY_PASS]


@dataclass
class EngineConfig:
    """
    Configuration for all analyzers.

    Load from YAML:
        config = EngineConfig.from_yaml("configs/weekend_heavy.yaml")

    Override in code:
        config = EngineConfig(peak_threshold=80, occupancy_jitter=0.0)
    """

    # === Plans ===
    plan_prices: Dict[str, int] = field(default_factory=lambda: {
        BASIC: 1000,
        PRO: 4000,
        PREMIUM: 7000,
        ONE_DAY_PASS: 200,
    })
    # Plans billed once rather than every period
    one_time_plans: List[str] = field(default_factory=lambda: [ONE_DAY_PASS])

    # === Opportunity Scorer ===
    frequency_window_days: int = 30
    days_per_month: int = 30
    # (current, suggested, min_frequency, min_tenure_months, freq_weight, tenure_weight)
    # A None tenure means only frequency qualifies the upgrade.
    upgrade_rules: List[Tuple] = field(default_factory=lambda: [
        (BASIC, PRO, 12, 3, 5, 3),
        (PRO, PREMIUM, 20, 6, 3, 2),
        (ONE_DAY_PASS, BASIC, 3, None, 15, 0),
    ])
    max_upgrade_score: float = 95

    # === Risk Scorer ===
    inactivity_days: int = 14
    inactivity_points_cap: int = 60
    expiration_warning_days: int = 14
    expiration_points_per_day: int = 3
    new_member_days: int = 30
    new_member_inactivity_days: int = 7
    new_member_points: int = 20
    min_risk_score: int = 30
    max_risk_score: int = 100
    max_risks: int = 10

    # === Churn Forecaster ===
    forecast_months: int = 3
    min_history_months: int = 3
    trailing_months: int = 3
    default_churn_rate: float = 0.05
    high_churn_rate: float = 0.07
    seasonal_factors: List[float] = field(default_factory=lambda: [1.1, 0.9, 1.0])
    churn_confidence: int = 75
    churn_fallback_confidence: int = 50

    # === Revenue Forecaster ===
    renewal_rate: float = 0.9
    base_new_members: int = 5
    new_member_mix: Dict[str, float] = field(default_factory=lambda: {
        BASIC: 0.6,
        PRO: 0.3,
        PREMIUM: 0.1,
    })
    revenue_base_confidence: int = 80
    revenue_confidence_step: int = 10

    # === Occupancy Forecaster ===
    lookback_months: int = 3
    opening_hour: int = 6
    closing_hour: int = 22
    base_occupancy: int = 20
    # (first_hour, last_hour, bump), inclusive
    occupancy_bumps: List[Tuple[int, int, int]] = field(default_factory=lambda: [
        (7, 9, 30),    # morning
        (12, 14, 20),  # lunch
        (17, 20, 40),  # evening
    ])
    weekend_morning_until: int = 10
    weekend_morning_delta: int = -10
    weekend_day_delta: int = 15
    evening_from: int = 17
    # Day-specific evening nudges
    evening_day_deltas: Dict[str, int] = field(default_factory=lambda: {
        "Monday": 10,
        "Friday": -5,
    })
    occupancy_jitter: float = 0.10
    gym_capacity: int = 50
    peak_threshold: int = 70
    crowded_threshold: int = 85
    promotion_days: List[str] = field(default_factory=lambda: ["Monday", "Tuesday"])

    # === Renewal Offer Generator ===
    renewal_window_days: int = 30
    loyal_tenure_days: int = 180
    urgent_renewal_days: int = 7

    # === Aggregator ===
    call_timeout_seconds: float = 30.0

    # === Metadata ===
    version: str = "1.0.0"

    @classmethod
    def from_yaml(cls, path: Path | str) -> "EngineConfig":
        """Load configuration from YAML file."""
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: Path | str) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict:
        """Convert to a plain dictionary (tuples become lists)."""
        data = asdict(self)
        for key in ("upgrade_rules", "occupancy_bumps"):
            data[key] = [list(rule) for rule in data[key]]
        return data

    def price_of(self, plan: str) -> int:
        """Price of a plan; unknown plans are worth nothing."""
        return self.plan_prices.get(plan, 0)


# Default configuration instance
DEFAULT_CONFIG = EngineConfig()
