"""
Gym Operations Insights Package

Upgrade opportunities, retention risks, churn and revenue forecasts,
peak-hour occupancy and renewal offers from member, attendance and
payment records.
"""

from .engine import InsightsEngine
from .config import EngineConfig
from .store import FrameStore, QueryFilter, generate_sample_data

__all__ = ["InsightsEngine", "EngineConfig", "FrameStore", "QueryFilter", "generate_sample_data"]
__version__ = "1.0.0"
