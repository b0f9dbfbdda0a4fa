"""Analyzers behind the insights report."""

from .base import BaseAnalyzer
from .opportunity import OpportunityScorer
from .risk import RiskScorer
from .churn import ChurnForecaster
from .revenue import RevenueForecaster
from .occupancy import OccupancyForecaster
from .renewal import RenewalOfferGenerator

__all__ = [
    "BaseAnalyzer",
    "OpportunityScorer",
    "RiskScorer",
    "ChurnForecaster",
    "RevenueForecaster",
    "OccupancyForecaster",
    "RenewalOfferGenerator",
]
