"""
Main InsightsEngine class - fans out to the analyzers and merges results.

Usage:
    from insights import InsightsEngine, FrameStore

    store = FrameStore(members_df, attendance_df, payments_df)
    engine = InsightsEngine(store)
    report = engine.get_all_insights()

    # Access results
    print(report.summary)
    payload = report.to_dict()   # camelCase, as served to the dashboard
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import date
from typing import Optional

import numpy as np

from .config import EngineConfig, DEFAULT_CONFIG
from .components import (
    OpportunityScorer,
    RiskScorer,
    ChurnForecaster,
    RevenueForecaster,
    OccupancyForecaster,
    RenewalOfferGenerator,
)
from .results import InsightsReport, InsightsSummary
from .store import DataStore

logger = logging.getLogger(__name__)


class InsightsEngine:
    """
    Operations intelligence over a read-only gym data store.

    Analyzers (one result list each):
    - revenue_opportunities: members worth upgrading
    - retention_risks: members likely to drop off (top 10)
    - churn_forecast: next 3 months of churn
    - revenue_forecast: next 3 months of billed revenue
    - peak_hour_forecast: hourly occupancy per weekday
    - renewal_offers: one offer per renewal due within 30 days

    All six run concurrently. Each degrades to an empty list on failure or
    timeout without affecting the others.
    """

    def __init__(
        self,
        store: DataStore,
        config: Optional[EngineConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize engine.

        Args:
            store: Object implementing the DataStore queries
            config: EngineConfig instance. Uses DEFAULT_CONFIG if None.
            rng: Random source for the occupancy jitter (seed it for
                reproducible curves)
        """
        self.store = store
        self.config = config or DEFAULT_CONFIG
        self.rng = rng
        self._init_analyzers()

    def _init_analyzers(self) -> None:
        """Initialize all analyzers."""
        analyzers = [
            OpportunityScorer(self.config),
            RiskScorer(self.config),
            ChurnForecaster(self.config),
            RevenueForecaster(self.config),
            OccupancyForecaster(self.config, rng=self.rng),
            RenewalOfferGenerator(self.config),
        ]
        self.analyzers = {analyzer.name: analyzer for analyzer in analyzers}

    def get_all_insights(self, today: Optional[date] = None) -> InsightsReport:
        """
        Build the full report.

        Never raises: if anything goes wrong outside the per-analyzer guards
        the caller gets an empty report with zeroed KPIs.
        """
        today = today or date.today()
        try:
            results, degraded = self._run_all(today)
            return InsightsReport(
                **results,
                summary=self.summarize(results),
                degraded=tuple(sorted(degraded)),
            )
        except Exception:
            logger.exception("Insights pipeline failed; returning empty report")
            return InsightsReport.empty()

    def _run_all(self, today: date) -> tuple[dict, list[str]]:
        timeout = self.config.call_timeout_seconds
        pool = ThreadPoolExecutor(max_workers=len(self.analyzers), thread_name_prefix="insights")
        try:
            futures = {
                pool.submit(analyzer.run_with_status, self.store, today): name
                for name, analyzer in self.analyzers.items()
            }
            done, not_done = wait(futures, timeout=timeout)

            results = {name: [] for name in self.analyzers}
            degraded = []
            for future in not_done:
                name = futures[future]
                future.cancel()
                degraded.append(name)
                logger.warning("%s timed out after %.1fs; returning no results", name, timeout)
            for future in done:
                name = futures[future]
                results[name], ok = future.result()
                if not ok:
                    degraded.append(name)
        finally:
            # Do not wait for stragglers; their results are already discarded
            pool.shutdown(wait=False, cancel_futures=True)

        logger.info(
            "Insights computed for %s: %s",
            today.isoformat(),
            ", ".join(f"{name}={len(items)}" for name, items in results.items()),
        )
        return results, degraded

    @staticmethod
    def summarize(results: dict) -> InsightsSummary:
        """Five headline KPIs over the analyzer results."""
        opportunities = results.get("revenue_opportunities", [])
        churn = results.get("churn_forecast", [])
        revenue = results.get("revenue_forecast", [])

        average_churn = (
            sum(point.predicted_churn_rate for point in churn) / len(churn) if churn else 0
        )
        return InsightsSummary(
            potential_revenue_increase=sum(o.revenue_delta for o in opportunities),
            high_risk_member_count=len(results.get("retention_risks", [])),
            average_churn_rate=average_churn,
            next_month_revenue=revenue[0].total_revenue if revenue else 0,
            upcoming_renewals=len(results.get("renewal_offers", [])),
        )
