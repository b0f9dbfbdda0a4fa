"""Base class for analyzers."""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import EngineConfig
    from ..store import DataStore

logger = logging.getLogger(__name__)


class BaseAnalyzer(ABC):
    """
    Abstract base class for analyzers.

    Each analyzer splits its work in two:
    - ``fetch`` runs the store queries it needs (the only I/O)
    - ``analyze`` is a pure function of the fetched frames and ``today``

    ``run`` chains both and turns any failure into an empty result so one
    broken query never takes the whole report down.
    """

    name: str = "base"

    def __init__(self, config: "EngineConfig"):
        """
        Initialize analyzer with configuration.

        Args:
            config: EngineConfig instance with thresholds and prices
        """
        self.config = config

    @abstractmethod
    def fetch(self, store: "DataStore", today: date) -> tuple:
        """
        Query the store for everything ``analyze`` needs.

        Returns:
            Tuple of positional arguments for ``analyze`` (excluding today)
        """
        pass

    @abstractmethod
    def analyze(self, *frames, today: date) -> list:
        """
        Compute results from already-fetched data.

        Must not touch the store.
        """
        pass

    def run(self, store: "DataStore", today: date) -> list:
        """Fetch and analyze, degrading to an empty list on any error."""
        results, _ = self.run_with_status(store, today)
        return results

    def run_with_status(self, store: "DataStore", today: date) -> tuple[list, bool]:
        """Like ``run``, also reporting whether the analysis succeeded."""
        try:
            frames = self.fetch(store, today)
            results = self.analyze(*frames, today=today)
        except Exception:
            logger.exception("%s analysis failed; returning no results", self.name)
            return [], False
        logger.debug("%s produced %d results", self.name, len(results))
        return results, True
