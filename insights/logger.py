"""
Run logging for the insights engine.

Writes one JSON log per generated report so KPI drift can be tracked
between runs.
"""

import json
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:
    from .config import EngineConfig
    from .results import InsightsReport


class ReportLogger:
    """Structured JSON logging for insights runs."""

    def __init__(self, logs_dir: Path | str):
        """
        Initialize logger.

        Args:
            logs_dir: Directory to write log files
        """
        self.logs_dir = Path(logs_dir)
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def generate_run_id() -> str:
        """Generate unique run ID: insights_YYYYMMDD_XXXX"""
        date_str = datetime.now().strftime("%Y%m%d")
        return f"insights_{date_str}_{uuid.uuid4().hex[:4]}"

    def log_report(
        self,
        report: "InsightsReport",
        config: "EngineConfig",
        as_of: date,
        duration_seconds: float,
    ) -> Path:
        """
        Log a generated report to a JSON file.

        Args:
            report: InsightsReport returned by the engine
            config: EngineConfig used for the run
            as_of: Date the report was computed for
            duration_seconds: Wall time of the run

        Returns:
            Path to log file
        """
        run_id = self.generate_run_id()
        log_entry = {
            "run_id": run_id,
            "timestamp": datetime.now().isoformat(),
            "as_of": as_of.isoformat(),
            "duration_seconds": round(duration_seconds, 3),
            "config_version": config.version,
            "sizes": report.sizes(),
            "summary": report.summary.to_dict(),
            "degraded": list(report.degraded),
            "status": "DEGRADED" if report.degraded else "OK",
        }

        log_path = self.logs_dir / f"{run_id}.json"
        with open(log_path, "w") as f:
            json.dump(log_entry, f, indent=2, default=str)

        return log_path

    def get_all_logs(self) -> list[dict]:
        """
        Load all run logs.

        Returns:
            List of log dictionaries, sorted by file name
        """
        logs = []
        for log_file in sorted(self.logs_dir.glob("insights_*.json")):
            with open(log_file) as f:
                logs.append(json.load(f))
        return logs

    def get_summary_dataframe(self) -> pd.DataFrame:
        """
        Get KPI history of all runs as DataFrame, newest first.
        """
        logs = self.get_all_logs()
        if not logs:
            return pd.DataFrame()

        rows = []
        for log in logs:
            rows.append({
                "run_id": log["run_id"],
                "timestamp": log["timestamp"],
                "as_of": log["as_of"],
                "status": log["status"],
                **log.get("summary", {}),
            })

        df = pd.DataFrame(rows)
        return df.sort_values("timestamp", ascending=False).reset_index(drop=True)
