"""
Tests for the CLI entry point and run logging.
"""

import json

import pytest

from insights import InsightsEngine, EngineConfig
from insights.logger import ReportLogger
from insights.run import main

from conftest import TODAY


class TestReportLogger:
    """JSON run logs."""

    def test_log_report_writes_json(self, tmp_path, scenario_store):
        report = InsightsEngine(scenario_store).get_all_insights(TODAY)
        logger = ReportLogger(tmp_path / "logs")

        path = logger.log_report(report, EngineConfig(), TODAY, 0.25)

        assert path.name.startswith("insights_")
        entry = json.loads(path.read_text())
        assert entry["as_of"] == "2026-06-15"
        assert entry["status"] == "OK"
        assert entry["sizes"]["churn_forecast"] == 3
        assert entry["summary"]["upcomingRenewals"] == 3

    def test_summary_dataframe(self, tmp_path, scenario_store, empty_store):
        logger = ReportLogger(tmp_path)
        for store in (scenario_store, empty_store):
            report = InsightsEngine(store).get_all_insights(TODAY)
            logger.log_report(report, EngineConfig(), TODAY, 0.1)

        history = logger.get_summary_dataframe()

        assert len(history) == 2
        assert "nextMonthRevenue" in history.columns

    def test_no_logs_empty_dataframe(self, tmp_path):
        assert ReportLogger(tmp_path).get_summary_dataframe().empty


class TestCli:
    """python -m insights.run"""

    def test_sample_run_writes_report_and_log(self, tmp_path, capsys):
        output = tmp_path / "report.json"
        code = main([
            "--sample", "40",
            "--seed", "5",
            "--today", "2026-06-15",
            "--no-jitter",
            "--output", str(output),
            "--log-dir", str(tmp_path / "logs"),
        ])

        assert code == 0
        payload = json.loads(output.read_text())
        assert len(payload["peakHourForecast"]) == 7
        assert "summary" in payload
        assert list((tmp_path / "logs").glob("insights_*.json"))
        assert "GYM OPERATIONS INSIGHTS" in capsys.readouterr().out

    def test_history(self, tmp_path, capsys):
        main(["--sample", "20", "--today", "2026-06-15", "--log-dir", str(tmp_path)])
        capsys.readouterr()

        assert main(["--history", "--log-dir", str(tmp_path)]) == 0
        assert "insights_" in capsys.readouterr().out

    def test_requires_a_data_source(self):
        with pytest.raises(SystemExit):
            main([])

    def test_missing_csv_is_a_usage_error(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--members", str(tmp_path / "nope.csv"), "--today", "2026-06-15"])

        assert exc.value.code == 2
        assert "could not load store exports" in capsys.readouterr().err

    def test_invalid_csv_is_a_usage_error(self, tmp_path, capsys):
        members = tmp_path / "members.csv"
        members.write_text(
            "id,name,membership_plan,join_date,expiration_date,status\n"
            "1,Ravi,Platinum,2026-01-10,2026-07-10,active\n"
        )

        with pytest.raises(SystemExit) as exc:
            main(["--members", str(members), "--today", "2026-06-15"])

        assert exc.value.code == 2
        assert "could not load store exports" in capsys.readouterr().err
