#!/usr/bin/env python3
"""
CLI entry point for the insights engine.

Usage:
    # Report over CSV exports of the gym store
    python -m insights.run --members members.csv --attendance attendance.csv \
        --payments payments.csv

    # Report over generated sample data
    python -m insights.run --sample 200 --seed 7

    # Custom thresholds, full JSON report, run log
    python -m insights.run --sample 200 --config configs/tuned.yaml \
        --output report.json --log-dir logs

    # KPI history of logged runs
    python -m insights.run --history --log-dir logs
"""

import argparse
import json
import logging
import sys
import time
from datetime import date
from pathlib import Path

import numpy as np
import pandas as pd
from pandera.errors import SchemaError

from .config import EngineConfig
from .engine import InsightsEngine
from .logger import ReportLogger
from .store import FrameStore, generate_sample_data

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Gym operations insights",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m insights.run --sample 200
  python -m insights.run --members m.csv --attendance a.csv --payments p.csv
  python -m insights.run --history --log-dir logs
        """,
    )

    source = parser.add_argument_group("data source")
    source.add_argument("--members", type=Path, help="Members CSV export")
    source.add_argument("--attendance", type=Path, help="Attendance CSV export")
    source.add_argument("--payments", type=Path, help="Payments CSV export")
    source.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Use N generated sample members instead of CSV exports",
    )

    parser.add_argument("--seed", type=int, help="Seed for sample data and occupancy jitter")
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        help="Compute as of this date (YYYY-MM-DD, default: today)",
    )
    parser.add_argument("--config", type=Path, help="YAML file overriding EngineConfig")
    parser.add_argument(
        "--no-jitter",
        action="store_true",
        help="Disable occupancy display jitter",
    )
    parser.add_argument("--output", type=Path, help="Write the full JSON report here")
    parser.add_argument("--log-dir", type=Path, help="Directory for JSON run logs")
    parser.add_argument(
        "--history",
        action="store_true",
        help="Print KPI history from --log-dir and exit",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def load_store(args, today: date) -> FrameStore:
    if args.sample is not None:
        seed = args.seed if args.seed is not None else 42
        frames = generate_sample_data(n_members=args.sample, seed=seed, today=today)
        return FrameStore(**frames)
    return FrameStore.from_csv(args.members, args.attendance, args.payments)


def print_summary(report) -> None:
    summary = report.summary
    print("=" * 60)
    print("GYM OPERATIONS INSIGHTS")
    print("=" * 60)
    print(f"  Revenue opportunity:   {summary.potential_revenue_increase:,}")
    print(f"  At-risk members:       {summary.high_risk_member_count}")
    print(f"  Predicted churn:       {summary.average_churn_rate:.1f}%")
    print(f"  Next month revenue:    {summary.next_month_revenue:,}")
    print(f"  Upcoming renewals:     {summary.upcoming_renewals}")
    print("-" * 60)
    for name, size in report.sizes().items():
        print(f"  {name:<24} {size}")
    if report.degraded:
        print(f"  Degraded: {', '.join(report.degraded)}")


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    if args.history:
        if args.log_dir is None:
            parser.error("--history requires --log-dir")
        history = ReportLogger(args.log_dir).get_summary_dataframe()
        if history.empty:
            print("No runs logged yet.")
        else:
            with pd.option_context("display.width", 120):
                print(history.to_string(index=False))
        return 0

    if args.sample is None and args.members is None:
        parser.error("provide --members (and friends) or --sample")

    config = EngineConfig.from_yaml(args.config) if args.config else EngineConfig()
    if args.no_jitter:
        config.occupancy_jitter = 0.0

    today = args.today or date.today()
    try:
        store = load_store(args, today)
    except (OSError, SchemaError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        parser.error(f"could not load store exports: {e}")
    rng = np.random.default_rng(args.seed) if args.seed is not None else None
    engine = InsightsEngine(store, config, rng=rng)

    start = time.time()
    report = engine.get_all_insights(today)
    elapsed = time.time() - start

    print_summary(report)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w") as f:
            json.dump(report.to_dict(), f, indent=2)
        logger.info("Report written to %s", args.output)

    if args.log_dir:
        log_path = ReportLogger(args.log_dir).log_report(report, config, today, elapsed)
        logger.info("Run logged to %s", log_path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
