#!/usr/bin/env python3
"""CLI entrypoint for one-shot analysis of a ticker.

Usage::

    python run_analysis.py --ticker AAPL
    python run_analysis.py --ticker AAPL --variant extended
    python run_analysis.py --ticker AAPL --config config/example.yaml --backend mock

Validates the ticker, runs one live pipeline pass and prints the price
snapshot, the intermediate analysis and the trading signal.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

from api_client.market_data import YahooMarketData
from evidence.tickers import TickerResolver
from models.analysis import AnalysisResult
from models.config import PipelineConfig, SimulationConfig
from pipeline.runner import AnalysisRunner, build_pipeline


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Analyse recent news for a ticker and produce a trading signal.",
    )
    parser.add_argument("--ticker", required=True, type=str, help="Symbol to analyse, e.g. AAPL.")
    parser.add_argument(
        "--config",
        default=None,
        type=str,
        help="Optional simulation YAML; only its 'pipeline' section is used.",
    )
    parser.add_argument(
        "--variant",
        default=None,
        choices=["basic", "extended"],
        help="Pipeline variant (default: from config, else basic).",
    )
    parser.add_argument(
        "--backend",
        default=None,
        choices=["llm", "mock"],
        help="Oracle backend (default: from config, else llm).",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO).",
    )
    return parser.parse_args()


def _setup_logging(level: str) -> None:
    """Configure root logger with a clean format."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


def _print_result(result: AnalysisResult) -> None:
    snapshot = result.price_snapshot
    print(f"\n=== {result.ticker} ({result.variant}) ===")
    if snapshot is not None:
        print(
            f"Price: ${snapshot.current_price:.2f} "
            f"({snapshot.price_change:+.2f}, {snapshot.price_change_pct:+.2f}% "
            f"since {result.prices[0].date})"
        )
    print(f"Evidence: {result.evidence.result_count} search result(s)")

    if result.summary:
        print("\nSummary:")
        for point in result.summary:
            print(f"  - {point}")
    if result.report is not None:
        print("\nResearch report:")
        print(json.dumps(result.report.model_dump(), indent=2))

    signal = result.signal
    print(
        f"\nSignal: {signal.signal.upper()} (confidence {signal.confidence}) -> "
        f"{signal.action} {signal.stocks}"
    )
    print(f"Reason: {signal.reason}")
    if signal.price_targets is not None:
        targets = signal.price_targets
        print(
            f"Targets: conservative {targets.conservative}, base {targets.base_case}, "
            f"optimistic {targets.optimistic} ({signal.time_horizon or 'n/a'})"
        )


async def _main() -> int:
    load_dotenv()
    args = _parse_args()
    _setup_logging(args.log_level)

    config = (
        SimulationConfig.from_yaml(args.config).pipeline
        if args.config
        else PipelineConfig()
    )
    if args.variant:
        config.variant = args.variant
    if args.backend:
        config.oracle.backend = args.backend

    market_data = YahooMarketData()
    runner = AnalysisRunner(
        TickerResolver(market_data),
        build_pipeline(config, market_data=market_data),
    )
    result = await runner.run(args.ticker)

    if not result.success:
        print(f"Analysis failed: {result.error}")
        return 1

    _print_result(result.data)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(_main()))
