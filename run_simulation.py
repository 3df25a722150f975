#!/usr/bin/env python3
"""CLI entrypoint for the day-stepped trading simulation.

Usage::

    python run_simulation.py --config config/example.yaml
    python run_simulation.py --config config/example.yaml --ticker MSFT --backend mock

The simulation loads a YAML configuration file, validates the ticker, fetches
the price history for the window, then runs the analysis pipeline once per
trading day and prints the resulting log and summary.  Nothing is written
to disk.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from api_client.market_data import YahooMarketData
from evidence.tickers import TickerResolver
from models.config import SimulationConfig
from pipeline.runner import build_pipeline
from simulation.runner import SimulationRunner
from simulation.sim_logging import format_day_log, format_summary


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run an evidence-driven trading simulation for one ticker.",
    )
    parser.add_argument(
        "--config",
        required=True,
        type=str,
        help="Path to the YAML configuration file.",
    )
    parser.add_argument(
        "--ticker",
        default=None,
        type=str,
        help="Override the ticker from the config file.",
    )
    parser.add_argument(
        "--backend",
        default=None,
        choices=["llm", "mock"],
        help="Override the oracle backend from the config file.",
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


async def _main() -> int:
    load_dotenv()
    args = _parse_args()
    _setup_logging(args.log_level)

    logger = logging.getLogger(__name__)
    logger.info("Loading config from '%s'...", args.config)

    config = SimulationConfig.from_yaml(args.config)
    if args.ticker:
        config = config.model_copy(update={"ticker": args.ticker})
    if args.backend:
        config.pipeline.oracle.backend = args.backend
    logger.info(
        "Config loaded: ticker='%s', variant='%s', backend='%s'",
        config.ticker,
        config.pipeline.variant,
        config.pipeline.oracle.backend,
    )

    market_data = YahooMarketData()
    runner = SimulationRunner(
        config,
        resolver=TickerResolver(market_data),
        market_data=market_data,
        pipeline=build_pipeline(config.pipeline, market_data=market_data),
    )
    result = await runner.run()

    if result.status == "failed":
        print(f"Simulation failed: {result.error}")
        return 1

    print(f"\n{result.ticker}: {result.start_date} to {result.end_date}\n")
    print(format_day_log(result.log))
    print()
    print(format_summary(result.summary))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(_main()))
