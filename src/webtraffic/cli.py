"""Command line interface for the web traffic generator."""

from __future__ import annotations

import argparse
import logging
import random
import signal
import sys
from pathlib import Path
from typing import Optional, Sequence

from .browse.driver import Driver
from .browse.engine import TraversalEngine
from .browse.fetcher import Fetcher
from .core.config import SessionConfig, load_configuration
from .core.errors import ConfigError
from .core.logs import configure_logging
from .core.models import TrafficCounters
from .core.report import SessionSummary
from .core.utils import human_bytes

logger = logging.getLogger("webtraffic")


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="webtraffic",
        description="A CLI tool to generate web traffic for demo purposes.",
    )
    parser.add_argument(
        "--config",
        help="config file (default is $PWD/.webtraffic.yaml followed by $HOME/.webtraffic.yaml)",
    )
    parser.add_argument("--verbose", action="store_true", default=None, help="enable verbose logging")
    parser.add_argument("--max-depth", type=int, help="maximum depth for recursive browsing (default 10)")
    parser.add_argument("--min-depth", type=int, help="minimum depth for recursive browsing (default 3)")
    parser.add_argument("--max-wait", type=int, help="maximum wait time between requests (default 10)")
    parser.add_argument("--min-wait", type=int, help="minimum wait time between requests (default 5)")
    parser.add_argument("--summary", help="write a JSON session summary to this path on exit")
    parser.add_argument("--iterations", type=int, help="stop after this many root URLs instead of running forever")
    return parser.parse_args(argv)


def build_overrides(args: argparse.Namespace) -> dict[str, object]:
    return {
        "verbose": args.verbose,
        "max_depth": args.max_depth,
        "min_depth": args.min_depth,
        "max_wait": args.max_wait,
        "min_wait": args.min_wait,
    }


def log_summary(summary: SessionSummary) -> None:
    logger.info(
        "Session summary branches=%d good_requests=%d bad_requests=%d data_meter=%s min_wait=%d max_wait=%d blacklisted=%d",
        summary.branches,
        summary.good_requests,
        summary.bad_requests,
        human_bytes(summary.data_meter),
        summary.min_wait,
        summary.max_wait,
        len(summary.blacklist),
    )


def run_session(config: SessionConfig, *, iterations: Optional[int] = None, summary_path: Optional[Path] = None) -> SessionSummary:
    counters = TrafficCounters()
    rng = random.Random()
    fetcher = Fetcher(config, counters)
    engine = TraversalEngine(config, fetcher, rng=rng)
    driver = Driver(config, engine, rng=rng)

    if iterations is None:
        logger.info("This webtraffic command will now run indefinitely, use Ctrl+C to abort.")
    logger.debug("Configuration %s", config.as_dict())

    try:
        driver.run(iterations)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    finally:
        fetcher.close()

    summary = SessionSummary.collect(config, counters, driver.branches)
    log_summary(summary)
    if summary_path is not None:
        summary.save(summary_path)
        logger.info("Session summary saved to %s", summary_path)
    return summary


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_arguments(argv)
    configure_logging(bool(args.verbose))

    try:
        config = load_configuration(args.config, build_overrides(args))
    except ConfigError as exc:
        print(f"[!] Invalid configuration: {exc}", file=sys.stderr)
        return 2

    configure_logging(config.verbose)
    # SIGTERM should end the session the same way Ctrl+C does.
    signal.signal(signal.SIGTERM, signal.default_int_handler)

    summary_path = Path(args.summary).resolve() if args.summary else None
    run_session(config, iterations=args.iterations, summary_path=summary_path)
    return 0


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
