"""Command-line entry point.

Usage:
    cqlbench --prepare --node 10.0.0.1:9042 --replication-factor 3
    cqlbench --run --workload mixed --tasks 1000000 --concurrency 256
    cqlbench --run --runner tasks --batch-size 256 --workload read
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from cqlbench.bench import execute
from cqlbench.config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_CONCURRENCY,
    DEFAULT_NODES,
    DEFAULT_REPLICATION_FACTOR,
    DEFAULT_TASKS,
    RUNNERS,
    BenchConfig,
    Compression,
    Mode,
    Workload,
)
from cqlbench.errors import ConfigError, ConnectError, PrepareError, VerificationFault
from cqlbench.logger import setup_logger

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_CONFIG = 2
EXIT_VERIFICATION = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cqlbench",
        description="Concurrent write/read load generator for CQL clusters",
    )
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument(
        "--prepare", action="store_true",
        help="Prepare keyspace and table before the bench",
    )
    action.add_argument("--run", action="store_true", help="Run the benchmark")

    parser.add_argument(
        "--node", "--nodes", dest="nodes", default=DEFAULT_NODES, metavar="ADDRESS",
        help=f"Cluster contact node(s), comma-separated (default: {DEFAULT_NODES})",
    )
    parser.add_argument(
        "--concurrency", type=int, default=DEFAULT_CONCURRENCY, metavar="COUNT",
        help=f"Workload concurrency (default: {DEFAULT_CONCURRENCY})",
    )
    parser.add_argument(
        "--tasks", type=int, default=DEFAULT_TASKS, metavar="COUNT",
        help=f"Task count (default: {DEFAULT_TASKS:,})",
    )
    parser.add_argument(
        "--replication-factor", type=int, default=DEFAULT_REPLICATION_FACTOR,
        metavar="FACTOR",
        help=f"Replication factor, used with --prepare (default: {DEFAULT_REPLICATION_FACTOR})",
    )
    parser.add_argument(
        "--consistency", default=None, metavar="CONSISTENCY",
        help="Consistency level (accepted, currently not applied)",
    )
    parser.add_argument(
        "--compression", default=Compression.NONE.value, metavar="ALGORITHM",
        help="Compression algorithm to use (none, lz4 or snappy)",
    )
    parser.add_argument(
        "--workload", default=Workload.WRITES.value, metavar="TYPE",
        help="Workload type (write, read or mixed)",
    )
    parser.add_argument(
        "--runner", default="threads", choices=RUNNERS,
        help="Concurrency model: one thread per worker, or asyncio batches (default: threads)",
    )
    parser.add_argument(
        "--batch-size", type=int, default=DEFAULT_BATCH_SIZE, metavar="COUNT",
        help=f"Tasks per batch for --runner tasks (default: {DEFAULT_BATCH_SIZE})",
    )
    parser.add_argument(
        "--no-prepared", dest="use_prepared", action="store_false",
        help="Send ad-hoc statements instead of prepared ones",
    )
    parser.add_argument(
        "--progress-bar", action="store_true",
        help="Show a progress bar instead of percentage lines",
    )
    parser.add_argument(
        "--log-dir", default=None,
        help="Also write a timestamped log file to this directory",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log debug output to stderr",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> BenchConfig:
    """Turn parsed arguments into a validated BenchConfig."""
    config = BenchConfig(
        mode=Mode.PREPARE if args.prepare else Mode.RUN,
        nodes=args.nodes,
        concurrency=args.concurrency,
        tasks=args.tasks,
        replication_factor=args.replication_factor,
        compression=Compression.parse(args.compression),
        workload=Workload.parse(args.workload),
        consistency=args.consistency,
        runner=args.runner,
        batch_size=args.batch_size,
        use_prepared=args.use_prepared,
        progress_bar=args.progress_bar,
    )
    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except ConfigError as exc:
        parser.error(str(exc))  # exits 2

    setup_logger(
        args.log_dir,
        force=True,
        console_level=logging.DEBUG if args.verbose else logging.WARNING,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        execute(config)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        sys.exit(EXIT_CONFIG)
    except (ConnectError, PrepareError) as exc:
        logger.error("%s", exc)
        sys.exit(EXIT_FAILURE)
    except VerificationFault as exc:
        logger.critical("%s", exc)
        sys.exit(EXIT_VERIFICATION)


if __name__ == "__main__":
    main()
