"""Command-line access to a file-backed pool.

Usage:
    exchange --ledger-dir ./ledger --caller alice createPool 1000
    exchange --ledger-dir ./ledger --caller bob addLiquidity 500
    exchange --ledger-dir ./ledger getReserves
    exchange --list
"""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Sequence
from dataclasses import replace

import structlog

from exchange.config import ExchangeConfig
from exchange.dispatch import OPERATIONS, Dispatcher
from exchange.errors import StoreFailure
from exchange.ledger.file import FileLedger
from exchange.log import configure_logging
from exchange.state_machine import PoolStateMachine

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exchange",
        description="Invoke a constant-product pool operation against a file-backed ledger",
    )
    parser.add_argument(
        "--ledger-dir",
        default=os.environ.get("EXCHANGE_LEDGER_DIR", "ledger"),
        help="Directory holding the ledger records (default: $EXCHANGE_LEDGER_DIR or ./ledger)",
    )
    parser.add_argument(
        "--caller",
        default=os.environ.get("EXCHANGE_CALLER", "admin"),
        help="Identity to invoke the operation as (default: $EXCHANGE_CALLER or admin)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: $EXCHANGE_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available operations and exit",
    )
    parser.add_argument("operation", nargs="?", help="Operation name, e.g. addLiquidity")
    parser.add_argument("args", nargs="*", help="Positional operation arguments")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list:
        for op in OPERATIONS.values():
            kind = "write" if op.mutating else "read"
            print(f"{op.name:<20} {kind:<6} args={op.min_args}-{op.max_args}")
        return 0

    if args.operation is None:
        parser.error("an operation is required (see --list)")

    try:
        config = ExchangeConfig.from_env()
        if args.log_level:
            config = replace(config, log_level=args.log_level.upper())
    except ValueError as err:
        print(f"Error: invalid configuration: {err}", file=sys.stderr)
        return 2

    configure_logging(config.log_level)

    try:
        ledger = FileLedger(args.ledger_dir)
    except StoreFailure as err:
        logger.error("ledger_unavailable", ledger_dir=args.ledger_dir, reason=str(err))
        return 1

    dispatcher = Dispatcher(ledger, PoolStateMachine(config))
    result = dispatcher.invoke(args.caller, args.operation, args.args)
    print(result.model_dump_json(exclude_none=True, indent=2))
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
