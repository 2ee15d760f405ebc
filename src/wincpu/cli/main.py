"""
Command-line interface for wincpu.

Prints the result of one query as JSON. Exit status is 0 on success and 1 on
any wincpu error; ``supported`` exits 1 when the host is not supported.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, List, Optional

from ..config import WinCpuConfig
from ..exceptions import WinCpuError, handle_cli_error
from ..extractor import WindowsCPU

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wincpu",
        description="Report Windows CPU load, processor inventory and memory usage.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for each external command (default: wait forever).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail with the reason if the host is not supported before querying.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("supported", help="Check whether this host is supported.")
    subparsers.add_parser("load", help="Load percentage of each logical CPU.")
    find = subparsers.add_parser("find", help="Per-process load, optionally filtered.")
    find.add_argument(
        "filter",
        nargs="?",
        default=None,
        help="Process id or name substring. Names are cut at the first space.",
    )
    subparsers.add_parser("node", help="Load of node processes.")
    subparsers.add_parser("self", help="Load of this wincpu process.")
    subparsers.add_parser("cpus", help="Installed processor names.")
    subparsers.add_parser("memory", help="Total working-set memory of all processes.")
    return parser


def _parse_filter(value: Optional[str]):
    if value is not None and value.isdigit():
        return int(value)
    return value


async def run_query(stats: WindowsCPU, args: argparse.Namespace) -> Any:
    """Dispatch one subcommand and return a JSON-serializable result."""
    if args.command == "load":
        return await stats.total_load()
    if args.command == "find":
        return (await stats.find_load(_parse_filter(args.filter))).to_dict()
    if args.command == "node":
        return (await stats.node_load()).to_dict()
    if args.command == "self":
        return (await stats.this_load()).to_dict()
    if args.command == "cpus":
        return await stats.cpu_info()
    if args.command == "memory":
        return (await stats.total_memory_usage()).to_dict()
    raise ValueError(f"Unknown command: {args.command}")


def main_cli(argv: Optional[List[str]] = None) -> None:
    """Entry point of the ``wincpu`` console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    try:
        config = WinCpuConfig.from_env()
        if args.timeout is not None:
            config = WinCpuConfig(
                wmic_path=config.wmic_path,
                tasklist_path=config.tasklist_path,
                command_timeout=args.timeout,
                encoding=config.encoding,
            )
        stats = WindowsCPU(config=config, strict=args.strict)

        if args.command == "supported":
            supported = stats.is_supported()
            print(json.dumps({"supported": supported}))
            sys.exit(0 if supported else 1)

        result = asyncio.run(run_query(stats, args))
    except WinCpuError as e:
        handle_cli_error(
            error=e,
            context=f"'{args.command}'",
            logger=logger,
            exit_code=1,
            include_traceback=args.log_level == "DEBUG",
        )
        return

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main_cli()
