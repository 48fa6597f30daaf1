from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from dataclasses import replace
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from dirsync.app import build_directory_sync_worker, run_directory_sync, sync_directory_once
from dirsync.config import ConfigurationError, SyncConfig, configure_logging, get_sync_config

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dirsync.domain.scheduler import DirectorySyncWorker

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile the local user directory with the identity provider"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log merge decisions at DEBUG level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Run the sync loop until interrupted")
    run.add_argument(
        "--interval-minutes",
        type=float,
        default=None,
        help="Delay between reconciliation passes (defaults to config)",
    )
    run.add_argument(
        "--page-size",
        type=int,
        default=None,
        help="Number of users to request per upstream page (defaults to config)",
    )

    once = subparsers.add_parser("once", help="Run a single reconciliation pass")
    once.add_argument(
        "--page-size",
        type=int,
        default=None,
        help="Number of users to request per upstream page (defaults to config)",
    )

    return parser.parse_args(list(argv))


def _build_sync_config(args: argparse.Namespace) -> SyncConfig:
    config = get_sync_config()
    overrides: dict[str, float | int] = {}
    if getattr(args, "interval_minutes", None) is not None:
        overrides["poll_interval_minutes"] = args.interval_minutes
    if args.page_size is not None:
        overrides["page_size"] = args.page_size
    return replace(config, **overrides) if overrides else config


async def _serve(worker: DirectorySyncWorker) -> None:
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, stop_event.set)
        except NotImplementedError:  # pragma: no cover - Windows event loops
            log.debug("Signal handlers unavailable; stop with Ctrl+C")
    await run_directory_sync(stop_event, worker=worker)
    log.info("Directory sync stopped (failures=%s)", worker.failure_count)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        sync_config = _build_sync_config(parsed_args)
    except (ValueError, ConfigurationError):
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "run":
            worker = build_directory_sync_worker(sync_config=sync_config)
            asyncio.run(_serve(worker))
        elif parsed_args.command == "once":
            sync_directory_once(page_size=sync_config.page_size)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during directory sync")
        sys.exit(1)


if __name__ == "__main__":
    main()
