#!/usr/bin/env python3
"""
Ticker Board - Live price board for a fixed set of Binance spot pairs.

Usage:
    python -m ticker_board.main
    python -m ticker_board.main --log-file logs/board.log --log-level INFO

Stop with Ctrl+C.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

from .config import ASSETS, WS_BASE, FeedConfig

logger = logging.getLogger(__name__)


def _install_stop_handlers(stop: asyncio.Event) -> None:
    """Set `stop` on SIGINT/SIGTERM where the loop supports it."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            # Windows: Ctrl+C still arrives as KeyboardInterrupt in cli()
            pass


async def main(config: FeedConfig, stop: asyncio.Event | None = None) -> None:
    """
    Main entry point - runs one stream worker per pair plus the aggregator.

    Runs until `stop` is set. If the aggregator dies, its exception is
    re-raised after the workers are cancelled.
    """

    # Import here to avoid slow startup for --help
    import aiohttp

    from .datafeed.binance_client import StreamWorker
    from .engine.aggregator import Aggregator
    from .engine.state import TickerStore
    from .ui.table_view import TickerTable

    if stop is None:
        stop = asyncio.Event()
        _install_stop_handlers(stop)

    updates: asyncio.Queue = asyncio.Queue(maxsize=config.queue_size)
    store = TickerStore(ASSETS)
    renderer = TickerTable()
    aggregator = Aggregator(updates, store, renderer)

    # First frame: every row is a placeholder until its stream speaks
    await renderer.render(store)

    async with aiohttp.ClientSession() as session:
        worker_tasks = [
            asyncio.create_task(
                StreamWorker(symbol, updates, session, config).run(),
                name=f"stream-{symbol}",
            )
            for symbol in ASSETS
        ]
        aggregator_task = asyncio.create_task(aggregator.run(), name="aggregator")
        stop_task = asyncio.create_task(stop.wait(), name="stop")

        try:
            await asyncio.wait(
                {aggregator_task, stop_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            tasks = [*worker_tasks, aggregator_task, stop_task]
            for task in tasks:
                task.cancel()
            results = await asyncio.gather(*tasks, return_exceptions=True)
            for task, result in zip(worker_tasks, results):
                if isinstance(result, Exception):
                    logger.error("Task %s failed", task.get_name(), exc_info=result)

        if aggregator_task.done() and not aggregator_task.cancelled():
            error = aggregator_task.exception()
            if error is not None:
                raise error

    logger.info("Shut down after %d updates", aggregator.applied_count)


def cli() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Ticker Board - Live price board for Binance spot pairs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Pairs (fixed): {", ".join(s.upper() for s in ASSETS)}

Examples:
    python -m ticker_board.main
    python -m ticker_board.main --log-file board.log --log-level DEBUG
        """
    )

    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level (default: WARNING)"
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file"
    )

    parser.add_argument(
        "--connect-attempts",
        type=int,
        default=5,
        help="Connection attempts per pair before marking it offline (default: 5)"
    )

    parser.add_argument(
        "--queue-size",
        type=int,
        default=0,
        help="Update queue capacity, 0 for unbounded (default: 0)"
    )

    parser.add_argument(
        "--ws-base",
        default=None,
        help="WebSocket base URL (default: Binance spot)"
    )

    args = parser.parse_args()

    from .logger import setup_logging

    try:
        setup_logging(args.log_level, args.log_file)
        config = FeedConfig(
            connect_attempts=args.connect_attempts,
            queue_size=args.queue_size,
            ws_base=args.ws_base or WS_BASE,
        )
    except ValueError as e:
        parser.error(str(e))

    # Run. SIGINT either sets the stop event (POSIX) or raises here.
    try:
        asyncio.run(main(config))
    except KeyboardInterrupt:
        pass
    print("\nShutdown requested.")
    sys.exit(0)


if __name__ == "__main__":
    cli()
