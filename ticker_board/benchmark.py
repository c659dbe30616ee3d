#!/usr/bin/env python3
"""
Micro-benchmark for Ticker Board.

Tests:
1. Frame decode throughput
2. Store apply throughput
3. Table row build speed (lock held)
4. Full frame speed (rows + Rich table to a null console)

Usage:
    python -m ticker_board.benchmark
"""

from __future__ import annotations

import asyncio
import io
import random
import time
from statistics import mean, stdev

import orjson
from rich.console import Console

from .config import ASSETS
from .datafeed.binance_client import decode_ticker
from .engine.state import TickerStore
from .ui.table_view import TickerTable


def generate_mock_frame(symbol: str, base_price: float = 60000.0) -> bytes:
    """Generate a mock @ticker frame."""
    last = base_price + random.uniform(-50, 50)
    change = last - base_price
    now_ms = int(time.time() * 1000)
    return orjson.dumps({
        'e': '24hrTicker',
        'E': now_ms,
        's': symbol.upper(),
        'p': f"{change:.2f}",
        'P': f"{change / base_price * 100:.3f}",
        'w': f"{base_price:.2f}",
        'x': f"{base_price:.2f}",
        'c': f"{last:.2f}",
        'Q': f"{random.uniform(0.001, 2):.5f}",
        'b': f"{last - 0.5:.2f}",
        'B': f"{random.uniform(0.1, 10):.5f}",
        'a': f"{last + 0.5:.2f}",
        'A': f"{random.uniform(0.1, 10):.5f}",
        'C': now_ms,
    })


def benchmark_decode(iterations: int = 50000) -> None:
    """Benchmark frame decoding."""
    print("\n=== Decode Benchmark ===")

    frames = [generate_mock_frame(random.choice(ASSETS)) for _ in range(iterations)]

    start = time.perf_counter()
    for f in frames:
        decode_ticker(f)
    elapsed = time.perf_counter() - start

    rate = iterations / elapsed
    print(f"  Frames decoded: {iterations:,}")
    print(f"  Time: {elapsed*1000:.1f}ms")
    print(f"  Rate: {rate:,.0f} frames/sec")
    print(f"  Per frame: {elapsed/iterations*1_000_000:.2f}µs")


async def benchmark_apply(iterations: int = 50000) -> None:
    """Benchmark store updates (lock acquire + replace)."""
    print("\n=== Store Apply Benchmark ===")

    store = TickerStore(ASSETS)
    snapshots = [decode_ticker(generate_mock_frame(random.choice(ASSETS))) for _ in range(iterations)]

    start = time.perf_counter()
    for s in snapshots:
        await store.apply(s)
    elapsed = time.perf_counter() - start

    rate = iterations / elapsed
    print(f"  Updates applied: {iterations:,}")
    print(f"  Time: {elapsed*1000:.1f}ms")
    print(f"  Rate: {rate:,.0f} updates/sec")


async def _filled_store() -> TickerStore:
    store = TickerStore(ASSETS)
    for symbol in ASSETS:
        await store.apply(decode_ticker(generate_mock_frame(symbol)))
    return store


async def benchmark_build_rows(iterations: int = 2000) -> None:
    """Benchmark row building (what runs under the lock)."""
    print("\n=== Row Build Benchmark ===")

    store = await _filled_store()
    view = TickerTable(Console(file=io.StringIO()))

    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        await view.build_rows(store)
        times.append(time.perf_counter() - start)

    avg_time = mean(times) * 1000
    std_time = stdev(times) * 1000 if len(times) > 1 else 0.0

    print(f"  Iterations: {iterations}")
    print(f"  Avg time: {avg_time:.3f}ms")
    print(f"  Std dev: {std_time:.3f}ms")


async def benchmark_full_frame(iterations: int = 500) -> None:
    """Benchmark a complete frame, including Rich layout."""
    print("\n=== Full Frame Benchmark ===")

    store = await _filled_store()
    view = TickerTable(Console(file=io.StringIO(), width=120))

    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        await view.render(store)
        times.append(time.perf_counter() - start)

    avg_time = mean(times) * 1000
    std_time = stdev(times) * 1000 if len(times) > 1 else 0.0

    print(f"  Iterations: {iterations}")
    print(f"  Avg time: {avg_time:.3f}ms")
    print(f"  Std dev: {std_time:.3f}ms")
    print(f"  Max FPS possible: {1000/max(avg_time, 1e-6):,.0f}")


async def run_all() -> None:
    benchmark_decode()
    await benchmark_apply()
    await benchmark_build_rows()
    await benchmark_full_frame()


def main() -> None:
    """Run all benchmarks."""
    print("=" * 60)
    print("Ticker Board Performance Benchmark")
    print("=" * 60)

    asyncio.run(run_all())

    print("\n" + "=" * 60)
    print("Benchmark complete.")
    print("=" * 60)


if __name__ == "__main__":
    main()
