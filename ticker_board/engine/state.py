"""
Shared ticker state.

Three mappings keyed by lower-case symbol:
- latest TickerSnapshot (replaced whole on every update, never deleted)
- previous last price, owned by the renderer for trend coloring
- StreamFailure for workers that gave up

Concurrency: one asyncio.Lock guards all three. Writers take it in apply()
and record_failure(); the renderer holds it while building a frame.
"""

from __future__ import annotations

import asyncio
from typing import Iterable

from ..types import StreamFailure, TickerSnapshot


class TickerStore:
    """
    Latest ticker per symbol plus the renderer's previous-price memory.

    The accessor methods (snapshot_for, previous_price, ...) do not lock on
    their own; call them inside `async with store.lock`.
    """

    __slots__ = ('symbols', 'lock', '_snapshots', '_prev_prices', '_failures')

    def __init__(self, symbols: Iterable[str]) -> None:
        # Declared display order; never derived from the dicts below
        self.symbols: tuple[str, ...] = tuple(s.lower() for s in symbols)
        self.lock = asyncio.Lock()

        self._snapshots: dict[str, TickerSnapshot] = {}
        self._prev_prices: dict[str, float] = {}
        self._failures: dict[str, StreamFailure] = {}

    async def apply(self, snapshot: TickerSnapshot) -> None:
        """Replace the snapshot for snapshot.symbol."""
        async with self.lock:
            self._snapshots[snapshot.symbol] = snapshot

    async def record_failure(self, failure: StreamFailure) -> None:
        """Remember that the stream for failure.symbol has ended."""
        async with self.lock:
            self._failures[failure.symbol] = failure

    def _check_locked(self) -> None:
        if not self.lock.locked():
            raise RuntimeError("TickerStore accessed without holding its lock")

    def snapshot_for(self, symbol: str) -> TickerSnapshot | None:
        self._check_locked()
        return self._snapshots.get(symbol)

    def failure_for(self, symbol: str) -> StreamFailure | None:
        self._check_locked()
        return self._failures.get(symbol)

    def previous_price(self, symbol: str) -> float | None:
        self._check_locked()
        return self._prev_prices.get(symbol)

    def set_previous_price(self, symbol: str, price: float) -> None:
        self._check_locked()
        self._prev_prices[symbol] = price
