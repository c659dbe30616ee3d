"""
Fan-in consumer: drains the update queue into the TickerStore.

Every applied event triggers a full redraw. There is no coalescing, so a
burst of N updates produces N frames.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ..types import StreamFailure, TickerEvent

if TYPE_CHECKING:
    from ..ui.table_view import TickerTable
    from .state import TickerStore

logger = logging.getLogger(__name__)


class Aggregator:
    """Sole consumer of the update queue."""

    def __init__(
        self,
        updates: asyncio.Queue[TickerEvent],
        store: TickerStore,
        renderer: TickerTable,
    ) -> None:
        self.updates = updates
        self.store = store
        self.renderer = renderer
        self.applied_count: int = 0

    async def handle(self, event: TickerEvent) -> None:
        """Apply one event to the store, then redraw."""
        if isinstance(event, StreamFailure):
            await self.store.record_failure(event)
            logger.warning("Stream for %s is offline: %s", event.symbol, event.reason)
        else:
            await self.store.apply(event)
            self.applied_count += 1
            logger.debug("Update for %s stored: %s", event.symbol, event)

        await self.renderer.render(self.store)

    async def run(self) -> None:
        """Consume forever. Cancel the task to stop."""
        while True:
            event = await self.updates.get()
            try:
                await self.handle(event)
            finally:
                self.updates.task_done()
