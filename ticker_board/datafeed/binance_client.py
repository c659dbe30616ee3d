"""
Binance spot ticker stream worker.

One StreamWorker per pair. Each worker:
1. Opens <ws_base>/ws/<symbol>@ticker, retrying with backoff
2. Decodes every text frame into a TickerSnapshot
3. Publishes snapshots on the shared update queue (fan-in)

Failures stay inside the worker: a worker that cannot connect, or whose
stream breaks, publishes a StreamFailure and ends. Other workers keep
running.
"""

from __future__ import annotations

import asyncio
import logging

import aiohttp
import orjson

from ..config import FeedConfig
from ..errors import StreamConnectError, TickerDecodeError
from ..types import StreamFailure, TickerEvent, TickerSnapshot
from .reconnect import ReconnectStrategy

logger = logging.getLogger(__name__)

# Wire key -> TickerSnapshot field, for the text-encoded decimal fields
DECIMAL_FIELDS = {
    "p": "price_change",
    "P": "price_change_pct",
    "w": "weighted_avg_price",
    "x": "prev_close_price",
    "c": "last_price",
    "Q": "last_qty",
    "b": "bid_price",
    "B": "bid_qty",
    "a": "ask_price",
    "A": "ask_qty",
}


def _as_text(key: str, value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise TickerDecodeError(f"field {key!r} is not a scalar: {value!r}")


def _as_int(key: str, value: object) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise TickerDecodeError(f"field {key!r} is not an integer: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise TickerDecodeError(f"field {key!r} is not an integer: {value!r}") from e


def decode_ticker(raw: str | bytes) -> TickerSnapshot:
    """
    Decode one @ticker frame.

    Expected format: {e, E, s, p, P, w, x, c, Q, b, B, a, A, C, ...}
    Unknown keys are ignored, missing decimal fields decode as "". The
    symbol is lower-cased.

    Raises TickerDecodeError if the frame is not a JSON object or has no
    symbol.
    """
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise TickerDecodeError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise TickerDecodeError(f"expected an object, got {type(data).__name__}")

    symbol = _as_text("s", data.get("s"))
    if not symbol:
        raise TickerDecodeError("missing symbol")

    fields = {name: _as_text(key, data.get(key)) for key, name in DECIMAL_FIELDS.items()}
    return TickerSnapshot(
        symbol=symbol.lower(),
        event_type=_as_text("e", data.get("e")),
        event_time=_as_int("E", data.get("E")),
        last_trade_time=_as_int("C", data.get("C")),
        **fields,
    )


class StreamWorker:
    """
    Owns the ticker stream of a single pair.

    Usage:
        worker = StreamWorker("btcusdt", updates, session, config)
        await worker.run()  # returns when the stream is gone for good
    """

    def __init__(
        self,
        symbol: str,
        updates: asyncio.Queue[TickerEvent],
        session: aiohttp.ClientSession,
        config: FeedConfig | None = None,
    ) -> None:
        self.symbol = symbol.lower()
        self.updates = updates
        self.session = session
        self.config = config or FeedConfig()

        # Counters, handy when debugging a quiet row
        self.frames_received: int = 0
        self.frames_published: int = 0
        self.frames_dropped: int = 0

    def _build_ws_url(self) -> str:
        return f"{self.config.ws_base}/ws/{self.symbol}@ticker"

    async def _connect(self) -> aiohttp.ClientWebSocketResponse:
        """
        Open the WebSocket, retrying with backoff.

        Raises StreamConnectError once connect_attempts is used up.
        """
        url = self._build_ws_url()
        attempts = self.config.connect_attempts
        strategy = ReconnectStrategy(
            initial_delay=self.config.reconnect_initial_delay,
            max_delay=self.config.reconnect_max_delay,
            backoff_factor=self.config.backoff_factor,
            max_retries=attempts - 1,
        )

        attempt = 0
        while True:
            attempt += 1
            try:
                ws = await self.session.ws_connect(url)
            except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
                if not strategy.should_retry():
                    raise StreamConnectError(self.symbol, attempt, e) from e
                delay = strategy.next_delay()
                logger.warning(
                    "Connect to %s failed (attempt %d/%d): %s; retrying in %.1fs",
                    url, attempt, attempts, e, delay,
                )
                await asyncio.sleep(delay)
            else:
                logger.info("Connected to %s", url)
                return ws

    async def _publish(self, event: TickerEvent) -> None:
        # Blocks while a bounded queue is full; nothing is dropped here
        await self.updates.put(event)

    def _handle_frame(self, raw: str) -> TickerSnapshot | None:
        self.frames_received += 1
        try:
            return decode_ticker(raw)
        except TickerDecodeError as e:
            self.frames_dropped += 1
            logger.warning("Dropping frame for %s: %s", self.symbol, e)
            return None

    async def run(self) -> None:
        """
        Connect, then decode and publish frames until the stream ends.

        Publishes a StreamFailure before returning.
        """
        try:
            ws = await self._connect()
        except StreamConnectError as e:
            logger.error("Giving up on %s: %s", self.symbol, e)
            await self._publish(StreamFailure(self.symbol, "connect failed"))
            return

        reason = "stream closed"
        try:
            async for msg in ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    snapshot = self._handle_frame(msg.data)
                    if snapshot is not None:
                        await self._publish(snapshot)
                        self.frames_published += 1
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    reason = f"read error: {ws.exception()}"
                    break
        except aiohttp.ClientError as e:
            reason = f"read error: {e}"
        finally:
            await ws.close()

        logger.error("Stream for %s ended: %s", self.symbol, reason)
        await self._publish(StreamFailure(self.symbol, reason))
