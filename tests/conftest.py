"""Shared fixtures: ticker frames, snapshots and a fake WebSocket session."""

import io
from types import SimpleNamespace

import aiohttp
import orjson
import pytest
from rich.console import Console

from ticker_board.config import FeedConfig
from ticker_board.datafeed.binance_client import decode_ticker

BASE_FRAME = {
    "e": "24hrTicker",
    "E": 1700000000000,
    "s": "BTCUSDT",
    "p": "120.10",
    "P": "0.20",
    "w": "61000.00",
    "x": "61114.40",
    "c": "61234.50",
    "Q": "0.015",
    "b": "61234.00",
    "B": "1.2",
    "a": "61235.00",
    "A": "0.8",
    "C": 1700000000123,
}


def frame(**overrides) -> str:
    """A @ticker frame as the stream sends it, with keys overridden."""
    data = dict(BASE_FRAME)
    data.update(overrides)
    return orjson.dumps(data).decode()


def snapshot(**overrides):
    return decode_ticker(frame(**overrides))


async def stored(store):
    """Tracked symbols that have a ticker, read under the store lock."""
    async with store.lock:
        return {
            symbol: store.snapshot_for(symbol)
            for symbol in store.symbols
            if store.snapshot_for(symbol) is not None
        }


def text_msg(data: str):
    return SimpleNamespace(type=aiohttp.WSMsgType.TEXT, data=data)


def binary_msg(data: bytes):
    return SimpleNamespace(type=aiohttp.WSMsgType.BINARY, data=data)


def error_msg():
    return SimpleNamespace(type=aiohttp.WSMsgType.ERROR, data=None)


class FakeWebSocket:
    """Replays a fixed list of messages. Exceptions in the list are raised."""

    def __init__(self, messages, exception=None):
        self._messages = list(messages)
        self._exception = exception
        self.closed = False

    def __aiter__(self):
        return self._iter()

    async def _iter(self):
        for msg in self._messages:
            if isinstance(msg, BaseException):
                raise msg
            yield msg

    def exception(self):
        return self._exception

    async def close(self):
        self.closed = True


class FakeSession:
    """Stands in for aiohttp.ClientSession.ws_connect."""

    def __init__(self, ws=None, failures=0, error=None):
        self.ws = ws
        self.failures = failures
        self.error = error or aiohttp.ClientConnectionError("connection refused")
        self.urls = []

    async def ws_connect(self, url):
        self.urls.append(url)
        if self.failures:
            self.failures -= 1
            raise self.error
        return self.ws


@pytest.fixture
def fast_config():
    """No real sleeping between connection attempts."""
    return FeedConfig(
        connect_attempts=3,
        reconnect_initial_delay=0.0,
        reconnect_max_delay=0.0,
    )


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120, color_system=None)
