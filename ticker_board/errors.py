"""Exceptions raised by Ticker Board."""

from __future__ import annotations


class TickerBoardError(Exception):
    """Base class for all Ticker Board errors."""


class TickerDecodeError(TickerBoardError):
    """A stream frame could not be turned into a TickerSnapshot."""


class StreamConnectError(TickerBoardError):
    """A stream worker could not open its WebSocket."""

    def __init__(self, symbol: str, attempts: int, cause: BaseException | None = None) -> None:
        self.symbol = symbol
        super().__init__(f"{symbol}: connection failed after {attempts} attempt(s): {cause}")
