"""
Data types for Ticker Board.

Notes:
- NamedTuple keeps snapshots immutable, so the store can only ever replace
  a whole record
- Decimal quantities stay as text until the renderer converts them
"""

from typing import NamedTuple, Union


class TickerSnapshot(NamedTuple):
    """Latest 24h rolling ticker for one pair, as sent by the stream."""
    symbol: str               # Lower-cased pair, e.g. "btcusdt"
    event_type: str           # "24hrTicker"
    event_time: int           # Event time, ms
    price_change: str
    price_change_pct: str
    weighted_avg_price: str
    prev_close_price: str
    last_price: str
    last_qty: str
    bid_price: str
    bid_qty: str
    ask_price: str
    ask_qty: str
    last_trade_time: int      # Time of the last trade, ms


class StreamFailure(NamedTuple):
    """A stream worker gave up. Published on the update queue like a ticker."""
    symbol: str
    reason: str


TickerEvent = Union[TickerSnapshot, StreamFailure]
