"""
Static configuration for Ticker Board.

The tracked pairs are fixed here. Everything that tunes the feed lives in
FeedConfig and can be overridden from the command line.
"""

from __future__ import annotations

from dataclasses import dataclass

# Binance spot endpoint (port 9443 is the documented stream port)
WS_BASE = "wss://stream.binance.com:9443"

# Display order of the board. Rows are always rendered in this order.
ASSETS: tuple[str, ...] = (
    "btcusdt",
    "ethusdt",
    "bnbusdt",
    "xrpusdt",
    "solusdt",
    "adausdt",
)


@dataclass
class FeedConfig:
    """Stream worker and update queue settings."""
    ws_base: str = WS_BASE
    connect_attempts: int = 5
    reconnect_initial_delay: float = 1.0
    reconnect_max_delay: float = 30.0
    backoff_factor: float = 2.0
    queue_size: int = 0  # 0 = unbounded; a full queue blocks the sender

    def __post_init__(self) -> None:
        if self.connect_attempts < 1:
            raise ValueError("connect_attempts must be >= 1")
        if self.queue_size < 0:
            raise ValueError("queue_size must be >= 0")
        self.ws_base = self.ws_base.rstrip("/")
