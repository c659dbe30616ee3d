"""
Ticker Board - Live multi-pair price board for Binance spot tickers.

Architecture:
- datafeed/: One WebSocket stream worker per pair, frame decoding, backoff
- engine/: Shared ticker state and the aggregator that feeds it
- ui/: Color-coded console table (Rich)
"""

__version__ = "0.1.0"
