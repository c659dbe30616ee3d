"""
Ticker board rendered with Rich.

Layout (one row per pair, in declared order):

    Pair     │ Last Price │ Bid   │ Ask   │ Change │ Change %
    BTCUSDT  │ 61234.50   │ ...

The last price is green when it rose since the previous frame, red when it
fell, and unstyled otherwise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from ..engine.state import TickerStore
    from ..types import TickerSnapshot

COLUMNS = ("Pair", "Last Price", "Bid", "Ask", "Change", "Change %")

UP_COLOR = "green"
DOWN_COLOR = "red"
OFFLINE_COLOR = "red"
ERROR_COLOR = "yellow"
HEADER_COLOR = "bold"

PLACEHOLDER = "-"
CONVERSION_ERROR = "Conversion error"

Row = tuple[Text, ...]


def trend_style(price: float, previous: float | None) -> str:
    """Style for the last-price cell. Empty string means default."""
    if previous is None:
        return ""
    if price > previous:
        return UP_COLOR
    if price < previous:
        return DOWN_COLOR
    return ""


def symbol_label(symbol: str, offline: bool = False) -> Text:
    if offline:
        return Text(f"{symbol.upper()} (offline)", style=OFFLINE_COLOR)
    return Text(symbol.upper())


def placeholder_row(symbol: str, offline: bool = False) -> Row:
    """Row for a pair with no ticker yet."""
    return (symbol_label(symbol, offline),) + tuple(Text(PLACEHOLDER) for _ in COLUMNS[1:])


def ticker_row(symbol: str, snapshot: TickerSnapshot, store: TickerStore) -> Row:
    """
    Row for a pair with a ticker. Caller holds store.lock.

    A pair whose stream has ended keeps its last known values and gets the
    offline marker. Updates the previous price as a side effect whenever the
    last price converts, even if another column does not.
    """
    label = symbol_label(symbol, store.failure_for(symbol) is not None)

    style = ""
    try:
        last = float(snapshot.last_price)
    except ValueError:
        last = None
    else:
        style = trend_style(last, store.previous_price(symbol))
        store.set_previous_price(symbol, last)

    try:
        bid = float(snapshot.bid_price)
        ask = float(snapshot.ask_price)
        change = float(snapshot.price_change)
        change_pct = float(snapshot.price_change_pct)
    except ValueError:
        last = None

    if last is None:
        return (label, Text(CONVERSION_ERROR, style=ERROR_COLOR))

    return (
        label,
        Text(f"{last:.2f}", style=style),
        Text(f"{bid:.2f}"),
        Text(f"{ask:.2f}"),
        Text(f"{change:.2f}"),
        Text(f"{change_pct:.2f}%"),
    )


class TickerTable:
    """
    Full-screen redraw of the board.

    Usage:
        table = TickerTable()
        await table.render(store)
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.frames_rendered: int = 0

    async def build_rows(self, store: TickerStore) -> list[Row]:
        """
        Build one row per symbol in store.symbols order.

        Holds store.lock for the whole pass so a frame never mixes pre- and
        post-update state.
        """
        rows: list[Row] = []
        async with store.lock:
            for symbol in store.symbols:
                snapshot = store.snapshot_for(symbol)
                if snapshot is None:
                    rows.append(placeholder_row(symbol, store.failure_for(symbol) is not None))
                else:
                    rows.append(ticker_row(symbol, snapshot, store))
        return rows

    def make_table(self, rows: list[Row]) -> Table:
        table = Table(
            show_header=True,
            header_style=HEADER_COLOR,
            box=box.MINIMAL,
            padding=(0, 1),
        )
        table.add_column(COLUMNS[0], justify="left", min_width=10, no_wrap=True)
        table.add_column(COLUMNS[1], justify="left", min_width=12, no_wrap=True)
        for name in COLUMNS[2:]:
            table.add_column(name, justify="left", min_width=10, no_wrap=True)

        for row in rows:
            table.add_row(*row)
        return table

    async def render(self, store: TickerStore) -> None:
        """Clear the screen and draw the current state."""
        table = self.make_table(await self.build_rows(store))
        self.console.clear()
        self.console.print(table)
        self.frames_rendered += 1
