"""Tests for the ticker table renderer."""

import asyncio

import pytest

from conftest import snapshot
from ticker_board.config import ASSETS
from ticker_board.engine.aggregator import Aggregator
from ticker_board.engine.state import TickerStore
from ticker_board.types import StreamFailure
from ticker_board.ui.table_view import (
    CONVERSION_ERROR,
    DOWN_COLOR,
    OFFLINE_COLOR,
    PLACEHOLDER,
    UP_COLOR,
    TickerTable,
    trend_style,
)


def plain(row):
    return [cell.plain for cell in row]


@pytest.fixture
def store():
    return TickerStore(ASSETS)


@pytest.fixture
def view(console):
    return TickerTable(console)


def test_trend_style():
    assert trend_style(10.0, None) == ""
    assert trend_style(10.0, 9.0) == UP_COLOR
    assert trend_style(10.0, 11.0) == DOWN_COLOR
    assert trend_style(10.0, 10.0) == ""


@pytest.mark.asyncio
async def test_unseen_pairs_render_placeholders(store, view):
    rows = await view.build_rows(store)

    assert len(rows) == len(ASSETS)
    for symbol, row in zip(ASSETS, rows):
        assert plain(row) == [symbol.upper()] + [PLACEHOLDER] * 5


@pytest.mark.asyncio
async def test_rows_follow_declared_order_not_arrival(store, view):
    for symbol in reversed(ASSETS):
        await store.apply(snapshot(s=symbol.upper()))

    rows = await view.build_rows(store)
    assert [row[0].plain for row in rows] == [s.upper() for s in ASSETS]


@pytest.mark.asyncio
async def test_ticker_row_values(store, view):
    await store.apply(snapshot())

    rows = await view.build_rows(store)
    assert plain(rows[0]) == ["BTCUSDT", "61234.50", "61234.00", "61235.00", "120.10", "0.20%"]
    # Other rows untouched
    assert plain(rows[1]) == ["ETHUSDT"] + [PLACEHOLDER] * 5


@pytest.mark.asyncio
async def test_rendered_line(store, view, console):
    await store.apply(snapshot())
    await view.render(store)

    output = console.file.getvalue()
    line = next(l for l in output.splitlines() if "BTCUSDT" in l)
    cells = [c.strip() for c in line.split("│")]
    assert cells == ["BTCUSDT", "61234.50", "61234.00", "61235.00", "120.10", "0.20%"]

    header = next(l for l in output.splitlines() if "Pair" in l)
    assert [c.strip() for c in header.split("│")] == [
        "Pair", "Last Price", "Bid", "Ask", "Change", "Change %",
    ]
    assert view.frames_rendered == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("first, second, expected", [
    ("100.00", "101.00", UP_COLOR),
    ("101.00", "100.00", DOWN_COLOR),
    ("100.00", "100.00", ""),
])
async def test_last_price_trend_color(store, view, first, second, expected):
    await store.apply(snapshot(c=first))
    rows = await view.build_rows(store)
    assert rows[0][1].style == ""

    await store.apply(snapshot(c=second))
    rows = await view.build_rows(store)
    assert rows[0][1].style == expected


@pytest.mark.asyncio
async def test_trend_compares_with_previous_frame(store, view):
    await store.apply(snapshot(c="100.00"))
    await view.build_rows(store)
    await store.apply(snapshot(c="101.00"))
    await view.build_rows(store)

    # Another pair updates; BTC did not move since the last frame
    await store.apply(snapshot(s="ETHUSDT", c="3000.00"))
    rows = await view.build_rows(store)
    assert rows[0][1].style == ""


@pytest.mark.asyncio
async def test_conversion_error_row(store, view):
    await store.apply(snapshot(c="N/A"))
    await store.apply(snapshot(s="ETHUSDT", c="3000.00"))

    rows = await view.build_rows(store)
    assert plain(rows[0]) == ["BTCUSDT", CONVERSION_ERROR]
    assert plain(rows[1])[:2] == ["ETHUSDT", "3000.00"]
    assert len(rows) == len(ASSETS)


@pytest.mark.asyncio
async def test_conversion_error_in_other_column_still_tracks_last_price(store, view):
    await store.apply(snapshot(c="100.00", b="?"))
    rows = await view.build_rows(store)
    assert plain(rows[0]) == ["BTCUSDT", CONVERSION_ERROR]

    await store.apply(snapshot(c="99.00"))
    rows = await view.build_rows(store)
    assert rows[0][1].style == DOWN_COLOR


@pytest.mark.asyncio
async def test_offline_pair_is_marked(store, view):
    await store.record_failure(StreamFailure("xrpusdt", "connect failed"))

    rows = await view.build_rows(store)
    xrp = rows[ASSETS.index("xrpusdt")]
    assert xrp[0].plain == "XRPUSDT (offline)"
    assert plain(xrp)[1:] == [PLACEHOLDER] * 5


@pytest.mark.asyncio
async def test_dead_stream_is_marked_and_keeps_last_known_ticker(store, console):
    aggregator = Aggregator(asyncio.Queue(), store, TickerTable(console))
    await aggregator.handle(snapshot(c="100.00"))
    await aggregator.handle(StreamFailure("btcusdt", "read error: reset"))

    rows = await TickerTable(console).build_rows(store)
    assert rows[0][0].plain == "BTCUSDT (offline)"
    assert rows[0][0].style == OFFLINE_COLOR
    assert plain(rows[0])[1:] == ["100.00", "61234.00", "61235.00", "120.10", "0.20%"]
    # Other rows are not marked
    assert rows[1][0].plain == "ETHUSDT"


@pytest.mark.asyncio
async def test_dead_stream_with_bad_ticker_is_still_marked(store, view):
    await store.apply(snapshot(c="N/A"))
    await store.record_failure(StreamFailure("btcusdt", "stream closed"))

    rows = await view.build_rows(store)
    assert plain(rows[0]) == ["BTCUSDT (offline)", CONVERSION_ERROR]
