from __future__ import annotations

import httpx
import pytest

from edgarcards.core.errors import UpstreamError
from edgarcards.models.records import ReferenceRow
from edgarcards.services.index import (
    PRIMARY_URL,
    SECONDARY_URL,
    build_index,
    merge_rows,
    rows_from_primary,
    rows_from_secondary,
)
from edgarcards.services.normalize import plain_key
from helpers import Routes, connect_error

PRIMARY = {
    "0": {"cik_str": 320193, "ticker": "AAPL", "title": "Apple Inc."},
    "1": {"cik_str": 1067983, "ticker": "BRK-B", "title": "BERKSHIRE HATHAWAY INC"},
    "2": {"cik_str": 789019, "ticker": "msft", "title": "MICROSOFT CORP"},
    "3": {"cik_str": 1, "ticker": "", "title": "No ticker"},
}

SECONDARY = [
    {"cik": 1111111, "ticker": "BRK.B", "title": "Berkshire (exchange list)", "exchange": "NYSE"},
    {"cik": 1652044, "ticker": "GOOGL", "title": "Alphabet Inc.", "exchange": "Nasdaq"},
]


def test_rows_from_primary_pads_and_skips_blank():
    rows = rows_from_primary(PRIMARY)
    assert [r.ticker for r in rows] == ["AAPL", "BRK-B", "MSFT"]
    assert rows[0].cik == "0000320193"


def test_rows_from_primary_rejects_wrong_shape():
    with pytest.raises(UpstreamError):
        rows_from_primary([1, 2, 3])


def test_rows_from_secondary_columnar_layout():
    doc = {
        "fields": ["cik", "name", "ticker", "exchange"],
        "data": [[320193, "Apple Inc.", "AAPL", "Nasdaq"], "junk"],
    }
    assert rows_from_secondary(doc) == [ReferenceRow(ticker="AAPL", cik="320193", name="Apple Inc.")]
    assert rows_from_secondary({"unexpected": True}) == []


def test_merge_secondary_wins_on_plain_key_collision():
    primary = [ReferenceRow(ticker="BRK-B", cik="1067983", name="Primary")]
    secondary = [ReferenceRow(ticker="BRK.B", cik="1111111", name="Secondary")]

    merged = merge_rows(primary, secondary)
    assert len(merged) == 1
    assert merged[0].cik == "0001111111"
    assert plain_key(merged[0].ticker) == "BRKB"


def test_merge_has_unique_plain_keys():
    primary = rows_from_primary(PRIMARY)
    merged = merge_rows(primary, rows_from_secondary(SECONDARY))
    keys = [plain_key(r.ticker) for r in merged]
    assert len(keys) == len(set(keys))
    assert set(keys) == {"AAPL", "BRKB", "MSFT", "GOOGL"}


@pytest.mark.asyncio
async def test_build_index_merges_both_sources(make_fetcher):
    routes = Routes({
        PRIMARY_URL: httpx.Response(200, json=PRIMARY),
        SECONDARY_URL: httpx.Response(200, json=SECONDARY),
    })
    rows = await build_index(make_fetcher(routes), host_hint="cards.example.com")

    by_key = {plain_key(r.ticker): r for r in rows}
    assert by_key["BRKB"].cik == "0001111111"
    assert by_key["AAPL"].name == "Apple Inc."
    assert routes.requests[0].headers["Referer"] == "https://cards.example.com"


@pytest.mark.asyncio
async def test_build_index_survives_secondary_failure(make_fetcher):
    routes = Routes({
        PRIMARY_URL: httpx.Response(200, json=PRIMARY),
        SECONDARY_URL: connect_error,
    })
    rows = await build_index(make_fetcher(routes))
    assert {r.ticker for r in rows} == {"AAPL", "BRK-B", "MSFT"}
    assert routes.hits(SECONDARY_URL) == 4


@pytest.mark.asyncio
async def test_build_index_propagates_primary_failure(make_fetcher):
    routes = Routes({
        PRIMARY_URL: httpx.Response(403),
        SECONDARY_URL: httpx.Response(200, json=SECONDARY),
    })
    with pytest.raises(UpstreamError):
        await build_index(make_fetcher(routes))
