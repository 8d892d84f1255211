from __future__ import annotations

from typing import Callable, List

import httpx
import pytest

from edgarcards.models.records import ReferenceRow
from edgarcards.services.fetch import ResilientFetcher
from helpers import Routes, SleepRecorder


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_fetcher(sleeper) -> Callable[..., ResilientFetcher]:
    def _make(routes: Routes, **kw) -> ResilientFetcher:
        client = httpx.AsyncClient(transport=httpx.MockTransport(routes))
        kw.setdefault("user_agent", "tests (qa@example.com)")
        return ResilientFetcher(client=client, sleep=sleeper, **kw)
    return _make


@pytest.fixture
def rows() -> List[ReferenceRow]:
    return [
        ReferenceRow(ticker="AAPL", cik="320193", name="Apple Inc."),
        ReferenceRow(ticker="BRK-B", cik="1067983", name="Berkshire Hathaway Inc"),
        ReferenceRow(ticker="AMZN", cik="1018724", name="Amazon Com Inc"),
        ReferenceRow(ticker="PAAPL", cik="9999001", name="Pineapple Holdings Corp"),
        ReferenceRow(ticker="MSFT", cik="789019", name="Microsoft Corp"),
        ReferenceRow(ticker="AAPLX", cik="9999002", name="Apple Hospitality REIT"),
        ReferenceRow(ticker="ZZZ", cik="9999003", name="AAPL Tracking Trust"),
    ]
