from __future__ import annotations

import httpx
import pytest

from edgarcards.core.errors import UpstreamError
from edgarcards.core.settings import DEFAULT_USER_AGENT
from edgarcards.services.fetch import ResilientFetcher
from helpers import Routes, connect_error

URL = "https://www.sec.gov/files/company_tickers.json"


@pytest.mark.asyncio
async def test_get_json_success_sends_identity(make_fetcher, sleeper):
    routes = Routes({URL: httpx.Response(200, json={"ok": 1})})
    fetcher = make_fetcher(routes, user_agent="Acme Research (ops@acme.test)")

    assert await fetcher.get_json(URL) == {"ok": 1}
    assert routes.requests[0].headers["User-Agent"] == "Acme Research (ops@acme.test)"
    assert routes.requests[0].headers["Accept"] == "application/json"
    assert sleeper.calls == []


def test_default_user_agent_has_contact():
    fetcher = ResilientFetcher(client=httpx.AsyncClient(), user_agent="")
    assert fetcher.user_agent == DEFAULT_USER_AGENT
    assert "@" in fetcher.user_agent


@pytest.mark.asyncio
async def test_retries_with_doubling_delay_then_succeeds(make_fetcher, sleeper):
    routes = Routes({URL: [httpx.Response(503), connect_error, httpx.Response(200, json=[1])]})
    fetcher = make_fetcher(routes)

    assert await fetcher.get_json(URL) == [1]
    assert routes.hits(URL) == 3
    assert sleeper.calls == pytest.approx([0.2, 0.4])


@pytest.mark.asyncio
async def test_gives_up_after_four_attempts(make_fetcher, sleeper):
    routes = Routes({URL: httpx.Response(500)})
    fetcher = make_fetcher(routes)

    with pytest.raises(UpstreamError) as exc:
        await fetcher.get_json(URL)
    assert routes.hits(URL) == 4
    assert sleeper.calls == pytest.approx([0.2, 0.4, 0.8, 1.6])
    assert "HTTP 500" in exc.value.reason


@pytest.mark.asyncio
async def test_bad_json_is_terminal(make_fetcher, sleeper):
    routes = Routes({URL: httpx.Response(200, text="<html>not json</html>")})
    fetcher = make_fetcher(routes)

    with pytest.raises(UpstreamError) as exc:
        await fetcher.get_json(URL)
    assert routes.hits(URL) == 1
    assert sleeper.calls == []
    assert exc.value.reason.startswith("invalid_json")


@pytest.mark.asyncio
async def test_try_get_text_degrades_instead_of_raising(make_fetcher):
    routes = Routes({URL: connect_error})
    fetcher = make_fetcher(routes, attempts=2)

    got = await fetcher.try_get_text(URL)
    assert not got.ok
    assert got.value is None
    assert "ConnectError" in got.degraded
    assert routes.hits(URL) == 2
