from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
from loguru import logger

from edgarcards.core.errors import UpstreamError
from edgarcards.core.settings import DEFAULT_USER_AGENT, settings
from edgarcards.models.records import Outcome

Sleep = Callable[[float], Awaitable[None]]


class ResilientFetcher:
    """
    GET with a fixed retry budget: `attempts` tries, sleeping
    initial_delay, 2x, 4x ... after each failed one (no jitter).
    Non-2xx and transport errors are retried; an unparseable 2xx body is not.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        user_agent: str = "",
        attempts: int = 4,
        initial_delay_s: float = 0.2,
        timeout_s: float = 10.0,
        sleep: Sleep = asyncio.sleep,
    ):
        self.client = client or httpx.AsyncClient(timeout=timeout_s, follow_redirects=True)
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.attempts = max(1, attempts)
        self.initial_delay_s = initial_delay_s
        self._sleep = sleep

    async def close(self):
        await self.client.aclose()

    def _headers(self, headers: Optional[Dict[str, str]], accept: str) -> Dict[str, str]:
        h = {"User-Agent": self.user_agent, "Accept": accept}
        if headers:
            h.update(headers)
        return h

    async def _request(self, url: str, headers: Dict[str, str]) -> httpx.Response:
        delay = self.initial_delay_s
        last_err = ""
        for attempt in range(self.attempts):
            try:
                resp = await self.client.get(url, headers=headers)
                if resp.is_success:
                    return resp
                last_err = f"HTTP {resp.status_code}"
            except httpx.InvalidURL as e:
                # malformed url never gets better on retry
                raise UpstreamError(url, f"invalid_url: {e}") from e
            except httpx.HTTPError as e:
                last_err = f"{type(e).__name__}: {e}"
            logger.warning(f"GET {url} failed ({last_err}); attempt {attempt + 1}/{self.attempts}, sleeping {delay:.2f}s")
            await self._sleep(delay)
            delay *= 2

        logger.error(f"GET {url} gave up after {self.attempts} attempts: {last_err}")
        raise UpstreamError(url, f"fetch_failed: {last_err}")

    async def get_json(self, url: str, headers: Optional[Dict[str, str]] = None) -> Any:
        resp = await self._request(url, self._headers(headers, "application/json"))
        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError(url, f"invalid_json: {e}") from e

    async def get_text(self, url: str, headers: Optional[Dict[str, str]] = None) -> str:
        resp = await self._request(url, self._headers(headers, "text/html, text/plain, */*"))
        return resp.text

    async def try_get_text(self, url: str, headers: Optional[Dict[str, str]] = None) -> Outcome[str]:
        try:
            return Outcome.success(await self.get_text(url, headers))
        except UpstreamError as e:
            return Outcome.degrade(e.reason)


# Singleton accessor
_fetcher: Optional[ResilientFetcher] = None


def get_fetcher() -> ResilientFetcher:
    global _fetcher
    if _fetcher is None:
        _fetcher = ResilientFetcher(
            user_agent=settings.sec_user_agent,
            attempts=settings.fetch_attempts,
            initial_delay_s=settings.fetch_initial_delay_s,
            timeout_s=settings.http_timeout_s,
        )
    return _fetcher
