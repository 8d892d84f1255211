from __future__ import annotations

import json
import time
from typing import Awaitable, Callable, List, Optional, Protocol

import httpx
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from edgarcards.core.settings import settings
from edgarcards.models.records import Outcome, ReferenceRow
from edgarcards.services.fetch import get_fetcher
from edgarcards.services.index import build_index

Builder = Callable[[Optional[str]], Awaitable[List[ReferenceRow]]]

_ROWS = TypeAdapter(List[ReferenceRow])


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str, ttl_s: int) -> bool: ...


class NullStore:
    """Stand-in when no external cache is configured: always misses."""

    async def get(self, key: str) -> Optional[str]:
        return None

    async def set(self, key: str, value: str, ttl_s: int) -> bool:
        return False


class UpstashStore:
    """
    Redis over the Upstash REST API (JSON command arrays, bearer token).
    Never raises: an unreachable store reads as a miss.
    """

    def __init__(self, url: str, token: str, client: Optional[httpx.AsyncClient] = None, timeout_s: float = 5.0):
        self.url = url.rstrip("/")
        self.token = token
        self.client = client or httpx.AsyncClient(timeout=timeout_s)

    async def _command(self, *args) -> Optional[dict]:
        try:
            r = await self.client.post(
                self.url,
                json=[str(a) for a in args],
                headers={"Authorization": f"Bearer {self.token}"},
            )
            if r.status_code >= 400:
                logger.warning(f"KV {args[0]} failed: HTTP {r.status_code}")
                return None
            body = r.json()
            return body if isinstance(body, dict) else None
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"KV {args[0]} error: {e}")
            return None

    async def get(self, key: str) -> Optional[str]:
        body = await self._command("GET", key)
        if not body or not isinstance(body.get("result"), str):
            return None
        return body["result"]

    async def set(self, key: str, value: str, ttl_s: int) -> bool:
        body = await self._command("SET", key, value, "EX", int(ttl_s))
        return bool(body) and body.get("result") == "OK"


class IndexCache:
    """
    Two-tier cache for the reference index.
    External tier first (if any), then process memory, then a rebuild.
    Each tier honours the same freshness window on its own.
    """

    def __init__(
        self,
        builder: Builder,
        store: Optional[KeyValueStore] = None,
        ttl_s: float = 3600.0,
        key: str = "sec:tickerIndex:v1",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.builder = builder
        self.store = store or NullStore()
        self.ttl_s = ttl_s
        self.key = key
        self.clock = clock
        # one slot, replaced whole; concurrent misses may both rebuild
        self._rows: Optional[List[ReferenceRow]] = None
        self._built_at = 0.0

    def _memory_fresh(self) -> bool:
        return self._rows is not None and (self.clock() - self._built_at) < self.ttl_s

    async def _read_external(self) -> Outcome[List[ReferenceRow]]:
        raw = await self.store.get(self.key)
        if raw is None:
            return Outcome.degrade("miss")
        try:
            rows = _ROWS.validate_json(raw)
        except ValidationError as e:
            return Outcome.degrade(f"corrupt: {e.error_count()} errors")
        if not rows:
            return Outcome.degrade("empty")
        return Outcome.success(rows)

    async def _write_external(self, rows: List[ReferenceRow]) -> Outcome[bool]:
        payload = json.dumps([r.model_dump() for r in rows])
        if await self.store.set(self.key, payload, int(self.ttl_s)):
            return Outcome.success(True)
        return Outcome.degrade("write_failed")

    async def get_index(self, host_hint: Optional[str] = None) -> List[ReferenceRow]:
        cached = await self._read_external()
        if cached.ok:
            return cached.value or []
        if cached.degraded != "miss":
            logger.warning(f"Ignoring external index cache ({cached.degraded})")

        if self._memory_fresh():
            return self._rows or []

        rows = await self.builder(host_hint)
        self._rows, self._built_at = rows, self.clock()

        written = await self._write_external(rows)
        if not written.ok and not isinstance(self.store, NullStore):
            logger.warning(f"Could not store index in external cache ({written.degraded})")
        return rows


# Singleton accessor
_cache: Optional[IndexCache] = None


def make_store() -> KeyValueStore:
    if settings.kv_url and settings.kv_token:
        return UpstashStore(settings.kv_url, settings.kv_token)
    logger.info("External KV cache not configured; using memory-only index cache")
    return NullStore()


def get_index_cache() -> IndexCache:
    global _cache
    if _cache is None:
        fetcher = get_fetcher()
        _cache = IndexCache(
            builder=lambda host: build_index(fetcher, host),
            store=make_store(),
            ttl_s=settings.index_ttl_s,
            key=settings.index_cache_key,
        )
    return _cache
