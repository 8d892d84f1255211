from __future__ import annotations

from typing import Dict, List

import httpx


class SleepRecorder:
    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class Routes:
    """
    URL -> handler map for httpx.MockTransport.
    A handler is a Response, a callable(request) returning one (or raising),
    or a list consumed one per request (last one repeats).
    """

    def __init__(self, routes: Dict[str, object]):
        self.routes = routes
        self.requests: List[httpx.Request] = []

    def hits(self, url: str) -> int:
        return sum(1 for r in self.requests if str(r.url) == url)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        target = self.routes.get(url)
        if isinstance(target, list):
            target = target[min(self.hits(url), len(target)) - 1]
        if target is None:
            return httpx.Response(404)
        if callable(target):
            return target(request)
        return target


def connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)
