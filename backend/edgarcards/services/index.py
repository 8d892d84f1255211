from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from edgarcards.core.errors import UpstreamError
from edgarcards.models.records import Outcome, ReferenceRow
from edgarcards.services.fetch import ResilientFetcher
from edgarcards.services.normalize import plain_key

PRIMARY_URL = "https://www.sec.gov/files/company_tickers.json"
SECONDARY_URL = "https://www.sec.gov/files/company_tickers_exchange.json"


def _row(ticker: Any, cik: Any, name: Any) -> Optional[ReferenceRow]:
    if not ticker or cik is None or not str(cik).strip():
        return None
    row = ReferenceRow(ticker=ticker, cik=cik, name=name)
    if not row.ticker or not row.cik.strip("0"):
        return None
    return row


def rows_from_primary(doc: Any) -> List[ReferenceRow]:
    # {"0": {"cik_str": 320193, "ticker": "AAPL", "title": "Apple Inc."}, ...}
    if not isinstance(doc, dict):
        raise UpstreamError(PRIMARY_URL, "unexpected_shape")
    out: List[ReferenceRow] = []
    for item in doc.values():
        if not isinstance(item, dict):
            continue
        r = _row(item.get("ticker"), item.get("cik_str", item.get("cik")), item.get("title"))
        if r:
            out.append(r)
    return out


def rows_from_secondary(doc: Any) -> List[ReferenceRow]:
    """
    Accepts either an array of {cik, ticker, title, exchange} objects or the
    columnar {"fields": [...], "data": [[...]]} layout. Exchange is ignored.
    """
    items: Iterable[Dict[str, Any]]
    if isinstance(doc, list):
        items = [x for x in doc if isinstance(x, dict)]
    elif isinstance(doc, dict) and isinstance(doc.get("fields"), list) and isinstance(doc.get("data"), list):
        fields = [str(f) for f in doc["fields"]]
        items = [dict(zip(fields, rec)) for rec in doc["data"] if isinstance(rec, list)]
    else:
        return []

    out: List[ReferenceRow] = []
    for item in items:
        r = _row(item.get("ticker"), item.get("cik", item.get("cik_str")), item.get("title") or item.get("name"))
        if r:
            out.append(r)
    return out


def merge_rows(primary: List[ReferenceRow], secondary: List[ReferenceRow]) -> List[ReferenceRow]:
    """
    Dedupe by plain ticker key. Secondary rows are inserted first, so the
    broader list wins when both sources claim the same key.
    """
    by_plain: Dict[str, ReferenceRow] = {}
    for r in [*secondary, *primary]:
        # every variant of a ticker collapses to the same plain key
        by_plain.setdefault(plain_key(r.ticker), r)
    return list(by_plain.values())


async def _fetch_secondary(fetcher: ResilientFetcher, headers: Dict[str, str]) -> Outcome[List[ReferenceRow]]:
    try:
        doc = await fetcher.get_json(SECONDARY_URL, headers)
    except UpstreamError as e:
        return Outcome.degrade(e.reason)
    rows = rows_from_secondary(doc)
    if not rows:
        return Outcome.degrade("unexpected_shape")
    return Outcome.success(rows)


async def build_index(fetcher: ResilientFetcher, host_hint: Optional[str] = None) -> List[ReferenceRow]:
    headers = {"Referer": f"https://{host_hint}"} if host_hint else {}

    primary = rows_from_primary(await fetcher.get_json(PRIMARY_URL, headers))

    secondary = await _fetch_secondary(fetcher, headers)
    if secondary.ok:
        extra = secondary.value or []
    else:
        logger.warning(f"Secondary ticker list unavailable ({secondary.degraded}); using primary only")
        extra = []

    rows = merge_rows(primary, extra)
    logger.info(f"Built reference index: {len(rows)} rows (primary={len(primary)}, secondary={len(extra)})")
    return rows
