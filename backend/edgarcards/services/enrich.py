from __future__ import annotations

import asyncio
import html
import re
from typing import List, Optional

from loguru import logger

from edgarcards.models.records import FilingRecord, Outcome
from edgarcards.services.detect import extract_signals, is_event_report, is_offering
from edgarcards.services.fetch import ResilientFetcher

TEXT_DOC_EXTENSIONS = (".htm", ".html", ".txt")

_TAG_RE = re.compile(r"<[^>]+>")


def is_text_document(url: Optional[str]) -> bool:
    return bool(url) and url.lower().endswith(TEXT_DOC_EXTENSIONS)


def strip_markup(raw: str) -> str:
    # tags first, then entities (&nbsp; -> \xa0)
    return html.unescape(_TAG_RE.sub(" ", raw or ""))


class FilingEnricher:
    """
    Async document miner for a batch of filings.
    Fetches primary documents concurrently (bounded) and attaches
    8-K item badges / offering amounts. One bad document never sinks the batch.
    """

    def __init__(self, fetcher: ResilientFetcher, max_concurrency: int = 4):
        self.fetcher = fetcher
        self.sem = asyncio.Semaphore(max(1, max_concurrency))

    def _wants_document(self, f: FilingRecord) -> bool:
        if not is_text_document(f.primary_doc_url):
            return False
        return is_event_report(f.form) or is_offering(f.form)

    async def _document_text(self, url: str) -> Outcome[str]:
        async with self.sem:
            got = await self.fetcher.try_get_text(url)
        if not got.ok:
            return got
        return Outcome.success(strip_markup(got.value or ""))

    async def enrich_one(self, f: FilingRecord) -> FilingRecord:
        if not self._wants_document(f):
            return f
        doc = await self._document_text(f.primary_doc_url)
        if not doc.ok:
            logger.warning(f"Skipping enrichment for {f.primary_doc_url} ({doc.degraded})")
            return f
        sig = extract_signals(doc.value or "", f.form)
        return f.model_copy(update={"items": sig.items, "badges": sig.badges, "amount_usd": sig.amount_usd})

    async def enrich(self, filings: List[FilingRecord]) -> List[FilingRecord]:
        # gather keeps input order
        return list(await asyncio.gather(*(self.enrich_one(f) for f in filings)))
