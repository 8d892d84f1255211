from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger

from edgarcards.core.errors import UpstreamError
from edgarcards.core.settings import settings
from edgarcards.models.records import FilingRecord
from edgarcards.services.enrich import FilingEnricher
from edgarcards.services.fetch import ResilientFetcher, get_fetcher
from edgarcards.services.filings import fetch_recent_filings
from edgarcards.services.normalize import normalize_cik

router = APIRouter()


@router.get("/{cik}", response_model=List[FilingRecord])
async def recent_filings(
    cik: str,
    limit: Optional[int] = Query(None, ge=1, le=100),
    fetcher: ResilientFetcher = Depends(get_fetcher),
):
    cik10 = normalize_cik(cik)
    if not cik10:
        raise HTTPException(status_code=400, detail="invalid_cik")
    try:
        filings = await fetch_recent_filings(fetcher, cik10, limit or settings.filings_limit)
    except UpstreamError as e:
        logger.error(f"Filings for {cik10} failed: {e}")
        raise HTTPException(status_code=502, detail=e.reason)

    enricher = FilingEnricher(fetcher, max_concurrency=settings.doc_concurrency)
    return await enricher.enrich(filings)
