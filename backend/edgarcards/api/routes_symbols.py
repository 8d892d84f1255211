from fastapi import APIRouter, Depends, HTTPException, Query, Request
from loguru import logger

from edgarcards.core.errors import UpstreamError
from edgarcards.services.cache import IndexCache, get_index_cache
from edgarcards.services.resolve import resolve_row
from edgarcards.services.suggest import DEFAULT_LIMIT, rank

router = APIRouter()


@router.get("/suggest")
async def suggest(
    request: Request,
    q: str = Query("", description="Partial ticker or company name"),
    limit: int = Query(DEFAULT_LIMIT),
    cache: IndexCache = Depends(get_index_cache),
):
    q = q.strip()
    if not q:
        return {"results": []}
    try:
        rows = await cache.get_index(request.url.hostname)
    except UpstreamError as e:
        # don't 500 the dropdown; it just shows "No matches"
        logger.error(f"Suggest '{q}' failed: {e}")
        return {"results": [], "error": e.reason}
    results = rank(rows, q, limit)
    logger.info(f"Suggest '{q}' -> {len(results)} results")
    return {"results": [r.model_dump() for r in results]}


@router.get("/lookup/{query}")
async def lookup(query: str, request: Request, cache: IndexCache = Depends(get_index_cache)):
    q = query.strip()
    if not q:
        raise HTTPException(status_code=400, detail="empty_query")
    try:
        rows = await cache.get_index(request.url.hostname)
    except UpstreamError as e:
        logger.error(f"Lookup '{q}' failed: {e}")
        raise HTTPException(status_code=502, detail=e.reason)

    hit = resolve_row(rows, q)
    if not hit:
        raise HTTPException(status_code=404, detail="not_found")
    logger.info(f"Lookup '{q}' -> {hit.row.ticker} ({hit.row.cik}) via {hit.tier}")
    return hit.row.model_dump()
