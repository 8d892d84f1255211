from __future__ import annotations

from typing import Any, List, Optional

from loguru import logger

from edgarcards.core.errors import UpstreamError
from edgarcards.models.records import FilingRecord
from edgarcards.services.fetch import ResilientFetcher
from edgarcards.services.normalize import pad_cik

SUBMISSIONS_URL = "https://data.sec.gov/submissions/CIK{cik}.json"
ARCHIVE_URL = "https://www.sec.gov/Archives/edgar/data/{cik}/{accession}"


def _at(col: Any, i: int) -> Optional[Any]:
    if isinstance(col, list) and i < len(col):
        return col[i]
    return None


def archive_urls(cik: str, accession: str, primary_doc: Optional[str]) -> tuple[str, Optional[str]]:
    # archive folders use the unpadded cik and the accession without dashes
    base = ARCHIVE_URL.format(cik=int(pad_cik(cik)), accession=(accession or "").replace("-", ""))
    return base, (f"{base}/{primary_doc}" if primary_doc else None)


def records_from_submissions(cik: str, data: Any, limit: int = 12) -> List[FilingRecord]:
    if not isinstance(data, dict):
        raise UpstreamError(SUBMISSIONS_URL.format(cik=pad_cik(cik)), "unexpected_shape")
    cik10 = pad_cik(cik)
    company = data.get("name") or data.get("entityType") or "Company"
    recent = (data.get("filings") or {}).get("recent") or {}
    accessions = recent.get("accessionNumber") or []
    n = min(max(0, limit), len(accessions))

    out: List[FilingRecord] = []
    for i in range(n):
        form = str(_at(recent.get("form"), i) or "")
        filed_at = _at(recent.get("filingDate"), i)
        base, primary_url = archive_urls(cik10, str(accessions[i] or ""), _at(recent.get("primaryDocument"), i))
        out.append(FilingRecord(
            cik=cik10,
            company=company,
            form=form,
            filed_at=filed_at,
            title=f"{company} • {form} • {filed_at}",
            source_url=base,
            primary_doc_url=primary_url,
        ))
    return out


async def fetch_recent_filings(fetcher: ResilientFetcher, cik: str, limit: int = 12) -> List[FilingRecord]:
    """Newest-first filings for a CIK, unenriched."""
    cik10 = pad_cik(cik)
    data = await fetcher.get_json(SUBMISSIONS_URL.format(cik=cik10))
    records = records_from_submissions(cik10, data, limit)
    logger.info(f"CIK {cik10}: {len(records)} recent filings")
    return records
