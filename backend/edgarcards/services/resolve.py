from __future__ import annotations

from typing import Callable, NamedTuple, Optional, Sequence, Tuple

from edgarcards.models.records import ReferenceRow
from edgarcards.services.normalize import normalize_cik, plain_key


class Query(NamedTuple):
    raw: str
    upper: str
    plain: str
    cik: Optional[str]


class Resolution(NamedTuple):
    row: ReferenceRow
    tier: str


Matcher = Callable[[Query, ReferenceRow], bool]


def make_query(q: str) -> Query:
    raw = (q or "").strip()
    return Query(raw=raw, upper=raw.upper(), plain=plain_key(raw), cik=normalize_cik(raw))


# =============================================================================
# Tiers (checked in order; the first tier with any hit wins)
# =============================================================================
def _by_cik(q: Query, row: ReferenceRow) -> bool:
    return q.cik is not None and row.cik == q.cik


def _by_ticker(q: Query, row: ReferenceRow) -> bool:
    # all variants of a ticker share one plain key
    return bool(q.plain) and plain_key(row.ticker) == q.plain


def _by_name_prefix(q: Query, row: ReferenceRow) -> bool:
    return row.name.upper().startswith(q.upper)


def _by_name_contains(q: Query, row: ReferenceRow) -> bool:
    return q.upper in row.name.upper()


TIERS: Tuple[Tuple[str, Matcher], ...] = (
    ("cik", _by_cik),
    ("ticker", _by_ticker),
    ("name_prefix", _by_name_prefix),
    ("name_contains", _by_name_contains),
)


def resolve_row(rows: Sequence[ReferenceRow], q: str) -> Optional[Resolution]:
    query = make_query(q)
    if not query.raw:
        return None
    for tier, matches in TIERS:
        for row in rows:
            if matches(query, row):
                return Resolution(row, tier)
    return None


def resolve(rows: Sequence[ReferenceRow], q: str) -> Optional[str]:
    """CIK of the best match for a ticker, company name or CIK; None when nothing matches."""
    hit = resolve_row(rows, q)
    return hit.row.cik if hit else None
