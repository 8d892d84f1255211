from __future__ import annotations

from typing import List, Sequence

from edgarcards.models.records import ReferenceRow
from edgarcards.services.normalize import plain_key, symbol_variants

DEFAULT_LIMIT = 200
MIN_LIMIT = 10
MAX_LIMIT = 300


def clamp_limit(limit) -> int:
    try:
        n = int(limit)
    except (TypeError, ValueError):
        n = DEFAULT_LIMIT
    return min(MAX_LIMIT, max(MIN_LIMIT, n))


def score_row(q: str, row: ReferenceRow) -> int:
    """
    100 exact ticker (any variant), 90 ticker prefix, 75 ticker contains,
    65 name prefix, 50 name contains, 0 no match.
    """
    Q = (q or "").strip().upper()
    q_plain = plain_key(Q)
    if not q_plain:
        return 0
    ticker_vars = {plain_key(v) for v in symbol_variants(row.ticker)}

    if q_plain in ticker_vars:
        return 100
    if any(t.startswith(q_plain) for t in ticker_vars):
        return 90
    if any(q_plain in t for t in ticker_vars):
        return 75

    name_u = row.name.upper()
    if name_u.startswith(Q):
        return 65
    if Q in name_u:
        return 50
    return 0


def rank(rows: Sequence[ReferenceRow], q: str, limit=DEFAULT_LIMIT) -> List[ReferenceRow]:
    Q = (q or "").strip().upper()
    if not Q:
        return []
    limit = clamp_limit(limit)

    # one letter: browse everything starting with it, alphabetically
    if len(Q) == 1:
        starts = [r for r in rows if r.ticker.startswith(Q) or r.name.upper().startswith(Q)]
        starts.sort(key=lambda r: r.ticker)
        return starts[:limit]

    scored = [(score_row(Q, r), r) for r in rows]
    scored = [x for x in scored if x[0] > 0]
    scored.sort(key=lambda x: x[0], reverse=True)  # stable: index order breaks ties
    return [r for _, r in scored[:limit]]
