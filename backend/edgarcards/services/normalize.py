import re
from typing import Any, Optional, Set

CIK_WIDTH = 10

_CIK_QUERY_RE = re.compile(r"^\d{1,10}$")
_NON_DIGIT_RE = re.compile(r"\D")
_SEP_RE = re.compile(r"[-.]")


def pad_cik(value: Any) -> str:
    """Strip non-digits from an upstream id (str or int) and zero-pad it to 10 digits."""
    s = _NON_DIGIT_RE.sub("", str(value if value is not None else ""))
    return s.zfill(CIK_WIDTH)


def normalize_cik(query: Optional[str]) -> Optional[str]:
    """
    Returns the canonical 10-digit id when `query` is 1-10 digits, else None
    (the caller goes on to ticker / name resolution).
    """
    q = (query or "").strip()
    if not _CIK_QUERY_RE.fullmatch(q):
        return None
    return q.zfill(CIK_WIDTH)


def plain_key(symbol: Optional[str]) -> str:
    return _SEP_RE.sub("", (symbol or "").strip().upper())


def symbol_variants(symbol: Optional[str]) -> Set[str]:
    """
    Interchangeable spellings of a ticker:
      BRK.B -> {BRK.B, BRKB, BRK-B}
    """
    u = (symbol or "").strip().upper()
    return {u, u.replace(".", ""), u.replace(".", "-"), _SEP_RE.sub("", u)}
