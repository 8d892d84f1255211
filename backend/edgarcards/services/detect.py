import math
import re
from typing import Dict, List, NamedTuple, Optional, Tuple

# 8-K item codes worth a badge; anything else is listed in items only
ITEM_BADGES: Dict[str, str] = {
    "Item 1.01": "Material Agreement (Item 1.01)",
    "Item 1.02": "Agreement Terminated (Item 1.02)",
    "Item 1.03": "Bankruptcy (Item 1.03)",
    "Item 2.01": "Acquisition or Disposition (Item 2.01)",
    "Item 2.02": "Results of Operations (Item 2.02)",
    "Item 2.03": "New Financial Obligation (Item 2.03)",
    "Item 3.01": "Listing Notice (Item 3.01)",
    "Item 4.01": "Auditor Change (Item 4.01)",
    "Item 4.02": "Non-Reliance on Financials (Item 4.02)",
    "Item 5.01": "Change in Control (Item 5.01)",
    "Item 5.02": "Executive Change (Item 5.02)",
    "Item 5.07": "Shareholder Vote (Item 5.07)",
}

EVENT_REPORT_PREFIX = "8-K"
OFFERING_FORMS = frozenset({"S-1", "S-1/A", "F-1", "F-1/A", "424B1", "424B2", "424B3", "424B4", "424B5"})

_ITEM_RE = re.compile(r"\bItem\s+(\d{1,2})\.(\d{2})\b", re.IGNORECASE)
_AMOUNT_RE = re.compile(
    r"\$?\s?(\d{1,3}(?:,\d{3})+|\d+)(\.\d+)?(?:\s*(million|billion|bn|m)\b)?",
    re.IGNORECASE,
)
_SCALE = {"million": 1e6, "m": 1e6, "billion": 1e9, "bn": 1e9}


class Signals(NamedTuple):
    items: List[str]
    badges: List[str]
    amount_usd: Optional[float]


def is_event_report(form: str) -> bool:
    return (form or "").strip().upper().startswith(EVENT_REPORT_PREFIX)


def is_offering(form: str) -> bool:
    return (form or "").strip().upper() in OFFERING_FORMS


def detect_items(text: str) -> Tuple[List[str], List[str]]:
    items: List[str] = []
    for major, minor in _ITEM_RE.findall(text or ""):
        code = f"Item {int(major)}.{minor}"
        if code not in items:
            items.append(code)
    badges = [ITEM_BADGES[c] for c in items if c in ITEM_BADGES]
    return items, badges


def extract_largest_amount(text: str) -> Optional[float]:
    best: Optional[float] = None
    for m in _AMOUNT_RE.finditer(text or ""):
        try:
            value = float(m.group(1).replace(",", "") + (m.group(2) or ""))
        except ValueError:
            continue
        unit = (m.group(3) or "").lower()
        value *= _SCALE.get(unit, 1.0)
        if not math.isfinite(value):
            continue
        if best is None or value > best:
            best = value
    return best


def extract_signals(text: str, form: str) -> Signals:
    """Pure text -> signals for one filing; empty/odd input gives an empty result."""
    items: List[str] = []
    badges: List[str] = []
    amount: Optional[float] = None
    if is_event_report(form):
        items, badges = detect_items(text)
    if is_offering(form):
        amount = extract_largest_amount(text)
    return Signals(items, badges, amount)
