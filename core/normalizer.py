# =============================================================================
# core/normalizer.py  —  Record Normalizer
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns whatever FMP sent back into a RecordCollection.  FMP is not
#   consistent about response shapes, even for the same kind of data:
#
#     [ {...}, {...} ]                      → ARRAY    (most endpoints)
#     { "symbol": "AAPL", ... }             → SINGLE   (some DCF responses)
#     { "symbol": "AAPL", "historical": [] }→ WRAPPED  (daily price, dividends)
#     { "AAPL": [...], "MSFT": [...] }      → GROUPED  (multi-group intraday)
#     None / [] / {}                        → EMPTY
#
#   Rather than sprinkling isinstance() checks across every tool, the shape
#   is classified ONCE (classify_shape) and dispatched on.
#
# EMPTY IS NOT AN ERROR:
#   An empty collection means "no data".  The dispatcher turns it into a
#   friendly sentence for the model; nothing here raises.
# =============================================================================

from enum import Enum
from typing import Any, Optional

from core.models import RawRecord, RecordCollection, SortOrder


class RawShape(str, Enum):
    EMPTY = "empty"
    ARRAY = "array"
    WRAPPED = "wrapped"
    GROUPED = "grouped"
    SINGLE = "single"


def classify_shape(raw: Any, wrapper_key: Optional[str] = None) -> RawShape:
    """Decide which of the known FMP response shapes `raw` is."""
    if raw is None:
        return RawShape.EMPTY
    if isinstance(raw, list):
        return RawShape.ARRAY if raw else RawShape.EMPTY
    if not isinstance(raw, dict) or not raw:
        return RawShape.EMPTY
    if wrapper_key is not None and wrapper_key in raw:
        return RawShape.WRAPPED
    if all(isinstance(value, list) for value in raw.values()):
        return RawShape.GROUPED
    if wrapper_key is not None:
        # Wrapper expected but absent: FMP sends {"symbol": ...} alone when
        # there is nothing to wrap.
        return RawShape.EMPTY
    return RawShape.SINGLE


def _records_only(items: list[Any]) -> list[RawRecord]:
    # Drop stray scalars; only mappings are records.
    return [item for item in items if isinstance(item, dict)]


def normalize(
    raw: Any,
    wrapper_key: Optional[str] = None,
    ordering: SortOrder = SortOrder.UNKNOWN,
) -> RecordCollection:
    """Produce a uniform RecordCollection from a raw FMP response.

    Args:
        raw: The decoded JSON body.
        wrapper_key: Property that holds the array for wrapped responses
            (e.g. "historical" for daily prices and dividends).
        ordering: What the endpoint claims about its ordering.  Only a hint.

    Returns:
        A RecordCollection; empty when the response carried no records.
    """
    shape = classify_shape(raw, wrapper_key)

    if shape is RawShape.EMPTY:
        return RecordCollection([], ordering)

    if shape is RawShape.ARRAY:
        return RecordCollection(_records_only(raw), ordering)

    if shape is RawShape.WRAPPED:
        inner = raw[wrapper_key]
        if not isinstance(inner, list):
            return RecordCollection([], ordering)
        return RecordCollection(_records_only(inner), ordering)

    if shape is RawShape.GROUPED:
        # Sub-groups arrive in no particular relation to each other, so the
        # flattened result has no trustworthy order until re-sorted.
        flattened: list[RawRecord] = []
        for group in raw.values():
            flattened.extend(_records_only(group))
        return RecordCollection(flattened, SortOrder.UNKNOWN)

    return RecordCollection([raw], ordering)


def first_record(raw: Any, wrapper_key: Optional[str] = None) -> Optional[RawRecord]:
    """Return the first record of a response, or None (FMP's array-of-one habit)."""
    return normalize(raw, wrapper_key).first()
