# =============================================================================
# core/series.py  —  Time-Series Summarizer
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reduces a price history (OHLCV bars) or a technical-indicator series to
#   something a model can actually read.
#
# THE THREE OUTCOMES of summarize_series():
#   1. detail="full"          → up to FULL_CAP bars, newest first
#   2. summary, > THRESHOLD   → a statistical digest: start/end price,
#                               period high/low, % change, + RECENT_COUNT bars
#   3. summary, <= THRESHOLD  → every bar (it's small enough already)
#
#   A year of daily bars is ~250 points.  Dumping that into a context window
#   buries the trend.  The digest keeps the trend (range, % change) and the
#   recent bars keep the latest shape.
#
# ORDERING:
#   Upstream order is never trusted.  Everything is re-sorted by parsed date
#   before slicing, so "most recent" and "first/last" are date comparisons,
#   not array positions.
# =============================================================================

from datetime import datetime
import math
from typing import Any, Optional

from core.models import DetailTier, FieldRule, RawRecord, RecordCollection
from core.policies import OHLCV_POLICY
from core.projection import project_all, resolve

FULL_CAP = 150
SUMMARY_THRESHOLD = 60
RECENT_COUNT = 5
INDICATOR_RECENT_COUNT = 3


def parse_date(value: Any) -> Optional[datetime]:
    """Parse FMP's 'YYYY-MM-DD' / 'YYYY-MM-DD HH:MM:SS' dates; None if unusable."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


def sort_by_date(
    records: list[RawRecord],
    date_field: str = "date",
    descending: bool = True,
) -> list[RawRecord]:
    """Return a new list sorted by `date_field`; undated records go last.

    The sort is stable, so records sharing a date keep their upstream order.
    """
    dated = [r for r in records if parse_date(r.get(date_field)) is not None]
    undated = [r for r in records if parse_date(r.get(date_field)) is None]
    dated.sort(key=lambda r: parse_date(r.get(date_field)), reverse=descending)
    return dated + undated


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def percent_change(start: Any, end: Any) -> Optional[float]:
    """(end - start) / start * 100, rounded to 2 dp.

    Returns None instead of NaN/Infinity when either price is missing or the
    starting price is zero.
    """
    start, end = _number(start), _number(end)
    if start is None or end is None or start == 0:
        return None
    return round((end - start) / start * 100, 2)


def _extreme(points: list[RawRecord], key: str, pick) -> Optional[float]:
    values = [v for v in (_number(p.get(key)) for p in points) if v is not None]
    return pick(values) if values else None


def summarize_series(points: RecordCollection, detail: DetailTier) -> dict:
    """Curate an OHLCV series into a full window, a digest, or everything.

    Args:
        points: Price bars in any order.
        detail: DetailTier.FULL for the capped raw window, otherwise summary.

    Returns:
        An envelope dict.  Full/all-points envelopes carry `message` and
        `data`; the digest carries the period statistics and `recentData`.
    """
    desc = sort_by_date(points.records)
    total = len(desc)

    if detail is DetailTier.FULL:
        data = project_all(desc[:FULL_CAP], OHLCV_POLICY)
        return {
            "message": (
                f"Showing {len(data)} of {total} fetched data points "
                f"(full detail requested, capped at {FULL_CAP})."
            ),
            "data": data,
        }

    if total > SUMMARY_THRESHOLD:
        # Period bounds come from dated bars only; undated ones trail in desc.
        dated = [p for p in desc if parse_date(p.get("date")) is not None] or desc
        asc = list(reversed(dated))
        first, last = asc[0], asc[-1]
        change = percent_change(first.get("close"), last.get("close"))
        recent = project_all(desc[:RECENT_COUNT], OHLCV_POLICY)

        message = (
            f"Summarized {total} data points from {first.get('date')} to "
            f"{last.get('date')}. Showing {len(recent)} most recent points. "
            f"Request 'full' detail for more data points (up to {FULL_CAP})."
        )
        if change is None:
            message += " Price change percent could not be calculated."

        return {
            "message": message,
            "periodStartDate": first.get("date"),
            "periodEndDate": last.get("date"),
            "startPrice": first.get("close"),
            "endPrice": last.get("close"),
            "periodHigh": _extreme(asc, "high", max),
            "periodLow": _extreme(asc, "low", min),
            "priceChangePercent": change,
            "recentData": recent,
        }

    data = project_all(desc, OHLCV_POLICY)
    return {
        "message": f"Showing all {len(data)} fetched data points (below summary threshold).",
        "data": data,
    }


def indicator_rule(indicator: str) -> FieldRule:
    """Indicator values appear as 'rsi', 'RSI', 'indicatorValue' or 'value'."""
    lower = indicator.lower()
    return FieldRule(lower, aliases=(indicator.upper(), "indicatorValue", "value"))


def recent_values(
    points: RecordCollection,
    indicator: str,
    count: int = INDICATOR_RECENT_COUNT,
) -> Any:
    """Keep the `count` most recent indicator values, newest first.

    Small series come back as a bare list; longer ones get an envelope
    saying how many were fetched.
    """
    desc = sort_by_date(points.records)
    rule = indicator_rule(indicator)
    values = [
        {"date": point.get("date"), rule.name: resolve(point, rule)}
        for point in desc[:count]
    ]
    if len(desc) <= count:
        return values
    return {
        "message": (
            f"Showing {len(values)} most recent {indicator} values of "
            f"{len(desc)} fetched. Full series available via API."
        ),
        "indicator": indicator,
        "values": values,
    }
