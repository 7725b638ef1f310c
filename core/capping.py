# =============================================================================
# core/capping.py  —  Collection Capper
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Decides how many records of a list-shaped family (news, calendar events,
#   dividends, filings...) reach the model, projects them, and writes a
#   provenance message: "showing K of N".
#
# THE K-OF-N CONTRACT:
#   - shown = min(N, full_count if detail is FULL else summary_count)
#   - If records were held back on the summary tier, the message tells the
#     model it can ask for detail="full".
#   - If nothing was held back, the message still states how many exist.
#
#   The model should never have to guess whether it is seeing everything.
# =============================================================================

from typing import Optional

from core.models import CappedCollection, CurationPolicy, DetailTier, RecordCollection
from core.projection import project_all
from core.series import sort_by_date


def cap(
    items: RecordCollection,
    detail: DetailTier,
    summary_count: int,
    full_count: int,
    policy: CurationPolicy,
    noun: str = "records",
    sort_key: Optional[str] = None,
    hint: Optional[str] = None,
) -> CappedCollection:
    """Cap and project a collection.

    Args:
        items: The normalized collection.
        detail: Caller's detail tier.
        summary_count: How many to show on the summary tier.
        full_count: Hard upper bound on the full tier.
        policy: Field policy applied to every surviving record.
        noun: What the records are called in the message ("articles").
        sort_key: If set, re-sort descending by this date field first so
            that "most recent" holds regardless of upstream order.
        hint: Replaces the default upgrade hint when records are held back.

    Returns:
        A CappedCollection with the projected items and the message.
    """
    records = items.records
    if sort_key is not None:
        records = sort_by_date(records, date_field=sort_key)

    total = len(records)
    limit = full_count if detail is DetailTier.FULL else summary_count
    shown = min(total, max(limit, 0))
    projected = project_all(records[:shown], policy)

    if shown < total:
        message = f"Showing {shown} of {total} fetched {noun}"
        if detail is DetailTier.FULL:
            message += f" (full detail requested, capped at {full_count})."
        else:
            message += "."
        if hint is not None:
            message += f" {hint}"
        elif detail is not DetailTier.FULL and full_count > summary_count:
            message += " Request 'full' detail for more."
    else:
        message = f"Found {total} {noun}."

    return CappedCollection(items=projected, shown=shown, total=total, message=message)
