# =============================================================================
# core/projection.py  —  Field Projector & Text Truncator
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   project()  — keeps ONLY the allow-listed fields of a record, resolving
#                each one through its alias chain.
#   truncate() — bounds free text (article bodies, company descriptions) and
#                marks the cut so the model knows the text is incomplete.
#
# KEEPING THE CONTEXT WINDOW SMALL:
#   A single FMP profile record carries ~35 fields, a TTM ratio record ~60.
#   The model needs maybe a dozen of them.  Projection is where the rest are
#   dropped, and it is the only place that happens.
# =============================================================================

from typing import Any, Optional

from core.models import CurationPolicy, FieldRule, RawRecord

TRUNCATION_MARKER = "... (truncated)"


def truncate(text: Optional[str], max_len: int) -> Optional[str]:
    """Bound `text` to `max_len` characters, appending TRUNCATION_MARKER if cut.

    None passes through unchanged, as does text at or under the limit.
    """
    if text is None:
        return None
    if len(text) <= max_len:
        return text
    return text[:max_len] + TRUNCATION_MARKER


def resolve(record: RawRecord, rule: FieldRule) -> Any:
    """Walk the rule's alias chain; first present, non-null value wins."""
    for key in rule.lookup_chain:
        value = record.get(key)
        if value is not None:
            return value
    return None


def project(record: RawRecord, policy: CurationPolicy) -> RawRecord:
    """Reduce `record` to the fields allowed by `policy`, in declaration order.

    Fields that resolve to nothing are omitted rather than emitted as null.
    The input record is never mutated.
    """
    projected: RawRecord = {}
    for rule in policy.rules:
        value = resolve(record, rule)
        if value is None:
            continue
        if rule.max_length is not None and isinstance(value, str):
            value = truncate(value, rule.max_length)
        projected[rule.name] = value
    return projected


def project_all(records: list[RawRecord], policy: CurationPolicy) -> list[RawRecord]:
    return [project(record, policy) for record in records]
