# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the curation engine)
# =============================================================================
#
# These dataclasses and enums define the *shape* of every piece of data that
# flows from the FMP API to the language model:
#
#   raw JSON ──▶ RecordCollection ──▶ CurationPolicy applied ──▶ payload
#
# WHY DATACLASSES?
#   - They auto-generate __init__, __repr__, and __eq__ for free.
#   - frozen=True makes the policy tables immutable: a policy is built once
#     at import time and shared by every call, so nothing may mutate it.
#   - Reading this file tells you exactly what the engine cares about.
#
# DESIGN PRINCIPLE — "No Phantom Fields":
#   If a field isn't on a CurationPolicy's allow-list, the model never sees
#   it.  Every policy is an explicit, auditable list (see core/policies.py).
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

# A single upstream record: field name -> scalar (or None).  Never mutated.
RawRecord = dict[str, Any]


class DetailTier(str, Enum):
    """Caller-selected intent: how aggressively to reduce the output."""

    SUMMARY = "summary"
    FULL = "full"

    @classmethod
    def parse(cls, value: Optional[str]) -> "DetailTier":
        """Map a tool argument onto a tier; anything but 'full' is summary."""
        if value is not None and str(value).lower() == cls.FULL.value:
            return cls.FULL
        return cls.SUMMARY


class SortOrder(str, Enum):
    """Declared ordering hint inherited from the upstream endpoint."""

    UNKNOWN = "unknown"
    ASCENDING = "ascending"
    DESCENDING = "descending"


# -----------------------------------------------------------------------------
# RecordCollection — the normalizer's output
# -----------------------------------------------------------------------------
# The ordering hint is informational only.  FMP's ordering drifts between
# endpoints, so anything order-dependent (extrema, "most recent N") re-sorts
# by date instead of trusting it.
# -----------------------------------------------------------------------------
@dataclass
class RecordCollection:
    """An ordered sequence of raw records plus the upstream ordering hint."""

    records: list[RawRecord] = field(default_factory=list)
    ordering: SortOrder = SortOrder.UNKNOWN

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def first(self) -> Optional[RawRecord]:
        return self.records[0] if self.records else None


# -----------------------------------------------------------------------------
# FieldRule / CurationPolicy — the declarative curation tables
# -----------------------------------------------------------------------------
# A FieldRule names ONE output field and the ordered list of upstream keys
# that may carry it.  The first alias present with a non-null value wins.
#
#   FieldRule("stockPrice", aliases=("Stock Price", "price"))
#
# absorbs FMP's habit of spelling the same quantity differently per endpoint.
# The output name is always tried first, so an already-projected record
# projects to itself.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class FieldRule:
    """One allow-listed output field."""

    name: str
    aliases: tuple[str, ...] = ()
    max_length: Optional[int] = None   # truncate free text beyond this

    @property
    def lookup_chain(self) -> tuple[str, ...]:
        if self.name in self.aliases:
            return (self.name,) + tuple(a for a in self.aliases if a != self.name)
        return (self.name,) + self.aliases


@dataclass(frozen=True)
class CurationPolicy:
    """Allow-list, alias chains, and truncation rules for one data family."""

    family: str
    rules: tuple[FieldRule, ...]

    @property
    def allowed_fields(self) -> tuple[str, ...]:
        return tuple(rule.name for rule in self.rules)

    @classmethod
    def of(cls, family: str, *fields: Any) -> "CurationPolicy":
        """Build a policy from plain names and/or ready-made FieldRules."""
        rules = tuple(f if isinstance(f, FieldRule) else FieldRule(f) for f in fields)
        return cls(family=family, rules=rules)


# -----------------------------------------------------------------------------
# CappedCollection — the collection capper's output
# -----------------------------------------------------------------------------
@dataclass
class CappedCollection:
    """A capped, projected slice of a collection plus its provenance."""

    items: list[RawRecord]
    shown: int
    total: int
    message: str

    @property
    def truncated(self) -> bool:
        return self.shown < self.total
