"""
models.py
----------
Core domain models. These are the typed contracts between engine layers.

- Transaction: One ledger expense. Owned by the expense ledger; the engine
  only reads it.

- RecurringSuggestion: Output of the detection layer (and of legacy
  migration). Carries cadence, confidence and next-due prediction, and is the
  record the state layer persists.

- LegacyTemplate: Older fixed-schedule recurring template, converted once
  into a RecurringSuggestion by core.migration.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple


# Cadences, in the order the detector tests them.
WEEKLY = "weekly"
BIWEEKLY = "biweekly"
MONTHLY = "monthly"
QUARTERLY = "quarterly"
YEARLY = "yearly"
FREQUENCIES = (WEEKLY, BIWEEKLY, MONTHLY, QUARTERLY, YEARLY)

# Suggestion lifecycle
STATUS_SUGGESTED = "suggested"
STATUS_ACCEPTED = "accepted"
STATUS_IGNORED = "ignored"
STATUS_MIGRATED = "migrated"
STATUSES = (STATUS_SUGGESTED, STATUS_ACCEPTED, STATUS_IGNORED, STATUS_MIGRATED)


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _to_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class Transaction:
    """A single expense as recorded in the ledger."""

    transaction_id: str
    description: str
    amount: float
    currency: str
    category: str
    transaction_date: date
    is_recurring: bool = False       # Ignored by detection; recurrence is inferred.


@dataclass(frozen=True)
class RecurringSuggestion:
    """
    A detected (or migrated) recurring expense pattern.

    Frozen: lifecycle changes go through store.pattern_state, which returns
    new instances via dataclasses.replace().
    """

    # Identity
    id: str                          # Unique per instance, never reused.
    normalized_key: str              # "<description>|<category>|<currency>", stable across runs.
    description: str                 # Original text of the most recent transaction.
    category: str
    currency: str

    # Amount statistics
    avg_amount: float
    min_amount: float
    max_amount: float
    amount_variance_pct: float       # std / mean * 100, one decimal.

    # Cadence
    frequency: str                   # One of FREQUENCIES.
    occurrences: int
    confidence: float                # 0.0 – 1.0
    last_date: date
    next_expected: date
    day_of_month: Optional[int] = None   # Monthly anchor (1–31)
    day_of_week: Optional[int] = None    # Weekly anchor (0 = Sunday … 6 = Saturday)

    # Lifecycle
    status: str = STATUS_SUGGESTED

    # Evidence
    matching_transaction_ids: Tuple[str, ...] = field(default_factory=tuple)

    # Metadata
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible representation used by the persistence layer."""
        return {
            "id": self.id,
            "normalized_key": self.normalized_key,
            "description": self.description,
            "category": self.category,
            "currency": self.currency,
            "avg_amount": self.avg_amount,
            "min_amount": self.min_amount,
            "max_amount": self.max_amount,
            "amount_variance_pct": self.amount_variance_pct,
            "frequency": self.frequency,
            "occurrences": self.occurrences,
            "confidence": self.confidence,
            "last_date": _iso(self.last_date),
            "next_expected": _iso(self.next_expected),
            "day_of_month": self.day_of_month,
            "day_of_week": self.day_of_week,
            "status": self.status,
            "matching_transaction_ids": list(self.matching_transaction_ids),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecurringSuggestion":
        created_at = data.get("created_at")
        return cls(
            id=data["id"],
            normalized_key=data["normalized_key"],
            description=data["description"],
            category=data["category"],
            currency=data["currency"],
            avg_amount=float(data["avg_amount"]),
            min_amount=float(data["min_amount"]),
            max_amount=float(data["max_amount"]),
            amount_variance_pct=float(data["amount_variance_pct"]),
            frequency=data["frequency"],
            occurrences=int(data["occurrences"]),
            confidence=float(data["confidence"]),
            last_date=_to_date(data["last_date"]),
            next_expected=_to_date(data["next_expected"]),
            day_of_month=data.get("day_of_month"),
            day_of_week=data.get("day_of_week"),
            status=data.get("status", STATUS_SUGGESTED),
            matching_transaction_ids=tuple(data.get("matching_transaction_ids", ())),
            created_at=datetime.fromisoformat(created_at) if created_at else datetime.now(),
        )


@dataclass(frozen=True)
class LegacyTemplate:
    """Fixed-schedule recurring template from the older data schema."""

    id: str
    name: str
    amount: float
    currency: str
    category: str
    frequency: str
    start_date: date
    day_of_month: Optional[int] = None
    day_of_week: Optional[int] = None
    notes: Optional[str] = None
    last_generated: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LegacyTemplate":
        """
        Accepts both the legacy camelCase export (startDate, dayOfMonth,
        lastGenerated …) and snake_case keys.
        """
        def pick(snake: str, camel: str, default: Any = None) -> Any:
            if snake in data:
                return data[snake]
            return data.get(camel, default)

        return cls(
            id=str(data["id"]),
            name=data["name"],
            amount=float(data["amount"]),
            currency=data["currency"],
            category=data["category"],
            frequency=data["frequency"],
            start_date=_to_date(pick("start_date", "startDate")),
            day_of_month=pick("day_of_month", "dayOfMonth"),
            day_of_week=pick("day_of_week", "dayOfWeek"),
            notes=data.get("notes"),
            last_generated=_to_date(pick("last_generated", "lastGenerated")),
            end_date=_to_date(pick("end_date", "endDate")),
            is_active=bool(pick("is_active", "isActive", True)),
        )
