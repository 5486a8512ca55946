"""
pattern_state.py
-----------------
Immutable state model for recurring suggestions.

Every transformation takes a PatternState and returns a NEW PatternState;
inputs are never modified. Unknown ids leave the state unchanged.

    state = PatternState()
    state = set_suggestions(state, detector.detect(txns, accepted_patterns(state)))
    state = accept_suggestion(state, state.suggestions[0].id)
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from core.models import (
    STATUS_ACCEPTED,
    STATUS_IGNORED,
    STATUS_MIGRATED,
    STATUS_SUGGESTED,
    RecurringSuggestion,
)


@dataclass(frozen=True)
class PatternState:
    """All known suggestions plus bookkeeping for detection and migration."""
    suggestions: Tuple[RecurringSuggestion, ...] = field(default_factory=tuple)
    last_detection_run: Optional[datetime] = None
    migration_completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suggestions": [s.to_dict() for s in self.suggestions],
            "last_detection_run": self.last_detection_run.isoformat() if self.last_detection_run else None,
            "migration_completed": self.migration_completed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PatternState":
        last_run = data.get("last_detection_run")
        return cls(
            suggestions=tuple(RecurringSuggestion.from_dict(s) for s in data.get("suggestions", [])),
            last_detection_run=datetime.fromisoformat(last_run) if last_run else None,
            migration_completed=bool(data.get("migration_completed", False)),
        )


# -----------------------------------------------------------------------------
# TRANSFORMATIONS
# -----------------------------------------------------------------------------

def set_suggestions(
    state: PatternState, detected: Iterable[RecurringSuggestion], now: datetime | None = None
) -> PatternState:
    """
    Merge a detection run into the state.

    Accepted, ignored and migrated suggestions are preserved. Previously
    pending suggestions are replaced by the new run, minus any whose grouping
    key is already held by a preserved suggestion.
    """
    preserved = tuple(s for s in state.suggestions if s.status != STATUS_SUGGESTED)
    taken = {s.normalized_key for s in preserved}

    fresh = []
    for s in detected:
        if s.normalized_key in taken:
            continue
        taken.add(s.normalized_key)
        fresh.append(s)

    return replace(
        state,
        suggestions=preserved + tuple(fresh),
        last_detection_run=now or datetime.now(),
    )


def _update_one(
    state: PatternState, suggestion_id: str, update: Callable[[RecurringSuggestion], RecurringSuggestion]
) -> PatternState:
    if not any(s.id == suggestion_id for s in state.suggestions):
        return state
    return replace(
        state,
        suggestions=tuple(update(s) if s.id == suggestion_id else s for s in state.suggestions),
    )


def accept_suggestion(state: PatternState, suggestion_id: str) -> PatternState:
    """User confirms the pattern is recurring."""
    return _update_one(state, suggestion_id, lambda s: replace(s, status=STATUS_ACCEPTED))


def ignore_suggestion(state: PatternState, suggestion_id: str) -> PatternState:
    """User says the pattern is not recurring. It will not be offered again."""
    return _update_one(state, suggestion_id, lambda s: replace(s, status=STATUS_IGNORED))


def add_migrated_suggestions(state: PatternState, migrated: Iterable[RecurringSuggestion]) -> PatternState:
    """Append migrated suggestions whose grouping key is not already present."""
    taken = {s.normalized_key for s in state.suggestions}
    fresh = []
    for s in migrated:
        if s.normalized_key in taken:
            continue
        taken.add(s.normalized_key)
        fresh.append(s)
    return replace(state, suggestions=state.suggestions + tuple(fresh))


def set_migration_completed(state: PatternState) -> PatternState:
    return replace(state, migration_completed=True)


def update_next_expected(
    state: PatternState, suggestion_id: str, next_expected: date, last_date: date
) -> PatternState:
    """
    Record that the user logged a new instance of a pattern: moves the
    last/next dates and bumps the occurrence count.
    """
    return _update_one(
        state,
        suggestion_id,
        lambda s: replace(s, next_expected=next_expected, last_date=last_date, occurrences=s.occurrences + 1),
    )


def remove_suggestion(state: PatternState, suggestion_id: str) -> PatternState:
    return replace(state, suggestions=tuple(s for s in state.suggestions if s.id != suggestion_id))


def clear_ignored(state: PatternState) -> PatternState:
    """Drop ignored suggestions so the next run may offer them again."""
    return replace(state, suggestions=tuple(s for s in state.suggestions if s.status != STATUS_IGNORED))


def bulk_import(state: PatternState, suggestions: Iterable[RecurringSuggestion]) -> PatternState:
    """Replace all suggestions (data restore)."""
    return replace(state, suggestions=tuple(suggestions))


def clear_patterns(state: PatternState) -> PatternState:
    return replace(state, suggestions=(), migration_completed=False)


# -----------------------------------------------------------------------------
# SELECTORS
# -----------------------------------------------------------------------------

def pending_suggestions(state: PatternState) -> Tuple[RecurringSuggestion, ...]:
    return tuple(s for s in state.suggestions if s.status == STATUS_SUGGESTED)


def accepted_patterns(state: PatternState) -> Tuple[RecurringSuggestion, ...]:
    """Confirmed patterns: accepted by the user or migrated from templates."""
    return tuple(s for s in state.suggestions if s.status in (STATUS_ACCEPTED, STATUS_MIGRATED))


def ignored_patterns(state: PatternState) -> Tuple[RecurringSuggestion, ...]:
    return tuple(s for s in state.suggestions if s.status == STATUS_IGNORED)


def find_suggestion(state: PatternState, suggestion_id: str) -> Optional[RecurringSuggestion]:
    return next((s for s in state.suggestions if s.id == suggestion_id), None)
