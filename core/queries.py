"""
queries.py
-----------
Derived read-only views over suggestions: overdue checks, days until the
next occurrence, display labels and the upcoming/overdue partition used by
dashboards.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List

from core.cadence import frequency_label as _frequency_label, round_half_up
from core.models import RecurringSuggestion
from config.config_loader import get_query_config


@dataclass
class UpcomingItem:
    """A pattern with its due-date arithmetic resolved for a given day."""
    suggestion: RecurringSuggestion
    days_until: int
    is_overdue: bool


@dataclass
class UpcomingSummary:
    """Patterns due within the window, and those already overdue."""
    upcoming: List[UpcomingItem] = field(default_factory=list)
    overdue: List[UpcomingItem] = field(default_factory=list)
    upcoming_total: float = 0.0
    overdue_total: float = 0.0


def is_overdue(suggestion: RecurringSuggestion, today: date | None = None) -> bool:
    """True when the next expected date is strictly before today."""
    return suggestion.next_expected < (today or date.today())


def days_until_next(suggestion: RecurringSuggestion, today: date | None = None) -> int:
    """Calendar days from today to the next expected date. Negative when overdue."""
    return (suggestion.next_expected - (today or date.today())).days


def frequency_label(frequency: str) -> str:
    """Display label, e.g. "biweekly" -> "Bi-weekly"."""
    return _frequency_label(frequency)


def upcoming_and_overdue(
    patterns: Iterable[RecurringSuggestion],
    today: date | None = None,
    days_ahead: int | None = None,
) -> UpcomingSummary:
    """
    Partition confirmed patterns into overdue ones and ones due within
    days_ahead (config default). Both lists are sorted soonest first.
    Totals sum avg_amount as-is; mixed currencies are not converted.
    """
    today = today or date.today()
    if days_ahead is None:
        days_ahead = get_query_config()["upcoming_days"]

    items = sorted(
        (
            UpcomingItem(
                suggestion=p,
                days_until=days_until_next(p, today),
                is_overdue=is_overdue(p, today),
            )
            for p in patterns
        ),
        key=lambda item: item.days_until,
    )

    summary = UpcomingSummary()
    for item in items:
        if item.is_overdue:
            summary.overdue.append(item)
        elif item.days_until <= days_ahead:
            summary.upcoming.append(item)

    summary.upcoming_total = round_half_up(sum(i.suggestion.avg_amount for i in summary.upcoming), 2)
    summary.overdue_total = round_half_up(sum(i.suggestion.avg_amount for i in summary.overdue), 2)
    return summary
