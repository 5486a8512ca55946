"""
cadence.py
-----------
Calendar arithmetic shared by detection, migration and the query helpers.

    - classify_frequency(): mean interval (days) → cadence name, using the
      inclusive bands from config.yaml.
    - next_expected(): last occurrence + one cadence unit. Month-based
      cadences clamp the day to the target month's last valid day instead of
      rolling over into the following month.
    - frequency_label(): display label for a cadence.
"""

import calendar
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from core.models import WEEKLY, BIWEEKLY, MONTHLY, QUARTERLY, YEARLY
from config.config_loader import get_frequency_ranges


_DAY_STEPS = {WEEKLY: 7, BIWEEKLY: 14}
_MONTH_STEPS = {MONTHLY: 1, QUARTERLY: 3, YEARLY: 12}


def days_between(first: date, second: date) -> int:
    """Absolute number of whole calendar days between two dates."""
    return abs((second - first).days)


def round_half_up(value: float, digits: int = 0):
    """
    Round halves away from zero (built-in round() is banker's).

        round_half_up(14.5) -> 15
        round_half_up(15.125, 2) -> 15.13

    Returns an int when digits is 0, otherwise a float.
    """
    rounded = Decimal(str(value)).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)


def classify_frequency(mean_interval_days: float) -> Optional[str]:
    """Returns the first cadence whose band contains the interval, or None."""
    for frequency, band in get_frequency_ranges().items():
        if band["min_days"] <= mean_interval_days <= band["max_days"]:
            return frequency
    return None


def frequency_label(frequency: str) -> str:
    """Display label for a cadence. Unknown values are returned unchanged."""
    band = get_frequency_ranges().get(frequency)
    return band["label"] if band else frequency


def add_months(start: date, months: int, day: Optional[int] = None) -> date:
    """
    Shift a date by whole months. The day (start.day unless given) is clamped
    to the length of the target month: Jan 31 + 1 month → Feb 28/29.
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    target_day = day if day else start.day
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(target_day, last_day))


def next_expected(last_date: date, frequency: str, day_of_month: Optional[int] = None) -> date:
    """
    Predict the next occurrence after last_date.

    Args:
        last_date: Most recent occurrence.
        frequency: One of the configured cadences.
        day_of_month: Anchor day for monthly patterns. Ignored for other
            cadences.

    Raises:
        ValueError: If frequency is not a known cadence.
    """
    if frequency in _DAY_STEPS:
        return last_date + timedelta(days=_DAY_STEPS[frequency])
    if frequency in _MONTH_STEPS:
        anchor = day_of_month if frequency == MONTHLY else None
        return add_months(last_date, _MONTH_STEPS[frequency], anchor)
    raise ValueError(f"Unsupported frequency: '{frequency}'")
