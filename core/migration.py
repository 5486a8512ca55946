"""
migration.py
-------------
One-time conversion of legacy fixed-schedule templates into the suggestion
model. No statistics are applied: the template's declared cadence is trusted
as-is, so the result is marked "migrated" with a fixed high confidence.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List

from core.cadence import next_expected
from core.models import FREQUENCIES, STATUS_MIGRATED, LegacyTemplate, RecurringSuggestion
from core.recurrence_detector import build_grouping_key
from config.config_loader import get_migration_config, get_recurrence_detection_config

logger = logging.getLogger(__name__)


def migrate_template(
    template: LegacyTemplate | Dict[str, Any], now: datetime | None = None
) -> RecurringSuggestion:
    """
    Map a legacy template to a RecurringSuggestion with status "migrated".

    Args:
        template: LegacyTemplate, or a legacy export dict (camelCase keys).
        now: Creation timestamp. Defaults to datetime.now().

    Raises:
        ValueError: If the template's frequency is not a known cadence, or
            it carries no date to schedule from.
    """
    if not isinstance(template, LegacyTemplate):
        template = LegacyTemplate.from_dict(template)

    if template.frequency not in FREQUENCIES:
        raise ValueError(
            f"Template '{template.id}' has unsupported frequency '{template.frequency}'. "
            f"Expected one of: {list(FREQUENCIES)}"
        )

    config = get_migration_config()
    max_length = get_recurrence_detection_config()["description_max_length"]
    last_date = template.last_generated or template.start_date
    if last_date is None:
        raise ValueError(f"Template '{template.id}' has neither lastGenerated nor startDate")

    return RecurringSuggestion(
        id=f"{config['id_prefix']}{template.id}",
        normalized_key=build_grouping_key(template.name, template.category, template.currency, max_length),
        description=template.name,
        category=template.category,
        currency=template.currency,
        avg_amount=template.amount,
        min_amount=template.amount,
        max_amount=template.amount,
        amount_variance_pct=0.0,
        frequency=template.frequency,
        occurrences=0,               # Historical count is unknown.
        confidence=config["confidence"],
        last_date=last_date,
        next_expected=next_expected(last_date, template.frequency, template.day_of_month),
        day_of_month=template.day_of_month,
        day_of_week=template.day_of_week,
        status=STATUS_MIGRATED,
        created_at=now or datetime.now(),
    )


def migrate_templates(templates: Iterable[LegacyTemplate | Dict[str, Any]]) -> List[RecurringSuggestion]:
    """Batch form of migrate_template(). Unconvertible templates are logged and skipped."""
    migrated: List[RecurringSuggestion] = []
    for template in templates:
        try:
            migrated.append(migrate_template(template))
        except (KeyError, ValueError) as e:
            logger.warning(f"Skipping legacy template: {e}")
    return migrated
