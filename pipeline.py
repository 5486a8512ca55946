"""
pipeline.py
------------
Main orchestration layer. Wires together:
    1. PatternRepository        →  loads persisted suggestion state
    2. RecurrenceDetector       →  produces RecurringSuggestions
    3. State merge              →  keeps accepted/ignored/migrated, replaces pending
    4. Output serialization     →  flat DataFrame of pending suggestions

This is the single entry point for running the engine. Everything else
is internal machinery.

Usage:
    from pipeline import RecurrencePipeline

    pipeline = RecurrencePipeline(store=JsonFileKeyValueStore("state.json"))
    suggestions_df = pipeline.run(transactions_df)
"""

import pandas as pd
import logging
from datetime import date
from typing import Any, Dict, Iterable, List

from core.cadence import next_expected
from core.models import RecurringSuggestion, LegacyTemplate
from core.recurrence_detector import RecurrenceDetector
from core.migration import migrate_templates
from core.queries import UpcomingSummary, frequency_label, upcoming_and_overdue
from store.key_value_store import InMemoryKeyValueStore, KeyValueStore, PatternRepository
from store import pattern_state as ps

logger = logging.getLogger(__name__)

OUTPUT_COLUMNS = [
    "id", "normalized_key", "description", "category", "currency",
    "frequency", "frequency_label", "confidence", "occurrences",
    "avg_amount", "min_amount", "max_amount", "amount_variance_pct",
    "last_date", "next_expected", "day_of_month", "day_of_week",
    "status", "matching_transaction_ids",
]


class RecurrencePipeline:
    """
    End-to-end recurring expense pipeline.

    Orchestrates load → detect → merge → persist → serialize without
    exposing storage details to callers.
    """

    def __init__(self, store: KeyValueStore | None = None, detector: RecurrenceDetector | None = None):
        """
        Args:
            store: Where suggestion state lives. Defaults to an in-memory store.
            detector: Override the default detector.
        """
        self.repository = PatternRepository(store or InMemoryKeyValueStore())
        self.detector = detector or RecurrenceDetector()

        logger.info(
            f"Pipeline initialized. "
            f"Store: {type(self.repository.store).__name__}. "
            f"Min transactions: {self.detector.min_transactions}."
        )

    # -------------------------------------------------------------------------
    # PUBLIC INTERFACE
    # -------------------------------------------------------------------------

    def run(self, transactions: pd.DataFrame, today: date | None = None) -> pd.DataFrame:
        """
        Run detection and merge the result into persisted state.

        Args:
            transactions: DataFrame with required columns (see detector).
            today: Reference date for the dormancy gate.

        Returns:
            DataFrame of pending suggestions after the merge, one row each,
            sorted by confidence descending.
        """
        logger.info(f"Pipeline starting. Input: {len(transactions):,} transactions.")

        state = self.repository.load()
        confirmed = ps.accepted_patterns(state)

        # --- Stage 1: Detection ---
        detected = self.detector.detect(transactions, confirmed, today=today)
        logger.info(f"Stage 1 complete. Detected patterns: {len(detected):,}.")

        # --- Stage 2: Merge & persist ---
        state = ps.set_suggestions(state, detected)
        self.repository.save(state)
        pending = ps.pending_suggestions(state)
        logger.info(
            f"Stage 2 complete. Pending: {len(pending):,}, "
            f"confirmed: {len(ps.accepted_patterns(state)):,}, "
            f"ignored: {len(ps.ignored_patterns(state)):,}."
        )

        # --- Stage 3: Serialize ---
        output_df = self.serialize(pending)
        logger.info(f"Pipeline complete. Output rows: {len(output_df):,}.")

        return output_df

    def detect_only(self, transactions: pd.DataFrame, today: date | None = None) -> List[RecurringSuggestion]:
        """
        Run only detection against the current confirmed patterns, without
        touching persisted state.
        """
        confirmed = ps.accepted_patterns(self.repository.load())
        return self.detector.detect(transactions, confirmed, today=today)

    def migrate_templates(self, templates: Iterable[LegacyTemplate | Dict[str, Any]]) -> int:
        """
        Convert legacy templates once. Later calls are no-ops.

        Returns:
            Number of suggestions added.
        """
        state = self.repository.load()
        if state.migration_completed:
            logger.info("Legacy template migration already completed; skipping.")
            return 0

        migrated = migrate_templates(templates)
        before = len(state.suggestions)
        state = ps.set_migration_completed(ps.add_migrated_suggestions(state, migrated))
        self.repository.save(state)

        added = len(state.suggestions) - before
        logger.info(f"Migrated {added:,} legacy templates ({len(migrated) - added:,} duplicates skipped).")
        return added

    def accept(self, suggestion_id: str) -> bool:
        return self._apply(suggestion_id, ps.accept_suggestion)

    def ignore(self, suggestion_id: str) -> bool:
        return self._apply(suggestion_id, ps.ignore_suggestion)

    def record_occurrence(self, suggestion_id: str, occurred_on: date) -> bool:
        """
        The user logged a new instance of a confirmed pattern: last date
        moves to occurred_on and the next date is re-derived from it.
        """
        state = self.repository.load()
        suggestion = ps.find_suggestion(state, suggestion_id)
        if suggestion is None:
            logger.warning(f"No suggestion with id '{suggestion_id}'.")
            return False

        upcoming = next_expected(occurred_on, suggestion.frequency, suggestion.day_of_month)
        self.repository.save(ps.update_next_expected(state, suggestion_id, upcoming, occurred_on))
        return True

    def upcoming(self, today: date | None = None, days_ahead: int | None = None) -> UpcomingSummary:
        """Upcoming and overdue confirmed patterns."""
        state = self.repository.load()
        return upcoming_and_overdue(ps.accepted_patterns(state), today=today, days_ahead=days_ahead)

    @property
    def state(self) -> ps.PatternState:
        return self.repository.load()

    # -------------------------------------------------------------------------
    # INTERNAL
    # -------------------------------------------------------------------------

    def _apply(self, suggestion_id: str, transform) -> bool:
        state = self.repository.load()
        if ps.find_suggestion(state, suggestion_id) is None:
            logger.warning(f"No suggestion with id '{suggestion_id}'.")
            return False
        self.repository.save(transform(state, suggestion_id))
        return True

    @staticmethod
    def serialize(suggestions: Iterable[RecurringSuggestion]) -> pd.DataFrame:
        """Converts suggestions to a flat DataFrame (dates as ISO strings)."""
        rows = []
        for s in suggestions:
            rows.append({
                "id": s.id,
                "normalized_key": s.normalized_key,
                "description": s.description,
                "category": s.category,
                "currency": s.currency,
                "frequency": s.frequency,
                "frequency_label": frequency_label(s.frequency),
                "confidence": s.confidence,
                "occurrences": s.occurrences,
                "avg_amount": s.avg_amount,
                "min_amount": s.min_amount,
                "max_amount": s.max_amount,
                "amount_variance_pct": s.amount_variance_pct,
                "last_date": s.last_date.isoformat(),
                "next_expected": s.next_expected.isoformat(),
                "day_of_month": s.day_of_month,
                "day_of_week": s.day_of_week,
                "status": s.status,
                "matching_transaction_ids": "|".join(s.matching_transaction_ids),
            })

        if not rows:
            return pd.DataFrame(columns=OUTPUT_COLUMNS)

        df = pd.DataFrame(rows, columns=OUTPUT_COLUMNS)
        return df.sort_values(
            ["confidence", "normalized_key"], ascending=[False, True]
        ).reset_index(drop=True)
