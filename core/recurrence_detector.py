"""
recurrence_detector.py
-----------------------
Recurring expense pattern detection engine.

Answers one question for an expense ledger:

    "Which series of expenses look like a recurring bill the user has not
     confirmed yet?"

Output: a RecurringSuggestion per qualifying group, ranked by confidence.
Persisting, accepting and ignoring suggestions is the caller's business
(see store.pattern_state); this class holds no state between calls.

Design decisions:
    - Grouping key is (normalized description, category, currency). Amount
      and timing are then used to decide whether the group is a series.
    - Cadence is classified from the MEAN inter-occurrence interval against
      fixed inclusive bands; regularity is scored separately.
    - "Today" is injectable so that the dormancy gate is reproducible.
    - All thresholds, bands and weights are read from config.yaml.
"""

import logging
import re
import uuid
from collections import Counter
from datetime import date, datetime
from typing import Iterable, List

import numpy as np
import pandas as pd

from core.cadence import classify_frequency, days_between, next_expected, round_half_up
from core.models import MONTHLY, WEEKLY, STATUS_SUGGESTED, RecurringSuggestion, Transaction
from config.config_loader import get_min_occurrences, get_recurrence_detection_config

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = [
    "transaction_id", "description", "amount", "currency",
    "category", "transaction_date",
]

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_description(description: str, max_length: int = 50) -> str:
    """
    Normalize a description for grouping: lower-case, strip punctuation,
    collapse whitespace, trim, truncate.

        "NETFLIX.COM  Subscription!" -> "netflixcom subscription"
    """
    text = _PUNCTUATION.sub("", (description or "").lower())
    text = _WHITESPACE.sub(" ", text).strip()
    return text[:max_length]


def build_grouping_key(description: str, category: str, currency: str, max_length: int = 50) -> str:
    """Stable dedup identity of a series across detection runs."""
    return f"{normalize_description(description, max_length)}|{category}|{currency}"


def transactions_to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Converts Transaction records into the DataFrame layout detect() expects."""
    rows = [
        {
            "transaction_id": t.transaction_id,
            "description": t.description,
            "amount": float(t.amount) if t.amount is not None else None,
            "currency": t.currency,
            "category": t.category,
            "transaction_date": t.transaction_date,
            "is_recurring": t.is_recurring,
        }
        for t in transactions
    ]
    return pd.DataFrame(rows, columns=REQUIRED_COLUMNS + ["is_recurring"])


class RecurrenceDetector:
    """
    Detects recurring expense patterns in a transaction ledger.

    Usage:
        detector = RecurrenceDetector()
        suggestions = detector.detect(transactions_df, accepted_patterns)
    """

    def __init__(self):
        self.config = get_recurrence_detection_config()
        self.min_transactions = self.config["min_transactions"]
        self.max_length = self.config["description_max_length"]
        self.max_variance_pct = self.config["max_amount_variance_pct"]
        self.min_confidence = self.config["min_confidence"]
        self.staleness_multiplier = self.config["staleness_multiplier"]
        self.weights = self.config["confidence_weights"]

    # -------------------------------------------------------------------------
    # PUBLIC INTERFACE
    # -------------------------------------------------------------------------

    def detect(
        self,
        transactions: pd.DataFrame | Iterable[Transaction],
        accepted_patterns: Iterable[RecurringSuggestion] = (),
        today: date | None = None,
    ) -> List[RecurringSuggestion]:
        """
        Run recurring pattern detection over an expense ledger.

        Args:
            transactions: DataFrame with columns:
                transaction_id, description, amount, currency, category,
                transaction_date
                or an iterable of Transaction records.
            accepted_patterns: Already confirmed patterns. Their grouping
                keys are never offered again.
            today: Reference date for the dormancy gate. Defaults to today.

        Returns:
            List of RecurringSuggestion sorted by confidence (descending),
            ties by grouping key.
        """
        if not isinstance(transactions, pd.DataFrame):
            transactions = transactions_to_frame(transactions)

        if len(transactions) < self.min_transactions:
            return []

        today = today or date.today()
        accepted_keys = {p.normalized_key for p in accepted_patterns}
        df = self._prepare(transactions)

        results: List[RecurringSuggestion] = []

        # sort=False keeps groups in first-seen order
        for key, group in df.groupby("grouping_key", sort=False):
            if key in accepted_keys:
                continue

            suggestion = self._build_suggestion(key, group, today)
            if suggestion is not None:
                results.append(suggestion)

        return sorted(results, key=lambda s: (-s.confidence, s.normalized_key))

    # -------------------------------------------------------------------------
    # INTERNAL: DATA PREPARATION
    # -------------------------------------------------------------------------

    def _prepare(self, transactions: pd.DataFrame) -> pd.DataFrame:
        """
        Validates columns, parses dates and amounts, drops records that cannot
        take part in grouping, and attaches the grouping key.
        """
        missing = [c for c in REQUIRED_COLUMNS if c not in transactions.columns]
        if missing:
            raise ValueError(f"Missing required columns: {missing}")

        df = transactions[REQUIRED_COLUMNS].copy()

        # Parsed per row: one ledger may mix date-only and datetime strings.
        df["transaction_date"] = pd.to_datetime(
            df["transaction_date"], format="mixed", errors="coerce"
        ).dt.normalize()
        df["amount"] = pd.to_numeric(df["amount"], errors="coerce")

        invalid = df["transaction_date"].isna() | df["amount"].isna()
        if invalid.any():
            logger.debug(f"Excluding {int(invalid.sum())} records with missing or malformed date/amount.")
            df = df[~invalid].copy()

        for column in ("description", "category", "currency"):
            df[column] = df[column].fillna("").astype(str)

        df["grouping_key"] = [
            build_grouping_key(desc, cat, cur, self.max_length)
            for desc, cat, cur in zip(df["description"], df["category"], df["currency"])
        ]
        return df

    # -------------------------------------------------------------------------
    # INTERNAL: SUGGESTION CONSTRUCTION
    # -------------------------------------------------------------------------

    def _build_suggestion(self, key: str, group: pd.DataFrame, today: date) -> RecurringSuggestion | None:
        """
        Builds a RecurringSuggestion from a single grouping-key group.

        Returns None if the group fails any gate: too few members, unstable
        amounts, no matching cadence, too few samples for the cadence, low
        confidence, or dormant.
        """
        group = group.sort_values("transaction_date", kind="mergesort")
        if len(group) < 2:
            return None

        # --- Amount consistency ---
        amounts = group["amount"].to_numpy(dtype=float)
        mean_amt = float(np.mean(amounts))
        std_amt = float(np.std(amounts))
        variance_pct = (std_amt / mean_amt) * 100 if mean_amt > 0 else 0.0
        if variance_pct > self.max_variance_pct:
            return None

        # --- Temporal consistency ---
        intervals = group["transaction_date"].diff().dt.days.dropna().abs().to_numpy(dtype=float)
        if len(intervals) == 0:
            return None
        mean_interval = float(np.mean(intervals))
        std_interval = float(np.std(intervals))

        frequency = classify_frequency(mean_interval)
        if frequency is None:
            return None

        occurrences = len(group)
        if occurrences < get_min_occurrences(frequency):
            return None

        confidence = self._compute_confidence(
            mean_interval, std_interval, occurrences, frequency, variance_pct
        )
        if confidence < self.min_confidence:
            return None

        # --- Dormancy ---
        dates = [ts.date() for ts in group["transaction_date"]]
        last_date = dates[-1]
        if days_between(last_date, today) > mean_interval * self.staleness_multiplier:
            return None

        day_of_month, day_of_week = self._compute_anchors(frequency, dates)
        last_row = group.iloc[-1]

        return RecurringSuggestion(
            id=f"rec_{uuid.uuid4().hex}",
            normalized_key=key,
            description=str(last_row["description"]),
            category=str(last_row["category"]),
            currency=str(last_row["currency"]),
            avg_amount=round_half_up(mean_amt, 2),
            min_amount=round_half_up(float(np.min(amounts)), 2),
            max_amount=round_half_up(float(np.max(amounts)), 2),
            amount_variance_pct=round_half_up(variance_pct, 1),
            frequency=frequency,
            occurrences=occurrences,
            confidence=round_half_up(confidence, 2),
            last_date=last_date,
            next_expected=next_expected(last_date, frequency, day_of_month),
            day_of_month=day_of_month,
            day_of_week=day_of_week,
            status=STATUS_SUGGESTED,
            matching_transaction_ids=tuple(str(x) for x in group["transaction_id"]),
            created_at=datetime.now(),
        )

    # -------------------------------------------------------------------------
    # INTERNAL: SCORING
    # -------------------------------------------------------------------------

    def _compute_confidence(
        self,
        mean_interval: float,
        std_interval: float,
        occurrences: int,
        frequency: str,
        variance_pct: float,
    ) -> float:
        """
        Computes a 0.0–1.0 confidence using the weighted formula from config:
            - interval_consistency_weight: 1 - intervalStd / intervalMean
            - occurrence_weight: occurrences relative to twice the minimum
            - amount_consistency_weight: 1 - variancePct / 100

        Each component is clamped to [0, 1] before weighting.
        """
        w = self.weights

        consistency = max(0.0, 1 - std_interval / mean_interval) if mean_interval > 0 else 0.0
        occurrence = min(1.0, occurrences / (get_min_occurrences(frequency) * 2))
        amount_consistency = max(0.0, 1 - variance_pct / 100)

        confidence = (
            w["interval_consistency_weight"] * consistency
            + w["occurrence_weight"] * occurrence
            + w["amount_consistency_weight"] * amount_consistency
        )
        return min(max(confidence, 0.0), 1.0)

    @staticmethod
    def _compute_anchors(frequency: str, dates: List[date]) -> tuple[int | None, int | None]:
        """
        Monthly: rounded mean day-of-month. Weekly: most common weekday
        (0 = Sunday), ties going to the weekday seen first.
        """
        if frequency == MONTHLY:
            return round_half_up(float(np.mean([d.day for d in dates]))), None
        if frequency == WEEKLY:
            weekdays = Counter(d.isoweekday() % 7 for d in dates)
            return None, weekdays.most_common(1)[0][0]
        return None, None
