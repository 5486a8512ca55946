"""
test_engine.py
---------------
Test suite for the recurring expense detection engine.

Run from the project root:
    python -m pytest tests/test_engine.py -v

Tests are organized by layer:
    - Config
    - Cadence arithmetic
    - Description normalization
    - Recurrence Detector
    - Legacy Migration
    - Query helpers
"""

import sys
import os
import pytest
import pandas as pd
import numpy as np
from datetime import date, datetime, timedelta

# Ensure the project root is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config.config_loader import (
    load_config, get_frequency_ranges, get_min_occurrences, get_recurrence_detection_config, reset_config,
)
from core.cadence import (
    add_months, classify_frequency, days_between, frequency_label, next_expected, round_half_up,
)
from core.models import (
    FREQUENCIES, STATUS_MIGRATED, STATUS_SUGGESTED, LegacyTemplate, RecurringSuggestion, Transaction,
)
from core.recurrence_detector import (
    RecurrenceDetector, build_grouping_key, normalize_description, transactions_to_frame,
)
from core.migration import migrate_template, migrate_templates
from core.queries import days_until_next, is_overdue, upcoming_and_overdue


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config_cache():
    """Clears config cache before each test for isolation."""
    reset_config()
    yield
    reset_config()


def _make_txns(
    description: str,
    amounts: list,
    dates: list,
    category: str = "Subscriptions",
    currency: str = "USD",
    start_txn_id: int = 1,
) -> pd.DataFrame:
    """Helper: one series of expenses sharing description/category/currency."""
    rows = []
    for i, (amount, day) in enumerate(zip(amounts, dates)):
        rows.append({
            "transaction_id": f"t{start_txn_id + i}",
            "description": description,
            "amount": amount,
            "currency": currency,
            "category": category,
            "transaction_date": day,
            "is_recurring": False,
        })
    return pd.DataFrame(rows)


def _noise(n: int, start_txn_id: int = 900) -> pd.DataFrame:
    """Helper: one-off expenses that never form a group."""
    rows = []
    for i in range(n):
        rows.append({
            "transaction_id": f"n{start_txn_id + i}",
            "description": f"One-off purchase {chr(ord('a') + i)}",
            "amount": 20.0 + i * 7,
            "currency": "USD",
            "category": "Shopping",
            "transaction_date": (date(2023, 2, 1) + timedelta(days=i * 3)).isoformat(),
            "is_recurring": False,
        })
    return pd.DataFrame(rows)


def _ledger(*frames: pd.DataFrame) -> pd.DataFrame:
    return pd.concat(frames, ignore_index=True)


MONTHLY_DATES = ["2023-01-10", "2023-02-09", "2023-03-11", "2023-04-10"]


def _monthly_streaming() -> pd.DataFrame:
    """Four charges 30 days apart, amounts within 2%."""
    return _make_txns("Streaming Service", [15.00, 15.00, 15.00, 15.50], MONTHLY_DATES)


def _make_suggestion(**overrides) -> RecurringSuggestion:
    """Helper: creates a RecurringSuggestion directly for query tests."""
    fields = dict(
        id="rec_test",
        normalized_key="gym|Health|USD",
        description="Gym",
        category="Health",
        currency="USD",
        avg_amount=40.0,
        min_amount=40.0,
        max_amount=40.0,
        amount_variance_pct=0.0,
        frequency="monthly",
        occurrences=4,
        confidence=0.9,
        last_date=date(2024, 5, 1),
        next_expected=date(2024, 6, 1),
        day_of_month=1,
        status="accepted",
    )
    fields.update(overrides)
    return RecurringSuggestion(**fields)


# =============================================================================
# CONFIG TESTS
# =============================================================================

class TestConfig:
    def test_config_loads_successfully(self):
        config = load_config()
        assert "recurrence_detection" in config
        assert "migration" in config
        assert "scheduler" in config
        assert "storage" in config

    def test_frequency_ranges_in_evaluation_order(self):
        assert tuple(get_frequency_ranges().keys()) == FREQUENCIES

    def test_detection_defaults(self):
        cfg = get_recurrence_detection_config()
        assert cfg["min_transactions"] == 5
        assert cfg["max_amount_variance_pct"] == 15.0
        assert cfg["min_confidence"] == 0.5
        assert cfg["staleness_multiplier"] == 2.5

    def test_min_occurrences_per_frequency(self):
        assert get_min_occurrences("weekly") == 4
        assert get_min_occurrences("biweekly") == 3
        assert get_min_occurrences("monthly") == 3
        assert get_min_occurrences("quarterly") == 2
        assert get_min_occurrences("yearly") == 2

    def test_unknown_frequency_raises(self):
        with pytest.raises(KeyError):
            get_min_occurrences("daily")

    def test_missing_config_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))


# =============================================================================
# CADENCE TESTS
# =============================================================================

class TestCadence:
    @pytest.mark.parametrize("interval,expected", [
        (5, "weekly"), (7, "weekly"), (9, "weekly"),
        (10, None), (11.9, None),
        (12, "biweekly"), (14, "biweekly"), (17, "biweekly"), (17.5, None),
        (26, "monthly"), (30.4, "monthly"), (35, "monthly"), (36, None),
        (80, "quarterly"), (91, "quarterly"), (100, "quarterly"),
        (200, None),
        (350, "yearly"), (365, "yearly"), (400, "yearly"), (401, None),
    ])
    def test_classify_frequency_bands(self, interval, expected):
        assert classify_frequency(interval) == expected

    def test_next_expected_day_cadences(self):
        assert next_expected(date(2024, 12, 28), "weekly") == date(2025, 1, 4)
        assert next_expected(date(2024, 2, 20), "biweekly") == date(2024, 3, 5)

    def test_monthly_clamps_to_month_end(self):
        assert next_expected(date(2024, 1, 31), "monthly") == date(2024, 2, 29)
        assert next_expected(date(2023, 1, 31), "monthly") == date(2023, 2, 28)

    def test_monthly_anchor_day_31_into_30_day_month(self):
        assert next_expected(date(2024, 3, 31), "monthly", day_of_month=31) == date(2024, 4, 30)

    def test_monthly_anchor_overrides_last_day(self):
        # Short month pulled the last charge to the 28th; the anchor restores the 31st.
        assert next_expected(date(2023, 2, 28), "monthly", day_of_month=31) == date(2023, 3, 31)

    def test_quarterly_and_yearly(self):
        assert next_expected(date(2024, 11, 30), "quarterly") == date(2025, 2, 28)
        assert next_expected(date(2024, 2, 29), "yearly") == date(2025, 2, 28)
        assert next_expected(date(2024, 6, 15), "yearly") == date(2025, 6, 15)

    def test_anchor_ignored_for_non_monthly(self):
        assert next_expected(date(2024, 1, 10), "quarterly", day_of_month=25) == date(2024, 4, 10)

    def test_unknown_frequency_raises(self):
        with pytest.raises(ValueError, match="Unsupported frequency"):
            next_expected(date(2024, 1, 1), "fortnightly")

    def test_add_months_crosses_year(self):
        assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)

    def test_round_half_up(self):
        assert round_half_up(14.5) == 15
        assert round_half_up(2.4) == 2
        assert round_half_up(30.75) == 31

    def test_round_half_up_to_cents(self):
        assert round_half_up(15.125, 2) == 15.13
        assert round_half_up(0.825, 2) == 0.83
        assert round_half_up(1.25, 1) == 1.3
        assert round_half_up(0, 2) == 0.0

    def test_days_between_is_absolute(self):
        assert days_between(date(2024, 3, 10), date(2024, 3, 1)) == 9

    def test_frequency_label(self):
        assert frequency_label("biweekly") == "Bi-weekly"
        assert frequency_label("yearly") == "Yearly"
        assert frequency_label("daily") == "daily"


# =============================================================================
# NORMALIZATION TESTS
# =============================================================================

class TestNormalization:
    def test_strips_punctuation_and_collapses_whitespace(self):
        assert normalize_description("  NETFLIX.COM   Subscription! ") == "netflixcom subscription"

    def test_truncates_to_max_length(self):
        assert len(normalize_description("a" * 80)) == 50

    def test_handles_missing_description(self):
        assert normalize_description(None) == ""

    def test_grouping_key_layout(self):
        assert build_grouping_key("Rent!", "Housing", "EUR") == "rent|Housing|EUR"

    def test_category_and_currency_split_groups(self):
        assert build_grouping_key("Rent", "Housing", "EUR") != build_grouping_key("Rent", "Housing", "USD")
        assert build_grouping_key("Rent", "Housing", "EUR") != build_grouping_key("Rent", "Other", "EUR")


# =============================================================================
# RECURRENCE DETECTOR TESTS
# =============================================================================

class TestRecurrenceDetector:
    def test_detects_monthly_series(self):
        txns = _ledger(_monthly_streaming(), _noise(2))
        results = RecurrenceDetector().detect(txns, today=date(2023, 4, 20))

        assert len(results) == 1
        s = results[0]
        assert s.frequency == "monthly"
        assert s.confidence >= 0.8
        assert s.confidence == pytest.approx(0.9)
        assert s.occurrences == 4
        assert s.day_of_month == 10
        assert s.day_of_week is None
        assert s.last_date == date(2023, 4, 10)
        assert s.next_expected == date(2023, 5, 10)
        assert s.status == STATUS_SUGGESTED

    def test_amount_statistics(self):
        txns = _ledger(_monthly_streaming(), _noise(2))
        s = RecurrenceDetector().detect(txns, today=date(2023, 4, 20))[0]

        assert s.avg_amount == 15.13
        assert s.min_amount == 15.0
        assert s.max_amount == 15.5
        assert s.amount_variance_pct == pytest.approx(1.4)

    def test_amounts_round_half_up_to_cents(self):
        series = _make_txns("Streaming Service", [15.00, 15.25, 15.00, 15.25], MONTHLY_DATES)
        s = RecurrenceDetector().detect(_ledger(series, _noise(2)), today=date(2023, 4, 20))[0]

        assert s.avg_amount == 15.13
        assert s.amount_variance_pct == 0.8

    def test_mixed_date_formats_parsed_per_row(self):
        dates = ["2023-01-10", "2023-02-09T09:15:00", "2023-03-11 18:00", "2023-04-10"]
        series = _make_txns("Gym membership", [40.0] * 4, dates, category="Health")
        results = RecurrenceDetector().detect(_ledger(series, _noise(2)), today=date(2023, 4, 20))

        assert len(results) == 1
        s = results[0]
        assert s.frequency == "monthly"
        assert s.occurrences == 4
        assert s.matching_transaction_ids == ("t1", "t2", "t3", "t4")
        assert s.next_expected == date(2023, 5, 10)

    def test_identity_fields(self):
        txns = _ledger(_monthly_streaming(), _noise(2))
        s = RecurrenceDetector().detect(txns, today=date(2023, 4, 20))[0]

        assert s.normalized_key == "streaming service|Subscriptions|USD"
        assert s.description == "Streaming Service"
        assert s.category == "Subscriptions"
        assert s.currency == "USD"
        assert s.matching_transaction_ids == ("t1", "t2", "t3", "t4")
        assert s.id.startswith("rec_")

    def test_fewer_than_five_transactions_returns_empty(self):
        txns = _monthly_streaming()
        assert len(txns) == 4
        assert RecurrenceDetector().detect(txns, today=date(2023, 4, 20)) == []

    def test_empty_input_returns_empty(self):
        assert RecurrenceDetector().detect([]) == []

    def test_inconsistent_amounts_rejected(self):
        txns = _ledger(
            _make_txns("Electricity", [10, 25, 40], ["2023-01-10", "2023-02-09", "2023-03-11"]),
            _noise(2),
        )
        assert RecurrenceDetector().detect(txns, today=date(2023, 3, 20)) == []

    def test_weekly_below_minimum_sample_rejected(self):
        txns = _ledger(
            _make_txns("Cleaner", [30, 30, 30], ["2024-01-01", "2024-01-08", "2024-01-15"]),
            _noise(3),
        )
        assert RecurrenceDetector().detect(txns, today=date(2024, 1, 16)) == []

    def test_dormant_series_discarded(self):
        txns = _ledger(_monthly_streaming(), _noise(2))
        detector = RecurrenceDetector()

        # 80 days after the last charge exceeds 2.5 x the 30-day interval
        assert detector.detect(txns, today=date(2023, 4, 10) + timedelta(days=80)) == []
        # 70 days is still within the window
        assert len(detector.detect(txns, today=date(2023, 4, 10) + timedelta(days=70))) == 1

    def test_no_matching_cadence_discarded(self):
        # 60-day gaps fall between the monthly and quarterly bands
        txns = _ledger(
            _make_txns("Water bill", [45, 45, 45, 45], ["2023-01-01", "2023-03-02", "2023-05-01", "2023-06-30"]),
            _noise(2),
        )
        assert RecurrenceDetector().detect(txns, today=date(2023, 7, 10)) == []

    def test_irregular_intervals_low_confidence_discarded(self):
        # Mean interval ~30 days but wildly uneven gaps
        dates = ["2023-01-01", "2023-01-03", "2023-03-20", "2023-03-22", "2023-05-01"]
        txns = _ledger(_make_txns("Parking", [5, 5, 5, 5, 5], dates), _noise(1))
        assert RecurrenceDetector().detect(txns, today=date(2023, 5, 5)) == []

    def test_monthly_anchor_31_clamps_into_30_day_month(self):
        dates = ["2024-07-31", "2024-08-31", "2024-09-30", "2024-10-31"]
        txns = _ledger(_make_txns("Rent", [1200] * 4, dates, category="Housing"), _noise(1))
        s = RecurrenceDetector().detect(txns, today=date(2024, 11, 5))[0]

        assert s.day_of_month == 31
        assert s.next_expected == date(2024, 11, 30)

    def test_weekly_anchor_is_mode_with_first_seen_tiebreak(self):
        # Mon, Tue, Mon, Tue -> tie, Monday (1) seen first
        dates = ["2024-01-01", "2024-01-09", "2024-01-15", "2024-01-23"]
        txns = _ledger(_make_txns("Farmers market", [12] * 4, dates, category="Groceries"), _noise(1))
        s = RecurrenceDetector().detect(txns, today=date(2024, 1, 25))[0]

        assert s.frequency == "weekly"
        assert s.day_of_week == 1
        assert s.day_of_month is None
        assert s.next_expected == date(2024, 1, 30)

    def test_sunday_is_day_zero(self):
        dates = ["2024-01-07", "2024-01-14", "2024-01-21", "2024-01-28"]
        txns = _ledger(_make_txns("Church donation", [10] * 4, dates, category="Giving"), _noise(1))
        s = RecurrenceDetector().detect(txns, today=date(2024, 1, 30))[0]
        assert s.day_of_week == 0

    def test_quarterly_and_yearly_need_only_two_samples(self):
        txns = _ledger(
            _make_txns("Insurance", [300, 300], ["2023-01-15", "2023-04-15"], category="Insurance"),
            _make_txns("Domain renewal", [12, 12], ["2022-05-01", "2023-05-01"], category="Web", start_txn_id=50),
            _noise(1),
        )
        results = RecurrenceDetector().detect(txns, today=date(2023, 5, 10))
        frequencies = {s.description: s.frequency for s in results}

        assert frequencies == {"Insurance": "quarterly", "Domain renewal": "yearly"}
        insurance = next(s for s in results if s.frequency == "quarterly")
        assert insurance.next_expected == date(2023, 7, 15)

    def test_description_variants_group_together(self):
        txns = _ledger(
            _make_txns("Spotify!", [9.99, 9.99], ["2023-01-05", "2023-02-04"]),
            _make_txns("SPOTIFY", [9.99, 9.99], ["2023-03-06", "2023-04-05"], start_txn_id=10),
            _noise(1),
        )
        results = RecurrenceDetector().detect(txns, today=date(2023, 4, 10))

        assert len(results) == 1
        assert results[0].occurrences == 4
        assert results[0].description == "SPOTIFY"

    def test_accepted_keys_never_reoffered(self):
        txns = _ledger(_monthly_streaming(), _noise(2))
        detector = RecurrenceDetector()
        first = detector.detect(txns, today=date(2023, 4, 20))
        assert len(first) == 1

        again = detector.detect(txns, accepted_patterns=first, today=date(2023, 4, 20))
        assert again == []

    def test_repeat_runs_are_identical_apart_from_identity(self):
        txns = _ledger(_monthly_streaming(), _noise(2))
        detector = RecurrenceDetector()

        def strip(results):
            out = []
            for s in results:
                d = s.to_dict()
                d.pop("id")
                d.pop("created_at")
                out.append(d)
            return out

        first = detector.detect(txns, today=date(2023, 4, 20))
        second = detector.detect(txns, today=date(2023, 4, 20))
        assert strip(first) == strip(second)
        assert first[0].id != second[0].id

    def test_input_not_mutated(self):
        txns = _ledger(_monthly_streaming(), _noise(2))
        before = txns.copy()
        RecurrenceDetector().detect(txns, today=date(2023, 4, 20))
        pd.testing.assert_frame_equal(txns, before)

    def test_sorted_by_confidence_then_key(self):
        dates = ["2023-01-10", "2023-02-09", "2023-03-11", "2023-04-10"]
        txns = _ledger(
            _make_txns("Zeta gym", [30] * 4, dates, start_txn_id=1),
            _make_txns("Alpha gym", [30] * 4, dates, start_txn_id=10),
            # Uneven gaps -> lower confidence
            _make_txns("Cloud storage", [2.99] * 4, ["2023-01-01", "2023-02-05", "2023-03-02", "2023-04-08"],
                       start_txn_id=20),
        )
        results = RecurrenceDetector().detect(txns, today=date(2023, 4, 20))

        assert [s.description for s in results] == ["Alpha gym", "Zeta gym", "Cloud storage"]
        assert results[0].confidence == results[1].confidence > results[2].confidence

    def test_malformed_records_excluded(self):
        bad = pd.DataFrame([
            {"transaction_id": "x1", "description": "Streaming Service", "amount": "abc",
             "currency": "USD", "category": "Subscriptions", "transaction_date": "2023-03-20"},
            {"transaction_id": "x2", "description": "Streaming Service", "amount": 15.0,
             "currency": "USD", "category": "Subscriptions", "transaction_date": "not a date"},
        ])
        txns = _ledger(_monthly_streaming(), bad)
        results = RecurrenceDetector().detect(txns, today=date(2023, 4, 20))

        assert len(results) == 1
        assert results[0].occurrences == 4
        assert "x1" not in results[0].matching_transaction_ids

    def test_accepts_transaction_records(self):
        records = [
            Transaction(
                transaction_id=str(i), description="Phone plan", amount=35.0, currency="EUR",
                category="Utilities", transaction_date=date(2024, 1, 5) + timedelta(days=30 * i),
            )
            for i in range(5)
        ]
        frame = transactions_to_frame(records)
        assert list(frame["transaction_id"]) == ["0", "1", "2", "3", "4"]

        results = RecurrenceDetector().detect(records, today=date(2024, 5, 10))
        assert len(results) == 1
        assert results[0].currency == "EUR"

    def test_missing_columns_raises(self):
        bad_df = pd.DataFrame({"description": ["x"] * 5, "amount": [1.0] * 5})
        with pytest.raises(ValueError, match="Missing required columns"):
            RecurrenceDetector().detect(bad_df)

    def test_output_properties_hold_on_noisy_ledger(self):
        rng = np.random.default_rng(7)
        frames = []
        end = date(2023, 6, 30)
        for i, (name, step) in enumerate([("Gym", 30), ("Laundry", 7), ("Tutor", 14), ("Lottery", 11)]):
            n = 8
            jitter = rng.integers(-2, 3, size=n)
            dates = [(end - timedelta(days=step * (n - 1 - k) - int(jitter[k]))).isoformat() for k in range(n)]
            amounts = list(np.round(rng.normal(50, 4, size=n), 2))
            frames.append(_make_txns(name, amounts, dates, category="Mixed", start_txn_id=100 * (i + 1)))
        frames.append(_noise(5))
        txns = _ledger(*frames)

        results = RecurrenceDetector().detect(txns, today=date(2023, 7, 3))
        assert results
        for s in results:
            assert 0.0 <= s.confidence <= 1.0
            assert s.amount_variance_pct <= 15
            assert s.occurrences >= get_min_occurrences(s.frequency)
            assert s.next_expected == next_expected(s.last_date, s.frequency, s.day_of_month)
        keys = [s.normalized_key for s in results]
        assert len(keys) == len(set(keys))


# =============================================================================
# MIGRATION TESTS
# =============================================================================

class TestMigration:
    def _template(self, **overrides):
        data = {
            "id": "t1",
            "name": "Gym Membership",
            "amount": 40.0,
            "currency": "USD",
            "category": "Health",
            "frequency": "monthly",
            "dayOfMonth": 15,
            "startDate": "2023-06-15",
            "lastGenerated": "2024-01-15",
            "isActive": True,
        }
        data.update(overrides)
        return data

    def test_monthly_template_with_anchor(self):
        s = migrate_template(self._template())

        assert s.status == STATUS_MIGRATED
        assert s.confidence == 0.95
        assert s.next_expected == date(2024, 2, 15)
        assert s.last_date == date(2024, 1, 15)
        assert s.occurrences == 0
        assert s.id == "migrated_t1"
        assert s.normalized_key == "gym membership|Health|USD"
        assert s.avg_amount == s.min_amount == s.max_amount == 40.0
        assert s.amount_variance_pct == 0.0
        assert s.matching_transaction_ids == ()

    def test_falls_back_to_start_date(self):
        s = migrate_template(self._template(lastGenerated=None))
        assert s.last_date == date(2023, 6, 15)
        assert s.next_expected == date(2023, 7, 15)

    def test_anchor_clamped_to_short_month(self):
        s = migrate_template(self._template(dayOfMonth=31, lastGenerated="2024-01-31"))
        assert s.next_expected == date(2024, 2, 29)

    def test_weekly_template(self):
        s = migrate_template(self._template(frequency="weekly", dayOfMonth=None, dayOfWeek=3))
        assert s.next_expected == date(2024, 1, 22)
        assert s.day_of_week == 3

    def test_accepts_dataclass(self):
        template = LegacyTemplate(
            id="t9", name="Car insurance", amount=420.0, currency="EUR", category="Insurance",
            frequency="yearly", start_date=date(2023, 3, 1),
        )
        s = migrate_template(template, now=datetime(2024, 1, 1, 9, 0))
        assert s.next_expected == date(2024, 3, 1)
        assert s.created_at == datetime(2024, 1, 1, 9, 0)

    def test_unsupported_frequency_raises(self):
        with pytest.raises(ValueError, match="unsupported frequency"):
            migrate_template(self._template(frequency="daily"))

    def test_batch_skips_bad_templates(self):
        migrated = migrate_templates([
            self._template(),
            self._template(id="t2", frequency="daily"),
            self._template(id="t3", name="Netflix", frequency="monthly"),
        ])
        assert [s.id for s in migrated] == ["migrated_t1", "migrated_t3"]


# =============================================================================
# QUERY TESTS
# =============================================================================

class TestQueries:
    def test_overdue_is_strictly_before_today(self):
        s = _make_suggestion(next_expected=date(2024, 6, 1))
        assert is_overdue(s, today=date(2024, 6, 2))
        assert not is_overdue(s, today=date(2024, 6, 1))

    def test_days_until_next(self):
        s = _make_suggestion(next_expected=date(2024, 6, 1))
        assert days_until_next(s, today=date(2024, 5, 25)) == 7
        assert days_until_next(s, today=date(2024, 6, 3)) == -2

    def test_upcoming_and_overdue_partition(self):
        patterns = [
            _make_suggestion(id="a", avg_amount=10.0, next_expected=date(2024, 6, 20)),
            _make_suggestion(id="b", avg_amount=20.0, next_expected=date(2024, 6, 12)),
            _make_suggestion(id="c", avg_amount=5.5, next_expected=date(2024, 6, 5)),
            _make_suggestion(id="d", avg_amount=99.0, next_expected=date(2024, 8, 1)),
        ]
        summary = upcoming_and_overdue(patterns, today=date(2024, 6, 10))

        assert [i.suggestion.id for i in summary.upcoming] == ["b", "a"]
        assert [i.suggestion.id for i in summary.overdue] == ["c"]
        assert summary.upcoming_total == 30.0
        assert summary.overdue_total == 5.5

    def test_custom_window(self):
        patterns = [_make_suggestion(next_expected=date(2024, 7, 30))]
        assert upcoming_and_overdue(patterns, today=date(2024, 7, 1), days_ahead=14).upcoming == []
        assert len(upcoming_and_overdue(patterns, today=date(2024, 7, 1), days_ahead=30).upcoming) == 1


# =============================================================================
# ENTRY POINT
# =============================================================================

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
