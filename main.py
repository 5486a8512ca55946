"""
main.py
--------
Entry point for the Recurring Expense Pattern Engine.

Reads an expense ledger CSV, optionally migrates legacy recurring templates,
runs detection against the persisted suggestion state, and writes the
pending suggestions to the outputs/ folder.

Usage (from the project root):
    python main.py --input expenses.csv

    # With optional arguments:
    python main.py --input expenses.csv --state state/patterns.json
    python main.py --input expenses.csv --templates legacy_templates.json
    python main.py --input expenses.csv --today 2024-06-30 --upcoming-days 30
"""

import sys
import os
import argparse
import json
import logging
import pandas as pd
from datetime import date, datetime

# Ensure project root is on path (for VS Code runs from any working directory)
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, PROJECT_ROOT)

from pipeline import RecurrencePipeline
from core.queries import UpcomingSummary, frequency_label
from store.key_value_store import JsonFileKeyValueStore


# =============================================================================
# LOGGING SETUP
# =============================================================================

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("main")

# Column names used by the application's own expense export.
LEDGER_COLUMN_ALIASES = {"id": "transaction_id", "date": "transaction_date", "isRecurring": "is_recurring"}


# =============================================================================
# ARGUMENT PARSING
# =============================================================================

def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Recurring Expense Pattern Engine — Detect recurring expenses in a ledger."
    )
    parser.add_argument(
        "--input", type=str, required=True,
        help="Path to the expense ledger CSV."
    )
    parser.add_argument(
        "--state", type=str, default=None,
        help="Path to the JSON suggestion state file. Defaults to the config value."
    )
    parser.add_argument(
        "--templates", type=str, default=None,
        help="Path to a JSON list of legacy recurring templates to migrate (runs once per state file)."
    )
    parser.add_argument(
        "--today", type=date.fromisoformat, default=None,
        help="Reference date (YYYY-MM-DD) for dormancy and due-date checks. Defaults to today."
    )
    parser.add_argument(
        "--output-dir", type=str, default=None,
        help="Output directory. Defaults to outputs/ in the current working directory."
    )
    parser.add_argument(
        "--upcoming-days", type=int, default=None,
        help="Window for the upcoming fixed expenses summary. Defaults to config value (14)."
    )
    return parser.parse_args()


# =============================================================================
# MAIN
# =============================================================================

def main():
    args = parse_args()

    output_dir = args.output_dir or os.path.join(os.getcwd(), "outputs")
    os.makedirs(output_dir, exist_ok=True)

    # --- Load ledger ---
    logger.info(f"Loading transactions from: {args.input}")
    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        sys.exit(1)

    transactions = pd.read_csv(args.input).rename(columns=LEDGER_COLUMN_ALIASES)
    logger.info(f"Loaded {len(transactions):,} transactions.")

    pipeline = RecurrencePipeline(store=JsonFileKeyValueStore(args.state))

    # --- Optional: legacy template migration ---
    if args.templates:
        if not os.path.exists(args.templates):
            logger.error(f"Templates file not found: {args.templates}")
            sys.exit(1)
        with open(args.templates, "r", encoding="utf-8") as f:
            templates = json.load(f)
        pipeline.migrate_templates(templates)

    # --- Run detection ---
    try:
        suggestions = pipeline.run(transactions, today=args.today)
    except ValueError as e:
        logger.error(f"Detection failed: {e}")
        sys.exit(1)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    suggestions_path = os.path.join(output_dir, f"suggestions_{timestamp}.csv")
    suggestions.to_csv(suggestions_path, index=False)
    logger.info(f"Suggestions saved to: {suggestions_path}")

    _print_summary(suggestions)
    _print_upcoming(pipeline.upcoming(today=args.today, days_ahead=args.upcoming_days))


def _print_summary(df: pd.DataFrame):
    """Prints a clean summary table of pending suggestions to the console."""
    if df.empty:
        print("\n  No new recurring patterns detected.\n")
        return

    print("\n" + "=" * 80)
    print("  DETECTED RECURRING EXPENSES")
    print("=" * 80)

    for _, row in df.iterrows():
        print(
            f"    {str(row['description'])[:30]:30s}  {row['frequency_label']:10s}  "
            f"{row['avg_amount']:>10,.2f} {row['currency']:4s}  "
            f"conf {row['confidence']:.2f}  next {row['next_expected']}"
        )

    print(f"\n  Patterns by cadence:")
    print("  " + "-" * 60)
    for frequency, count in df["frequency"].value_counts().items():
        print(f"    {frequency_label(frequency):10s}  {count:>5,}")
    print("=" * 80 + "\n")


def _print_upcoming(summary: UpcomingSummary):
    """Prints overdue and upcoming confirmed patterns."""
    if not summary.upcoming and not summary.overdue:
        return

    print("  UPCOMING FIXED EXPENSES")
    print("  " + "-" * 60)
    for item in summary.overdue:
        s = item.suggestion
        print(f"    OVERDUE  {s.description[:30]:30s}  {s.avg_amount:>10,.2f} {s.currency}  ({-item.days_until} days late)")
    for item in summary.upcoming:
        s = item.suggestion
        print(f"    in {item.days_until:>3}d  {s.description[:30]:30s}  {s.avg_amount:>10,.2f} {s.currency}")
    print(f"\n    Upcoming total: {summary.upcoming_total:,.2f}   Overdue total: {summary.overdue_total:,.2f}\n")


if __name__ == "__main__":
    main()
