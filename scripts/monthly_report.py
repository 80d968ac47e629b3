#!/usr/bin/env python3
"""Print income, spending and balance for one month from the configured backend."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from spendwise import config  # noqa: E402
from spendwise.controller import BudgetController  # noqa: E402
from spendwise.errors import ValidationError  # noqa: E402
from spendwise.formatting import format_currency  # noqa: E402
from spendwise.models import month_key  # noqa: E402


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Summarize one month of SpendWise data.")
    parser.add_argument("month", nargs="?", default=month_key(datetime.now()), help="Month as YYYY-MM (default: current)")
    parser.add_argument("--backend", choices=["local", "remote"], default=None, help="Override SPENDWISE_BACKEND")
    args = parser.parse_args(argv)

    config.configure_logging("WARNING")
    try:
        controller = BudgetController(backend=config.build_backend(args.backend), month=args.month)
    except ValidationError as exc:
        print(exc)
        return 1
    snapshot = controller.load()

    print(f"SpendWise report for {snapshot.year_month}")
    print(f"  Income:  {format_currency(snapshot.income)}")
    print(f"  Spent:   {format_currency(snapshot.total)} across {len(snapshot.expenses)} expenses")
    print(f"  Balance: {format_currency(snapshot.balance)}")
    if snapshot.category_totals:
        print("By category:")
        for category, amount in sorted(snapshot.category_totals.items(), key=lambda kv: -kv[1]):
            print(f"  - {category}: {format_currency(amount)}")
    busiest = max(range(len(snapshot.daily_totals)), key=lambda i: snapshot.daily_totals[i], default=None)
    if busiest is not None and snapshot.daily_totals[busiest] > 0:
        print(f"Biggest day: {busiest + 1} ({format_currency(snapshot.daily_totals[busiest])})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
