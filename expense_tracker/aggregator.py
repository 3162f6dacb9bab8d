"""Category, month and day totals over a transaction collection.

Every function recomputes its totals from the full collection it receives;
nothing is cached or patched incrementally, so deleting an expense and calling
again always yields consistent numbers.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Callable, Iterable

from .categories import MISCELLANEOUS
from .models import Transaction, parse_date

logger = logging.getLogger(__name__)


def group_by_category(transactions: Iterable[Transaction]) -> dict[str, float]:
    totals: dict[str, float] = defaultdict(float)
    for tx in transactions:
        totals[tx.category or MISCELLANEOUS] += _summable_amount(tx)
    return dict(totals)


def group_by_month(transactions: Iterable[Transaction]) -> dict[str, float]:
    """Sum positive effective amounts per ``"YYYY-MM"`` key, skipping unparsable dates."""

    return _group_by_date(transactions, lambda day: f"{day.year:04d}-{day.month:02d}")


def group_by_day(transactions: Iterable[Transaction]) -> dict[str, float]:
    """Sum positive effective amounts per ISO calendar day, skipping unparsable dates."""

    return _group_by_date(transactions, date.isoformat)


def count_invalid_dates(transactions: Iterable[Transaction]) -> int:
    return sum(1 for tx in transactions if parse_date(tx.date) is None)


def _summable_amount(tx: Transaction) -> float:
    # refunds and zero rows count as 0
    return max(tx.effective_amount(), 0.0)


def _group_by_date(
    transactions: Iterable[Transaction],
    key_for: Callable[[date], str],
) -> dict[str, float]:
    totals: dict[str, float] = defaultdict(float)
    skipped = 0
    for tx in transactions:
        day = parse_date(tx.date)
        if day is None:
            skipped += 1
            continue
        totals[key_for(day)] += _summable_amount(tx)
    if skipped:
        logger.warning("Skipped %d transaction(s) with an unparsable date", skipped)
    return dict(totals)


__all__ = ["count_invalid_dates", "group_by_category", "group_by_day", "group_by_month"]
