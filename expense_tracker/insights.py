"""Derive human-readable spending insights from aggregated totals.

All functions are pure: they read the totals and transactions they are given
and return fresh result objects.  Bad rows (unparsable dates, non-positive
amounts) are skipped rather than raised so one broken line cannot hide the
rest of a report.
"""
from __future__ import annotations

import logging
from collections import Counter
from typing import Mapping, Optional, Sequence

from .categories import MISCELLANEOUS
from .currency import DEFAULT_CURRENCY, CurrencyConverter, currency_symbol
from .models import (
    BudgetStatus,
    CategoryInsight,
    DailyStats,
    ExpenseExtreme,
    InsightsSummary,
    MonthComparison,
    Transaction,
    parse_date,
)

logger = logging.getLogger(__name__)

# A category needs strictly more transactions than this to be called out.
HIGH_FREQUENCY_THRESHOLD = 3

_default_converter = CurrencyConverter()


def calculate_total(
    transactions: Sequence[Transaction],
    target_currency: str = DEFAULT_CURRENCY,
    default_currency: str = DEFAULT_CURRENCY,
    converter: Optional[CurrencyConverter] = None,
) -> float:
    """Sum every positive expense after converting it to ``target_currency``.

    Rows without a currency are assumed to be in ``default_currency``.
    """

    converter = converter or _default_converter
    total = 0.0
    for tx in transactions:
        amount = tx.effective_amount()
        if amount <= 0:
            continue
        total += converter.convert(amount, tx.effective_currency(default_currency), target_currency)
    return total


def compare_months(
    monthly_totals: Mapping[str, float],
    currency: str = DEFAULT_CURRENCY,
) -> MonthComparison:
    """Compare the two most recent months in ``monthly_totals``.

    Month keys are zero-padded ``YYYY-MM`` strings, so a lexical sort is also
    chronological.  A previous month with no spending yields a ``"neutral"``
    trend with a zero percentage instead of an infinite growth figure.
    """

    months = sorted(monthly_totals)
    if len(months) < 2:
        return MonthComparison(
            trend="neutral",
            message="Not enough data for month-over-month comparison",
            difference=0,
            percentage=0,
        )

    current = monthly_totals[months[-1]]
    previous = monthly_totals[months[-2]]
    difference = current - previous
    symbol = currency_symbol(currency)

    if difference == 0:
        return MonthComparison(
            trend="neutral",
            message="Your spending remained the same as last month",
            difference=difference,
            percentage=0.0,
        )

    if previous == 0:
        return MonthComparison(
            trend="neutral",
            message="No spending recorded last month to compare against",
            difference=difference,
            percentage=0.0,
        )

    percentage = round(difference / previous * 100, 1)
    if difference > 0:
        message = (
            f"You spent {abs(percentage):.1f}% more this month "
            f"({symbol}{difference:.2f} increase)"
        )
        trend = "up"
    else:
        message = (
            f"Great! You spent {abs(percentage):.1f}% less this month "
            f"({symbol}{abs(difference):.2f} saved)"
        )
        trend = "down"
    return MonthComparison(trend=trend, message=message, difference=difference, percentage=percentage)


def analyze_category_spending(
    category_totals: Mapping[str, float],
    transactions: Sequence[Transaction],
    currency: str = DEFAULT_CURRENCY,
) -> list[CategoryInsight]:
    """Call out the dominant category and, if busy enough, the most frequent one.

    The dominant share is measured against the plain sum of
    ``category_totals``; with mixed currencies that sum is not the converted
    headline total.
    """

    insights: list[CategoryInsight] = []
    symbol = currency_symbol(currency)

    if category_totals:
        category, amount = sorted(category_totals.items(), key=lambda item: item[1], reverse=True)[0]
        total = sum(category_totals.values())
        percentage = round(amount / total * 100, 1) if total else 0.0
        insights.append(
            CategoryInsight(
                kind="dominant",
                message=(
                    f"{category} is your biggest expense at {percentage:.1f}% "
                    f"of total spending ({symbol}{amount:.2f})"
                ),
            )
        )

    counts = Counter(tx.category or MISCELLANEOUS for tx in transactions)
    if counts:
        category, count = sorted(counts.items(), key=lambda item: item[1], reverse=True)[0]
        if count > HIGH_FREQUENCY_THRESHOLD:
            insights.append(
                CategoryInsight(
                    kind="frequency",
                    message=f"You made {count} transactions in {category}",
                )
            )

    return insights


def get_daily_stats(
    transactions: Sequence[Transaction],
    default_currency: str = DEFAULT_CURRENCY,
) -> DailyStats:
    """Find the largest and smallest single expenses.

    Amounts are compared as entered, without conversion, which is why
    ``average_daily`` is left at ``0``.
    """

    max_expense: Optional[ExpenseExtreme] = None
    min_expense: Optional[ExpenseExtreme] = None

    for tx in transactions:
        day = parse_date(tx.date)
        if day is None:
            continue
        amount = tx.effective_amount()
        if amount <= 0:
            continue

        extreme = ExpenseExtreme(
            date=day.isoformat(),
            amount=amount,
            currency=tx.effective_currency(default_currency),
            description=tx.description or "Expense",
        )
        if max_expense is None or amount > max_expense.amount:
            max_expense = extreme
        if min_expense is None or amount < min_expense.amount:
            min_expense = extreme

    return DailyStats(
        max_expense=max_expense,
        min_expense=min_expense,
        total_transactions=len(transactions),
        average_daily=0,
    )


def generate_insights(
    transactions: Sequence[Transaction],
    category_totals: Mapping[str, float],
    monthly_totals: Mapping[str, float],
    target_currency: str = DEFAULT_CURRENCY,
    default_currency: str = DEFAULT_CURRENCY,
    converter: Optional[CurrencyConverter] = None,
) -> InsightsSummary:
    """Bundle every insight into a single summary for the dashboard.

    The headline total is converted to ``target_currency``; month and
    category messages describe the unconverted totals and therefore use the
    symbol of ``default_currency``.
    """

    total = calculate_total(transactions, target_currency, default_currency, converter)
    count = len(transactions)
    return InsightsSummary(
        total_spending=total,
        total_currency=target_currency,
        transaction_count=count,
        month_comparison=compare_months(monthly_totals, default_currency),
        category_insights=analyze_category_spending(category_totals, transactions, default_currency),
        daily_stats=get_daily_stats(transactions, default_currency),
        average_transaction=total / count if count else 0.0,
    )


def budget_status(total_budget: float, total_spent: float, enabled: bool = True) -> BudgetStatus:
    """Compare spending with a budget; a disabled budget deducts nothing."""

    spent = total_spent if enabled else 0.0
    remaining = total_budget - spent
    percentage = round(spent / total_budget * 100, 1) if total_budget > 0 else 0.0
    if remaining < 0:
        logger.info("Budget of %.2f exceeded by %.2f", total_budget, -remaining)
    return BudgetStatus(
        total_budget=total_budget,
        spent=spent,
        remaining=remaining,
        percentage_spent=percentage,
        over_budget=remaining < 0,
    )


__all__ = [
    "HIGH_FREQUENCY_THRESHOLD",
    "analyze_category_spending",
    "budget_status",
    "calculate_total",
    "compare_months",
    "generate_insights",
    "get_daily_stats",
]
