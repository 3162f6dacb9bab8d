"""Transactions, analytics results and the parsing helpers they share.

A :class:`Transaction` is one expense row as it was uploaded or typed in; the
result classes hold what the aggregator and insight functions compute.
Each result type offers ``to_dict`` so the API layer can serialise it without
knowing the camelCase field names the dashboard expects.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Union
from uuid import uuid4

from dateutil import parser as date_parser

from .categories import MISCELLANEOUS

DateLike = Union[date, str, None]
AmountLike = Union[float, int, str, None]

_NON_NUMERIC_RE = re.compile(r"[^\d.\-]")
_FIRST_DEFAULT = datetime(2000, 1, 1)
_SECOND_DEFAULT = datetime(2001, 2, 2)


class ExpenseTrackerError(Exception):
    """Base class for errors raised by the expense tracker."""


class TransactionValidationError(ExpenseTrackerError, ValueError):
    """Raised when a transaction cannot be built from the supplied fields."""


def _new_transaction_id() -> str:
    return uuid4().hex


@dataclass(slots=True)
class Transaction:
    """A single expense, either uploaded from a statement or entered by hand.

    ``amount``/``currency`` hold the working-currency value.  When the user
    typed the expense in another currency, ``original_amount`` and
    ``original_currency`` carry what was entered and take precedence for every
    total.  ``date`` and ``amount`` may still hold raw strings from ingestion;
    the analytics functions parse them lazily and skip what they cannot read.
    """

    date: DateLike
    description: str
    amount: AmountLike
    id: str = field(default_factory=_new_transaction_id)
    mode: str = "Cash"
    category: str = MISCELLANEOUS
    currency: Optional[str] = None
    original_amount: AmountLike = None
    original_currency: Optional[str] = None

    def __post_init__(self) -> None:
        has_amount = self.original_amount is not None
        has_currency = bool(self.original_currency)
        if has_amount != has_currency:
            raise TransactionValidationError(
                "original_amount and original_currency must be provided together"
            )

    def effective_amount(self) -> float:
        """Return the amount used for totals, ``0.0`` when it is not numeric."""

        raw = self.original_amount if self.original_amount is not None else self.amount
        parsed = parse_amount(raw)
        return parsed if parsed is not None else 0.0

    def effective_currency(self, default: str) -> str:
        return self.original_currency or self.currency or default

    def to_dict(self) -> dict[str, object]:
        parsed = parse_date(self.date)
        return {
            "id": self.id,
            "date": parsed.isoformat() if parsed else self.date,
            "description": self.description,
            "amount": self.amount,
            "mode": self.mode,
            "category": self.category,
            "currency": self.currency,
            "originalAmount": self.original_amount,
            "originalCurrency": self.original_currency,
        }


@dataclass(slots=True)
class RankedCategory:
    category: str
    amount: float

    def to_dict(self) -> dict[str, object]:
        return {"category": self.category, "amount": self.amount}


@dataclass(slots=True)
class MonthComparison:
    """Outcome of comparing the two most recent months of spending."""

    trend: str
    message: str
    difference: float
    percentage: float

    def to_dict(self) -> dict[str, object]:
        return {
            "trend": self.trend,
            "message": self.message,
            "difference": self.difference,
            "percentage": self.percentage,
        }


@dataclass(slots=True)
class CategoryInsight:
    kind: str
    message: str

    def to_dict(self) -> dict[str, object]:
        return {"type": self.kind, "message": self.message}


@dataclass(slots=True)
class ExpenseExtreme:
    """The largest or smallest single expense seen in a collection."""

    date: str
    amount: float
    currency: str
    description: str

    def to_dict(self) -> dict[str, object]:
        return {
            "date": self.date,
            "amount": f"{self.amount:.2f}",
            "currency": self.currency,
            "description": self.description,
        }


@dataclass(slots=True)
class DailyStats:
    """Single-transaction extremes.

    ``average_daily`` stays ``0`` because a per-day average across mixed
    currencies has no meaningful unit.
    """

    max_expense: Optional[ExpenseExtreme]
    min_expense: Optional[ExpenseExtreme]
    total_transactions: int
    average_daily: float = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "maxExpense": self.max_expense.to_dict() if self.max_expense else None,
            "minExpense": self.min_expense.to_dict() if self.min_expense else None,
            "totalTransactions": self.total_transactions,
            "averageDaily": self.average_daily,
        }


@dataclass(slots=True)
class InsightsSummary:
    total_spending: float
    total_currency: str
    transaction_count: int
    month_comparison: MonthComparison
    category_insights: list[CategoryInsight]
    daily_stats: DailyStats
    average_transaction: float

    def to_dict(self) -> dict[str, object]:
        return {
            "totalSpending": f"{self.total_spending:.2f}",
            "totalCurrency": self.total_currency,
            "transactionCount": self.transaction_count,
            "monthComparison": self.month_comparison.to_dict(),
            "categoryInsights": [insight.to_dict() for insight in self.category_insights],
            "dailyStats": self.daily_stats.to_dict(),
            "averageTransaction": f"{self.average_transaction:.2f}",
        }


@dataclass(slots=True)
class BudgetStatus:
    total_budget: float
    spent: float
    remaining: float
    percentage_spent: float
    over_budget: bool

    def to_dict(self) -> dict[str, object]:
        return {
            "totalBudget": self.total_budget,
            "spent": self.spent,
            "remaining": self.remaining,
            "percentageSpent": self.percentage_spent,
            "overBudget": self.over_budget,
        }


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------

def parse_amount(value: object) -> float | None:
    """Return ``value`` as a finite float or ``None`` when it is not numeric.

    Strings are stripped of currency symbols and thousands separators first,
    so ``"₹1,250.50"`` reads as ``1250.5``.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = _NON_NUMERIC_RE.sub("", str(value))
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_date(value: object) -> date | None:
    """Return a calendar date for ``value`` or ``None`` when unparsable."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    stringified = str(value).strip()
    if not stringified or stringified in {"NaT", "nan"}:
        return None
    try:
        return date.fromisoformat(stringified)
    except ValueError:
        pass
    # A date missing its year, month or day would otherwise be completed from
    # the defaults, so parse against two different defaults and require agreement.
    try:
        first = date_parser.parse(stringified, default=_FIRST_DEFAULT).date()
        second = date_parser.parse(stringified, default=_SECOND_DEFAULT).date()
    except (ValueError, OverflowError):
        return None
    return first if first == second else None


__all__ = [
    "BudgetStatus",
    "CategoryInsight",
    "DailyStats",
    "ExpenseExtreme",
    "ExpenseTrackerError",
    "InsightsSummary",
    "MonthComparison",
    "RankedCategory",
    "Transaction",
    "TransactionValidationError",
    "parse_amount",
    "parse_date",
]
