"""Expense categorisation and spending analytics backend."""
from __future__ import annotations

from .aggregator import group_by_category, group_by_day, group_by_month
from .categorizer import Categorizer, categorize_expense
from .currency import CurrencyConverter, convert
from .insights import (
    analyze_category_spending,
    calculate_total,
    compare_months,
    generate_insights,
    get_daily_stats,
)
from .models import Transaction
from .ranking import top_categories

__version__ = "0.1.0"

__all__ = [
    "Categorizer",
    "CurrencyConverter",
    "Transaction",
    "analyze_category_spending",
    "calculate_total",
    "categorize_expense",
    "compare_months",
    "convert",
    "generate_insights",
    "get_daily_stats",
    "group_by_category",
    "group_by_day",
    "group_by_month",
    "top_categories",
]
