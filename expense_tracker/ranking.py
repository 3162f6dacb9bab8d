"""Ranking helpers for category totals."""
from __future__ import annotations

from typing import Mapping

from .models import RankedCategory


def top_categories(category_totals: Mapping[str, float], n: int = 5) -> list[RankedCategory]:
    """Return the ``n`` largest categories, biggest first.

    ``sorted`` is stable, so categories with equal totals keep the order in
    which they appear in ``category_totals``.
    """

    if n <= 0:
        return []
    ranked = sorted(category_totals.items(), key=lambda item: item[1], reverse=True)
    return [RankedCategory(category=category, amount=amount) for category, amount in ranked[:n]]


__all__ = ["top_categories"]
