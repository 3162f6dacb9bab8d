"""Keyword based expense categorisation."""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Mapping, Optional, Sequence

from .categories import CATEGORY_KEYWORDS, MISCELLANEOUS
from .models import Transaction


class Categorizer:
    """Assign one category from a fixed, ordered rule table to a description.

    Matching is plain substring containment on the lower-cased description, so
    ``"food"`` also matches ``"foodie"``.  The first category (in table order)
    with any matching keyword wins; keyword order inside a category does not
    change the outcome but is preserved for readability.
    """

    def __init__(self, rules: Mapping[str, Sequence[str]] = CATEGORY_KEYWORDS) -> None:
        self._rules: tuple[tuple[str, tuple[str, ...]], ...] = tuple(
            (category, tuple(keyword.lower() for keyword in keywords))
            for category, keywords in rules.items()
            if category != MISCELLANEOUS
        )

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(category for category, _ in self._rules) + (MISCELLANEOUS,)

    def categorize(self, description: Optional[str]) -> str:
        if not description:
            return MISCELLANEOUS

        lowered = str(description).lower()
        for category, keywords in self._rules:
            for keyword in keywords:
                if keyword in lowered:
                    return category
        return MISCELLANEOUS

    def categorize_all(self, transactions: Iterable[Transaction]) -> list[Transaction]:
        """Return copies of ``transactions`` with their category assigned."""

        return [replace(tx, category=self.categorize(tx.description)) for tx in transactions]


_default_categorizer = Categorizer()


def categorize_expense(description: Optional[str]) -> str:
    """Categorise ``description`` with the canonical rule table."""

    return _default_categorizer.categorize(description)


__all__ = ["Categorizer", "categorize_expense"]
