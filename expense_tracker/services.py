"""High-level application services orchestrating the expense tracker backend."""
from __future__ import annotations

import logging
from typing import Optional

from .aggregator import count_invalid_dates, group_by_category, group_by_day, group_by_month
from .categorizer import Categorizer
from .config import AppConfig
from .currency import CurrencyConverter, is_supported, normalise_code
from .database import SQLiteRepository
from .importers import CsvExpenseImporter, CsvSource, ImportResult
from .insights import budget_status, calculate_total, generate_insights
from .models import BudgetStatus, Transaction, TransactionValidationError, parse_amount, parse_date
from .ranking import top_categories
from .tips_service import FinanceTipsService

logger = logging.getLogger(__name__)

DISPLAY_CURRENCY_KEY = "display_currency"
BUDGET_KEY = "budget"
BUDGET_ENABLED_KEY = "budget_enabled"


class ExpenseService:
    """Coordinates imports, persistence and analytics for one user at a time.

    Every analytics call reads a fresh snapshot of the user's expenses from the
    repository and recomputes all aggregates from it.
    """

    def __init__(
        self,
        config: AppConfig,
        repository: SQLiteRepository,
        categorizer: Categorizer,
        converter: CurrencyConverter,
        tips_service: FinanceTipsService,
    ) -> None:
        self._config = config
        self._repository = repository
        self._categorizer = categorizer
        self._converter = converter
        self._tips_service = tips_service

    # ------------------------------------------------------------------
    # Expense workflows
    # ------------------------------------------------------------------
    def import_csv(self, user_id: str, source: CsvSource) -> ImportResult:
        """Import a CSV statement and persist every accepted row."""

        importer = CsvExpenseImporter(self._categorizer, self._config.default_currency)
        result = importer.load(source)
        self._repository.add_transactions(user_id, result.transactions)
        return result

    def add_expense(
        self,
        user_id: str,
        date: object,
        description: Optional[str],
        amount: object,
        mode: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> Transaction:
        """Validate, categorise and store a manually entered expense.

        An expense entered in a currency other than the working currency keeps
        what the user typed in ``original_amount``/``original_currency``.
        """

        parsed_date = parse_date(date)
        if parsed_date is None:
            raise TransactionValidationError(f"Invalid date: {date!r}")
        description = (description or "").strip()
        if not description:
            raise TransactionValidationError("Description is required")
        parsed_amount = parse_amount(amount)
        if parsed_amount is None or parsed_amount <= 0:
            raise TransactionValidationError("Amount must be a positive number")

        code = normalise_code(currency) or self._config.default_currency
        if not is_supported(code):
            raise TransactionValidationError(f"Unsupported currency: {code}")

        original_amount = None
        original_currency = None
        if code != self._config.default_currency:
            original_amount = parsed_amount
            original_currency = code

        transaction = Transaction(
            date=parsed_date,
            description=description,
            amount=self._converter.convert(parsed_amount, code, self._config.default_currency),
            mode=(mode or "Cash").strip() or "Cash",
            category=self._categorizer.categorize(description),
            currency=self._config.default_currency,
            original_amount=original_amount,
            original_currency=original_currency,
        )
        self._repository.add_transactions(user_id, [transaction])
        logger.info("Added expense %s for user %s in %s", transaction.id, user_id, transaction.category)
        return transaction

    def list_expenses(self, user_id: str) -> list[Transaction]:
        return self._repository.list_transactions(user_id)

    def delete_expense(self, user_id: str, transaction_id: str) -> bool:
        return self._repository.delete_transaction(user_id, transaction_id)

    def clear_expenses(self, user_id: str) -> int:
        deleted = self._repository.clear_transactions(user_id)
        logger.info("Cleared %d expense(s) for user %s", deleted, user_id)
        return deleted

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------
    def analytics(self, user_id: str, currency: Optional[str] = None, top: int = 5) -> dict[str, object]:
        """Return every aggregate the dashboard renders in one payload."""

        target = normalise_code(currency) or self.display_currency(user_id)
        transactions = self._repository.list_transactions(user_id)
        category_totals = group_by_category(transactions)
        monthly_totals = group_by_month(transactions)
        insights = generate_insights(
            transactions,
            category_totals,
            monthly_totals,
            target_currency=target,
            default_currency=self._config.default_currency,
            converter=self._converter,
        )
        return {
            "categoryTotals": category_totals,
            "monthlyTotals": monthly_totals,
            "dailyTotals": group_by_day(transactions),
            "topCategories": [entry.to_dict() for entry in top_categories(category_totals, top)],
            "insights": insights.to_dict(),
            "budget": self.budget(user_id, target).to_dict(),
            "skippedTransactions": count_invalid_dates(transactions),
        }

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    def display_currency(self, user_id: str) -> str:
        stored = self._repository.get_setting(user_id, DISPLAY_CURRENCY_KEY)
        return stored or self._config.default_currency

    def set_display_currency(self, user_id: str, currency: str) -> str:
        code = normalise_code(currency)
        if not is_supported(code):
            raise TransactionValidationError(f"Unsupported currency: {code}")
        self._repository.set_setting(user_id, DISPLAY_CURRENCY_KEY, code)
        return code

    def budget(self, user_id: str, currency: Optional[str] = None) -> BudgetStatus:
        """Compare the stored budget with total spending in ``currency``."""

        target = normalise_code(currency) or self.display_currency(user_id)
        total_budget = parse_amount(self._repository.get_setting(user_id, BUDGET_KEY)) or 0.0
        enabled = self._repository.get_setting(user_id, BUDGET_ENABLED_KEY, "false") == "true"
        spent = calculate_total(
            self._repository.list_transactions(user_id),
            target,
            self._config.default_currency,
            self._converter,
        )
        return budget_status(total_budget, spent, enabled)

    def set_budget(self, user_id: str, amount: float, enabled: bool = True) -> BudgetStatus:
        if amount < 0:
            raise TransactionValidationError("Budget must not be negative")
        self._repository.set_setting(user_id, BUDGET_KEY, str(amount))
        self._repository.set_setting(user_id, BUDGET_ENABLED_KEY, "true" if enabled else "false")
        return self.budget(user_id)

    # ------------------------------------------------------------------
    # Finance bot
    # ------------------------------------------------------------------
    def ask_finance_bot(self, user_id: str, question: str) -> Optional[str]:
        transactions = self._repository.list_transactions(user_id)
        insights = generate_insights(
            transactions,
            group_by_category(transactions),
            group_by_month(transactions),
            target_currency=self.display_currency(user_id),
            default_currency=self._config.default_currency,
            converter=self._converter,
        )
        return self._tips_service.ask(question, insights)
