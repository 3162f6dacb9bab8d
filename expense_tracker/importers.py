"""CSV importers for uploaded expense statements."""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterator, Union

import pandas as pd

from .categorizer import Categorizer
from .currency import DEFAULT_CURRENCY
from .models import Transaction, parse_amount, parse_date

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["Date", "Description", "Amount", "Mode"]

CsvSource = Union[str, Path, bytes, BinaryIO]


@dataclass(slots=True)
class ImportResult:
    """Outcome of importing one statement.

    ``errors`` holds one human-readable message per rejected line; accepted
    rows are already categorised.
    """

    transactions: list[Transaction] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    line_count: int = 0


class CsvExpenseImporter:
    """Load and categorise expenses from a ``Date,Description,Amount,Mode`` CSV.

    The header row is optional.  Rows missing a date, description or amount,
    and rows whose amount is not a positive number, are rejected with a
    message instead of aborting the whole import.
    """

    def __init__(self, categorizer: Categorizer, currency: str = DEFAULT_CURRENCY) -> None:
        self.categorizer = categorizer
        self.currency = currency

    def load(self, source: CsvSource) -> ImportResult:
        dataframe = self._read_csv(source)
        result = ImportResult()
        for line_number, row in self._iter_rows(dataframe):
            result.line_count = line_number
            raw_date = _clean_string(row.get("Date"))
            description = _clean_string(row.get("Description"))
            raw_amount = _clean_string(row.get("Amount"))

            if not raw_date or not description or not raw_amount:
                result.errors.append(f"Line {line_number}: Missing required fields")
                continue

            amount = parse_amount(raw_amount)
            if amount is None or amount <= 0:
                result.errors.append(f"Line {line_number}: Invalid amount '{raw_amount}'")
                continue

            result.transactions.append(
                Transaction(
                    date=parse_date(raw_date) or raw_date,
                    description=description,
                    amount=amount,
                    mode=_clean_string(row.get("Mode")) or "Unknown",
                    category=self.categorizer.categorize(description),
                    currency=self.currency,
                )
            )

        if result.errors:
            logger.warning(
                "Rejected %d of %d CSV line(s); first error: %s",
                len(result.errors),
                result.line_count,
                result.errors[0],
            )
        logger.info("Imported %d expense(s) from %d line(s)", len(result.transactions), result.line_count)
        return result

    def _read_csv(self, source: CsvSource) -> pd.DataFrame:
        """Read ``source`` into a string-typed :class:`~pandas.DataFrame`."""

        if isinstance(source, bytes):
            source = io.BytesIO(source)
        try:
            return pd.read_csv(
                source,
                header=None,
                index_col=False,
                names=CSV_COLUMNS,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                skipinitialspace=True,
                on_bad_lines="warn",
            )
        except pd.errors.EmptyDataError:
            return pd.DataFrame(columns=CSV_COLUMNS)

    @staticmethod
    def _iter_rows(dataframe: pd.DataFrame) -> Iterator[tuple[int, pd.Series]]:
        """Yield ``(line_number, row)`` pairs, skipping a leading header row."""

        line_number = 0
        for position, (_, row) in enumerate(dataframe.iterrows()):
            if position == 0 and _is_header(row):
                continue
            line_number += 1
            yield line_number, row


# ---------------------------------------------------------------------------
# Helper utilities
# ---------------------------------------------------------------------------

def _clean_string(value: object) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value).strip()


def _is_header(row: pd.Series) -> bool:
    cells = [_clean_string(row.get(column)).lower() for column in CSV_COLUMNS[:3]]
    return cells == [column.lower() for column in CSV_COLUMNS[:3]]
