"""SQLite persistence layer for the expense tracker backend.

Expenses and settings live in two tables.  Every row is keyed by the owning
user's identity, so callers always work on their own collection.  A single
connection is shared between request threads and guarded by a lock: writers
never interleave and readers always see a complete snapshot.
"""
from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from typing import Iterable, Optional

from .models import Transaction, parse_date


class SQLiteRepository:
    """Encapsulates all SQLite access for the application."""

    def __init__(self, database_path: Path | str) -> None:
        self._database_path = str(database_path)
        self._lock = threading.Lock()
        self._connection = sqlite3.connect(self._database_path, check_same_thread=False)
        self._connection.row_factory = sqlite3.Row

    def close(self) -> None:
        """Close the underlying SQLite connection."""

        with self._lock:
            self._connection.close()

    # ------------------------------------------------------------------
    # Schema management
    # ------------------------------------------------------------------
    def initialise_schema(self) -> None:
        """Create all tables required by the application if they do not exist."""

        with self._lock:
            self._connection.executescript(
                """
                CREATE TABLE IF NOT EXISTS expenses (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    id TEXT NOT NULL,
                    date TEXT,
                    description TEXT NOT NULL,
                    amount TEXT,
                    mode TEXT NOT NULL,
                    category TEXT NOT NULL,
                    currency TEXT,
                    original_amount TEXT,
                    original_currency TEXT,
                    UNIQUE(user_id, id)
                );

                CREATE TABLE IF NOT EXISTS settings (
                    user_id TEXT NOT NULL,
                    key TEXT NOT NULL,
                    value TEXT NOT NULL,
                    PRIMARY KEY (user_id, key)
                );
                """
            )
            self._connection.commit()

    # ------------------------------------------------------------------
    # Expense persistence
    # ------------------------------------------------------------------
    def add_transactions(self, user_id: str, transactions: Iterable[Transaction]) -> int:
        """Append ``transactions`` to the user's collection.

        Returns the number of rows written.  Re-adding an existing id replaces
        the stored row in place.
        """

        rows = [_transaction_to_row(user_id, tx) for tx in transactions]
        with self._lock:
            self._connection.executemany(
                """
                INSERT INTO expenses (
                    user_id, id, date, description, amount, mode, category,
                    currency, original_amount, original_currency
                ) VALUES (
                    :user_id, :id, :date, :description, :amount, :mode, :category,
                    :currency, :original_amount, :original_currency
                )
                ON CONFLICT(user_id, id) DO UPDATE SET
                    date=excluded.date,
                    description=excluded.description,
                    amount=excluded.amount,
                    mode=excluded.mode,
                    category=excluded.category,
                    currency=excluded.currency,
                    original_amount=excluded.original_amount,
                    original_currency=excluded.original_currency
                ;
                """,
                rows,
            )
            self._connection.commit()
        return len(rows)

    def list_transactions(self, user_id: str) -> list[Transaction]:
        """Return the user's expenses in the order they were added."""

        with self._lock:
            rows = self._connection.execute(
                "SELECT * FROM expenses WHERE user_id = ? ORDER BY seq",
                (user_id,),
            ).fetchall()
        return [_row_to_transaction(row) for row in rows]

    def delete_transaction(self, user_id: str, transaction_id: str) -> bool:
        with self._lock:
            cursor = self._connection.execute(
                "DELETE FROM expenses WHERE user_id = ? AND id = ?",
                (user_id, transaction_id),
            )
            self._connection.commit()
        return cursor.rowcount > 0

    def clear_transactions(self, user_id: str) -> int:
        with self._lock:
            cursor = self._connection.execute(
                "DELETE FROM expenses WHERE user_id = ?",
                (user_id,),
            )
            self._connection.commit()
        return cursor.rowcount

    # ------------------------------------------------------------------
    # Settings helpers
    # ------------------------------------------------------------------
    def set_setting(self, user_id: str, key: str, value: str) -> None:
        with self._lock:
            self._connection.execute(
                "INSERT OR REPLACE INTO settings (user_id, key, value) VALUES (?, ?, ?)",
                (user_id, key, value),
            )
            self._connection.commit()

    def get_setting(self, user_id: str, key: str, default: Optional[str] = None) -> Optional[str]:
        with self._lock:
            row = self._connection.execute(
                "SELECT value FROM settings WHERE user_id = ? AND key = ?",
                (user_id, key),
            ).fetchone()
        if row is None:
            return default
        return str(row["value"])


def _transaction_to_row(user_id: str, tx: Transaction) -> dict[str, object]:
    return {
        "user_id": user_id,
        "id": tx.id,
        "date": tx.date if tx.date is None or isinstance(tx.date, str) else tx.date.isoformat(),
        "description": tx.description,
        "amount": _to_text(tx.amount),
        "mode": tx.mode,
        "category": tx.category,
        "currency": tx.currency,
        "original_amount": _to_text(tx.original_amount),
        "original_currency": tx.original_currency,
    }


def _row_to_transaction(row: sqlite3.Row) -> Transaction:
    return Transaction(
        id=row["id"],
        date=parse_date(row["date"]) or row["date"],
        description=row["description"],
        amount=_to_number(row["amount"]),
        mode=row["mode"],
        category=row["category"],
        currency=row["currency"],
        original_amount=_to_number(row["original_amount"]),
        original_currency=row["original_currency"],
    )


def _to_text(value: object) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _to_number(value: Optional[str]) -> float | str | None:
    # Amounts are stored as text so malformed input survives a round trip
    # unchanged; numeric text comes back as a float.
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return value
