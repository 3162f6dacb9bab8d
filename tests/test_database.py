from datetime import date

import pytest

from expense_tracker.database import SQLiteRepository
from expense_tracker.models import Transaction


@pytest.fixture
def repository():
    repo = SQLiteRepository(":memory:")
    repo.initialise_schema()
    yield repo
    repo.close()


def test_transactions_round_trip_in_insertion_order(repository):
    first = Transaction(date=date(2025, 10, 2), description="Uber", amount=220, category="Transportation")
    second = Transaction(
        date=date(2025, 10, 1),
        description="Amazon order",
        amount=832.5,
        category="Shopping",
        currency="INR",
        original_amount=10,
        original_currency="USD",
    )

    assert repository.add_transactions("alice", [first, second]) == 2
    stored = repository.list_transactions("alice")

    assert [tx.id for tx in stored] == [first.id, second.id]
    assert stored[0].date == date(2025, 10, 2)
    assert stored[0].amount == 220
    assert stored[1].original_amount == 10
    assert stored[1].original_currency == "USD"
    assert stored[1].effective_amount() == 10


def test_raw_values_survive_storage(repository):
    tx = Transaction(date="someday", description="Mystery", amount="n/a")
    repository.add_transactions("alice", [tx])

    (stored,) = repository.list_transactions("alice")

    assert stored.date == "someday"
    assert stored.amount == "n/a"
    assert stored.effective_amount() == 0.0


def test_users_are_isolated(repository):
    repository.add_transactions("alice", [Transaction(date=date(2025, 1, 1), description="a", amount=1)])
    repository.add_transactions("bob", [Transaction(date=date(2025, 1, 1), description="b", amount=2)])

    assert [tx.description for tx in repository.list_transactions("alice")] == ["a"]
    assert [tx.description for tx in repository.list_transactions("bob")] == ["b"]
    assert repository.clear_transactions("alice") == 1
    assert len(repository.list_transactions("bob")) == 1


def test_delete_transaction(repository):
    tx = Transaction(date=date(2025, 1, 1), description="a", amount=1)
    repository.add_transactions("alice", [tx])

    assert not repository.delete_transaction("bob", tx.id)
    assert repository.delete_transaction("alice", tx.id)
    assert not repository.delete_transaction("alice", tx.id)
    assert repository.list_transactions("alice") == []


def test_settings_are_per_user(repository):
    repository.set_setting("alice", "display_currency", "USD")

    assert repository.get_setting("alice", "display_currency") == "USD"
    assert repository.get_setting("bob", "display_currency", "INR") == "INR"
