from datetime import date

from expense_tracker.categorizer import Categorizer
from expense_tracker.importers import CsvExpenseImporter


def make_importer(currency="INR"):
    return CsvExpenseImporter(Categorizer(), currency)


def test_import_with_header_row_rejects_bad_lines():
    content = (
        "Date,Description,Amount,Mode\n"
        "2025-10-01,Zomato Lunch,350,UPI\n"
        "2025-10-02,Uber,₹220,Cash\n"
        "2025-10-03,,100,Cash\n"
        "2025-10-04,Movie night,abc,Card\n"
        "2025-10-05,Netflix,-5,Card\n"
    ).encode("utf-8")

    result = make_importer().load(content)

    assert result.line_count == 5
    assert [tx.description for tx in result.transactions] == ["Zomato Lunch", "Uber"]
    assert result.transactions[0].category == "Food & Dining"
    assert result.transactions[0].date == date(2025, 10, 1)
    assert result.transactions[0].mode == "UPI"
    assert result.transactions[1].amount == 220
    assert result.transactions[1].category == "Transportation"
    assert result.errors == [
        "Line 3: Missing required fields",
        "Line 4: Invalid amount 'abc'",
        "Line 5: Invalid amount '-5'",
    ]


def test_import_without_header_and_default_mode(tmp_path):
    path = tmp_path / "statement.csv"
    path.write_text("2025-11-01,Rent November,15000,Bank\n2025-11-02,Bus pass,40,\n", encoding="utf-8")

    result = make_importer("USD").load(path)

    assert result.errors == []
    assert [tx.category for tx in result.transactions] == ["Rent & Housing", "Transportation"]
    assert result.transactions[1].mode == "Unknown"
    assert all(tx.currency == "USD" for tx in result.transactions)


def test_unparsable_date_is_kept_raw():
    result = make_importer().load(b"someday,Coffee,120,Cash\n")

    assert result.transactions[0].date == "someday"


def test_import_empty_file():
    result = make_importer().load(b"")

    assert result.transactions == []
    assert result.errors == []
    assert result.line_count == 0
