import pytest
from fastapi.testclient import TestClient

from expense_tracker.api import app


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("EXPENSE_TRACKER_DB_FILE", ":memory:")
    monkeypatch.setenv("EXPENSE_TRACKER_DEFAULT_CURRENCY", "INR")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with TestClient(app) as test_client:
        yield test_client


def add(client, user="alice", **fields):
    body = {"date": "2025-10-01", "description": "Zomato Lunch", "amount": 350, "mode": "UPI"}
    body.update(fields)
    return client.post("/api/expenses", json=body, headers={"X-User-Id": user})


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_manual_entry_is_categorised(client):
    response = add(client)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["expense"]["category"] == "Food & Dining"
    assert body["expense"]["date"] == "2025-10-01"
    assert body["totalExpenses"] == 1


@pytest.mark.parametrize(
    "fields",
    [
        {"amount": -5},
        {"amount": "abc"},
        {"description": "   "},
        {"date": "someday"},
        {"currency": "XYZ"},
    ],
)
def test_manual_entry_validation(client, fields):
    response = add(client, **fields)
    assert response.status_code == 400


def test_analytics_end_to_end(client):
    add(client, date="2025-10-01", description="Zomato Lunch", amount=350)
    add(client, date="2025-10-02", description="Uber", amount=220)
    add(client, date="2025-10-03", description="Uber", amount=180)
    add(client, date="2025-11-01", description="Rent", amount=15000)

    body = client.get("/api/analytics", params={"top": 2}, headers={"X-User-Id": "alice"}).json()

    assert body["categoryTotals"] == {
        "Food & Dining": 350,
        "Transportation": 400,
        "Rent & Housing": 15000,
    }
    assert body["monthlyTotals"] == {"2025-10": 750, "2025-11": 15000}
    assert body["topCategories"] == [
        {"category": "Rent & Housing", "amount": 15000},
        {"category": "Transportation", "amount": 400},
    ]
    assert body["insights"]["totalSpending"] == "15750.00"
    assert body["insights"]["monthComparison"]["trend"] == "up"
    assert body["skippedTransactions"] == 0


def test_foreign_currency_entry_keeps_original_amount(client):
    body = add(client, description="Amazon order", amount=10, currency="usd").json()["expense"]

    assert body["originalAmount"] == 10
    assert body["originalCurrency"] == "USD"
    assert body["currency"] == "INR"
    assert body["amount"] == pytest.approx(832.5)

    analytics = client.get(
        "/api/analytics", params={"currency": "INR"}, headers={"X-User-Id": "alice"}
    ).json()
    assert analytics["insights"]["totalSpending"] == "832.50"


def test_upload_csv(client):
    content = b"Date,Description,Amount,Mode\n2025-10-01,Zomato Lunch,350,UPI\n2025-10-02,Uber,oops,Cash\n"

    response = client.post(
        "/api/upload",
        files={"file": ("statement.csv", content, "text/csv")},
        headers={"X-User-Id": "alice"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["newExpenses"] == 1
    assert body["data"]["errors"] == ["Line 2: Invalid amount 'oops'"]
    assert body["data"]["analytics"]["categoryTotals"] == {"Food & Dining": 350}
    assert len(body["expenses"]) == 1


def test_upload_rejects_non_csv(client):
    response = client.post("/api/upload", files={"file": ("notes.txt", b"hello", "text/plain")})
    assert response.status_code == 400


def test_users_do_not_see_each_other(client):
    add(client, user="alice")
    add(client, user="bob", description="Uber", amount=100)

    alice = client.get("/api/expenses", headers={"X-User-Id": "alice"}).json()
    bob = client.get("/api/expenses", headers={"X-User-Id": "bob"}).json()

    assert [e["description"] for e in alice["expenses"]] == ["Zomato Lunch"]
    assert [e["description"] for e in bob["expenses"]] == ["Uber"]


def test_delete_and_clear(client):
    expense_id = add(client).json()["expense"]["id"]
    add(client, description="Uber")

    assert client.delete("/api/expenses/missing", headers={"X-User-Id": "alice"}).status_code == 404
    response = client.delete(f"/api/expenses/{expense_id}", headers={"X-User-Id": "alice"})
    assert response.json()["totalExpenses"] == 1

    cleared = client.delete("/api/expenses", headers={"X-User-Id": "alice"}).json()
    assert cleared["message"] == "Cleared 1 expenses"
    assert client.get("/api/expenses", headers={"X-User-Id": "alice"}).json()["totalExpenses"] == 0


def test_display_currency_settings(client):
    assert client.get("/api/settings/display-currency").json() == {"display_currency": "INR"}

    response = client.put("/api/settings/display-currency", params={"currency": "usd"})
    assert response.json() == {"display_currency": "USD"}
    assert client.get("/api/settings/display-currency").json() == {"display_currency": "USD"}

    assert client.put("/api/settings/display-currency", params={"currency": "XYZ"}).status_code == 400


def test_budget_settings(client):
    add(client, user="anonymous", amount=600)

    status = client.put("/api/settings/budget", json={"amount": 500, "enabled": True}).json()

    assert status["spent"] == 600
    assert status["remaining"] == -100
    assert status["overBudget"] is True
    assert client.put("/api/settings/budget", json={"amount": -1}).status_code == 400


def test_finance_bot_unavailable_without_key(client):
    response = client.post("/api/finance-bot", json={"question": "How can I save?"})
    assert response.status_code == 503
