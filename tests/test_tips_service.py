from pathlib import Path

import pytest
import requests

from expense_tracker.config import AppConfig
from expense_tracker.insights import generate_insights
from expense_tracker.models import Transaction
from expense_tracker.tips_service import FinanceTipsService, build_prompt


def make_config(api_key="test-key"):
    return AppConfig(
        project_root=Path("."),
        database_file=":memory:",
        default_currency="INR",
        cors_origins=(),
        max_upload_bytes=1024,
        log_level="INFO",
        gemini_api_key=api_key,
        gemini_endpoint="https://example.invalid/generateContent",
    )


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        return self.response


def test_ask_without_api_key_returns_none():
    session = FakeSession(FakeResponse({}))
    service = FinanceTipsService(make_config(api_key=None), session=session)

    assert service.ask("How do I save more?") is None
    assert session.calls == []


def test_ask_returns_candidate_text():
    payload = {"candidates": [{"content": {"parts": [{"text": "Cook at home "}, {"text": "more."}]}}]}
    session = FakeSession(FakeResponse(payload))
    service = FinanceTipsService(make_config(), session=session)

    assert service.ask("How do I spend less on food?") == "Cook at home more."
    url, kwargs = session.calls[0]
    assert url == "https://example.invalid/generateContent"
    assert kwargs["params"] == {"key": "test-key"}
    assert "How do I spend less on food?" in kwargs["json"]["contents"][0]["parts"][0]["text"]


def test_ask_without_candidates_returns_none():
    service = FinanceTipsService(make_config(), session=FakeSession(FakeResponse({"candidates": []})))
    assert service.ask("Hi") is None


def test_ask_raises_on_http_error():
    service = FinanceTipsService(make_config(), session=FakeSession(FakeResponse({}, status_code=500)))
    with pytest.raises(requests.HTTPError):
        service.ask("Hi")


def test_build_prompt_includes_spending_summary():
    transactions = [Transaction(date="2025-10-01", description="Uber", amount=220, category="Transportation")]
    insights = generate_insights(transactions, {"Transportation": 220.0}, {"2025-10": 220.0})

    prompt = build_prompt("  Any tips?  ", insights)

    assert "Total spending: ₹220.00" in prompt
    assert "Transportation is your biggest expense" in prompt
    assert prompt.rstrip().endswith("Please provide a helpful finance response:")
    assert "User Question: Any tips?" in prompt
