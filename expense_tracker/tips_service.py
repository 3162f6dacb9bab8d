"""Finance tips chatbot backed by the Gemini ``generateContent`` API."""
from __future__ import annotations

import logging
from typing import Optional

import requests

from .config import AppConfig
from .currency import format_amount
from .models import InsightsSummary

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are FinBot, a helpful and friendly AI finance assistant. Your expertise includes:
- Personal budgeting and expense tracking
- Savings strategies and financial planning
- Debt management and credit improvement
- Financial education and literacy

Keep responses concise (under 200 words when possible), use bullet points for
multiple tips, and reference the user's expense tracking data when it is
provided. Always mention that advice is for educational purposes and recommend
consulting a financial advisor for complex situations."""

GENERATION_CONFIG = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 1024,
}


class FinanceTipsService:
    """Ask the chatbot for finance tips, optionally grounded in the user's data."""

    def __init__(self, config: AppConfig, session: Optional[requests.Session] = None) -> None:
        self._config = config
        self._session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self._config.gemini_api_key)

    def ask(self, question: str, insights: Optional[InsightsSummary] = None) -> Optional[str]:
        """Return the chatbot's answer to ``question``.

        The function gracefully degrades to ``None`` when the API key is not
        configured or when the response carries no text.  HTTP failures are
        raised so the API layer can report the service as unavailable.
        """

        if not self.configured:
            return None

        payload = {
            "contents": [{"parts": [{"text": build_prompt(question, insights)}]}],
            "generationConfig": GENERATION_CONFIG,
        }
        response = self._session.post(
            self._config.gemini_endpoint,
            params={"key": self._config.gemini_api_key},
            json=payload,
            timeout=30,
        )
        response.raise_for_status()
        body = response.json()

        candidates = body.get("candidates") or []
        if not candidates:
            logger.warning("Finance bot returned no candidates")
            return None
        parts = candidates[0].get("content", {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts).strip()
        return text or None


def build_prompt(question: str, insights: Optional[InsightsSummary] = None) -> str:
    """Combine the system prompt, a spending summary and the user's question."""

    sections = [SYSTEM_PROMPT]
    if insights is not None and insights.transaction_count:
        lines = [
            "User spending summary:",
            f"- Total spending: {format_amount(insights.total_spending, insights.total_currency)}",
            f"- Transactions: {insights.transaction_count}",
            f"- Month over month: {insights.month_comparison.message}",
        ]
        lines.extend(f"- {insight.message}" for insight in insights.category_insights)
        sections.append("\n".join(lines))
    sections.append(f"User Question: {question.strip()}")
    sections.append("Please provide a helpful finance response:")
    return "\n\n".join(sections)
