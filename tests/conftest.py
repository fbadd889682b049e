"""
Shared fixtures.

No test touches the network or the real data directory: storage is
in-memory (or tmp_path) and the Gemini model is replaced by FakeModel.
"""

import asyncio
from types import SimpleNamespace

import pytest

from ngo_ledger.config import get_settings
from ngo_ledger.models.ledger import (
    BudgetLine,
    ChartOfAccountItem,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from ngo_ledger.services.storage import InMemoryStorage


class FakeModel:
    """Stands in for genai.GenerativeModel."""

    def __init__(self, text="", error=None, delay=None):
        self.text = text
        self.error = error
        self.delay = delay
        self.prompts = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep developer environment variables out of the tests."""
    for name in ("GEMINI_API_KEY", "STORAGE_DATA_DIR", "LOG_LEVEL", "UNDO_WINDOW_SECONDS", "CURRENCY_CODE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def chart():
    return [
        ChartOfAccountItem(code="1", category="Income", is_header=True),
        ChartOfAccountItem(code="1.1", category="Grants"),
        ChartOfAccountItem(code="2", category="Expenditure", is_header=True),
        ChartOfAccountItem(code="2.1 a", category="Salaries"),
        ChartOfAccountItem(code="2.1 b", category="Rent"),
        ChartOfAccountItem(code="3.2", category="Travel"),
    ]


@pytest.fixture
def budget_lines():
    return [
        BudgetLine(code="2.1 a", monthly_budget="1000"),
        BudgetLine(code="2.1 b", monthly_budget="250"),
    ]


@pytest.fixture
def make_tx():
    """Build a Transaction with sensible defaults."""
    counter = {"n": 0}

    def _make(amount, tx_type=TransactionType.EXPENSE, **overrides):
        counter["n"] += 1
        fields = {
            "id": f"t{counter['n']}",
            "date": "2024-01-15",
            "voucher_number": f"V{counter['n']}",
            "description": "Test transaction",
            "payee_or_payer": "Test payee",
            "amount": amount,
            "type": tx_type,
            "account_code": "2.1 a",
            "status": TransactionStatus.PENDING,
        }
        fields.update(overrides)
        return Transaction(**fields)

    return _make


@pytest.fixture
def fake_model():
    """Factory for FakeModel instances."""
    return FakeModel
