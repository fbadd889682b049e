"""
AI Agents for NGO Ledger

DESIGN DECISION: The language model is an optional helper, never a
dependency. Every agent call:
1. Returns its documented fallback when no API key is configured
2. Returns its documented fallback on any error or timeout
3. Never raises to the caller

CRITICAL BOUNDARIES:

1. CATEGORIZATION AGENT:
   - CAN: Suggest an account code for a description
   - CANNOT: Assign the code (the user confirms in the form)
   - CANNOT: Invent codes (suggestions outside the chart are dropped)

2. STATEMENT PARSING AGENT:
   - CAN: Turn raw statement text into candidate bank lines
   - CANNOT: Touch the ledger (lines only enter a reconciliation session)

3. VARIANCE ANALYSIS AGENT:
   - CAN: Summarize variance rows it is given
   - CANNOT: Change any figure

The LLM is a TRANSLATOR, not an ORACLE.
"""

import asyncio
import json
import time
from typing import Any, Iterable, Optional

import google.generativeai as genai
import structlog
from pydantic import BaseModel, Field, ValidationError

from ngo_ledger.config import GeminiSettings, get_settings
from ngo_ledger.models.ledger import BankTransaction, ChartOfAccountItem
from ngo_ledger.models.reports import VarianceRow

logger = structlog.get_logger(__name__)

UNKNOWN_SENTINEL = "UNKNOWN"

ANALYSIS_UNAVAILABLE = "AI analysis unavailable (Missing API Key)."
ANALYSIS_FAILED = "Error generating analysis."
ANALYSIS_EMPTY = "No analysis generated."


class AccountSuggestion(BaseModel):
    """AI's suggestion for a transaction's account code."""

    code: Optional[str] = None
    reasoning: str = Field(default="")

    @property
    def has_suggestion(self) -> bool:
        return self.code is not None


class _GeminiAgent:
    """
    Shared Gemini plumbing.

    `model` can be injected (tests, alternative clients); it must offer
    `async generate_content_async(prompt)` returning an object with `.text`.
    """

    generation_config: dict[str, Any] = {}

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        model: Any = None,
    ):
        self._settings = settings or get_settings().gemini
        self._model = model
        if self._model is None and self._settings.is_configured:
            self._configure_genai()

    @property
    def is_available(self) -> bool:
        return self._model is not None

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)
        self._model = genai.GenerativeModel(
            model_name=self._settings.model_name,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
                **self.generation_config,
            }
        )

    async def _generate(self, prompt: str) -> str:
        """Single model call bounded by the configured timeout."""
        response = await asyncio.wait_for(
            self._model.generate_content_async(prompt),
            timeout=self._settings.request_timeout_seconds,
        )
        return (response.text or "").strip()


class CategorizationAgent(_GeminiAgent):
    """
    Suggests an account code for a free-text description.

    Fallback: AccountSuggestion(code=None).
    """

    async def suggest_account_code(
        self,
        description: str,
        accounts: Iterable[ChartOfAccountItem],
    ) -> AccountSuggestion:
        postable = [acc for acc in accounts if not acc.is_header]
        if not description or not description.strip():
            return AccountSuggestion(reasoning="No description to categorize")
        if not self.is_available:
            logger.warning("categorization_skipped", reason="gemini_not_configured")
            return AccountSuggestion(reasoning="AI categorization unavailable")

        codes = "\n".join(f"{acc.code}: {acc.category}" for acc in postable)
        prompt = f"""You are an accounting assistant. Given the following Chart of Accounts:
{codes}

And the following transaction description: "{description}"

Identify the most likely account code. Return ONLY the code as a string (e.g., "1.6.5 h"). If unsure, return "{UNKNOWN_SENTINEL}"."""

        try:
            text = await self._generate(prompt)
        except Exception as e:
            logger.warning("categorization_failed", error=str(e), error_type=type(e).__name__)
            return AccountSuggestion(reasoning="AI categorization failed")

        return self._interpret(text, postable)

    def _interpret(self, text: str, postable: list[ChartOfAccountItem]) -> AccountSuggestion:
        answer = text.strip().strip('"').strip("'").strip()
        if not answer or answer.upper() == UNKNOWN_SENTINEL:
            return AccountSuggestion(reasoning="Model was unsure")

        # Models sometimes echo "code: category"
        code = answer.split(":")[0].strip()
        if any(acc.code == code for acc in postable):
            return AccountSuggestion(code=code, reasoning="Suggested by model")

        logger.info("categorization_unknown_code", suggested=code)
        return AccountSuggestion(reasoning=f"Suggested code {code!r} is not in the chart of accounts")


class StatementParsingAgent(_GeminiAgent):
    """
    Turns raw statement text into bank lines.

    Fallback: empty list (the caller then uses the naive CSV parser).
    """

    generation_config = {"response_mime_type": "application/json"}

    async def parse_statement(self, raw_text: str) -> list[BankTransaction]:
        if not raw_text or not raw_text.strip():
            return []
        if not self.is_available:
            logger.warning("statement_parsing_skipped", reason="gemini_not_configured")
            return []

        prompt = f"""Parse the following raw text from a bank statement into a JSON array of objects.
Each object should have: 'date' (YYYY-MM-DD), 'description', 'amount' (number, negative for debit, positive for credit).

Raw Text:
{raw_text[:self._settings.max_statement_chars]}"""

        try:
            text = await self._generate(prompt)
            data = json.loads(text or "[]")
        except Exception as e:
            logger.warning("statement_parsing_failed", error=str(e), error_type=type(e).__name__)
            return []

        return self._to_lines(data)

    def _to_lines(self, data: Any) -> list[BankTransaction]:
        if not isinstance(data, list):
            logger.warning("statement_parsing_unexpected_shape", found=type(data).__name__)
            return []

        stamp = int(time.time() * 1000)
        lines = []
        for i, item in enumerate(data):
            if not isinstance(item, dict):
                continue
            try:
                lines.append(BankTransaction(
                    id=f"bank-imp-{i}-{stamp}",
                    date=str(item.get("date") or ""),
                    description=str(item.get("description") or ""),
                    amount=item.get("amount", 0),
                ))
            except (ValidationError, ValueError) as e:
                logger.info("statement_line_skipped", index=i, error=str(e))
        return lines


class VarianceAnalysisAgent(_GeminiAgent):
    """Writes a short narrative over the largest budget variances."""

    async def analyze_variance(self, rows: Iterable[VarianceRow], limit: int = 10) -> str:
        if not self.is_available:
            return ANALYSIS_UNAVAILABLE

        summary = [
            {
                "code": row.code,
                "category": row.category,
                "actual": str(row.actual),
                "budget": str(row.budget),
                "variance": str(row.variance),
                "variancePercent": str(row.variance_percent),
            }
            for row in list(rows)[:limit]
        ]
        prompt = f"""Analyze the following financial variance data for an NGO.
Identify top 3 over-budget areas and provide a brief executive summary of financial health.
Data: {json.dumps(summary)}"""

        try:
            text = await self._generate(prompt)
        except Exception as e:
            logger.warning("variance_analysis_failed", error=str(e), error_type=type(e).__name__)
            return ANALYSIS_FAILED
        return text or ANALYSIS_EMPTY
