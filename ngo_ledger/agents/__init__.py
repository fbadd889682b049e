"""AI Agents package."""

from ngo_ledger.agents.ai_agents import (
    AccountSuggestion,
    CategorizationAgent,
    StatementParsingAgent,
    VarianceAnalysisAgent,
)

__all__ = [
    "AccountSuggestion",
    "CategorizationAgent",
    "StatementParsingAgent",
    "VarianceAnalysisAgent",
]
