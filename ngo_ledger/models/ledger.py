"""
Core Data Models for NGO Ledger

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Serialize to the persisted JSON layout (camelCase keys)
4. Keep money exact (Decimal, two places)

DESIGN DECISION: A transaction stores a non-negative magnitude and a type.
Direction is never stored; it is derived from the type by the engine's
classification tables.
"""

import re
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from ngo_ledger.models.ids import new_transaction_id, normalize_id
from ngo_ledger.models.money import to_money


ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def coerce_iso_date(value: Any) -> str:
    """
    Accept a date/datetime or a zero-padded ISO string.

    Dates stay strings so lexicographic order equals chronological order.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        raise ValueError(f"Invalid date: {value!r}")
    text = value.strip()
    if not ISO_DATE_PATTERN.match(text):
        raise ValueError(f"Date must be YYYY-MM-DD, got {value!r}")
    # Reject impossible calendar dates such as 2024-02-30
    date.fromisoformat(text)
    return text


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    Transaction kinds.

    Every aggregation branches on this value. Which kinds count as
    inflow, expense, receivable... is decided in one place:
    ngo_ledger.engine.classification.
    """
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    ADV = "ADV"          # Staff advance
    TRF = "TRF"          # Internal transfer
    CONT = "CONT"        # Contribution
    OPENING = "OPENING"  # Opening balance
    NB = "NB"            # Non-billable
    WHT = "WHT"          # Withholding tax
    ITAX = "ITAX"        # Income tax
    SSEC = "SSEC"        # Social security
    PCA = "PCA"          # Petty-cash advance


class TransactionStatus(str, Enum):
    """
    Transaction settlement status.

    CRITICAL: RECONCILED is only reached through the reconciliation
    matcher and is never left in normal flow.
    """
    PENDING = "PENDING"
    CLEARED = "CLEARED"
    RECONCILED = "RECONCILED"


# Maximum lengths of free-text transaction fields
TEXT_FIELD_LIMITS = {
    "voucher_number": 100,
    "cheque_number": 100,
    "activity": 200,
    "description": 500,
    "payee_or_payer": 200,
}


def clip_text(value: Optional[str], limit: int) -> Optional[str]:
    """Cut text down to `limit` characters; None passes through."""
    if value is None or len(value) <= limit:
        return value
    return value[:limit]


# =============================================================================
# CORE LEDGER MODELS
# =============================================================================

class Transaction(BaseModel):
    """
    A single financial event.

    Field names are snake_case in Python and camelCase in the persisted
    JSON blob; both are accepted on input.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    id: str = Field(
        default_factory=new_transaction_id,
        description="Stable unique identifier"
    )
    date: str = Field(
        ...,
        description="Transaction date, YYYY-MM-DD"
    )
    voucher_number: str = Field(
        default="",
        alias="voucherNumber",
        max_length=TEXT_FIELD_LIMITS["voucher_number"],
    )
    cheque_number: Optional[str] = Field(
        default=None,
        alias="chequeNumber",
        max_length=TEXT_FIELD_LIMITS["cheque_number"],
    )
    activity: Optional[str] = Field(
        default=None,
        max_length=TEXT_FIELD_LIMITS["activity"],
    )
    description: str = Field(
        default="",
        max_length=TEXT_FIELD_LIMITS["description"],
    )
    payee_or_payer: str = Field(
        default="",
        alias="payeeOrPayer",
        max_length=TEXT_FIELD_LIMITS["payee_or_payer"],
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Non-negative magnitude; direction comes from type"
    )
    type: TransactionType
    account_code: str = Field(
        ...,
        alias="accountCode",
        description="Chart of accounts code (may be orphaned)"
    )
    status: TransactionStatus = Field(
        default=TransactionStatus.PENDING,
    )

    @field_validator('id', mode='before')
    @classmethod
    def normalize_transaction_id(cls, v: Any) -> str:
        return normalize_id(v)

    @field_validator('date', mode='before')
    @classmethod
    def validate_date(cls, v: Any) -> str:
        return coerce_iso_date(v)

    @field_validator('amount', mode='before')
    @classmethod
    def quantize_amount(cls, v: Any) -> Decimal:
        return to_money(v)

    def to_storage_dict(self) -> dict:
        """Row as written to the persisted transaction blob."""
        return self.model_dump(mode="json", by_alias=True)


class TransactionDraft(BaseModel):
    """
    Transaction as entered in a form.

    CRITICAL: This is PROPOSED data, NOT a ledger entry.
    It only becomes a Transaction after TransactionValidator accepts it.
    All fields are optional because the user may not have filled them yet.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    date: Optional[str] = None
    voucher_number: Optional[str] = Field(default=None, alias="voucherNumber")
    cheque_number: Optional[str] = Field(default=None, alias="chequeNumber")
    activity: Optional[str] = None
    description: Optional[str] = None
    payee_or_payer: Optional[str] = Field(default=None, alias="payeeOrPayer")
    amount: Optional[Decimal] = None
    type: TransactionType = TransactionType.EXPENSE
    account_code: Optional[str] = Field(default=None, alias="accountCode")
    status: TransactionStatus = TransactionStatus.PENDING

    @classmethod
    def from_transaction(cls, tx: Transaction) -> "TransactionDraft":
        """Pre-fill a form from an existing transaction (edit flow)."""
        return cls(
            date=tx.date,
            voucher_number=tx.voucher_number,
            cheque_number=tx.cheque_number,
            activity=tx.activity,
            description=tx.description,
            payee_or_payer=tx.payee_or_payer,
            amount=tx.amount,
            type=tx.type,
            account_code=tx.account_code,
            status=tx.status,
        )


class ChartOfAccountItem(BaseModel):
    """
    One row of the chart of accounts.

    Header rows are non-postable group titles: they appear in report
    layout but never carry money.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    code: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Unique account code, e.g. '1.6.5 h'"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name"
    )
    is_header: bool = Field(
        default=False,
        alias="isHeader",
    )

    @field_validator('is_header', mode='before')
    @classmethod
    def missing_header_flag(cls, v: Any) -> bool:
        # Older blobs store null for postable rows
        return bool(v) if v is not None else False

    def to_storage_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class BudgetLine(BaseModel):
    """Monthly budget for one (non-header) account code."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    code: str = Field(..., min_length=1, max_length=50)
    monthly_budget: Decimal = Field(
        ...,
        ge=0,
        alias="monthlyBudget",
    )

    @field_validator('monthly_budget', mode='before')
    @classmethod
    def quantize_budget(cls, v: Any) -> Decimal:
        return to_money(v)

    def to_storage_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class BankTransaction(BaseModel):
    """
    A bank statement line.

    Ephemeral: lives only in a reconciliation session's working set.
    The amount is signed: positive = deposit, negative = withdrawal.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    id: str
    date: str = ""
    description: str = ""
    amount: Decimal
    matched_transaction_id: Optional[str] = Field(
        default=None,
        alias="matchedTransactionId",
    )

    @field_validator('id', mode='before')
    @classmethod
    def normalize_line_id(cls, v: Any) -> str:
        return normalize_id(v)

    @field_validator('amount', mode='before')
    @classmethod
    def quantize_amount(cls, v: Any) -> Decimal:
        return to_money(v)

    @property
    def magnitude(self) -> Decimal:
        return abs(self.amount)


class DateRange(BaseModel):
    """Inclusive report period."""

    start: str
    end: str

    @field_validator('start', 'end', mode='before')
    @classmethod
    def validate_bounds(cls, v: Any) -> str:
        return coerce_iso_date(v)

    @model_validator(mode='after')
    def validate_order(self) -> 'DateRange':
        if self.end < self.start:
            raise ValueError("Date range end cannot be before start")
        return self

    def contains(self, iso_date: str) -> bool:
        return self.start <= iso_date <= self.end

    @classmethod
    def current_month(cls, today: Optional[date] = None) -> "DateRange":
        """First of the month through today (the report page default)."""
        today = today or date.today()
        return cls(start=today.replace(day=1), end=today)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'duplicate')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Outcome of validating one piece of user input."""

    validated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [i.message for i in self.issues if i.severity == "warning"]
