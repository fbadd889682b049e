"""
User Input Validation

DESIGN DECISION: Input from forms is checked BEFORE any store mutation.
A rejected input never changes state; the caller shows the issues inline.

Severity levels:
- error:   blocks the save
- warning: saved, but shown to the user (e.g. orphaned account code)
- info:    something will be filled in automatically

IMPORTANT: Validation NEVER silently fixes issues other than the ones it
reports at info level.
"""

import time
from typing import Iterable, Optional

from ngo_ledger.models.ids import new_transaction_id
from ngo_ledger.models.ledger import (
    TEXT_FIELD_LIMITS,
    ChartOfAccountItem,
    Transaction,
    TransactionDraft,
    TransactionStatus,
    ValidationIssue,
    ValidationResult,
    coerce_iso_date,
)


class ValidationFailedError(ValueError):
    """Input was rejected; `result` holds the issues to display."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(i.message for i in result.issues if i.severity == "error")
        super().__init__(messages or "Validation failed")


class TransactionValidator:
    """
    Validates transaction drafts against the current chart of accounts.
    """

    def __init__(self, accounts: Iterable[ChartOfAccountItem] = ()):
        self._accounts = {acc.code: acc for acc in accounts}

    def validate(
        self,
        draft: TransactionDraft,
        current: Optional[Transaction] = None,
    ) -> ValidationResult:
        """
        Args:
            draft: The form input
            current: The stored transaction being edited, None when creating
        """
        issues = []

        if not draft.date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
                severity="error",
            ))
        else:
            try:
                coerce_iso_date(draft.date)
            except ValueError:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="invalid_format",
                    message=f"Date must be YYYY-MM-DD, got {draft.date!r}",
                    severity="error",
                ))

        if not draft.description:
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
                severity="error",
            ))

        if not draft.payee_or_payer:
            issues.append(ValidationIssue(
                field="payee_or_payer",
                issue_type="missing",
                message="Payee/payer is required",
                severity="error",
            ))

        if draft.amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            ))
        elif draft.amount < 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount cannot be negative; choose the transaction type instead",
                severity="error",
            ))
        elif draft.amount == 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message="Amount is zero",
                severity="warning",
            ))

        issues.extend(self._check_account(draft.account_code))
        issues.extend(self._check_lengths(draft))
        issues.extend(self._check_status(draft, current))

        if not draft.voucher_number:
            issues.append(ValidationIssue(
                field="voucher_number",
                issue_type="defaulted",
                message="No voucher number given; one will be generated",
                severity="info",
            ))

        return ValidationResult(issues=issues)

    def _check_account(self, code: Optional[str]) -> list[ValidationIssue]:
        if not code:
            return [ValidationIssue(
                field="account_code",
                issue_type="missing",
                message="Account code is required",
                severity="error",
            )]
        account = self._accounts.get(code)
        if account is None:
            return [ValidationIssue(
                field="account_code",
                issue_type="unknown_code",
                message=f"Account code {code} is not in the chart of accounts",
                severity="warning",
            )]
        if account.is_header:
            return [ValidationIssue(
                field="account_code",
                issue_type="header_account",
                message=f"{code} is a header row and cannot be posted to",
                severity="error",
            )]
        return []

    def _check_lengths(self, draft: TransactionDraft) -> list[ValidationIssue]:
        issues = []
        for name, limit in TEXT_FIELD_LIMITS.items():
            value = getattr(draft, name)
            if value and len(value) > limit:
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="too_long",
                    message=f"{name.replace('_', ' ').capitalize()} is limited to {limit} characters",
                    severity="error",
                ))
        return issues

    def _check_status(
        self,
        draft: TransactionDraft,
        current: Optional[Transaction],
    ) -> list[ValidationIssue]:
        # RECONCILED is reached only by matching a bank line, and is kept on edit
        if draft.status != TransactionStatus.RECONCILED:
            return []
        if current is not None and current.status == TransactionStatus.RECONCILED:
            return []
        return [ValidationIssue(
            field="status",
            issue_type="reconciled_by_match_only",
            message="A transaction becomes Reconciled only by matching it to a bank statement line",
            severity="error",
        )]

    def to_transaction(
        self,
        draft: TransactionDraft,
        tx_id: Optional[str] = None,
        current: Optional[Transaction] = None,
    ) -> Transaction:
        """
        Convert an accepted draft into a Transaction.

        When editing (`current` given), a RECONCILED transaction stays
        RECONCILED whatever status the draft carries.

        Raises:
            ValidationFailedError: If the draft has error-level issues
        """
        result = self.validate(draft, current)
        if result.has_errors:
            raise ValidationFailedError(result)

        status = draft.status
        if current is not None and current.status == TransactionStatus.RECONCILED:
            status = TransactionStatus.RECONCILED

        return Transaction(
            id=tx_id or new_transaction_id(),
            date=draft.date,
            voucher_number=draft.voucher_number or f"V-{int(time.time() * 1000)}",
            cheque_number=draft.cheque_number or None,
            activity=draft.activity or "",
            description=draft.description,
            payee_or_payer=draft.payee_or_payer,
            amount=draft.amount,
            type=draft.type,
            account_code=draft.account_code,
            status=status,
        )


class AccountValidator:
    """Validates chart-of-accounts edits."""

    def __init__(self, existing_codes: Iterable[str] = ()):
        self._codes = set(existing_codes)

    def validate(
        self,
        item: ChartOfAccountItem,
        editing_code: Optional[str] = None,
    ) -> ValidationResult:
        """
        Args:
            item: The account as submitted
            editing_code: The code being edited, None when creating
        """
        issues = []
        code_taken = item.code in self._codes and item.code != editing_code
        if code_taken:
            issues.append(ValidationIssue(
                field="code",
                issue_type="duplicate",
                message=f"Account code {item.code} already exists",
                severity="error",
            ))
        if editing_code is not None and editing_code != item.code:
            issues.append(ValidationIssue(
                field="code",
                issue_type="renamed",
                message=(
                    f"Renaming {editing_code} to {item.code} does not move existing "
                    f"transactions; they will report as Unknown"
                ),
                severity="warning",
            ))
        return ValidationResult(issues=issues)
