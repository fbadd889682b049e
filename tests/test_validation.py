"""Tests for form input validation."""

from decimal import Decimal

import pytest

from ngo_ledger.models.ledger import ChartOfAccountItem, TransactionDraft, TransactionStatus, TransactionType
from ngo_ledger.validation import AccountValidator, TransactionValidator, ValidationFailedError


def complete_draft(**overrides):
    fields = {
        "date": "2024-01-15",
        "voucher_number": "PV-1",
        "description": "Office rent",
        "payee_or_payer": "Landlord",
        "amount": Decimal("300"),
        "type": TransactionType.EXPENSE,
        "account_code": "2.1 b",
    }
    fields.update(overrides)
    return TransactionDraft(**fields)


class TestTransactionValidator:
    """Tests for TransactionValidator."""

    def test_complete_draft_is_valid(self, chart):
        result = TransactionValidator(chart).validate(complete_draft())
        assert result.is_valid
        assert result.issues == []

    def test_missing_fields_are_errors(self, chart):
        result = TransactionValidator(chart).validate(TransactionDraft())
        errored = {i.field for i in result.issues if i.severity == "error"}
        assert errored == {"date", "description", "payee_or_payer", "amount", "account_code"}

    def test_bad_date(self, chart):
        result = TransactionValidator(chart).validate(complete_draft(date="15/01/2024"))
        assert [i.issue_type for i in result.issues] == ["invalid_format"]

    def test_negative_amount(self, chart):
        result = TransactionValidator(chart).validate(complete_draft(amount=Decimal("-1")))
        assert result.has_errors

    def test_zero_amount_is_a_warning(self, chart):
        result = TransactionValidator(chart).validate(complete_draft(amount=Decimal("0")))
        assert result.is_valid
        assert result.warnings == ["Amount is zero"]

    def test_header_code_rejected(self, chart):
        result = TransactionValidator(chart).validate(complete_draft(account_code="2"))
        assert [i.issue_type for i in result.issues] == ["header_account"]
        assert result.has_errors

    def test_unknown_code_is_a_warning(self, chart):
        result = TransactionValidator(chart).validate(complete_draft(account_code="9.9"))
        assert result.is_valid
        assert [i.issue_type for i in result.issues] == ["unknown_code"]

    def test_to_transaction(self, chart):
        tx = TransactionValidator(chart).to_transaction(complete_draft(), tx_id="abc")
        assert tx.id == "abc"
        assert tx.amount == Decimal("300.00")
        assert tx.voucher_number == "PV-1"

    def test_voucher_is_generated(self, chart):
        validator = TransactionValidator(chart)
        draft = complete_draft(voucher_number=None)
        assert [i.severity for i in validator.validate(draft).issues] == ["info"]
        assert validator.to_transaction(draft).voucher_number.startswith("V-")

    def test_rejected_draft_raises(self, chart):
        with pytest.raises(ValidationFailedError) as exc_info:
            TransactionValidator(chart).to_transaction(complete_draft(description=""))
        assert exc_info.value.result.error_count == 1
        assert "Description is required" in str(exc_info.value)

    def test_over_long_text_is_an_error(self, chart):
        draft = complete_draft(description="d" * 501, voucher_number="v" * 101)
        result = TransactionValidator(chart).validate(draft)
        assert {(i.field, i.issue_type) for i in result.issues} == {
            ("description", "too_long"),
            ("voucher_number", "too_long"),
        }
        with pytest.raises(ValidationFailedError):
            TransactionValidator(chart).to_transaction(draft)

    def test_text_at_the_limit_is_accepted(self, chart):
        draft = complete_draft(description="d" * 500, payee_or_payer="p" * 200)
        assert TransactionValidator(chart).to_transaction(draft).description == "d" * 500

    def test_new_transaction_cannot_start_reconciled(self, chart):
        result = TransactionValidator(chart).validate(complete_draft(status=TransactionStatus.RECONCILED))
        assert [i.issue_type for i in result.issues] == ["reconciled_by_match_only"]
        assert result.has_errors

    def test_cleared_is_allowed_on_create(self, chart):
        tx = TransactionValidator(chart).to_transaction(complete_draft(status=TransactionStatus.CLEARED))
        assert tx.status == TransactionStatus.CLEARED

    def test_reconciled_status_survives_edit(self, chart, make_tx):
        current = make_tx("300", status=TransactionStatus.RECONCILED)
        tx = TransactionValidator(chart).to_transaction(
            complete_draft(status=TransactionStatus.PENDING), tx_id=current.id, current=current
        )
        assert tx.status == TransactionStatus.RECONCILED

    def test_edit_cannot_reconcile(self, chart, make_tx):
        current = make_tx("300")
        with pytest.raises(ValidationFailedError):
            TransactionValidator(chart).to_transaction(
                complete_draft(status=TransactionStatus.RECONCILED), tx_id=current.id, current=current
            )


class TestAccountValidator:
    """Tests for AccountValidator."""

    def test_new_code_ok(self):
        result = AccountValidator(["1.1"]).validate(ChartOfAccountItem(code="1.2", category="Other"))
        assert result.issues == []

    def test_duplicate_code(self):
        result = AccountValidator(["1.1"]).validate(ChartOfAccountItem(code="1.1", category="Other"))
        assert result.has_errors

    def test_editing_same_code(self):
        result = AccountValidator(["1.1"]).validate(
            ChartOfAccountItem(code="1.1", category="Renamed"), editing_code="1.1"
        )
        assert result.issues == []

    def test_rename_warns_about_orphans(self):
        result = AccountValidator(["1.1"]).validate(
            ChartOfAccountItem(code="1.5", category="Grants"), editing_code="1.1"
        )
        assert result.is_valid
        assert len(result.warnings) == 1
