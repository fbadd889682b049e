"""Tests for the persisted stores and their storage backends."""

import json
from decimal import Decimal

import pytest

from ngo_ledger.models.ledger import BudgetLine, ChartOfAccountItem, TransactionStatus, TransactionType
from ngo_ledger.services.storage import (
    DuplicateError,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    StorageError,
)
from ngo_ledger.stores import BudgetStore, ChartOfAccountsStore, TransactionStore


class FailingStorage(InMemoryStorage):
    """Accepts loads, refuses every save."""

    def save(self, key, value):
        raise StorageError("disk full")


def persisted_row(tx_id, amount="10", **overrides):
    row = {
        "id": tx_id,
        "date": "2024-01-15",
        "voucherNumber": "PV-1",
        "description": "Row",
        "payeeOrPayer": "Someone",
        "amount": amount,
        "type": "EXPENSE",
        "accountCode": "2.1 a",
        "status": "PENDING",
    }
    row.update(overrides)
    return row


class TestTransactionStore:
    """Tests for TransactionStore."""

    def test_empty_storage(self, storage):
        assert TransactionStore(storage).all() == []

    def test_add_inserts_at_head_and_persists(self, storage, make_tx):
        store = TransactionStore(storage)
        first = store.add(make_tx("10"))
        second = store.add(make_tx("20"))
        assert [t.id for t in store.all()] == [second.id, first.id]

        reloaded = TransactionStore(storage)
        assert [t.id for t in reloaded.all()] == [second.id, first.id]
        assert storage.load("ngo_transactions")[0]["accountCode"] == "2.1 a"

    def test_add_rejects_duplicate_id(self, storage, make_tx):
        store = TransactionStore(storage)
        tx = store.add(make_tx("10"))
        with pytest.raises(DuplicateError):
            store.add(tx)
        assert len(store) == 1

    def test_load_collapses_duplicate_ids_last_wins(self):
        storage = InMemoryStorage({"ngo_transactions": [
            persisted_row("a", amount="1"),
            persisted_row("b", amount="2"),
            persisted_row("a", amount="3"),
        ]})
        store = TransactionStore(storage)
        assert [t.id for t in store.all()] == ["a", "b"]
        assert store.get("a").amount == Decimal("3.00")

    def test_numeric_ids_are_normalized(self):
        storage = InMemoryStorage({"ngo_transactions": [persisted_row(5), persisted_row("5.5")]})
        store = TransactionStore(storage)
        assert store.get(5).id == "5"
        assert store.get("5") is store.get(5.0)
        assert 5 in store

    def test_missing_ids_get_generated(self):
        row = persisted_row("x")
        del row["id"]
        store = TransactionStore(InMemoryStorage({"ngo_transactions": [row]}))
        assert len(store) == 1
        assert store.all()[0].id

    def test_bad_rows_are_skipped(self):
        storage = InMemoryStorage({"ngo_transactions": [
            persisted_row("good"),
            persisted_row("bad-type", type="GIFT"),
            persisted_row("bad-amount", amount="lots"),
            "not a row",
        ]})
        assert [t.id for t in TransactionStore(storage).all()] == ["good"]

    def test_over_long_text_is_cut_not_dropped(self):
        storage = InMemoryStorage({"ngo_transactions": [
            persisted_row("long", description="d" * 600, payeeOrPayer="p" * 250),
        ]})
        store = TransactionStore(storage)
        tx = store.get("long")
        assert tx.description == "d" * 500
        assert tx.payee_or_payer == "p" * 200

    def test_corrupted_blob_loads_empty(self):
        storage = InMemoryStorage()
        storage.put_raw("ngo_transactions", "{not json")
        assert TransactionStore(storage).all() == []

    def test_update_replaces_in_place(self, storage, make_tx):
        store = TransactionStore(storage)
        tx = store.add(make_tx("10"))
        other = store.add(make_tx("20"))
        assert store.update(tx.model_copy(update={"status": TransactionStatus.CLEARED}))
        assert [t.id for t in store.all()] == [other.id, tx.id]
        assert store.get(tx.id).status == TransactionStatus.CLEARED

    def test_update_missing_id_is_a_no_op(self, storage, make_tx):
        store = TransactionStore(storage)
        saves = storage.save_count
        assert store.update(make_tx("10")) is False
        assert storage.save_count == saves

    def test_delete_is_idempotent(self, storage, make_tx):
        store = TransactionStore(storage)
        tx = store.add(make_tx("10"))
        assert store.delete(tx.id) == 1
        assert store.delete(tx.id) == 0
        assert store.delete(None) == 0
        assert store.all() == []

    def test_failed_write_leaves_state_untouched(self, make_tx):
        store = TransactionStore(FailingStorage({"ngo_transactions": [persisted_row("a")]}))
        with pytest.raises(StorageError):
            store.add(make_tx("10"))
        with pytest.raises(StorageError):
            store.delete("a")
        assert [t.id for t in store.all()] == ["a"]

    def test_snapshots_are_copies(self, storage, make_tx):
        store = TransactionStore(storage)
        store.add(make_tx("10"))
        snapshot = store.all()
        snapshot.clear()
        assert len(store) == 1

    def test_overwrite_replaces_everything(self, storage, make_tx):
        store = TransactionStore(storage)
        store.add(make_tx("10"))
        replacement = [make_tx("1", TransactionType.INCOME), make_tx("2")]
        store.overwrite(replacement)
        assert [t.id for t in store.all()] == [t.id for t in replacement]


class TestChartOfAccountsStore:
    """Tests for ChartOfAccountsStore."""

    def test_add_and_lookup(self, storage, chart):
        store = ChartOfAccountsStore(storage)
        for item in chart:
            store.add(item)
        assert store.category_for("2.1 b") == "Rent"
        assert store.category_for("9.9") == "Unknown"
        assert [a.code for a in store.postable()] == ["1.1", "2.1 a", "2.1 b", "3.2"]

    def test_duplicate_code_rejected(self, storage):
        store = ChartOfAccountsStore(storage)
        store.add(ChartOfAccountItem(code="1.1", category="Grants"))
        with pytest.raises(DuplicateError):
            store.add(ChartOfAccountItem(code="1.1", category="Other"))

    def test_rename_moves_account_to_end(self, storage, chart):
        store = ChartOfAccountsStore(storage)
        for item in chart:
            store.add(item)
        store.rename("1.1", ChartOfAccountItem(code="1.2", category="Grants"))
        codes = [a.code for a in store.all()]
        assert "1.1" not in codes
        assert codes[-1] == "1.2"

    def test_rename_onto_existing_code_rejected(self, storage, chart):
        store = ChartOfAccountsStore(storage)
        for item in chart:
            store.add(item)
        with pytest.raises(DuplicateError):
            store.rename("1.1", ChartOfAccountItem(code="3.2", category="Grants"))

    def test_delete(self, storage):
        store = ChartOfAccountsStore(storage)
        store.add(ChartOfAccountItem(code="1.1", category="Grants"))
        assert store.delete("1.1")
        assert not store.delete("1.1")

    def test_persisted_header_flag(self, storage):
        store = ChartOfAccountsStore(storage)
        store.add(ChartOfAccountItem(code="1", category="Income", is_header=True))
        assert storage.load("ngo_chart_of_accounts") == [
            {"code": "1", "category": "Income", "isHeader": True}
        ]


class TestBudgetStore:
    """Tests for BudgetStore."""

    def test_update_replaces_all_lines(self, storage, budget_lines):
        store = BudgetStore(storage)
        store.update(budget_lines)
        store.update([BudgetLine(code="3.2", monthly_budget="75")])
        assert store.as_mapping() == {"3.2": Decimal("75.00")}

    def test_upsert(self, storage, budget_lines):
        store = BudgetStore(storage)
        store.update(budget_lines)
        store.upsert("2.1 a", "1200")
        store.upsert("3.2", 80)
        assert store.monthly_budget("2.1 a") == Decimal("1200.00")
        assert store.monthly_budget("3.2") == Decimal("80.00")
        assert store.monthly_budget("1.1") == Decimal("0.00")
        assert [b.code for b in store.all()] == ["2.1 a", "2.1 b", "3.2"]

    def test_persisted_as_camel_case_strings(self, storage):
        store = BudgetStore(storage)
        store.upsert("2.1 a", "1000")
        assert storage.load("ngo_budget") == [{"code": "2.1 a", "monthlyBudget": "1000.00"}]


class TestJsonFileStorage:
    """Tests for the file-backed storage."""

    def test_round_trip(self, tmp_path):
        backend = JsonFileStorage(str(tmp_path / "data"))
        assert isinstance(backend, KeyValueStorage)
        backend.save("ngo_budget", [{"code": "1", "monthlyBudget": "5.00"}])
        assert backend.load("ngo_budget") == [{"code": "1", "monthlyBudget": "5.00"}]
        assert (tmp_path / "data" / "ngo_budget.json").exists()

    def test_missing_key(self, tmp_path):
        assert JsonFileStorage(str(tmp_path)).load("nothing") is None

    def test_unparsable_file_is_absent(self, tmp_path):
        (tmp_path / "ngo_transactions.json").write_text("[{oops", encoding="utf-8")
        assert JsonFileStorage(str(tmp_path)).load("ngo_transactions") is None

    def test_no_temp_files_left_behind(self, tmp_path):
        backend = JsonFileStorage(str(tmp_path))
        backend.save("ngo_budget", [])
        backend.save("ngo_budget", [1, 2])
        assert sorted(p.name for p in tmp_path.iterdir()) == ["ngo_budget.json"]
        assert json.loads((tmp_path / "ngo_budget.json").read_text(encoding="utf-8")) == [1, 2]

    def test_rejects_path_like_keys(self, tmp_path):
        backend = JsonFileStorage(str(tmp_path))
        with pytest.raises(StorageError):
            backend.save("../escape", [])

    def test_delete(self, tmp_path):
        backend = JsonFileStorage(str(tmp_path))
        backend.save("k", {})
        assert backend.delete("k")
        assert not backend.delete("k")

    def test_defaults_to_settings_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "from-env"))
        backend = JsonFileStorage()
        assert backend.data_dir == tmp_path / "from-env"

    def test_stores_survive_restart(self, tmp_path, make_tx):
        store = TransactionStore(JsonFileStorage(str(tmp_path)))
        tx = store.add(make_tx("12.50"))
        reloaded = TransactionStore(JsonFileStorage(str(tmp_path)))
        assert reloaded.get(tx.id) == tx
