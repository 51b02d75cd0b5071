"""
Tests for State Storage and JSON Schema Contract

Комплексное тестирование storage boundary:
- Валидность registrar_state схемы
- Snapshot → JSON → restore
- Чтение записей старых версий layout (дефолты для добавленных полей)
- Отклонение неизвестных версий и не-append-only layout
- Conservation при restore
"""

import json

import pytest
from jsonschema import ValidationError

from src.core.clock import ManualHeightClock
from src.core.config import RegistrarSettings
from src.core.contracts import RegistrarStateValidator, SchemaLoader, validate_registrar_state
from src.core.domain import DEFAULT_LOCK_SIZE
from src.core.errors import LayoutIncompatible, StateIntegrityError
from src.custody import InMemoryCustody
from src.registrar import Registrar
from src.storage import (
    LAYOUT_HISTORY,
    LAYOUT_VERSION,
    STORAGE_LAYOUT,
    RegistrarStateRecord,
    check_layout_append_only,
    decode_state,
    dumps_state,
    encode_state,
    layout_fields,
    loads_state,
    rebuild_state,
)


OPERATOR = "0xoperator"


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def populated():
    """Registrar с очередями, penalty и изменённым конфигом."""
    clock = ManualHeightClock(start_height=100)
    custody = InMemoryCustody(custody_account="registrar")
    custody.mint("alice", 1_000)
    custody.mint("bob", 1_000)
    registrar = Registrar(
        custody,
        clock,
        RegistrarSettings(token="0xtoken", operator=OPERATOR, lock_duration=10, lock_size=100),
    )
    registrar.lock("alice", 100)
    registrar.set_lock_duration(OPERATOR, 20)
    registrar.lock("alice", 50)
    registrar.lock_for("bob", "carol")
    registrar.set_rate(OPERATOR, 1_000_000)
    registrar.set_penalty(OPERATOR, "bob", 3)
    return registrar, custody, clock


@pytest.fixture
def v1_record():
    """Запись layout v1 (до lock_size / rate / penalties)."""
    return {
        "layout_version": 1,
        "token": "0xtoken",
        "operator": OPERATOR,
        "lock_duration": 10,
        "accounts": [
            {"account": "alice", "queue": [{"amount": 100, "maturity_height": 20}]},
        ],
    }


# =============================================================================
# SCHEMA
# =============================================================================


def test_schema_is_valid_draft_2020_12():
    schema = SchemaLoader().load_schema("registrar_state")

    assert schema["title"] == "registrar_state"


def test_schema_loader_caches():
    loader = SchemaLoader()

    assert loader.load_schema("registrar_state") is loader.load_schema("registrar_state")


def test_unknown_schema():
    with pytest.raises(FileNotFoundError):
        SchemaLoader().load_schema("does_not_exist")


def test_schema_rejects_zero_amount(v1_record):
    v1_record["accounts"][0]["queue"][0]["amount"] = 0

    with pytest.raises(ValidationError):
        validate_registrar_state(v1_record)


def test_schema_rejects_unknown_field(v1_record):
    v1_record["owner"] = "x"

    with pytest.raises(ValidationError):
        RegistrarStateValidator().validate(v1_record)


# =============================================================================
# LAYOUT
# =============================================================================


class TestLayout:
    """Тесты append-only layout."""

    def test_current_layout(self):
        assert STORAGE_LAYOUT == LAYOUT_HISTORY[LAYOUT_VERSION]
        assert layout_fields(1) == ("token", "operator", "lock_duration", "accounts")

    def test_history_is_append_only(self):
        for version in range(2, LAYOUT_VERSION + 1):
            check_layout_append_only(LAYOUT_HISTORY[version - 1], LAYOUT_HISTORY[version])

    def test_reorder_rejected(self):
        reordered = (STORAGE_LAYOUT[1], STORAGE_LAYOUT[0]) + STORAGE_LAYOUT[2:]

        with pytest.raises(LayoutIncompatible):
            check_layout_append_only(STORAGE_LAYOUT, reordered)

    def test_type_change_rejected(self):
        changed = STORAGE_LAYOUT[:2] + (("lock_duration", "int"),) + STORAGE_LAYOUT[3:]

        with pytest.raises(LayoutIncompatible):
            check_layout_append_only(STORAGE_LAYOUT, changed)

    def test_removal_rejected(self):
        with pytest.raises(LayoutIncompatible):
            check_layout_append_only(STORAGE_LAYOUT, STORAGE_LAYOUT[:-1])

    def test_append_accepted(self):
        check_layout_append_only(STORAGE_LAYOUT, STORAGE_LAYOUT + (("bonus", "uint"),))

    def test_unknown_version(self):
        with pytest.raises(LayoutIncompatible):
            layout_fields(LAYOUT_VERSION + 1)


# =============================================================================
# ROUND TRIP
# =============================================================================


class TestSnapshotRestore:
    """Snapshot → JSON → restore."""

    def test_snapshot_contents(self, populated):
        registrar, custody, clock = populated

        record = registrar.snapshot()

        assert record.layout_version == LAYOUT_VERSION
        assert record.custody_balance == custody.custody_balance() == 250
        assert record.captured_at_height == 100
        assert record.total_locked() == 250
        assert record.penalties == {"bob": 3}

    def test_restore_reproduces_state(self, populated):
        registrar, custody, clock = populated

        text = dumps_state(registrar.snapshot())
        restored = Registrar.restore(loads_state(text), custody, clock)

        for account in ("alice", "bob", "carol"):
            assert restored.get_lock(account) == registrar.get_lock(account)
            assert restored.penalty(account) == registrar.penalty(account)
        assert restored.lock_duration == 20
        assert restored.lock_size == 100
        assert restored.rate == 1_000_000
        assert restored.operator == OPERATOR

    def test_restored_registrar_keeps_working(self, populated):
        registrar, custody, clock = populated
        restored = Registrar.restore(registrar.snapshot(), custody, clock)

        clock.advance(20)
        result = restored.unlock("alice", 1_000)

        assert result.released == 150
        assert custody.balance_of("alice") == 1_000

    def test_encoded_json_is_plain(self, populated):
        registrar, _, _ = populated

        data = encode_state(registrar.snapshot())

        assert json.loads(json.dumps(data)) == data
        assert [a["account"] for a in data["accounts"]] == ["alice", "bob", "carol"]

    def test_restore_rejects_custody_mismatch(self, populated):
        registrar, custody, clock = populated
        record = registrar.snapshot()
        custody.mint("registrar", 1)

        with pytest.raises(StateIntegrityError):
            Registrar.restore(record, custody, clock)

    def test_record_conservation_checked(self, populated):
        registrar, _, _ = populated
        record = registrar.snapshot().model_copy(update={"custody_balance": 1})

        with pytest.raises(StateIntegrityError):
            rebuild_state(record)


# =============================================================================
# OLD LAYOUTS
# =============================================================================


class TestOldLayouts:
    """Чтение записей предыдущих версий layout."""

    def test_v1_record_gets_defaults(self, v1_record):
        record = decode_state(v1_record)

        assert isinstance(record, RegistrarStateRecord)
        assert record.lock_size == DEFAULT_LOCK_SIZE
        assert record.rate == 0
        assert record.penalties == {}
        assert record.custody_balance is None

    def test_v1_record_upgraded_to_current_layout(self, v1_record):
        record = decode_state(v1_record)

        assert record.layout_version == LAYOUT_VERSION

    def test_v1_record_saved_again(self, v1_record):
        record = loads_state(json.dumps(v1_record))

        again = loads_state(dumps_state(record))

        assert again == record
        assert encode_state(again)["layout_version"] == LAYOUT_VERSION
        assert [entry.amount for entry in again.accounts[0].queue] == [100]

    def test_v1_record_restores(self, v1_record):
        custody = InMemoryCustody(custody_account="registrar", balances={"registrar": 100})
        clock = ManualHeightClock(start_height=20)

        registrar = Registrar.restore(decode_state(v1_record), custody, clock)
        result = registrar.unlock("alice", 100)

        assert result.released == 100
        assert custody.balance_of("alice") == 100

    def test_field_from_later_layout_rejected(self, v1_record):
        v1_record["rate"] = 5

        with pytest.raises(LayoutIncompatible):
            decode_state(v1_record)

    def test_future_version_rejected(self, v1_record):
        v1_record["layout_version"] = LAYOUT_VERSION + 1

        with pytest.raises(LayoutIncompatible):
            decode_state(v1_record)

    def test_duplicate_account_rejected(self, v1_record):
        v1_record["accounts"].append(dict(v1_record["accounts"][0]))

        with pytest.raises(StateIntegrityError):
            rebuild_state(decode_state(v1_record))
