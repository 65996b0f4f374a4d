"""Tests for the key-value slots, schema migrations and the persistence adapter."""

import json
import pytest
from datetime import date, datetime
from decimal import Decimal

from clinic_ledger.models import (
    DailyCashConfig,
    LedgerState,
    PaymentMethod,
    Product,
    Professional,
    Receipt,
    ServiceType,
)
from clinic_ledger.services.storage import (
    CURRENT_SCHEMA_VERSION,
    InMemorySlot,
    JsonFileSlot,
    NewerSchemaError,
    PersistenceAdapter,
    SchemaVersionError,
    SlotReadError,
    SnapshotImportError,
    migrate,
)
from clinic_ledger.services.storage.interface import KeyValueSlot
from clinic_ledger.store import RecordStore, SequentialIdGenerator

STATE_KEY = "test-ledger"


def sample_state() -> LedgerState:
    return LedgerState(
        professionals=[
            Professional(
                id="p-1",
                name="Dra. Ana",
                specialty="Cardiologia",
                percentage=30,
                created_at=datetime(2024, 4, 1, 8, 0),
            ),
        ],
        receipts=[
            Receipt(
                id="r-1",
                gross_value=Decimal("200.00"),
                professional_value=Decimal("60.00"),
                net_clinic=Decimal("140.00"),
                professional_id="p-1",
                professional_name="Dra. Ana",
                service_type="consulta",
                payment_method=PaymentMethod.INSURANCE_PARTNER,
                recorded_at=datetime(2024, 5, 1, 9, 30, 0),
            ),
        ],
        products=[Product(id="x-1", name="Luvas", quantity=4, min_quantity=10)],
        daily_configs=[DailyCashConfig(day=date(2024, 5, 1), initial_cash=Decimal("80"))],
        service_types=[ServiceType(label="Consulta", key="consulta")],
    )


LEGACY_BLOB = json.dumps({
    "professionals": [{
        "id": "1714550000000",
        "name": "Dr. Bruno",
        "specialty": "Clínico",
        "phone": "",
        "percentage": 100,
        "createdAt": "2024-05-01T10:00:00.000Z",
    }],
    "receipts": [
        {
            "id": "1714551111111",
            "grossValue": 150,
            "professionalValue": 0,
            "netClinic": 150,
            "professionalId": "1714550000000",
            "professionalName": "Dr. Bruno",
            "serviceType": "consulta",
            "paymentMethod": "dinheiro",
            "date": "2024-05-01T10:15:00",
        },
        {
            "id": "1714552222222",
            "grossValue": 80.5,
            "professionalValue": 0,
            "netClinic": 80.5,
            "professionalId": "1714550000000",
            "professionalName": "Dr. Bruno",
            "serviceType": "retorno",
            "paymentMethod": "unimed",
            "date": "2024-05-01T11:00:00",
        },
    ],
    "dailyConfigs": [{"date": "2024-05-01", "initialCash": 100}],
})


class FailingSlot(KeyValueSlot):
    def read(self, key):
        raise SlotReadError("disk on fire")

    def write(self, key, value):
        raise AssertionError("must not write")

    def delete(self, key):
        return False


class TestSlots:
    """Tests for slot implementations."""

    def test_memory_slot(self):
        slot = InMemorySlot()
        assert slot.read("k") is None
        slot.write("k", "v")
        assert slot.read("k") == "v"
        assert slot.delete("k") is True
        assert slot.delete("k") is False

    def test_file_slot_round_trip(self, tmp_path):
        slot = JsonFileSlot(tmp_path / "data")
        assert slot.read("ledger") is None
        slot.write("ledger", '{"a": "ção"}')
        assert slot.read("ledger") == '{"a": "ção"}'
        assert (tmp_path / "data" / "ledger.json").exists()

    def test_file_slot_overwrite_leaves_no_temp_files(self, tmp_path):
        slot = JsonFileSlot(tmp_path)
        slot.write("ledger", "one")
        slot.write("ledger", "two")
        assert slot.read("ledger") == "two"
        assert [p.name for p in tmp_path.iterdir()] == ["ledger.json"]

    def test_file_slot_delete(self, tmp_path):
        slot = JsonFileSlot(tmp_path)
        slot.write("cm_auth", "true")
        assert slot.delete("cm_auth") is True
        assert slot.delete("cm_auth") is False
        assert slot.read("cm_auth") is None


class TestMigrations:
    """Tests for schema versioning."""

    def test_unversioned_document_is_legacy(self):
        document, version = migrate({"receipts": [{"paymentMethod": "cartao"}]})
        assert version == 1
        assert document["receipts"][0]["paymentMethod"] == "card"
        assert document["schemaVersion"] == CURRENT_SCHEMA_VERSION

    def test_current_document_unchanged(self):
        document, version = migrate({"schemaVersion": 2, "receipts": [{"paymentMethod": "cash"}]})
        assert version == 2
        assert document["receipts"][0]["paymentMethod"] == "cash"

    def test_newer_document_rejected(self):
        with pytest.raises(NewerSchemaError):
            migrate({"schemaVersion": CURRENT_SCHEMA_VERSION + 1})

    @pytest.mark.parametrize("version", [0, -1, "2", True, 1.5])
    def test_invalid_version_rejected(self, version):
        with pytest.raises(SchemaVersionError):
            migrate({"schemaVersion": version})


class TestPersistenceAdapter:
    """Tests for load / save / import / export."""

    def test_round_trip(self, slot):
        adapter = PersistenceAdapter(slot, key=STATE_KEY)
        adapter.load()
        state = sample_state()
        assert adapter.save(state) is True

        reloaded = PersistenceAdapter(slot, key=STATE_KEY).load()
        assert reloaded.to_document() == state.to_document()
        assert reloaded.receipts[0].gross_value == Decimal("200.00")

    def test_blob_carries_schema_version(self, slot, adapter):
        adapter.load()
        adapter.save(LedgerState())
        document = json.loads(slot.read(STATE_KEY))
        assert document["schemaVersion"] == CURRENT_SCHEMA_VERSION

    def test_missing_slot_is_empty_state(self, adapter):
        state = adapter.load()
        assert state.receipts == []
        assert len(state.service_types) == 4

    def test_save_before_load_is_refused(self, slot, adapter):
        slot.write(STATE_KEY, "precious")
        assert adapter.save(LedgerState()) is False
        assert slot.read(STATE_KEY) == "precious"

    def test_save_allowed_after_failed_load(self):
        slot = InMemorySlot({STATE_KEY: "{not json"})
        adapter = PersistenceAdapter(slot, key=STATE_KEY)
        assert adapter.load().receipts == []
        assert adapter.is_loaded
        assert adapter.save(LedgerState()) is True

    @pytest.mark.parametrize("blob", ["{not json", "[]", '"text"', "null", '{"schemaVersion": 99}'])
    def test_corrupt_blob_loads_empty(self, blob):
        slot = InMemorySlot({STATE_KEY: blob})
        state = PersistenceAdapter(slot, key=STATE_KEY).load()
        assert state.to_document() == LedgerState().to_document()

    def test_unreadable_slot_loads_empty(self):
        state = PersistenceAdapter(FailingSlot(), key=STATE_KEY).load()
        assert state.receipts == []

    def test_broken_collection_does_not_take_down_others(self, slot):
        document = sample_state().to_document()
        document["schemaVersion"] = CURRENT_SCHEMA_VERSION
        document["products"] = [{"id": "x", "name": "Luvas", "quantity": -3}]
        slot.write(STATE_KEY, json.dumps(document))

        state = PersistenceAdapter(slot, key=STATE_KEY).load()
        assert state.products == []
        assert [r.id for r in state.receipts] == ["r-1"]
        assert [p.id for p in state.professionals] == ["p-1"]

    def test_missing_service_types_keep_defaults(self, slot):
        slot.write(STATE_KEY, json.dumps({"schemaVersion": 2, "receipts": []}))
        state = PersistenceAdapter(slot, key=STATE_KEY).load()
        assert [s.key for s in state.service_types][0] == "consulta"
        assert len(state.service_types) == 4

    def test_legacy_blob_is_migrated(self):
        slot = InMemorySlot({STATE_KEY: LEGACY_BLOB})
        state = PersistenceAdapter(slot, key=STATE_KEY).load()

        methods = [r.payment_method for r in state.receipts]
        assert methods == [PaymentMethod.CASH, PaymentMethod.INSURANCE_PARTNER]
        assert state.receipts[1].gross_value == Decimal("80.5")
        assert state.daily_configs[0].initial_cash == Decimal("100")
        assert state.professionals[0].percentage == 100

    def test_export_is_indented(self, adapter):
        blob = adapter.export_snapshot(sample_state())
        assert blob.startswith('{\n  "schemaVersion"')
        assert "Dra. Ana" in blob

    def test_export_filename_embeds_date(self):
        name = PersistenceAdapter.export_filename(date(2024, 5, 1))
        assert name == "clinic-ledger-backup-2024-05-01.json"

    def test_import_accepts_export(self, adapter):
        state = sample_state()
        imported = adapter.import_snapshot(adapter.export_snapshot(state))
        assert imported.to_document() == state.to_document()

    def test_import_accepts_legacy_backup(self, adapter):
        imported = adapter.import_snapshot(LEGACY_BLOB)
        assert imported.receipts[0].payment_method == PaymentMethod.CASH

    @pytest.mark.parametrize("blob", [
        "garbage",
        "[1, 2, 3]",
        '{"receipts": [{"id": "r"}]}',
        '{"schemaVersion": 99}',
    ])
    def test_import_rejects_invalid_backup(self, adapter, blob):
        with pytest.raises(SnapshotImportError):
            adapter.import_snapshot(blob)

    def test_broken_record_drops_only_itself(self, slot):
        document = sample_state().to_document()
        document["schemaVersion"] = CURRENT_SCHEMA_VERSION
        document["products"] = [
            {"id": "a", "name": "Luvas", "quantity": 4, "minQuantity": 10},
            {"id": "b", "name": "Gaze", "quantity": None, "minQuantity": 5},
        ]
        slot.write(STATE_KEY, json.dumps(document))

        state = PersistenceAdapter(slot, key=STATE_KEY).load()
        assert [p.id for p in state.products] == ["a"]
        assert [r.id for r in state.receipts] == ["r-1"]

    def test_surviving_records_are_written_back(self, slot):
        slot.write(STATE_KEY, json.dumps({
            "schemaVersion": CURRENT_SCHEMA_VERSION,
            "products": [
                {"id": "a", "name": "Luvas", "quantity": 4, "minQuantity": 10},
                {"id": "b", "name": "Gaze", "quantity": None, "minQuantity": 5},
            ],
        }))
        store = RecordStore(
            PersistenceAdapter(slot, key=STATE_KEY),
            id_generator=SequentialIdGenerator(),
        )
        store.load()
        store.add_product(Product(id="c", name="Seringa", quantity=1, min_quantity=2))

        saved = json.loads(slot.read(STATE_KEY))
        assert [p["id"] for p in saved["products"]] == ["a", "c"]

    def test_collection_that_is_not_a_list_starts_empty(self, slot):
        slot.write(STATE_KEY, json.dumps({
            "schemaVersion": CURRENT_SCHEMA_VERSION,
            "products": {"id": "a"},
            "patients": [{"id": "m-1", "name": "Maria"}],
        }))
        state = PersistenceAdapter(slot, key=STATE_KEY).load()
        assert state.products == []
        assert [p.name for p in state.patients] == ["Maria"]

    def test_newer_schema_is_never_overwritten(self, slot):
        newer = json.dumps({
            "schemaVersion": CURRENT_SCHEMA_VERSION + 1,
            "products": [{"id": "a", "name": "Luvas", "quantity": 4, "minQuantity": 10}],
        })
        slot.write(STATE_KEY, newer)
        adapter = PersistenceAdapter(slot, key=STATE_KEY)
        store = RecordStore(adapter, id_generator=SequentialIdGenerator())

        assert store.load().products == []
        assert adapter.is_read_only
        store.add_product(Product(id="c", name="Seringa", quantity=1, min_quantity=2))

        assert adapter.save(store.state) is False
        assert slot.read(STATE_KEY) == newer

    def test_invalid_schema_version_stays_writable(self, slot):
        slot.write(STATE_KEY, '{"schemaVersion": "2"}')
        adapter = PersistenceAdapter(slot, key=STATE_KEY)
        adapter.load()
        assert not adapter.is_read_only
        assert adapter.save(LedgerState()) is True
