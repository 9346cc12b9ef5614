from datetime import date
import threading

import pytest

from storehouse.exceptions import NotFoundError, ValidationFailure
from storehouse.models.movement import MovementType
from storehouse.models.position import Slot, StorageType
from storehouse.services.positions import TOTAL_POSITIONS
from storehouse.services.warehouse import Warehouse
from storehouse.storage.memory import MemoryStorage


class TestSeeding:
    def test_every_combination_exists_once(self, warehouse):
        positions = warehouse.positions.list()
        assert len(positions) == TOTAL_POSITIONS == 20

        keys = {(p.block, p.level, Slot(p.slot)) for p in positions}
        assert keys == {(b, l, s) for b in (1, 2) for l in range(1, 6) for s in Slot}
        assert all(p.is_empty for p in positions)

    def test_reinitializing_is_idempotent(self, warehouse, product):
        warehouse.positions.fill("pos-1-3-AP2", product)

        assert warehouse.initialize() == 0

        positions = warehouse.positions.list()
        assert len(positions) == 20
        assert warehouse.positions.get("pos-1-3-AP2").is_empty is False

    def test_seeding_writes_no_history(self, warehouse):
        assert warehouse.ledger.list_all() == []


class TestListing:
    def test_order_is_block_then_level_descending_then_slot(self, warehouse):
        ids = [p.id for p in warehouse.positions.list()]

        assert ids[:4] == ["pos-1-5-AP1", "pos-1-5-AP2", "pos-1-4-AP1", "pos-1-4-AP2"]
        assert ids[8:10] == ["pos-1-1-AP1", "pos-1-1-AP2"]
        assert ids[10] == "pos-2-5-AP1"
        assert ids[-1] == "pos-2-1-AP2"

    def test_get_unknown_position(self, warehouse):
        with pytest.raises(NotFoundError) as exc_info:
            warehouse.positions.get("pos-3-1-AP1")
        assert exc_info.value.field == "position_id"


class TestFill:
    def test_round_trip(self, warehouse, product):
        warehouse.positions.fill("pos-1-5-AP1", product)

        position = warehouse.positions.get("pos-1-5-AP1")
        assert position.product_name == "Widget"
        assert position.product_code == "W1"
        assert position.quantity == 10
        assert position.entry_date == date(2024, 1, 15)
        assert position.is_empty is False

        warehouse.positions.clear("pos-1-5-AP1")

        position = warehouse.positions.get("pos-1-5-AP1")
        assert position.is_empty is True
        assert position.product_name is None
        assert position.product_code is None
        assert position.quantity is None
        assert position.entry_date is None
        assert position.notes is None

    def test_fill_empty_position_logs_one_entry(self, warehouse, product):
        warehouse.positions.fill("pos-2-1-AP1", product)

        history = warehouse.ledger.list_all()
        assert len(history) == 1
        entry = history[0]
        assert entry.movement_type == MovementType.ENTRY
        assert entry.location == "Block 2, Level 1, AP1"
        assert entry.product_code == "W1"
        assert entry.quantity == 10
        assert entry.previous_location is None

    def test_fill_occupied_position_logs_one_edit(self, warehouse, product):
        warehouse.positions.fill("pos-2-1-AP1", product)
        warehouse.positions.fill("pos-2-1-AP1", {**product, "quantity": 4, "notes": "Half pallet"})

        history = warehouse.ledger.list_all()
        assert [e.movement_type for e in history] == [MovementType.EDIT, MovementType.ENTRY]
        assert history[0].quantity == 4
        assert history[0].details == "Changed: quantity, notes"

    def test_fill_overwrites_optional_fields(self, warehouse, product):
        warehouse.positions.fill("pos-1-2-AP1", {
            **product,
            "client_name": "ACME",
            "storage_type": "bulk",
            "address": "Dock 3",
            "notes": "Fragile",
        })
        position = warehouse.positions.get("pos-1-2-AP1")
        assert position.client_name == "ACME"
        assert StorageType(position.storage_type) == StorageType.BULK

        warehouse.positions.fill("pos-1-2-AP1", product)

        position = warehouse.positions.get("pos-1-2-AP1")
        assert position.client_name is None
        assert position.storage_type is None
        assert position.address is None
        assert position.notes is None

    def test_history_snapshot_is_not_a_live_reference(self, warehouse, product):
        warehouse.positions.fill("pos-1-1-AP1", product)
        warehouse.positions.fill("pos-1-1-AP1", {**product, "product_name": "Gadget"})

        entry = warehouse.ledger.list_all()[-1]
        assert entry.movement_type == MovementType.ENTRY
        assert entry.product_name == "Widget"

    @pytest.mark.parametrize("field,value", [
        ("quantity", 0),
        ("quantity", -3),
        ("product_name", "   "),
        ("product_code", ""),
        ("entry_date", "not-a-date"),
    ])
    def test_invalid_fields_change_nothing(self, warehouse, product, field, value):
        with pytest.raises(ValidationFailure) as exc_info:
            warehouse.positions.fill("pos-1-1-AP1", {**product, field: value})

        assert field in [e["field"] for e in exc_info.value.errors]
        assert warehouse.positions.get("pos-1-1-AP1").is_empty is True
        assert warehouse.ledger.list_all() == []

    def test_missing_required_fields_are_all_reported(self, warehouse):
        with pytest.raises(ValidationFailure) as exc_info:
            warehouse.positions.fill("pos-1-1-AP1", {"notes": "nothing else"})

        fields = {e["field"] for e in exc_info.value.errors}
        assert fields == {"product_name", "product_code", "quantity", "entry_date"}

    def test_fill_unknown_position(self, warehouse, product):
        with pytest.raises(NotFoundError):
            warehouse.positions.fill("pos-9-9-AP9", product)
        assert warehouse.ledger.list_all() == []


class TestClear:
    def test_clear_occupied_logs_exit_from_snapshot(self, warehouse, product):
        warehouse.positions.fill("pos-1-4-AP2", {**product, "client_name": "ACME"})
        warehouse.positions.clear("pos-1-4-AP2")

        entry = warehouse.ledger.list_all()[0]
        assert entry.movement_type == MovementType.EXIT
        assert entry.product_name == "Widget"
        assert entry.client_name == "ACME"
        assert entry.quantity == 10
        assert entry.location == "Block 1, Level 4, AP2"

    def test_clear_empty_position_logs_nothing(self, warehouse):
        position = warehouse.positions.clear("pos-1-4-AP2")

        assert position.is_empty is True
        assert warehouse.ledger.list_all() == []

    def test_clear_unknown_position(self, warehouse):
        with pytest.raises(NotFoundError):
            warehouse.positions.clear("nope")


class TestAtomicity:
    def test_failed_ledger_write_rolls_back_fill(self, warehouse, storage, product, monkeypatch):
        def broken_insert(values):
            raise RuntimeError("ledger unavailable")

        monkeypatch.setattr(storage, "insert_movement", broken_insert)

        with pytest.raises(RuntimeError):
            warehouse.positions.fill("pos-2-2-AP2", product)

        monkeypatch.undo()
        assert warehouse.positions.get("pos-2-2-AP2").is_empty is True
        assert warehouse.ledger.list_all() == []

    def test_failed_ledger_write_rolls_back_clear(self, warehouse, storage, product, monkeypatch):
        warehouse.positions.fill("pos-2-2-AP2", product)

        def broken_insert(values):
            raise RuntimeError("ledger unavailable")

        monkeypatch.setattr(storage, "insert_movement", broken_insert)

        with pytest.raises(RuntimeError):
            warehouse.positions.clear("pos-2-2-AP2")

        monkeypatch.undo()
        position = warehouse.positions.get("pos-2-2-AP2")
        assert position.is_empty is False
        assert position.product_code == "W1"
        assert len(warehouse.ledger.list_all()) == 1


class TestSharedMemoryStorage:
    def test_rollback_keeps_fill_committed_by_another_thread(self, clock, product):
        storage = MemoryStorage()
        warehouse = Warehouse(storage, clock=clock)
        warehouse.initialize()

        entered = threading.Event()
        release = threading.Event()

        def failing_unit():
            with pytest.raises(RuntimeError):
                with storage.atomic():
                    entered.set()
                    release.wait(5)
                    raise RuntimeError("boom")

        failing = threading.Thread(target=failing_unit)
        failing.start()
        assert entered.wait(5)

        filler = threading.Thread(target=warehouse.positions.fill, args=("pos-1-1-AP1", product))
        filler.start()
        # The fill waits for the open unit of work to finish
        filler.join(0.2)
        assert filler.is_alive()

        release.set()
        failing.join(5)
        filler.join(5)

        assert warehouse.positions.get("pos-1-1-AP1").is_empty is False
        assert [e.movement_type for e in warehouse.ledger.list_all()] == [MovementType.ENTRY]
