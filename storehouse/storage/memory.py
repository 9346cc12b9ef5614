from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging
import threading
import uuid

from storehouse.models.kanban_pallet import KanbanPallet
from storehouse.models.movement import MovementHistory
from storehouse.models.position import StoragePosition
from storehouse.storage.base import Storage, StorageProvider

logger = logging.getLogger(__name__)


class MemoryStorage(Storage):
    """
    Dict-backed storage.

    Rows are kept as plain dicts keyed by id and every read builds fresh,
    session-less model instances, so nothing handed to a caller aliases the
    stored state.

    One instance serves every request thread. A unit of work holds the lock
    from snapshot to commit, so a rollback never restores over another
    thread's writes.
    """

    def __init__(self):
        self._positions: Dict[str, Dict[str, Any]] = {}
        self._pallets: Dict[str, Dict[str, Any]] = {}
        self._movements: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.RLock()

    def _tables(self):
        return (self._positions, self._pallets, self._movements)

    @contextmanager
    def atomic(self):
        with self._lock:
            saved = [{key: dict(row) for key, row in table.items()} for table in self._tables()]
            try:
                yield self
            except Exception:
                for table, snapshot in zip(self._tables(), saved):
                    table.clear()
                    table.update(snapshot)
                logger.warning("Rolled back in-memory unit of work")
                raise

    # Positions

    def count_positions(self) -> int:
        with self._lock:
            return len(self._positions)

    def insert_positions(self, rows: List[Dict[str, Any]]) -> None:
        with self._lock:
            for row in rows:
                self._positions[row["id"]] = dict(row)

    def list_positions(self) -> List[StoragePosition]:
        with self._lock:
            rows = sorted(
                self._positions.values(),
                key=lambda r: (r["block"], -r["level"], r["slot"].value)
            )
            return [StoragePosition(**row) for row in rows]

    def get_position(self, position_id: str) -> Optional[StoragePosition]:
        with self._lock:
            row = self._positions.get(position_id)
            return StoragePosition(**row) if row is not None else None

    def update_position(self, position_id: str, values: Dict[str, Any]) -> StoragePosition:
        with self._lock:
            row = self._positions[position_id]
            row.update(values)
            return StoragePosition(**row)

    # Kanban pallets

    def list_pallets(self) -> List[KanbanPallet]:
        with self._lock:
            return [KanbanPallet(**row) for row in self._pallets.values()]

    def get_pallet(self, pallet_id: str) -> Optional[KanbanPallet]:
        with self._lock:
            row = self._pallets.get(pallet_id)
            return KanbanPallet(**row) if row is not None else None

    def insert_pallet(self, values: Dict[str, Any]) -> KanbanPallet:
        row = dict(values)
        row.setdefault("id", str(uuid.uuid4()))
        with self._lock:
            self._pallets[row["id"]] = row
        return KanbanPallet(**row)

    def update_pallet(self, pallet_id: str, values: Dict[str, Any]) -> KanbanPallet:
        with self._lock:
            row = self._pallets[pallet_id]
            row.update(values)
            return KanbanPallet(**row)

    def delete_pallet(self, pallet_id: str) -> None:
        with self._lock:
            del self._pallets[pallet_id]

    # Movement ledger

    def insert_movement(self, values: Dict[str, Any]) -> MovementHistory:
        row = dict(values)
        row.setdefault("id", str(uuid.uuid4()))
        with self._lock:
            self._movements[row["id"]] = row
        return MovementHistory(**row)

    def list_movements(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[MovementHistory]:
        with self._lock:
            rows = [
                (seq, row) for seq, row in enumerate(self._movements.values())
                if (start is None or row["timestamp"] >= start)
                and (end is None or row["timestamp"] <= end)
            ]
        rows.sort(key=lambda item: (item[1]["timestamp"], item[0]), reverse=True)
        return [MovementHistory(**row) for _, row in rows]


class MemoryStorageProvider(StorageProvider):
    """One ``MemoryStorage`` shared by every request of the application."""

    def __init__(self, storage: Optional[MemoryStorage] = None):
        self.storage = storage or MemoryStorage()

    @contextmanager
    def open(self):
        yield self.storage
