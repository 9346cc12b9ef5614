"""
Storage contract shared by the in-memory and SQLAlchemy backends.

Backends only move rows in and out; the rules about what gets written to the
movement ledger live in ``storehouse.services``. Every method returns model
instances (``StoragePosition``, ``KanbanPallet``, ``MovementHistory``), so the
services and the response schemas never care which backend is behind them.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from storehouse.models.kanban_pallet import KanbanPallet
from storehouse.models.movement import MovementHistory
from storehouse.models.position import StoragePosition


class Storage(ABC):

    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """Everything written inside the block commits together or not at all."""

    # Positions

    @abstractmethod
    def count_positions(self) -> int: ...

    @abstractmethod
    def insert_positions(self, rows: List[Dict[str, Any]]) -> None: ...

    @abstractmethod
    def list_positions(self) -> List[StoragePosition]:
        """Block ascending, level descending, slot ascending."""

    @abstractmethod
    def get_position(self, position_id: str) -> Optional[StoragePosition]: ...

    @abstractmethod
    def update_position(self, position_id: str, values: Dict[str, Any]) -> StoragePosition: ...

    # Kanban pallets

    @abstractmethod
    def list_pallets(self) -> List[KanbanPallet]: ...

    @abstractmethod
    def get_pallet(self, pallet_id: str) -> Optional[KanbanPallet]: ...

    @abstractmethod
    def insert_pallet(self, values: Dict[str, Any]) -> KanbanPallet: ...

    @abstractmethod
    def update_pallet(self, pallet_id: str, values: Dict[str, Any]) -> KanbanPallet: ...

    @abstractmethod
    def delete_pallet(self, pallet_id: str) -> None: ...

    # Movement ledger

    @abstractmethod
    def insert_movement(self, values: Dict[str, Any]) -> MovementHistory: ...

    @abstractmethod
    def list_movements(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[MovementHistory]:
        """Newest first; ``start``/``end`` are inclusive UTC bounds."""


class StorageProvider(ABC):
    """Hands out a ``Storage`` for the duration of one request."""

    @abstractmethod
    def open(self) -> Iterator[Storage]: ...

    def initialize(self) -> None:
        """Prepare the backing store at application startup."""
