from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session, sessionmaker

from storehouse.crud import kanban_pallet as pallet_crud
from storehouse.crud import movement as movement_crud
from storehouse.crud import position as position_crud
from storehouse.database import SessionLocal, create_database_if_not_exists, init_db
from storehouse.models.kanban_pallet import KanbanPallet
from storehouse.models.movement import MovementHistory
from storehouse.models.position import StoragePosition
from storehouse.storage.base import Storage, StorageProvider

logger = logging.getLogger(__name__)


class SqlStorage(Storage):
    """Storage over one SQLAlchemy session; ``atomic`` owns commit and rollback."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def atomic(self):
        try:
            yield self
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.warning("Rolled back database unit of work")
            raise

    # Positions

    def count_positions(self) -> int:
        return position_crud.get_position_count(self.db)

    def insert_positions(self, rows: List[Dict[str, Any]]) -> None:
        position_crud.create_positions(self.db, rows)

    def list_positions(self) -> List[StoragePosition]:
        return position_crud.get_positions(self.db)

    def get_position(self, position_id: str) -> Optional[StoragePosition]:
        return position_crud.get_position(self.db, position_id)

    def update_position(self, position_id: str, values: Dict[str, Any]) -> StoragePosition:
        return position_crud.update_position(self.db, position_id, values)

    # Kanban pallets

    def list_pallets(self) -> List[KanbanPallet]:
        return pallet_crud.get_pallets(self.db)

    def get_pallet(self, pallet_id: str) -> Optional[KanbanPallet]:
        return pallet_crud.get_pallet(self.db, pallet_id)

    def insert_pallet(self, values: Dict[str, Any]) -> KanbanPallet:
        return pallet_crud.create_pallet(self.db, values)

    def update_pallet(self, pallet_id: str, values: Dict[str, Any]) -> KanbanPallet:
        return pallet_crud.update_pallet(self.db, pallet_id, values)

    def delete_pallet(self, pallet_id: str) -> None:
        pallet_crud.delete_pallet(self.db, pallet_id)

    # Movement ledger

    def insert_movement(self, values: Dict[str, Any]) -> MovementHistory:
        return movement_crud.create_movement(self.db, values)

    def list_movements(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[MovementHistory]:
        return movement_crud.get_movements(self.db, start=start, end=end)


class SqlStorageProvider(StorageProvider):
    """Opens one session per request, closed when the request is done."""

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    def initialize(self) -> None:
        engine = self.session_factory.kw["bind"]
        create_database_if_not_exists(engine.url.render_as_string(hide_password=False))
        init_db(engine)

    @contextmanager
    def open(self):
        db = self.session_factory()
        try:
            yield SqlStorage(db)
        finally:
            db.close()
