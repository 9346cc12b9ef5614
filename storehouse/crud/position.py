from sqlalchemy.orm import Session
from sqlalchemy import asc, desc
from storehouse.models.position import StoragePosition
from typing import List, Optional, Dict, Any


def get_position(db: Session, position_id: str) -> Optional[StoragePosition]:
    return db.query(StoragePosition).filter(StoragePosition.id == position_id).first()


def get_positions(db: Session) -> List[StoragePosition]:
    # Higher shelf levels list first within a block
    return db.query(StoragePosition)\
        .order_by(asc(StoragePosition.block), desc(StoragePosition.level), asc(StoragePosition.slot))\
        .all()


def get_position_count(db: Session) -> int:
    return db.query(StoragePosition).count()


def create_positions(db: Session, rows: List[Dict[str, Any]]) -> None:
    db.add_all([StoragePosition(**row) for row in rows])
    db.flush()


def update_position(db: Session, position_id: str, values: Dict[str, Any]) -> Optional[StoragePosition]:
    db_position = get_position(db, position_id)
    if db_position:
        for key, value in values.items():
            setattr(db_position, key, value)
        db.flush()
    return db_position
