from sqlalchemy.orm import Session
from storehouse.models.kanban_pallet import KanbanPallet
from typing import List, Optional, Dict, Any


def get_pallet(db: Session, pallet_id: str) -> Optional[KanbanPallet]:
    return db.query(KanbanPallet).filter(KanbanPallet.id == pallet_id).first()


def get_pallets(db: Session) -> List[KanbanPallet]:
    return db.query(KanbanPallet).all()


def create_pallet(db: Session, values: Dict[str, Any]) -> KanbanPallet:
    db_pallet = KanbanPallet(**values)
    db.add(db_pallet)
    db.flush()
    return db_pallet


def update_pallet(db: Session, pallet_id: str, values: Dict[str, Any]) -> Optional[KanbanPallet]:
    db_pallet = get_pallet(db, pallet_id)
    if db_pallet:
        for key, value in values.items():
            setattr(db_pallet, key, value)
        db.flush()
    return db_pallet


def delete_pallet(db: Session, pallet_id: str) -> bool:
    db_pallet = get_pallet(db, pallet_id)
    if db_pallet:
        db.delete(db_pallet)
        db.flush()
        return True
    return False
