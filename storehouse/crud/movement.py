from sqlalchemy.orm import Session
from sqlalchemy import desc, and_
from typing import List, Optional, Dict, Any
from datetime import datetime
from storehouse.models.movement import MovementHistory


def create_movement(db: Session, values: Dict[str, Any]) -> MovementHistory:
    """Insert a ledger row. Flushed, not committed: the caller's unit of work owns the commit."""
    db_movement = MovementHistory(**values)
    db.add(db_movement)
    db.flush()
    return db_movement


def get_movements(
    db: Session,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None
) -> List[MovementHistory]:
    query = db.query(MovementHistory)
    conditions = []

    if start is not None:
        conditions.append(MovementHistory.timestamp >= start)
    if end is not None:
        conditions.append(MovementHistory.timestamp <= end)

    if conditions:
        query = query.filter(and_(*conditions))

    return query.order_by(desc(MovementHistory.timestamp)).all()
