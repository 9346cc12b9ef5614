from sqlalchemy import Column, String, Integer, Enum, DateTime, Text, event
from storehouse.database import Base
from storehouse.exceptions import InvariantViolation
from datetime import datetime, timezone
import enum
import uuid


class MovementType(enum.Enum):
    ENTRY = "entry"
    EXIT = "exit"
    EDIT = "edit"
    KANBAN_ADD = "kanban_add"
    KANBAN_MOVE = "kanban_move"
    KANBAN_EXPEDITE = "kanban_expedite"


class MovementHistory(Base):
    __tablename__ = "movement_history"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    timestamp = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), index=True)
    movement_type = Column(Enum(MovementType), nullable=False, index=True)

    # Snapshot of the product at the time of the movement
    product_name = Column(String(255), nullable=False, index=True)
    product_code = Column(String(255), nullable=False, index=True)
    client_name = Column(String(255), nullable=True)
    quantity = Column(Integer, nullable=False)

    location = Column(String(255), nullable=False)
    previous_location = Column(String(255), nullable=True)
    details = Column(Text, nullable=True)

    def __repr__(self):
        return f"<MovementHistory(id='{self.id}', type='{self.movement_type.value}', product='{self.product_code}')>"


# The ledger is append-only
@event.listens_for(MovementHistory, "before_update")
def reject_history_update(mapper, connection, target):
    raise InvariantViolation("Movement history entries cannot be modified", entry_id=target.id)


@event.listens_for(MovementHistory, "before_delete")
def reject_history_delete(mapper, connection, target):
    raise InvariantViolation("Movement history entries cannot be deleted", entry_id=target.id)
