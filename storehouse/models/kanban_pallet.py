from sqlalchemy import Column, String, Integer, Date, Text, Enum
from storehouse.database import Base
from storehouse.models.position import StorageType
import enum
import uuid


class KanbanStage(enum.Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"

    @property
    def label(self) -> str:
        return f"Kanban {self.value.capitalize()}"


class KanbanPallet(Base):
    __tablename__ = "kanban_pallets"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    stage = Column(Enum(KanbanStage), nullable=False, index=True)

    product_name = Column(String(255), nullable=False)
    product_code = Column(String(255), nullable=False, index=True)
    client_name = Column(String(255), nullable=True)
    quantity = Column(Integer, nullable=False)
    storage_type = Column(Enum(StorageType), nullable=True)
    entry_date = Column(Date, nullable=False)
    address = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    def __repr__(self):
        return f"<KanbanPallet(id='{self.id}', stage='{self.stage.value}', product='{self.product_code}')>"
