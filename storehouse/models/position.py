from sqlalchemy import Column, String, Integer, Boolean, Date, Text, Enum
from storehouse.database import Base
import enum

BLOCKS = (1, 2)
LEVELS = (1, 2, 3, 4, 5)


class Slot(enum.Enum):
    AP1 = "AP1"
    AP2 = "AP2"


class StorageType(enum.Enum):
    BULK = "bulk"
    PALLET = "pallet"


# Columns wiped together when a position is cleared
PRODUCT_FIELDS = (
    "product_name",
    "product_code",
    "client_name",
    "quantity",
    "storage_type",
    "entry_date",
    "address",
    "notes",
)


def position_id(block: int, level: int, slot: Slot) -> str:
    return f"pos-{block}-{level}-{slot.value}"


def location_label(block: int, level: int, slot: Slot) -> str:
    return f"Block {block}, Level {level}, {slot.value}"


class StoragePosition(Base):
    __tablename__ = "storage_positions"

    id = Column(String(32), primary_key=True, index=True)
    block = Column(Integer, nullable=False, index=True)
    level = Column(Integer, nullable=False)
    slot = Column(Enum(Slot), nullable=False)

    product_name = Column(String(255), nullable=True)
    product_code = Column(String(255), nullable=True, index=True)
    client_name = Column(String(255), nullable=True)
    quantity = Column(Integer, nullable=True)
    storage_type = Column(Enum(StorageType), nullable=True)
    entry_date = Column(Date, nullable=True)
    address = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    is_empty = Column(Boolean, default=True, nullable=False)

    @property
    def location(self) -> str:
        return location_label(self.block, self.level, self.slot)

    def __repr__(self):
        return f"<StoragePosition(id='{self.id}', is_empty={self.is_empty})>"
