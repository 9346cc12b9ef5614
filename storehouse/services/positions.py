"""
Position grid: the 20 fixed pallet-rack slots.

Positions are seeded once and never created or destroyed afterwards; filling
and clearing them are the only state changes, and each one that changes
anything writes a ledger entry in the same unit of work.
"""

import logging
from typing import Any, Callable, Dict, List, Union
from datetime import datetime

from storehouse.exceptions import NotFoundError
from storehouse.models.movement import MovementType
from storehouse.models.position import (
    BLOCKS,
    LEVELS,
    PRODUCT_FIELDS,
    Slot,
    StoragePosition,
    location_label,
    position_id,
)
from storehouse.schemas.position import PositionFill
from storehouse.services.ledger import MovementLedger, describe_changes
from storehouse.storage.base import Storage
from storehouse.validators import validate_payload

logger = logging.getLogger(__name__)

TOTAL_POSITIONS = len(BLOCKS) * len(LEVELS) * len(Slot)


def initial_position_rows() -> List[Dict[str, Any]]:
    rows = []
    for block in BLOCKS:
        for level in LEVELS:
            for slot in Slot:
                row = {
                    "id": position_id(block, level, slot),
                    "block": block,
                    "level": level,
                    "slot": slot,
                    "is_empty": True,
                }
                row.update({field: None for field in PRODUCT_FIELDS})
                rows.append(row)
    return rows


def product_snapshot(record) -> Dict[str, Any]:
    return {field: getattr(record, field) for field in PRODUCT_FIELDS}


class PositionGrid:

    def __init__(self, storage: Storage, ledger: MovementLedger, clock: Callable[[], datetime]):
        self.storage = storage
        self.ledger = ledger
        self.clock = clock

    def seed(self) -> int:
        """Materialize the grid if it has never been created. Returns how many positions were added."""
        with self.storage.atomic():
            if self.storage.count_positions() > 0:
                return 0
            rows = initial_position_rows()
            self.storage.insert_positions(rows)
        logger.info(f"Seeded {len(rows)} storage positions")
        return len(rows)

    def list(self) -> List[StoragePosition]:
        return self.storage.list_positions()

    def get(self, position_id: str) -> StoragePosition:
        position = self.storage.get_position(position_id)
        if position is None:
            raise NotFoundError("position_id", "Position not found", position_id=position_id)
        return position

    def fill(self, position_id: str, data: Union[PositionFill, Dict[str, Any]]) -> StoragePosition:
        """
        Store a product in a position, replacing whatever was there.

        Logs ``entry`` when the position was empty and ``edit`` when it was
        already occupied.
        """
        fields = validate_payload(PositionFill, data)
        position = self.get(position_id)

        was_empty = position.is_empty
        before = product_snapshot(position)
        location = location_label(position.block, position.level, position.slot)

        values = fields.model_dump()
        values["is_empty"] = False

        with self.storage.atomic():
            updated = self.storage.update_position(position_id, values)
            self.ledger.append(
                timestamp=self.clock(),
                movement_type=MovementType.ENTRY if was_empty else MovementType.EDIT,
                product_name=values["product_name"],
                product_code=values["product_code"],
                client_name=values["client_name"],
                quantity=values["quantity"],
                location=location,
                details=None if was_empty else describe_changes(before, values, PRODUCT_FIELDS),
            )

        logger.info(f"{'Filled' if was_empty else 'Edited'} position {position_id} with '{values['product_code']}'")
        return updated

    def clear(self, position_id: str) -> StoragePosition:
        """Empty a position. Clearing an empty position changes nothing and logs nothing."""
        position = self.get(position_id)
        if position.is_empty:
            return position

        snapshot = product_snapshot(position)
        location = location_label(position.block, position.level, position.slot)

        values = {field: None for field in PRODUCT_FIELDS}
        values["is_empty"] = True

        with self.storage.atomic():
            cleared = self.storage.update_position(position_id, values)
            self.ledger.append(
                timestamp=self.clock(),
                movement_type=MovementType.EXIT,
                product_name=snapshot["product_name"],
                product_code=snapshot["product_code"],
                client_name=snapshot["client_name"],
                quantity=snapshot["quantity"],
                location=location,
                details="Position cleared",
            )

        logger.info(f"Cleared position {position_id} ('{snapshot['product_code']}')")
        return cleared
