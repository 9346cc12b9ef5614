"""
Kanban expedition queue.

Pallets sit in one of three stages. The store accepts any stage change,
backwards included; only the ledger records which way a pallet went.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Union

from pydantic import BaseModel

from storehouse.exceptions import NotFoundError
from storehouse.models.kanban_pallet import KanbanPallet, KanbanStage
from storehouse.models.movement import MovementType
from storehouse.schemas.kanban_pallet import KanbanPalletCreate, KanbanPalletUpdate
from storehouse.schemas.position import ProductFields
from storehouse.services.ledger import MovementLedger, describe_changes
from storehouse.storage.base import Storage
from storehouse.validators import validate_payload

logger = logging.getLogger(__name__)

PALLET_FIELDS = (
    "stage",
    "product_name",
    "product_code",
    "client_name",
    "quantity",
    "storage_type",
    "entry_date",
    "address",
    "notes",
)


def pallet_snapshot(pallet: KanbanPallet) -> Dict[str, Any]:
    return {field: getattr(pallet, field) for field in PALLET_FIELDS}


class KanbanQueue:

    def __init__(
        self,
        storage: Storage,
        ledger: MovementLedger,
        clock: Callable[[], datetime],
        log_plain_edits: bool = False
    ):
        self.storage = storage
        self.ledger = ledger
        self.clock = clock
        # Off by default: only stage changes are logged, unlike position edits
        self.log_plain_edits = log_plain_edits

    def list(self) -> List[KanbanPallet]:
        return self.storage.list_pallets()

    def get(self, pallet_id: str) -> KanbanPallet:
        pallet = self.storage.get_pallet(pallet_id)
        if pallet is None:
            raise NotFoundError("pallet_id", "Kanban pallet not found", pallet_id=pallet_id)
        return pallet

    def add(self, stage: Union[KanbanStage, str], data: Union[ProductFields, Dict[str, Any]]) -> KanbanPallet:
        payload = data.model_dump() if isinstance(data, BaseModel) else dict(data or {})
        payload["stage"] = stage
        fields = validate_payload(KanbanPalletCreate, payload)
        values = fields.model_dump()

        with self.storage.atomic():
            pallet = self.storage.insert_pallet(values)
            self.ledger.append(
                timestamp=self.clock(),
                movement_type=MovementType.KANBAN_ADD,
                product_name=values["product_name"],
                product_code=values["product_code"],
                client_name=values["client_name"],
                quantity=values["quantity"],
                location=fields.stage.label,
            )

        logger.info(f"Added kanban pallet {pallet.id} to {fields.stage.value}")
        return pallet

    def update(self, pallet_id: str, data: Union[KanbanPalletUpdate, Dict[str, Any]]) -> KanbanPallet:
        """
        Apply a partial update. A changed stage is a move and is always logged;
        other edits are logged only when ``log_plain_edits`` is on.
        """
        changes = validate_payload(KanbanPalletUpdate, data, partial=True).model_dump(exclude_unset=True)
        pallet = self.get(pallet_id)

        before = pallet_snapshot(pallet)
        after = {**before, **changes}
        old_stage = KanbanStage(before["stage"])
        new_stage = KanbanStage(after["stage"])
        moved = new_stage != old_stage

        with self.storage.atomic():
            updated = self.storage.update_pallet(pallet_id, changes)
            if moved:
                self.ledger.append(
                    timestamp=self.clock(),
                    movement_type=MovementType.KANBAN_MOVE,
                    product_name=after["product_name"],
                    product_code=after["product_code"],
                    client_name=after["client_name"],
                    quantity=after["quantity"],
                    location=new_stage.label,
                    previous_location=old_stage.label,
                    details=f"Moved from {old_stage.label} to {new_stage.label}",
                )
            elif self.log_plain_edits:
                details = describe_changes(before, after, PALLET_FIELDS)
                if details:
                    self.ledger.append(
                        timestamp=self.clock(),
                        movement_type=MovementType.EDIT,
                        product_name=after["product_name"],
                        product_code=after["product_code"],
                        client_name=after["client_name"],
                        quantity=after["quantity"],
                        location=new_stage.label,
                        details=details,
                    )

        if moved:
            logger.info(f"Moved kanban pallet {pallet_id} from {old_stage.value} to {new_stage.value}")
        else:
            logger.info(f"Updated kanban pallet {pallet_id}")
        return updated

    def remove(self, pallet_id: str) -> bool:
        """Take a pallet off the queue, whether it shipped or was entered by mistake."""
        pallet = self.get(pallet_id)
        snapshot = pallet_snapshot(pallet)
        stage = KanbanStage(snapshot["stage"])

        with self.storage.atomic():
            self.ledger.append(
                timestamp=self.clock(),
                movement_type=MovementType.KANBAN_EXPEDITE,
                product_name=snapshot["product_name"],
                product_code=snapshot["product_code"],
                client_name=snapshot["client_name"],
                quantity=snapshot["quantity"],
                location=stage.label,
                details=f"Removed from {stage.label}",
            )
            self.storage.delete_pallet(pallet_id)

        logger.info(f"Removed kanban pallet {pallet_id} from {stage.value}")
        return True
