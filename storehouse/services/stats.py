from typing import Iterable

from storehouse.models.kanban_pallet import KanbanPallet, KanbanStage
from storehouse.models.position import StoragePosition
from storehouse.schemas.stats import WarehouseStats
from storehouse.services.positions import TOTAL_POSITIONS


def compute_stats(positions: Iterable[StoragePosition], pallets: Iterable[KanbanPallet]) -> WarehouseStats:
    """Counts derived from the current collections; nothing is cached between calls."""
    occupied = sum(1 for p in positions if not p.is_empty)

    stages = {stage: 0 for stage in KanbanStage}
    for pallet in pallets:
        stages[KanbanStage(pallet.stage)] += 1

    return WarehouseStats(
        total_positions=TOTAL_POSITIONS,
        occupied_positions=occupied,
        free_positions=TOTAL_POSITIONS - occupied,
        kanban_green=stages[KanbanStage.GREEN],
        kanban_yellow=stages[KanbanStage.YELLOW],
        kanban_red=stages[KanbanStage.RED],
    )
