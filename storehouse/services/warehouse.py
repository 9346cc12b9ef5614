from datetime import datetime
from typing import Callable, Optional

from storehouse.schemas.stats import WarehouseStats
from storehouse.services.kanban import KanbanQueue
from storehouse.services.ledger import MovementLedger, utc_now
from storehouse.services.positions import PositionGrid
from storehouse.services.stats import compute_stats
from storehouse.storage.base import Storage


class Warehouse:
    """
    Position grid, kanban queue and movement ledger over one storage.

    Built explicitly by whoever serves requests; there is no module-level
    instance.
    """

    def __init__(
        self,
        storage: Storage,
        log_plain_kanban_edits: bool = False,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.storage = storage
        self.clock = clock or utc_now
        self.ledger = MovementLedger(storage)
        self.positions = PositionGrid(storage, self.ledger, self.clock)
        self.kanban = KanbanQueue(storage, self.ledger, self.clock, log_plain_edits=log_plain_kanban_edits)

    def initialize(self) -> int:
        return self.positions.seed()

    def stats(self) -> WarehouseStats:
        return compute_stats(self.storage.list_positions(), self.storage.list_pallets())
