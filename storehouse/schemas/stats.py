from pydantic import BaseModel


class WarehouseStats(BaseModel):
    total_positions: int
    occupied_positions: int
    free_positions: int
    kanban_green: int
    kanban_yellow: int
    kanban_red: int
