from fastapi import APIRouter, Depends
from storehouse.dependencies import get_warehouse
from storehouse.schemas.stats import WarehouseStats
from storehouse.services.warehouse import Warehouse

router = APIRouter(
    prefix="/stats",
    tags=["stats"]
)


@router.get("/", response_model=WarehouseStats)
def get_stats(warehouse: Warehouse = Depends(get_warehouse)):
    return warehouse.stats()
