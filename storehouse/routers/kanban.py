from fastapi import APIRouter, Depends, status
from typing import List
from storehouse.dependencies import get_warehouse
from storehouse.schemas.kanban_pallet import (
    KanbanPalletCreate,
    KanbanPalletUpdate,
    KanbanPalletResponse,
    KanbanPalletRemoved
)
from storehouse.services.warehouse import Warehouse

router = APIRouter(
    prefix="/kanban",
    tags=["kanban"]
)


@router.get("/", response_model=List[KanbanPalletResponse])
def get_pallets(warehouse: Warehouse = Depends(get_warehouse)):
    """Get all kanban pallets; grouping by stage is left to the client"""
    return warehouse.kanban.list()


@router.get("/{pallet_id}", response_model=KanbanPalletResponse)
def get_pallet(pallet_id: str, warehouse: Warehouse = Depends(get_warehouse)):
    return warehouse.kanban.get(pallet_id)


@router.post("/", response_model=KanbanPalletResponse, status_code=status.HTTP_201_CREATED)
def create_pallet(pallet: KanbanPalletCreate, warehouse: Warehouse = Depends(get_warehouse)):
    """Add a pallet to the given stage"""
    return warehouse.kanban.add(pallet.stage, pallet.model_dump(exclude={"stage"}))


@router.patch("/{pallet_id}", response_model=KanbanPalletResponse)
def update_pallet(pallet_id: str, pallet: KanbanPalletUpdate, warehouse: Warehouse = Depends(get_warehouse)):
    """Edit a pallet or move it to another stage"""
    return warehouse.kanban.update(pallet_id, pallet)


@router.delete("/{pallet_id}", response_model=KanbanPalletRemoved)
def remove_pallet(pallet_id: str, warehouse: Warehouse = Depends(get_warehouse)):
    """Expedite or delete a pallet"""
    warehouse.kanban.remove(pallet_id)
    return KanbanPalletRemoved(success=True)
