from fastapi import APIRouter, Depends
from typing import List
from storehouse.dependencies import get_warehouse
from storehouse.schemas.position import PositionFill, PositionResponse
from storehouse.services.warehouse import Warehouse

router = APIRouter(
    prefix="/positions",
    tags=["positions"]
)


@router.get("/", response_model=List[PositionResponse])
def get_positions(warehouse: Warehouse = Depends(get_warehouse)):
    """Get all 20 positions, higher levels first within each block"""
    return warehouse.positions.list()


@router.get("/{position_id}", response_model=PositionResponse)
def get_position(position_id: str, warehouse: Warehouse = Depends(get_warehouse)):
    """Get position by ID"""
    return warehouse.positions.get(position_id)


@router.patch("/{position_id}", response_model=PositionResponse)
def fill_position(position_id: str, product: PositionFill, warehouse: Warehouse = Depends(get_warehouse)):
    """Store a product in a position (entry) or replace the one already there (edit)"""
    return warehouse.positions.fill(position_id, product)


@router.delete("/{position_id}", response_model=PositionResponse)
def clear_position(position_id: str, warehouse: Warehouse = Depends(get_warehouse)):
    """Empty a position"""
    return warehouse.positions.clear(position_id)
