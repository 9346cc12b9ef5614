from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import date
from storehouse.models.kanban_pallet import KanbanStage
from storehouse.models.position import StorageType
from storehouse.schemas.position import ProductFields
from storehouse.validators import (
    non_empty_string_validator,
    positive_int_validator,
    blank_to_none_validator,
    not_null_validator
)


class KanbanPalletCreate(ProductFields):
    # No default: the caller always picks the column
    stage: KanbanStage


class KanbanPalletUpdate(BaseModel):
    stage: Optional[KanbanStage] = None
    product_name: Optional[str] = None
    product_code: Optional[str] = None
    quantity: Optional[int] = None
    entry_date: Optional[date] = None
    client_name: Optional[str] = None
    storage_type: Optional[StorageType] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator('stage')
    @classmethod
    def validate_stage(cls, v: Optional[KanbanStage]) -> KanbanStage:
        return not_null_validator('Stage')(v)

    @field_validator('product_name')
    @classmethod
    def validate_product_name(cls, v: Optional[str]) -> str:
        return non_empty_string_validator('Product name')(not_null_validator('Product name')(v))

    @field_validator('product_code')
    @classmethod
    def validate_product_code(cls, v: Optional[str]) -> str:
        return non_empty_string_validator('Product code')(not_null_validator('Product code')(v))

    @field_validator('quantity')
    @classmethod
    def validate_quantity(cls, v: Optional[int]) -> int:
        return positive_int_validator('Quantity')(not_null_validator('Quantity')(v))

    @field_validator('entry_date')
    @classmethod
    def validate_entry_date(cls, v: Optional[date]) -> date:
        return not_null_validator('Entry date')(v)

    @field_validator('client_name', 'address', 'notes')
    @classmethod
    def validate_optional_text(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none_validator()(v)


class KanbanPalletResponse(BaseModel):
    id: str
    stage: KanbanStage
    product_name: str
    product_code: str
    client_name: Optional[str] = None
    quantity: int
    storage_type: Optional[StorageType] = None
    entry_date: date
    address: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class KanbanPalletRemoved(BaseModel):
    success: bool = True
