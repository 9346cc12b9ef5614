from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import date
from storehouse.models.position import Slot, StorageType
from storehouse.validators import (
    non_empty_string_validator,
    positive_int_validator,
    blank_to_none_validator
)


class ProductFields(BaseModel):
    product_name: str
    product_code: str
    quantity: int
    entry_date: date
    client_name: Optional[str] = None
    storage_type: Optional[StorageType] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator('product_name')
    @classmethod
    def validate_product_name(cls, v: str) -> str:
        return non_empty_string_validator('Product name')(v)

    @field_validator('product_code')
    @classmethod
    def validate_product_code(cls, v: str) -> str:
        return non_empty_string_validator('Product code')(v)

    @field_validator('quantity')
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        return positive_int_validator('Quantity')(v)

    @field_validator('client_name', 'address', 'notes')
    @classmethod
    def validate_optional_text(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none_validator()(v)


class PositionFill(ProductFields):
    pass


class PositionResponse(BaseModel):
    id: str
    block: int
    level: int
    slot: Slot
    location: str
    product_name: Optional[str] = None
    product_code: Optional[str] = None
    client_name: Optional[str] = None
    quantity: Optional[int] = None
    storage_type: Optional[StorageType] = None
    entry_date: Optional[date] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    is_empty: bool

    class Config:
        from_attributes = True
