from pydantic import BaseModel, ValidationError
from typing import Optional
from storehouse.exceptions import ValidationFailure


def positive_int_validator(field_name: str = "Value"):
    def validator(v: int) -> int:
        if v <= 0:
            raise ValueError(f'{field_name} must be greater than 0')
        return v
    return validator


def non_empty_string_validator(field_name: str = "Value"):
    def validator(v: str) -> str:
        if not v or len(v.strip()) == 0:
            raise ValueError(f'{field_name} cannot be empty')
        return v.strip()
    return validator


def blank_to_none_validator():
    def validator(v: Optional[str]) -> Optional[str]:
        if v is None or len(v.strip()) == 0:
            return None
        return v.strip()
    return validator


def not_null_validator(field_name: str = "Value"):
    # Partial updates may omit a required field but never send it as null
    def validator(v):
        if v is None:
            raise ValueError(f'{field_name} cannot be null')
        return v
    return validator


def validate_payload(schema, data, partial: bool = False):
    """
    Validate ``data`` (a dict or another pydantic model) against ``schema``.

    Raises ValidationFailure listing every rejected field, so callers outside
    the HTTP layer get the same errors as request bodies do.
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=partial)
    try:
        return schema.model_validate(data or {})
    except ValidationError as exc:
        raise ValidationFailure.from_pydantic(exc)
