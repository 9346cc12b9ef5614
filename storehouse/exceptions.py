"""
Exceptions for the storehouse core.

Every error carries a structured code so the HTTP layer (or any other caller)
can tell a missing record apart from a rejected request.
"""

import re
from typing import Any, Dict, Iterable, List

_MESSAGE_PREFIXES = re.compile(
    r"^(value is not a valid|Value error,|Value error|type error,|type error|"
    r"none is not an allowed value|none is not allowed|not a valid)[:\s]*",
    flags=re.IGNORECASE,
)


class StorehouseError(Exception):
    """
    Base error with a code, a human-readable message and context data.

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    code = "STOREHOUSE_ERROR"

    def __init__(self, message: str, **data: Any):
        super().__init__(message)
        self.message = message
        self.data = data


class NotFoundError(StorehouseError):
    """The targeted position, pallet or entry does not exist."""

    code = "NOT_FOUND"

    def __init__(self, field: str, message: str, **data: Any):
        super().__init__(message, field=field, **data)
        self.field = field

    @property
    def detail(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


class ValidationFailure(StorehouseError):
    """One or more fields were rejected. Raised before anything is written."""

    code = "VALIDATION_FAILED"

    def __init__(self, errors: List[Dict[str, str]]):
        fields = ", ".join(e["field"] for e in errors) or "request"
        super().__init__(f"Invalid fields: {fields}", errors=errors)
        self.errors = errors

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationFailure":
        return cls(format_validation_errors(exc.errors()))

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationFailure":
        return cls([{"field": field, "message": message}])


class InvariantViolation(StorehouseError):
    """Internal defect, e.g. an incomplete ledger entry. Not recoverable."""

    code = "INVARIANT_VIOLATION"


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Turn pydantic error dicts into ``{"field", "message"}`` pairs."""
    formatted = []
    for err in errors:
        loc = tuple(err.get("loc", ()))
        # Remove "body" prefix if present
        if loc and loc[0] == "body":
            loc = loc[1:]
        field_name = ".".join(str(part) for part in loc)
        msg = _MESSAGE_PREFIXES.sub("", err.get("msg", ""))
        # If message contains a colon, take only the part after the colon
        if ":" in msg:
            msg = msg.split(":", 1)[1].strip()
        if msg.strip().lower() == "input should be a valid string":
            last_field = field_name.split(".")[-1] if field_name else "Field"
            msg = f"{last_field.capitalize()} cannot be empty"
        msg = msg.strip().rstrip(".")
        formatted.append({"field": field_name, "message": msg})
    return formatted
