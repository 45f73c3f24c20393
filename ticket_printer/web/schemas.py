"""
Pydantic schemas for the Ticket Printer API (v1).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_ID_LEN = 64
MAX_PIN_LEN = 32


def _has_control_chars(s: str) -> bool:
    return any(ord(c) < 32 or ord(c) == 127 for c in s)


class PrintRequest(BaseModel):
    """A ticket that was just created and should be printed."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    ticket_id: str = Field(alias="id", min_length=1, max_length=MAX_ID_LEN)
    pin: str = Field(min_length=1, max_length=MAX_PIN_LEN)

    @field_validator("ticket_id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        # IDs sometimes arrive as JSON numbers; PINs must stay strings to keep leading zeros
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("ticket_id", "pin")
    @classmethod
    def _no_control_chars(cls, v: str) -> str:
        if _has_control_chars(v):
            raise ValueError("must not contain control characters")
        return v


__all__ = ["MAX_ID_LEN", "MAX_PIN_LEN", "PrintRequest"]
