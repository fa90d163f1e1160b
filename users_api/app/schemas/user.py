"""
Pydantic models for user data.

Defines schemas for creating, updating and reading users.  Field
constraints here are the only validation performed before a request
reaches the database; the table's CHECK constraints mirror them.
"""

from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

EFFICIENCY_MIN = 0
EFFICIENCY_MAX = 100

# Columns an update may touch, in statement order.
UPDATABLE_COLUMNS = ("full_name", "role", "efficiency")


def reject_bool(value: Any) -> Any:
    """Refuse JSON ``true``/``false`` where an integer is expected.

    pydantic's lax mode would otherwise read them as ``1`` and ``0``.
    """
    if isinstance(value, bool):
        raise ValueError("Efficiency must be a number between 0 and 100")
    return value


class UserBase(BaseModel):
    full_name: str = Field(..., min_length=1, examples=["Ada Lovelace"])
    role: str = Field(..., min_length=1, examples=["engineer"])
    efficiency: int = Field(..., ge=EFFICIENCY_MIN, le=EFFICIENCY_MAX, examples=[90])

    @field_validator("efficiency", mode="before")
    @classmethod
    def efficiency_not_bool(cls, value: Any) -> Any:
        return reject_bool(value)


class UserCreate(UserBase):
    """Schema for creating a user.  All fields are required."""


class UserUpdate(BaseModel):
    """Schema for a partial update.

    All fields are optional; only provided values will be updated.  An
    explicit ``null`` is treated the same as an omitted field.
    """

    full_name: Optional[str] = Field(None, min_length=1)
    role: Optional[str] = Field(None, min_length=1)
    efficiency: Optional[int] = Field(None, ge=EFFICIENCY_MIN, le=EFFICIENCY_MAX)

    @field_validator("efficiency", mode="before")
    @classmethod
    def efficiency_not_bool(cls, value: Any) -> Any:
        return reject_bool(value)

    def assignments(self) -> List[Tuple[str, Any]]:
        """Return the ``(column, value)`` pairs that were supplied."""
        pairs = []
        for column in UPDATABLE_COLUMNS:
            value = getattr(self, column)
            if value is not None:
                pairs.append((column, value))
        return pairs


class UserRead(UserBase):
    """Schema for reading a user from the API."""

    id: int

    model_config = {
        "from_attributes": True,
    }
