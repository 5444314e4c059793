from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def blank_to_none(value: Any) -> Any:
    """Empty strings coming from HTML forms mean "not set"."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Largest values the Numeric(10, 2) and Numeric(12, 2) columns can hold
MAX_HOURS = 99_999_999.99
MAX_RATE = MAX_HOURS
MAX_AMOUNT = 9_999_999_999.99


class ResourceAssignment(BaseModel):
    """One entry of a `resources` list in a project or task payload."""

    id: int = Field(validation_alias=AliasChoices("id", "resource_id"))
    assigned_hours: Optional[float] = Field(default=None, ge=0, le=MAX_HOURS, allow_inf_nan=False)

    @field_validator("assigned_hours", mode="before")
    @classmethod
    def normalize_hours(cls, v):
        return blank_to_none(v)


class AssignedResource(BaseModel):
    """A resource as seen through one of its assignment rows."""

    id: int = Field(validation_alias=AliasChoices("resource_id", "id"))
    name: str
    role: str
    hourly_rate: float
    assigned_hours: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


def ensure_unique_resources(assignments):
    seen = set()
    for assignment in assignments:
        if assignment.id in seen:
            raise ValueError(f"Resource {assignment.id} is listed more than once")
        seen.add(assignment.id)
    return assignments
