from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.models.project import ProjectStatus
from app.schemas.common import (
    MAX_AMOUNT,
    MAX_HOURS,
    AssignedResource,
    ResourceAssignment,
    blank_to_none,
    ensure_unique_resources,
)


class ProjectBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    client_id: int
    start_date: date
    end_date: date
    estimated_hours: float = Field(ge=0, le=MAX_HOURS, allow_inf_nan=False)
    estimated_cost: float = Field(default=0, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    budgeted_cost: Optional[float] = Field(default=None, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    actual_cost: float = Field(default=0, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PENDING

    @field_validator("budgeted_cost", "description", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("estimated_cost", "actual_cost", mode="before")
    @classmethod
    def empty_as_zero(cls, v):
        v = blank_to_none(v)
        return 0 if v is None else v

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class ProjectCreate(ProjectBase):
    resources: List[ResourceAssignment] = []

    @field_validator("resources")
    @classmethod
    def unique_resources(cls, v):
        return ensure_unique_resources(v)


class ProjectUpdate(ProjectCreate):
    """Full replacement: scalar fields and the complete resource membership."""


class ActualCostUpdate(BaseModel):
    actual_cost: float = Field(ge=0, le=MAX_AMOUNT, allow_inf_nan=False)


class ProjectInDBBase(ProjectBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Project(ProjectInDBBase):
    client_name: Optional[str] = None
    resources: List[AssignedResource] = []


class ProjectWithDetails(Project):
    actual_hours: float = 0
