from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.models.task import TaskStatus, TaskPriority
from app.schemas.common import (
    MAX_HOURS,
    AssignedResource,
    ResourceAssignment,
    blank_to_none,
    ensure_unique_resources,
)


class TaskBase(BaseModel):
    project_id: int
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: date
    end_date: date
    estimated_hours: float = Field(ge=0, le=MAX_HOURS, allow_inf_nan=False)
    hours_spent: float = Field(default=0, ge=0, le=MAX_HOURS, allow_inf_nan=False)
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING

    @field_validator("description", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("hours_spent", mode="before")
    @classmethod
    def empty_as_zero(cls, v):
        v = blank_to_none(v)
        return 0 if v is None else v

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class TaskCreate(TaskBase):
    # Bare resource ids are accepted as well as {id, assigned_hours} objects
    resources: List[ResourceAssignment] = []

    @field_validator("resources", mode="before")
    @classmethod
    def expand_ids(cls, v):
        if isinstance(v, list):
            return [{"id": item} if isinstance(item, int) else item for item in v]
        return v

    @field_validator("resources")
    @classmethod
    def unique_resources(cls, v):
        return ensure_unique_resources(v)


class TaskUpdate(TaskCreate):
    """Full replacement: scalar fields and the complete resource membership."""


class HoursSpentUpdate(BaseModel):
    hours_spent: float = Field(ge=0, le=MAX_HOURS, allow_inf_nan=False)


class TaskInDBBase(TaskBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Task(TaskInDBBase):
    project_name: Optional[str] = None


class TaskWithDetails(Task):
    resources: List[AssignedResource] = []
