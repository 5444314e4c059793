from datetime import date
from typing import Optional

from pydantic import BaseModel, model_validator


class DateRange(BaseModel):
    start: date
    end: date

    @model_validator(mode="after")
    def check_order(self):
        if self.end < self.start:
            raise ValueError("End date must not be before start date")
        return self


class ProjectHours(BaseModel):
    project_id: int
    actual_hours: float


class ProjectSummary(BaseModel):
    project_id: int
    estimated_hours: float
    actual_hours: float
    remaining_hours: float
    resource_cost: float
    estimated_cost: float
    budgeted_cost: Optional[float] = None
    actual_cost: float
    budget_variance: Optional[float] = None  # percent, positive means over budget
