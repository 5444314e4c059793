"""Read-side aggregates computed from committed rows.

Nothing in this module writes. Calling any of these twice with no write in
between returns the same value, and "no data" yields 0 or an empty list
rather than an error.
"""
from datetime import date
from typing import List, Optional, Union

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.database import Database
from app.models.project import Project
from app.models.project_resource import ProjectResource
from app.models.resource import Resource
from app.models.task import Task
from app.schemas.metrics import DateRange, ProjectSummary
from app.schemas.task import Task as TaskSchema
from app.services.validation import validate_payload


def sum_hours_spent(db: Session, project_id: int) -> float:
    total = (
        db.query(func.coalesce(func.sum(Task.hours_spent), 0))
        .filter(Task.project_id == project_id)
        .scalar()
    )
    return float(total or 0)


def sum_resource_cost(db: Session, project_id: int) -> float:
    total = (
        db.query(func.coalesce(func.sum(Resource.hourly_rate * ProjectResource.assigned_hours), 0))
        .select_from(ProjectResource)
        .join(Resource, Resource.id == ProjectResource.resource_id)
        .filter(ProjectResource.project_id == project_id)
        .scalar()
    )
    return float(total or 0)


def budget_variance(actual_cost: Optional[float], budgeted_cost: Optional[float]) -> Optional[float]:
    """Signed percentage deviation of actual from budgeted cost.

    Positive means over budget. ``None`` when no actual cost has been
    recorded yet, or when there is no budget to compare against.
    """
    if not actual_cost:
        return None
    if not budgeted_cost:
        return None
    return (float(actual_cost) - float(budgeted_cost)) * 100 / float(budgeted_cost)


class MetricsService:
    def __init__(self, database: Database):
        self.database = database

    def actual_hours_for_project(self, project_id: int) -> float:
        """Sum of hours spent across the project's tasks"""
        with self.database.session() as db:
            return sum_hours_spent(db, project_id)

    def resource_cost_for_project(self, project_id: int) -> float:
        """Sum of hourly rate x assigned hours over the project's resources"""
        with self.database.session() as db:
            return sum_resource_cost(db, project_id)

    def tasks_in_date_range(
        self,
        start: Union[date, str],
        end: Union[date, str],
    ) -> List[TaskSchema]:
        """Tasks whose [start_date, end_date] overlaps [start, end], bounds inclusive"""
        window = validate_payload(DateRange, {"start": start, "end": end})

        with self.database.session() as db:
            tasks = (
                db.query(Task)
                .options(joinedload(Task.project))
                .filter(Task.start_date <= window.end, Task.end_date >= window.start)
                .order_by(Task.start_date, Task.id)
                .all()
            )
            return [TaskSchema.model_validate(t) for t in tasks]

    def project_summary(self, project_id: int) -> Optional[ProjectSummary]:
        """Hours and cost figures for one project, read in a single session"""
        with self.database.session() as db:
            project = db.get(Project, project_id)
            if project is None:
                return None

            actual_hours = sum_hours_spent(db, project_id)
            estimated_hours = float(project.estimated_hours or 0)
            return ProjectSummary(
                project_id=project.id,
                estimated_hours=estimated_hours,
                actual_hours=actual_hours,
                remaining_hours=max(estimated_hours - actual_hours, 0),
                resource_cost=sum_resource_cost(db, project_id),
                estimated_cost=float(project.estimated_cost or 0),
                budgeted_cost=project.budgeted_cost,
                actual_cost=float(project.actual_cost or 0),
                budget_variance=budget_variance(project.actual_cost, project.budgeted_cost),
            )
