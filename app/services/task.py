import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from app.core.database import Database
from app.core.exceptions import NotFoundError
from app.models.task import Task, TaskStatus, TaskPriority
from app.models.task_resource import TaskResource
from app.schemas.common import MAX_HOURS, ResourceAssignment
from app.schemas.task import Task as TaskSchema, TaskCreate, TaskUpdate, TaskWithDetails
from app.services.validation import require_non_negative, validate_assignments, validate_payload

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, database: Database):
        self.database = database

    @staticmethod
    def _insert_assignments(db: Session, task_id: int, assignments: List[ResourceAssignment]) -> None:
        # assigned_hours is optional metadata on task assignments, stored as given
        db.add_all([
            TaskResource(
                task_id=task_id,
                resource_id=assignment.id,
                assigned_hours=assignment.assigned_hours,
            )
            for assignment in assignments
        ])
        db.flush()

    @staticmethod
    def _replace_assignments(db: Session, task_id: int, assignments: List[ResourceAssignment]) -> None:
        db.query(TaskResource).filter(TaskResource.task_id == task_id).delete(synchronize_session=False)
        TaskService._insert_assignments(db, task_id, assignments)

    def get_task(self, task_id: int) -> Optional[TaskWithDetails]:
        """Get task by ID with project name and assigned resources"""
        with self.database.session() as db:
            task = (
                db.query(Task)
                .options(
                    joinedload(Task.project),
                    selectinload(Task.resource_assignments).joinedload(TaskResource.resource),
                )
                .filter(Task.id == task_id)
                .first()
            )
            return TaskWithDetails.model_validate(task) if task else None

    def get_tasks(
        self,
        skip: int = 0,
        limit: Optional[int] = 100,
        project_id: Optional[int] = None,
        resource_id: Optional[int] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
    ) -> List[TaskSchema]:
        """Get all tasks with optional filtering, ordered by start date"""
        with self.database.session() as db:
            query = db.query(Task).options(joinedload(Task.project))

            if project_id:
                query = query.filter(Task.project_id == project_id)
            if resource_id:
                query = query.join(TaskResource, TaskResource.task_id == Task.id).filter(
                    TaskResource.resource_id == resource_id
                )
            if status:
                query = query.filter(Task.status == status)
            if priority:
                query = query.filter(Task.priority == priority)

            tasks = query.order_by(Task.start_date, Task.id).offset(skip).limit(limit).all()
            return [TaskSchema.model_validate(t) for t in tasks]

    def get_project_tasks(self, project_id: int) -> List[TaskSchema]:
        """Get all tasks for a specific project"""
        return self.get_tasks(project_id=project_id, limit=None)

    def get_resource_tasks(self, resource_id: int) -> List[TaskSchema]:
        """Get all tasks a resource is assigned to"""
        return self.get_tasks(resource_id=resource_id, limit=None)

    def create_task(self, data, resource_ids=None) -> TaskWithDetails:
        """Create a task together with its resource assignments"""
        payload = validate_payload(TaskCreate, data)
        assignments = payload.resources if resource_ids is None else validate_assignments(resource_ids)

        with self.database.transaction() as db:
            db_task = Task(**payload.model_dump(exclude={"resources"}))
            db.add(db_task)
            db.flush()
            self._insert_assignments(db, db_task.id, assignments)
            task_id = db_task.id

        logger.info("Created task %s in project %s with %d resources", task_id, payload.project_id, len(assignments))
        return self.get_task(task_id)

    def update_task(self, task_id: int, data, resource_ids=None) -> TaskWithDetails:
        """Update task fields and replace its full resource membership"""
        payload = validate_payload(TaskUpdate, data)
        assignments = payload.resources if resource_ids is None else validate_assignments(resource_ids)

        with self.database.transaction() as db:
            db_task = db.get(Task, task_id, with_for_update=True)
            if db_task is None:
                raise NotFoundError("Task", task_id)

            update_data = payload.model_dump(exclude_unset=True, exclude={"resources"})
            for field, value in update_data.items():
                setattr(db_task, field, value)

            self._replace_assignments(db, task_id, assignments)

        logger.info("Updated task %s, %d resources assigned", task_id, len(assignments))
        return self.get_task(task_id)

    def update_hours_spent(self, task_id: int, hours_spent) -> TaskWithDetails:
        """Update only the hours spent on a task"""
        value = require_non_negative("hours_spent", hours_spent, MAX_HOURS)

        with self.database.transaction() as db:
            db_task = db.get(Task, task_id, with_for_update=True)
            if db_task is None:
                raise NotFoundError("Task", task_id)
            db_task.hours_spent = value

        logger.info("Task %s hours spent set to %s", task_id, value)
        return self.get_task(task_id)

    def delete_task(self, task_id: int) -> bool:
        """Delete task and its resource assignments"""
        with self.database.transaction() as db:
            db_task = db.get(Task, task_id)
            if db_task is None:
                raise NotFoundError("Task", task_id)
            db.delete(db_task)

        logger.info("Deleted task %s", task_id)
        return True

