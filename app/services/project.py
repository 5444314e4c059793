import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from app.core.database import Database
from app.core.exceptions import NotFoundError
from app.models.project import Project, ProjectStatus
from app.models.project_resource import ProjectResource
from app.schemas.common import MAX_AMOUNT, ResourceAssignment
from app.schemas.project import (
    Project as ProjectSchema,
    ProjectCreate,
    ProjectUpdate,
    ProjectWithDetails,
)
from app.services.metrics import sum_hours_spent
from app.services.validation import require_non_negative, validate_assignments, validate_payload

logger = logging.getLogger(__name__)


class ProjectService:
    """Reads and atomic writes for projects and their resource assignments.

    Every write runs in a single transaction: the project row and its
    complete ProjectResource membership change together or not at all.
    """

    def __init__(self, database: Database):
        self.database = database

    @staticmethod
    def _query_with_details(db: Session):
        return db.query(Project).options(
            joinedload(Project.client),
            selectinload(Project.resource_assignments).joinedload(ProjectResource.resource),
        )

    @staticmethod
    def _insert_assignments(db: Session, project_id: int, assignments: List[ResourceAssignment]) -> None:
        db.add_all([
            ProjectResource(
                project_id=project_id,
                resource_id=assignment.id,
                assigned_hours=assignment.assigned_hours or 0,
            )
            for assignment in assignments
        ])
        db.flush()

    @staticmethod
    def _replace_assignments(db: Session, project_id: int, assignments: List[ResourceAssignment]) -> None:
        # Delete-then-reinsert: the submitted list is the new membership
        db.query(ProjectResource).filter(
            ProjectResource.project_id == project_id
        ).delete(synchronize_session=False)
        ProjectService._insert_assignments(db, project_id, assignments)

    def get_project(self, project_id: int) -> Optional[ProjectSchema]:
        """Get project by ID with client name and resources"""
        with self.database.session() as db:
            project = self._query_with_details(db).filter(Project.id == project_id).first()
            return ProjectSchema.model_validate(project) if project else None

    def get_project_with_details(self, project_id: int) -> Optional[ProjectWithDetails]:
        """Get project by ID including the actual hours spent on its tasks"""
        with self.database.session() as db:
            project = self._query_with_details(db).filter(Project.id == project_id).first()
            if project is None:
                return None
            details = ProjectWithDetails.model_validate(project)
            details.actual_hours = sum_hours_spent(db, project_id)
            return details

    def get_projects(
        self,
        skip: int = 0,
        limit: int = 100,
        client_id: Optional[int] = None,
        status: Optional[ProjectStatus] = None,
    ) -> List[ProjectSchema]:
        """Get all projects with optional filtering, ordered by start date"""
        with self.database.session() as db:
            query = self._query_with_details(db)

            if client_id:
                query = query.filter(Project.client_id == client_id)
            if status:
                query = query.filter(Project.status == status)

            projects = query.order_by(Project.start_date, Project.id).offset(skip).limit(limit).all()
            return [ProjectSchema.model_validate(p) for p in projects]

    def get_client_projects(self, client_id: int) -> List[ProjectSchema]:
        """Get all projects for a specific client"""
        return self.get_projects(client_id=client_id, limit=None)

    def create_project(self, data, resources=None) -> ProjectSchema:
        """Create a project together with its resource assignments.

        ``resources`` overrides the ``resources`` list carried by ``data``.
        A missing client or resource rolls the whole operation back.
        """
        payload = validate_payload(ProjectCreate, data)
        assignments = payload.resources if resources is None else validate_assignments(resources)

        with self.database.transaction() as db:
            db_project = Project(**payload.model_dump(exclude={"resources"}))
            db.add(db_project)
            db.flush()
            self._insert_assignments(db, db_project.id, assignments)
            project_id = db_project.id

        logger.info("Created project %s with %d resources", project_id, len(assignments))
        return self.get_project(project_id)

    def update_project(self, project_id: int, data, resources=None) -> ProjectSchema:
        """Update project fields and replace its full resource membership.

        Optional fields left out of ``data`` keep their stored value. An empty
        resource list removes every assignment.
        """
        payload = validate_payload(ProjectUpdate, data)
        assignments = payload.resources if resources is None else validate_assignments(resources)

        with self.database.transaction() as db:
            db_project = db.get(Project, project_id, with_for_update=True)
            if db_project is None:
                raise NotFoundError("Project", project_id)

            update_data = payload.model_dump(exclude_unset=True, exclude={"resources"})
            for field, value in update_data.items():
                setattr(db_project, field, value)

            self._replace_assignments(db, project_id, assignments)

        logger.info("Updated project %s, %d resources assigned", project_id, len(assignments))
        return self.get_project(project_id)

    def update_actual_cost(self, project_id: int, actual_cost) -> ProjectSchema:
        """Update only the actual cost of a project"""
        value = require_non_negative("actual_cost", actual_cost, MAX_AMOUNT)

        with self.database.transaction() as db:
            db_project = db.get(Project, project_id, with_for_update=True)
            if db_project is None:
                raise NotFoundError("Project", project_id)
            db_project.actual_cost = value

        logger.info("Project %s actual cost set to %s", project_id, value)
        return self.get_project(project_id)

    def delete_project(self, project_id: int) -> bool:
        """Delete project with its tasks and all assignment rows"""
        with self.database.transaction() as db:
            db_project = db.get(Project, project_id)
            if db_project is None:
                raise NotFoundError("Project", project_id)
            db.delete(db_project)

        logger.info("Deleted project %s", project_id)
        return True
