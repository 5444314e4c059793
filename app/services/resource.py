import logging
from typing import List, Optional

from app.core.database import Database
from app.core.exceptions import NotFoundError
from app.models.resource import Resource
from app.models.task_resource import TaskResource
from app.schemas.resource import Resource as ResourceSchema, ResourceCreate, ResourceUpdate
from app.services.validation import validate_payload

logger = logging.getLogger(__name__)


class ResourceService:
    def __init__(self, database: Database):
        self.database = database

    def get_resource(self, resource_id: int) -> Optional[ResourceSchema]:
        """Get resource by ID"""
        with self.database.session() as db:
            resource = db.get(Resource, resource_id)
            return ResourceSchema.model_validate(resource) if resource else None

    def get_resources(self, skip: int = 0, limit: int = 100, role: Optional[str] = None) -> List[ResourceSchema]:
        """Get all resources ordered by name, optionally only one role"""
        with self.database.session() as db:
            query = db.query(Resource)
            if role:
                query = query.filter(Resource.role == role)
            resources = query.order_by(Resource.name, Resource.id).offset(skip).limit(limit).all()
            return [ResourceSchema.model_validate(r) for r in resources]

    def get_task_resources(self, task_id: int) -> List[ResourceSchema]:
        """Get resources assigned to a task"""
        with self.database.session() as db:
            resources = (
                db.query(Resource)
                .join(TaskResource, TaskResource.resource_id == Resource.id)
                .filter(TaskResource.task_id == task_id)
                .order_by(Resource.name, Resource.id)
                .all()
            )
            return [ResourceSchema.model_validate(r) for r in resources]

    def create_resource(self, data) -> ResourceSchema:
        """Create new resource"""
        payload = validate_payload(ResourceCreate, data)

        with self.database.transaction() as db:
            db_resource = Resource(**payload.model_dump())
            db.add(db_resource)
            db.flush()
            result = ResourceSchema.model_validate(db_resource)

        logger.info("Created resource %s", result.id)
        return result

    def update_resource(self, resource_id: int, data) -> ResourceSchema:
        """Update resource"""
        payload = validate_payload(ResourceUpdate, data)

        with self.database.transaction() as db:
            db_resource = db.get(Resource, resource_id)
            if db_resource is None:
                raise NotFoundError("Resource", resource_id)

            update_data = payload.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                setattr(db_resource, field, value)
            db.flush()
            result = ResourceSchema.model_validate(db_resource)

        logger.info("Updated resource %s", resource_id)
        return result

    def delete_resource(self, resource_id: int) -> bool:
        """Delete resource along with its project and task assignments"""
        with self.database.transaction() as db:
            db_resource = db.get(Resource, resource_id)
            if db_resource is None:
                raise NotFoundError("Resource", resource_id)
            db.delete(db_resource)

        logger.info("Deleted resource %s", resource_id)
        return True
