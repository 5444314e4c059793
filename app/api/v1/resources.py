from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.deps import get_current_active_user, get_resource_service, require_admin
from app.schemas.resource import Resource, ResourceCreate, ResourceUpdate
from app.schemas.user import User
from app.services.resource import ResourceService

router = APIRouter(dependencies=[Depends(get_current_active_user)])


@router.get("/", response_model=List[Resource])
def read_resources(
    skip: int = 0,
    limit: int = 100,
    role: Optional[str] = None,
    resource_service: ResourceService = Depends(get_resource_service),
):
    """Get all resources, optionally filtered by role"""
    return resource_service.get_resources(skip=skip, limit=limit, role=role)


@router.get("/role/{role}", response_model=List[Resource])
def read_resources_by_role(
    role: str,
    resource_service: ResourceService = Depends(get_resource_service),
):
    """Get resources with the given role"""
    return resource_service.get_resources(role=role, limit=None)


@router.get("/task/{task_id}", response_model=List[Resource])
def read_task_resources(
    task_id: int,
    resource_service: ResourceService = Depends(get_resource_service),
):
    """Get resources assigned to a task"""
    return resource_service.get_task_resources(task_id)


@router.get("/{resource_id}", response_model=Resource)
def read_resource(
    resource_id: int,
    resource_service: ResourceService = Depends(get_resource_service),
):
    """Get resource by ID"""
    resource = resource_service.get_resource(resource_id)
    if resource is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Resource not found"
        )
    return resource


@router.post("/", response_model=Resource, status_code=status.HTTP_201_CREATED)
def create_resource(
    resource: ResourceCreate,
    resource_service: ResourceService = Depends(get_resource_service),
):
    """Create new resource"""
    return resource_service.create_resource(resource)


@router.put("/{resource_id}", response_model=Resource)
def update_resource(
    resource_id: int,
    resource_update: ResourceUpdate,
    resource_service: ResourceService = Depends(get_resource_service),
):
    """Update resource"""
    return resource_service.update_resource(resource_id, resource_update)


@router.delete("/{resource_id}")
def delete_resource(
    resource_id: int,
    resource_service: ResourceService = Depends(get_resource_service),
    current_user: User = Depends(require_admin),
):
    """Delete resource and its assignments (admin only)"""
    resource_service.delete_resource(resource_id)
    return {"message": "Resource deleted successfully"}
