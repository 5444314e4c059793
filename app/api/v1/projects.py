from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.deps import get_current_active_user, get_metrics_service, get_project_service
from app.models.project import ProjectStatus
from app.schemas.metrics import ProjectHours, ProjectSummary
from app.schemas.project import (
    ActualCostUpdate,
    Project,
    ProjectCreate,
    ProjectUpdate,
    ProjectWithDetails,
)
from app.services.metrics import MetricsService
from app.services.project import ProjectService

router = APIRouter(dependencies=[Depends(get_current_active_user)])


@router.get("/", response_model=List[Project])
def read_projects(
    skip: int = 0,
    limit: int = 100,
    status: Optional[ProjectStatus] = None,
    client_id: Optional[int] = None,
    project_service: ProjectService = Depends(get_project_service),
):
    """Get all projects with optional filtering"""
    return project_service.get_projects(skip=skip, limit=limit, client_id=client_id, status=status)


@router.get("/client/{client_id}", response_model=List[Project])
def read_client_projects(
    client_id: int,
    project_service: ProjectService = Depends(get_project_service),
):
    """Get projects by client ID"""
    return project_service.get_client_projects(client_id)


@router.get("/{project_id}", response_model=ProjectWithDetails)
def read_project(
    project_id: int,
    project_service: ProjectService = Depends(get_project_service),
):
    """Get project by ID with resources and actual hours"""
    project = project_service.get_project_with_details(project_id)
    if project is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )
    return project


@router.get("/{project_id}/hours", response_model=ProjectHours)
def read_project_hours(
    project_id: int,
    project_service: ProjectService = Depends(get_project_service),
    metrics_service: MetricsService = Depends(get_metrics_service),
):
    """Get the actual hours spent on a project"""
    if project_service.get_project(project_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )
    return ProjectHours(
        project_id=project_id,
        actual_hours=metrics_service.actual_hours_for_project(project_id),
    )


@router.get("/{project_id}/summary", response_model=ProjectSummary)
def read_project_summary(
    project_id: int,
    metrics_service: MetricsService = Depends(get_metrics_service),
):
    """Get hours, cost and budget variance figures for a project"""
    summary = metrics_service.project_summary(project_id)
    if summary is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )
    return summary


@router.post("/", response_model=Project, status_code=status.HTTP_201_CREATED)
def create_project(
    project: ProjectCreate,
    project_service: ProjectService = Depends(get_project_service),
):
    """Create new project with its resource assignments"""
    return project_service.create_project(project)


@router.put("/{project_id}", response_model=Project)
def update_project(
    project_id: int,
    project_update: ProjectUpdate,
    project_service: ProjectService = Depends(get_project_service),
):
    """Update project. `resources` is the complete new membership."""
    return project_service.update_project(project_id, project_update)


@router.patch("/{project_id}/actual-cost", response_model=Project)
def update_project_actual_cost(
    project_id: int,
    cost_update: ActualCostUpdate,
    project_service: ProjectService = Depends(get_project_service),
):
    """Update the actual cost of a project"""
    return project_service.update_actual_cost(project_id, cost_update.actual_cost)


@router.delete("/{project_id}")
def delete_project(
    project_id: int,
    project_service: ProjectService = Depends(get_project_service),
):
    """Delete project with its tasks and assignments"""
    project_service.delete_project(project_id)
    return {"message": "Project deleted successfully"}
