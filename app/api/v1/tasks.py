from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.deps import get_current_active_user, get_metrics_service, get_task_service
from app.models.task import TaskStatus, TaskPriority
from app.schemas.task import HoursSpentUpdate, Task, TaskCreate, TaskUpdate, TaskWithDetails
from app.services.metrics import MetricsService
from app.services.task import TaskService

router = APIRouter(dependencies=[Depends(get_current_active_user)])


@router.get("/", response_model=List[Task])
def read_tasks(
    skip: int = 0,
    limit: int = 100,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    project_id: Optional[int] = None,
    task_service: TaskService = Depends(get_task_service),
):
    """Get all tasks with optional filtering"""
    return task_service.get_tasks(
        skip=skip,
        limit=limit,
        project_id=project_id,
        status=status,
        priority=priority,
    )


@router.get("/dates", response_model=List[Task])
def read_tasks_in_date_range(
    start: date,
    end: date,
    metrics_service: MetricsService = Depends(get_metrics_service),
):
    """Get tasks whose schedule overlaps [start, end]"""
    return metrics_service.tasks_in_date_range(start, end)


@router.get("/project/{project_id}", response_model=List[Task])
def read_project_tasks(
    project_id: int,
    task_service: TaskService = Depends(get_task_service),
):
    """Get tasks by project ID"""
    return task_service.get_project_tasks(project_id)


@router.get("/resource/{resource_id}", response_model=List[Task])
def read_resource_tasks(
    resource_id: int,
    task_service: TaskService = Depends(get_task_service),
):
    """Get tasks assigned to a resource"""
    return task_service.get_resource_tasks(resource_id)


@router.get("/{task_id}", response_model=TaskWithDetails)
def read_task(
    task_id: int,
    task_service: TaskService = Depends(get_task_service),
):
    """Get task by ID with assigned resources"""
    task = task_service.get_task(task_id)
    if task is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found"
        )
    return task


@router.post("/", response_model=TaskWithDetails, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    task_service: TaskService = Depends(get_task_service),
):
    """Create new task with its resource assignments"""
    return task_service.create_task(task)


@router.put("/{task_id}", response_model=TaskWithDetails)
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    task_service: TaskService = Depends(get_task_service),
):
    """Update task. `resources` is the complete new membership."""
    return task_service.update_task(task_id, task_update)


@router.patch("/{task_id}/hours-spent", response_model=TaskWithDetails)
def update_task_hours_spent(
    task_id: int,
    hours_update: HoursSpentUpdate,
    task_service: TaskService = Depends(get_task_service),
):
    """Update the hours spent on a task"""
    return task_service.update_hours_spent(task_id, hours_update.hours_spent)


@router.delete("/{task_id}")
def delete_task(
    task_id: int,
    task_service: TaskService = Depends(get_task_service),
):
    """Delete task and its resource assignments"""
    task_service.delete_task(task_id)
    return {"message": "Task deleted successfully"}
