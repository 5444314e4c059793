from .user import User, UserRole
from .client import Client
from .resource import Resource
from .project import Project, ProjectStatus
from .project_resource import ProjectResource
from .task import Task, TaskStatus, TaskPriority
from .task_resource import TaskResource

__all__ = [
    "User",
    "UserRole",
    "Client",
    "Resource",
    "Project",
    "ProjectStatus",
    "ProjectResource",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "TaskResource",
]
