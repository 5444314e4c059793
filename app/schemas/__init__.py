from .user import User, UserCreate
from .auth import Token, LoginRequest, RefreshTokenRequest
from .common import ResourceAssignment, AssignedResource
from .client import Client, ClientCreate, ClientUpdate
from .resource import Resource, ResourceCreate, ResourceUpdate
from .project import Project, ProjectCreate, ProjectUpdate, ProjectWithDetails, ActualCostUpdate
from .task import Task, TaskCreate, TaskUpdate, TaskWithDetails, HoursSpentUpdate
from .metrics import DateRange, ProjectHours, ProjectSummary

__all__ = [
    # User schemas
    "User", "UserCreate",
    # Auth schemas
    "Token", "LoginRequest", "RefreshTokenRequest",
    # Assignment schemas
    "ResourceAssignment", "AssignedResource",
    # Client schemas
    "Client", "ClientCreate", "ClientUpdate",
    # Resource schemas
    "Resource", "ResourceCreate", "ResourceUpdate",
    # Project schemas
    "Project", "ProjectCreate", "ProjectUpdate", "ProjectWithDetails", "ActualCostUpdate",
    # Task schemas
    "Task", "TaskCreate", "TaskUpdate", "TaskWithDetails", "HoursSpentUpdate",
    # Metric schemas
    "DateRange", "ProjectHours", "ProjectSummary",
]
