from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.database import Database
from app.core.security import verify_token
from app.models.user import UserRole
from app.schemas.user import User
from app.services.client import ClientService
from app.services.metrics import MetricsService
from app.services.project import ProjectService
from app.services.resource import ResourceService
from app.services.task import TaskService
from app.services.user import UserService

security = HTTPBearer()


def get_database(request: Request) -> Database:
    """The Database handle built by the application factory"""
    return request.app.state.database


def get_user_service(database: Database = Depends(get_database)) -> UserService:
    return UserService(database)


def get_client_service(database: Database = Depends(get_database)) -> ClientService:
    return ClientService(database)


def get_resource_service(database: Database = Depends(get_database)) -> ResourceService:
    return ResourceService(database)


def get_project_service(database: Database = Depends(get_database)) -> ProjectService:
    return ProjectService(database)


def get_task_service(database: Database = Depends(get_database)) -> TaskService:
    return TaskService(database)


def get_metrics_service(database: Database = Depends(get_database)) -> MetricsService:
    return MetricsService(database)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    user_service: UserService = Depends(get_user_service),
) -> User:
    """Get current authenticated user"""
    token = credentials.credentials
    user_id = verify_token(token)

    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = user_service.get_user(int(user_id))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return user


def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Get current active user"""
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user"
        )
    return current_user


def require_admin(current_user: User = Depends(get_current_active_user)) -> User:
    """Require admin role"""
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user
