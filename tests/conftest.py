from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from app.core.database import Database
from app.core.security import create_access_token, get_password_hash
from app.models.user import User, UserRole
from app.services.client import ClientService
from app.services.metrics import MetricsService
from app.services.project import ProjectService
from app.services.resource import ResourceService
from app.services.task import TaskService
from main import create_app


@pytest.fixture(scope="function")
def database():
    # In-memory SQLite shared by every session through a single connection
    database = Database("sqlite://", poolclass=StaticPool)
    database.create_all()
    try:
        yield database
    finally:
        database.drop_all()
        database.dispose()


@pytest.fixture
def client(database):
    return TestClient(create_app(database))


@pytest.fixture
def client_service(database):
    return ClientService(database)


@pytest.fixture
def resource_service(database):
    return ResourceService(database)


@pytest.fixture
def project_service(database):
    return ProjectService(database)


@pytest.fixture
def task_service(database):
    return TaskService(database)


@pytest.fixture
def metrics_service(database):
    return MetricsService(database)


def _create_user(database, username, email, password, role):
    with database.transaction() as db:
        user = User(
            username=username,
            email=email,
            hashed_password=get_password_hash(password),
            role=role,
            is_active=True,
        )
        db.add(user)
        db.flush()
        return user.id


@pytest.fixture
def test_user(database):
    return _create_user(database, "testuser", "test@example.com", "testpassword", UserRole.USER)


@pytest.fixture
def test_admin(database):
    return _create_user(database, "admin", "admin@example.com", "adminpassword", UserRole.ADMIN)


@pytest.fixture
def user_headers(test_user):
    return {"Authorization": f"Bearer {create_access_token(str(test_user))}"}


@pytest.fixture
def admin_headers(test_admin):
    return {"Authorization": f"Bearer {create_access_token(str(test_admin))}"}


@pytest.fixture
def acme(client_service):
    return client_service.create_client({"name": "Acme Corp", "email": "contact@acme.com"})


@pytest.fixture
def developer(resource_service):
    return resource_service.create_resource({"name": "Dana Developer", "role": "developer", "hourly_rate": 50})


@pytest.fixture
def designer(resource_service):
    return resource_service.create_resource({"name": "Sam Designer", "role": "designer", "hourly_rate": 20})


def project_payload(client_id, **overrides):
    payload = {
        "name": "Website relaunch",
        "client_id": client_id,
        "start_date": date(2024, 1, 1),
        "end_date": date(2024, 3, 31),
        "estimated_hours": 120,
        "estimated_cost": 6000,
        "budgeted_cost": 1000,
        "description": "New marketing site",
    }
    payload.update(overrides)
    return payload


def task_payload(project_id, **overrides):
    payload = {
        "project_id": project_id,
        "title": "Build landing page",
        "start_date": date(2024, 1, 10),
        "end_date": date(2024, 1, 20),
        "estimated_hours": 16,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def website(project_service, acme):
    return project_service.create_project(project_payload(acme.id))
