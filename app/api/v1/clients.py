from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.deps import (
    get_client_service,
    get_current_active_user,
    get_project_service,
    require_admin,
)
from app.schemas.client import Client, ClientCreate, ClientUpdate
from app.schemas.project import Project
from app.schemas.user import User
from app.services.client import ClientService
from app.services.project import ProjectService

router = APIRouter(dependencies=[Depends(get_current_active_user)])


@router.get("/", response_model=List[Client])
def read_clients(
    skip: int = 0,
    limit: int = 100,
    client_service: ClientService = Depends(get_client_service),
):
    """Get all clients"""
    return client_service.get_clients(skip=skip, limit=limit)


@router.get("/{client_id}", response_model=Client)
def read_client(
    client_id: int,
    client_service: ClientService = Depends(get_client_service),
):
    """Get client by ID"""
    client = client_service.get_client(client_id)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found"
        )
    return client


@router.get("/{client_id}/projects", response_model=List[Project])
def read_client_projects(
    client_id: int,
    client_service: ClientService = Depends(get_client_service),
    project_service: ProjectService = Depends(get_project_service),
):
    """Get all projects of a client"""
    if client_service.get_client(client_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found"
        )
    return project_service.get_client_projects(client_id)


@router.post("/", response_model=Client, status_code=status.HTTP_201_CREATED)
def create_client(
    client: ClientCreate,
    client_service: ClientService = Depends(get_client_service),
):
    """Create new client"""
    return client_service.create_client(client)


@router.put("/{client_id}", response_model=Client)
def update_client(
    client_id: int,
    client_update: ClientUpdate,
    client_service: ClientService = Depends(get_client_service),
):
    """Update client"""
    return client_service.update_client(client_id, client_update)


@router.delete("/{client_id}")
def delete_client(
    client_id: int,
    client_service: ClientService = Depends(get_client_service),
    current_user: User = Depends(require_admin),
):
    """Delete client (admin only)"""
    client_service.delete_client(client_id)
    return {"message": "Client deleted successfully"}
