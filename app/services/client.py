import logging
from typing import List, Optional

from app.core.database import Database
from app.core.exceptions import NotFoundError
from app.models.client import Client
from app.schemas.client import Client as ClientSchema, ClientCreate, ClientUpdate
from app.services.validation import validate_payload

logger = logging.getLogger(__name__)


class ClientService:
    def __init__(self, database: Database):
        self.database = database

    def get_client(self, client_id: int) -> Optional[ClientSchema]:
        """Get client by ID"""
        with self.database.session() as db:
            client = db.get(Client, client_id)
            return ClientSchema.model_validate(client) if client else None

    def get_clients(self, skip: int = 0, limit: int = 100) -> List[ClientSchema]:
        """Get all clients ordered by name"""
        with self.database.session() as db:
            clients = db.query(Client).order_by(Client.name, Client.id).offset(skip).limit(limit).all()
            return [ClientSchema.model_validate(c) for c in clients]

    def create_client(self, data) -> ClientSchema:
        """Create new client"""
        payload = validate_payload(ClientCreate, data)

        with self.database.transaction() as db:
            db_client = Client(**payload.model_dump())
            db.add(db_client)
            db.flush()
            result = ClientSchema.model_validate(db_client)

        logger.info("Created client %s", result.id)
        return result

    def update_client(self, client_id: int, data) -> ClientSchema:
        """Update client"""
        payload = validate_payload(ClientUpdate, data)

        with self.database.transaction() as db:
            db_client = db.get(Client, client_id)
            if db_client is None:
                raise NotFoundError("Client", client_id)

            update_data = payload.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                setattr(db_client, field, value)
            db.flush()
            result = ClientSchema.model_validate(db_client)

        logger.info("Updated client %s", client_id)
        return result

    def delete_client(self, client_id: int) -> bool:
        """Delete client. Rejected by the database while it still owns projects."""
        with self.database.transaction() as db:
            db_client = db.get(Client, client_id)
            if db_client is None:
                raise NotFoundError("Client", client_id)
            db.delete(db_client)

        logger.info("Deleted client %s", client_id)
        return True
