"""Domain error taxonomy shared by the services and the HTTP layer.

Every failure a service can report is one of the classes below. The
persistence layer (``Database.transaction``) produces ``ConstraintViolation``,
``TransientFailure`` and ``UnexpectedFailure``, plus ``ValidationError`` for
values the column types cannot hold. Services raise ``ValidationError`` and
``NotFoundError`` before touching storage.
"""
from typing import Any, Dict, List, Optional


class ServiceError(Exception):
    """Base class for all service-level failures."""

    message: str = "Service error"

    def __init__(self, message: Optional[str] = None, *, errors: Optional[List[Dict[str, Any]]] = None):
        self.message = message or self.message
        self.errors = errors or []
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Malformed or out-of-domain input, detected before a transaction opens."""

    message = "Validation failed. Please check your inputs."


class NotFoundError(ServiceError):
    """The targeted entity does not exist."""

    message = "Not found"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ConstraintViolation(ServiceError):
    """Referential, uniqueness or NOT NULL failure raised by the database."""

    message = "The referenced record does not exist or violates a constraint"


class TransientFailure(ServiceError):
    """Connection or pool problem; the whole operation may be retried."""

    message = "Database temporarily unavailable"


class UnexpectedFailure(ServiceError):
    """Anything else. The transaction was rolled back."""

    message = "Server error"
