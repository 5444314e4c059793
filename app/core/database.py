import logging
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import (
    DataError,
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.exceptions import (
    ConstraintViolation,
    ServiceError,
    TransientFailure,
    UnexpectedFailure,
    ValidationError,
)

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine (and its bounded connection pool) and hands out
    scoped sessions.

    One instance is built by the application factory and injected into every
    service. ``transaction()`` checks a connection out of the pool for the
    lifetime of one unit of work, commits or rolls back, and always gives the
    connection back. Driver exceptions are translated into the domain error
    taxonomy on the way out.
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        pool_size: int = 10,
        max_overflow: int = 0,
        pool_timeout: int = 30,
        **engine_kwargs: Any,
    ):
        self.url = url
        self.is_sqlite = url.startswith("sqlite")

        if self.is_sqlite:
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        else:
            engine_kwargs.setdefault("pool_size", pool_size)
            engine_kwargs.setdefault("max_overflow", max_overflow)
            engine_kwargs.setdefault("pool_timeout", pool_timeout)
            engine_kwargs.setdefault("pool_pre_ping", True)

        self.engine: Engine = create_engine(url, echo=echo, **engine_kwargs)
        if self.is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Read-only unit of work. Nothing is committed."""
        session = self.SessionLocal()
        try:
            yield session
        except ServiceError:
            raise
        except Exception as exc:
            raise self._translate(exc) from exc
        finally:
            session.close()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Atomic unit of work. Commits on success, rolls back on any error."""
        session = self.SessionLocal()
        try:
            with session.begin():
                yield session
        except ServiceError:
            logger.info("Transaction rolled back")
            raise
        except Exception as exc:
            raise self._translate(exc) from exc
        finally:
            session.close()

    @staticmethod
    def _translate(exc: Exception) -> ServiceError:
        if isinstance(exc, IntegrityError):
            detail = str(exc.orig) if exc.orig is not None else str(exc)
            logger.warning("Constraint violation, transaction rolled back: %s", detail)
            return ConstraintViolation(errors=[{"msg": detail}])
        if isinstance(exc, DataError):
            detail = str(exc.orig) if exc.orig is not None else str(exc)
            logger.warning("Value rejected by the database, transaction rolled back: %s", detail)
            return ValidationError(errors=[{"param": None, "msg": detail}])
        if isinstance(exc, (PoolTimeoutError, DisconnectionError)) or (
            isinstance(exc, DBAPIError) and exc.connection_invalidated
        ):
            logger.warning("Transient database failure: %s", exc)
            return TransientFailure()
        if isinstance(exc, SQLAlchemyError):
            logger.exception("Database error, transaction rolled back")
            return UnexpectedFailure()
        logger.exception("Unexpected error, transaction rolled back")
        return UnexpectedFailure()

    def create_all(self) -> None:
        # Models register themselves on Base when imported
        import app.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> bool:
        """Check that a connection can be obtained from the pool"""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            logger.error("Unable to connect to the database: %s", exc)
            return False

    def dispose(self) -> None:
        self.engine.dispose()
