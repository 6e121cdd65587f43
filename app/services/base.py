"""Shared store access for services."""

from typing import Any

import structlog
from sqlalchemy.engine import Result
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import Executable

from app.core.exceptions import DatabaseException, InvalidIdException
from app.core.validation import parse_id

logger = structlog.get_logger()


class BaseService:
    """Base class for services backed by a database session."""

    resource = "Record"

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    def parse_id(self, raw_id: str) -> Any:
        """
        Parse a record identifier before touching the store.

        Raises:
            InvalidIdException: If the identifier is malformed
        """
        record_id = parse_id(raw_id)
        if record_id is None:
            raise InvalidIdException(self.resource)
        return record_id

    async def execute(self, stmt: Executable) -> Result:
        """
        Execute a statement, converting store failures.

        Integrity errors are re-raised untouched for the caller to classify.

        Raises:
            DatabaseException: On any other store error
        """
        try:
            return await self.db.execute(stmt)
        except IntegrityError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("database_error", resource=self.resource, error=str(e))
            raise DatabaseException(str(e)) from e

    async def commit(self) -> None:
        """Commit the current transaction, converting store failures."""
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("database_error", resource=self.resource, error=str(e))
            raise DatabaseException(str(e)) from e
