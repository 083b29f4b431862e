"""
Base repository class with common CRUD operations.
"""

from abc import ABC
from typing import Any, Generic, Protocol, TypeVar
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from campreg.app_logger import get_logger

logger = get_logger(__name__)


# Generic type for model classes with id attribute
class HasId(Protocol):
    id: Any


ModelType = TypeVar("ModelType", bound=HasId)


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing common CRUD operations.

    Implements the Repository pattern with async SQLAlchemy operations,
    standardized error handling, and logging. Failures are logged and
    re-raised unchanged; callers decide how to surface them.
    """

    def __init__(self, session: AsyncSession, model_class: type[ModelType]) -> None:
        """
        Initialize repository with database session and model class.

        Args:
            session: Async SQLAlchemy session
            model_class: The SQLAlchemy model class for this repository
        """
        self.session = session
        self.model_class = model_class
        self.model_name = model_class.__name__

    async def create(self, **kwargs: Any) -> ModelType:
        """
        Create a new model instance.

        Args:
            **kwargs: Model attributes

        Returns:
            Created model instance
        """
        try:
            instance = self.model_class(**kwargs)
            self.session.add(instance)
            await self.session.commit()
            await self.session.refresh(instance)

            logger.debug("Created %s: %s", self.model_name, instance.id)
            return instance

        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create %s: %s", self.model_name, e)
            raise

    async def get_by_id(self, id: UUID) -> ModelType | None:
        """
        Get model instance by ID.

        Args:
            id: Model UUID

        Returns:
            Model instance or None if not found
        """
        try:
            stmt = select(self.model_class).where(self.model_class.id == id)
            result = await self.session.execute(stmt)
            instance = result.scalar_one_or_none()

            if instance is None:
                logger.debug("%s not found: %s", self.model_name, id)

            return instance

        except Exception as e:
            logger.error("Failed to get %s by id %s: %s", self.model_name, id, e)
            raise

    async def exists(self, id: UUID) -> bool:
        """
        Check if model instance exists by ID, selecting only the key.

        Args:
            id: Model UUID

        Returns:
            True if exists, False otherwise
        """
        try:
            stmt = select(self.model_class.id).where(self.model_class.id == id)
            result = await self.session.execute(stmt)
            exists = result.scalar_one_or_none() is not None

            logger.debug("%s exists %s: %s", self.model_name, id, exists)
            return exists

        except Exception as e:
            logger.error("Failed to check %s exists %s: %s", self.model_name, id, e)
            raise

    async def delete(self, id: UUID) -> bool:
        """
        Delete model instance by ID.

        Args:
            id: Model UUID

        Returns:
            True if deleted, False if no row matched
        """
        try:
            stmt = delete(self.model_class).where(self.model_class.id == id)
            result = await self.session.execute(stmt)
            deleted = result.rowcount > 0

            if deleted:
                await self.session.commit()
                logger.debug("Deleted %s: %s", self.model_name, id)
            else:
                await self.session.rollback()
                logger.debug("%s not found for deletion: %s", self.model_name, id)

            return deleted

        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to delete %s %s: %s", self.model_name, id, e)
            raise
