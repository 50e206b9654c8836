"""
Storage broker: the only place that talks to the database session.

Each call is one unit of work: it commits on success, and on failure rolls the
session back and re-raises whatever SQLAlchemy raised so the services can translate the failure.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.base import Base

ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class StorageBroker:
    """
    Generic persistence operations over an `AsyncSession`.

    Args:
        session: the async session this broker writes through. The broker commits
            after every mutating call, so it should not share a session with
            code that expects to control the transaction itself.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def _unit_of_work(self, operation: str, model_name: str):
        start = time.perf_counter()
        logger.debug("storage.%s.start", operation, extra={"model": model_name, "operation": operation})
        try:
            yield
        except Exception:
            # Leave the session usable; the native exception goes up untouched
            try:
                await self.session.rollback()
            except Exception:
                logger.exception(
                    "storage.%s.rollback_failed", operation, extra={"model": model_name, "operation": operation}
                )
            logger.debug(
                "storage.%s.rolled_back", operation, extra={"model": model_name, "operation": operation}
            )
            raise
        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.debug(
            "storage.%s.success",
            operation,
            extra={"model": model_name, "operation": operation, "duration_ms": duration_ms},
        )

    # =================================================================================================================
    # Write operations
    # =================================================================================================================

    async def insert(self, entity: ModelType) -> ModelType:
        async with self._unit_of_work("insert", type(entity).__name__):
            self.session.add(entity)
            await self.session.flush()
            await self.session.commit()
        return entity

    async def update(self, entity: ModelType) -> ModelType:
        """
        Persist the state of `entity`, which may be detached or a fresh instance
        carrying an existing primary key. Returns the session-bound instance.
        """
        async with self._unit_of_work("update", type(entity).__name__):
            merged = await self.session.merge(entity)
            await self.session.flush()
            await self.session.commit()
        return merged

    async def delete(self, entity: ModelType) -> ModelType:
        async with self._unit_of_work("delete", type(entity).__name__):
            await self.session.delete(entity)
            await self.session.flush()
            await self.session.commit()
        return entity

    # =================================================================================================================
    # Read operations
    # =================================================================================================================

    async def select_by_id(self, model: Type[ModelType], *ids: Any) -> ModelType | None:
        """
        Fetch one row by primary key; composite keys are passed in column order.
        Returns None when no row matches.
        """
        key = ids[0] if len(ids) == 1 else tuple(ids)
        async with self._unit_of_work("select_by_id", model.__name__):
            entity = await self.session.get(model, key)
        return entity

    async def select_all(self, model: Type[ModelType]) -> list[ModelType]:
        async with self._unit_of_work("select_all", model.__name__):
            result = await self.session.execute(select(model))
            entities = list(result.scalars().all())
        return entities
