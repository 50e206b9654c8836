"""
Generic foundation service.

Every entity service runs the same template: validate the input, call storage,
and translate any failure into the three-tier taxonomy in `exceptions.base`.
A translated failure is reported through the logging broker exactly once and
then raised; successful calls never touch the logging broker.
"""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any, Generic, Type, TypeVar

from ...brokers.datetime_broker import DateTimeBroker
from ...brokers.logging_broker import LoggingBroker
from ...brokers.storage_broker import StorageBroker
from ...config.settings import get_settings
from ...database.base import Base
from ...exceptions.base import FoundationError, Severity
from ...exceptions.mapper import translate_failure
from ...validators import entity_validators as validators
from ...validators.rules import EntityRules

ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class FoundationService(Generic[ModelType]):
    """
    Validate-then-persist operations for one entity type.

    Subclasses set `model` and `rules`; everything else is shared.

    Args:
        storage_broker: persistence collaborator
        datetime_broker: clock used for the recency check on modify
        logging_broker: receives every translated failure, once
        recency_window: how far `updated_date` may drift from now on modify.
            Defaults to the configured window for this entity.
    """

    model: Type[ModelType]
    rules: EntityRules

    def __init__(
        self,
        storage_broker: StorageBroker,
        datetime_broker: DateTimeBroker,
        logging_broker: LoggingBroker,
        *,
        recency_window: timedelta | None = None,
    ):
        self.storage_broker = storage_broker
        self.datetime_broker = datetime_broker
        self.logging_broker = logging_broker
        if recency_window is None:
            recency_window = self._configured_window()
        self.recency_window = recency_window

    def _configured_window(self) -> timedelta:
        if self.rules.recency_window is not None:
            return self.rules.recency_window
        return get_settings().recency_window_for(self.rules.entity_name)

    @property
    def entity_name(self) -> str:
        return self.rules.entity_name

    # =================================================================================================================
    # Failure handling
    # =================================================================================================================

    def report_failure(self, error: FoundationError) -> None:
        """Send a translated failure to the logging broker at its severity."""
        if error.severity is Severity.CRITICAL:
            self.logging_broker.log_critical(error)
        else:
            self.logging_broker.log_error(error)

    @asynccontextmanager
    async def _translate_failures(self, operation: str):
        try:
            yield
        except Exception as exc:
            error = translate_failure(exc, self.entity_name)
            logger.debug(
                "service.%s.failed",
                operation,
                extra={"entity": self.entity_name, "operation": operation, "error_kind": error.kind.value},
            )
            self.report_failure(error)
            raise error from error.inner

    # =================================================================================================================
    # Operations
    # =================================================================================================================

    async def add(self, entity: ModelType | None) -> ModelType:
        async with self._translate_failures("add"):
            validators.validate_on_add(entity, self.rules)
            return await self.storage_broker.insert(entity)

    async def modify(self, entity: ModelType | None) -> ModelType:
        """
        Structural checks first, then recency against the clock, then the stored
        record. The clock is only read once the structural checks pass, and
        storage only once both validation passes succeed.
        """
        async with self._translate_failures("modify"):
            validators.validate_on_modify(entity, self.rules)

            now = self.datetime_broker.get_current_datetime()
            validators.validate_recency(entity, self.rules, now, self.recency_window)

            ids = self.rules.key_of(entity)
            stored = await self.storage_broker.select_by_id(self.model, *ids)
            validators.validate_against_storage(entity, stored, self.rules)

            return await self.storage_broker.update(entity)

    async def retrieve_all(self) -> list[ModelType]:
        async with self._translate_failures("retrieve_all"):
            return await self.storage_broker.select_all(self.model)

    async def retrieve_by_id(self, *ids: Any) -> ModelType:
        async with self._translate_failures("retrieve_by_id"):
            validators.validate_ids(ids, self.rules)
            stored = await self.storage_broker.select_by_id(self.model, *ids)
            validators.validate_storage_entity_exists(stored, self.rules, ids)
            return stored

    async def remove_by_id(self, *ids: Any) -> ModelType:
        async with self._translate_failures("remove_by_id"):
            validators.validate_ids(ids, self.rules)
            stored = await self.storage_broker.select_by_id(self.model, *ids)
            validators.validate_storage_entity_exists(stored, self.rules, ids)
            return await self.storage_broker.delete(stored)
