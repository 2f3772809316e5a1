"""
Dual-write coordinator - keeps the primary store and the search index in step.

Each write is a short saga with at most one compensating action. Create writes
the index, then the primary store; the compensation is an index delete.
Update and remove take a primary store snapshot before any write, and their
compensation restores the index document from it, or removes it again when the
saga had to re-create a document missing from the index. A failed compensation is
reported as UNCOMPENSATED_FAILURE and logged for manual reconciliation.
"""

import logging
import uuid
from typing import Any, Dict

from config import settings
from config.lookups import LookupDescriptor, SOFT_DELETE_FIELD
from search.index import DocumentNotFoundError
from services.visibility import sanitize
from utils.error_handling import log_business_error
from utils.errors import SagaOutcome, TransactionFailureError

logger = logging.getLogger(__name__)

ROLLBACK_FAILED_MESSAGE = "Primary store & search index rollback operation failed"


class DualWriteCoordinator:
    """Create, update and remove sagas across the search index and primary store"""

    def __init__(self, primary_store, search_index, publisher):
        self.primary_store = primary_store
        self.search_index = search_index
        self.publisher = publisher

    async def _fail(
        self,
        descriptor: LookupDescriptor,
        verb: str,
        payload: Dict[str, Any],
        error: BaseException
    ) -> TransactionFailureError:
        """Report a cleanly failed saga and build the error to raise"""
        await self.publisher.publish_error(dict(payload, resource=descriptor.resource), descriptor.action(verb))
        logger.error(f"{descriptor.action(verb)} failed ({SagaOutcome.COMPENSATED_FAILURE.value}): {error}")
        return TransactionFailureError(
            f"{descriptor.model_name} {verb} failed: {error}",
            outcome=SagaOutcome.COMPENSATED_FAILURE,
            cause=error
        )

    def _rollback_failed(
        self,
        descriptor: LookupDescriptor,
        verb: str,
        record_id: str,
        error: BaseException,
        rollback_error: BaseException
    ) -> TransactionFailureError:
        log_business_error(
            "rollback_failed",
            f"{descriptor.action(verb)} left {descriptor.table}/{descriptor.index} diverged for id {record_id}",
            context={
                "saga_outcome": SagaOutcome.UNCOMPENSATED_FAILURE.value,
                "primary_store_error": str(error),
                "rollback_error": str(rollback_error),
            },
            exception=rollback_error
        )
        return TransactionFailureError(
            ROLLBACK_FAILED_MESSAGE,
            outcome=SagaOutcome.UNCOMPENSATED_FAILURE,
            cause=error,
            rollback_error=rollback_error
        )

    async def create(self, descriptor: LookupDescriptor, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a record in both stores

        Args:
            descriptor: Lookup entity descriptor
            data: Validated business field values

        Returns:
            The created record without the soft-delete flag

        Raises:
            TransactionFailureError: Either write failed
        """
        record = dict(data)
        record["id"] = str(uuid.uuid4())
        record[SOFT_DELETE_FIELD] = False

        try:
            await self.search_index.create(descriptor.index, record["id"], record)
        except Exception as e:
            raise await self._fail(descriptor, "create", record, e)

        try:
            created = await self.primary_store.create(descriptor.table, record)
        except Exception as e:
            try:
                await self.search_index.delete(descriptor.index, record["id"])
            except Exception as rollback_error:
                raise self._rollback_failed(descriptor, "create", record["id"], e, rollback_error)
            raise await self._fail(descriptor, "create", record, e)

        logger.info(f"{descriptor.action('create')} {record['id']} {SagaOutcome.SUCCESS.value}")
        await self.publisher.publish(settings.LOOKUP_CREATE_TOPIC, dict(created, resource=descriptor.resource))
        return sanitize(created)

    async def update(
        self,
        descriptor: LookupDescriptor,
        original: Dict[str, Any],
        changes: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Apply changed fields to both stores

        Args:
            descriptor: Lookup entity descriptor
            original: Primary store snapshot taken before any write
            changes: Only the fields whose value differs from ``original``

        Returns:
            The updated record without the soft-delete flag

        Raises:
            TransactionFailureError: Either write failed
        """
        record_id = original["id"]
        merged = dict(original, **changes)
        reindexed = False

        try:
            try:
                await self.search_index.update(descriptor.index, record_id, changes)
            except DocumentNotFoundError:
                logger.warning(f"{descriptor.model_name} {record_id} missing from index {descriptor.index}, re-indexing")
                await self.search_index.create(descriptor.index, record_id, merged)
                reindexed = True
        except Exception as e:
            raise await self._fail(descriptor, "update", merged, e)

        try:
            updated = await self.primary_store.update(descriptor.table, original, changes)
        except Exception as e:
            try:
                if reindexed:
                    await self.search_index.delete(descriptor.index, record_id)
                else:
                    await self.search_index.update(descriptor.index, record_id, original)
            except Exception as rollback_error:
                raise self._rollback_failed(descriptor, "update", record_id, e, rollback_error)
            raise await self._fail(descriptor, "update", merged, e)

        logger.info(f"{descriptor.action('update')} {record_id} {SagaOutcome.SUCCESS.value}")
        await self.publisher.publish(
            settings.LOOKUP_UPDATE_TOPIC,
            dict(changes, resource=descriptor.resource, id=record_id)
        )
        return sanitize(updated)

    async def remove(self, descriptor: LookupDescriptor, original: Dict[str, Any], destroy: bool) -> None:
        """
        Soft delete (flag) or hard delete (destroy) a record in both stores

        Args:
            descriptor: Lookup entity descriptor
            original: Primary store snapshot taken before any write
            destroy: Physically remove instead of flagging

        Raises:
            TransactionFailureError: Either write failed
        """
        record_id = original["id"]
        flagged = dict(original, **{SOFT_DELETE_FIELD: True})
        indexed = True

        try:
            if destroy:
                try:
                    await self.search_index.delete(descriptor.index, record_id)
                except DocumentNotFoundError:
                    logger.warning(f"{descriptor.model_name} {record_id} already absent from index {descriptor.index}")
                    indexed = False
            else:
                try:
                    await self.search_index.update(descriptor.index, record_id, {SOFT_DELETE_FIELD: True})
                except DocumentNotFoundError:
                    logger.warning(f"{descriptor.model_name} {record_id} missing from index {descriptor.index}, re-indexing")
                    await self.search_index.create(descriptor.index, record_id, flagged)
                    indexed = False
        except Exception as e:
            raise await self._fail(descriptor, "delete", original, e)

        try:
            if destroy:
                await self.primary_store.delete(descriptor.table, original)
            else:
                await self.primary_store.update(descriptor.table, original, {SOFT_DELETE_FIELD: True})
        except Exception as e:
            try:
                if not indexed:
                    # the index had no document before this saga
                    if not destroy:
                        await self.search_index.delete(descriptor.index, record_id)
                elif destroy:
                    await self.search_index.create(descriptor.index, record_id, original)
                else:
                    await self.search_index.update(
                        descriptor.index, record_id,
                        {SOFT_DELETE_FIELD: original.get(SOFT_DELETE_FIELD, False)}
                    )
            except Exception as rollback_error:
                raise self._rollback_failed(descriptor, "delete", record_id, e, rollback_error)
            raise await self._fail(descriptor, "delete", original, e)

        logger.info(f"{descriptor.action('delete')} {record_id} (destroy={destroy}) {SagaOutcome.SUCCESS.value}")
        await self.publisher.publish(
            settings.LOOKUP_DELETE_TOPIC,
            {"resource": descriptor.resource, "id": record_id, "isSoftDelete": not destroy}
        )
