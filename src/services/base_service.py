"""
Base lookup service - CRUD and search for one lookup entity type, configured
by its descriptor
"""

import logging
from typing import Any, Dict, Optional

from config.lookups import LookupDescriptor, SOFT_DELETE_FIELD
from services.dual_write import DualWriteCoordinator
from services.duplicate_guard import DuplicateGuard
from services.read_router import ListResult, ReadRouter
from services.visibility import sanitize
from utils.auth import AuthUser
from utils.errors import not_found

logger = logging.getLogger(__name__)


class LookupService:
    """Service wiring the duplicate guard, dual-write coordinator and read router for one lookup"""

    def __init__(self, descriptor: LookupDescriptor, primary_store, search_index, publisher):
        self.descriptor = descriptor
        self.primary_store = primary_store
        self.guard = DuplicateGuard(primary_store)
        self.coordinator = DualWriteCoordinator(primary_store, search_index, publisher)
        self.read_router = ReadRouter(primary_store, search_index)
        logger.info(f"LookupService initialized for resource: {descriptor.resource}")

    async def list(self, criteria: Dict[str, Any], auth_user: Optional[AuthUser] = None) -> ListResult:
        return await self.read_router.list(self.descriptor, criteria, auth_user)

    async def get_entity(
        self,
        record_id: str,
        include_soft_deleted: Optional[bool] = None,
        auth_user: Optional[AuthUser] = None
    ) -> Dict[str, Any]:
        return await self.read_router.get(self.descriptor, record_id, include_soft_deleted, auth_user)

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a new lookup record

        Args:
            data: Validated business field values

        Returns:
            Created record with its generated id

        Raises:
            ConflictError: A live record with the same unique key exists
            TransactionFailureError: The dual write failed
        """
        await self.guard.check_record(self.descriptor, data)
        logger.info(f"Creating {self.descriptor.model_name}: {data}")
        return await self.coordinator.create(self.descriptor, data)

    async def _get_live_record(self, record_id: str) -> Dict[str, Any]:
        record = await self.primary_store.get(self.descriptor.table, record_id)
        if record is None or record.get(SOFT_DELETE_FIELD):
            raise not_found(self.descriptor.model_name, record_id)
        return record

    async def partially_update(self, record_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update the given fields of a record

        A request that changes no value performs no writes and publishes nothing.

        Raises:
            NotFoundError: Record absent or soft deleted
            ConflictError: The new unique key is taken
            TransactionFailureError: The dual write failed
        """
        record = await self._get_live_record(record_id)
        changes = {
            name: value for name, value in data.items()
            if name in self.descriptor.field_names and record.get(name) != value
        }
        if not changes:
            logger.info(f"{self.descriptor.model_name} {record_id} unchanged, skipping update")
            return sanitize(record)

        if any(name in changes for name in self.descriptor.unique_key):
            await self.guard.check_record(self.descriptor, dict(record, **changes))

        return await self.coordinator.update(self.descriptor, record, changes)

    async def update(self, record_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Full update; ``data`` carries every required field"""
        return await self.partially_update(record_id, data)

    async def remove(self, record_id: str, destroy: bool = False) -> None:
        """
        Soft delete a record, or remove it physically when ``destroy`` is set

        Raises:
            NotFoundError: Record absent, or already soft deleted for a soft delete
            TransactionFailureError: The dual write failed
        """
        record = await self.primary_store.get(self.descriptor.table, record_id)
        if record is None or (record.get(SOFT_DELETE_FIELD) and not destroy):
            raise not_found(self.descriptor.model_name, record_id)

        logger.info(f"Removing {self.descriptor.model_name} {record_id} (destroy={destroy})")
        await self.coordinator.remove(self.descriptor, record, destroy)
