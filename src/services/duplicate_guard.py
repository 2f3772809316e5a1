"""
Duplicate guard - uniqueness checks against the primary store before writes
"""

import logging
from typing import Any, List

from config.lookups import LookupDescriptor
from utils.errors import BadRequestError, ConflictError

logger = logging.getLogger(__name__)


class DuplicateGuard:
    """Rejects writes that would duplicate the key fields of a live record"""

    def __init__(self, primary_store):
        self.primary_store = primary_store

    async def check_unique(self, descriptor: LookupDescriptor, keys: List[str], values: List[Any]) -> None:
        """
        Fail if a non-deleted record already matches every key field

        Args:
            descriptor: Lookup entity descriptor
            keys: Ordered key field names
            values: Values matching ``keys``

        Raises:
            BadRequestError: ``keys`` and ``values`` differ in length
            ConflictError: A matching record exists
        """
        if len(keys) != len(values):
            raise BadRequestError(f"size of {keys} and {values} do not match.")

        filters = dict(zip(keys, values))
        records = await self.primary_store.scan(descriptor.table, filters, exclude_deleted=True)
        if not records:
            return

        logger.info(f"Duplicate {descriptor.model_name} rejected: {filters}")
        if len(keys) == 1:
            raise ConflictError(f"{descriptor.model_name} with {keys[0]}: {values[0]} already exists")

        pairs = ", ".join(f"{key}: {value}" for key, value in zip(keys, values))
        raise ConflictError(f"{descriptor.model_name} with [ {pairs} ] already exists")

    async def check_record(self, descriptor: LookupDescriptor, record: dict) -> None:
        """Check the descriptor's unique key using values from ``record``"""
        keys = descriptor.unique_key
        await self.check_unique(descriptor, keys, [record.get(key) for key in keys])
