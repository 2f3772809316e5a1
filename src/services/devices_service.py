"""
Devices service - business logic for device lookups, including distinct
type / manufacturer / model listings
"""

import logging
from typing import Any, Dict, List, Optional

from config.lookups import DEVICE
from services.base_service import LookupService
from utils.auth import AuthUser

logger = logging.getLogger(__name__)

DISTINCT_PAGE_SIZE = 100


class DevicesService(LookupService):
    """Service for device lookups"""

    def __init__(self, primary_store, search_index, publisher):
        super().__init__(DEVICE, primary_store, search_index, publisher)

    async def list_distinct(
        self,
        field_name: str,
        criteria: Optional[Dict[str, Any]] = None,
        auth_user: Optional[AuthUser] = None
    ) -> List[str]:
        """
        Collect the distinct values of ``field_name`` over all devices matching ``criteria``

        Walks the list operation page by page; a primary store fallback returns
        everything in one batch and ends the walk.
        """
        values = set()
        page = 1
        while True:
            page_criteria = dict(criteria or {}, page=page, perPage=DISTINCT_PAGE_SIZE)
            result = await self.list(page_criteria, auth_user)
            values.update(record[field_name] for record in result.result if record.get(field_name))

            if result.from_db or len(result.result) < DISTINCT_PAGE_SIZE:
                break
            if page * DISTINCT_PAGE_SIZE >= result.total:
                break
            if (page + 1) * DISTINCT_PAGE_SIZE >= self.read_router.max_result_window:
                logger.warning(f"Distinct {field_name} scan stopped at the index result window")
                break
            page += 1

        return sorted(values)

    async def list_types(self, auth_user: Optional[AuthUser] = None) -> List[str]:
        return await self.list_distinct("type", auth_user=auth_user)

    async def list_manufacturers(self, device_type: Optional[str] = None,
                                 auth_user: Optional[AuthUser] = None) -> List[str]:
        return await self.list_distinct("manufacturer", {"type": device_type}, auth_user)

    async def list_models(self, device_type: Optional[str] = None, manufacturer: Optional[str] = None,
                          auth_user: Optional[AuthUser] = None) -> List[str]:
        return await self.list_distinct("model", {"type": device_type, "manufacturer": manufacturer}, auth_user)
