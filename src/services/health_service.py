"""
Health check service - verifies both backing stores are reachable
"""

import logging

from utils.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)


class HealthService:

    def __init__(self, primary_store, search_index):
        self.primary_store = primary_store
        self.search_index = search_index

    async def check(self) -> dict:
        """
        Ping the search index, then the primary store

        Raises:
            ServiceUnavailableError: Either store is unreachable
        """
        try:
            reachable = await self.search_index.ping()
        except Exception as e:
            raise ServiceUnavailableError(f"Search index is unavailable, {e}")
        if not reachable:
            raise ServiceUnavailableError("Search index is unavailable, ping failed")

        try:
            await self.primary_store.ping()
        except Exception as e:
            raise ServiceUnavailableError(f"Primary store is unavailable, {e}")

        return {"checksRun": 1}
