"""
Service container - explicit construction of store clients and services.
The application lifespan owns the container; tests build one from fakes.
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List

import httpx

from config import settings
from database.connection import init_database, close_database
from database.primary_store import PrimaryStore
from search.client import create_es_client, close_es_client
from search.index import SearchIndex
from services.base_service import LookupService
from services.countries_service import CountriesService
from services.devices_service import DevicesService
from services.educational_institutions_service import EducationalInstitutionsService
from services.event_publisher import EventPublisher, M2MTokenProvider
from services.health_service import HealthService

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    primary_store: object
    search_index: object
    publisher: object
    countries: CountriesService
    devices: DevicesService
    educational_institutions: EducationalInstitutionsService
    health: HealthService
    closers: List[Callable[[], Awaitable[None]]] = field(default_factory=list)

    def services(self) -> Dict[str, LookupService]:
        """Lookup services keyed by URL path segment"""
        return {
            service.descriptor.path: service
            for service in (self.countries, self.devices, self.educational_institutions)
        }

    async def close(self):
        for closer in reversed(self.closers):
            await closer()
        self.closers = []


def build_container(primary_store, search_index, publisher) -> ServiceContainer:
    """Wire lookup services around already constructed collaborators"""
    return ServiceContainer(
        primary_store=primary_store,
        search_index=search_index,
        publisher=publisher,
        countries=CountriesService(primary_store, search_index, publisher),
        devices=DevicesService(primary_store, search_index, publisher),
        educational_institutions=EducationalInstitutionsService(primary_store, search_index, publisher),
        health=HealthService(primary_store, search_index),
    )


async def create_container() -> ServiceContainer:
    """Connect to PostgreSQL, Elasticsearch and the bus API and build the services"""
    db_pool = await init_database()
    es = create_es_client()
    http_client = httpx.AsyncClient(timeout=settings.BUSAPI_TIMEOUT)

    publisher = EventPublisher(
        http_client=http_client,
        token_provider=M2MTokenProvider(http_client)
    )
    container = build_container(PrimaryStore(db_pool), SearchIndex(es), publisher)
    container.closers = [
        lambda: close_database(db_pool),
        lambda: close_es_client(es),
        http_client.aclose,
    ]
    logger.info("Service container created")
    return container
