"""
FastAPI dependencies resolving services from the application container
"""

from fastapi import Request

from services.base_service import LookupService
from services.devices_service import DevicesService
from services.health_service import HealthService


def get_lookup_service(path: str):
    """Dependency returning the lookup service mounted at ``/lookups/<path>``"""
    def dependency(request: Request) -> LookupService:
        return request.app.state.container.services()[path]
    return dependency


def get_devices_service(request: Request) -> DevicesService:
    return request.app.state.container.devices


def get_health_service(request: Request) -> HealthService:
    return request.app.state.container.health
