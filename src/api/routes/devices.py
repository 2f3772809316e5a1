"""
Device lookup API routes, plus distinct type / manufacturer / model listings
"""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_devices_service
from api.routes.lookups import build_lookup_router
from config.lookups import DEVICE
from models.device import (
    DeviceCreateRequest, DeviceUpdateRequest, DevicePatchRequest, DeviceListQuery,
    ManufacturerQuery, ModelQuery
)
from services.devices_service import DevicesService
from utils.auth import AuthUser, get_auth_user

router = APIRouter()
logger = logging.getLogger(__name__)

# Registered before the CRUD routes so these paths are not taken for ids


@router.get("/types", response_model=List[str])
async def list_device_types(
    service: DevicesService = Depends(get_devices_service),
    auth_user: Optional[AuthUser] = Depends(get_auth_user)
):
    """Distinct device types"""
    return await service.list_types(auth_user)


@router.get("/manufacturers", response_model=List[str])
async def list_device_manufacturers(
    query: Annotated[ManufacturerQuery, Query()],
    service: DevicesService = Depends(get_devices_service),
    auth_user: Optional[AuthUser] = Depends(get_auth_user)
):
    """Distinct manufacturers, optionally for one device type"""
    return await service.list_manufacturers(query.type, auth_user)


@router.get("/models", response_model=List[str])
async def list_device_models(
    query: Annotated[ModelQuery, Query()],
    service: DevicesService = Depends(get_devices_service),
    auth_user: Optional[AuthUser] = Depends(get_auth_user)
):
    """Distinct models, optionally for one device type and manufacturer"""
    return await service.list_models(query.type, query.manufacturer, auth_user)


build_lookup_router(
    DEVICE.path,
    list_query_model=DeviceListQuery,
    create_model=DeviceCreateRequest,
    update_model=DeviceUpdateRequest,
    patch_model=DevicePatchRequest,
    router=router,
)
