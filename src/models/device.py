"""
Device-related Pydantic models
"""

from typing import Optional
from pydantic import BaseModel, Field

from models.common import ListQuery, RequestBody

ANY_OS_VERSION = "ANY"


class DeviceCreateRequest(RequestBody):
    type: str = Field(..., min_length=1)
    manufacturer: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    operatingSystem: str = Field(..., min_length=1)
    operatingSystemVersion: str = Field(ANY_OS_VERSION, min_length=1)


class DeviceUpdateRequest(DeviceCreateRequest):
    pass


class DevicePatchRequest(RequestBody):
    type: Optional[str] = Field(None, min_length=1)
    manufacturer: Optional[str] = Field(None, min_length=1)
    model: Optional[str] = Field(None, min_length=1)
    operatingSystem: Optional[str] = Field(None, min_length=1)
    operatingSystemVersion: Optional[str] = Field(None, min_length=1)


class DeviceListQuery(ListQuery):
    type: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    operatingSystem: Optional[str] = None
    operatingSystemVersion: Optional[str] = None


class ManufacturerQuery(BaseModel):
    model_config = {"extra": "forbid"}

    type: Optional[str] = Field(None, description="Restrict to one device type")


class ModelQuery(ManufacturerQuery):
    manufacturer: Optional[str] = Field(None, description="Restrict to one manufacturer")
