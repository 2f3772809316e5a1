"""
Lookup entity descriptors - single source of truth for per-entity field sets,
uniqueness keys and storage names
"""

from typing import Dict, List, Optional
from pydantic import BaseModel

from config.settings import (
    COUNTRY_TABLE, DEVICE_TABLE, EDUCATIONAL_INSTITUTION_TABLE,
    COUNTRY_INDEX, DEVICE_INDEX, EDUCATIONAL_INSTITUTION_INDEX
)

SOFT_DELETE_FIELD = "isDeleted"


class LookupField(BaseModel):
    """Business field definition within a lookup descriptor"""
    name: str
    required: bool = True
    default: Optional[str] = None
    filterable: bool = True


class LookupDescriptor(BaseModel):
    """Declarative description of one lookup entity type"""
    resource: str          # resource name carried in events and error actions
    model_name: str        # human name used in error messages
    path: str              # URL segment under /lookups
    table: str
    index: str
    fields: List[LookupField]
    unique_key: List[str]
    sort_by: List[str]

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    @property
    def filter_fields(self) -> List[str]:
        return [f.name for f in self.fields if f.filterable]

    def get_field(self, field_name: str) -> Optional[LookupField]:
        """Get field definition by name"""
        return next((f for f in self.fields if f.name == field_name), None)

    def action(self, verb: str) -> str:
        """Error event action tag, e.g. ``country.create``"""
        return f"{self.resource}.{verb}"


COUNTRY = LookupDescriptor(
    resource="country",
    model_name="Country",
    path="countries",
    table=COUNTRY_TABLE,
    index=COUNTRY_INDEX,
    fields=[
        LookupField(name="name"),
        LookupField(name="countryCode"),
        LookupField(name="countryFlag", filterable=False),
    ],
    unique_key=["name"],
    sort_by=["name"],
)

DEVICE = LookupDescriptor(
    resource="device",
    model_name="Device",
    path="devices",
    table=DEVICE_TABLE,
    index=DEVICE_INDEX,
    fields=[
        LookupField(name="type"),
        LookupField(name="manufacturer"),
        LookupField(name="model"),
        LookupField(name="operatingSystem"),
        LookupField(name="operatingSystemVersion", required=False, default="ANY"),
    ],
    unique_key=["type", "manufacturer", "model", "operatingSystem", "operatingSystemVersion"],
    sort_by=["type", "manufacturer", "model", "operatingSystem", "operatingSystemVersion"],
)

EDUCATIONAL_INSTITUTION = LookupDescriptor(
    resource="educationalInstitution",
    model_name="EducationalInstitution",
    path="educationalInstitutions",
    table=EDUCATIONAL_INSTITUTION_TABLE,
    index=EDUCATIONAL_INSTITUTION_INDEX,
    fields=[LookupField(name="name")],
    unique_key=["name"],
    sort_by=["name"],
)


def get_all_descriptors() -> Dict[str, LookupDescriptor]:
    """Get all lookup descriptors keyed by URL path segment"""
    return {d.path: d for d in (COUNTRY, DEVICE, EDUCATIONAL_INSTITUTION)}


def get_descriptor(path: str) -> LookupDescriptor:
    descriptors = get_all_descriptors()
    if path not in descriptors:
        raise ValueError(f"Unknown lookup: {path}. Available: {list(descriptors)}")
    return descriptors[path]
