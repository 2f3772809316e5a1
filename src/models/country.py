"""
Country-related Pydantic models
"""

from typing import Optional
from pydantic import Field

from models.common import ListQuery, RequestBody


class CountryCreateRequest(RequestBody):
    name: str = Field(..., min_length=1)
    countryCode: str = Field(..., min_length=1)
    countryFlag: str = Field(..., min_length=1)


class CountryUpdateRequest(CountryCreateRequest):
    pass


class CountryPatchRequest(RequestBody):
    name: Optional[str] = Field(None, min_length=1)
    countryCode: Optional[str] = Field(None, min_length=1)
    countryFlag: Optional[str] = Field(None, min_length=1)


class CountryListQuery(ListQuery):
    name: Optional[str] = Field(None, description="Exact match on country name")
    countryCode: Optional[str] = Field(None, description="Exact match on country code")
