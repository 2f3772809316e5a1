"""
Educational institution Pydantic models
"""

from typing import Optional
from pydantic import Field

from models.common import ListQuery, RequestBody


class EducationalInstitutionCreateRequest(RequestBody):
    name: str = Field(..., min_length=1)


class EducationalInstitutionUpdateRequest(EducationalInstitutionCreateRequest):
    pass


class EducationalInstitutionPatchRequest(RequestBody):
    name: Optional[str] = Field(None, min_length=1)


class EducationalInstitutionListQuery(ListQuery):
    name: Optional[str] = Field(None, description="Exact match on institution name")
