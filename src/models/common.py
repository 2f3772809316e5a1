"""
Shared request models for lookup endpoints
"""

from typing import Optional
from pydantic import BaseModel, Field


class ListQuery(BaseModel):
    """Pagination and soft-delete options accepted by every list endpoint"""
    model_config = {"extra": "forbid"}

    page: int = Field(1, ge=1, description="Page number, starting at 1")
    perPage: int = Field(20, ge=1, le=100, description="Records per page")
    includeSoftDeleted: Optional[bool] = Field(None, description="Include soft-deleted records (admin only)")


class GetQuery(BaseModel):
    model_config = {"extra": "forbid"}

    includeSoftDeleted: Optional[bool] = Field(None, description="Include a soft-deleted record (admin only)")


class RequestBody(BaseModel):
    """Lookup request bodies reject unknown keys"""
    model_config = {"extra": "forbid"}
