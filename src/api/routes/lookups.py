"""
Lookup API routes - one router per lookup entity built from its request models.
Reads are open to anonymous callers; writes need the admin role or a matching scope.
"""

import logging
from typing import Annotated, Optional, Type
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.dependencies import get_lookup_service
from config.settings import ADMIN_ROLES, Scopes
from models.common import GetQuery
from services.base_service import LookupService
from utils.auth import AuthUser, get_auth_user, require_access
from utils.pagination import build_pagination_headers

logger = logging.getLogger(__name__)

ADMIN_ONLY = ADMIN_ROLES


def build_lookup_router(
    path: str,
    list_query_model: Type[BaseModel],
    create_model: Type[BaseModel],
    update_model: Type[BaseModel],
    patch_model: Type[BaseModel],
    router: Optional[APIRouter] = None
) -> APIRouter:
    """
    Build the list/get/create/update/patch/delete routes for one lookup

    Args:
        path: URL segment under /lookups, also the container service key
        list_query_model: Query model with pagination and filter fields
        create_model: POST body model
        update_model: PUT body model (all required fields)
        patch_model: PATCH body model (all fields optional)
        router: Existing router to extend, its routes keep precedence
    """
    if router is None:
        router = APIRouter()
    get_service = get_lookup_service(path)

    can_create = require_access(ADMIN_ONLY, [Scopes.CREATE_LOOKUP, Scopes.ALL_LOOKUP])
    can_update = require_access(ADMIN_ONLY, [Scopes.UPDATE_LOOKUP, Scopes.ALL_LOOKUP])
    can_delete = require_access(ADMIN_ONLY, [Scopes.DELETE_LOOKUP, Scopes.ALL_LOOKUP])

    @router.get("")
    async def list_lookups(
        request: Request,
        criteria: Annotated[list_query_model, Query()],
        service: LookupService = Depends(get_service),
        auth_user: Optional[AuthUser] = Depends(get_auth_user)
    ):
        """List lookups; pagination headers are omitted when served from the primary store"""
        result = await service.list(criteria.model_dump(), auth_user)
        return JSONResponse(content=result.result, headers=build_pagination_headers(request, result))

    @router.head("")
    async def list_lookups_head(
        request: Request,
        criteria: Annotated[list_query_model, Query()],
        service: LookupService = Depends(get_service),
        auth_user: Optional[AuthUser] = Depends(get_auth_user)
    ):
        result = await service.list(criteria.model_dump(), auth_user)
        return Response(headers=build_pagination_headers(request, result))

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_lookup(
        data: create_model,
        service: LookupService = Depends(get_service),
        _: AuthUser = Depends(can_create)
    ):
        return await service.create(data.model_dump())

    @router.get("/{record_id}")
    async def get_lookup(
        record_id: UUID,
        options: Annotated[GetQuery, Query()],
        service: LookupService = Depends(get_service),
        auth_user: Optional[AuthUser] = Depends(get_auth_user)
    ):
        return await service.get_entity(str(record_id), options.includeSoftDeleted, auth_user)

    @router.head("/{record_id}")
    async def get_lookup_head(
        record_id: UUID,
        options: Annotated[GetQuery, Query()],
        service: LookupService = Depends(get_service),
        auth_user: Optional[AuthUser] = Depends(get_auth_user)
    ):
        await service.get_entity(str(record_id), options.includeSoftDeleted, auth_user)
        return Response()

    @router.put("/{record_id}")
    async def update_lookup(
        record_id: UUID,
        data: update_model,
        service: LookupService = Depends(get_service),
        _: AuthUser = Depends(can_update)
    ):
        return await service.update(str(record_id), data.model_dump())

    @router.patch("/{record_id}")
    async def partially_update_lookup(
        record_id: UUID,
        data: patch_model,
        service: LookupService = Depends(get_service),
        _: AuthUser = Depends(can_update)
    ):
        return await service.partially_update(str(record_id), data.model_dump(exclude_unset=True, exclude_none=True))

    @router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def remove_lookup(
        record_id: UUID,
        destroy: bool = Query(False, description="Physically remove instead of soft deleting"),
        service: LookupService = Depends(get_service),
        _: AuthUser = Depends(can_delete)
    ):
        await service.remove(str(record_id), destroy)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
