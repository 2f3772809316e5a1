"""
Country lookup API routes
"""

from api.routes.lookups import build_lookup_router
from config.lookups import COUNTRY
from models.country import (
    CountryCreateRequest, CountryUpdateRequest, CountryPatchRequest, CountryListQuery
)

router = build_lookup_router(
    COUNTRY.path,
    list_query_model=CountryListQuery,
    create_model=CountryCreateRequest,
    update_model=CountryUpdateRequest,
    patch_model=CountryPatchRequest,
)
