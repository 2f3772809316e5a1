"""
Educational institution lookup API routes
"""

from api.routes.lookups import build_lookup_router
from config.lookups import EDUCATIONAL_INSTITUTION
from models.educational_institution import (
    EducationalInstitutionCreateRequest,
    EducationalInstitutionUpdateRequest,
    EducationalInstitutionPatchRequest,
    EducationalInstitutionListQuery
)

router = build_lookup_router(
    EDUCATIONAL_INSTITUTION.path,
    list_query_model=EducationalInstitutionListQuery,
    create_model=EducationalInstitutionCreateRequest,
    update_model=EducationalInstitutionUpdateRequest,
    patch_model=EducationalInstitutionPatchRequest,
)
