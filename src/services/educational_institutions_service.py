"""
Educational institutions service - business logic for educational institution lookups
"""

from config.lookups import EDUCATIONAL_INSTITUTION
from services.base_service import LookupService


class EducationalInstitutionsService(LookupService):
    """Service for educational institution lookups"""

    def __init__(self, primary_store, search_index, publisher):
        super().__init__(EDUCATIONAL_INSTITUTION, primary_store, search_index, publisher)
