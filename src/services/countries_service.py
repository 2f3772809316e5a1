"""
Countries service - business logic for country lookups
"""

from config.lookups import COUNTRY
from services.base_service import LookupService


class CountriesService(LookupService):
    """Service for country lookups"""

    def __init__(self, primary_store, search_index, publisher):
        super().__init__(COUNTRY, primary_store, search_index, publisher)
