"""
Read router - serves list and get requests from the search index and falls
back to the primary store when the index fails or has nothing for the query
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config import settings
from config.lookups import LookupDescriptor, SOFT_DELETE_FIELD
from search.index import SearchQuery
from services.visibility import can_see_deleted, is_visible, sanitize
from utils.auth import AuthUser
from utils.errors import BadRequestError, not_found

logger = logging.getLogger(__name__)


@dataclass
class ListResult:
    """One page of lookup records; ``from_db`` marks the unpaginated fallback"""
    result: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0
    page: int = 1
    per_page: int = 20
    from_db: bool = False


def extract_filters(descriptor: LookupDescriptor, criteria: Dict[str, Any]) -> Dict[str, Any]:
    """Exact-match filters for the descriptor's filterable fields present in ``criteria``"""
    return {
        name: criteria[name]
        for name in descriptor.filter_fields
        if criteria.get(name) is not None
    }


def build_list_query(
    descriptor: LookupDescriptor,
    filters: Dict[str, Any],
    page: int,
    per_page: int,
    show_deleted: bool
) -> SearchQuery:
    query = SearchQuery(
        filters=dict(filters),
        sort_by=list(descriptor.sort_by),
        offset=(page - 1) * per_page,
        size=per_page,
    )
    if not show_deleted:
        query.must_not = {SOFT_DELETE_FIELD: True}
        query.source_excludes = [SOFT_DELETE_FIELD]
    return query


def sort_records(descriptor: LookupDescriptor, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(records, key=lambda r: tuple(str(r.get(name) or "") for name in descriptor.sort_by))


class ReadRouter:
    """Index-first reads with primary store fallback"""

    def __init__(self, primary_store, search_index, max_result_window: int = settings.INDEX_MAX_RESULT_WINDOW):
        self.primary_store = primary_store
        self.search_index = search_index
        self.max_result_window = max_result_window

    async def list(
        self,
        descriptor: LookupDescriptor,
        criteria: Dict[str, Any],
        auth_user: Optional[AuthUser] = None
    ) -> ListResult:
        """
        List records matching ``criteria``

        Args:
            descriptor: Lookup entity descriptor
            criteria: page, perPage, includeSoftDeleted and per-entity filter values
            auth_user: Caller, None when anonymous

        Returns:
            ListResult; from the index with paging info, or every match from the primary store

        Raises:
            ForbiddenError: Non-admin asked for soft-deleted records
            BadRequestError: Page window exceeds the index result window
        """
        show_deleted = can_see_deleted(auth_user, criteria.get("includeSoftDeleted"))
        page = int(criteria.get("page") or 1)
        per_page = int(criteria.get("perPage") or 20)
        filters = extract_filters(descriptor, criteria)

        if page * per_page >= self.max_result_window:
            raise BadRequestError(
                f"The requested page window (page * perPage) must be less than {self.max_result_window}"
            )

        query = build_list_query(descriptor, filters, page, per_page, show_deleted)
        try:
            found = await self.search_index.search(descriptor.index, query)
        except Exception as e:
            logger.error(f"Search index list failed for {descriptor.index}, falling back to primary store: {e}",
                         exc_info=True)
            found = None

        if found is not None:
            if found.hits or found.total > 0:
                # total > 0 with no hits means the requested page is past the end
                return ListResult(result=found.hits, total=found.total, page=page, per_page=per_page)
            logger.info(f"Search index {descriptor.index} returned nothing, checking primary store")

        records = await self.primary_store.scan(descriptor.table, filters, exclude_deleted=not show_deleted)
        if not show_deleted:
            records = [sanitize(record) for record in records]
        records = sort_records(descriptor, records)
        return ListResult(result=records, total=len(records), page=1, per_page=len(records), from_db=True)

    async def get(
        self,
        descriptor: LookupDescriptor,
        record_id: str,
        include_soft_deleted: Optional[bool] = None,
        auth_user: Optional[AuthUser] = None
    ) -> Dict[str, Any]:
        """
        Get one record by id

        Raises:
            ForbiddenError: Non-admin asked for soft-deleted records
            NotFoundError: Record absent or not visible to the caller
        """
        show_deleted = can_see_deleted(auth_user, include_soft_deleted)

        record = None
        try:
            record = await self.search_index.get_source(descriptor.index, record_id)
        except Exception as e:
            logger.warning(f"Search index get {descriptor.index}/{record_id} failed, falling back to primary store: {e}")

        if record is None:
            record = await self.primary_store.get(descriptor.table, record_id)
            if record is None:
                raise not_found(descriptor.model_name, record_id)

        if not is_visible(record, show_deleted):
            raise not_found(descriptor.model_name, record_id)

        return record if show_deleted else sanitize(record)
