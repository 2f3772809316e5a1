"""
Search index adapter - a derived, rebuildable mirror of the primary store used
for filtered and paginated reads
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from elasticsearch import AsyncElasticsearch, NotFoundError as ESNotFoundError

from config.lookups import SOFT_DELETE_FIELD

logger = logging.getLogger(__name__)


class DocumentNotFoundError(Exception):
    """Raised when the index holds no document with the requested id"""

    def __init__(self, index: str, doc_id: str):
        super().__init__(f"Document {doc_id} not found in index {index}")
        self.index = index
        self.doc_id = doc_id


@dataclass
class SearchQuery:
    """Engine-neutral description of a filtered, sorted, paginated search"""
    filters: Dict[str, Any] = field(default_factory=dict)     # term equality, AND-ed
    must_not: Dict[str, Any] = field(default_factory=dict)    # term equality, excluded
    sort_by: List[str] = field(default_factory=list)          # ascending
    offset: int = 0
    size: int = 20
    source_excludes: List[str] = field(default_factory=list)

    def to_es_body(self) -> Dict[str, Any]:
        """Translate to Elasticsearch search keyword arguments"""
        body: Dict[str, Any] = {
            "from_": self.offset,
            "size": self.size,
            "sort": [{name: {"order": "asc"}} for name in self.sort_by],
            "track_total_hits": True,
        }
        bool_query: Dict[str, Any] = {}
        if self.filters:
            bool_query["filter"] = [{"term": {name: value}} for name, value in self.filters.items()]
        if self.must_not:
            bool_query["must_not"] = [{"term": {name: value}} for name, value in self.must_not.items()]
        body["query"] = {"bool": bool_query} if bool_query else {"match_all": {}}
        if self.source_excludes:
            body["source_excludes"] = self.source_excludes
        return body


def build_mappings(fields: List[str]) -> Dict[str, Any]:
    properties = {name: {"type": "keyword"} for name in fields}
    properties["id"] = {"type": "keyword"}
    properties[SOFT_DELETE_FIELD] = {"type": "boolean"}
    return {"properties": properties}


@dataclass
class SearchResult:
    total: int
    hits: List[Dict[str, Any]]


class SearchIndex:
    """Document CRUD and search over Elasticsearch"""

    def __init__(self, es: AsyncElasticsearch):
        self.es = es

    async def create(self, index: str, doc_id: str, doc: Dict[str, Any]) -> None:
        """Index a full document, immediately visible to searches"""
        await self.es.index(index=index, id=doc_id, document=doc, refresh=True)

    async def update(self, index: str, doc_id: str, partial: Dict[str, Any]) -> None:
        """Partially update a document in place"""
        try:
            await self.es.update(index=index, id=doc_id, doc=partial, refresh=True)
        except ESNotFoundError:
            raise DocumentNotFoundError(index, doc_id)

    async def delete(self, index: str, doc_id: str) -> None:
        try:
            await self.es.delete(index=index, id=doc_id, refresh=True)
        except ESNotFoundError:
            raise DocumentNotFoundError(index, doc_id)

    async def get_source(self, index: str, doc_id: str) -> Dict[str, Any]:
        try:
            resp = await self.es.get_source(index=index, id=doc_id)
        except ESNotFoundError:
            raise DocumentNotFoundError(index, doc_id)
        return dict(resp.body)

    async def search(self, index: str, query: SearchQuery) -> SearchResult:
        resp = await self.es.search(index=index, **query.to_es_body())
        hits = resp["hits"]
        total = hits["total"]
        if isinstance(total, dict):
            total = total.get("value", 0)
        return SearchResult(total=int(total), hits=[hit["_source"] for hit in hits["hits"]])

    async def ping(self) -> bool:
        return bool(await self.es.ping())

    async def ensure_index(self, index: str, fields: List[str]) -> bool:
        """Create the index with keyword mappings unless it exists; True when created"""
        if await self.es.indices.exists(index=index):
            return False
        await self.es.indices.create(index=index, mappings=build_mappings(fields))
        logger.info(f"Index {index} created with fields {fields}")
        return True

    async def recreate_index(self, index: str, fields: List[str]) -> None:
        """Delete the index if present and create it with keyword mappings"""
        await self.es.indices.delete(index=index, ignore_unavailable=True)
        await self.es.indices.create(index=index, mappings=build_mappings(fields))
        logger.info(f"Index {index} re-created with fields {fields}")
