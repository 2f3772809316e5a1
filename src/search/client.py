"""
Elasticsearch client factory
"""

import logging

from elasticsearch import AsyncElasticsearch

from config.settings import ES_HOST, ES_REQUEST_TIMEOUT

logger = logging.getLogger(__name__)


def create_es_client(host: str = ES_HOST, request_timeout: float = ES_REQUEST_TIMEOUT) -> AsyncElasticsearch:
    """
    Create the async Elasticsearch client

    Raises:
        ValueError: If no host is configured
    """
    if not host:
        raise ValueError("ES_HOST environment variable is required")

    logger.info(f"Connecting search index client to {host}")
    return AsyncElasticsearch(hosts=[host], request_timeout=request_timeout)


async def close_es_client(es: AsyncElasticsearch):
    if es:
        await es.close()
    logger.info("Search index client closed")
