"""
Pagination response headers for list endpoints
"""

import math
from typing import Dict

from fastapi import Request


def get_page_link(request: Request, page: int) -> str:
    """Link to ``page`` keeping every other query parameter"""
    return str(request.url.include_query_params(page=page))


def build_pagination_headers(request: Request, result) -> Dict[str, str]:
    """
    Build X-* pagination and Link headers from a list result.

    Results served from the primary store are unpaginated, so no headers are set.
    """
    if result.from_db:
        return {}

    total_pages = math.ceil(result.total / result.per_page)
    headers = {
        "X-Page": str(result.page),
        "X-Per-Page": str(result.per_page),
        "X-Total": str(result.total),
        "X-Total-Pages": str(total_pages),
    }
    if result.page > 1:
        headers["X-Prev-Page"] = str(result.page - 1)
    if result.page < total_pages:
        headers["X-Next-Page"] = str(result.page + 1)

    if total_pages > 0:
        link = f'<{get_page_link(request, 1)}>; rel="first", <{get_page_link(request, total_pages)}>; rel="last"'
        if result.page > 1:
            link += f', <{get_page_link(request, result.page - 1)}>; rel="prev"'
        if result.page < total_pages:
            link += f', <{get_page_link(request, result.page + 1)}>; rel="next"'
        headers["Link"] = link

    return headers
