"""
Cursor-based pagination over SoundCloud collection endpoints.

SoundCloud's linked partitioning answers with {"collection": [...],
"next_href": "..."}; next_href is a full URL with the continuation baked in,
so it is stored per (endpoint, query) and requested verbatim next time.
"""

from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from ...provider import CursorKey, ProviderState
from . import endpoints
from .exceptions import MalformedResponseError
from .executor import append_query, build_url, execute, parse_json


def _first_page_url(state: ProviderState, endpoint: endpoints.Endpoint, query: Optional[str]) -> str:
    params = {"query": query} if query is not None else None
    url = build_url(endpoint, params)
    return append_query(
        url, {"limit": state.config.page_size, "linked_partitioning": "true"}
    )


def fetch_page(
    state: ProviderState,
    endpoint_name: str,
    reset: bool,
    query: Optional[str] = None,
) -> Tuple[ProviderState, List[Dict[str, Any]]]:
    """Fetch the next page of a collection endpoint.

    Args:
        state: Current provider state
        endpoint_name: Registered collection endpoint name
        reset: If True, forget the stored cursor and start from the first page
        query: Search string or resource id substituted into the template

    Returns:
        (new_state, raw records). An empty list means the collection is exhausted.

    Raises:
        MalformedResponseError: If the body is not a collection
    """
    endpoint = endpoints.resolve(endpoint_name)
    key: CursorKey = (endpoint_name, query)

    if reset:
        state = state.without_cursor(key)

    next_url = state.cursors.get(key)
    if next_url is None:
        url = _first_page_url(state, endpoint, query)
    else:
        url = next_url

    response = execute(state, replace(endpoint, url_template=url))
    data = parse_json(response)

    if isinstance(data, list):
        # Endpoints without linked partitioning return a bare list
        collection, next_href = data, None
    elif isinstance(data, dict) and isinstance(data.get("collection"), list):
        collection, next_href = data["collection"], data.get("next_href")
    else:
        raise MalformedResponseError(
            f"Expected a collection from '{endpoint_name}', got {type(data).__name__}"
        )

    if next_href:
        state = state.with_cursor(key, next_href)
    else:
        state = state.without_cursor(key)

    logger.debug(
        f"Fetched {len(collection)} records from '{endpoint_name}'"
        f" (more: {bool(next_href)})"
    )
    return state, collection
