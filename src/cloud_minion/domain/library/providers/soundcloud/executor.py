"""
Authenticated request execution for the SoundCloud API.

Builds the final URL for an endpoint, attaches the OAuth header, runs the
request through the state's transport and turns transport failures into
typed exceptions. Nothing here retries.
"""

import json
from typing import Any, Dict, Mapping, Optional
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from loguru import logger

from ...provider import ProviderState, Response
from .endpoints import API_BASE_URL, Endpoint
from .exceptions import (
    ApiError,
    HttpError,
    InvalidCredentialsError,
    MalformedResponseError,
    NotAuthenticatedError,
)

# OAuth error code for a rejected authorization code or refresh token
INVALID_GRANT = "invalid_grant"


def build_url(endpoint: Endpoint, params: Optional[Mapping[str, Any]] = None) -> str:
    """Substitute URL-encoded path params and make the URL absolute.

    Absolute templates (the token URL, stored next_href cursors) are kept
    as they are apart from substitution.
    """
    url = endpoint.url_template
    if params:
        url = url.format(**{k: quote(str(v), safe="") for k, v in params.items()})
    if not url.startswith(("http://", "https://")):
        url = API_BASE_URL + url
    return url


def append_query(url: str, params: Mapping[str, Any]) -> str:
    """Add query parameters to url, keeping the ones already present.

    The existing query string is left byte-for-byte intact (signed media
    URLs break when re-encoded).
    """
    parts = urlsplit(url)
    present = {key for key, _ in parse_qsl(parts.query, keep_blank_values=True)}
    extra = urlencode([(k, str(v)) for k, v in params.items() if k not in present])
    if not extra:
        return url
    query = f"{parts.query}&{extra}" if parts.query else extra
    return urlunsplit(parts._replace(query=query))


def auth_headers(state: ProviderState) -> Dict[str, str]:
    """OAuth header for the current session (empty when signed out)."""
    token = state.session.access_token
    return {"Authorization": f"OAuth {token}"} if token else {}


def execute(
    state: ProviderState,
    endpoint: Endpoint,
    params: Optional[Mapping[str, Any]] = None,
    body: Optional[str] = None,
) -> Response:
    """Execute one request for endpoint.

    Args:
        state: Current provider state (session and transport)
        endpoint: Endpoint to call
        params: Path parameters for the URL template
        body: Form-encoded request body (POST only)

    Returns:
        Response with status and body. 3xx responses are returned as-is.

    Raises:
        NotAuthenticatedError: If the endpoint needs auth and no token is stored
        InvalidCredentialsError: If SoundCloud answers with invalid_grant
        ApiError: For any other failure status
    """
    if endpoint.requires_auth and not state.authenticated:
        raise NotAuthenticatedError(
            "Not authenticated with SoundCloud - sign in first"
        )

    url = build_url(endpoint, params)
    headers = auth_headers(state) if endpoint.requires_auth else {}
    logger.debug(f"SoundCloud {endpoint.method} {url}")

    try:
        if endpoint.method == "POST":
            return state.transport.post(url, body or "", headers=headers)
        elif endpoint.method == "DELETE":
            return state.transport.delete(url, headers=headers)
        return state.transport.get(url, headers=headers)
    except HttpError as e:
        raise _error_from_http(e) from e


def parse_json(response: Response) -> Any:
    """Decode a response body.

    Raises:
        MalformedResponseError: If the body is not JSON
    """
    try:
        return json.loads(response.value)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(
            f"Expected JSON from SoundCloud, got: {response.value[:200]!r}"
        ) from e


def error_code(body: str) -> Optional[str]:
    """Return the `error` field of a JSON error body, if any."""
    try:
        data = json.loads(body)
    except (TypeError, ValueError):
        return None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return None


def _error_from_http(e: HttpError) -> Exception:
    error = error_code(e.body)
    if error == INVALID_GRANT:
        return InvalidCredentialsError("Invalid code")
    if error:
        return ApiError(error, e.status)
    return ApiError(f"HTTP {e.status}: {e.body[:200]}" if e.body else f"HTTP {e.status}", e.status)
