"""
HTTP transport backed by requests.

Redirects are never followed: SoundCloud answers stream requests with a 302
whose body carries the short-lived media URL, and callers need to see it.
"""

from typing import Dict, Optional

import requests
from loguru import logger

from ...provider import Response
from .exceptions import HttpError, TransportError

DEFAULT_TIMEOUT = 30  # seconds


class RequestsTransport:
    """WebRequests implementation on a shared requests.Session."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()

    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> Response:
        return self._request("GET", url, headers=headers)

    def post(
        self, url: str, body: str = "", headers: Optional[Dict[str, str]] = None
    ) -> Response:
        headers = dict(headers or {})
        if body:
            headers.setdefault("Content-Type", "application/x-www-form-urlencoded")
        return self._request("POST", url, data=body, headers=headers)

    def delete(self, url: str, headers: Optional[Dict[str, str]] = None) -> Response:
        return self._request("DELETE", url, headers=headers)

    def _request(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self.session.request(
                method, url, timeout=self.timeout, allow_redirects=False, **kwargs
            )
        except requests.RequestException as e:
            raise TransportError(f"Network error: {e}") from e

        if response.status_code >= 400:
            logger.debug(f"{method} {response.status_code}: {response.text[:500]}")
            raise HttpError(response.status_code, response.text)

        return Response(response.status_code, response.text, response.headers)
