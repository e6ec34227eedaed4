"""
SoundCloud OAuth 2.0 token lifecycle.

Exchanges authorization codes and refresh tokens for access tokens, persists
them through the Preferences capability, and offers the caller-driven
"refresh once, then retry once" convention. Nothing here refreshes on its own.
"""

import base64
import json
import secrets
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, TypeVar
from urllib.parse import parse_qs, urlencode, urlparse

from loguru import logger

from ...provider import Preferences, ProviderConfig, ProviderState, Session
from .endpoints import AUTHORIZE_URL, resolve
from .exceptions import (
    ApiError,
    InvalidCredentialsError,
    NotAuthenticatedError,
)
from .executor import INVALID_GRANT, execute, parse_json

# Preference keys
ACCESS_TOKEN = "access_token"
REFRESH_TOKEN = "refresh_token"
ERROR = "error"

T = TypeVar("T")


class TokenFilePreferences:
    """Preferences stored as a JSON file readable only by the owner."""

    def __init__(self, path: Path):
        self.path = path
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path) as f:
            return json.load(f)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set(self, values: Mapping[str, str]) -> None:
        with self._lock:
            data = {**self._load(), **values}
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_file = self.path.with_suffix(".tmp")
            with open(tmp_file, "w") as f:
                json.dump(data, f, indent=2)
            # Set file permissions to 0600 (owner read/write only)
            tmp_file.chmod(0o600)
            tmp_file.replace(self.path)


def load_session(preferences: Preferences) -> Session:
    """Read the persisted tokens."""
    return Session(
        access_token=preferences.get(ACCESS_TOKEN),
        refresh_token=preferences.get(REFRESH_TOKEN),
    )


def is_authenticated(state: ProviderState) -> bool:
    """True when the state holds an access token."""
    return state.authenticated


def _grant_body(config: ProviderConfig, code: str, refresh: bool) -> str:
    if refresh:
        return urlencode({
            "grant_type": "refresh_token",
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "refresh_token": code,
        })
    return urlencode({
        "grant_type": "authorization_code",
        "client_id": config.client_id,
        "client_secret": config.client_secret,
        "redirect_uri": config.redirect_uri,
        "code": code,
    })


def exchange_code(state: ProviderState, code: str, refresh: bool = False) -> ProviderState:
    """Exchange an authorization code (or refresh token) for new tokens.

    Both tokens are persisted in one batched write before the new state is
    returned. On any failure the session and preferences stay untouched.

    Args:
        state: Current provider state
        code: Authorization code, or the refresh token when refresh=True
        refresh: Use the refresh_token grant instead of authorization_code

    Returns:
        New state holding the new session

    Raises:
        InvalidCredentialsError: If SoundCloud rejects the code (invalid_grant)
        ApiError: For any other reported error, a response without access token,
            or an authorization_code response without refresh token
        MalformedResponseError: If the response is not JSON
    """
    grant = "refresh_token" if refresh else "authorization_code"
    logger.info(f"Requesting SoundCloud access token ({grant} grant)")

    response = execute(state, resolve("oauth2_token"), body=_grant_body(state.config, code, refresh))
    token_data = parse_json(response)
    if not isinstance(token_data, dict):
        raise ApiError("Could not obtain access token", response.status)

    error = token_data.get(ERROR)
    if error == INVALID_GRANT:
        raise InvalidCredentialsError("Invalid code")
    if error:
        raise ApiError(str(error), response.status)
    if not token_data.get(ACCESS_TOKEN):
        raise ApiError("Could not obtain access token", response.status)

    refresh_token = token_data.get(REFRESH_TOKEN)
    if not refresh_token:
        if not refresh:
            # A new sign-in must not inherit the previous account's refresh token
            raise ApiError("Could not obtain refresh token", response.status)
        # Refresh grant without rotation: the token just used stays valid
        refresh_token = code

    session = Session(access_token=token_data[ACCESS_TOKEN], refresh_token=refresh_token)
    state.preferences.set({ACCESS_TOKEN: session.access_token, REFRESH_TOKEN: session.refresh_token})

    logger.info("SoundCloud tokens stored")
    return state.with_session(session)


def refresh_session(state: ProviderState) -> ProviderState:
    """Refresh the session with the stored refresh token.

    Raises:
        NotAuthenticatedError: If no refresh token is stored
    """
    refresh_token = state.session.refresh_token
    if not refresh_token:
        raise NotAuthenticatedError("No SoundCloud refresh token - sign in again")
    return exchange_code(state, refresh_token, refresh=True)


def call_with_refresh(
    state: ProviderState,
    operation: Callable[..., Tuple[ProviderState, T]],
    *args: Any,
    **kwargs: Any,
) -> Tuple[ProviderState, T]:
    """Run operation(state, ...) and retry it once after a token refresh.

    Only an ApiError that reports a rejected token (401/403) triggers the
    refresh; everything else propagates untouched.
    """
    try:
        return operation(state, *args, **kwargs)
    except ApiError as e:
        if not e.is_auth_failure or not state.session.refresh_token:
            raise
        logger.info(f"SoundCloud returned {e.status_code}, refreshing token and retrying")

    state = refresh_session(state)
    return operation(state, *args, **kwargs)


def new_csrf_state() -> str:
    """Random value to round-trip through the authorize redirect."""
    return base64.urlsafe_b64encode(secrets.token_bytes(32)).decode("utf-8").rstrip("=")


def build_authorize_url(config: ProviderConfig, csrf_state: str) -> str:
    """URL the user opens to grant access; SoundCloud redirects back with a code."""
    params = {
        "client_id": config.client_id,
        "redirect_uri": config.redirect_uri,
        "response_type": "code",
        "state": csrf_state,
    }
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


def parse_callback(callback_url: str, csrf_state: str) -> str:
    """Extract the authorization code from the redirect URL.

    Raises:
        InvalidCredentialsError: If the redirect carries an error, no code,
            or a state that does not match csrf_state
    """
    params = parse_qs(urlparse(callback_url).query)
    error = params.get("error", [None])[0]
    if error:
        raise InvalidCredentialsError(f"Authorization error: {error}")
    if params.get("state", [None])[0] != csrf_state:
        raise InvalidCredentialsError("CSRF state mismatch")
    code = params.get("code", [None])[0]
    if not code:
        raise InvalidCredentialsError("No authorization code received")
    return code
