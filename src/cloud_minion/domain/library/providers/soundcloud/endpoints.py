"""
SoundCloud API endpoint registry.

Maps logical operation names to URL templates and HTTP verbs. Templates are
relative to API_BASE_URL unless absolute; `{query}` takes a URL-encoded search
string or resource id for collection endpoints, `{id}` a resource id.
"""

from dataclasses import dataclass
from typing import Dict, Literal

from .exceptions import ConfigurationError

# SoundCloud API base URL
API_BASE_URL = "https://api.soundcloud.com"

# SoundCloud OAuth URLs
AUTHORIZE_URL = "https://secure.soundcloud.com/authorize"
TOKEN_URL = "https://secure.soundcloud.com/oauth/token"

Method = Literal["GET", "POST", "DELETE"]


@dataclass(frozen=True)
class Endpoint:
    """One API route."""

    url_template: str
    method: Method = "GET"
    requires_auth: bool = True
    is_paginated: bool = False


def collection(url_template: str, requires_auth: bool = True) -> Endpoint:
    """Paginated GET endpoint returning {collection, next_href}."""
    return Endpoint(url_template, "GET", requires_auth=requires_auth, is_paginated=True)


def action(url_template: str, method: Method = "POST") -> Endpoint:
    """Authenticated endpoint called without a body."""
    return Endpoint(url_template, method, requires_auth=True)


ENDPOINTS: Dict[str, Endpoint] = {
    "oauth2_token": Endpoint(TOKEN_URL, "POST", requires_auth=False),
    "stream": collection("/me/feed/tracks"),
    "self_likes": collection("/me/likes/tracks"),
    "self_tracks": collection("/me/tracks"),
    "self_playlists": collection("/me/playlists"),
    "self_playlist_likes": collection("/me/likes/playlists"),
    "playlist": collection("/playlists/{query}/tracks"),
    "user_tracks": collection("/users/{query}/tracks"),
    "followers": collection("/me/followers"),
    "followings": collection("/me/followings"),
    "search_tracks": collection("/tracks?q={query}"),
    "search_playlists": collection("/playlists?q={query}"),
    "like_track": action("/likes/tracks/{id}"),
    # Unliking is a DELETE on the like route, not a second POST action
    "unlike_track": action("/likes/tracks/{id}", "DELETE"),
    "track": Endpoint("/tracks/{id}", "GET"),
    "user": Endpoint("/users/{id}", "GET"),
}


def resolve(name: str) -> Endpoint:
    """Look up an endpoint by name.

    Raises:
        ConfigurationError: If name is not registered
    """
    try:
        return ENDPOINTS[name]
    except KeyError:
        raise ConfigurationError(f"Unknown SoundCloud endpoint: '{name}'") from None
