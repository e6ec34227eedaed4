"""
SoundCloud provider for Cloud Minion.

Implements OAuth 2.0 token management, paginated collections and
normalization of SoundCloud records into host items.
"""

from typing import Optional

from loguru import logger

from cloud_minion.core.config import SoundCloudConfig, get_data_dir, load_config

from ...provider import (
    DefaultItemFactory,
    ItemFactory,
    Preferences,
    ProviderConfig,
    ProviderState,
    WebRequests,
)

# Import from submodules
from . import api, auth
from .transport import RequestsTransport


def init_provider(
    config: Optional[SoundCloudConfig] = None,
    transport: Optional[WebRequests] = None,
    preferences: Optional[Preferences] = None,
    items: Optional[ItemFactory] = None,
) -> ProviderState:
    """Initialize SoundCloud provider state.

    Capabilities not supplied by the host fall back to defaults: a requests
    transport, a token file (~/.local/share/cloud-minion/soundcloud/user_tokens.json)
    and the library's own item types. Persisted tokens are loaded into the
    session; an expired token is only noticed on the first failing call.

    Args:
        config: SoundCloud settings (default: loaded from config.toml)
        transport: HTTP transport
        preferences: Token storage
        items: Factory for host items

    Returns:
        ProviderState with the persisted session
    """
    if config is None:
        config = load_config().soundcloud

    if transport is None:
        transport = RequestsTransport(timeout=config.request_timeout)
    if preferences is None:
        preferences = auth.TokenFilePreferences(
            get_data_dir() / "soundcloud" / "user_tokens.json"
        )

    state = ProviderState(
        config=ProviderConfig(
            name="soundcloud",
            client_id=config.client_id,
            client_secret=config.client_secret,
            redirect_uri=config.redirect_uri,
            page_size=config.page_size,
        ),
        transport=transport,
        preferences=preferences,
        items=items or DefaultItemFactory(),
        session=auth.load_session(preferences),
    )

    if state.authenticated:
        logger.debug("SoundCloud token found")
    else:
        logger.debug("No SoundCloud token found - not authenticated")
    return state


# Re-export authentication functions
exchange_code = auth.exchange_code
refresh_session = auth.refresh_session
call_with_refresh = auth.call_with_refresh
build_authorize_url = auth.build_authorize_url
parse_callback = auth.parse_callback
new_csrf_state = auth.new_csrf_state
is_authenticated = auth.is_authenticated

# Re-export API functions
get_stream = api.get_stream
get_likes = api.get_likes
search = api.search
get_user_tracks = api.get_user_tracks
get_self_tracks = api.get_self_tracks
get_playlists = api.get_playlists
get_playlist = api.get_playlist
get_followings = api.get_followings
get_followers = api.get_followers
get_user = api.get_user
like_track = api.like_track
unlike_track = api.unlike_track
toggle_like = api.toggle_like
resolve_stream_url = api.resolve_stream_url
resolve_download_url = api.resolve_download_url
get_download_url = api.get_download_url


__all__ = [
    "init_provider",
    "exchange_code",
    "refresh_session",
    "call_with_refresh",
    "build_authorize_url",
    "parse_callback",
    "new_csrf_state",
    "is_authenticated",
    "get_stream",
    "get_likes",
    "search",
    "get_user_tracks",
    "get_self_tracks",
    "get_playlists",
    "get_playlist",
    "get_followings",
    "get_followers",
    "get_user",
    "like_track",
    "unlike_track",
    "toggle_like",
    "resolve_stream_url",
    "resolve_download_url",
    "get_download_url",
]
