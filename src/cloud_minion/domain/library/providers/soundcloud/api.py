"""
SoundCloud API operations.

Collections (stream, likes, search, playlists, followers/followings), like
toggling and stream/download URL resolution. Collection functions take the
ProviderState and return (new_state, items); failures raise typed
SoundCloudError subclasses.
"""

from typing import Any, List, Optional, Tuple
from urllib.parse import urlsplit

from loguru import logger

from ...provider import ProviderState
from .endpoints import Endpoint, resolve
from .exceptions import (
    ApiError,
    MalformedResponseError,
    NotStreamableError,
    SoundCloudError,
    UserNotFoundError,
)
from .executor import append_query, execute, parse_json
from .normalize import build_user, normalize_playlists, normalize_records
from .pagination import fetch_page

ItemList = List[Any]

SEARCH_ENDPOINTS = {
    "tracks": "search_tracks",
    "playlists": "search_playlists",
}


def _fetch_items(
    state: ProviderState, endpoint_name: str, reset: bool, query: Optional[str] = None
) -> Tuple[ProviderState, ItemList]:
    """Fetch one page of track/like/user records and normalize it.

    Tracks reported as liked are merged into the state's liked set.
    """
    state, records = fetch_page(state, endpoint_name, reset, query)
    page = normalize_records(records, state.authenticated, state.items)
    return state.with_liked(page.liked_track_ids), page.items


def _fetch_playlists(
    state: ProviderState, endpoint_name: str, reset: bool, query: Optional[str] = None
) -> Tuple[ProviderState, ItemList]:
    state, records = fetch_page(state, endpoint_name, reset, query)
    return state, normalize_playlists(records, state.items)


def get_stream(state: ProviderState, reset: bool = False) -> Tuple[ProviderState, ItemList]:
    """Next page of the signed-in user's stream."""
    return _fetch_items(state, "stream", reset)


def get_likes(state: ProviderState, reset: bool = False) -> Tuple[ProviderState, ItemList]:
    """Next page of the signed-in user's liked tracks."""
    return _fetch_items(state, "self_likes", reset)


def search(
    state: ProviderState, query: str, reset: bool = False, kind: str = "tracks"
) -> Tuple[ProviderState, ItemList]:
    """Search SoundCloud tracks or playlists.

    Each distinct query keeps its own cursor, so paging through one search
    does not disturb another.

    Args:
        state: Current provider state
        query: Search query (URL-encoded when the request is built)
        reset: Start again from the first page
        kind: "tracks" or "playlists"

    Returns:
        (new_state, items)
    """
    endpoint_name = SEARCH_ENDPOINTS.get(kind)
    if endpoint_name is None:
        raise ValueError(f"Unknown search kind: '{kind}'. Use one of: {', '.join(SEARCH_ENDPOINTS)}")
    if kind == "playlists":
        return _fetch_playlists(state, endpoint_name, reset, query)
    return _fetch_items(state, endpoint_name, reset, query)


def get_user_tracks(
    state: ProviderState, user_id: str, reset: bool = False
) -> Tuple[ProviderState, ItemList]:
    """Next page of tracks uploaded by user_id."""
    return _fetch_items(state, "user_tracks", reset, user_id)


def get_self_tracks(state: ProviderState, reset: bool = False) -> Tuple[ProviderState, ItemList]:
    """Next page of the signed-in user's own tracks, followed by their playlists."""
    state, tracks = _fetch_items(state, "self_tracks", reset)
    state, playlists = _fetch_playlists(state, "self_playlists", reset)
    return state, tracks + playlists


def get_playlists(state: ProviderState, reset: bool = False) -> Tuple[ProviderState, ItemList]:
    """Next page of playlists the signed-in user has liked."""
    return _fetch_playlists(state, "self_playlist_likes", reset)


def get_playlist(
    state: ProviderState, playlist_id: str, reset: bool = False
) -> Tuple[ProviderState, ItemList]:
    """Next page of tracks in playlist_id."""
    return _fetch_items(state, "playlist", reset, playlist_id)


def get_followings(state: ProviderState, reset: bool = False) -> Tuple[ProviderState, ItemList]:
    """Next page of users the signed-in user follows."""
    return _fetch_items(state, "followings", reset)


def get_followers(state: ProviderState, reset: bool = False) -> Tuple[ProviderState, ItemList]:
    """Next page of users following the signed-in user."""
    return _fetch_items(state, "followers", reset)


def get_user(state: ProviderState, user_id: str) -> Any:
    """Look up a single user as a browsable item.

    Raises:
        UserNotFoundError: If SoundCloud has no such user
    """
    try:
        response = execute(state, resolve("user"), {"id": user_id})
    except ApiError as e:
        if e.status_code == 404:
            raise UserNotFoundError(f"User not found: {user_id}") from e
        raise

    data = parse_json(response)
    try:
        return build_user(data, state.items)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise MalformedResponseError(f"Unexpected user record for {user_id}: {e!r}") from e


# ============================================================================
# Likes
# ============================================================================


def track_key(track_id: str) -> int:
    """Liked-set key for a track id; checked before any request is made.

    Raises:
        ValueError: If track_id is not a numeric SoundCloud id
    """
    try:
        return int(track_id)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid SoundCloud track id: {track_id!r}") from None


def like_track(state: ProviderState, track_id: str) -> Tuple[ProviderState, bool]:
    """Like a track on SoundCloud.

    Responses:
        200 - Success

    Returns:
        (new_state, success). The liked set only changes on success.

    Raises:
        ValueError: If track_id is not a numeric SoundCloud id
    """
    key = track_key(track_id)
    response = execute(state, resolve("like_track"), {"id": track_id})
    success = response.status == 200
    if success:
        state = state.with_liked([key])
    return state, success


def unlike_track(state: ProviderState, track_id: str) -> Tuple[ProviderState, bool]:
    """Unlike a track on SoundCloud.

    Responses:
        200 - Success
        404 - Track was not liked (reported as failure, not raised)

    Returns:
        (new_state, success). The liked set only changes on success.

    Raises:
        ValueError: If track_id is not a numeric SoundCloud id
    """
    key = track_key(track_id)
    try:
        response = execute(state, resolve("unlike_track"), {"id": track_id})
    except ApiError as e:
        if e.status_code == 404:
            logger.info(f"Track {track_id} was not liked on SoundCloud")
            return state, False
        raise

    success = response.status == 200
    if success:
        state = state.without_liked(key)
    return state, success


def toggle_like(state: ProviderState, track_id: str) -> Tuple[ProviderState, bool]:
    """Like the track if it is not known to be liked, otherwise unlike it.

    Returns:
        (new_state, success)

    Raises:
        ValueError: If track_id is not a numeric SoundCloud id
    """
    if track_key(track_id) in state.liked_track_ids:
        return unlike_track(state, track_id)
    return like_track(state, track_id)


# ============================================================================
# Stream and download URLs
# ============================================================================


def resolve_stream_url(state: ProviderState, uri: str) -> str:
    """Resolve a track's stream_url into the short-lived media URL.

    SoundCloud answers with 302 and a JSON body {"location": "..."}; any
    other status means the track cannot be streamed.

    Raises:
        NotStreamableError: If the response is not a 302 with a location
        MalformedResponseError: If the redirect body is not JSON
    """
    parts = urlsplit(uri)
    path = parts.path + (f"?{parts.query}" if parts.query else "")
    response = execute(state, Endpoint(path, "GET", requires_auth=True))

    if response.status != 302:
        raise NotStreamableError("Can not get stream url")

    location = None
    if response.value.strip():
        data = parse_json(response)
        if isinstance(data, dict):
            location = data.get("location")
    location = location or response.headers.get("Location")

    if not location:
        raise NotStreamableError("Can not get stream url: redirect without location")
    return location


def resolve_download_url(state: ProviderState, track_id: str) -> str:
    """Direct media URL for downloading a track.

    Uses the same stream URL the player uses, resolved through its redirect,
    with the client_id query parameter added when missing.

    Raises:
        NotStreamableError: If the track cannot be streamed
        SoundCloudError: For any request or parsing failure
    """
    response = execute(state, resolve("track"), {"id": track_id})
    if response.status != 200:
        raise NotStreamableError(f"Failed to get track data. Status: {response.status}")

    track = parse_json(response)
    if not isinstance(track, dict) or not isinstance(track.get("stream_url"), str):
        raise MalformedResponseError(f"Unexpected track record for {track_id}")
    if not track.get("streamable"):
        raise NotStreamableError(f"Track {track_id} is not streamable")

    location = resolve_stream_url(state, track["stream_url"])
    return append_query(location, {"client_id": state.config.client_id})


def get_download_url(state: ProviderState, track_id: str) -> Optional[str]:
    """Direct media URL for downloading a track, or None.

    Unlike every other operation this never raises: any failure along the
    way is logged and reported as "no download available". Use
    resolve_download_url to get the typed error instead.
    """
    try:
        return resolve_download_url(state, track_id)
    except NotStreamableError as e:
        logger.warning(f"Track {track_id} has no download: {e}")
    except (SoundCloudError, TypeError, ValueError, AttributeError) as e:
        logger.error(f"Error getting download URL for track {track_id}: {e!r}")
    return None
