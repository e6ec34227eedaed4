"""
Normalization of SoundCloud JSON records into host media items.

Records are decoded into a small tagged union first (track, like, user,
unknown) and then built into items through the state's ItemFactory. Every
record is handled on its own: a malformed or non-streamable record is
skipped and the rest of the page survives.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from loguru import logger

from ...models import KIND_PLAYLIST, KIND_USER
from ...provider import ItemFactory
from .exceptions import NotStreamableError

# Record discriminators
KIND = "kind"
ORIGIN = "origin"
TRACK = "track"
LIKE = "like"
USER = "user"

# Errors that mean "this record does not have the shape we expect"
_MALFORMED = (KeyError, TypeError, ValueError, AttributeError)


@dataclass(frozen=True)
class TrackRecord:
    data: Dict[str, Any]


@dataclass(frozen=True)
class LikeRecord:
    track: Dict[str, Any]


@dataclass(frozen=True)
class UserRecord:
    data: Dict[str, Any]


@dataclass(frozen=True)
class UnknownRecord:
    kind: Optional[str]


Record = Union[TrackRecord, LikeRecord, UserRecord, UnknownRecord]


@dataclass
class NormalizedPage:
    """Items built from one page plus the ids the page reports as liked."""

    items: List[Any] = field(default_factory=list)
    liked_track_ids: List[int] = field(default_factory=list)


def upgrade_artwork(url: str) -> str:
    """Swap the low-resolution artwork variant for the 500x500 one."""
    return url.replace("large", "t500x500")


def waveform_data_url(url: str) -> str:
    """Rewrite a waveform image URL to the JSON waveform data URL."""
    return url.replace("w1", "wis").replace("png", "json")


def decode_record(raw: Dict[str, Any]) -> Record:
    """Decode one raw record, unwrapping reposts first."""
    if ORIGIN in raw:
        raw = raw[ORIGIN]

    kind = raw.get(KIND)
    if kind == TRACK:
        return TrackRecord(raw)
    if kind == LIKE:
        return LikeRecord(raw[TRACK])
    if kind == USER:
        return UserRecord(raw)
    return UnknownRecord(kind)


def build_track(
    data: Dict[str, Any], authenticated: bool, items: ItemFactory
) -> Tuple[Any, bool]:
    """Build a playable item from a track record.

    Returns:
        (item, liked) where liked is True only for an authenticated session
        whose user has favorited the track

    Raises:
        NotStreamableError: If the track cannot be streamed
    """
    if not data["streamable"]:
        raise NotStreamableError("Item can not be streamed!")

    user = data[USER]
    artwork = data.get("artwork_url")
    if artwork is None:
        artwork = user["avatar_url"]

    track_id = int(data["id"])
    liked: Optional[bool] = None
    if authenticated:
        liked = bool(data.get("user_favorite"))

    item = items.create_playable_item(
        id=str(track_id),
        stream_uri=data["stream_url"],
        title=data["title"],
        duration=int(data["duration"]),
        artist=user["username"],
        artwork_uri=upgrade_artwork(artwork),
        waveform_uri=waveform_data_url(data["waveform_url"]),
        permalink_uri=data["permalink_url"],
        liked=liked,
    )
    return item, bool(liked)


def build_user(data: Dict[str, Any], items: ItemFactory) -> Any:
    """Build a browsable item from a user record."""
    return items.create_browsable_item(
        id=str(int(data["id"])),
        title=data["username"],
        kind=KIND_USER,
        subtitle=data.get("full_name") or "",
        artwork_uri=upgrade_artwork(data["avatar_url"]),
        description=data.get("description"),
    )


def build_playlist(data: Dict[str, Any], items: ItemFactory) -> Any:
    """Build a browsable item from a playlist record."""
    user = data[USER]
    artwork = data.get("artwork_url")
    if artwork is None:
        artwork = user["avatar_url"]

    return items.create_browsable_item(
        id=str(data["id"]),
        title=data["title"],
        kind=KIND_PLAYLIST,
        subtitle=user["username"],
        artwork_uri=upgrade_artwork(artwork),
        description=data.get("description"),
    )


def normalize_records(
    records: List[Dict[str, Any]], authenticated: bool, items: ItemFactory
) -> NormalizedPage:
    """Normalize a page of track/like/user records.

    Args:
        records: Raw records from a collection response
        authenticated: Whether a session is present (controls the like state)
        items: Factory for host items

    Returns:
        NormalizedPage with items in input order and the liked track ids seen
    """
    page = NormalizedPage()

    for raw in records:
        try:
            match decode_record(raw):
                case TrackRecord(data) | LikeRecord(data):
                    item, liked = build_track(data, authenticated, items)
                    page.items.append(item)
                    if liked:
                        page.liked_track_ids.append(int(data["id"]))
                case UserRecord(data):
                    page.items.append(build_user(data, items))
                case UnknownRecord(kind):
                    logger.warning(f"Skipping SoundCloud record of unexpected kind: {kind}")
        except NotStreamableError:
            logger.debug(f"Skipping non-streamable track {_record_id(raw)}")
        except _MALFORMED as e:
            logger.warning(f"Skipping malformed SoundCloud record {_record_id(raw)}: {e!r}")

    return page


def normalize_playlists(records: List[Dict[str, Any]], items: ItemFactory) -> List[Any]:
    """Normalize a page of playlist records into browsable items."""
    result = []
    for raw in records:
        try:
            result.append(build_playlist(raw, items))
        except _MALFORMED as e:
            logger.warning(f"Skipping malformed SoundCloud playlist {_record_id(raw)}: {e!r}")
    return result


def _record_id(raw: Any) -> str:
    if isinstance(raw, dict):
        return str(raw.get("id", "?"))
    return "?"
