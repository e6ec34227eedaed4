"""
Music library domain models.

Contains the host-side item types that provider records are normalized into.
"""

from typing import Optional, NamedTuple


# Browsable item kinds
KIND_USER = "user"
KIND_PLAYLIST = "playlist"


class PlayableItem(NamedTuple):
    """A directly streamable track.

    `liked` is None when there is no authenticated session, so the like state
    is unknown rather than "not liked".
    """
    id: str
    stream_uri: str
    title: str
    duration: int  # in milliseconds
    artist: str
    artwork_uri: str
    waveform_uri: str
    permalink_uri: str
    liked: Optional[bool] = None


class BrowsableItem(NamedTuple):
    """A navigable entity (user or playlist) that contains further items."""
    id: str
    title: str
    kind: str  # KIND_USER or KIND_PLAYLIST
    subtitle: str
    artwork_uri: Optional[str] = None
    description: Optional[str] = None
