"""
Provider state and capability interfaces for music library sources.

Providers are implemented as modules with pure functions, not classes.
Every function takes a ProviderState and returns (new_state, result) instead
of mutating shared state. The state carries the capabilities the provider
needs from its host: an HTTP transport, a durable key-value store for
tokens, and a factory for the host's media items.
"""

from dataclasses import dataclass, field, replace
from typing import Protocol, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from requests.structures import CaseInsensitiveDict

from .models import BrowsableItem, PlayableItem


class Response:
    """Status, body and headers of a completed HTTP request.

    Header lookups ignore case.
    """

    __slots__ = ("status", "value", "headers")

    def __init__(self, status: int, value: str, headers: Optional[Mapping[str, str]] = None):
        self.status = status
        self.value = value
        self.headers = CaseInsensitiveDict(headers or {})

    def __repr__(self) -> str:
        return f"Response(status={self.status}, value={self.value[:80]!r})"


class WebRequests(Protocol):
    """HTTP transport capability.

    Implementations raise HttpError for status codes >= 400 and must not
    follow redirects, so callers can see 302 responses.
    """

    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> Response:
        ...

    def post(
        self, url: str, body: str = "", headers: Optional[Dict[str, str]] = None
    ) -> Response:
        ...

    def delete(self, url: str, headers: Optional[Dict[str, str]] = None) -> Response:
        ...


class Preferences(Protocol):
    """Durable string key-value store."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, values: Mapping[str, str]) -> None:
        """Write all values in a single batch."""
        ...


class ItemFactory(Protocol):
    """Builds the host's media items from primitive fields."""

    def create_playable_item(
        self,
        id: str,
        stream_uri: str,
        title: str,
        duration: int,
        artist: str,
        artwork_uri: str,
        waveform_uri: str,
        permalink_uri: str,
        liked: Optional[bool] = None,
    ) -> object:
        ...

    def create_browsable_item(
        self,
        id: str,
        title: str,
        kind: str,
        subtitle: str,
        artwork_uri: Optional[str] = None,
        description: Optional[str] = None,
    ) -> object:
        ...


class DefaultItemFactory:
    """ItemFactory producing the library's own PlayableItem/BrowsableItem."""

    def create_playable_item(self, *args, **kwargs) -> PlayableItem:
        return PlayableItem(*args, **kwargs)

    def create_browsable_item(self, *args, **kwargs) -> BrowsableItem:
        return BrowsableItem(*args, **kwargs)


@dataclass
class ProviderConfig:
    """Static configuration for a provider."""
    name: str  # Provider name: "soundcloud"
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = "http://localhost:8080/callback"
    page_size: int = 50  # Items requested per collection page


@dataclass(frozen=True)
class Session:
    """OAuth tokens for the signed-in user."""
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


# (endpoint name, query) -> next page URL
CursorKey = Tuple[str, Optional[str]]


@dataclass
class ProviderState:
    """Runtime state for a provider.

    Immutable state container passed to all provider functions.
    Functions return new ProviderState instead of mutating.
    """
    config: ProviderConfig
    transport: WebRequests
    preferences: Preferences
    items: ItemFactory = field(default_factory=DefaultItemFactory)
    session: Session = field(default_factory=Session)
    cursors: Dict[CursorKey, str] = field(default_factory=dict)
    liked_track_ids: FrozenSet[int] = frozenset()

    @property
    def authenticated(self) -> bool:
        """True when an access token is available."""
        return self.session.access_token is not None

    def with_session(self, session: Session) -> 'ProviderState':
        """Return new state with replaced session."""
        return replace(self, session=session)

    def with_cursor(self, key: CursorKey, next_url: str) -> 'ProviderState':
        """Return new state with the next page URL stored for key."""
        return replace(self, cursors={**self.cursors, key: next_url})

    def without_cursor(self, key: CursorKey) -> 'ProviderState':
        """Return new state with the cursor for key removed."""
        if key not in self.cursors:
            return self
        cursors = dict(self.cursors)
        del cursors[key]
        return replace(self, cursors=cursors)

    def with_liked(self, track_ids: Iterable[int]) -> 'ProviderState':
        """Return new state with track_ids added to the liked set."""
        liked = self.liked_track_ids | frozenset(track_ids)
        if liked == self.liked_track_ids:
            return self
        return replace(self, liked_track_ids=liked)

    def without_liked(self, track_id: int) -> 'ProviderState':
        """Return new state with track_id removed from the liked set."""
        return replace(self, liked_track_ids=self.liked_track_ids - {track_id})
