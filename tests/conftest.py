"""Shared fixtures: in-memory capabilities instead of network and disk."""

import json
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Union

import pytest

from cloud_minion.domain.library.provider import (
    ProviderConfig,
    ProviderState,
    Response,
    Session,
)


class Call(NamedTuple):
    method: str
    url: str
    body: Optional[str]
    headers: Dict[str, str]


class FakeTransport:
    """WebRequests double that replays queued responses in order."""

    def __init__(self) -> None:
        self.responses: List[Union[Response, Exception]] = []
        self.calls: List[Call] = []

    def queue(self, *responses: Union[Response, Exception]) -> None:
        self.responses.extend(responses)

    def queue_json(self, data: Any, status: int = 200) -> None:
        self.queue(Response(status, json.dumps(data)))

    def _next(self, method: str, url: str, body: Optional[str], headers: Optional[Dict[str, str]]) -> Response:
        self.calls.append(Call(method, url, body, dict(headers or {})))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> Response:
        return self._next("GET", url, None, headers)

    def post(self, url: str, body: str = "", headers: Optional[Dict[str, str]] = None) -> Response:
        return self._next("POST", url, body, headers)

    def delete(self, url: str, headers: Optional[Dict[str, str]] = None) -> Response:
        return self._next("DELETE", url, None, headers)


class MemoryPreferences:
    """Preferences double that counts batched writes."""

    def __init__(self, values: Optional[Mapping[str, str]] = None) -> None:
        self.values: Dict[str, str] = dict(values or {})
        self.writes: List[Dict[str, str]] = []

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, values: Mapping[str, str]) -> None:
        self.writes.append(dict(values))
        self.values.update(values)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def preferences() -> MemoryPreferences:
    return MemoryPreferences()


@pytest.fixture
def config() -> ProviderConfig:
    return ProviderConfig(
        name="soundcloud",
        client_id="cid",
        client_secret="secret",
        redirect_uri="http://localhost:8080/callback",
        page_size=50,
    )


@pytest.fixture
def state(config: ProviderConfig, transport: FakeTransport, preferences: MemoryPreferences) -> ProviderState:
    """Signed-out provider state."""
    return ProviderState(config=config, transport=transport, preferences=preferences)


@pytest.fixture
def auth_state(state: ProviderState) -> ProviderState:
    """Provider state with an access and refresh token."""
    return state.with_session(Session(access_token="token-1", refresh_token="refresh-1"))


def make_user(**overrides: Any) -> Dict[str, Any]:
    user = {
        "kind": "user",
        "id": 7,
        "username": "dj-minion",
        "full_name": "DJ Minion",
        "avatar_url": "https://i1.sndcdn.com/avatars-7-large.jpg",
        "description": "Deep cuts only",
    }
    user.update(overrides)
    return user


def make_track(**overrides: Any) -> Dict[str, Any]:
    track_id = overrides.get("id", 123)
    track = {
        "kind": "track",
        "id": track_id,
        "title": f"Track {track_id}",
        "duration": 215000,
        "streamable": True,
        "stream_url": f"https://api.soundcloud.com/tracks/{track_id}/stream",
        "artwork_url": f"https://i1.sndcdn.com/artworks-{track_id}-large.jpg",
        "waveform_url": f"https://w1.sndcdn.com/wave{track_id}_m.png",
        "permalink_url": f"https://soundcloud.com/dj-minion/track-{track_id}",
        "user_favorite": False,
        "user": make_user(),
    }
    track.update(overrides)
    return track


def make_playlist(**overrides: Any) -> Dict[str, Any]:
    playlist = {
        "kind": "playlist",
        "id": 55,
        "title": "Late Night",
        "artwork_url": "https://i1.sndcdn.com/artworks-55-large.jpg",
        "description": None,
        "user": make_user(),
    }
    playlist.update(overrides)
    return playlist


@pytest.fixture
def track_factory():
    return make_track


@pytest.fixture
def user_factory():
    return make_user


@pytest.fixture
def playlist_factory():
    return make_playlist
