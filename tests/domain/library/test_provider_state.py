"""Tests for ProviderState and the default item factory."""

from cloud_minion.domain.library.models import KIND_USER, BrowsableItem, PlayableItem
from cloud_minion.domain.library.provider import DefaultItemFactory, Response, Session


class TestProviderState:
    """ProviderState updates return new states."""

    def test_authenticated(self, state) -> None:
        assert not state.authenticated
        assert state.with_session(Session("A")).authenticated

    def test_with_session_does_not_mutate(self, state) -> None:
        new_state = state.with_session(Session("A", "R"))
        assert state.session == Session()
        assert new_state.session == Session("A", "R")

    def test_cursors(self, state) -> None:
        key = ("search_tracks", "q")
        with_cursor = state.with_cursor(key, "https://next")

        assert with_cursor.cursors == {key: "https://next"}
        assert state.cursors == {}
        assert with_cursor.without_cursor(key).cursors == {}
        assert with_cursor.cursors == {key: "https://next"}

    def test_without_missing_cursor(self, state) -> None:
        assert state.without_cursor(("stream", None)) is state

    def test_liked(self, state) -> None:
        liked = state.with_liked([1, 2])
        assert liked.liked_track_ids == frozenset({1, 2})
        assert liked.without_liked(1).liked_track_ids == frozenset({2})
        assert state.liked_track_ids == frozenset()

    def test_capabilities_shared(self, state) -> None:
        """Derived states keep the same transport and preferences."""
        new_state = state.with_cursor(("stream", None), "https://next")
        assert new_state.transport is state.transport
        assert new_state.preferences is state.preferences


class TestDefaultItemFactory:
    """Tests for DefaultItemFactory."""

    def test_playable_item(self) -> None:
        item = DefaultItemFactory().create_playable_item(
            id="1",
            stream_uri="s",
            title="t",
            duration=1000,
            artist="a",
            artwork_uri="art",
            waveform_uri="w",
            permalink_uri="p",
        )
        assert isinstance(item, PlayableItem)
        assert item.liked is None

    def test_browsable_item(self) -> None:
        item = DefaultItemFactory().create_browsable_item(
            id="7", title="dj", kind=KIND_USER, subtitle="DJ"
        )
        assert isinstance(item, BrowsableItem)
        assert item.description is None


class TestResponse:
    """Tests for Response."""

    def test_header_lookup_ignores_case(self) -> None:
        response = Response(302, "", {"location": "https://x/y.mp3"})
        assert response.headers["Location"] == "https://x/y.mp3"
        assert response.headers.get("LOCATION") == "https://x/y.mp3"

    def test_no_headers(self) -> None:
        assert Response(200, "{}").headers.get("Location") is None
