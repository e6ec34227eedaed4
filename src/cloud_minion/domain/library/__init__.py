"""Library domain - provider state and the host item model.

This domain handles:
- Playable/browsable item models
- Provider state and the capabilities providers need from their host
"""

# Models
from .models import BrowsableItem, PlayableItem, KIND_PLAYLIST, KIND_USER

# Provider state
from .provider import (
    CursorKey,
    DefaultItemFactory,
    ItemFactory,
    Preferences,
    ProviderConfig,
    ProviderState,
    Response,
    Session,
    WebRequests,
)

__all__ = [
    # Models
    "BrowsableItem",
    "PlayableItem",
    "KIND_PLAYLIST",
    "KIND_USER",
    # Provider state
    "CursorKey",
    "DefaultItemFactory",
    "ItemFactory",
    "Preferences",
    "ProviderConfig",
    "ProviderState",
    "Response",
    "Session",
    "WebRequests",
]
