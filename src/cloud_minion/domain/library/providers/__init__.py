"""
Registry of library provider modules, looked up by name.
"""

from types import ModuleType
from typing import Dict, List

# name -> module exporting init_provider plus (state -> (state, result)) functions
PROVIDERS: Dict[str, ModuleType] = {}


def register_provider(name: str, provider_module: ModuleType) -> None:
    """Make provider_module available under name."""
    PROVIDERS[name] = provider_module


def get_provider(name: str) -> ModuleType:
    """Look up a registered provider module.

    Raises:
        ValueError: If no provider is registered under name
    """
    try:
        return PROVIDERS[name]
    except KeyError:
        available = ", ".join(list_providers()) or "none"
        raise ValueError(
            f"Unknown provider: '{name}'. Available providers: {available}"
        ) from None


def list_providers() -> List[str]:
    """Names of all registered providers."""
    return list(PROVIDERS)


from . import soundcloud  # noqa: E402

register_provider("soundcloud", soundcloud)
