"""Cloud Minion - SoundCloud client adapter for media-library hosts."""

__version__ = "0.1.0"
