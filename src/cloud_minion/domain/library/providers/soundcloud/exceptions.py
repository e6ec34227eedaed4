"""SoundCloud-specific exceptions for error handling."""

from typing import Optional


class SoundCloudError(Exception):
    """Base exception for SoundCloud operations."""

    pass


class ConfigurationError(SoundCloudError):
    """Raised when an unknown endpoint name is requested."""

    pass


class NotAuthenticatedError(SoundCloudError):
    """Raised when an endpoint needs an access token and none is stored."""

    pass


class InvalidCredentialsError(SoundCloudError):
    """Raised when SoundCloud rejects the authorization code or refresh token.

    The caller has to restart the authorization flow from scratch.
    """

    pass


class NotStreamableError(SoundCloudError):
    """Raised when a track cannot be streamed or its redirect cannot be resolved."""

    pass


class UserNotFoundError(SoundCloudError):
    """Raised when a user lookup returns 404."""

    pass


class MalformedResponseError(SoundCloudError):
    """Raised when a response body is not the JSON shape we expect."""

    pass


class ApiError(SoundCloudError):
    """Raised when SoundCloud reports an error for a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_auth_failure(self) -> bool:
        """True when the access token was rejected (401/403)."""
        return self.status_code in (401, 403)


class TransportError(SoundCloudError):
    """Raised when the HTTP request itself could not be completed."""

    pass


class HttpError(TransportError):
    """Raised by the transport for failure status codes (>= 400)."""

    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(body or f"HTTP {status}")
