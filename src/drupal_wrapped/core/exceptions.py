"""Error taxonomy for drupal-wrapped."""

from typing import List, Optional

from .constants import ErrorConstants


class DrupalWrappedError(Exception):
    """Base class for all errors raised by drupal-wrapped."""


class TransportError(DrupalWrappedError):
    """A single HTTP attempt failed."""

    def __init__(self, message: str, status: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.url = url


class AccessDenied(TransportError):
    """401/403: the path is unusable (CORS or auth)."""


class NotFound(TransportError):
    """404 from the target or relay."""


class HeaderRejected(TransportError):
    """406: the relay stripped or mismatched the Accept header."""


class NetworkLike(TransportError):
    """Connection errors, timeouts, other non-2xx statuses, unparsable bodies."""


class AggregateFetchError(DrupalWrappedError):
    """Every path (direct and all relays) failed for one request."""

    def __init__(self, message: Optional[str] = None, attempts: Optional[List[TransportError]] = None):
        self.message = message or ErrorConstants.GENERIC_CONNECTIVITY_MESSAGE
        self.attempts = list(attempts or [])
        super().__init__(self.message)


class UserNotFound(DrupalWrappedError):
    """The resource graph returned no user with the requested name."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"User not found: {username}")


class ResourceDecodeError(DrupalWrappedError):
    """A response body did not match the expected document shape."""


class OperationCancelled(DrupalWrappedError):
    """The caller cancelled the operation."""


def user_message(exc: BaseException) -> str:
    """Map a failure to the message shown to end users."""
    if isinstance(exc, UserNotFound):
        return ErrorConstants.USER_NOT_FOUND_MESSAGE
    if isinstance(exc, OperationCancelled):
        return ErrorConstants.CANCELLED_MESSAGE
    return ErrorConstants.GENERIC_CONNECTIVITY_MESSAGE
