"""Single-attempt HTTP transport with failure classification."""

import logging
import threading
from typing import Any, Dict, Optional

import requests

from ..core.config import settings
from ..core.constants import ApiConstants
from ..core.exceptions import (
    AccessDenied,
    HeaderRejected,
    NetworkLike,
    NotFound,
    OperationCancelled,
)

logger = logging.getLogger(__name__)


class CancelToken:
    """Caller-controlled cancellation signal shared by one operation."""

    def __init__(self):
        self._event = threading.Event()
        self._timer: Optional[threading.Timer] = None

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self):
        if self._event.is_set():
            raise OperationCancelled("Operation cancelled")

    def cancel_after(self, seconds: float) -> "CancelToken":
        """Fire the token after `seconds`, giving the operation a deadline."""
        self._timer = threading.Timer(seconds, self.cancel)
        self._timer.daemon = True
        self._timer.start()
        return self

    def close(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


def check_cancelled(cancel: Optional[CancelToken]):
    if cancel is not None:
        cancel.raise_if_cancelled()


def _clean_headers(headers: Optional[Dict[str, str]]) -> Dict[str, str]:
    return {
        k: v for k, v in (headers or {}).items()
        if k.lower() not in ApiConstants.STRIPPED_HEADERS
    }


class Transport:
    """Performs exactly one GET and classifies the outcome.

    Credentials and referrer data are never sent: the session ignores the
    environment (no .netrc auth, no ambient proxies) and auth/cookie/referer
    headers are dropped before the request goes out.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout if timeout is not None else settings.request_timeout

    def get(self, url: str, headers: Optional[Dict[str, str]] = None,
            cancel: Optional[CancelToken] = None) -> Any:
        check_cancelled(cancel)

        try:
            with requests.Session() as session:
                session.trust_env = False
                response = session.get(
                    url,
                    headers=_clean_headers(headers),
                    timeout=self.timeout,
                )
        except requests.RequestException as e:
            raise NetworkLike(f"Request failed: {e}", url=url) from e

        status = response.status_code
        if status in (401, 403):
            raise AccessDenied("Access Denied (CORS/Auth)", status=status, url=url)
        if status == 404:
            raise NotFound(response.reason or "Not Found", status=status, url=url)
        if status == 406:
            raise HeaderRejected(response.reason or "Not Acceptable", status=status, url=url)
        if not 200 <= status < 300:
            raise NetworkLike(response.reason or f"HTTP {status}", status=status, url=url)

        try:
            return response.json()
        except ValueError as e:
            raise NetworkLike(f"Invalid JSON body: {e}", status=status, url=url) from e
