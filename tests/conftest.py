"""Shared fakes for drupal-wrapped tests."""

import threading

import pytest

from drupal_wrapped.core.exceptions import AggregateFetchError, NetworkLike


class FakeTransport:
    """Returns (or raises) scripted outcomes in order and records every call."""

    def __init__(self, outcomes=None):
        self.outcomes = list(outcomes or [])
        self.calls = []

    def get(self, url, headers=None, cancel=None):
        self.calls.append((url, dict(headers or {})))
        outcome = self.outcomes.pop(0) if self.outcomes else NetworkLike("unscripted call", url=url)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeRouter:
    """Routes by URL substring; unmatched URLs fail like an exhausted relay chain."""

    def __init__(self, routes):
        self.routes = list(routes)
        self.calls = []
        self._lock = threading.Lock()

    def fetch_json(self, url, headers=None, cancel=None):
        with self._lock:
            self.calls.append((url, dict(headers or {})))
        for needle, outcome in self.routes:
            if needle in url:
                if isinstance(outcome, BaseException):
                    raise outcome
                return outcome
        raise AggregateFetchError()

    def urls_containing(self, needle):
        return [url for url, _ in self.calls if needle in url]


def user_document(uid="8d6f2c4e-uid", name="dries", display_name="Dries Buytaert",
                  file_attributes=None, self_href="https://www.drupal.org/jsonapi/user/user/8d6f2c4e-uid"):
    """A JSON:API user document with an optional side-loaded picture."""
    user = {
        "type": "user--user",
        "id": uid,
        "attributes": {"name": name, "display_name": display_name},
        "relationships": {"user_picture": {"data": None}},
        "links": {"self": {"href": self_href}},
    }
    document = {"data": [user], "included": []}
    if file_attributes is not None:
        user["relationships"]["user_picture"] = {"data": {"type": "file--file", "id": "file-1"}}
        document["included"].append({"type": "file--file", "id": "file-1", "attributes": file_attributes})
    return document


def feed_records(count, prefix="n", created=1741608000):
    return [
        {"nid": f"{prefix}{i}", "title": f"Issue {i}", "url": f"https://www.drupal.org/node/{i}", "created": created}
        for i in range(count)
    ]


@pytest.fixture
def fake_transport():
    return FakeTransport()
