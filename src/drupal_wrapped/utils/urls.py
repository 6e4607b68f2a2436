"""URL helpers for drupal.org assets and relay rewriting."""

import re
from typing import Iterable, Optional
from urllib.parse import quote, urlparse

from ..core.constants import ApiConstants, RelayConstants

_HTTP_SCHEME_RE = re.compile(r"^http://", re.IGNORECASE)


def encode_uri_component(value: str) -> str:
    """Percent-encode like JavaScript's encodeURIComponent."""
    return quote(value, safe=RelayConstants.URI_COMPONENT_SAFE)


def upgrade_scheme(url: Optional[str]) -> Optional[str]:
    """Rewrite http:// to https://."""
    if not url:
        return url
    return _HTTP_SCHEME_RE.sub("https://", url)


def resolve_image_url(uri: Optional[str], site_origin: str, asset_base: str) -> Optional[str]:
    """Turn a Drupal file URI into an absolute https URL."""
    if not uri:
        return None
    if uri.startswith(ApiConstants.PUBLIC_STREAM_PREFIX):
        uri = asset_base.rstrip("/") + "/" + uri[len(ApiConstants.PUBLIC_STREAM_PREFIX):]
    elif uri.startswith("//"):
        uri = "https:" + uri
    elif uri.startswith("/"):
        uri = site_origin.rstrip("/") + uri
    return upgrade_scheme(uri)


def host_matches(url: str, domains: Iterable[str]) -> bool:
    """True when the URL's host is one of the domains or a subdomain of one."""
    host = (urlparse(url).hostname or "").lower()
    for domain in domains:
        domain = domain.lower().lstrip(".")
        if host == domain or host.endswith("." + domain):
            return True
    return False
