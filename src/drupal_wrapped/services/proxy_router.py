"""Relay-chain routing for browser-restricted drupal.org endpoints."""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import yaml

from ..core.config import settings
from ..core.constants import RelayConstants
from ..core.exceptions import AggregateFetchError, TransportError
from ..utils.urls import encode_uri_component, host_matches
from .transport import CancelToken, Transport, check_cancelled

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelayTemplate:
    """A relay endpoint. `template` takes `{url}` and/or `{encoded_url}`."""
    name: str
    template: str

    def rewrite(self, target_url: str) -> str:
        return self.template.format(url=target_url, encoded_url=encode_uri_component(target_url))


def default_relay_templates() -> List[RelayTemplate]:
    return [RelayTemplate(r["name"], r["template"]) for r in RelayConstants.DEFAULT_RELAYS]


def _parse_relays(raw: Any) -> List[RelayTemplate]:
    entries = raw.get("relays") if isinstance(raw, dict) else raw
    if not isinstance(entries, list) or not entries:
        raise ValueError("relay file must contain a non-empty 'relays' list")

    relays = []
    for entry in entries:
        name = entry.get("name") if isinstance(entry, dict) else None
        template = entry.get("template") if isinstance(entry, dict) else None
        if not name or not template:
            raise ValueError(f"relay entry needs 'name' and 'template': {entry!r}")
        if "{url}" not in template and "{encoded_url}" not in template:
            raise ValueError(f"relay '{name}' template has no {{url}} or {{encoded_url}} placeholder")
        relays.append(RelayTemplate(str(name), str(template)))
    return relays


def load_relay_templates(path: Optional[str] = None) -> List[RelayTemplate]:
    """Load the ordered relay chain from YAML, falling back to the built-in list."""
    relays_file = path or settings.relays_file
    try:
        with open(relays_file, 'r', encoding='utf-8') as f:
            relays = _parse_relays(yaml.safe_load(f))
        logger.info(f"Loaded {len(relays)} relays from {relays_file}")
        return relays
    except FileNotFoundError:
        logger.warning(f"Relay file {os.path.abspath(relays_file)} not found. Using defaults.")
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load relays from {relays_file}: {e}. Using defaults.")
    return default_relay_templates()


class ProxyRouter:
    """Fetch JSON directly or through an ordered chain of relays.

    Every call starts from the first relay; there is no backoff and no memory
    of which relays failed on earlier calls.
    """

    def __init__(self, transport: Transport, relays: Sequence[RelayTemplate],
                 restricted_domains: Optional[Sequence[str]] = None):
        self.transport = transport
        self.relays = tuple(relays)
        self.restricted_domains = tuple(
            restricted_domains if restricted_domains is not None else settings.restricted_domains
        )

    def needs_relay(self, target_url: str) -> bool:
        return host_matches(target_url, self.restricted_domains)

    def fetch_json(self, target_url: str, headers: Optional[Dict[str, str]] = None,
                   cancel: Optional[CancelToken] = None) -> Any:
        attempts: List[TransportError] = []

        if not self.needs_relay(target_url):
            try:
                return self.transport.get(target_url, headers, cancel)
            except TransportError as e:
                logger.warning(f"Direct fetch failed ({e}), falling back to relays.")
                attempts.append(e)

        for relay in self.relays:
            check_cancelled(cancel)
            try:
                data = self.transport.get(relay.rewrite(target_url), headers, cancel)
                logger.debug(f"Relay {relay.name} succeeded for {target_url}")
                return data
            except TransportError as e:
                logger.debug(f"Relay {relay.name} failed: {type(e).__name__}: {e}")
                attempts.append(e)

        last_error = attempts[-1] if attempts else None
        logger.error(f"All relays failed for {target_url}. Last error: {last_error}")
        raise AggregateFetchError(last_error.message if last_error else None, attempts)
