"""Client for the deep-scrape enrichment service (roles, events, mentees)."""

import logging
from typing import Any, Optional

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..core.config import settings
from ..core.constants import ApiConstants
from ..core.exceptions import DrupalWrappedError, NetworkLike, OperationCancelled
from ..core.models import EnrichmentRecord
from ..core.schemas import decode_enrichment_record
from ..utils.urls import encode_uri_component
from .transport import CancelToken, Transport, check_cancelled

logger = logging.getLogger(__name__)


class EnrichmentClient:
    """Fetches the enrichment record for a user.

    The service is optional: with no ``enrichment_url`` configured, or when
    it keeps failing, ``fetch`` returns None and the review is built without
    roles, events or mentee counts.
    """

    def __init__(self, transport: Transport, base_url: Optional[str] = None):
        self.transport = transport
        self.base_url = base_url if base_url is not None else settings.enrichment_url

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    @retry(
        retry=retry_if_exception_type(NetworkLike),
        stop=stop_after_attempt(settings.max_retries),
        wait=wait_exponential(multiplier=settings.retry_delay, max=settings.retry_backoff * 10),
        reraise=True,
    )
    def _get(self, url: str, cancel: Optional[CancelToken] = None) -> Any:
        check_cancelled(cancel)
        return self.transport.get(url, {"Accept": ApiConstants.JSON_ACCEPT}, cancel)

    def fetch(self, username: str, months: int,
              cancel: Optional[CancelToken] = None) -> Optional[EnrichmentRecord]:
        if not self.enabled:
            logger.debug("Enrichment service not configured, skipping")
            return None

        url = f"{self.base_url}?username={encode_uri_component(username)}&months={int(months)}"
        try:
            record = decode_enrichment_record(self._get(url, cancel))
        except OperationCancelled:
            raise
        except DrupalWrappedError as e:
            logger.warning(f"Enrichment for '{username}' unavailable: {e}")
            return None

        logger.info(f"Enrichment for '{username}': {len(record.contributor_roles)} roles, "
                    f"{record.mentee_count} mentees")
        return record
