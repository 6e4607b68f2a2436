"""drupal.org JSON:API client."""

import logging
from typing import Optional

from ..core.config import settings
from ..core.constants import ApiConstants
from ..core.exceptions import ResourceDecodeError, UserNotFound
from ..core.models import UserProfile
from ..core.schemas import (
    FileAttributes,
    ResourceDocument,
    UserAttributes,
    decode_attributes,
    decode_resource_document,
)
from ..utils.urls import encode_uri_component, resolve_image_url
from .proxy_router import ProxyRouter
from .transport import CancelToken

logger = logging.getLogger(__name__)


class ResourceGraphClient:
    """Resolves users and their side-loaded resources from the JSON:API."""

    def __init__(self, router: ProxyRouter, api_base: Optional[str] = None,
                 site_origin: Optional[str] = None, asset_base: Optional[str] = None):
        self.router = router
        self.api_base = (api_base or settings.api_base).rstrip("/")
        self.site_origin = site_origin or settings.site_origin
        self.asset_base = asset_base or settings.asset_base

    def user_query_url(self, username: str) -> str:
        return (
            f"{self.api_base}{ApiConstants.USER_ENDPOINT}"
            f"?filter[name]={encode_uri_component(username)}"
            f"&include={ApiConstants.USER_PICTURE_RELATIONSHIP}"
        )

    def fetch_document(self, url: str, cancel: Optional[CancelToken] = None) -> ResourceDocument:
        if not url.startswith("http"):
            url = f"{self.api_base}{url}"
        body = self.router.fetch_json(url, {"Accept": ApiConstants.JSONAPI_ACCEPT}, cancel)
        return decode_resource_document(body)

    def fetch_user(self, username: str, cancel: Optional[CancelToken] = None) -> UserProfile:
        """Fetch a user's public profile.

        Raises UserNotFound when no user matches, AggregateFetchError when
        every network path failed.
        """
        document = self.fetch_document(self.user_query_url(username), cancel)
        if not document.data:
            logger.info(f"No drupal.org user named '{username}'")
            raise UserNotFound(username)

        user = document.data[0]
        attributes = decode_attributes(user, UserAttributes)
        profile = UserProfile(
            uid=user.id,
            name=attributes.preferred_name() or username,
            url=user.self_href,
            avatar_url=self._resolve_avatar(document),
        )
        logger.info(f"Resolved user '{username}' (uid={profile.uid}, avatar={'yes' if profile.avatar_url else 'no'})")
        return profile

    def _resolve_avatar(self, document: ResourceDocument) -> Optional[str]:
        picture_id = document.data[0].related_id(ApiConstants.USER_PICTURE_RELATIONSHIP)
        if not picture_id:
            return None

        file_resource = document.find_included(picture_id)
        if file_resource is None:
            logger.debug(f"User picture {picture_id} was not side-loaded")
            return None

        try:
            file_attributes = decode_attributes(file_resource, FileAttributes)
        except ResourceDecodeError as e:
            logger.debug(f"Ignoring unreadable user picture {picture_id}: {e}")
            return None
        return resolve_image_url(file_attributes.file_url(), self.site_origin, self.asset_base)
