"""Schema-validated decoding of drupal.org API payloads.

Raw JSON never leaves this module: callers receive typed pydantic documents
or the dataclasses from ``core.models``, or a ``ResourceDecodeError``.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .exceptions import ResourceDecodeError
from .models import ContributionRecord, EnrichmentRecord, EventLists

logger = logging.getLogger(__name__)


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True, populate_by_name=True)


# --- JSON:API resource graph ---

class Link(_Lenient):
    href: str

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, value: Any) -> Any:
        # JSON:API allows a link to be a bare URL or a link object
        if isinstance(value, str):
            return {"href": value}
        return value


class ResourceLinks(_Lenient):
    self_link: Optional[Link] = Field(None, alias="self")
    next: Optional[Link] = None


class RelationshipPointer(_Lenient):
    type: str
    id: str


class Relationship(_Lenient):
    data: Union[RelationshipPointer, List[RelationshipPointer], None] = None


class Resource(_Lenient):
    id: str = Field(min_length=1)
    type: str
    attributes: Dict[str, Any] = Field(default_factory=dict)
    relationships: Dict[str, Relationship] = Field(default_factory=dict)
    links: Optional[ResourceLinks] = None

    @field_validator("attributes", "relationships", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def related_id(self, name: str) -> Optional[str]:
        """Id of a to-one relationship, or None when absent or to-many."""
        rel = self.relationships.get(name)
        if rel is None or not isinstance(rel.data, RelationshipPointer):
            return None
        return rel.data.id

    @property
    def self_href(self) -> Optional[str]:
        if self.links and self.links.self_link:
            return self.links.self_link.href
        return None


class ResourceDocument(_Lenient):
    """One parsed resource-graph response."""
    data: List[Resource] = Field(default_factory=list)
    included: List[Resource] = Field(default_factory=list)
    links: Optional[ResourceLinks] = None

    @field_validator("data", mode="before")
    @classmethod
    def _primary_as_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, dict):
            return [value]
        return value

    @field_validator("included", mode="before")
    @classmethod
    def _valid_included(cls, value: Any) -> Any:
        # Malformed side-loaded resources are dropped
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        kept = []
        for entry in value:
            try:
                kept.append(Resource.model_validate(entry))
            except ValidationError as e:
                logger.debug(f"Skipping malformed included resource: {e}")
        return kept

    @property
    def next_link(self) -> Optional[str]:
        if self.links and self.links.next:
            return self.links.next.href
        return None

    def find_included(self, resource_id: str) -> Optional[Resource]:
        for resource in self.included:
            if resource.id == resource_id:
                return resource
        return None


class UserAttributes(_Lenient):
    name: Optional[str] = None
    display_name: Optional[str] = None

    def preferred_name(self) -> Optional[str]:
        return self.display_name or self.name


class UriValue(_Lenient):
    value: Optional[str] = None


class FileAttributes(_Lenient):
    url: Optional[str] = None
    uri: Optional[UriValue] = None

    def file_url(self) -> Optional[str]:
        """Direct ``url`` attribute, else the nested ``uri.value``."""
        if self.url:
            return self.url
        if self.uri and self.uri.value:
            return self.uri.value
        return None


def decode_resource_document(body: Any) -> ResourceDocument:
    if not isinstance(body, dict):
        raise ResourceDecodeError(f"Expected a JSON:API document, got {type(body).__name__}")
    try:
        return ResourceDocument.model_validate(body)
    except ValidationError as e:
        raise ResourceDecodeError(f"Invalid JSON:API document: {e}") from e


def decode_attributes(resource: Resource, schema):
    try:
        return schema.model_validate(resource.attributes)
    except ValidationError as e:
        raise ResourceDecodeError(f"Invalid attributes on {resource.type} {resource.id}: {e}") from e


# --- Contribution feed ---

class FeedRecordSchema(_Lenient):
    nid: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    created: Union[int, float, str, None] = None

    def to_record(self) -> ContributionRecord:
        return ContributionRecord(source_id=self.nid, title=self.title, url=self.url, created=self.created)


def decode_feed_records(body: Any) -> Tuple[Optional[List[ContributionRecord]], int]:
    """Decode a feed body.

    Returns ``(None, 0)`` when the body is not a list, otherwise the decoded
    records and how many items were skipped as malformed.
    """
    if not isinstance(body, list):
        return None, 0
    records = []
    skipped = 0
    for item in body:
        try:
            records.append(FeedRecordSchema.model_validate(item).to_record())
        except ValidationError:
            skipped += 1
    return records, skipped


# --- Enrichment service ---

class EventsSchema(_Lenient):
    spoken_at: List[str] = Field(default_factory=list, alias="spokenAt")
    organized: List[str] = Field(default_factory=list)
    attended: List[str] = Field(default_factory=list)

    @field_validator("spoken_at", "organized", "attended", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class EnrichmentSchema(_Lenient):
    total_issues_count: int = 0
    total_issues_for_ai_count: int = 0
    total_issues_for_drupal_count: int = 0
    mentee_count: int = 0
    member_since: Optional[str] = None
    account_created_year: Optional[int] = None
    contributor_roles: List[str] = Field(default_factory=list)
    events_2025: EventsSchema = Field(default_factory=EventsSchema)

    @field_validator("contributor_roles", mode="before")
    @classmethod
    def _roles_as_list(cls, value: Any) -> Any:
        if value is None:
            return []
        return [role for role in value if role] if isinstance(value, list) else value

    @field_validator("events_2025", mode="before")
    @classmethod
    def _events_default(cls, value: Any) -> Any:
        return {} if value is None else value


def decode_enrichment_record(body: Any) -> EnrichmentRecord:
    if not isinstance(body, dict):
        raise ResourceDecodeError(f"Expected an enrichment object, got {type(body).__name__}")
    try:
        parsed = EnrichmentSchema.model_validate(body)
    except ValidationError as e:
        raise ResourceDecodeError(f"Invalid enrichment record: {e}") from e
    return EnrichmentRecord(
        total_issues_count=max(0, parsed.total_issues_count),
        total_issues_for_ai_count=max(0, parsed.total_issues_for_ai_count),
        total_issues_for_drupal_count=max(0, parsed.total_issues_for_drupal_count),
        mentee_count=max(0, parsed.mentee_count),
        member_since=parsed.member_since,
        account_created_year=parsed.account_created_year,
        contributor_roles=[r for r in parsed.contributor_roles if r],
        events=EventLists(
            spoken_at=list(parsed.events_2025.spoken_at),
            organized=list(parsed.events_2025.organized),
            attended=list(parsed.events_2025.attended),
        ),
    )
