"""Shared datamodels for the local pages generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class Topic:
    """One unit of generation work: a region and an optional sub-region."""

    region: str
    sub_region: Optional[str] = None

    @property
    def is_sub_region(self) -> bool:
        return self.sub_region is not None

    @property
    def label(self) -> str:
        if self.sub_region:
            return f"{self.sub_region}, {self.region}"
        return self.region


class FailureKind(str, Enum):
    NETWORK_ERROR = "network_error"
    HTTP_ERROR = "http_error"
    MALFORMED_RESPONSE = "malformed_response"
    NOT_CONFIGURED = "not_configured"


@dataclass
class GatewayText:
    """Successful gateway call."""

    text: str
    attempts: int = 1
    usage: Dict[str, int] = field(default_factory=dict)

    ok = True


@dataclass
class GatewayFailure:
    """Terminal gateway failure, after any retries were spent."""

    kind: FailureKind
    message: str
    retry_count: int = 0
    status: Optional[int] = None
    hint: Optional[str] = None
    retryable: bool = False

    ok = False

    def describe(self) -> str:
        parts = [self.kind.value]
        if self.status is not None:
            parts.append(f"HTTP {self.status}")
        parts.append(self.message)
        if self.hint:
            parts.append(self.hint)
        return ": ".join(parts)


GatewayResult = Union[GatewayText, GatewayFailure]


@dataclass(frozen=True)
class ContentSections:
    """Sections extracted from processed page content."""

    title: str
    meta_description: str
    excerpt: str
    body: str


@dataclass
class ValidationResult:
    """Content quality report; diagnostic unless quality enforcement is on."""

    passes: bool
    issues: List[str] = field(default_factory=list)
    word_count: int = 0


@dataclass
class PageRecord:
    """A stored page keyed by (region, sub_region)."""

    id: int
    region: str
    sub_region: Optional[str] = None
    title: str = ""
    body: str = ""
    excerpt: str = ""
    slug: str = ""
    parent_id: Optional[int] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def topic(self) -> Topic:
        return Topic(self.region, self.sub_region)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "region": self.region,
            "sub_region": self.sub_region,
            "title": self.title,
            "body": self.body,
            "excerpt": self.excerpt,
            "slug": self.slug,
            "parent_id": self.parent_id,
            "meta": dict(self.meta),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "PageRecord":
        return cls(
            id=int(payload["id"]),
            region=payload["region"],
            sub_region=payload.get("sub_region"),
            title=payload.get("title", ""),
            body=payload.get("body", ""),
            excerpt=payload.get("excerpt", ""),
            slug=payload.get("slug", ""),
            parent_id=payload.get("parent_id"),
            meta=dict(payload.get("meta") or {}),
        )


@dataclass
class GenerationResult:
    """Outcome of one pipeline run for a topic."""

    topic: Topic
    sections: Optional[ContentSections] = None
    validation: Optional[ValidationResult] = None
    error: Optional[str] = None
    failure: Optional[GatewayFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.sections is not None


class TopicStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass
class TopicOutcome:
    """Terminal state of one topic in a batch."""

    topic: Topic
    status: TopicStatus
    page_id: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is not TopicStatus.FAILED


@dataclass
class BatchRunSummary:
    """Created/updated/failed counters per page level, accumulated over a run."""

    regions_created: int = 0
    regions_updated: int = 0
    regions_failed: int = 0
    sub_regions_created: int = 0
    sub_regions_updated: int = 0
    sub_regions_failed: int = 0
    outcomes: List[TopicOutcome] = field(default_factory=list)

    def record(self, outcome: TopicOutcome) -> None:
        level = "sub_regions" if outcome.topic.is_sub_region else "regions"
        attribute = f"{level}_{outcome.status.value}"
        setattr(self, attribute, getattr(self, attribute) + 1)
        self.outcomes.append(outcome)

    @property
    def created(self) -> int:
        return self.regions_created + self.sub_regions_created

    @property
    def updated(self) -> int:
        return self.regions_updated + self.sub_regions_updated

    @property
    def failed(self) -> int:
        return self.regions_failed + self.sub_regions_failed

    @property
    def processed(self) -> int:
        return len(self.outcomes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the counters for external consumers."""

        return {
            "regions": {
                "created": self.regions_created,
                "updated": self.regions_updated,
                "failed": self.regions_failed,
            },
            "sub_regions": {
                "created": self.sub_regions_created,
                "updated": self.sub_regions_updated,
                "failed": self.sub_regions_failed,
            },
            "processed": self.processed,
        }


__all__ = [
    "BatchRunSummary",
    "ContentSections",
    "FailureKind",
    "GatewayFailure",
    "GatewayResult",
    "GatewayText",
    "GenerationResult",
    "PageRecord",
    "Topic",
    "TopicOutcome",
    "TopicStatus",
    "ValidationResult",
]
