"""Batch publishing: decides create vs update per topic and sequences topics.

Every topic ends in exactly one outcome (created, updated or failed). A failed
topic is recorded and the batch moves on; nothing is retried at this level.
Runs are strictly sequential with an unconditional pause after each topic.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from .config import PipelineConfig
from .generator import ContentPipeline
from .models import BatchRunSummary, ContentSections, PageRecord, Topic, TopicOutcome, TopicStatus
from .pacing import FixedIntervalPacer, StepTimer
from .processing import ContentProcessor
from .prompts import BRAND
from .reference_data import RegionCatalog
from .repository import ContentRepository, RepositoryError

LOGGER = logging.getLogger(__name__)

StructuredDataBuilder = Callable[[Topic], Any]
ProgressCallback = Callable[[int, int, TopicOutcome], None]


def page_title(topic: Topic) -> str:
    return (
        "WordPress consulting & engineering, including custom plugins, security, enterprise integrations, "
        f"and white-label agency work in {topic.label} | {BRAND}"
    )


def page_description(topic: Topic, sub_regions: Sequence[str] = ()) -> str:
    description = (
        "Professional WordPress development, custom plugins, and web solutions for businesses in "
        f"{topic.label}. White-label services and expert support"
    )
    if sub_regions and not topic.sub_region:
        return f"{description} in {', '.join(sub_regions)}"
    return description + "."


class PublishOrchestrator:
    """Drives the pipeline over batches of topics and writes results to the repository."""

    def __init__(
        self,
        pipeline: ContentPipeline,
        repository: ContentRepository,
        processor: ContentProcessor,
        regions: RegionCatalog,
        pacer: Optional[FixedIntervalPacer] = None,
        structured_data: Optional[StructuredDataBuilder] = None,
        config: Optional[PipelineConfig] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.config = config or PipelineConfig()
        self.pipeline = pipeline
        self.repository = repository
        self.processor = processor
        self.regions = regions
        self.pacer = pacer or FixedIntervalPacer(self.config.PACING_DELAY)
        self.structured_data = structured_data
        self._now = now

    def plan_all(self, include_sub_regions: bool = True) -> List[Topic]:
        """Every region in declared order, each followed by its sub-regions."""

        topics: List[Topic] = []
        for region in self.regions.keys():
            topics.append(Topic(region))
            if include_sub_regions:
                topics.extend(Topic(region, sub_region) for sub_region in self.regions.sub_regions(region))
        return topics

    def plan_sub_regions(
        self,
        region: str,
        sub_regions: Optional[Sequence[str]] = None,
        refresh_region: bool = False,
    ) -> List[Topic]:
        names = list(sub_regions) if sub_regions is not None else list(self.regions.sub_regions(region))
        topics = [Topic(region, name) for name in names]
        if refresh_region:
            topics.append(Topic(region))
        return topics

    def process_topic(self, topic: Topic) -> TopicOutcome:
        """Lookup, then update or create one page. Never raises for per-topic failures."""

        if not self.pipeline.validate(topic):
            return self._failed(topic, "Unknown region or sub-region")
        try:
            existing = self.repository.find(topic.region, topic.sub_region)
            if existing is not None:
                return self._update(existing, topic)
            return self._create(topic)
        except RepositoryError as exc:
            return self._failed(topic, str(exc))
        except Exception as exc:  # batch boundary: one topic must not end the run
            LOGGER.exception("Unexpected error while processing %s", topic.label)
            return self._failed(topic, f"{type(exc).__name__}: {exc}")

    def _update(self, record: PageRecord, topic: Topic) -> TopicOutcome:
        LOGGER.info("Updating content for %s (ID: %s)", topic.label, record.id)
        result = self.pipeline.run(topic)
        if not result.ok:
            return self._failed(topic, result.error, page_id=record.id)
        self.repository.update(record.id, self._fields(topic, result.sections))
        LOGGER.info("Updated page for %s (ID: %s)", topic.label, record.id)
        return TopicOutcome(topic=topic, status=TopicStatus.UPDATED, page_id=record.id)

    def _create(self, topic: Topic) -> TopicOutcome:
        LOGGER.info("Generating content for new page %s", topic.label)
        result = self.pipeline.run(topic)
        if not result.ok:
            return self._failed(topic, result.error)
        fields = self._fields(topic, result.sections)
        fields.update(
            {
                "region": topic.region,
                "sub_region": topic.sub_region,
                "slug": self.processor.page_slug(topic),
                "parent_id": self._parent_id(topic),
            }
        )
        page_id = self.repository.create(fields)
        LOGGER.info("Created page for %s (ID: %s)", topic.label, page_id)
        return TopicOutcome(topic=topic, status=TopicStatus.CREATED, page_id=page_id)

    def _parent_id(self, topic: Topic) -> Optional[int]:
        if not topic.sub_region:
            return None
        parent = self.repository.find(topic.region, None)
        if parent is None:
            LOGGER.warning("No region page for %s yet; %s will have no parent", topic.region, topic.label)
            return None
        return parent.id

    def _fields(self, topic: Topic, sections: ContentSections) -> Dict[str, Any]:
        sub_regions = self.regions.sub_regions(topic.region)
        meta: Dict[str, Any] = {
            "page_type": "sub_region" if topic.sub_region else "region",
            "generated_at": self._now().isoformat(timespec="seconds"),
            "seo_title": page_title(topic),
            "seo_description": sections.meta_description or page_description(topic, sub_regions),
        }
        if self.structured_data is not None:
            meta["structured_data"] = self.structured_data(topic)
        return {
            "title": sections.title,
            "body": sections.body,
            "excerpt": sections.excerpt,
            "meta": meta,
        }

    @staticmethod
    def _failed(topic: Topic, error: Optional[str], page_id: Optional[int] = None) -> TopicOutcome:
        LOGGER.error("Failed to publish %s: %s", topic.label, error)
        return TopicOutcome(topic=topic, status=TopicStatus.FAILED, page_id=page_id, error=error)

    def run_batch(
        self,
        topics: Sequence[Topic],
        progress: Optional[ProgressCallback] = None,
        summary: Optional[BatchRunSummary] = None,
    ) -> BatchRunSummary:
        """Process topics in order, pausing after each one."""

        summary = summary or BatchRunSummary()
        total = len(topics)
        with StepTimer(f"batch of {total} topics"):
            for index, topic in enumerate(topics, start=1):
                outcome = self.process_topic(topic)
                summary.record(outcome)
                if progress is not None:
                    progress(index, total, outcome)
                self.pacer.wait()
        return summary

    def generate_all(self, include_sub_regions: bool = True, progress: Optional[ProgressCallback] = None) -> BatchRunSummary:
        return self.run_batch(self.plan_all(include_sub_regions), progress)

    def process_regions(self, regions: Sequence[str], progress: Optional[ProgressCallback] = None) -> BatchRunSummary:
        return self.run_batch([Topic(region) for region in regions], progress)

    def process_sub_regions(
        self,
        region: str,
        sub_regions: Optional[Sequence[str]] = None,
        refresh_region: bool = False,
        progress: Optional[ProgressCallback] = None,
    ) -> BatchRunSummary:
        return self.run_batch(self.plan_sub_regions(region, sub_regions, refresh_region), progress)

    def update_all(self, progress: Optional[ProgressCallback] = None) -> BatchRunSummary:
        """Regenerate every stored page, ignoring the reference topic list."""

        summary = BatchRunSummary()
        try:
            records = self.repository.list_all()
        except RepositoryError as exc:
            LOGGER.error("Could not list existing pages: %s", exc)
            return summary
        total = len(records)
        with StepTimer(f"update of {total} pages"):
            for index, record in enumerate(records, start=1):
                topic = record.topic
                if not self.pipeline.validate(topic):
                    outcome = self._failed(topic, "Unknown region or sub-region", page_id=record.id)
                else:
                    try:
                        outcome = self._update(record, topic)
                    except RepositoryError as exc:
                        outcome = self._failed(topic, str(exc), page_id=record.id)
                    except Exception as exc:  # batch boundary
                        LOGGER.exception("Unexpected error while updating %s", topic.label)
                        outcome = self._failed(topic, f"{type(exc).__name__}: {exc}", page_id=record.id)
                summary.record(outcome)
                if progress is not None:
                    progress(index, total, outcome)
                self.pacer.wait()
        return summary

    def delete(self, region: str, sub_region: Optional[str] = None) -> int:
        """Delete one sub-region page, or a region page with all its sub-region pages."""

        if sub_region:
            record = self.repository.find(region, sub_region)
            records = [record] if record is not None else []
        else:
            records = self.repository.list_by(region)
        if not records:
            LOGGER.warning("No pages found for %s", Topic(region, sub_region).label)
            return 0

        deleted = 0
        for record in records:
            try:
                if self.repository.delete(record.id):
                    deleted += 1
                    LOGGER.info("Deleted page %s (ID: %s)", record.topic.label, record.id)
                else:
                    LOGGER.warning("Page %s (ID: %s) was already gone", record.topic.label, record.id)
            except RepositoryError as exc:
                LOGGER.error("Failed to delete page %s (ID: %s): %s", record.topic.label, record.id, exc)
        return deleted

    def select_pages(
        self,
        region: Optional[str] = None,
        sub_region: Optional[str] = None,
        region_only: bool = False,
    ) -> List[PageRecord]:
        records = [record for record in self.repository.list_all() if record.region]
        if region:
            records = [record for record in records if record.region == region]
        if sub_region:
            records = [record for record in records if record.sub_region == sub_region]
        elif region_only:
            records = [record for record in records if record.sub_region is None]
        return records

    def regenerate_structured_data(
        self,
        region: Optional[str] = None,
        sub_region: Optional[str] = None,
        region_only: bool = False,
    ) -> Dict[str, int]:
        """Rewrite only the structured-data field of matching pages."""

        if self.structured_data is None:
            raise RuntimeError("No structured-data builder configured")
        records = self.select_pages(region, sub_region, region_only)
        regenerated = failed = 0
        for record in records:
            try:
                payload = self.structured_data(record.topic)
                self.repository.update(record.id, {"meta": {"structured_data": payload}})
                regenerated += 1
            except Exception as exc:  # one page must not stop the pass
                LOGGER.warning("Failed to regenerate structured data for %s: %s", record.topic.label, exc)
                failed += 1
        return {"regenerated": regenerated, "failed": failed, "total": len(records)}


__all__ = ["PublishOrchestrator", "page_description", "page_title"]
