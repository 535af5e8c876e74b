"""Page content generation around a single gateway call."""

from __future__ import annotations

import logging
from typing import Optional

from .config import PipelineConfig
from .gateway import ApiGateway
from .models import GatewayFailure, GenerationResult, Topic
from .processing import ContentProcessor
from .prompts import region_prompt, sub_region_prompt
from .reference_data import KeywordCatalog, RegionCatalog

LOGGER = logging.getLogger(__name__)


class ContentGenerationError(RuntimeError):
    """Raised when content for a topic could not be produced."""

    def __init__(self, message: str, failure: Optional[GatewayFailure] = None):
        super().__init__(message)
        self.failure = failure


class UnknownTopicError(ContentGenerationError):
    """Raised for a region or sub-region missing from the reference data."""


class ContentPipeline:
    """Turns a topic into processed page content via the gateway.

    ``generate`` follows the raising contract; ``run`` wraps the same work in a
    :class:`GenerationResult` so batch callers can branch on ``result.ok``.
    """

    def __init__(
        self,
        gateway: ApiGateway,
        processor: ContentProcessor,
        regions: RegionCatalog,
        keywords: KeywordCatalog,
        config: Optional[PipelineConfig] = None,
    ):
        self.gateway = gateway
        self.processor = processor
        self.regions = regions
        self.keywords = keywords
        self.config = config or PipelineConfig()

    def validate(self, topic: Topic) -> bool:
        if not topic or not topic.region or not self.regions.has(topic.region):
            return False
        if topic.sub_region is None:
            return True
        return self.regions.has_sub_region(topic.region, topic.sub_region)

    def build_prompt(self, topic: Topic) -> str:
        contact_url = self.config.CONTACT_PATH
        if topic.sub_region:
            return sub_region_prompt(topic.region, topic.sub_region, self.keywords.keys(), contact_url)
        return region_prompt(topic.region, self.regions.sub_regions(topic.region), self.keywords.keys(), contact_url)

    def generate(self, topic: Topic) -> str:
        """Return processed content for ``topic`` or raise ContentGenerationError."""

        if not self.validate(topic):
            raise UnknownTopicError(f"Invalid data provided for content generation: {topic.label}")

        LOGGER.info("Generating content for %s", topic.label)
        result = self.gateway.send(self.build_prompt(topic))
        if not result.ok:
            raise ContentGenerationError(f"Failed to generate content from API: {result.describe()}", failure=result)
        if not result.text or not result.text.strip():
            raise ContentGenerationError("Failed to generate content from API: empty response")

        processed = self.processor.process_content(result.text, topic)
        if not processed.strip():
            raise ContentGenerationError("Processed content is empty")
        return processed

    def run(self, topic: Topic) -> GenerationResult:
        """Generate, extract sections and check quality without raising."""

        try:
            content = self.generate(topic)
        except ContentGenerationError as exc:
            return GenerationResult(topic=topic, error=str(exc), failure=exc.failure)

        sections = self.processor.extract_sections(content, topic)
        validation = self.processor.validate_content(sections.body)
        if not validation.passes:
            LOGGER.warning("Content quality issues for %s: %s", topic.label, ", ".join(validation.issues))
            if self.config.ENFORCE_QUALITY:
                return GenerationResult(
                    topic=topic,
                    sections=sections,
                    validation=validation,
                    error="Content quality check failed: " + "; ".join(validation.issues),
                )
        return GenerationResult(topic=topic, sections=sections, validation=validation)


__all__ = ["ContentGenerationError", "ContentPipeline", "UnknownTopicError"]
