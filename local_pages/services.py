"""Composition root: wires configuration into the gateway, pipeline and orchestrator."""

from __future__ import annotations

import importlib
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from .config import ConfigurationError, PipelineConfig
from .credentials import EnvCredentialSource
from .gateway import ApiGateway
from .generator import ContentPipeline
from .orchestrator import PublishOrchestrator, StructuredDataBuilder
from .pacing import FixedIntervalPacer
from .processing import ContentProcessor
from .reference_data import KeywordCatalog, RegionCatalog, default_keywords, default_regions
from .repository import ContentRepository, InMemoryRepository, JsonFileRepository
from .wordpress import WordPressRepository

LOGGER = logging.getLogger(__name__)


@dataclass
class Services:
    config: PipelineConfig
    regions: RegionCatalog
    keywords: KeywordCatalog
    gateway: ApiGateway
    processor: ContentProcessor
    pipeline: ContentPipeline
    repository: ContentRepository
    orchestrator: PublishOrchestrator


def build_repository(config: PipelineConfig, session: Optional[requests.Session] = None) -> ContentRepository:
    backend = config.REPOSITORY_BACKEND
    if backend == "memory":
        return InMemoryRepository()
    if backend == "json":
        return JsonFileRepository(config.REPOSITORY_PATH)
    if backend == "wordpress":
        missing = [
            name for name in ("WP_URL", "WP_USERNAME", "WP_APP_PASSWORD") if not getattr(config, name)
        ]
        if missing:
            raise ConfigurationError(f"WordPress backend needs {', '.join(missing)}")
        return WordPressRepository(
            config.WP_URL,
            config.WP_USERNAME,
            config.WP_APP_PASSWORD,
            post_type=config.WP_POST_TYPE,
            session=session,
        )
    raise ConfigurationError(f"Unknown repository backend '{backend}'")


def load_builder(path: Optional[str]) -> Optional[StructuredDataBuilder]:
    """Resolve a ``"package.module:function"`` path to a structured-data builder."""

    if not path:
        return None
    module_name, _, attribute = path.partition(":")
    if not module_name or not attribute:
        raise ConfigurationError(f"Structured-data builder must look like 'module:function', got '{path}'")
    try:
        builder = getattr(importlib.import_module(module_name), attribute)
    except (ImportError, AttributeError) as exc:
        raise ConfigurationError(f"Cannot load structured-data builder '{path}': {exc}") from exc
    if not callable(builder):
        raise ConfigurationError(f"Structured-data builder '{path}' is not callable")
    return builder


def build_services(
    config: PipelineConfig,
    credentials=None,
    session: Optional[requests.Session] = None,
    repository: Optional[ContentRepository] = None,
    structured_data: Optional[StructuredDataBuilder] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Services:
    """Build every collaborator once; callers pass overrides for tests and dry runs."""

    regions = default_regions()
    keywords = default_keywords(config.SITE_URL)
    credentials = credentials if credentials is not None else EnvCredentialSource()
    gateway = ApiGateway(credentials, config, session=session, sleep=sleep)
    processor = ContentProcessor(keywords, config)
    pipeline = ContentPipeline(gateway, processor, regions, keywords, config)
    repository = repository if repository is not None else build_repository(config)
    builder = structured_data if structured_data is not None else load_builder(config.SCHEMA_BUILDER)
    orchestrator = PublishOrchestrator(
        pipeline,
        repository,
        processor,
        regions,
        pacer=FixedIntervalPacer(config.PACING_DELAY, sleep=sleep),
        structured_data=builder,
        config=config,
    )
    LOGGER.debug("Built services with %s repository", type(repository).__name__)
    return Services(
        config=config,
        regions=regions,
        keywords=keywords,
        gateway=gateway,
        processor=processor,
        pipeline=pipeline,
        repository=repository,
        orchestrator=orchestrator,
    )


__all__ = ["Services", "build_repository", "build_services", "load_builder"]
