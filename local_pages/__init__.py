"""Local landing page generation and publishing."""

from .config import PipelineConfig, load_config
from .orchestrator import PublishOrchestrator
from .services import build_services

__all__ = ["PipelineConfig", "PublishOrchestrator", "build_services", "load_config"]
