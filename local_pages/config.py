"""Configuration utilities for the local pages generator."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

LOGGER = logging.getLogger(__name__)

REPOSITORY_BACKENDS = ("json", "memory", "wordpress")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationError(RuntimeError):
    """Raised when a required setting or credential is missing."""


def _strtobool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    value = value.strip().lower()
    if value in {"1", "true", "yes", "y", "on"}:
        return True
    if value in {"0", "false", "no", "n", "off"}:
        return False
    LOGGER.warning("Unrecognised boolean value '%s', falling back to default %s", value, default)
    return default


def _parse_number(value: Optional[str], default: float, cast=float):
    if value is None or not value.strip():
        return default
    try:
        return cast(value.strip())
    except ValueError:
        LOGGER.warning("Unrecognised numeric value '%s', falling back to default %s", value, default)
        return default


@dataclass
class PipelineConfig:
    """Holds runtime settings for the gateway, pipeline and publisher."""

    API_URL: str = "https://api.anthropic.com/v1/messages"
    API_VERSION: str = "2023-06-01"
    MODEL: str = "claude-sonnet-4-20250514"
    MAX_TOKENS: int = 4000
    REQUEST_TIMEOUT: float = 600.0
    MAX_ATTEMPTS: int = 5
    INITIAL_RETRY_DELAY: float = 1.0
    MAX_RETRY_DELAY: float = 60.0
    PACING_DELAY: float = 2.0
    SITE_URL: str = "https://84em.com"
    CONTACT_PATH: str = "/contact/"
    PAGE_PREFIX: str = "wordpress-development-services"
    ENFORCE_QUALITY: bool = False
    REPOSITORY_BACKEND: str = "json"
    REPOSITORY_PATH: str = "env/local_pages.json"
    WP_URL: Optional[str] = None
    WP_USERNAME: Optional[str] = None
    WP_APP_PASSWORD: Optional[str] = None
    WP_POST_TYPE: str = "local"
    SCHEMA_BUILDER: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    def snapshot(self) -> dict:
        """Return a serialisable snapshot of the current settings, secrets excluded."""

        return {
            "API_URL": self.API_URL,
            "API_VERSION": self.API_VERSION,
            "MODEL": self.MODEL,
            "MAX_TOKENS": self.MAX_TOKENS,
            "REQUEST_TIMEOUT": self.REQUEST_TIMEOUT,
            "MAX_ATTEMPTS": self.MAX_ATTEMPTS,
            "INITIAL_RETRY_DELAY": self.INITIAL_RETRY_DELAY,
            "MAX_RETRY_DELAY": self.MAX_RETRY_DELAY,
            "PACING_DELAY": self.PACING_DELAY,
            "SITE_URL": self.SITE_URL,
            "CONTACT_PATH": self.CONTACT_PATH,
            "PAGE_PREFIX": self.PAGE_PREFIX,
            "ENFORCE_QUALITY": self.ENFORCE_QUALITY,
            "REPOSITORY_BACKEND": self.REPOSITORY_BACKEND,
            "REPOSITORY_PATH": self.REPOSITORY_PATH,
            "WP_URL": self.WP_URL,
            "WP_USERNAME": self.WP_USERNAME,
            "WP_POST_TYPE": self.WP_POST_TYPE,
            "SCHEMA_BUILDER": self.SCHEMA_BUILDER,
            "LOG_LEVEL": self.LOG_LEVEL,
        }


def load_config(overrides: Optional[dict] = None) -> PipelineConfig:
    """Load configuration from environment variables with optional overrides."""

    defaults = PipelineConfig()
    config = PipelineConfig(
        API_URL=os.getenv("LOCAL_PAGES_API_URL", defaults.API_URL),
        API_VERSION=os.getenv("LOCAL_PAGES_API_VERSION", defaults.API_VERSION),
        MODEL=os.getenv("LOCAL_PAGES_MODEL", defaults.MODEL),
        MAX_TOKENS=_parse_number(os.getenv("LOCAL_PAGES_MAX_TOKENS"), defaults.MAX_TOKENS, int),
        REQUEST_TIMEOUT=_parse_number(os.getenv("LOCAL_PAGES_REQUEST_TIMEOUT"), defaults.REQUEST_TIMEOUT),
        MAX_ATTEMPTS=_parse_number(os.getenv("LOCAL_PAGES_MAX_ATTEMPTS"), defaults.MAX_ATTEMPTS, int),
        INITIAL_RETRY_DELAY=_parse_number(
            os.getenv("LOCAL_PAGES_INITIAL_RETRY_DELAY"), defaults.INITIAL_RETRY_DELAY
        ),
        MAX_RETRY_DELAY=_parse_number(os.getenv("LOCAL_PAGES_MAX_RETRY_DELAY"), defaults.MAX_RETRY_DELAY),
        PACING_DELAY=_parse_number(os.getenv("LOCAL_PAGES_PACING_DELAY"), defaults.PACING_DELAY),
        SITE_URL=os.getenv("LOCAL_PAGES_SITE_URL", defaults.SITE_URL),
        CONTACT_PATH=os.getenv("LOCAL_PAGES_CONTACT_PATH", defaults.CONTACT_PATH),
        PAGE_PREFIX=os.getenv("LOCAL_PAGES_PAGE_PREFIX", defaults.PAGE_PREFIX),
        ENFORCE_QUALITY=_strtobool(os.getenv("LOCAL_PAGES_ENFORCE_QUALITY"), False),
        REPOSITORY_BACKEND=os.getenv("LOCAL_PAGES_REPOSITORY", defaults.REPOSITORY_BACKEND).strip().lower(),
        REPOSITORY_PATH=os.getenv("LOCAL_PAGES_REPOSITORY_PATH", defaults.REPOSITORY_PATH),
        WP_URL=os.getenv("WP_URL"),
        WP_USERNAME=os.getenv("WP_USERNAME"),
        WP_APP_PASSWORD=os.getenv("WP_APP_PASSWORD"),
        WP_POST_TYPE=os.getenv("WP_POST_TYPE", defaults.WP_POST_TYPE),
        SCHEMA_BUILDER=os.getenv("LOCAL_PAGES_SCHEMA_BUILDER") or None,
        LOG_LEVEL=os.getenv("LOCAL_PAGES_LOG_LEVEL", defaults.LOG_LEVEL).upper(),
    )

    if overrides:
        for key, value in overrides.items():
            if hasattr(config, key):
                setattr(config, key, value)
            else:
                raise AttributeError(f"Unknown config option: {key}")

    if config.REPOSITORY_BACKEND not in REPOSITORY_BACKENDS:
        raise ConfigurationError(
            f"Unknown repository backend '{config.REPOSITORY_BACKEND}', expected one of {', '.join(REPOSITORY_BACKENDS)}"
        )

    if config.LOG_LEVEL not in LOG_LEVELS:
        raise ConfigurationError(f"Unknown log level '{config.LOG_LEVEL}', expected one of {', '.join(LOG_LEVELS)}")

    LOGGER.debug("Loaded pipeline config: %s", config.snapshot())
    return config


__all__ = ["ConfigurationError", "LOG_LEVELS", "PipelineConfig", "load_config"]
