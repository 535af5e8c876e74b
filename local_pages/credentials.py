"""Credential sources for the text-generation service."""

from __future__ import annotations

import logging
import os
import re
from typing import Optional

LOGGER = logging.getLogger(__name__)

API_KEY_ENV = "ANTHROPIC_API_KEY"
MODEL_ENV = "LOCAL_PAGES_MODEL"

_KEY_FORMAT = re.compile(r"^sk-ant-api03-[\w\-]{93}$")


def validate_key_format(key: str) -> bool:
    """Return True when ``key`` looks like an ``sk-ant-api03-`` key."""

    return bool(_KEY_FORMAT.match(key or ""))


class StaticCredentialSource:
    """Credential source holding a fixed key, mostly for tests and scripts."""

    def __init__(self, api_key: Optional[str], model: Optional[str] = None):
        self._api_key = api_key or None
        self._model = model or None

    def get_key(self) -> Optional[str]:
        return self._api_key

    def get_model(self) -> Optional[str]:
        return self._model

    def has_key(self) -> bool:
        return bool(self._api_key)


class EnvCredentialSource(StaticCredentialSource):
    """Reads the key and an optional model override from the environment on demand."""

    def __init__(self, key_env: str = API_KEY_ENV, model_env: str = MODEL_ENV):
        super().__init__(None)
        self.key_env = key_env
        self.model_env = model_env

    def get_key(self) -> Optional[str]:
        value = os.getenv(self.key_env, "").strip()
        return value or None

    def get_model(self) -> Optional[str]:
        value = os.getenv(self.model_env, "").strip()
        return value or None

    def has_key(self) -> bool:
        key = self.get_key()
        if key and not validate_key_format(key):
            LOGGER.debug("%s does not match the expected key format", self.key_env)
        return bool(key)


__all__ = ["EnvCredentialSource", "StaticCredentialSource", "validate_key_format"]
