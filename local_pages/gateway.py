"""Client for the upstream text-generation service.

All network interaction lives here. ``ApiGateway.send`` never raises for
upstream problems: it returns either :class:`GatewayText` or a terminal
:class:`GatewayFailure` once the retry budget is spent or a non-retryable
error is seen. Callers above this layer do not retry.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

import requests

from .config import PipelineConfig
from .models import FailureKind, GatewayFailure, GatewayResult, GatewayText

LOGGER = logging.getLogger(__name__)

RETRYABLE_ERROR_FRAGMENTS = (
    "timeout",
    "timed out",
    "connection reset",
    "connection refused",
    "could not resolve host",
    "name or service not known",
    "temporary failure",
    "network unreachable",
    "network is unreachable",
)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504, 507, 509, 529})

STATUS_HINTS = {
    400: "Bad request - check the prompt size and request parameters",
    401: "Authentication failed - check that the API key is valid",
    403: "Permission denied - the API key cannot use this model or endpoint",
    404: "Not found - check the API endpoint and model identifier",
    413: "Request too large - shorten the prompt",
    422: "Unprocessable request - the request body was rejected",
}

PROBE_PROMPT = 'Reply with just the word "OK" if you receive this message.'
PROBE_TOKEN = "OK"


def is_retryable_error(message: str) -> bool:
    """Return True when a low-level network error message looks transient."""

    lowered = (message or "").lower()
    return any(fragment in lowered for fragment in RETRYABLE_ERROR_FRAGMENTS)


def is_retryable_status(status: int) -> bool:
    return status in RETRYABLE_STATUS_CODES


def describe_status(status: int) -> Optional[str]:
    return STATUS_HINTS.get(status)


def backoff_delay(failures: int, initial: float = 1.0, maximum: float = 60.0) -> float:
    """Delay to wait after the ``failures``-th consecutive retryable failure (1-based)."""

    return min(maximum, initial * (2 ** max(0, failures - 1)))


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        seconds = float(str(value).strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def _token_count(value: Any) -> int:
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0


def usage_stats(payload: Optional[Dict[str, Any]]) -> Dict[str, int]:
    """Token usage reported by a response body, zeros when absent."""

    usage = (payload or {}).get("usage")
    if not isinstance(usage, dict):
        usage = {}
    input_tokens = _token_count(usage.get("input_tokens"))
    output_tokens = _token_count(usage.get("output_tokens"))
    return {
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        "total_tokens": input_tokens + output_tokens,
    }


def _error_message(response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        error = payload["error"]
        kind = error.get("type")
        message = error.get("message") or ""
        return f"{kind}: {message}" if kind else message
    text = getattr(response, "text", "") or ""
    return text[:500]


class ApiGateway:
    """Sends prompts to the messages endpoint with bounded retry and backoff."""

    def __init__(
        self,
        credentials,
        config: Optional[PipelineConfig] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.credentials = credentials
        self.config = config or PipelineConfig()
        self.session = session or requests.Session()
        self._sleep = sleep
        self.last_usage: Dict[str, int] = usage_stats(None)

    def is_configured(self) -> bool:
        return bool(self.credentials is not None and self.credentials.has_key())

    @property
    def model(self) -> str:
        override = self.credentials.get_model() if self.credentials is not None else None
        return override or self.config.MODEL

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": api_key,
            "anthropic-version": self.config.API_VERSION,
        }

    def _body(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "max_tokens": self.config.MAX_TOKENS,
            "messages": [{"role": "user", "content": prompt}],
        }

    def _attempt(self, api_key: str, prompt: str, retry_count: int):
        """Issue one request; return (result, retry_after)."""

        try:
            response = self.session.post(
                self.config.API_URL,
                headers=self._headers(api_key),
                json=self._body(prompt),
                timeout=self.config.REQUEST_TIMEOUT,
            )
        except requests.exceptions.RequestException as exc:
            message = str(exc) or type(exc).__name__
            return (
                GatewayFailure(
                    kind=FailureKind.NETWORK_ERROR,
                    message=message,
                    retry_count=retry_count,
                    retryable=is_retryable_error(message),
                ),
                None,
            )

        status = response.status_code
        if status == 200:
            try:
                payload = response.json()
                text = payload["content"][0]["text"]
            except (ValueError, KeyError, IndexError, TypeError):
                payload, text = None, None
            if not isinstance(text, str):
                return (
                    GatewayFailure(
                        kind=FailureKind.MALFORMED_RESPONSE,
                        message="Unexpected API response format: missing content[0].text",
                        retry_count=retry_count,
                        status=status,
                    ),
                    None,
                )
            self.last_usage = usage_stats(payload)
            return GatewayText(text=text, attempts=retry_count + 1, usage=dict(self.last_usage)), None

        retry_after = None
        if status == 429:
            retry_after = parse_retry_after(response.headers.get("retry-after"))
        return (
            GatewayFailure(
                kind=FailureKind.HTTP_ERROR,
                message=_error_message(response),
                retry_count=retry_count,
                status=status,
                hint=describe_status(status),
                retryable=is_retryable_status(status),
            ),
            retry_after,
        )

    def send(self, prompt: str) -> GatewayResult:
        """Send ``prompt`` and return the generated text or the last failure."""

        if not self.is_configured():
            LOGGER.error("API client is not properly configured")
            return GatewayFailure(kind=FailureKind.NOT_CONFIGURED, message="API key not configured")
        api_key = self.credentials.get_key()
        if not api_key:
            LOGGER.error("Failed to retrieve API key")
            return GatewayFailure(kind=FailureKind.NOT_CONFIGURED, message="API key unavailable")

        max_attempts = max(1, int(self.config.MAX_ATTEMPTS))
        wait = self.config.INITIAL_RETRY_DELAY
        last_failure: Optional[GatewayFailure] = None

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                LOGGER.info("Retrying in %.1fs (attempt %d/%d)", wait, attempt, max_attempts)
                self._sleep(wait)

            result, retry_after = self._attempt(api_key, prompt, retry_count=attempt - 1)
            if result.ok:
                if attempt > 1:
                    LOGGER.info("Request succeeded on attempt %d/%d", attempt, max_attempts)
                return result

            last_failure = result
            if not result.retryable:
                LOGGER.error("API request failed without retry: %s", result.describe())
                return result

            LOGGER.warning("Retryable API failure on attempt %d/%d: %s", attempt, max_attempts, result.describe())
            wait = backoff_delay(attempt, self.config.INITIAL_RETRY_DELAY, self.config.MAX_RETRY_DELAY)
            if retry_after is not None:
                wait = min(self.config.MAX_RETRY_DELAY, retry_after)

        LOGGER.error("API request failed after %d attempts: %s", max_attempts, last_failure.describe())
        return last_failure

    def validate_credentials(self) -> bool:
        """Send one short live request and look for the acknowledgment token."""

        if not self.is_configured():
            return False
        result = self.send(PROBE_PROMPT)
        return bool(result.ok and PROBE_TOKEN in result.text.upper())


__all__ = [
    "ApiGateway",
    "RETRYABLE_STATUS_CODES",
    "backoff_delay",
    "describe_status",
    "is_retryable_error",
    "is_retryable_status",
    "parse_retry_after",
    "usage_stats",
]
