import pytest

from local_pages.config import PipelineConfig
from local_pages.credentials import StaticCredentialSource
from local_pages.gateway import ApiGateway
from local_pages.generator import ContentPipeline
from local_pages.orchestrator import PublishOrchestrator
from local_pages.pacing import FixedIntervalPacer
from local_pages.processing import ContentProcessor
from local_pages.reference_data import default_keywords, default_regions
from local_pages.repository import InMemoryRepository


class FakeResponse:
    def __init__(self, status_code=200, payload=None, headers=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class FakeSession:
    """Replays queued responses (or raises queued exceptions) and records every call."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def _next(self, call):
        self.calls.append(call)
        if not self.responses:
            raise AssertionError("Unexpected request: no response queued")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url, **kwargs):
        return self._next(("POST", url, kwargs))

    def request(self, method, url, **kwargs):
        return self._next((method, url, kwargs))


class SleepRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


def text_response(text):
    return FakeResponse(200, {"content": [{"type": "text", "text": text}], "usage": {"input_tokens": 12, "output_tokens": 34}})


SAMPLE_CONTENT = "\n\n".join(
    [
        "## WordPress Development in Texas",
        "Businesses across Texas rely on WordPress development for fast, secure and maintainable websites "
        "that grow with them. " * 8,
        "## Services",
        "We handle custom plugin development, API integrations and security audits for teams of every size. " * 8,
        "## Why Work With Us",
        "Our remote team delivers White label development and maintenance and support with clear communication. " * 8,
    ]
)


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def config():
    return PipelineConfig(REPOSITORY_BACKEND="memory")


@pytest.fixture
def regions():
    return default_regions()


@pytest.fixture
def keywords(config):
    return default_keywords(config.SITE_URL)


@pytest.fixture
def processor(keywords, config):
    return ContentProcessor(keywords, config)


def make_gateway(responses, config=None, sleep=None, api_key="test-key"):
    session = FakeSession(responses)
    gateway = ApiGateway(
        StaticCredentialSource(api_key),
        config or PipelineConfig(),
        session=session,
        sleep=sleep or SleepRecorder(),
    )
    return gateway, session


@pytest.fixture
def build_orchestrator(config, regions, keywords, processor, sleeper):
    """Factory wiring a full orchestrator over fake HTTP and an in-memory repository."""

    def _build(responses, repository=None, structured_data=None, enforce_quality=False):
        config.ENFORCE_QUALITY = enforce_quality
        gateway, session = make_gateway(responses, config=config)
        pipeline = ContentPipeline(gateway, processor, regions, keywords, config)
        repository = repository if repository is not None else InMemoryRepository()
        orchestrator = PublishOrchestrator(
            pipeline,
            repository,
            processor,
            regions,
            pacer=FixedIntervalPacer(config.PACING_DELAY, sleep=sleeper),
            structured_data=structured_data,
            config=config,
        )
        return orchestrator, session

    return _build

