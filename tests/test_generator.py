import pytest

from conftest import SAMPLE_CONTENT, FakeResponse, make_gateway, text_response
from local_pages.config import PipelineConfig
from local_pages.generator import ContentGenerationError, ContentPipeline, UnknownTopicError
from local_pages.models import FailureKind, Topic
from local_pages.processing import META_DESCRIPTION_LIMIT
from local_pages.prompts import CTA_BLOCK, PROMPT_SUB_REGION_LIMIT


def _pipeline(responses, processor, regions, keywords, config=None):
    config = config or PipelineConfig()
    gateway, session = make_gateway(responses, config=config)
    return ContentPipeline(gateway, processor, regions, keywords, config), session


@pytest.mark.parametrize(
    "topic,expected",
    [
        (Topic("California"), True),
        (Topic("California", "Los Angeles"), True),
        (Topic("California", "Austin"), False),
        (Topic("Atlantis"), False),
        (Topic(""), False),
    ],
)
def test_validate(topic, expected, processor, regions, keywords):
    pipeline, _ = _pipeline([], processor, regions, keywords)
    assert pipeline.validate(topic) is expected


def test_unknown_sub_region_never_reaches_the_gateway(processor, regions, keywords):
    pipeline, session = _pipeline([text_response(SAMPLE_CONTENT)], processor, regions, keywords)

    with pytest.raises(UnknownTopicError):
        pipeline.generate(Topic("California", "Austin"))

    result = pipeline.run(Topic("California", "Austin"))
    assert not result.ok
    assert session.calls == []


def test_region_prompt_lists_first_sub_regions(processor, regions, keywords):
    pipeline, _ = _pipeline([], processor, regions, keywords)

    prompt = pipeline.build_prompt(Topic("California"))

    for city in regions.sub_regions("California")[:PROMPT_SUB_REGION_LIMIT]:
        assert city in prompt
    assert "300-400 words" in prompt
    assert "/contact/" in prompt
    assert "API integrations" in prompt
    assert "Do NOT mention on-site visits" in prompt


def test_sub_region_prompt_names_both_levels(processor, regions, keywords):
    pipeline, _ = _pipeline([], processor, regions, keywords)

    prompt = pipeline.build_prompt(Topic("Texas", "Austin"))

    assert "Austin, Texas" in prompt
    assert "200-300 words" in prompt
    assert CTA_BLOCK.format(contact="/contact/").splitlines()[0] in prompt


def test_generate_returns_processed_content(processor, regions, keywords):
    pipeline, session = _pipeline([text_response(SAMPLE_CONTENT)], processor, regions, keywords)

    content = pipeline.generate(Topic("Texas"))

    assert "<!-- wp:heading" in content
    assert "<!-- wp:paragraph -->" in content
    assert len(session.calls) == 1


def test_generate_raises_with_gateway_failure(processor, regions, keywords):
    pipeline, _ = _pipeline([FakeResponse(401, text="nope")], processor, regions, keywords)

    with pytest.raises(ContentGenerationError) as excinfo:
        pipeline.generate(Topic("Texas"))

    assert excinfo.value.failure.kind is FailureKind.HTTP_ERROR
    assert "Failed to generate content from API" in str(excinfo.value)


def test_empty_text_is_a_generation_failure(processor, regions, keywords):
    pipeline, _ = _pipeline([text_response("   ")], processor, regions, keywords)

    result = pipeline.run(Topic("Texas"))

    assert not result.ok
    assert "empty response" in result.error


def test_run_extracts_sections(processor, regions, keywords):
    pipeline, _ = _pipeline([text_response(SAMPLE_CONTENT)], processor, regions, keywords)

    result = pipeline.run(Topic("Texas"))

    assert result.ok
    assert result.sections.title == "WordPress Development in Texas"
    assert 0 < len(result.sections.meta_description) <= META_DESCRIPTION_LIMIT
    assert result.sections.body.strip()
    assert result.validation.passes


def test_quality_issues_warn_by_default(processor, regions, keywords, caplog):
    pipeline, _ = _pipeline([text_response("## Short\n\nToo short.")], processor, regions, keywords)

    with caplog.at_level("WARNING"):
        result = pipeline.run(Topic("Texas"))

    assert result.ok
    assert not result.validation.passes
    assert "Content quality issues for Texas" in caplog.text


def test_quality_issues_fail_when_enforced(processor, regions, keywords):
    config = PipelineConfig(ENFORCE_QUALITY=True)
    pipeline, _ = _pipeline([text_response("## Short\n\nToo short.")], processor, regions, keywords, config)

    result = pipeline.run(Topic("Texas"))

    assert not result.ok
    assert result.error.startswith("Content quality check failed")
    assert result.sections is not None
