import pytest

from conftest import SAMPLE_CONTENT
from local_pages.models import Topic
from local_pages.processing import (
    META_DESCRIPTION_LIMIT,
    ContentProcessor,
    clean_text,
    slugify,
    trim_words,
)
from local_pages.reference_data import KeywordCatalog


@pytest.mark.parametrize(
    "value,expected",
    [
        ("Los Angeles", "los-angeles"),
        ("St. Petersburg", "st-petersburg"),
        ("Coeur d'Alene", "coeur-dalene"),
        ("  New York  ", "new-york"),
    ],
)
def test_slugify(value, expected):
    assert slugify(value) == expected


def test_page_slugs_and_urls(processor):
    region = Topic("California")
    city = Topic("California", "Los Angeles")

    assert processor.page_slug(region) == "wordpress-development-services-california"
    assert processor.page_slug(city) == "los-angeles"
    assert processor.page_url(region) == "https://84em.com/wordpress-development-services-california/"
    assert processor.page_url(city) == "https://84em.com/wordpress-development-services-california/los-angeles/"


def test_clean_text_and_trim_words():
    assert clean_text("<p>Hello   <b>world</b></p>\n") == "Hello world"
    assert trim_words("one two three four", 2) == "one two..."
    assert trim_words("one two", 5) == "one two"


def test_clean_content_keeps_line_structure(processor):
    cleaned = processor.clean_content("  ## Title  \r\n\r\n\r\n\r\nSome    text\there  ")
    assert cleaned == "## Title\n\nSome text here"


def test_service_links_link_first_occurrence_only():
    processor = ContentProcessor(KeywordCatalog([("plugin development", "/plugins/")], "https://example.com"))
    content = "We do plugin development. More plugin development later."

    linked = processor.add_service_links(content)

    assert linked.count('<a href="https://example.com/plugins/">') == 1
    assert linked.startswith('We do <a href="https://example.com/plugins/">plugin development</a>.')


def test_service_links_are_idempotent(processor):
    content = "Our WordPress development team also offers API integrations."
    once = processor.add_service_links(content)
    twice = processor.add_service_links(once)

    assert once == twice
    assert once.count("<a href") == 2


def test_shared_url_is_claimed_by_first_keyword_in_declared_order():
    keywords = KeywordCatalog([("API integrations", "/services/"), ("security audits", "/services/")], "")
    processor = ContentProcessor(keywords)

    linked = processor.add_service_links("We run security audits and API integrations.")

    assert linked == 'We run security audits and <a href="/services/">API integrations</a>.'


def test_service_links_do_not_nest_inside_existing_anchors():
    processor = ContentProcessor(KeywordCatalog([("web development", "/work/")], ""))
    content = '<a href="/elsewhere/">web development</a> and web development again'

    linked = processor.add_service_links(content)

    assert "<a href=\"/elsewhere/\">web development</a>" in linked
    assert linked.endswith('and <a href="/work/">web development</a> again')


def test_location_link_only_for_sub_region_topics(processor):
    content = "Companies in Texas and across Texas trust us."

    assert processor.add_location_links(content, Topic("Texas")) == content

    linked = processor.add_location_links(content, Topic("Texas", "Austin"))
    url = "https://84em.com/wordpress-development-services-texas/"
    assert linked.count(url) == 1
    assert linked.startswith(f'Companies in <a href="{url}">Texas</a>')
    assert processor.add_location_links(linked, Topic("Texas", "Austin")) == linked


def test_format_headings_converts_markdown(processor):
    formatted = processor.format_headings("# Top\nintro\n### Small")
    assert formatted == "<h1>Top</h1>\n\nintro\n\n<h3>Small</h3>"


def test_block_structure_wraps_units(processor):
    content = "<h2>Services</h2>\n\nPlain paragraph\n\n<ul><li>One</li></ul>\n\n<p>Already wrapped</p>"

    blocks = processor.add_block_structure(content)

    assert '<!-- wp:heading {"level":2} -->\n<h2>Services</h2>\n<!-- /wp:heading -->' in blocks
    assert "<!-- wp:paragraph -->\n<p>Plain paragraph</p>\n<!-- /wp:paragraph -->" in blocks
    assert "<!-- wp:list -->\n<ul><li>One</li></ul>\n<!-- /wp:list -->" in blocks
    assert "<!-- wp:paragraph -->\n<p>Already wrapped</p>\n<!-- /wp:paragraph -->" in blocks


def test_existing_block_markup_passes_through(processor):
    content = '<!-- wp:paragraph -->\n<p>Kept as is</p>\n<!-- /wp:paragraph -->'
    assert processor.add_block_structure(content).strip() == content


def test_block_units_are_not_wrapped_twice(processor):
    content = "<!-- wp:paragraph --><p>x</p><!-- /wp:paragraph -->\n\n<ul><li>a</li></ul>"

    blocks = processor.add_block_structure(content)

    assert "<!-- wp:paragraph --><p>x</p><!-- /wp:paragraph -->" in blocks
    assert blocks.count("<!-- wp:paragraph -->") == 1
    assert "<!-- wp:list -->\n<ul><li>a</li></ul>\n<!-- /wp:list -->" in blocks
    assert "<p><ul>" not in blocks


def test_process_content_runs_every_step(processor):
    raw = "## Local Help in Austin\n\nTeams across Texas rely on our WordPress development work."

    processed = processor.process_content(raw, Topic("Texas", "Austin"))

    assert '<!-- wp:heading {"level":2} -->' in processed
    assert '<a href="https://84em.com/wordpress-development-services-texas/">Texas</a>' in processed
    assert '<a href="https://84em.com/work/">WordPress development</a>' in processed
    assert "<h2>Local Help in Austin</h2>" in processed


def test_extract_sections(processor):
    paragraph = "Austin businesses get reliable WordPress engineering, custom plugins and careful maintenance from a remote team. " * 3
    content = f"<h2>Austin WordPress Help</h2>\n\n<p>{paragraph}</p>"

    sections = processor.extract_sections(content, Topic("Texas", "Austin"))

    assert sections.title == "Austin WordPress Help"
    assert len(sections.meta_description) <= META_DESCRIPTION_LIMIT
    assert sections.meta_description.startswith("Austin businesses get reliable")
    assert sections.excerpt.endswith("...")
    assert len(sections.excerpt.split()) == 30
    assert sections.body == content


def test_extract_sections_falls_back_to_topic_title(processor):
    sections = processor.extract_sections("short", Topic("Texas", "Austin"))

    assert sections.title == "WordPress Development Services in Austin, Texas"
    assert sections.meta_description == ""
    assert sections.excerpt == ""


@pytest.mark.parametrize(
    "raw",
    [
        SAMPLE_CONTENT,
        "## Overview\n\n" + " ".join(["Supercalifragilisticexpialidocious"] * 20),
        "## Overview\n\n" + "x" * 400,
        "# Austin\n\n" + "Reliable WordPress development for growing teams in Austin. " * 10,
        "Too short.",
    ],
)
def test_processed_content_always_yields_body_and_bounded_meta(processor, raw):
    topic = Topic("Texas", "Austin")

    sections = processor.extract_sections(processor.process_content(raw, topic), topic)

    assert sections.body.strip()
    assert sections.title
    assert len(sections.meta_description) <= META_DESCRIPTION_LIMIT


def test_validate_content_reports_issues(processor):
    result = processor.validate_content("Just a few words")

    assert not result.passes
    assert result.word_count == 4
    assert "Content too short: 4 words (minimum 300)" in result.issues
    assert "No headings found in content" in result.issues
    assert "Content lacks proper paragraph structure" in result.issues


def test_validate_content_accepts_complete_page(processor):
    result = processor.validate_content(processor.process_content(SAMPLE_CONTENT, Topic("Texas")))

    assert result.passes, result.issues
    assert result.word_count >= 300
