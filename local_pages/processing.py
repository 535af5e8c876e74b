"""Post-processing of generated page content.

``ContentProcessor.process_content`` runs a fixed sequence over the raw text:
clean, inject service links, inject the parent location link, normalise
headings, then wrap everything into editor blocks. ``extract_sections`` and
``validate_content`` work on the processed output.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from .config import PipelineConfig
from .models import ContentSections, Topic, ValidationResult
from .reference_data import KeywordCatalog

LOGGER = logging.getLogger(__name__)

META_DESCRIPTION_LIMIT = 155
META_DESCRIPTION_WORDS = 25
EXCERPT_WORDS = 30
FIRST_PARAGRAPH_MIN_CHARS = 50
MIN_WORD_COUNT = 300
MIN_PARAGRAPH_UNITS = 3

_TAG_RE = re.compile(r"<[^>]+>")
_ANCHOR_RE = re.compile(r"<a\b[^>]*>.*?</a\s*>", re.IGNORECASE | re.DOTALL)
_MARKDOWN_HEADING_RE = re.compile(r"^(#{1,3})\s+(.+?)\s*#*$")
_BARE_HEADING_RE = re.compile(r"^<h([1-6])>(.*?)</h\1>$", re.DOTALL)
_ANY_HEADING_RE = re.compile(r"<h([1-6])[^>]*>(.*?)</h\1>", re.IGNORECASE | re.DOTALL)
_WORD_RE = re.compile(r"[A-Za-z][A-Za-z'\-]*")


def slugify(value: str) -> str:
    value = value.lower().replace("'", "")
    value = re.sub(r"[^a-z0-9]+", "-", value)
    return value.strip("-")


def clean_text(text: str) -> str:
    """Strip markup and collapse whitespace."""

    text = _TAG_RE.sub("", text or "")
    return re.sub(r"\s+", " ", text).strip()


def trim_words(text: str, limit: int, more: str = "...") -> str:
    words = (text or "").split()
    if len(words) <= limit:
        return " ".join(words)
    return " ".join(words[:limit]) + more


def _protected_spans(content: str) -> List[Tuple[int, int]]:
    # Existing anchors and any tag (including block comments) must not receive links.
    spans = [match.span() for match in _ANCHOR_RE.finditer(content)]
    spans.extend(match.span() for match in _TAG_RE.finditer(content))
    return spans


def _link_first_occurrence(content: str, phrase: str, url: str) -> str:
    pattern = re.compile(r"\b" + re.escape(phrase) + r"\b", re.IGNORECASE)
    spans = _protected_spans(content)
    for match in pattern.finditer(content):
        start, end = match.span()
        if any(start < span_end and end > span_start for span_start, span_end in spans):
            continue
        link = f'<a href="{url}">{match.group(0)}</a>'
        return content[:start] + link + content[end:]
    return content


class ContentProcessor:
    """Cleans, enriches and structures generated content."""

    def __init__(self, keywords: KeywordCatalog, config: Optional[PipelineConfig] = None):
        self.keywords = keywords
        self.config = config or PipelineConfig()

    def region_slug(self, region: str) -> str:
        return f"{self.config.PAGE_PREFIX}-{slugify(region)}"

    def region_url(self, region: str) -> str:
        return f"{self.config.SITE_URL.rstrip('/')}/{self.region_slug(region)}/"

    def sub_region_url(self, region: str, sub_region: str) -> str:
        return f"{self.region_url(region)}{slugify(sub_region)}/"

    def page_slug(self, topic: Topic) -> str:
        if topic.sub_region:
            return slugify(topic.sub_region)
        return self.region_slug(topic.region)

    def page_url(self, topic: Topic) -> str:
        if topic.sub_region:
            return self.sub_region_url(topic.region, topic.sub_region)
        return self.region_url(topic.region)

    def process_content(self, content: str, topic: Optional[Topic] = None) -> str:
        """Run the full post-processing sequence over raw generated text."""

        processed = self.clean_content(content)
        processed = self.add_service_links(processed)
        processed = self.add_location_links(processed, topic)
        processed = self.format_headings(processed)
        return self.add_block_structure(processed)

    def clean_content(self, content: str) -> str:
        content = (content or "").replace("\r\n", "\n").replace("\r", "\n")
        content = re.sub(r"[ \t\f\v]+", " ", content)
        content = "\n".join(line.strip() for line in content.split("\n"))
        content = re.sub(r"\n{3,}", "\n\n", content)
        return content.strip()

    def add_service_links(self, content: str) -> str:
        for keyword, url in self.keywords.items():
            if f'<a href="{url}"' in content:
                continue
            content = _link_first_occurrence(content, keyword, url)
        return content

    def add_location_links(self, content: str, topic: Optional[Topic] = None) -> str:
        if topic is None or not topic.sub_region:
            return content
        url = self.region_url(topic.region)
        if url in content:
            return content
        return _link_first_occurrence(content, topic.region, url)

    def format_headings(self, content: str) -> str:
        lines: List[str] = []
        previous = ""
        for line in content.split("\n"):
            match = _MARKDOWN_HEADING_RE.match(line)
            if match:
                level = len(match.group(1))
                line = f"<h{level}>{match.group(2)}</h{level}>"
            if _BARE_HEADING_RE.match(line) and not previous.startswith("<!-- wp:heading"):
                lines.extend(["", line, ""])
            else:
                lines.append(line)
            previous = line
        content = "\n".join(lines)
        content = re.sub(r"\n{3,}", "\n\n", content)
        return content.strip()

    def add_block_structure(self, content: str) -> str:
        blocks: List[str] = []
        for unit in re.split(r"\n\s*\n", content):
            unit = unit.strip()
            if not unit:
                continue
            heading = _BARE_HEADING_RE.match(unit)
            if heading:
                level, text = heading.group(1), heading.group(2)
                blocks.append(f'<!-- wp:heading {{"level":{level}}} -->')
                blocks.append(f"<h{level}>{text}</h{level}>")
                blocks.append("<!-- /wp:heading -->")
            elif unit.startswith("<!--"):
                blocks.append(unit)
            elif re.match(r"^<(ul|ol)\b", unit, re.IGNORECASE):
                blocks.append("<!-- wp:list -->")
                blocks.append(unit)
                blocks.append("<!-- /wp:list -->")
            elif re.match(r"^<p\b.*</p>$", unit, re.IGNORECASE | re.DOTALL):
                blocks.append("<!-- wp:paragraph -->")
                blocks.append(unit)
                blocks.append("<!-- /wp:paragraph -->")
            else:
                blocks.append("<!-- wp:paragraph -->")
                blocks.append(f"<p>{unit}</p>")
                blocks.append("<!-- /wp:paragraph -->")
            blocks.append("")
        return "\n".join(blocks)

    def fallback_title(self, topic: Optional[Topic]) -> str:
        if topic is None:
            return "WordPress Development Services"
        return f"WordPress Development Services in {topic.label}"

    def extract_title(self, content: str) -> str:
        for line in content.split("\n"):
            line = line.strip()
            markdown = re.match(r"^#+\s+(.+)$", line)
            if markdown:
                return clean_text(markdown.group(1))
            html = _ANY_HEADING_RE.search(line)
            if html and clean_text(html.group(2)):
                return clean_text(html.group(2))
        return ""

    def first_paragraph(self, content: str) -> str:
        for line in content.split("\n"):
            line = line.strip()
            if not line or line.startswith("#") or _ANY_HEADING_RE.search(line):
                continue
            if len(clean_text(line)) > FIRST_PARAGRAPH_MIN_CHARS:
                return line
        return ""

    def create_meta_description(self, text: str) -> str:
        description = trim_words(clean_text(text), META_DESCRIPTION_WORDS)
        if len(description) > META_DESCRIPTION_LIMIT:
            description = description[: META_DESCRIPTION_LIMIT - 3].rstrip() + "..."
        return description

    def extract_sections(self, content: str, topic: Optional[Topic] = None) -> ContentSections:
        """Pull title, meta description, excerpt and body out of processed content."""

        title = self.extract_title(content) or self.fallback_title(topic)
        paragraph = self.first_paragraph(content)
        meta_description = self.create_meta_description(paragraph) if paragraph else ""
        excerpt = trim_words(clean_text(paragraph), EXCERPT_WORDS) if paragraph else ""
        return ContentSections(
            title=title,
            meta_description=meta_description,
            excerpt=excerpt,
            body=content,
        )

    def validate_content(self, content: str) -> ValidationResult:
        issues: List[str] = []

        word_count = len(_WORD_RE.findall(clean_text(content)))
        if word_count < MIN_WORD_COUNT:
            issues.append(f"Content too short: {word_count} words (minimum {MIN_WORD_COUNT})")

        if not re.search(r"<h[1-6][\s>]|^#+", content, re.MULTILINE):
            issues.append("No headings found in content")

        paragraph_units = len(re.findall(r"<p[\s>]", content)) + content.count("\n\n")
        if paragraph_units < MIN_PARAGRAPH_UNITS:
            issues.append("Content lacks proper paragraph structure")

        return ValidationResult(passes=not issues, issues=issues, word_count=word_count)


__all__ = ["ContentProcessor", "clean_text", "slugify", "trim_words"]
