"""Prompt templates for region and sub-region pages."""

from __future__ import annotations

from typing import Iterable, Sequence

BRAND = "84EM"
HEADQUARTERS = "Cedar Rapids, Iowa"

REGION_WORD_RANGE = (300, 400)
SUB_REGION_WORD_RANGE = (200, 300)
PROMPT_SUB_REGION_LIMIT = 6

CTA_BLOCK = """<!-- wp:group {{"className":"get-started-local","style":{{"spacing":{{"margin":{{"top":"0"}},"padding":{{"bottom":"var:preset|spacing|40","top":"var:preset|spacing|40","right":"0"}}}}}},"layout":{{"type":"constrained","contentSize":"1280px"}}}} -->
<div class="wp-block-group get-started-local" style="margin-top:0;padding-top:var(--wp--preset--spacing--40);padding-right:0;padding-bottom:var(--wp--preset--spacing--40)"><!-- wp:buttons {{"className":"animated bounceIn","layout":{{"type":"flex","justifyContent":"center"}}}} -->
<div class="wp-block-buttons animated bounceIn"><!-- wp:button {{"style":{{"border":{{"radius":{{"topLeft":"0px","topRight":"30px","bottomLeft":"30px","bottomRight":"0px"}}}},"shadow":"var:preset|shadow|crisp"}},"fontSize":"large"}} -->
<div class="wp-block-button"><a class="wp-block-button__link has-large-font-size has-custom-font-size wp-element-button" href="{contact}" style="border-top-left-radius:0px;border-top-right-radius:30px;border-bottom-left-radius:30px;border-bottom-right-radius:0px;box-shadow:var(--wp--preset--shadow--crisp)">Start Your WordPress Project</a></div>
<!-- /wp:button --></div>
<!-- /wp:buttons --></div>
<!-- /wp:group -->"""

_REMOTE_ONLY = (
    f"{BRAND} is a 100% FULLY REMOTE WordPress development company. Do NOT mention on-site visits, "
    "in-person consultations, local offices, or physical presence. All work is done remotely. "
    f"But DO mention that {BRAND} is headquartered in {HEADQUARTERS}. "
    'No need to specifically use the phrase "remote-first".'
)

_FORMAT_RULES = """CRITICAL: Format the content using WordPress block editor syntax (Gutenberg blocks). Use the following format:
- Paragraphs: <!-- wp:paragraph --><p>Your paragraph text here.</p><!-- /wp:paragraph -->
- Headings: <!-- wp:heading {{"level":2}} --><h2><strong>Your Heading</strong></h2><!-- /wp:heading -->
- Lists: <!-- wp:list --><ul><li>Item text here</li><li>Item text here</li></ul><!-- /wp:list -->
- Call-to-action links: <a href="{contact}">contact us today</a> or <a href="{contact}">get started</a>

IMPORTANT:
- All headings (h2, h3) must be wrapped in <strong> tags to ensure they appear bold.
- Include 2-3 call-to-action links throughout the content that link to {contact} using phrases like "contact us today", "get started", "reach out", "discuss your project", etc.
- Make the call-to-action links natural and contextual within PARAGRAPH content (not within list items).
- Insert this exact CTA block BEFORE every H2 heading:

{cta}

Do NOT use markdown syntax or plain HTML. Use proper WordPress block markup for all content."""

_LIST_EXAMPLE = """<!-- wp:list -->
<ul>
<li>Service name with brief 5-8 word benefit-focused description</li>
<li>Service name with brief 5-8 word benefit-focused description</li>
</ul>
<!-- /wp:list -->"""

_REGION_TEMPLATE = """Write a concise, SEO-optimized landing page for {brand}'s WordPress development services specifically for businesses in {region}.

IMPORTANT: Create unique, original content that is different from other state pages. Focus on local relevance through city mentions and state-specific benefits.

{remote_only}

CONTENT STRUCTURE (REQUIRED):

**Opening Section (1-2 short paragraphs)**
- Professional introduction mentioning {region} and ALL of these cities: {sub_regions} (you MUST mention all of them naturally)
- Brief overview of {brand}'s WordPress expertise
- Keep paragraphs to 2-3 sentences maximum
- Include ONE contextual call-to-action link in the opening

**Core Services Section (H2: "WordPress Development Services in {region}")**
Present services in an UNORDERED LIST using WordPress block syntax:
{list_example}

Include these services from the list: {services}
Select 8-10 most relevant services and present as list items. Keep descriptions concise and focused on business benefits, NOT keyword-stuffed.

**Why Choose {brand} Section (H2: "Why {region} Businesses Choose {brand}")**
Present 4-5 key benefits as an UNORDERED LIST.

**Closing Paragraph**
- 2-3 sentences emphasizing local relevance across {region} and {brand}'s headquarters in {headquarters}
- Strong call-to-action with contact link
- Mention several cities from the list: {sub_regions}

IMPORTANT GRAMMAR RULES:
- Use proper prepositions (in, for, near) when mentioning locations
- Never use city/state names as adjectives directly before service terms (avoid "{region} solutions")
- Correct: "businesses in {region}", "services for {region} companies", "development in {region}"

TARGET METRICS:
- Total word count: {min_words}-{max_words} words
- Opening: 1-2 paragraphs (2-3 sentences each)
- Services: 8-10 list items with brief descriptions
- Benefits: 4-5 list items
- Closing: 1 paragraph (2-3 sentences)
- Call-to-action links: 2-3 total (contextual, not in lists)

TONE: Professional and factual. Avoid hyperbole and superlatives. Focus on concrete services, technical expertise, and actual capabilities. Make it locally relevant through geographic references.

{format_rules}"""

_SUB_REGION_TEMPLATE = """Write a concise, SEO-optimized landing page for {brand}'s WordPress development services specifically for businesses in {sub_region}, {region}.

IMPORTANT: Create unique, original content that is different from other city pages. Focus on local relevance through city-specific benefits and geographic context.

{remote_only}

CONTENT STRUCTURE (REQUIRED):

**Opening Section**
- Professional introduction mentioning {sub_region}, {region} and local business context
- Brief overview of {brand}'s WordPress expertise
- Include ONE contextual call-to-action link in the opening

**Core Services Section (H2: "WordPress Development Services in {sub_region}")**
Present services in an UNORDERED LIST using WordPress block syntax:
{list_example}

Include these services from the list: {services}
Select 6-8 most relevant services and present as list items. Keep descriptions concise and focused on business benefits, NOT keyword-stuffed.

**Why Choose {brand} Section (H2: "Why {sub_region} Businesses Choose {brand}")**
Present 3-4 key benefits as an UNORDERED LIST.

**Closing Section**
- 2 sentences, each on their own line, emphasizing local relevance and {brand}'s headquarters in {headquarters}
- Strong call-to-action with contact link
- Mention web development in {region}

IMPORTANT GRAMMAR RULES:
- Use proper prepositions (in, for, near) when mentioning locations
- Never use city/state names as adjectives directly before service terms (avoid "{sub_region} solutions")
- Correct: "businesses in {sub_region}", "services for {sub_region} companies", "development in {sub_region}"

TARGET METRICS:
- Total word count: {min_words}-{max_words} words
- Services: 6-8 list items with brief descriptions
- Benefits: 3-4 list items
- Closing: 2 sentences, each on their own line
- Call-to-action links: 2-3 total (contextual, not in lists)

TONE: Professional and factual. Avoid hyperbole and superlatives. Focus on concrete services, technical expertise, and actual capabilities. Make it locally relevant through geographic references.

{format_rules}"""


def cta_block(contact_url: str) -> str:
    return CTA_BLOCK.format(contact=contact_url)


def _format_rules(contact_url: str) -> str:
    return _FORMAT_RULES.format(contact=contact_url, cta=cta_block(contact_url))


def region_prompt(region: str, sub_regions: Sequence[str], keywords: Iterable[str], contact_url: str) -> str:
    """Render the prompt for a region-level page."""

    min_words, max_words = REGION_WORD_RANGE
    return _REGION_TEMPLATE.format(
        brand=BRAND,
        headquarters=HEADQUARTERS,
        region=region,
        sub_regions=", ".join(list(sub_regions)[:PROMPT_SUB_REGION_LIMIT]),
        services=", ".join(keywords),
        remote_only=_REMOTE_ONLY,
        list_example=_LIST_EXAMPLE,
        min_words=min_words,
        max_words=max_words,
        format_rules=_format_rules(contact_url),
    )


def sub_region_prompt(region: str, sub_region: str, keywords: Iterable[str], contact_url: str) -> str:
    """Render the prompt for a sub-region page."""

    min_words, max_words = SUB_REGION_WORD_RANGE
    return _SUB_REGION_TEMPLATE.format(
        brand=BRAND,
        headquarters=HEADQUARTERS,
        region=region,
        sub_region=sub_region,
        services=", ".join(keywords),
        remote_only=_REMOTE_ONLY,
        list_example=_LIST_EXAMPLE,
        min_words=min_words,
        max_words=max_words,
        format_rules=_format_rules(contact_url),
    )


__all__ = ["BRAND", "CTA_BLOCK", "cta_block", "region_prompt", "sub_region_prompt"]
