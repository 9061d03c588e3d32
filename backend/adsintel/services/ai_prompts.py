"""Prompt templates for AI reasoning.

Every prompt asks for a single JSON object. The expected shapes mirror
the schemas in adsintel.schemas.ai_responses; fields the model leaves
out get defaults there, so prompts describe the ideal shape rather than
a strict contract.
"""

import json
from typing import Any

from adsintel.services.content_extraction import WebsiteContent

# Content excerpts sent to the model are bounded so a large page cannot
# blow the token budget
MAX_HEADINGS = 20
MAX_PARAGRAPHS = 15
MAX_LIST_ITEMS = 20
MAX_CTAS = 10
MAX_PARAGRAPH_CHARS = 400


# =============================================================================
# SYSTEM PROMPTS
# =============================================================================

ANALYST_SYSTEM_PROMPT = """You are a senior performance-marketing strategist. You analyze business websites and recommend paid-advertising audiences for Meta (Facebook/Instagram) and Google Ads.

Rules:
- Base every conclusion on the website content you are given
- Give every recommendation a confidence between 0.0 and 1.0
- Use 0.85 or higher only for audiences with clear purchase intent
- Explain your reasoning in one or two sentences
- Respond with a single JSON object only (no markdown, no commentary)"""


# =============================================================================
# BUSINESS MODEL
# =============================================================================

BUSINESS_MODEL_PROMPT_TEMPLATE = """Classify the business model of this website.

Choose the closest type from: {business_model_types}

Website content:
{content}

Return JSON:
{{
  "type": "one of the types above",
  "description": "one sentence describing how the business makes money",
  "revenue_model": "subscription | one-time purchase | commission | fees | advertising | donations | other",
  "target_market": "B2B | B2C | both",
  "confidence": 0.0,
  "reasoning": "why this type fits"
}}"""


# =============================================================================
# AUDIENCE INSIGHTS
# =============================================================================

AUDIENCE_INSIGHTS_PROMPT_TEMPLATE = """Describe the ideal customer for this {business_model} website.

Website content:
{content}

Return JSON:
{{
  "demographics": {{
    "age_ranges": ["25-34", "35-44"],
    "genders": ["all"],
    "locations": ["United States"],
    "job_titles": ["Marketing Manager"],
    "income_level": "middle | upper-middle | high"
  }},
  "psychographics": {{
    "interests": ["..."],
    "values": ["..."],
    "lifestyle": "short description"
  }},
  "pain_points": ["..."],
  "goals": ["..."],
  "behaviors": ["..."],
  "confidence": 0.0,
  "reasoning": "what in the content supports this profile"
}}"""


# =============================================================================
# META TARGETING
# =============================================================================

META_TARGETING_PROMPT_TEMPLATE = """Create Meta Ads targeting for this website.

Website content:
{content}

Audience insights:
{insights}

Use interests and behaviors that exist in Meta's detailed targeting.

Return JSON:
{{
  "demographics": {{
    "age_ranges": ["25-54"],
    "genders": ["all"],
    "locations": ["United States"]
  }},
  "interests": [
    {{"category": "...", "specific_interests": ["...", "..."], "confidence": 0.0, "reasoning": "..."}}
  ],
  "behaviors": [
    {{"behavior": "...", "confidence": 0.0, "reasoning": "..."}}
  ],
  "custom_audiences": [
    {{"type": "website_visitors | engagement | customer_list", "description": "...", "reasoning": "..."}}
  ],
  "lookalike_suggestions": [
    {{"source": "...", "percentage": 1, "reasoning": "..."}}
  ],
  "confidence_score": 0.0,
  "overall_reasoning": "..."
}}

Include at least 3 interest groups and 2 behaviors."""

KEYWORD_META_TARGETING_PROMPT_TEMPLATE = """Create Meta Ads targeting for people searching for or interested in these keywords:
{keywords}

Website content (for context on the offer):
{content}

Audience insights:
{insights}

Every interest group must relate to at least one of the keywords above.

Return JSON:
{{
  "demographics": {{
    "age_ranges": ["25-54"],
    "genders": ["all"],
    "locations": ["United States"]
  }},
  "interests": [
    {{"category": "...", "specific_interests": ["...", "..."], "confidence": 0.0, "reasoning": "which keyword this serves and why"}}
  ],
  "behaviors": [
    {{"behavior": "...", "confidence": 0.0, "reasoning": "..."}}
  ],
  "custom_audiences": [],
  "lookalike_suggestions": [],
  "confidence_score": 0.0,
  "overall_reasoning": "..."
}}

Include at least 3 interest groups and 2 behaviors."""


# =============================================================================
# GOOGLE TARGETING
# =============================================================================

GOOGLE_TARGETING_PROMPT_TEMPLATE = """Create a Google Ads targeting plan for this website.

Website content:
{content}

Audience insights:
{insights}

Group keywords by search intent. Prefer commercial and transactional intent.

Return JSON:
{{
  "keyword_clusters": [
    {{
      "intent": "...",
      "keywords": [
        {{"keyword": "...", "match_type": "exact | phrase | broad", "estimated_volume": "high | medium | low"}}
      ],
      "competition": "high | medium | low",
      "confidence": 0.0,
      "reasoning": "..."
    }}
  ],
  "audiences": [
    {{"type": "in_market | affinity | custom_intent | remarketing", "name": "...", "description": "...", "reasoning": "..."}}
  ],
  "demographics": {{
    "age_ranges": ["25-54"],
    "genders": ["all"],
    "locations": ["United States"]
  }},
  "placements": [
    {{"type": "website | youtube | app", "examples": ["..."], "reasoning": "..."}}
  ],
  "negative_keywords": ["..."],
  "confidence_score": 0.0,
  "overall_reasoning": "..."
}}

Include at least 3 keyword clusters and 2 audiences."""

KEYWORD_GOOGLE_TARGETING_PROMPT_TEMPLATE = """Create a Google Ads targeting plan built around these seed keywords:
{keywords}

Website content (for context on the offer):
{content}

Audience insights:
{insights}

Expand each seed keyword into a cluster of close variants grouped by intent.

Return JSON:
{{
  "keyword_clusters": [
    {{
      "intent": "...",
      "keywords": [
        {{"keyword": "...", "match_type": "exact | phrase | broad", "estimated_volume": "high | medium | low"}}
      ],
      "competition": "high | medium | low",
      "confidence": 0.0,
      "reasoning": "which seed keyword this cluster expands"
    }}
  ],
  "audiences": [
    {{"type": "in_market | affinity | custom_intent | remarketing", "name": "...", "description": "...", "reasoning": "..."}}
  ],
  "demographics": {{
    "age_ranges": ["25-54"],
    "genders": ["all"],
    "locations": ["United States"]
  }},
  "placements": [],
  "negative_keywords": ["..."],
  "confidence_score": 0.0,
  "overall_reasoning": "..."
}}"""


# =============================================================================
# PROMPT HELPERS
# =============================================================================


def format_content(content: WebsiteContent) -> str:
    """Render website content as a bounded plain-text excerpt."""
    lines = [f"URL: {content.url}"]
    if content.title:
        lines.append(f"Title: {content.title}")
    if content.description:
        lines.append(f"Description: {content.description}")
    if content.headings:
        lines.append("Headings:")
        lines.extend(f"- {h}" for h in content.headings[:MAX_HEADINGS])
    if content.paragraphs:
        lines.append("Body copy:")
        lines.extend(
            f"- {p[:MAX_PARAGRAPH_CHARS]}" for p in content.paragraphs[:MAX_PARAGRAPHS]
        )
    if content.list_items:
        lines.append("List items:")
        lines.extend(f"- {item}" for item in content.list_items[:MAX_LIST_ITEMS])
    if content.cta_buttons:
        lines.append("Calls to action: " + ", ".join(content.cta_buttons[:MAX_CTAS]))
    return "\n".join(lines)


def format_insights(insights: dict[str, Any] | None) -> str:
    if not insights:
        return "(none available)"
    return json.dumps(insights, indent=2, default=str)


def format_keywords(keywords: list[str]) -> str:
    return "\n".join(f"- {kw}" for kw in keywords)
