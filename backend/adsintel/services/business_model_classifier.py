"""Business model classification for extracted website content.

Pure function of WebsiteContent: no I/O, no randomness, never raises.
Produces:
1. Business model type + confidence (weighted keyword rules, fixed order)
2. Up to 5 value propositions ranked by strength
3. Audience signals (job titles, pain points, goals, behaviors, interests)
4. Up to 5 content themes ranked by relevance
5. Overall confidence that rises with content richness

Rule tables live in adsintel.utils.classification_rules.
"""

import re
import time
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any

from adsintel.core.logging import get_logger
from adsintel.services.content_extraction import WebsiteContent
from adsintel.utils.classification_rules import (
    BEHAVIOR_RULES,
    BUSINESS_MODEL_RULES,
    CONTENT_THEME_RULES,
    DEFAULT_BUSINESS_MODEL,
    DEFAULT_VALUE_CATEGORY,
    GENDER_RULES,
    GOAL_MARKERS,
    INTEREST_RULES,
    JOB_TITLE_RULES,
    MIN_THEME_TOKEN_LENGTH,
    PAIN_POINT_MARKERS,
    SCORE_SCALE,
    VALUE_CATEGORY_RULES,
    CategoryRule,
)

logger = get_logger(__name__)

SLOW_OPERATION_THRESHOLD_MS = 1000

MAX_VALUE_PROPOSITIONS = 5
MAX_CONTENT_THEMES = 5
MAX_SIGNALS = 5
MAX_SNIPPET_LENGTH = 100
MIN_DESCRIPTION_LENGTH = 20

TOKEN_PATTERN = re.compile(r"[a-z0-9][a-z0-9'\-]*[a-z0-9]|[a-z0-9]")
SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")

DEFAULT_DESCRIPTIONS = {rule.business_type: rule.description for rule in BUSINESS_MODEL_RULES}


@dataclass
class BusinessModelClassification:
    type: str
    description: str
    confidence: float
    matched_keywords: list[str] = field(default_factory=list)


@dataclass
class ValueProposition:
    text: str
    category: str
    strength: float


@dataclass
class AudienceInsights:
    """Detected audience signals. None means "not detected"."""

    demographics: dict[str, list[str]] | None = None
    pain_points: list[str] | None = None
    goals: list[str] | None = None
    behaviors: list[str] | None = None
    interests: list[str] | None = None

    @property
    def job_titles(self) -> list[str]:
        if not self.demographics:
            return []
        return list(self.demographics.get("job_titles", []))

    def detected_signal_count(self) -> int:
        """Number of the four core signal kinds that were detected."""
        return sum(
            1
            for value in (self.job_titles, self.pain_points, self.goals, self.behaviors)
            if value
        )


@dataclass
class ContentTheme:
    theme: str
    keywords: list[str]
    relevance_score: float
    frequency: int


@dataclass
class ClassificationResult:
    business_model: BusinessModelClassification
    value_propositions: list[ValueProposition]
    audience_signals: AudienceInsights
    content_themes: list[ContentTheme]
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Business model
# ---------------------------------------------------------------------------


def detect_business_model(text: str) -> BusinessModelClassification:
    """Score text against BUSINESS_MODEL_RULES in order.

    Only a strictly higher score replaces the leader, so ties resolve to the
    earlier rule.
    """
    best_type = DEFAULT_BUSINESS_MODEL
    best_score = 0.0
    best_hits: list[str] = []

    for rule in BUSINESS_MODEL_RULES:
        score, hits = rule.score(text)
        if score > best_score:
            best_type, best_score, best_hits = rule.business_type, score, hits

    return BusinessModelClassification(
        type=best_type,
        description=DEFAULT_DESCRIPTIONS[best_type],
        confidence=round(min(best_score / SCORE_SCALE, 1.0), 3),
        matched_keywords=best_hits,
    )


# ---------------------------------------------------------------------------
# Value propositions
# ---------------------------------------------------------------------------


def categorize_value_proposition(text: str) -> str:
    for rule in VALUE_CATEGORY_RULES:
        if rule.matches(text):
            return rule.label
    return DEFAULT_VALUE_CATEGORY


def _position_strength(position: int) -> float:
    return round(max(0.5, 1.0 - 0.1 * position), 3)


def extract_value_propositions(content: WebsiteContent) -> list[ValueProposition]:
    """Headings first (strength decays with position), then the description."""
    candidates: list[str] = []
    seen: set[str] = set()
    for heading in content.headings:
        text = heading.strip()
        if not text or text.lower() in seen:
            continue
        seen.add(text.lower())
        candidates.append(text)
        if len(candidates) >= MAX_VALUE_PROPOSITIONS:
            break

    description = (content.description or "").strip()
    if len(description) > MIN_DESCRIPTION_LENGTH and description.lower() not in seen:
        candidates.append(description)

    propositions = [
        ValueProposition(
            text=text,
            category=categorize_value_proposition(text),
            strength=_position_strength(position),
        )
        for position, text in enumerate(candidates)
    ]
    propositions.sort(key=lambda vp: vp.strength, reverse=True)
    return propositions[:MAX_VALUE_PROPOSITIONS]


# ---------------------------------------------------------------------------
# Audience signals
# ---------------------------------------------------------------------------


def _labels(rules: list[CategoryRule], text: str, limit: int) -> list[str] | None:
    labels = [rule.label for rule in rules if rule.matches(text)]
    return labels[:limit] or None


def _snippets(
    texts: list[str], markers: list[re.Pattern[str]], limit: int
) -> list[str] | None:
    found: list[str] = []
    seen: set[str] = set()
    for text in texts:
        for sentence in SENTENCE_SPLIT.split(text):
            sentence = sentence.strip()
            if not sentence or not any(m.search(sentence) for m in markers):
                continue
            snippet = sentence[:MAX_SNIPPET_LENGTH]
            if snippet.lower() in seen:
                continue
            seen.add(snippet.lower())
            found.append(snippet)
            if len(found) >= limit:
                return found
    return found or None


def identify_audience_signals(content: WebsiteContent) -> AudienceInsights:
    text = content.all_text()
    body = [*content.headings, *content.paragraphs, *content.list_items]

    demographics: dict[str, list[str]] = {}
    job_titles = _labels(JOB_TITLE_RULES, text, MAX_SIGNALS)
    if job_titles:
        demographics["job_titles"] = job_titles
    genders = _labels(GENDER_RULES, text, len(GENDER_RULES))
    if genders:
        demographics["genders"] = genders

    return AudienceInsights(
        demographics=demographics or None,
        pain_points=_snippets(body, PAIN_POINT_MARKERS, MAX_SIGNALS),
        goals=_snippets(body, GOAL_MARKERS, MAX_SIGNALS),
        behaviors=_labels(BEHAVIOR_RULES, text, MAX_SIGNALS),
        interests=_labels(INTEREST_RULES, text, MAX_SIGNALS),
    )


# ---------------------------------------------------------------------------
# Content themes
# ---------------------------------------------------------------------------


def _theme_tokens(content: WebsiteContent) -> list[str]:
    text = " ".join([*content.headings, *content.paragraphs]).lower()
    return [t for t in TOKEN_PATTERN.findall(text) if len(t) > MIN_THEME_TOKEN_LENGTH]


def extract_content_themes(content: WebsiteContent) -> list[ContentTheme]:
    """Group frequent tokens into named themes, ranked by relevance."""
    tokens = _theme_tokens(content)
    if not tokens:
        return []

    counts = Counter(tokens)
    total = len(tokens)
    themes: list[ContentTheme] = []

    for rule in CONTENT_THEME_RULES:
        matched: Counter[str] = Counter()
        for token, count in counts.items():
            if token in rule.keywords:
                matched[token] += count
            elif token.endswith("s") and token[:-1] in rule.keywords:
                matched[token[:-1]] += count
        frequency = sum(matched.values())
        if frequency == 0:
            continue
        themes.append(
            ContentTheme(
                theme=rule.theme,
                keywords=[kw for kw, _ in matched.most_common()],
                relevance_score=round(frequency / total, 4),
                frequency=frequency,
            )
        )

    themes.sort(key=lambda t: t.relevance_score, reverse=True)
    return themes[:MAX_CONTENT_THEMES]


# ---------------------------------------------------------------------------
# Overall confidence
# ---------------------------------------------------------------------------


def content_richness(content: WebsiteContent) -> float:
    """0..1 measure of how much copy the page carries."""
    return (
        min(len(content.headings), 5) / 5
        + min(len(content.paragraphs), 5) / 5
        + min(len(content.cta_buttons), 3) / 3
    ) / 3


def overall_confidence(
    business_model: BusinessModelClassification,
    value_propositions: list[ValueProposition],
    audience: AudienceInsights,
    content: WebsiteContent,
) -> float:
    avg_strength = (
        sum(vp.strength for vp in value_propositions) / len(value_propositions)
        if value_propositions
        else 0.0
    )
    base = (
        business_model.confidence * 0.4
        + avg_strength * 0.3
        + (audience.detected_signal_count() / 4) * 0.3
    )
    # Sparse pages can never reach high confidence
    scaled = base * (0.5 + 0.5 * content_richness(content))
    return round(min(max(scaled, 0.0), 1.0), 3)


def classify_business_model(content: WebsiteContent) -> ClassificationResult:
    """Classify website content. Deterministic and never raises."""
    start_time = time.monotonic()
    text = " ".join(
        [
            content.title or "",
            content.description or "",
            *content.headings,
            *content.paragraphs,
            *content.cta_buttons,
            *content.navigation_links,
        ]
    ).lower()

    business_model = detect_business_model(text)
    value_propositions = extract_value_propositions(content)
    audience = identify_audience_signals(content)
    themes = extract_content_themes(content)
    confidence = overall_confidence(business_model, value_propositions, audience, content)

    duration_ms = (time.monotonic() - start_time) * 1000
    logger.debug(
        "Website content classified",
        extra={
            "target_url": content.url[:200],
            "business_model": business_model.type,
            "business_model_confidence": business_model.confidence,
            "confidence": confidence,
            "duration_ms": round(duration_ms, 2),
        },
    )
    if duration_ms > SLOW_OPERATION_THRESHOLD_MS:
        logger.warning(
            "Slow classification",
            extra={"target_url": content.url[:200], "duration_ms": round(duration_ms, 2)},
        )

    return ClassificationResult(
        business_model=business_model,
        value_propositions=value_propositions,
        audience_signals=audience,
        content_themes=themes,
        confidence=confidence,
    )
