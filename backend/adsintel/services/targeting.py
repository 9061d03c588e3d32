"""TargetingService for Meta and Google Ads targeting recommendations.

Turns a persisted WebsiteAnalysis into confidence-scored, funnel-staged
targeting data and stores it as a new TargetingRecommendation row.

Per generation call:
1. Load the website analysis for the session (missing => NoAnalysisFoundError)
2. AI path, when configured: audience insights, then platform targeting
   (keyword-focused when the caller passes keywords)
3. Any AI failure falls back to rule-based vocabularies; the fallback
   itself never fails for a present analysis
4. Funnel stage/recommendation are derived from each item's confidence
   by the targeting schemas (adsintel.utils.funnel)
5. Persist one new row per call

ERROR LOGGING REQUIREMENTS:
- Log method entry/exit at DEBUG level with parameters (sanitized)
- Log AI-path failures at WARNING level before falling back
- Log all exceptions with full stack trace and context
- Include entity IDs (session_id) in all service logs
- Add timing logs for operations >1 second
"""

import re
import time
from collections import Counter
from dataclasses import dataclass, field
from statistics import mean
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from adsintel.core.logging import ai_logger, get_logger
from adsintel.models.targeting_recommendation import Platform, TargetingRecommendation
from adsintel.models.website_analysis import WebsiteAnalysis
from adsintel.repositories.analysis_session import AnalysisSessionRepository
from adsintel.repositories.targeting_recommendation import (
    TargetingRecommendationRepository,
)
from adsintel.repositories.website_analysis import WebsiteAnalysisRepository
from adsintel.schemas.ai_responses import (
    AIAudienceInsights,
    AIGoogleTargeting,
    AIMetaTargeting,
)
from adsintel.schemas.targeting import (
    BehaviorTarget,
    ConfidenceScore,
    CustomAudience,
    DemographicsTarget,
    GoogleAudienceTarget,
    GoogleTargetingData,
    InterestTarget,
    KeywordClusterTarget,
    LocationTarget,
    LookalikeAudience,
    MetaTargetingData,
    PlacementTarget,
    RecommendationExplanation,
)
from adsintel.services.ai_reasoning import AIReasoningEngine
from adsintel.services.content_extraction import WebsiteContent
from adsintel.utils.targeting_vocabulary import (
    ALL_VISITORS_AUDIENCE,
    CUSTOMER_LIST_AUDIENCE,
    CUSTOMER_LIST_BUSINESS_MODELS,
    GENERIC,
    KEYWORD_FOCUS_BASE_CONFIDENCE,
    LOOKALIKE_SOURCE,
    LOOKALIKE_TIERS,
    META_CUSTOM_AUDIENCES,
    AudienceRule,
    derive_demographics,
    scored_confidence,
    vocabulary_for,
)

logger = get_logger(__name__)

SLOW_OPERATION_THRESHOLD_MS = 1000

MIN_META_INTERESTS = 2
MIN_META_BEHAVIORS = 2
MIN_GOOGLE_CLUSTERS = 1
MAX_CALLER_KEYWORDS = 20

# Used when the AI omits both item and overall confidence
DEFAULT_AI_CONFIDENCE = 0.8

# Demographics confidence with and without a matched cue
CUED_DEMOGRAPHICS_CONFIDENCE = 0.8
DEFAULT_DEMOGRAPHICS_CONFIDENCE = 0.6

DEMOGRAPHICS_WEIGHT = 0.3
PRIMARY_WEIGHT = 0.4
SECONDARY_WEIGHT = 0.3

VOLUME_ESTIMATES = {"high": 10000, "medium": 1000, "low": 100}

AGE_NUMBER = re.compile(r"\d+")
MIN_AD_AGE = 18
MAX_AD_AGE = 65


class TargetingServiceError(Exception):
    """Base exception for TargetingService errors."""

    pass


class NoAnalysisFoundError(TargetingServiceError):
    """Raised when a session has no website analysis to target from."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"No analysis found for session {session_id}")


@dataclass
class TargetingContext:
    """Everything generation needs from the persisted analysis."""

    session_id: str
    analysis: WebsiteAnalysis
    content: WebsiteContent
    business_model: str | None
    text: str
    target_location: str | None
    insights: dict[str, Any] = field(default_factory=dict)


@dataclass
class GeneratedTargeting:
    targeting: MetaTargetingData | GoogleTargetingData
    confidence_scores: list[ConfidenceScore]
    explanations: list[RecommendationExplanation]


def fallback_text(technical_metadata: dict[str, Any] | None) -> str:
    """Lowercased headings, paragraphs, list items and CTAs."""
    metadata = technical_metadata or {}
    parts: list[str] = []
    for key in ("headings", "paragraphs", "list_items", "cta_buttons"):
        values = metadata.get(key) or []
        parts.extend(str(v) for v in values if v)
    return " ".join(parts).lower()


def clean_keywords(keywords: list[str] | None) -> list[str]:
    """Strip, drop blanks and case-insensitive duplicates, keep order."""
    cleaned: list[str] = []
    seen: set[str] = set()
    for keyword in keywords or []:
        value = " ".join(str(keyword).split())
        if value and value.lower() not in seen:
            seen.add(value.lower())
            cleaned.append(value)
    return cleaned[:MAX_CALLER_KEYWORDS]


def parse_age_ranges(age_ranges: list[str]) -> tuple[int, int] | None:
    """Collapse AI age ranges like ["25-34", "65+"] into (min, max)."""
    numbers: list[int] = []
    for age_range in age_ranges:
        numbers.extend(int(n) for n in AGE_NUMBER.findall(age_range))
        if "+" in age_range:
            numbers.append(MAX_AD_AGE)
    if not numbers:
        return None
    age_min = max(MIN_AD_AGE, min(min(numbers), MAX_AD_AGE))
    age_max = max(age_min, min(max(numbers), MAX_AD_AGE))
    return age_min, age_max


def normalize_genders(genders: list[str]) -> list[str]:
    found: set[str] = set()
    for gender in genders:
        value = gender.strip().lower()
        if value in ("male", "men", "man"):
            found.add("male")
        elif value in ("female", "women", "woman"):
            found.add("female")
        else:
            return ["all"]
    if len(found) != 1:
        return ["all"]
    return sorted(found)


def _round(value: float) -> float:
    return round(value, 2)


def _average(values: list[float]) -> float:
    return mean(values) if values else 0.0


def _ai_confidence(value: float | None, fallback: float) -> float:
    return _round(value if value is not None else fallback)


class TargetingService:
    """Generate and persist ad targeting for an analysis session."""

    def __init__(
        self,
        session: AsyncSession,
        ai_engine: AIReasoningEngine | None = None,
    ) -> None:
        self.session = session
        self.ai_engine = ai_engine or AIReasoningEngine()
        self.analyses = WebsiteAnalysisRepository(session)
        self.sessions = AnalysisSessionRepository(session)
        self.recommendations = TargetingRecommendationRepository(session)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def generate_meta_targeting(
        self,
        session_id: str,
        website_data: WebsiteAnalysis | None = None,
        keywords: list[str] | None = None,
    ) -> TargetingRecommendation:
        """Generate and persist Meta Ads targeting for a session.

        Raises:
            NoAnalysisFoundError: If the session has no website analysis
        """
        return await self._generate(Platform.META, session_id, website_data, keywords)

    async def generate_google_targeting(
        self,
        session_id: str,
        website_data: WebsiteAnalysis | None = None,
        keywords: list[str] | None = None,
    ) -> TargetingRecommendation:
        """Generate and persist Google Ads targeting for a session.

        Raises:
            NoAnalysisFoundError: If the session has no website analysis
        """
        return await self._generate(Platform.GOOGLE, session_id, website_data, keywords)

    async def _generate(
        self,
        platform: Platform,
        session_id: str,
        website_data: WebsiteAnalysis | None,
        keywords: list[str] | None,
    ) -> TargetingRecommendation:
        start_time = time.monotonic()
        keywords = clean_keywords(keywords)
        logger.debug(
            "Generating targeting",
            extra={
                "session_id": session_id,
                "platform": platform.value,
                "keyword_count": len(keywords),
            },
        )

        context = await self._load_context(session_id, website_data)

        generated = await self._generate_with_ai(platform, context, keywords)
        if generated is None:
            if platform is Platform.META:
                generated = self.build_meta_fallback(context, keywords)
            else:
                generated = self.build_google_fallback(context, keywords)

        recommendation = await self.recommendations.create(
            session_id=session_id,
            platform=platform,
            targeting_data=generated.targeting.model_dump(mode="json"),
            confidence_scores=[s.model_dump(mode="json") for s in generated.confidence_scores],
            explanations=[e.model_dump(mode="json") for e in generated.explanations],
        )

        duration_ms = (time.monotonic() - start_time) * 1000
        logger.info(
            "Targeting generated",
            extra={
                "session_id": session_id,
                "recommendation_id": recommendation.id,
                "platform": platform.value,
                "source": generated.targeting.source,
                "duration_ms": round(duration_ms, 2),
            },
        )
        if duration_ms > SLOW_OPERATION_THRESHOLD_MS:
            logger.warning(
                "Slow targeting generation",
                extra={
                    "session_id": session_id,
                    "platform": platform.value,
                    "duration_ms": round(duration_ms, 2),
                },
            )
        return recommendation

    # -------------------------------------------------------------------------
    # Context
    # -------------------------------------------------------------------------

    async def _load_context(
        self, session_id: str, website_data: WebsiteAnalysis | None
    ) -> TargetingContext:
        analysis = website_data
        if analysis is None or analysis.session_id != session_id:
            analysis = await self.analyses.get_latest_by_session(session_id)
        if analysis is None:
            logger.warning(
                "No website analysis for targeting",
                extra={"session_id": session_id},
            )
            raise NoAnalysisFoundError(session_id)

        analysis_session = await self.sessions.get_by_id(session_id)
        target_location = analysis_session.target_location if analysis_session else None

        metadata = dict(analysis.technical_metadata or {})
        content = WebsiteContent.from_dict({**metadata, "url": analysis.url})

        return TargetingContext(
            session_id=session_id,
            analysis=analysis,
            content=content,
            business_model=analysis.business_model,
            text=fallback_text(metadata),
            target_location=target_location,
            insights={
                "business_model": analysis.business_model,
                "value_propositions": analysis.value_propositions or [],
                "target_audience": analysis.target_audience or {},
                "content_themes": analysis.content_themes or [],
            },
        )

    # -------------------------------------------------------------------------
    # AI path
    # -------------------------------------------------------------------------

    async def _generate_with_ai(
        self,
        platform: Platform,
        context: TargetingContext,
        keywords: list[str],
    ) -> GeneratedTargeting | None:
        """Run the AI path. Returns None when the fallback should be used."""
        operation = f"generate_{platform.value}_targeting"

        if not self.ai_engine.is_configured():
            ai_logger.graceful_fallback(operation, "AI reasoning not configured", context.session_id)
            return None

        try:
            insights_response = await self.ai_engine.analyze_audience_insights(
                context.content, context.business_model
            )
            if not insights_response.success:
                ai_logger.graceful_fallback(
                    operation,
                    f"Audience insights failed: {insights_response.error}",
                    context.session_id,
                )
                return None

            insights = dict(context.insights)
            if isinstance(insights_response.data, AIAudienceInsights):
                insights["ai_audience_insights"] = insights_response.data.model_dump()

            if platform is Platform.META:
                response = await self.ai_engine.generate_meta_targeting(
                    context.content, insights, keywords or None
                )
            else:
                response = await self.ai_engine.generate_google_targeting(
                    context.content, insights, keywords or None
                )
            if not response.success:
                ai_logger.graceful_fallback(
                    operation, f"Targeting request failed: {response.error}", context.session_id
                )
                return None

            if platform is Platform.META:
                return self.build_meta_from_ai(response.data, context)
            return self.build_google_from_ai(response.data, context)

        except Exception as e:
            logger.warning(
                "AI targeting path raised, falling back",
                extra={
                    "session_id": context.session_id,
                    "platform": platform.value,
                    "error_type": type(e).__name__,
                    "error": str(e),
                },
                exc_info=True,
            )
            ai_logger.graceful_fallback(operation, f"{type(e).__name__}: {e}", context.session_id)
            return None

    def _ai_demographics(
        self,
        age_ranges: list[str],
        genders: list[str],
        locations: list[str],
        context: TargetingContext,
    ) -> tuple[DemographicsTarget, list[str]]:
        derived, factors = derive_demographics(
            context.text, context.business_model, context.target_location
        )
        ages = parse_age_ranges(age_ranges)
        if ages is None:
            age_min, age_max = derived.age_min, derived.age_max
        else:
            age_min, age_max = ages
            factors = [*factors, f"Age range {age_min}-{age_max} suggested by AI analysis"]

        names = [name.strip() for name in locations if name and name.strip()]
        if names:
            if context.target_location and context.target_location.strip():
                target = context.target_location.strip()
                names = [target, *[n for n in names if n.lower() != target.lower()]]
            location_targets = [LocationTarget(type="country", name=n) for n in names]
        else:
            location_targets = derived.locations

        demographics = DemographicsTarget(
            age_min=age_min,
            age_max=age_max,
            genders=normalize_genders(genders),
            locations=location_targets,
            languages=list(derived.languages),
        )
        return demographics, factors

    def build_meta_from_ai(
        self, data: AIMetaTargeting, context: TargetingContext
    ) -> GeneratedTargeting:
        """Map a validated AI Meta response onto MetaTargetingData."""
        fallback_confidence = (
            data.confidence_score if data.confidence_score is not None else DEFAULT_AI_CONFIDENCE
        )
        demographics, demo_factors = self._ai_demographics(
            data.demographics.age_ranges,
            data.demographics.genders,
            data.demographics.locations,
            context,
        )

        interests = [
            InterestTarget(
                category=item.category,
                interests=item.specific_interests or [item.category],
                confidence=_ai_confidence(item.confidence, fallback_confidence),
                reasoning=item.reasoning,
            )
            for item in data.interests
        ]
        behaviors = [
            BehaviorTarget(
                behavior=item.behavior,
                confidence=_ai_confidence(item.confidence, fallback_confidence),
                reasoning=item.reasoning,
            )
            for item in data.behaviors
        ]
        if not interests:
            raise ValueError("AI response contained no interests")

        custom_audiences = [
            CustomAudience(
                type=item.type,
                name=item.type.replace("_", " ").title(),
                description=item.description or item.reasoning,
            )
            for item in data.custom_audiences
        ] or self._default_custom_audiences(context.business_model)

        lookalikes = [
            LookalikeAudience(
                source=item.source,
                percentage=item.percentage,
                description=item.reasoning,
            )
            for item in data.lookalike_suggestions
        ] or self._default_lookalikes()

        targeting = MetaTargetingData(
            demographics=demographics,
            interests=interests,
            behaviors=behaviors,
            custom_audiences=custom_audiences,
            lookalike_audiences=lookalikes,
            source="ai",
        )
        return GeneratedTargeting(
            targeting=targeting,
            confidence_scores=self.meta_confidence_scores(targeting, demo_factors),
            explanations=self.meta_explanations(targeting),
        )

    def build_google_from_ai(
        self, data: AIGoogleTargeting, context: TargetingContext
    ) -> GeneratedTargeting:
        """Map a validated AI Google response onto GoogleTargetingData."""
        fallback_confidence = (
            data.confidence_score if data.confidence_score is not None else DEFAULT_AI_CONFIDENCE
        )
        demographics, demo_factors = self._ai_demographics(
            data.demographics.age_ranges,
            data.demographics.genders,
            data.demographics.locations,
            context,
        )

        clusters: list[KeywordClusterTarget] = []
        for cluster in data.keyword_clusters:
            if not cluster.keywords:
                continue
            match_types = Counter(k.match_type.lower() for k in cluster.keywords)
            clusters.append(
                KeywordClusterTarget(
                    intent=cluster.intent,
                    keywords=[k.keyword for k in cluster.keywords],
                    search_volume=sum(
                        VOLUME_ESTIMATES.get(k.estimated_volume.lower(), VOLUME_ESTIMATES["medium"])
                        for k in cluster.keywords
                    ),
                    competition_level=(cluster.competition or "medium").lower(),
                    match_type=match_types.most_common(1)[0][0],
                    confidence=_ai_confidence(cluster.confidence, fallback_confidence),
                    reasoning=cluster.reasoning,
                )
            )
        if not clusters:
            raise ValueError("AI response contained no usable keyword clusters")

        audiences = [
            GoogleAudienceTarget(
                type=item.type,
                name=item.name or item.type.replace("_", " ").title(),
                description=item.description or item.reasoning,
            )
            for item in data.audiences
        ] or self._vocabulary_audiences(context.business_model)

        placements = [
            PlacementTarget(type=p.type, examples=p.examples, reasoning=p.reasoning)
            for p in data.placements
        ]

        targeting = GoogleTargetingData(
            keywords=clusters,
            audiences=audiences,
            demographics=demographics,
            placements=placements,
            negative_keywords=data.negative_keywords,
            source="ai",
        )
        return GeneratedTargeting(
            targeting=targeting,
            confidence_scores=self.google_confidence_scores(targeting, demo_factors),
            explanations=self.google_explanations(targeting),
        )

    # -------------------------------------------------------------------------
    # Rule-based fallback
    # -------------------------------------------------------------------------

    def build_meta_fallback(
        self, context: TargetingContext, keywords: list[str] | None = None
    ) -> GeneratedTargeting:
        """Deterministic Meta targeting from the analysis alone."""
        vocabulary = vocabulary_for(context.business_model)
        text = context.text
        demographics, demo_factors = derive_demographics(
            text, context.business_model, context.target_location
        )

        interests: list[InterestTarget] = []
        if keywords:
            interests.append(
                InterestTarget(
                    category="Keyword focus",
                    interests=list(keywords[:10]),
                    confidence=scored_confidence(
                        KEYWORD_FOCUS_BASE_CONFIDENCE, tuple(keywords), text
                    ),
                    reasoning="People interested in the requested keywords.",
                )
            )
        interests.extend(
            InterestTarget(
                category=rule.category,
                interests=list(rule.interests),
                confidence=scored_confidence(rule.base_confidence, rule.cues, text),
                reasoning=rule.reasoning,
            )
            for rule in vocabulary.interests
        )
        behaviors = [
            BehaviorTarget(
                behavior=rule.behavior,
                confidence=scored_confidence(rule.base_confidence, rule.cues, text),
                reasoning=rule.reasoning,
            )
            for rule in vocabulary.behaviors
        ]

        interests = self._ensure_minimum_interests(interests, text)
        behaviors = self._ensure_minimum_behaviors(behaviors, text)

        targeting = MetaTargetingData(
            demographics=demographics,
            interests=interests,
            behaviors=behaviors,
            custom_audiences=self._default_custom_audiences(context.business_model),
            lookalike_audiences=self._default_lookalikes(),
            source="fallback",
        )
        return GeneratedTargeting(
            targeting=targeting,
            confidence_scores=self.meta_confidence_scores(targeting, demo_factors),
            explanations=self.meta_explanations(targeting),
        )

    def build_google_fallback(
        self, context: TargetingContext, keywords: list[str] | None = None
    ) -> GeneratedTargeting:
        """Deterministic Google targeting from the analysis alone."""
        vocabulary = vocabulary_for(context.business_model)
        text = context.text
        demographics, demo_factors = derive_demographics(
            text, context.business_model, context.target_location
        )

        clusters: list[KeywordClusterTarget] = []
        if keywords:
            clusters.append(
                KeywordClusterTarget(
                    intent="Keyword focus",
                    keywords=list(keywords),
                    search_volume=0,
                    competition_level="medium",
                    match_type="phrase",
                    confidence=scored_confidence(
                        KEYWORD_FOCUS_BASE_CONFIDENCE, tuple(keywords), text
                    ),
                    reasoning="Seed keywords requested for this analysis.",
                )
            )
        clusters.extend(
            KeywordClusterTarget(
                intent=rule.intent,
                keywords=list(rule.keywords),
                search_volume=rule.search_volume,
                competition_level=rule.competition_level,
                match_type=rule.match_type,
                confidence=scored_confidence(rule.base_confidence, rule.cues, text),
                reasoning=rule.reasoning,
            )
            for rule in vocabulary.keyword_clusters
        )
        if len(clusters) < MIN_GOOGLE_CLUSTERS:
            clusters.extend(
                KeywordClusterTarget(
                    intent=rule.intent,
                    keywords=list(rule.keywords),
                    search_volume=rule.search_volume,
                    competition_level=rule.competition_level,
                    match_type=rule.match_type,
                    confidence=scored_confidence(rule.base_confidence, rule.cues, text),
                    reasoning=rule.reasoning,
                )
                for rule in GENERIC.keyword_clusters
            )

        lowered_keywords = {k.lower() for k in keywords or []}
        negatives = [
            negative
            for negative in vocabulary.negative_keywords
            if not any(negative in keyword for keyword in lowered_keywords)
        ]

        targeting = GoogleTargetingData(
            keywords=clusters,
            audiences=self._vocabulary_audiences(context.business_model),
            demographics=demographics,
            placements=[
                PlacementTarget(type=p.type, examples=list(p.examples), reasoning=p.reasoning)
                for p in vocabulary.placements
            ],
            negative_keywords=negatives,
            source="fallback",
        )
        return GeneratedTargeting(
            targeting=targeting,
            confidence_scores=self.google_confidence_scores(targeting, demo_factors),
            explanations=self.google_explanations(targeting),
        )

    def _ensure_minimum_interests(
        self, interests: list[InterestTarget], text: str
    ) -> list[InterestTarget]:
        present = {i.category for i in interests}
        for rule in GENERIC.interests:
            if len(interests) >= MIN_META_INTERESTS:
                break
            if rule.category in present:
                continue
            interests.append(
                InterestTarget(
                    category=rule.category,
                    interests=list(rule.interests),
                    confidence=scored_confidence(rule.base_confidence, rule.cues, text),
                    reasoning=rule.reasoning,
                )
            )
        return interests

    def _ensure_minimum_behaviors(
        self, behaviors: list[BehaviorTarget], text: str
    ) -> list[BehaviorTarget]:
        present = {b.behavior for b in behaviors}
        for rule in GENERIC.behaviors:
            if len(behaviors) >= MIN_META_BEHAVIORS:
                break
            if rule.behavior in present:
                continue
            behaviors.append(
                BehaviorTarget(
                    behavior=rule.behavior,
                    confidence=scored_confidence(rule.base_confidence, rule.cues, text),
                    reasoning=rule.reasoning,
                )
            )
        return behaviors

    def _default_custom_audiences(self, business_model: str | None) -> list[CustomAudience]:
        rules: list[AudienceRule] = list(META_CUSTOM_AUDIENCES)
        if business_model in CUSTOMER_LIST_BUSINESS_MODELS:
            rules.append(CUSTOMER_LIST_AUDIENCE)
        return [
            CustomAudience(type=r.type, name=r.name, description=r.description) for r in rules
        ]

    def _default_lookalikes(self) -> list[LookalikeAudience]:
        return [
            LookalikeAudience(source=LOOKALIKE_SOURCE, percentage=pct, description=desc)
            for pct, desc in LOOKALIKE_TIERS
        ]

    def _vocabulary_audiences(self, business_model: str | None) -> list[GoogleAudienceTarget]:
        rules = [*vocabulary_for(business_model).audiences, ALL_VISITORS_AUDIENCE]
        return [
            GoogleAudienceTarget(type=r.type, name=r.name, description=r.description)
            for r in rules
        ]

    # -------------------------------------------------------------------------
    # Scores and explanations
    # -------------------------------------------------------------------------

    def _demographics_score(
        self, demographics: DemographicsTarget, factors: list[str]
    ) -> ConfidenceScore:
        score = CUED_DEMOGRAPHICS_CONFIDENCE if factors else DEFAULT_DEMOGRAPHICS_CONFIDENCE
        details = [
            f"Age range {demographics.age_min}-{demographics.age_max}",
            "Locations: " + ", ".join(loc.name for loc in demographics.locations),
            *factors,
        ]
        return ConfidenceScore(category="Demographics", score=score, factors=details)

    def meta_confidence_scores(
        self, targeting: MetaTargetingData, demographic_factors: list[str]
    ) -> list[ConfidenceScore]:
        demographics = self._demographics_score(targeting.demographics, demographic_factors)
        interests = _average([i.confidence for i in targeting.interests])
        behaviors = _average([b.confidence for b in targeting.behaviors])
        overall = (
            demographics.score * DEMOGRAPHICS_WEIGHT
            + interests * PRIMARY_WEIGHT
            + behaviors * SECONDARY_WEIGHT
        )
        return [
            demographics,
            ConfidenceScore(
                category="Interests",
                score=_round(interests),
                factors=[f"{len(targeting.interests)} interest groups identified"],
            ),
            ConfidenceScore(
                category="Behaviors",
                score=_round(behaviors),
                factors=[f"{len(targeting.behaviors)} behaviors identified"],
            ),
            ConfidenceScore(
                category="Overall Targeting",
                score=_round(overall),
                factors=[f"Generated by {targeting.source}"],
            ),
        ]

    def google_confidence_scores(
        self, targeting: GoogleTargetingData, demographic_factors: list[str]
    ) -> list[ConfidenceScore]:
        demographics = self._demographics_score(targeting.demographics, demographic_factors)
        keywords = _average([k.confidence for k in targeting.keywords])
        audiences = min(0.9, 0.5 + 0.1 * len(targeting.audiences))
        overall = (
            demographics.score * DEMOGRAPHICS_WEIGHT
            + keywords * PRIMARY_WEIGHT
            + audiences * SECONDARY_WEIGHT
        )
        return [
            demographics,
            ConfidenceScore(
                category="Keywords",
                score=_round(keywords),
                factors=[f"{len(targeting.keywords)} keyword clusters identified"],
            ),
            ConfidenceScore(
                category="Audiences",
                score=_round(audiences),
                factors=[f"{len(targeting.audiences)} audiences recommended"],
            ),
            ConfidenceScore(
                category="Overall Targeting",
                score=_round(overall),
                factors=[f"Generated by {targeting.source}"],
            ),
        ]

    def meta_explanations(self, targeting: MetaTargetingData) -> list[RecommendationExplanation]:
        return [
            RecommendationExplanation(
                recommendation_id=f"meta-interest-{index}",
                recommendation_type="interest",
                reasoning=item.reasoning or f"Interest group {item.category}",
                supporting_data={
                    "category": item.category,
                    "interests": item.interests,
                    "confidence": item.confidence,
                    "funnel_stage": item.funnel_stage.value,
                    "recommendation": item.recommendation.value,
                    "source": targeting.source,
                },
                why_it_matters=item.why_this_converts,
            )
            for index, item in enumerate(targeting.interests)
        ]

    def google_explanations(
        self, targeting: GoogleTargetingData
    ) -> list[RecommendationExplanation]:
        return [
            RecommendationExplanation(
                recommendation_id=f"google-keyword-{index}",
                recommendation_type="keyword_cluster",
                reasoning=item.reasoning or f"Keyword cluster {item.intent}",
                supporting_data={
                    "intent": item.intent,
                    "keywords": item.keywords,
                    "confidence": item.confidence,
                    "funnel_stage": item.funnel_stage.value,
                    "recommendation": item.recommendation.value,
                    "source": targeting.source,
                },
                why_it_matters=item.why_this_converts,
            )
            for index, item in enumerate(targeting.keywords)
        ]
