"""Confidence to funnel-stage mapping.

This is the only place a confidence score becomes an actionable label.
Targeting items never store a stage directly; they derive it from here.

    confidence >= 0.85         -> BOF / scale
    0.70 <= confidence < 0.85  -> MOF / test
    confidence < 0.70          -> TOF / avoid
"""

from dataclasses import dataclass
from enum import Enum


class FunnelStage(str, Enum):
    TOF = "TOF"
    MOF = "MOF"
    BOF = "BOF"


class Recommendation(str, Enum):
    SCALE = "scale"
    TEST = "test"
    AVOID = "avoid"


BOF_THRESHOLD = 0.85
MOF_THRESHOLD = 0.70


@dataclass(frozen=True)
class FunnelAssessment:
    stage: FunnelStage
    recommendation: Recommendation


_BOF = FunnelAssessment(FunnelStage.BOF, Recommendation.SCALE)
_MOF = FunnelAssessment(FunnelStage.MOF, Recommendation.TEST)
_TOF = FunnelAssessment(FunnelStage.TOF, Recommendation.AVOID)


def assess_confidence(confidence: float) -> FunnelAssessment:
    """Map a [0, 1] confidence onto a funnel stage and recommendation."""
    if confidence >= BOF_THRESHOLD:
        return _BOF
    if confidence >= MOF_THRESHOLD:
        return _MOF
    return _TOF


_WHY_TEMPLATES: dict[FunnelStage, str] = {
    FunnelStage.BOF: (
        "{subject} matches people who are already close to buying, so it is "
        "the strongest candidate for conversion campaigns."
    ),
    FunnelStage.MOF: (
        "{subject} reaches people who are comparing options; prove it with "
        "consideration-stage creative before adding budget."
    ),
    FunnelStage.TOF: (
        "{subject} is a broad awareness signal with weak evidence of purchase "
        "intent; keep it out of conversion budgets."
    ),
}


def why_this_converts(confidence: float, subject: str) -> str:
    """Explain what a targeting item is good for at its funnel stage."""
    stage = assess_confidence(confidence).stage
    return _WHY_TEMPLATES[stage].format(subject=subject or "This segment")
