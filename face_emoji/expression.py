"""
Expression categories and classification results.

The classifier only ever produces the first five categories. DISGUSTED and
FEARFUL exist because the emoji pool table carries candidates for them.
"""

from dataclasses import dataclass, field
from enum import Enum


class Expression(str, Enum):
    """Detected facial expression category."""

    HAPPY = "Happy"
    SAD = "Sad"
    SURPRISED = "Surprised"
    ANGRY = "Angry"
    NEUTRAL = "Neutral"
    DISGUSTED = "Disgusted"
    FEARFUL = "Fearful"


# Categories reachable from the landmark decision rule
CLASSIFIER_EXPRESSIONS = (
    Expression.HAPPY,
    Expression.SAD,
    Expression.SURPRISED,
    Expression.ANGRY,
    Expression.NEUTRAL,
)


class DetectionOutcome(str, Enum):
    """Whether a result came from the nominal path or a safe default."""

    DETERMINED = "determined"
    FALLBACK = "fallback"


def clamp_confidence(value: float) -> float:
    """Clamp a confidence value into [0, 1]."""
    return max(0.0, min(1.0, float(value)))


@dataclass(frozen=True)
class ExpressionResult:
    """表情识别结果 (expression with confidence)

    Confidence is clamped to [0, 1] at construction regardless of the value
    supplied, so every consumer can rely on the bound.

    Attributes:
        expression: Detected expression category.
        confidence: Classification confidence in [0, 1].
        outcome: DETERMINED when the decision rule ran, FALLBACK when the
            landmark input was incomplete and a default was returned.
    """

    expression: Expression
    confidence: float
    outcome: DetectionOutcome = field(default=DetectionOutcome.DETERMINED)

    def __post_init__(self):
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))

    @property
    def is_fallback(self) -> bool:
        return self.outcome is DetectionOutcome.FALLBACK

    @classmethod
    def fallback(cls) -> "ExpressionResult":
        """Result returned when required landmark regions are missing."""
        return cls(Expression.NEUTRAL, 0.5, DetectionOutcome.FALLBACK)
