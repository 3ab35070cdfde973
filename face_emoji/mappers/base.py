"""
Abstract base class for expression-to-emoji mappers.

All mappers must implement this interface to be used with FaceEmojiPipeline.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, NamedTuple, Tuple

from face_emoji.expression import DetectionOutcome, Expression


class EmojiCandidate(NamedTuple):
    """One suggested emoji with its ranking confidence in [0, 1]."""

    emoji: str
    confidence: float


class EmojiRanking(NamedTuple):
    """
    Ranked emoji suggestions for one expression.

    Attributes:
        candidates: Up to MAX_SUGGESTIONS candidates, highest confidence first
        outcome: FALLBACK when the expression had no usable pool
        pool: The pool in the (shuffled) order it was scored
    """

    candidates: List[EmojiCandidate]
    outcome: DetectionOutcome
    pool: Tuple[str, ...]

    @property
    def is_fallback(self) -> bool:
        return self.outcome is DetectionOutcome.FALLBACK


class ExpressionToEmojiMapper(ABC):
    """
    Abstract base class for mapping an expression to ranked emoji.

    The mapper is responsible for:
    1. Choosing a candidate pool for the expression and its intensity
    2. Scoring every candidate and returning the best MAX_SUGGESTIONS
    3. Degrading to a safe default when no pool is available
    """

    MAX_SUGGESTIONS = 3

    @abstractmethod
    def rank(self, expression: Expression, confidence: float) -> EmojiRanking:
        """
        Rank candidate emoji for an expression.

        Parameters:
            expression (Expression): Detected expression category.
            confidence (float): Expression confidence in [0, 1].

        Returns:
            EmojiRanking: Candidates sorted by descending confidence, at most
            MAX_SUGGESTIONS long, plus the outcome tag.
        """
        pass

    def top_emojis(self, expression: Expression, confidence: float) -> List[EmojiCandidate]:
        """
        Return the top emoji for an expression, highest confidence first.
        """
        return self.rank(expression, confidence).candidates

    def top_emoji_dicts(self, expression: Expression, confidence: float) -> List[Dict[str, float]]:
        """
        Same as top_emojis() but as plain dictionaries, ready for JSON output.
        """
        return [
            {"emoji": candidate.emoji, "confidence": round(candidate.confidence, 4)}
            for candidate in self.top_emojis(expression, confidence)
        ]
