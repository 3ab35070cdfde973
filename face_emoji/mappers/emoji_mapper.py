"""
Pool-based mapper from expressions to ranked emoji suggestions.

Each expression owns a fixed pool of candidate emoji. On every call the pool
is shuffled and each candidate is scored from its post-shuffle position and
the expression confidence, so repeated detections of the same expression
produce varied (but bounded and sorted) suggestions.
"""

import logging
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from face_emoji.expression import DetectionOutcome, Expression
from face_emoji.mappers.base import EmojiCandidate, EmojiRanking, ExpressionToEmojiMapper

logger = logging.getLogger(__name__)


# Candidate pools, most representative first. Read-only; DISGUSTED and
# FEARFUL are not produced by the landmark classifier.
EMOJI_POOLS: Mapping[Expression, Tuple[str, ...]] = MappingProxyType({
    Expression.HAPPY: ("😊", "😄", "🙂", "😁", "🥰"),
    Expression.SAD: ("😢", "😞", "🥺", "😔"),
    Expression.SURPRISED: ("😮", "😲", "🤯", "😳"),
    Expression.ANGRY: ("😠", "😤", "😡", "🤬"),
    Expression.NEUTRAL: ("😐", "😶", "🙂", "😑"),
    Expression.DISGUSTED: ("🤢", "😖", "🤮"),
    Expression.FEARFUL: ("😨", "😰", "😱"),
})

# Mixed into the HAPPY pool at high confidence
LAUGHING_EMOJIS: Tuple[str, ...] = ("😂", "🤣", "😆")

HIGH_INTENSITY_THRESHOLD = 0.7
MEDIUM_INTENSITY_THRESHOLD = 0.4

FALLBACK_CONFIDENCE = 0.5
FALLBACK_EMOJI = "😐"

RandomSource = Union[np.random.Generator, int, None]


class EmojiMapper(ExpressionToEmojiMapper):
    """
    表情到 emoji 的排序映射

    Scoring, for a candidate at post-shuffle index i:
        position_factor    = max(0.3, 1.0 - 0.15 * i)
        intensity_factor   = 1.0 - {0.2, 0.1, 0.05}[tier] * i
        intensity_modifier = clip(intensity_factor * (0.7 + 0.3 * confidence), 0.5, 1.2)
        confidence_i       = clip(position_factor * intensity_modifier, 0.0, 1.0)

    where the tier is high (confidence >= 0.7), medium (>= 0.4) or low.

    The shuffle uses the injected numpy Generator. Pass a seed (or a seeded
    Generator) for reproducible rankings; the default draws OS entropy. A
    Generator is not safe to share across threads, so give each thread its
    own mapper.

    Usage:
        mapper = EmojiMapper()
        for emoji, confidence in mapper.top_emojis(Expression.HAPPY, 0.8):
            ...
    """

    def __init__(
        self,
        rng: RandomSource = None,
        pools: Optional[Mapping[Expression, Sequence[str]]] = None,
    ):
        """
        Create an EmojiMapper.

        Parameters:
            rng: numpy Generator, integer seed, or None for OS entropy.
            pools: Candidate pool table; defaults to EMOJI_POOLS.
        """
        if isinstance(rng, np.random.Generator):
            self._rng = rng
        else:
            self._rng = np.random.default_rng(rng)
        self._pools = EMOJI_POOLS if pools is None else MappingProxyType({
            expression: tuple(pool) for expression, pool in pools.items()
        })

    @property
    def pools(self) -> Mapping[Expression, Tuple[str, ...]]:
        return self._pools

    def rank(self, expression: Expression, confidence: float) -> EmojiRanking:
        """
        Rank the expression's candidate pool.

        Parameters:
            expression (Expression): Detected expression.
            confidence (float): Expression confidence in [0, 1].

        Returns:
            EmojiRanking with at most MAX_SUGGESTIONS candidates sorted by
            descending confidence. Ties keep their post-shuffle order.
        """
        pool = self._select_pool(expression, confidence)

        if not pool:
            logger.debug(f"No emoji pool for {expression!r}, using neutral fallback")
            neutral = self._pools.get(Expression.NEUTRAL) or (FALLBACK_EMOJI,)
            candidates = [
                EmojiCandidate(emoji, FALLBACK_CONFIDENCE)
                for emoji in neutral[:self.MAX_SUGGESTIONS]
            ]
            return EmojiRanking(candidates, DetectionOutcome.FALLBACK, tuple(neutral))

        scored = [
            EmojiCandidate(emoji, self.score(index, confidence))
            for index, emoji in enumerate(pool)
        ]
        # sorted() is stable
        ranked = sorted(scored, key=lambda candidate: candidate.confidence, reverse=True)

        return EmojiRanking(
            ranked[:self.MAX_SUGGESTIONS],
            DetectionOutcome.DETERMINED,
            pool,
        )

    def _select_pool(self, expression: Expression, confidence: float) -> Tuple[str, ...]:
        """Pick the candidate pool and return a uniformly shuffled copy."""
        if expression == Expression.HAPPY and confidence >= HIGH_INTENSITY_THRESHOLD:
            base = LAUGHING_EMOJIS + tuple(self._pools.get(Expression.HAPPY, ()))
        else:
            base = tuple(self._pools.get(expression, ()))

        if not base:
            return ()

        order = self._rng.permutation(len(base))
        return tuple(base[i] for i in order)

    @staticmethod
    def position_factor(index: int) -> float:
        """Base confidence from pool position; earlier is more representative."""
        return max(0.3, 1.0 - index * 0.15)

    @staticmethod
    def intensity_modifier(confidence: float, index: int) -> float:
        """
        Intensity modifier: higher confidence favors earlier positions more
        strongly.
        """
        if confidence >= HIGH_INTENSITY_THRESHOLD:
            intensity_factor = 1.0 - index * 0.2
        elif confidence >= MEDIUM_INTENSITY_THRESHOLD:
            intensity_factor = 1.0 - index * 0.1
        else:
            intensity_factor = 1.0 - index * 0.05

        return max(0.5, min(1.2, intensity_factor * (0.7 + confidence * 0.3)))

    @classmethod
    def score(cls, index: int, confidence: float) -> float:
        """Final confidence for the candidate at post-shuffle position ``index``."""
        value = cls.position_factor(index) * cls.intensity_modifier(confidence, index)
        return min(1.0, max(0.0, value))

    @staticmethod
    def all_emojis(expression: Expression) -> List[str]:
        """Every candidate the mapper can suggest for an expression."""
        pool = list(EMOJI_POOLS.get(expression, ()))
        if expression == Expression.HAPPY:
            return pool + list(LAUGHING_EMOJIS)
        return pool
