"""
Expression-to-emoji mappers.

- EmojiMapper: fixed per-expression pools, shuffled and scored per call
"""

from face_emoji.mappers.base import EmojiCandidate, EmojiRanking, ExpressionToEmojiMapper
from face_emoji.mappers.emoji_mapper import (
    EMOJI_POOLS,
    LAUGHING_EMOJIS,
    EmojiMapper,
)

__all__ = [
    "EmojiCandidate",
    "EmojiRanking",
    "ExpressionToEmojiMapper",
    "EmojiMapper",
    "EMOJI_POOLS",
    "LAUGHING_EMOJIS",
]
