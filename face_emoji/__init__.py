"""
Face Emoji Package

Facial-landmark expression classification and ranked emoji suggestion.
"""

__version__ = "0.1.0"

from face_emoji.expression import (
    CLASSIFIER_EXPRESSIONS,
    DetectionOutcome,
    Expression,
    ExpressionResult,
)
from face_emoji.landmarks import BoundingBox, LandmarkBundle, LandmarkRegion
from face_emoji.features import FeatureSet
from face_emoji.classifier import ClassifierConfig, ExpressionClassifier
from face_emoji.mappers import EmojiCandidate, EmojiMapper, EmojiRanking
from face_emoji.throttle import FrameThrottle
from face_emoji.state import DetectionState
from face_emoji.pipeline import (
    FaceEmojiPipeline,
    FrameOutcome,
    FrameResult,
    PipelineConfig,
)
from face_emoji.config import load_config, save_config

__all__ = [
    "CLASSIFIER_EXPRESSIONS",
    "DetectionOutcome",
    "Expression",
    "ExpressionResult",
    "BoundingBox",
    "LandmarkBundle",
    "LandmarkRegion",
    "FeatureSet",
    "ClassifierConfig",
    "ExpressionClassifier",
    "EmojiCandidate",
    "EmojiMapper",
    "EmojiRanking",
    "FrameThrottle",
    "DetectionState",
    "FaceEmojiPipeline",
    "FrameOutcome",
    "FrameResult",
    "PipelineConfig",
    "load_config",
    "save_config",
]
