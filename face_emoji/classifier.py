"""
Rule-based expression classifier over facial landmark regions.

The classifier de-normalizes each landmark region into the bounding box's
coordinate frame, computes five geometric features and applies a fixed,
priority-ordered decision rule. No training required and no internal state:
identical input always yields an identical ExpressionResult.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from face_emoji.expression import DetectionOutcome, Expression, ExpressionResult
from face_emoji.features import FeatureSet
from face_emoji.landmarks import BoundingBox, LandmarkBundle, LandmarkRegion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassifierConfig:
    """Normalization constants and decision thresholds for ExpressionClassifier."""

    # Feature normalization
    smile_scale: float = 0.05
    raise_baseline: float = 0.04
    raise_scale: float = 0.03
    furrow_baseline: float = 0.4
    furrow_scale: float = 0.2
    furrow_epsilon: float = 0.001
    openness_scale: float = 0.03
    corners_down_scale: float = 0.02

    # Happy: strong smile, no furrow
    happy_min_smile: float = 0.3
    happy_max_furrow: float = 0.2
    # Surprised: brows raised and mouth open
    surprised_min_raise: float = 0.25
    surprised_min_openness: float = 0.15
    # Angry: brows pulled together
    angry_min_furrow: float = 0.3
    # Sad: corners down, no smile
    sad_min_corners_down: float = 0.2
    sad_max_smile: float = 0.1

    # Confidence gains
    intensity_gain: float = 1.5
    surprised_gain: float = 1.2
    neutral_confidence: float = 0.7


def _mean_y(points: np.ndarray) -> float:
    return float(np.mean(points[:, 1]))


class ExpressionClassifier:
    """
    将面部关键点映射为表情类别

    Classifies a LandmarkBundle into one of HAPPY, SURPRISED, ANGRY, SAD or
    NEUTRAL with a confidence in [0, 1].

    Rules are evaluated in priority order and the first match wins, so
    overlapping feature patterns resolve toward the earlier category:
    HAPPY > SURPRISED > ANGRY > SAD > NEUTRAL.

    Incomplete input (any required region absent or empty) is not an error:
    classify() returns ExpressionResult(NEUTRAL, 0.5) tagged as FALLBACK.

    Usage:
        classifier = ExpressionClassifier()
        result = classifier.classify(bundle, bounding_box)
    """

    def __init__(self, config: Optional[ClassifierConfig] = None):
        self.config = config or ClassifierConfig()

    def classify(
        self,
        landmarks: LandmarkBundle,
        bounding_box: BoundingBox,
    ) -> ExpressionResult:
        """
        Classify the expression of a single face.

        Args:
            landmarks: Landmark regions normalized to the bounding box
            bounding_box: Face rectangle used for de-normalization

        Returns:
            ExpressionResult with the detected expression and its confidence
        """
        features = self.extract_features(landmarks, bounding_box)
        if features is None:
            return ExpressionResult.fallback()
        return self.decide(features)

    def extract_features(
        self,
        landmarks: LandmarkBundle,
        bounding_box: BoundingBox,
    ) -> Optional[FeatureSet]:
        """
        Compute the five geometric features.

        Returns:
            FeatureSet, or None if any required region is absent or empty
        """
        missing = landmarks.missing_regions()
        if missing:
            logger.debug(f"Missing landmark regions: {', '.join(missing)}")
            return None

        def denorm(region: LandmarkRegion) -> np.ndarray:
            return bounding_box.denormalize(region.points)

        outer = denorm(landmarks.outer_lips)
        inner = denorm(landmarks.inner_lips)
        left_brow = denorm(landmarks.left_eyebrow)
        right_brow = denorm(landmarks.right_eyebrow)
        left_eye = denorm(landmarks.left_eye)
        right_eye = denorm(landmarks.right_eye)

        return FeatureSet(
            smile_score=self._compute_smile_score(outer, inner),
            eyebrow_raise=self._compute_eyebrow_raise(
                left_brow, right_brow, left_eye, right_eye
            ),
            eyebrow_furrow=self._compute_eyebrow_furrow(left_brow, right_brow),
            mouth_openness=self._compute_mouth_openness(outer, inner),
            mouth_corners_down=self._compute_mouth_corners_down(outer),
        )

    def decide(self, features: FeatureSet) -> ExpressionResult:
        """
        Apply the priority-ordered decision rule to a FeatureSet.

        Returns:
            ExpressionResult tagged DETERMINED
        """
        cfg = self.config
        smile = features.smile_score
        brow_raise = features.eyebrow_raise
        furrow = features.eyebrow_furrow
        openness = features.mouth_openness
        corners_down = features.mouth_corners_down

        if smile > cfg.happy_min_smile and furrow < cfg.happy_max_furrow:
            expression = Expression.HAPPY
            confidence = min(1.0, smile * cfg.intensity_gain)
        elif (brow_raise > cfg.surprised_min_raise
              and openness > cfg.surprised_min_openness):
            expression = Expression.SURPRISED
            confidence = min(1.0, (brow_raise + openness) * cfg.surprised_gain)
        elif furrow > cfg.angry_min_furrow:
            expression = Expression.ANGRY
            confidence = min(1.0, furrow * cfg.intensity_gain)
        elif (corners_down > cfg.sad_min_corners_down
              and smile < cfg.sad_max_smile):
            expression = Expression.SAD
            confidence = min(1.0, corners_down * cfg.intensity_gain)
        else:
            expression = Expression.NEUTRAL
            confidence = cfg.neutral_confidence

        return ExpressionResult(expression, confidence, DetectionOutcome.DETERMINED)

    # === Feature computation (de-normalized points) ===

    def _mouth_corners(self, outer: np.ndarray):
        """Mouth corners: first outer-lip point and the midpoint-index point."""
        return outer[0], outer[len(outer) // 2]

    def _compute_smile_score(self, outer: np.ndarray, inner: np.ndarray) -> float:
        """
        Smile score from mouth corner height relative to the inner-lip center.

        Returns value in [-1, 1]: positive when the corners sit above the
        center (smile), negative below it (frown).
        """
        if len(outer) < 2 or len(inner) < 2:
            return 0.0

        left_corner, right_corner = self._mouth_corners(outer)
        center_y = _mean_y(inner)

        left_offset = center_y - left_corner[1]
        right_offset = center_y - right_corner[1]
        average_offset = (left_offset + right_offset) / 2.0

        return float(np.clip(average_offset / self.config.smile_scale, -1.0, 1.0))

    def _compute_eyebrow_raise(
        self,
        left_brow: np.ndarray,
        right_brow: np.ndarray,
        left_eye: np.ndarray,
        right_eye: np.ndarray,
    ) -> float:
        """Eyebrow raise above the eyes in [0, 1]."""
        if (len(left_brow) == 0 or len(right_brow) == 0
                or len(left_eye) == 0 or len(right_eye) == 0):
            return 0.0

        # Positive when the brow sits above the eye
        left_distance = _mean_y(left_eye) - _mean_y(left_brow)
        right_distance = _mean_y(right_eye) - _mean_y(right_brow)
        average_distance = (left_distance + right_distance) / 2.0

        raise_amount = max(0.0, average_distance - self.config.raise_baseline)
        return float(np.clip(raise_amount / self.config.raise_scale, 0.0, 1.0))

    def _compute_eyebrow_furrow(
        self, left_brow: np.ndarray, right_brow: np.ndarray
    ) -> float:
        """Eyebrow furrow (inner brows close relative to outer brows) in [0, 1]."""
        if len(left_brow) < 3 or len(right_brow) < 3:
            return 0.0

        inner_distance = float(np.linalg.norm(right_brow[0] - left_brow[0]))
        outer_distance = float(np.linalg.norm(right_brow[-1] - left_brow[-1]))

        ratio = inner_distance / (outer_distance + self.config.furrow_epsilon)
        furrow_amount = max(0.0, self.config.furrow_baseline - ratio)
        return float(np.clip(furrow_amount / self.config.furrow_scale, 0.0, 1.0))

    def _compute_mouth_openness(self, outer: np.ndarray, inner: np.ndarray) -> float:
        """Gap between the outer and inner lip rings in [0, 1]."""
        if len(outer) == 0 or len(inner) == 0:
            return 0.0

        openness = abs(_mean_y(outer) - _mean_y(inner))
        return float(np.clip(openness / self.config.openness_scale, 0.0, 1.0))

    def _compute_mouth_corners_down(self, outer: np.ndarray) -> float:
        """Mouth corners below the outer-lip center in [0, 1]."""
        if len(outer) < 2:
            return 0.0

        left_corner, right_corner = self._mouth_corners(outer)
        center_y = _mean_y(outer)

        left_down = max(0.0, left_corner[1] - center_y)
        right_down = max(0.0, right_corner[1] - center_y)
        average_down = (left_down + right_down) / 2.0

        return float(np.clip(average_down / self.config.corners_down_scale, 0.0, 1.0))
