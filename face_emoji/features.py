"""
FeatureSet dataclass for geometric expression features.

This module defines the five scalar features the expression classifier
derives from facial landmark regions: smile, eyebrow raise, eyebrow furrow,
mouth openness and mouth corner droop.
"""

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class FeatureSet:
    """从面部关键点计算的几何特征

    Contains 5 feature fields computed from de-normalized landmark regions:
    - smile_score: corners above (+) or below (-) the mouth center [-1, 1]
    - eyebrow_raise: brows lifted away from the eyes [0, 1]
    - eyebrow_furrow: inner brows pulled together [0, 1]
    - mouth_openness: vertical gap between outer and inner lip rings [0, 1]
    - mouth_corners_down: corners sagging below the lip center [0, 1]
    """

    smile_score: float          # 微笑程度 [-1, 1]
    eyebrow_raise: float        # 眉毛抬起 [0, 1]
    eyebrow_furrow: float       # 眉头皱起 [0, 1]
    mouth_openness: float       # 嘴巴张开度 [0, 1]
    mouth_corners_down: float   # 嘴角下垂 [0, 1]

    NUM_FEATURES: int = field(default=5, init=False, repr=False, compare=False)

    def to_array(self) -> np.ndarray:
        """
        Convert FeatureSet to a numpy array.

        Returns:
            np.ndarray: Shape (5,) in field order
                [smile_score, eyebrow_raise, eyebrow_furrow,
                 mouth_openness, mouth_corners_down]
        """
        return np.array([
            self.smile_score,
            self.eyebrow_raise,
            self.eyebrow_furrow,
            self.mouth_openness,
            self.mouth_corners_down,
        ], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "FeatureSet":
        """
        Create a FeatureSet from a numpy array in to_array() order.

        Raises:
            ValueError: If array does not have exactly 5 elements
        """
        if len(arr) != 5:
            raise ValueError(f"Expected array of length 5, got {len(arr)}")

        return cls(
            smile_score=float(arr[0]),
            eyebrow_raise=float(arr[1]),
            eyebrow_furrow=float(arr[2]),
            mouth_openness=float(arr[3]),
            mouth_corners_down=float(arr[4]),
        )

    @classmethod
    def neutral(cls) -> "FeatureSet":
        """A resting face: every feature at its baseline."""
        return cls(
            smile_score=0.0,
            eyebrow_raise=0.0,
            eyebrow_furrow=0.0,
            mouth_openness=0.0,
            mouth_corners_down=0.0,
        )

    def to_dict(self) -> dict:
        return {
            "smile_score": self.smile_score,
            "eyebrow_raise": self.eyebrow_raise,
            "eyebrow_furrow": self.eyebrow_furrow,
            "mouth_openness": self.mouth_openness,
            "mouth_corners_down": self.mouth_corners_down,
        }
