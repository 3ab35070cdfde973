"""
Landmark data structures consumed by the expression classifier.

A LandmarkRegion holds the ordered points of one anatomical feature in
coordinates normalized to the face bounding box. BoundingBox locates the face
in the image and is used to de-normalize region points into a shared frame.

Coordinates follow the image convention: y grows downward.
"""

from dataclasses import dataclass
from typing import ClassVar, Dict, Iterator, Optional, Sequence, Tuple, Union

import numpy as np


PointsLike = Union[np.ndarray, Sequence[Sequence[float]]]


class LandmarkRegion:
    """Ordered 2-D points describing one facial feature.

    Points are stored as a read-only float64 array of shape (N, 2). Order
    matters: the first point, the last point and the midpoint index N // 2
    are used as anatomical anchors (e.g. mouth corners).
    """

    def __init__(self, points: PointsLike):
        arr = np.array(points, dtype=np.float64)
        if arr.size == 0:
            arr = arr.reshape(0, 2)
        if arr.ndim != 2 or arr.shape[1] < 2:
            raise ValueError(
                f"Expected points of shape (N, 2), got {arr.shape}"
            )
        arr = np.ascontiguousarray(arr[:, :2])
        arr.setflags(write=False)
        self._points = arr

    @property
    def points(self) -> np.ndarray:
        return self._points

    def __len__(self) -> int:
        return self._points.shape[0]

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._points)

    def __getitem__(self, index: int) -> np.ndarray:
        return self._points[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, LandmarkRegion):
            return NotImplemented
        return np.array_equal(self._points, other._points)

    def __repr__(self) -> str:
        return f"LandmarkRegion(n={len(self)})"

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def to_list(self) -> list:
        return self._points.tolist()


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned face rectangle in the parent image's coordinate space."""

    x: float
    y: float
    width: float
    height: float

    def denormalize(self, points: np.ndarray) -> np.ndarray:
        """
        Convert box-normalized points into the bounding box's coordinate frame.

        Args:
            points: Array of shape (N, 2) with coordinates in [0, 1]

        Returns:
            Array of shape (N, 2): origin + point * size
        """
        origin = np.array([self.x, self.y], dtype=np.float64)
        size = np.array([self.width, self.height], dtype=np.float64)
        return origin + np.asarray(points, dtype=np.float64) * size

    @property
    def area(self) -> float:
        return self.width * self.height

    def to_dict(self) -> Dict[str, float]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "BoundingBox":
        try:
            return cls(
                x=float(data["x"]),
                y=float(data["y"]),
                width=float(data["width"]),
                height=float(data["height"]),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid bounding box: {data!r}") from e


@dataclass(frozen=True)
class LandmarkBundle:
    """
    Landmark regions for a single detected face.

    Any region may be None when the detector did not supply it. Eyebrow
    regions are ordered innermost point first.
    """

    left_eyebrow: Optional[LandmarkRegion] = None
    right_eyebrow: Optional[LandmarkRegion] = None
    left_eye: Optional[LandmarkRegion] = None
    right_eye: Optional[LandmarkRegion] = None
    outer_lips: Optional[LandmarkRegion] = None
    inner_lips: Optional[LandmarkRegion] = None
    nose: Optional[LandmarkRegion] = None

    REGION_NAMES: ClassVar[Tuple[str, ...]] = (
        "left_eyebrow",
        "right_eyebrow",
        "left_eye",
        "right_eye",
        "outer_lips",
        "inner_lips",
        "nose",
    )

    def regions(self) -> Dict[str, Optional[LandmarkRegion]]:
        return {name: getattr(self, name) for name in self.REGION_NAMES}

    def missing_regions(self) -> Tuple[str, ...]:
        """Names of regions that are absent or have no points."""
        return tuple(
            name for name, region in self.regions().items()
            if region is None or region.is_empty
        )

    @property
    def is_complete(self) -> bool:
        return not self.missing_regions()

    def to_dict(self) -> Dict[str, list]:
        return {
            name: region.to_list()
            for name, region in self.regions().items()
            if region is not None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, PointsLike]) -> "LandmarkBundle":
        """Build a bundle from a mapping of region name to point lists.

        Unknown keys raise ValueError; missing keys become absent regions.
        """
        unknown = set(data) - set(cls.REGION_NAMES)
        if unknown:
            raise ValueError(f"Unknown landmark regions: {sorted(unknown)}")
        return cls(**{
            name: LandmarkRegion(points) for name, points in data.items()
        })
