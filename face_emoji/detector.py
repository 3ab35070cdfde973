"""
Landmark sources that feed the expression classifier.

LandmarkSource is the seam between frame capture and classification. The
MediaPipe implementation runs Face Landmarker on a BGR frame and groups the
face mesh into the named regions the classifier expects.

Uses the MediaPipe Tasks API (FaceLandmarker) for compatibility with mediapipe >= 0.10.
"""

import logging
import os
import urllib.request
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np

try:
    import cv2

    CV2_AVAILABLE = True
except ImportError:
    CV2_AVAILABLE = False

try:
    import mediapipe as mp
    from mediapipe.tasks import python
    from mediapipe.tasks.python import vision

    MEDIAPIPE_AVAILABLE = True
except ImportError:
    MEDIAPIPE_AVAILABLE = False

from .landmarks import BoundingBox, LandmarkBundle, LandmarkRegion

logger = logging.getLogger(__name__)


# MediaPipe Face Mesh landmark indices, grouped into classifier regions
# Reference: https://github.com/google/mediapipe/blob/master/mediapipe/modules/face_geometry/data/canonical_face_model_uv_visualization.png

# Eyebrows: innermost point first
LEFT_EYEBROW = [107, 66, 105, 63, 70]
RIGHT_EYEBROW = [336, 296, 334, 293, 300]

# Eye contours
LEFT_EYE = [33, 7, 163, 144, 145, 153, 154, 155, 133, 173, 157, 158, 159, 160, 161, 246]
RIGHT_EYE = [362, 382, 381, 380, 374, 373, 390, 249, 263, 466, 388, 387, 386, 385, 384, 398]

# Lip rings: start at the left corner (61 / 78), the opposite corner sits at index len // 2
OUTER_LIPS = [61, 146, 91, 181, 84, 17, 314, 405, 321, 375,
              291, 409, 270, 269, 267, 0, 37, 39, 40, 185]
INNER_LIPS = [78, 95, 88, 178, 87, 14, 317, 402, 318, 324,
              308, 415, 310, 311, 312, 13, 82, 81, 80, 191]

# Nose bridge to tip
NOSE = [168, 6, 197, 195, 5, 4, 1, 19, 94, 2]

# Face mesh without iris refinement points
NUM_MESH_LANDMARKS = 468

# Model download URL
MODEL_URL = "https://storage.googleapis.com/mediapipe-models/face_landmarker/face_landmarker/float16/1/face_landmarker.task"
DEFAULT_MODEL_PATH = "face_landmarker.task"


@dataclass(frozen=True)
class FaceDetection:
    """Landmark regions and bounding box for the primary detected face."""

    landmarks: LandmarkBundle
    bounding_box: BoundingBox


def bundle_from_mesh(points: np.ndarray) -> Optional[FaceDetection]:
    """
    Group MediaPipe face-mesh points into classifier regions.

    The face bounding box is the extent of the 468 mesh points; region points
    are re-normalized to that box so that BoundingBox.denormalize() maps them
    back to image-normalized coordinates.

    Args:
        points: Array of shape (N, 2) or (N, 3), N >= 468, in image-normalized
                coordinates (MediaPipe's x, y)

    Returns:
        FaceDetection, or None if the mesh has zero width or height

    Raises:
        ValueError: If the array has the wrong shape or too few points
    """
    arr = np.asarray(points, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] < 2:
        raise ValueError(f"Expected mesh of shape (N, 2|3), got {arr.shape}")
    if arr.shape[0] < NUM_MESH_LANDMARKS:
        raise ValueError(
            f"Expected at least {NUM_MESH_LANDMARKS} mesh points, got {arr.shape[0]}"
        )

    xy = arr[:NUM_MESH_LANDMARKS, :2]
    min_xy = xy.min(axis=0)
    size = xy.max(axis=0) - min_xy

    if size[0] < 1e-9 or size[1] < 1e-9:
        return None

    normalized = (xy - min_xy) / size

    def region(indices) -> LandmarkRegion:
        return LandmarkRegion(normalized[indices])

    bundle = LandmarkBundle(
        left_eyebrow=region(LEFT_EYEBROW),
        right_eyebrow=region(RIGHT_EYEBROW),
        left_eye=region(LEFT_EYE),
        right_eye=region(RIGHT_EYE),
        outer_lips=region(OUTER_LIPS),
        inner_lips=region(INNER_LIPS),
        nose=region(NOSE),
    )
    bounding_box = BoundingBox(
        x=float(min_xy[0]),
        y=float(min_xy[1]),
        width=float(size[0]),
        height=float(size[1]),
    )
    return FaceDetection(landmarks=bundle, bounding_box=bounding_box)


class LandmarkSource(ABC):
    """
    Abstract source of facial landmarks for a video frame.

    Implementations return landmarks for the first (primary) face only.
    """

    @abstractmethod
    def detect(self, frame: np.ndarray) -> Optional[FaceDetection]:
        """
        Detect the primary face in a frame.

        Parameters:
            frame (np.ndarray): BGR image (H, W, 3).

        Returns:
            FaceDetection, or None if no face was found.
        """
        pass

    def close(self) -> None:
        """Release any resources held by the source."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class MediaPipeLandmarkSource(LandmarkSource):
    """从 MediaPipe Face Landmarker 获取面部关键点区域

    Runs MediaPipe Face Landmarker (one face) on BGR frames and converts the
    first face mesh into a FaceDetection.
    """

    def __init__(
        self,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
        model_path: Optional[str] = None,
    ):
        """
        Initialize MediaPipe Face Landmarker.

        Args:
            min_detection_confidence: Minimum confidence for face detection [0, 1]
            min_tracking_confidence: Minimum confidence for landmark tracking [0, 1]
            model_path: Path to the face_landmarker.task model file. If None, will download.

        Raises:
            ImportError: If MediaPipe or OpenCV is not installed
        """
        if not MEDIAPIPE_AVAILABLE:
            raise ImportError(
                "MediaPipe is not installed. Install with: pip install mediapipe"
            )
        if not CV2_AVAILABLE:
            raise ImportError("OpenCV is required: pip install opencv-python")

        self._model_path = model_path or self._get_model_path()

        base_options = python.BaseOptions(model_asset_path=self._model_path)
        options = vision.FaceLandmarkerOptions(
            base_options=base_options,
            num_faces=1,
            min_face_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )
        self._detector = vision.FaceLandmarker.create_from_options(options)
        logger.info(f"Face landmarker loaded from {self._model_path}")

    def _get_model_path(self) -> str:
        """Get or download the face landmarker model."""
        if os.path.exists(DEFAULT_MODEL_PATH):
            return DEFAULT_MODEL_PATH

        # Check in package directory
        package_dir = os.path.dirname(__file__)
        package_model_path = os.path.join(package_dir, DEFAULT_MODEL_PATH)
        if os.path.exists(package_model_path):
            return package_model_path

        logger.info(f"Downloading face landmarker model to {DEFAULT_MODEL_PATH}...")
        urllib.request.urlretrieve(MODEL_URL, DEFAULT_MODEL_PATH)
        logger.info("Model downloaded successfully.")
        return DEFAULT_MODEL_PATH

    def detect(self, frame: np.ndarray) -> Optional[FaceDetection]:
        """
        从视频帧提取面部关键点区域

        Args:
            frame: BGR format video frame (H, W, 3)

        Returns:
            FaceDetection for the first face, or None if no face is detected
        """
        if frame is None or frame.size == 0:
            return None

        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        result = self._detector.detect(mp_image)

        if not result.face_landmarks:
            return None

        face_landmarks = result.face_landmarks[0]
        points = np.array([[lm.x, lm.y] for lm in face_landmarks], dtype=np.float64)

        return bundle_from_mesh(points)

    def close(self):
        """Release MediaPipe resources."""
        if hasattr(self, "_detector") and self._detector:
            self._detector.close()
            self._detector = None
