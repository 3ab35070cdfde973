"""
Frame-processing pipeline that coordinates all components.

This is the main entry point for live emoji suggestion. It handles frame
throttling, landmark detection, expression classification and emoji ranking,
and tracks the detection state for presentation code.

    camera -> throttle -> landmarks -> classifier -> mapper -> callbacks
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

import numpy as np

try:
    import cv2
    CV2_AVAILABLE = True
except ImportError:
    CV2_AVAILABLE = False

from face_emoji.classifier import ExpressionClassifier
from face_emoji.detector import LandmarkSource, MediaPipeLandmarkSource
from face_emoji.expression import ExpressionResult
from face_emoji.landmarks import BoundingBox, LandmarkBundle
from face_emoji.mappers.base import EmojiCandidate, ExpressionToEmojiMapper
from face_emoji.mappers.emoji_mapper import EmojiMapper
from face_emoji.state import DetectionState
from face_emoji.throttle import FrameThrottle

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Configuration for FaceEmojiPipeline.

    Attributes:
        camera_id: Camera device ID (default 0)
        frame_width: Requested capture width in pixels
        frame_height: Requested capture height in pixels
        throttle_interval_ms: Minimum spacing between classified frames (ms)
        landmark_model_path: Path to face_landmarker.task (None to download)
        min_detection_confidence: MediaPipe face detection threshold [0, 1]
        min_tracking_confidence: MediaPipe tracking threshold [0, 1]
        random_seed: Seed for emoji pool shuffling (None for OS entropy)
        show_video: Whether run() displays the camera feed with an overlay
    """
    camera_id: int = 0
    frame_width: int = 640
    frame_height: int = 480
    throttle_interval_ms: float = 100.0
    landmark_model_path: Optional[str] = None
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    random_seed: Optional[int] = None
    show_video: bool = False


class FrameOutcome(str, Enum):
    """What happened to one incoming frame."""

    THROTTLED = "throttled"  # Dropped, arrived inside the throttle interval
    NO_FACE = "no_face"      # Processed, no face found
    DETECTED = "detected"    # Face found and classified (possibly via fallback)


@dataclass
class FrameResult:
    """Result of processing one frame."""

    outcome: FrameOutcome
    state: DetectionState
    expression: Optional[ExpressionResult] = None
    suggestions: List[EmojiCandidate] = field(default_factory=list)


class FaceEmojiPipeline:
    """
    Unified pipeline for expression-driven emoji suggestion.

    Coordinates:
    - Frame throttling (at most one classification per interval)
    - Landmark detection (pluggable LandmarkSource)
    - Expression classification
    - Emoji ranking (pluggable mapper)

    "No face" (FrameOutcome.NO_FACE) and "ambiguous face" (DETECTED with a
    FALLBACK expression) are reported separately.

    Usage:
        pipeline = FaceEmojiPipeline()
        pipeline.run(show_video=True)

        # Or feed landmarks from elsewhere
        result = pipeline.process_landmarks(bundle, bounding_box)
    """

    def __init__(
        self,
        source: Optional[LandmarkSource] = None,
        classifier: Optional[ExpressionClassifier] = None,
        mapper: Optional[ExpressionToEmojiMapper] = None,
        config: Optional[PipelineConfig] = None,
        throttle: Optional[FrameThrottle] = None,
    ):
        """
        Create a pipeline.

        Parameters:
            source: Landmark source. If omitted, a MediaPipeLandmarkSource is
                created lazily on the first frame.
            classifier: Expression classifier; defaults to ExpressionClassifier().
            mapper: Emoji mapper; defaults to EmojiMapper seeded from config.
            config: Pipeline configuration; defaults to PipelineConfig().
            throttle: Frame throttle; defaults to one built from config.
        """
        self.config = config or PipelineConfig()
        self.classifier = classifier or ExpressionClassifier()
        self.mapper = mapper or EmojiMapper(rng=self.config.random_seed)
        self.throttle = throttle or FrameThrottle(
            interval=self.config.throttle_interval_ms / 1000.0
        )

        self._source = source
        self._owns_source = source is None
        self._camera = None

        # State
        self._state = DetectionState.INITIAL
        self._current: Optional[FrameResult] = None
        self._frame_count = 0
        self._running = False

        # Callbacks
        self.on_expression: Optional[Callable[[ExpressionResult], None]] = None
        self.on_suggestions: Optional[Callable[[List[EmojiCandidate]], None]] = None

    # === Properties ===

    @property
    def state(self) -> DetectionState:
        return self._state

    @property
    def current_result(self) -> Optional[FrameResult]:
        """Last DETECTED result, or None after a frame with no face."""
        return self._current

    @property
    def frame_count(self) -> int:
        """Frames that passed the throttle."""
        return self._frame_count

    def _set_state(self, state: DetectionState) -> None:
        if state is not self._state:
            logger.debug(f"Detection state {self._state.value} -> {state.value}")
            self._state = state

    # === Processing ===

    def _get_source(self) -> LandmarkSource:
        if self._source is None:
            self._source = MediaPipeLandmarkSource(
                min_detection_confidence=self.config.min_detection_confidence,
                min_tracking_confidence=self.config.min_tracking_confidence,
                model_path=self.config.landmark_model_path,
            )
        return self._source

    def process_landmarks(
        self,
        landmarks: LandmarkBundle,
        bounding_box: BoundingBox,
    ) -> FrameResult:
        """
        Classify one face and rank emoji for it.

        Parameters:
            landmarks: Landmark regions normalized to the bounding box.
            bounding_box: Face rectangle.

        Returns:
            FrameResult with outcome DETECTED and state RESULTS.
        """
        self._set_state(DetectionState.ANALYZING)

        expression = self.classifier.classify(landmarks, bounding_box)
        suggestions = self.mapper.top_emojis(expression.expression, expression.confidence)

        self._set_state(DetectionState.RESULTS)
        result = FrameResult(
            outcome=FrameOutcome.DETECTED,
            state=self._state,
            expression=expression,
            suggestions=suggestions,
        )
        self._current = result

        if self.on_expression is not None:
            self.on_expression(expression)
        if self.on_suggestions is not None:
            self.on_suggestions(suggestions)

        return result

    def process_frame(self, frame: np.ndarray, now: Optional[float] = None) -> FrameResult:
        """
        Process a BGR camera frame.

        Frames arriving within the throttle interval are dropped (THROTTLED,
        state unchanged). Otherwise the landmark source runs; with no face the
        state returns to SCANNING and the current result is cleared.

        Parameters:
            frame (np.ndarray): BGR image (H, W, 3).
            now (Optional[float]): Arrival time in seconds; defaults to the
                throttle's clock.

        Returns:
            FrameResult describing what happened to the frame.
        """
        if not self.throttle.should_process(now):
            return FrameResult(outcome=FrameOutcome.THROTTLED, state=self._state)

        self._frame_count += 1

        detection = self._get_source().detect(frame)
        if detection is None:
            self._current = None
            self._set_state(DetectionState.SCANNING)
            return FrameResult(outcome=FrameOutcome.NO_FACE, state=self._state)

        return self.process_landmarks(detection.landmarks, detection.bounding_box)

    def reset(self) -> None:
        """Clear results and throttle history; state returns to INITIAL."""
        self._current = None
        self._frame_count = 0
        self.throttle.reset()
        self._set_state(DetectionState.INITIAL)

    # === Camera loop ===

    def _init_camera(self) -> bool:
        """
        Ensure the configured camera is opened and configured for capture.

        Returns:
            True if the camera is opened, False otherwise.
        """
        if self._camera is not None:
            return True

        self._camera = cv2.VideoCapture(self.config.camera_id)
        if not self._camera.isOpened():
            self._camera = None
            return False

        self._camera.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.frame_width)
        self._camera.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.frame_height)
        return True

    def run(self, show_video: Optional[bool] = None) -> None:
        """
        Capture frames from the configured camera until stopped.

        Parameters:
            show_video (Optional[bool]): Display the feed with the current
                suggestions; quit with 'q'. Defaults to config.show_video.

        Raises:
            ImportError: If OpenCV is not installed.
        """
        if not CV2_AVAILABLE:
            raise ImportError("OpenCV is required: pip install opencv-python")

        if show_video is None:
            show_video = self.config.show_video

        self._get_source()

        if not self._init_camera():
            logger.error(f"Failed to open camera {self.config.camera_id}")
            return

        self._running = True
        self._set_state(DetectionState.SCANNING)
        start_time = time.time()

        logger.info("Face emoji pipeline started. Press 'q' to quit.")

        try:
            while self._running:
                ret, frame = self._camera.read()
                if not ret:
                    logger.warning("Failed to capture frame")
                    continue

                result = self.process_frame(frame)

                if show_video:
                    self._draw_overlay(frame)
                    cv2.imshow("Face Emoji", frame)
                    if cv2.waitKey(1) & 0xFF == ord('q'):
                        break

                if result.outcome is FrameOutcome.DETECTED:
                    logger.debug(
                        f"{result.expression.expression.value} "
                        f"({result.expression.confidence:.2f}): "
                        + " ".join(c.emoji for c in result.suggestions)
                    )

        except KeyboardInterrupt:
            logger.info("Interrupted")

        finally:
            self.stop()
            elapsed = time.time() - start_time
            if self._frame_count > 0 and elapsed > 0:
                logger.info(
                    f"Processed {self._frame_count} frames in {elapsed:.1f}s "
                    f"({self._frame_count / elapsed:.1f} FPS)"
                )

    def _draw_overlay(self, frame: np.ndarray) -> None:
        """Draw the detection state and current expression onto the frame."""
        cv2.putText(frame, self._state.value, (10, 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 255, 0), 2)

        if self._current is None or self._current.expression is None:
            cv2.putText(frame, "No face", (10, 60),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 0, 255), 2)
            return

        # OpenCV's Hershey fonts cannot render emoji; show the label instead
        expression = self._current.expression
        cv2.putText(frame, f"{expression.expression.value}: {expression.confidence:.2f}",
                    (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 0), 2)

    def request_stop(self) -> None:
        """Ask run() to exit after the current frame; safe from signal handlers."""
        self._running = False

    def stop(self) -> None:
        """Stop the run loop and release the camera and owned landmark source."""
        self._running = False

        if self._camera is not None:
            self._camera.release()
            self._camera = None
            if CV2_AVAILABLE:
                cv2.destroyAllWindows()

        if self._source is not None and self._owns_source:
            self._source.close()
            self._source = None

    def __enter__(self) -> "FaceEmojiPipeline":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
