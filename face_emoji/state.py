"""Detection state reported by the pipeline."""

from enum import Enum


class DetectionState(str, Enum):
    """Current stage of face detection and emoji suggestion."""

    INITIAL = "initial"        # Nothing processed yet, no suggestions
    SCANNING = "scanning"      # Active, waiting for a face
    ANALYZING = "analyzing"    # Face found, classifying
    RESULTS = "results"        # Suggestions available
