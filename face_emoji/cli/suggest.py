#!/usr/bin/env python3
"""
Offline emoji suggestion from a landmark JSON file.

Usage:
    python -m face_emoji.cli.suggest landmarks.json --seed 7
    python -m face_emoji.cli.suggest landmarks.json --json

Input format:
    {
      "bounding_box": {"x": 0.2, "y": 0.1, "width": 0.5, "height": 0.6},
      "landmarks": {"left_eyebrow": [[x, y], ...], ..., "nose": [[x, y], ...]}
    }
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from face_emoji.classifier import ExpressionClassifier
from face_emoji.landmarks import BoundingBox, LandmarkBundle
from face_emoji.mappers.emoji_mapper import EmojiMapper

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Classify a landmark file and print ranked emoji",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "landmarks",
        type=str,
        help="Path to landmark JSON file",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for emoji pool shuffling",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    parser.add_argument(
        "--features",
        action="store_true",
        help="Also print the computed geometric features",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def load_landmark_file(path: Union[str, Path]) -> Tuple[LandmarkBundle, BoundingBox]:
    """
    Read a landmark JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid landmark JSON
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Landmark file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse landmark file: {e}") from e

    return parse_landmark_data(data)


def parse_landmark_data(data: Dict[str, Any]) -> Tuple[LandmarkBundle, BoundingBox]:
    """Convert decoded landmark JSON into a bundle and bounding box."""
    if not isinstance(data, dict):
        raise ValueError("Landmark file must contain a JSON object")
    if "bounding_box" not in data:
        raise ValueError("Landmark file is missing 'bounding_box'")

    bounding_box = BoundingBox.from_dict(data["bounding_box"])
    regions = data.get("landmarks") or {}
    if not isinstance(regions, dict):
        raise ValueError("'landmarks' must be an object of region name to points")

    return LandmarkBundle.from_dict(regions), bounding_box


def suggest(
    bundle: LandmarkBundle,
    bounding_box: BoundingBox,
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    """Classify and rank; returns a JSON-ready summary."""
    classifier = ExpressionClassifier()
    mapper = EmojiMapper(rng=seed)

    features = classifier.extract_features(bundle, bounding_box)
    result = classifier.classify(bundle, bounding_box)

    return {
        "expression": result.expression.value,
        "confidence": round(result.confidence, 4),
        "outcome": result.outcome.value,
        "features": None if features is None else features.to_dict(),
        "missing_regions": list(bundle.missing_regions()),
        "suggestions": mapper.top_emoji_dicts(result.expression, result.confidence),
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the suggest CLI."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        bundle, bounding_box = load_landmark_file(args.landmarks)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    summary = suggest(bundle, bounding_box, seed=args.seed)

    if not args.features:
        summary.pop("features")

    if args.json:
        print(json.dumps(summary, ensure_ascii=False, indent=2))
        return 0

    print(f"Expression: {summary['expression']} "
          f"({summary['confidence']:.2f}, {summary['outcome']})")
    if summary["missing_regions"]:
        print(f"Missing regions: {', '.join(summary['missing_regions'])}")
    if args.features and summary["features"] is not None:
        for name, value in summary["features"].items():
            print(f"  {name}: {value:.3f}")
    for rank, item in enumerate(summary["suggestions"], start=1):
        print(f"{rank}. {item['emoji']}  {item['confidence']:.2f}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
