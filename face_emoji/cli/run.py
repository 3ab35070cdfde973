#!/usr/bin/env python3
"""
Real-time emoji suggestion CLI.

Usage:
    python -m face_emoji.cli.run \
        --camera 0 \
        --show-video
"""

import argparse
import logging
import signal
import sys
from typing import List, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Suggest emoji from live facial expressions",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file (YAML or JSON)",
    )
    parser.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Camera device ID (overrides config)",
    )
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Path to face_landmarker.task (downloaded if not specified)",
    )
    parser.add_argument(
        "--throttle-ms",
        type=float,
        default=None,
        help="Minimum spacing between classified frames in ms (overrides config)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for emoji pool shuffling",
    )

    # Output arguments
    parser.add_argument(
        "--show-video",
        action="store_true",
        help="Display video feed with overlay",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    # Misc arguments
    parser.add_argument(
        "--create-config",
        type=str,
        default=None,
        metavar="PATH",
        help="Create a default config file and exit",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace):
    """Load the config file (or defaults) and apply command line overrides."""
    from face_emoji.config import load_config

    config = load_config(args.config)

    if args.camera is not None:
        config.camera_id = args.camera
    if args.model is not None:
        config.landmark_model_path = args.model
    if args.throttle_ms is not None:
        config.throttle_interval_ms = args.throttle_ms
    if args.seed is not None:
        config.random_seed = args.seed
    if args.show_video:
        config.show_video = True

    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the live CLI."""
    args = parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.WARNING)

    if args.create_config:
        from face_emoji.config import create_default_config
        create_default_config(args.create_config)
        print(f"Created default config at: {args.create_config}")
        return 0

    from face_emoji.pipeline import FaceEmojiPipeline

    try:
        config = build_config(args)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    pipeline = FaceEmojiPipeline(config=config)

    if not args.quiet:
        def on_suggestions(suggestions):
            logger.info("Suggestions: " + "  ".join(
                f"{c.emoji} {c.confidence:.2f}" for c in suggestions
            ))
        pipeline.on_suggestions = on_suggestions

    def signal_handler(signum, frame):
        logger.info("Received shutdown signal")
        pipeline.request_stop()

    signal.signal(signal.SIGTERM, signal_handler)

    try:
        pipeline.run()
    except ImportError as e:
        logger.error(str(e))
        return 1
    finally:
        pipeline.stop()

    return 0


if __name__ == "__main__":
    sys.exit(main())
