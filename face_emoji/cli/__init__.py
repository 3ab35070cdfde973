"""
CLI subpackage for command-line interface tools.

Available CLI scripts:
- run: Live camera emoji suggestions
- suggest: Classify a landmark JSON file and print ranked emoji

Usage:
    python -m face_emoji.cli.run --help
    python -m face_emoji.cli.suggest --help
"""

__all__ = ["run", "suggest"]
