"""
Folded stack analysis.
"""

from .folded import format_hot_frames, hot_frames, parse_folded

__all__ = [
    "format_hot_frames",
    "hot_frames",
    "parse_folded",
]
