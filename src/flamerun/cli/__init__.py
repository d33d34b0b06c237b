"""
Command-line interface for the flamerun package.
"""

from .main import build_parser, main_cli

__all__ = [
    "build_parser",
    "main_cli",
]
