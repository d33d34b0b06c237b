"""
System interaction utilities.

Running external tools with captured output.
"""

from .commands import run_command

__all__ = [
    "run_command",
]
