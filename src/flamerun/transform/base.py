"""
Interfaces of the two transform stages.

The collapse stage folds raw sampled stacks into ``frame;frame;...;frame count``
lines; the render stage turns folded lines into a flame graph. Both work on
binary streams so implementations can be external filters or in-process code.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO


class CollapseStage(ABC):
    """Raw sampled stacks -> folded stack-count lines."""

    @abstractmethod
    def collapse(self, reader: BinaryIO, writer: BinaryIO, demangle: bool = False) -> None:
        """
        Read raw samples from ``reader`` and write folded lines to ``writer``.

        Args:
            reader: Raw sampler output in the backend's native format
            writer: Destination for the folded lines
            demangle: Whether symbol names still need demangling

        Raises:
            TransformError: If collapsing fails
        """


class RenderStage(ABC):
    """Folded stack-count lines -> flame graph artifact."""

    #: Conventional file extension of the produced artifact.
    file_suffix: str = ""

    @abstractmethod
    def render(self, reader: BinaryIO, writer: BinaryIO) -> None:
        """
        Read folded lines from ``reader`` and write the rendered graph to ``writer``.

        Raises:
            TransformError: If rendering fails
        """
