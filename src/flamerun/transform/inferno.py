"""
Collapse and render stages backed by the inferno command-line tools.

Each stage pipes its input through an external filter (``inferno-collapse-perf``,
``inferno-collapse-dtrace`` or ``inferno-flamegraph``) and copies the filter's
stdout to the destination stream.
"""

import logging
from typing import BinaryIO, List, Optional, Sequence

from ..system.commands import run_command
from ..validation import TransformError, handle_subprocess_error
from .base import CollapseStage, RenderStage

logger = logging.getLogger(__name__)


def _read_input(reader: BinaryIO, stage: str) -> bytes:
    try:
        return reader.read()
    except OSError as e:
        raise TransformError(f"unable to read input of the {stage} stage: {e}", stage=stage) from e


def _write_output(writer: BinaryIO, data: bytes, stage: str) -> None:
    try:
        writer.write(data)
        writer.flush()
    except OSError as e:
        raise TransformError(f"unable to write output of the {stage} stage: {e}", stage=stage) from e


def _run_filter(argv: List[str], data: bytes, stage: str, failure: str) -> bytes:
    returncode, stdout, stderr = run_command(argv, input_data=data)
    if returncode != 0:
        detail = stderr.strip() or f"exit status {returncode}"
        error = TransformError(f"{failure}: {detail}", stage=stage)
        handle_subprocess_error(error, " ".join(argv), reraise=False, logger=logger)
        raise error
    return stdout


class InfernoCollapseStage(CollapseStage):
    """
    Folds stacks with ``inferno-collapse-<format>``.
    """

    def __init__(self, executable: str, demangle_flag: str = "--demangle"):
        self.executable = executable
        self.demangle_flag = demangle_flag

    def command(self, demangle: bool = False) -> List[str]:
        argv = [self.executable]
        if demangle:
            argv.append(self.demangle_flag)
        return argv

    def collapse(self, reader: BinaryIO, writer: BinaryIO, demangle: bool = False) -> None:
        raw = _read_input(reader, "collapse")
        folded = _run_filter(
            self.command(demangle),
            raw,
            stage="collapse",
            failure="unable to collapse generated profile data",
        )
        logger.debug(f"{self.executable}: {len(raw)} raw bytes -> {len(folded)} folded bytes")
        _write_output(writer, folded, "collapse")


class InfernoRenderStage(RenderStage):
    """
    Renders an SVG flame graph with ``inferno-flamegraph``.
    """

    file_suffix = ".svg"

    def __init__(
        self,
        executable: str = "inferno-flamegraph",
        title: Optional[str] = None,
        extra_args: Sequence[str] = (),
    ):
        self.executable = executable
        self.title = title
        self.extra_args = list(extra_args)

    def command(self) -> List[str]:
        argv = [self.executable]
        if self.title:
            argv.extend(["--title", self.title])
        argv.extend(self.extra_args)
        return argv

    def render(self, reader: BinaryIO, writer: BinaryIO) -> None:
        folded = _read_input(reader, "render")
        svg = _run_filter(
            self.command(),
            folded,
            stage="render",
            failure="unable to generate a flamegraph from the collapsed stack data",
        )
        _write_output(writer, svg, "render")
