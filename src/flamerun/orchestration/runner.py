"""
End-to-end flame graph run.

FlamegraphRunner drives one run through the following states:

    IDLE -> SAMPLING -> CLASSIFYING -> COLLECTING -> COLLAPSING -> RENDERING -> DONE

Any fatal error moves the run to ABORTED and propagates as a FlamegraphError.
A user interrupt of the sampled workload is not an error: whatever was
sampled before the interrupt is still collapsed and rendered.
"""

import dataclasses
import io
import logging
import time
from pathlib import Path
from typing import Optional, Sequence, Union

import polars as pl

from ..analysis.folded import format_hot_frames, hot_frames, parse_folded
from ..config import get_config
from ..models.results import RunReport
from ..models.runtime import ExitOutcome, RunState, Workload
from ..sampling.base import SamplerBackend
from ..sampling.factory import get_sampler_backend
from ..transform.base import CollapseStage, RenderStage
from ..transform.factory import create_collapse_stage, create_render_stage
from ..validation import (
    ArtifactWriteError,
    FlamegraphError,
    SamplingFailedError,
    TransformError,
    ValidationError,
    handle_cli_error,
    handle_file_error,
)
from .exit_classifier import classify
from .signal_guard import SignalGuard

logger = logging.getLogger(__name__)

WorkloadLike = Union[Workload, str, Sequence[str]]


class FlamegraphRunner:
    """
    Runs a workload under a sampler and turns the samples into a flame graph.

    A runner is single use: it owns exactly one sampler process and retrieves
    that sampler's output at most once.
    """

    def __init__(
        self,
        backend: SamplerBackend,
        collapse_stage: CollapseStage,
        render_stage: RenderStage,
        folded_output: Optional[Path] = None,
        top_frames: int = 0,
    ):
        """
        Args:
            backend: Sampler backend for this platform
            collapse_stage: Folds the backend's raw output
            render_stage: Renders folded stacks into the artifact
            folded_output: Optional path where the collapsed stacks are saved
            top_frames: Number of hottest frames to log (0 disables)
        """
        self.backend = backend
        self.collapse_stage = collapse_stage
        self.render_stage = render_stage
        self.folded_output = Path(folded_output) if folded_output else None
        self.top_frames = top_frames

        self.state = RunState.IDLE
        self.outcome: Optional[ExitOutcome] = None
        self._started = False

    def _transition(self, new_state: RunState) -> None:
        logger.debug(f"Run state: {self.state.value} -> {new_state.value}")
        self.state = new_state

    def run(self, workload: WorkloadLike, flamegraph_filename: Union[str, Path]) -> RunReport:
        """
        Execute the whole pipeline synchronously.

        Returns:
            RunReport describing the written artifact

        Raises:
            FlamegraphError: On any fatal condition; the run ends ABORTED
            RuntimeError: If this runner has already been used
        """
        if self._started:
            raise RuntimeError("FlamegraphRunner instances are single use")
        self._started = True

        workload = Workload.coerce(workload)
        output_path = Path(flamegraph_filename)

        try:
            outcome, sampling_seconds = self._sample(workload)
            raw = self._collect()
            collapsed = self._collapse(raw)

            folded, sample_count, summary = self._analyse(collapsed)

            if self.folded_output:
                self._write_file(self.folded_output, collapsed, "folded stacks")

            artifact = self._render(collapsed)
            logger.info(f"writing flamegraph to {str(output_path)!r}")
            self._write_file(output_path, artifact, "flamegraph")
        except FlamegraphError:
            self._transition(RunState.ABORTED)
            raise

        self._transition(RunState.DONE)
        return RunReport(
            outcome=outcome,
            artifact_path=output_path,
            raw_bytes=len(raw),
            collapsed_bytes=len(collapsed),
            stack_count=folded.height,
            sample_count=sample_count,
            sampling_seconds=sampling_seconds,
            folded_path=self.folded_output,
            hot_frames=summary,
        )

    def _sample(self, workload: Workload):
        self._transition(RunState.SAMPLING)
        command = self.backend.build_command(workload)
        logger.info(f"Sampling '{workload}' with {self.backend.name}")

        with SignalGuard():
            process = self.backend.spawn(command)
            started = time.monotonic()
            status = self.backend.wait(process)
            sampling_seconds = time.monotonic() - started

        self._transition(RunState.CLASSIFYING)
        outcome = classify(status)
        self.outcome = outcome

        if not outcome.should_collect:
            logger.debug(f"{self.backend.name} {outcome.reason}")
            raise SamplingFailedError("failed to sample program", outcome=outcome)
        if outcome.is_user_interrupted:
            logger.info(
                f"Sampling was interrupted ({outcome.reason}); "
                "processing the samples collected so far"
            )
        return outcome, sampling_seconds

    def _collect(self) -> bytes:
        self._transition(RunState.COLLECTING)
        raw = self.backend.retrieve_output()
        logger.debug(f"Retrieved {len(raw)} bytes of raw samples from {self.backend.name}")
        return raw

    def _collapse(self, raw: bytes) -> bytes:
        self._transition(RunState.COLLAPSING)
        collapsed = io.BytesIO()
        try:
            self.collapse_stage.collapse(
                io.BytesIO(raw), collapsed, demangle=self.backend.demangle
            )
        except OSError as e:
            raise TransformError(f"unable to collapse generated profile data: {e}", stage="collapse") from e
        return collapsed.getvalue()

    def _analyse(self, collapsed: bytes):
        try:
            folded = parse_folded(collapsed)
            sample_count = int(folded["count"].sum()) if folded.height else 0
            summary = hot_frames(folded, self.top_frames) if self.top_frames > 0 else None
        except pl.exceptions.PolarsError as e:
            raise TransformError(f"unable to analyse collapsed stack data: {e}", stage="collapse") from e

        logger.info(f"Collapsed {folded.height} distinct stacks ({sample_count} samples)")
        if summary is not None:
            logger.info("Hottest frames by self samples:\n" + format_hot_frames(summary))
        return folded, sample_count, summary

    def _render(self, collapsed: bytes) -> bytes:
        self._transition(RunState.RENDERING)
        # rendered into memory so a failed render never leaves a partial file
        rendered = io.BytesIO()
        try:
            self.render_stage.render(io.BytesIO(collapsed), rendered)
        except OSError as e:
            raise TransformError(
                f"unable to generate a flamegraph from the collapsed stack data: {e}",
                stage="render",
            ) from e
        return rendered.getvalue()

    @staticmethod
    def _write_file(path: Path, data: bytes, description: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            error = ArtifactWriteError(f"unable to create {description} output file {path}: {e}")
            handle_file_error(error, f"writing {path}", reraise=False, logger=logger)
            raise error from e


def generate_flamegraph_by_running_command(
    workload: WorkloadLike,
    flamegraph_filename: Union[str, Path],
    backend: Optional[SamplerBackend] = None,
    backend_name: Optional[str] = None,
    collapse_stage: Optional[CollapseStage] = None,
    render_stage: Optional[RenderStage] = None,
    render_format: Optional[str] = None,
    folded_output: Optional[Path] = None,
    top_frames: Optional[int] = None,
    platform_name: Optional[str] = None,
) -> RunReport:
    """
    Profile ``workload`` and write a flame graph to ``flamegraph_filename``.

    Components not passed explicitly are built from the loaded configuration.
    On any fatal condition a diagnostic is logged and the process exits with
    status 1.
    """
    try:
        config = get_config()

        if backend is None:
            sampling_config = config.sampling
            if backend_name:
                sampling_config = dataclasses.replace(sampling_config, backend=backend_name)
            backend = get_sampler_backend(platform_name, sampling_config)
        if collapse_stage is None:
            collapse_stage = create_collapse_stage(backend.collapse_format, config.transform)
        if render_stage is None:
            render_stage = create_render_stage(render_format, config.transform)

        runner = FlamegraphRunner(
            backend=backend,
            collapse_stage=collapse_stage,
            render_stage=render_stage,
            folded_output=folded_output,
            top_frames=config.output.top_frames if top_frames is None else top_frames,
        )
        return runner.run(workload, flamegraph_filename)
    except (FlamegraphError, ValidationError, ValueError) as e:
        handle_cli_error(
            error=e,
            context="flamegraph generation",
            exit_code=1,
            logger=logger,
        )
