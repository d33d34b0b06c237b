"""
Configuration data models.

This module contains the configuration structures for the sampling backends,
the collapse/render transforms, output defaults and logging.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class PerfSettings:
    """
    Settings for the Linux ``perf`` backend, loaded from ``[sampling.perf]``.
    """

    executable: str = "perf"
    # Sampling frequency in Hz passed to ``perf record -F``.
    frequency: int = 99
    # Unwinding method passed to ``--call-graph``.
    call_graph: str = "dwarf"


@dataclass
class DtraceSettings:
    """
    Settings for the ``dtrace`` backend, loaded from ``[sampling.dtrace]``.
    """

    executable: str = "dtrace"
    # Rate of the ``profile-<N>`` probe.
    frequency: int = 997
    # Depth of the captured user stacks.
    ustack_frames: int = 100
    # Intermediate file written by dtrace and removed after retrieval.
    stacks_file: str = "cargo-flamegraph.stacks"


@dataclass
class SamplingConfig:
    """Backend selection and per-backend settings."""

    # "auto", "perf" or "dtrace"
    backend: str = "auto"
    perf: PerfSettings = field(default_factory=PerfSettings)
    dtrace: DtraceSettings = field(default_factory=DtraceSettings)


@dataclass
class TransformConfig:
    """
    External tools used to collapse and render the sampled stacks.
    """

    collapse_perf: str = "inferno-collapse-perf"
    collapse_dtrace: str = "inferno-collapse-dtrace"
    flamegraph: str = "inferno-flamegraph"
    # "svg" renders through ``flamegraph``; "html" renders a plotly icicle chart.
    render_format: str = "svg"
    # Empty string keeps the renderer's default title.
    title: str = ""


@dataclass
class OutputConfig:
    """Defaults for the produced artifacts."""

    default_output: str = "flamegraph.svg"
    # Number of hottest frames to log after collapsing; 0 disables the summary.
    top_frames: int = 0


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class AppConfig:
    """
    The root configuration object that holds all other configuration models.
    """

    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    transform: TransformConfig = field(default_factory=TransformConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


VALID_BACKENDS: List[str] = ["auto", "perf", "dtrace"]
VALID_RENDER_FORMATS: List[str] = ["svg", "html"]
VALID_LOG_LEVELS: List[str] = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
