"""
Data models used throughout the application.

Configuration Models:
- Backend selection and per-backend sampler settings
- Collapse/render tool settings, output defaults and logging

Runtime Models:
- The captured workload and the constructed sampler command
- Sampler termination status and its classified outcome
- Lifecycle states of a run

Result Models:
- The report returned after a flame graph has been written
"""

from .config import (
    AppConfig,
    DtraceSettings,
    LoggingConfig,
    OutputConfig,
    PerfSettings,
    SamplingConfig,
    TransformConfig,
)
from .runtime import (
    ExitOutcome,
    ExitOutcomeKind,
    ExitStatus,
    RunState,
    SamplingCommand,
    Workload,
)
from .results import RunReport

__all__ = [
    # Configuration
    "AppConfig",
    "DtraceSettings",
    "LoggingConfig",
    "OutputConfig",
    "PerfSettings",
    "SamplingConfig",
    "TransformConfig",
    # Runtime
    "ExitOutcome",
    "ExitOutcomeKind",
    "ExitStatus",
    "RunState",
    "SamplingCommand",
    "Workload",
    # Results
    "RunReport",
]
