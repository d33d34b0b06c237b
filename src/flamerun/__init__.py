"""
flamerun: sample a running command and render a flame graph.

The package wraps a workload in the platform's sampling profiler (``perf`` on
Linux, ``dtrace`` elsewhere), survives the user's Ctrl+C while the sampler
winds down, and pushes the sampled stacks through a collapse stage and a
render stage.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Data structures and type definitions
- validation: Input validation and the pipeline's error types
- system: External command execution
- sampling: perf and dtrace backends
- transform: Collapse and render stages
- analysis: Folded stack statistics
- orchestration: Signal handling, exit classification and the run itself
- cli: Command-line interface

Usage:
    From command line:
        flamerun -o profile.svg -- ./my-program --arg

    Programmatically:
        from flamerun import generate_flamegraph_by_running_command
        generate_flamegraph_by_running_command(["./my-program", "--arg"], "profile.svg")
"""

from .config import get_config, clear_config_cache, set_config_path
from .orchestration import (
    FlamegraphRunner,
    SignalGuard,
    classify,
    generate_flamegraph_by_running_command,
)
from .cli import main_cli

from .models import (
    AppConfig,
    ExitOutcome,
    ExitOutcomeKind,
    ExitStatus,
    RunReport,
    RunState,
    SamplingCommand,
    Workload,
)

from .sampling import DtraceBackend, PerfBackend, SamplerBackend, get_sampler_backend

from .transform import (
    CollapseStage,
    IcicleRenderStage,
    InfernoCollapseStage,
    InfernoRenderStage,
    RenderStage,
)

from .validation import (
    ArtifactWriteError,
    FlamegraphError,
    OutputRetrievalError,
    SamplingFailedError,
    SignalSetupError,
    SpawnError,
    TransformError,
    ValidationError,
    WaitError,
)

__version__ = "0.1.0"

__all__ = [
    # Main interfaces
    "generate_flamegraph_by_running_command",
    "FlamegraphRunner",
    "SignalGuard",
    "classify",
    "main_cli",
    "get_config",
    "clear_config_cache",
    "set_config_path",
    # Models
    "AppConfig",
    "ExitOutcome",
    "ExitOutcomeKind",
    "ExitStatus",
    "RunReport",
    "RunState",
    "SamplingCommand",
    "Workload",
    # Backends
    "SamplerBackend",
    "PerfBackend",
    "DtraceBackend",
    "get_sampler_backend",
    # Transforms
    "CollapseStage",
    "RenderStage",
    "InfernoCollapseStage",
    "InfernoRenderStage",
    "IcicleRenderStage",
    # Errors
    "FlamegraphError",
    "SignalSetupError",
    "SpawnError",
    "WaitError",
    "SamplingFailedError",
    "OutputRetrievalError",
    "TransformError",
    "ArtifactWriteError",
    "ValidationError",
]
