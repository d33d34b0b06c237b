"""
Orchestration of a sampling run.

Components:
- FlamegraphRunner: drives one run from spawning the sampler to writing the artifact
- SignalGuard: keeps SIGINT from killing this process while the sampler runs
- classify: interprets the sampler's exit status
- generate_flamegraph_by_running_command: configuration-driven entry point that
  exits the process with status 1 on failure
"""

from .exit_classifier import USER_INTERRUPT_SIGNALS, classify
from .runner import FlamegraphRunner, generate_flamegraph_by_running_command
from .signal_guard import SignalGuard

__all__ = [
    "FlamegraphRunner",
    "SignalGuard",
    "USER_INTERRUPT_SIGNALS",
    "classify",
    "generate_flamegraph_by_running_command",
]
