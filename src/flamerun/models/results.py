"""
Result data models.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .runtime import ExitOutcome

if TYPE_CHECKING:
    import polars as pl


@dataclass
class RunReport:
    """
    Summary of a completed run, returned once the flame graph is written.
    """

    outcome: ExitOutcome
    artifact_path: Path
    # Sizes in bytes of the intermediate data.
    raw_bytes: int
    collapsed_bytes: int
    # Number of distinct folded stacks and total sample count.
    stack_count: int = 0
    sample_count: int = 0
    # Wall-clock time spent waiting on the sampler.
    sampling_seconds: float = 0.0
    folded_path: Optional[Path] = None
    hot_frames: Optional["pl.DataFrame"] = None
