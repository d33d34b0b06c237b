"""
DTrace backend for macOS, the BSDs and illumos.

DTrace writes aggregated user stacks to an intermediate file. The file belongs
to this backend: ``retrieve_output`` reads it once and removes it, so a second
retrieval always fails.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import DtraceSettings
from ..models.runtime import SamplingCommand, Workload
from ..validation import OutputRetrievalError
from .base import SamplerBackend

logger = logging.getLogger(__name__)


class DtraceBackend(SamplerBackend):
    name = "dtrace"
    collapse_format = "dtrace"
    # dtrace is started with -xmangled; names are demangled by the collapser
    demangle = True

    def __init__(self, settings: Optional[DtraceSettings] = None):
        settings = settings or DtraceSettings()
        super().__init__(settings.executable)
        self.frequency = settings.frequency
        self.ustack_frames = settings.ustack_frames
        self.stacks_file = Path(settings.stacks_file)

    @property
    def probe_script(self) -> str:
        return (
            f"profile-{self.frequency} /pid == $target/ "
            f"{{ @[ustack({self.ustack_frames})] = count(); }}"
        )

    def build_command(self, workload: Workload) -> SamplingCommand:
        arguments = (
            "-xmangled",
            "-x",
            f"ustackframes={self.ustack_frames}",
            "-n",
            self.probe_script,
            "-o",
            str(self.stacks_file),
            "-c",
            workload.command_line,
        )
        return SamplingCommand(executable=self.executable, arguments=arguments)

    def retrieve_output(self) -> bytes:
        try:
            with open(self.stacks_file, "rb") as f:
                data = f.read()
        except FileNotFoundError as e:
            raise OutputRetrievalError(
                f"failed to open dtrace output file {self.stacks_file}"
            ) from e
        except OSError as e:
            raise OutputRetrievalError(
                f"failed to read dtrace expected output file {self.stacks_file}: {e}"
            ) from e

        try:
            self.stacks_file.unlink()
        except OSError as e:
            raise OutputRetrievalError(
                f"unable to remove {self.stacks_file} temporary file: {e}"
            ) from e

        logger.debug(f"Read {len(data)} bytes from {self.stacks_file} and removed it")
        return data
