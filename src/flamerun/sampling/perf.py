"""
Linux ``perf`` backend.

``perf record`` writes ``perf.data`` into the working directory; the samples
are read back through ``perf script`` on stdout, so no file handling is needed
here.
"""

import logging
from typing import Optional

from ..models.config import PerfSettings
from ..models.runtime import SamplingCommand, Workload
from ..system.commands import run_command
from ..validation import OutputRetrievalError
from .base import SamplerBackend

logger = logging.getLogger(__name__)


class PerfBackend(SamplerBackend):
    name = "perf"
    collapse_format = "perf"
    # perf script already demangles
    demangle = False

    def __init__(self, settings: Optional[PerfSettings] = None):
        settings = settings or PerfSettings()
        super().__init__(settings.executable)
        self.frequency = settings.frequency
        self.call_graph = settings.call_graph

    def build_command(self, workload: Workload) -> SamplingCommand:
        arguments = (
            "record",
            "-F",
            str(self.frequency),
            "--call-graph",
            self.call_graph,
            "-g",
            *workload.tokens,
        )
        return SamplingCommand(executable=self.executable, arguments=arguments)

    def retrieve_output(self) -> bytes:
        returncode, stdout, stderr = run_command([self.executable, "script"])
        if returncode != 0:
            detail = stderr.strip() or f"exit status {returncode}"
            raise OutputRetrievalError(f"unable to call {self.executable} script: {detail}")
        logger.debug(f"{self.executable} script produced {len(stdout)} bytes")
        return stdout
