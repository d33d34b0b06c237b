"""
Abstract base class for sampler backends.

A backend knows how to wrap a workload in a platform-specific sampling tool,
how to start and wait for that tool, and where the tool leaves its raw output
once it has exited.
"""

import logging
from abc import ABC, abstractmethod

import psutil

from ..models.runtime import ExitStatus, SamplingCommand, Workload
from ..validation import SpawnError, WaitError

logger = logging.getLogger(__name__)


class SamplerBackend(ABC):
    """
    Base class for a sampling tool integration.

    Subclasses set the class-level identity fields and implement
    ``build_command`` and ``retrieve_output``. Spawning and waiting are shared
    so every backend reports failures the same way.
    """

    #: Short name used in log messages ("perf", "dtrace").
    name: str = ""
    #: Input format expected by the collapse stage for this backend's output.
    collapse_format: str = ""
    #: Whether the collapse stage has to demangle symbol names.
    demangle: bool = False

    def __init__(self, executable: str):
        self.executable = executable

    @property
    def spawn_error(self) -> str:
        return f"could not spawn {self.name}"

    @property
    def wait_error(self) -> str:
        return f"unable to wait for {self.name} child command to exit"

    @abstractmethod
    def build_command(self, workload: Workload) -> SamplingCommand:
        """Construct the sampler invocation that runs ``workload``."""

    @abstractmethod
    def retrieve_output(self) -> bytes:
        """
        Return the raw sampled stacks produced by the last run.

        Raises:
            OutputRetrievalError: If the data cannot be obtained
        """

    def spawn(self, command: SamplingCommand) -> psutil.Popen:
        """
        Start the sampler.

        Raises:
            SpawnError: If the executable cannot be launched
        """
        logger.debug(f"Spawning {self.name}: {command}")
        try:
            process = psutil.Popen(command.argv)
        except OSError as e:
            raise SpawnError(f"{self.spawn_error}: {e}") from e
        logger.info(f"{self.name} started with PID {process.pid}")
        return process

    def wait(self, process: psutil.Popen) -> ExitStatus:
        """
        Block until the sampler exits and report how it terminated.

        Raises:
            WaitError: If the wait itself fails
        """
        try:
            returncode = process.wait()
        except (OSError, psutil.Error) as e:
            raise WaitError(f"{self.wait_error}: {e}") from e
        status = ExitStatus.from_returncode(returncode)
        logger.debug(f"{self.name} (PID {process.pid}) {status.describe()}")
        return status

    def __repr__(self) -> str:
        return f"{type(self).__name__}(executable={self.executable!r})"
