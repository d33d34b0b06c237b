"""
Interrupt suppression while the sampler runs.

Ctrl+C delivers SIGINT to every process in the foreground process group, which
includes the sampler and the profiled workload. While a SignalGuard is held
this process ignores that SIGINT (through a handler that does nothing), so the
workload can be cancelled while the sampler is still allowed to flush its data
and exit, and the post-processing stages still run afterwards.
"""

import logging
import signal
from typing import Any, Callable, Optional, Union

from ..validation import SignalSetupError

logger = logging.getLogger(__name__)

Handler = Union[Callable[[int, Any], Any], int, None]


def _ignore_interrupt(signum: int, frame: Any) -> None:
    pass


class SignalGuard:
    """
    Scoped replacement of the SIGINT disposition.

    Usage::

        with SignalGuard():
            process = backend.spawn(command)
            status = backend.wait(process)
    """

    def __init__(self, signum: int = signal.SIGINT):
        self.signum = signum
        self._previous_handler: Handler = None
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    def acquire(self) -> "SignalGuard":
        """
        Install the no-op handler, remembering the current one.

        Raises:
            SignalSetupError: If the handler cannot be registered
            RuntimeError: If this guard is already held
        """
        if self._held:
            raise RuntimeError("SignalGuard is already held")
        try:
            self._previous_handler = signal.signal(self.signum, _ignore_interrupt)
        except (ValueError, OSError) as e:
            raise SignalSetupError(f"cannot register signal handler: {e}") from e
        self._held = True
        logger.debug(f"Ignoring {signal.Signals(self.signum).name} while sampling")
        return self

    def release(self) -> None:
        """
        Restore the handler that was active before ``acquire``.

        Releasing a guard that is not held does nothing.

        Raises:
            SignalSetupError: If the previous handler cannot be reinstated
        """
        if not self._held:
            return
        # None means the previous handler was not installed from Python
        previous = self._previous_handler if self._previous_handler is not None else signal.SIG_DFL
        try:
            signal.signal(self.signum, previous)
        except (ValueError, OSError, TypeError) as e:
            raise SignalSetupError(f"cannot restore signal handler: {e}") from e
        finally:
            self._held = False
            self._previous_handler = None
        logger.debug(f"Restored {signal.Signals(self.signum).name} handler")

    def __enter__(self) -> "SignalGuard":
        return self.acquire()

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        try:
            self.release()
        except SignalSetupError:
            # an error already propagating takes precedence
            if exc_type is None:
                raise
            logger.error("Failed to restore signal handler during abort", exc_info=True)
        return None
