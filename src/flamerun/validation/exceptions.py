"""
Exception types and error handling helpers.

This module holds the validation error used by the configuration layer and the
fatal error hierarchy raised by the sampling pipeline, together with the
logging helpers that report them consistently.
"""

import logging
import sys
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

if TYPE_CHECKING:
    from ..models.runtime import ExitOutcome

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    This is the main exception type used throughout the validation system.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


# --- Pipeline errors ---


class FlamegraphError(Exception):
    """Base class for every fatal condition of a sampling run."""


class SignalSetupError(FlamegraphError):
    """The interrupt handler could not be installed or restored."""


class SpawnError(FlamegraphError):
    """The sampling tool could not be started."""


class WaitError(FlamegraphError):
    """Waiting on the sampling tool failed (not the same as the tool failing)."""


class SamplingFailedError(FlamegraphError):
    """The sampler exited unsuccessfully for a reason other than a user interrupt."""

    def __init__(self, message: str, outcome: Optional["ExitOutcome"] = None):
        super().__init__(message)
        self.outcome = outcome


class OutputRetrievalError(FlamegraphError):
    """Raw sample data could not be obtained from the sampler."""


class TransformError(FlamegraphError):
    """The collapse or render stage failed."""

    def __init__(self, message: str, stage: str = "transform"):
        super().__init__(message)
        self.stage = stage


class ArtifactWriteError(FlamegraphError):
    """An output file could not be written."""


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_file_error(error: Exception, context: str, **kwargs) -> None:
    """Handle file-related errors."""
    handle_error(error, f"file {context}", **kwargs)


def handle_subprocess_error(error: Exception, command: str, **kwargs) -> None:
    """Handle subprocess-related errors."""
    handle_error(error, f"subprocess command '{command}'", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Log a fatal error and terminate the process with ``exit_code``."""
    exit_code = kwargs.pop('exit_code', 1)
    include_traceback = kwargs.pop('include_traceback', False)

    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    if include_traceback:
        severity = ErrorSeverity.CRITICAL
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    sys.exit(exit_code)
