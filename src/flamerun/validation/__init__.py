"""
Validation and error handling for the flamerun package.

This module provides input validation, the fatal error hierarchy of the
sampling pipeline and consistent error reporting across the application.
"""

from .exceptions import (
    ArtifactWriteError,
    ErrorSeverity,
    FlamegraphError,
    OutputRetrievalError,
    SamplingFailedError,
    SignalSetupError,
    SpawnError,
    TransformError,
    ValidationError,
    WaitError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_file_error,
    handle_subprocess_error,
)

from .validators import (
    validate_enum_choice,
    validate_path_exists,
    validate_positive_integer,
    validate_simple_command,
    validate_workload_tokens,
)

__all__ = [
    # Errors
    "ErrorSeverity",
    "ValidationError",
    "FlamegraphError",
    "SignalSetupError",
    "SpawnError",
    "WaitError",
    "SamplingFailedError",
    "OutputRetrievalError",
    "TransformError",
    "ArtifactWriteError",
    # Handlers
    "handle_error",
    "handle_config_error",
    "handle_file_error",
    "handle_subprocess_error",
    "handle_cli_error",
    # Validators
    "validate_enum_choice",
    "validate_path_exists",
    "validate_positive_integer",
    "validate_simple_command",
    "validate_workload_tokens",
]
