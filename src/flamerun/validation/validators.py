"""
Simplified validation functions.

This module provides the validation helpers used when turning raw TOML data
and command-line input into typed configuration.
"""

import os
import shlex
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union

from .exceptions import ValidationError


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate that a value is a positive integer.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated integer value

    Raises:
        ValidationError: If validation fails
    """
    # bool is an int subclass; "true" is never a sample rate
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    if int_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and int_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    return int_value


def validate_path_exists(path: Union[str, Path], field_name: str = "path") -> str:
    """
    Validate that a path exists.

    Args:
        path: Path to validate
        field_name: Name of the field being validated

    Returns:
        Validated path string

    Raises:
        ValidationError: If path doesn't exist
    """
    path_str = str(path)
    if not os.path.exists(path_str):
        raise ValidationError(
            f"{field_name} does not exist: {path_str}",
            field_name=field_name,
            value=path_str
        )
    return path_str


def validate_simple_command(command: str, field_name: str = "command") -> str:
    """
    Validate that a command name is a non-empty string without surrounding blanks.

    Args:
        command: Command to validate
        field_name: Name of the field being validated

    Returns:
        Validated command

    Raises:
        ValidationError: If command is invalid
    """
    if not command or not isinstance(command, str) or not command.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=command
        )
    return command.strip()


def validate_workload_tokens(
    workload: Union[str, Sequence[str]],
    field_name: str = "workload"
) -> Tuple[str, ...]:
    """
    Normalise a workload into a tuple of command tokens.

    Strings are split with shell quoting rules; sequences are taken verbatim.

    Raises:
        ValidationError: If the workload is empty or malformed
    """
    if isinstance(workload, str):
        try:
            tokens = shlex.split(workload)
        except ValueError as e:
            raise ValidationError(
                f"{field_name} could not be parsed: {e}",
                field_name=field_name,
                value=workload
            )
    else:
        tokens = list(workload)

    if not tokens:
        raise ValidationError(
            f"{field_name} must name a command to run",
            field_name=field_name,
            value=workload
        )
    for token in tokens:
        if not isinstance(token, str):
            raise ValidationError(
                f"{field_name} tokens must be strings, got {token!r}",
                field_name=field_name,
                value=workload
            )
    return tuple(tokens)


def validate_enum_choice(
    value: Any,
    valid_choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Args:
        value: Value to validate
        valid_choices: List of allowed choices
        field_name: Name of the field being validated
        case_sensitive: Whether the comparison should be case-sensitive

    Returns:
        Validated choice

    Raises:
        ValidationError: If value is not one of valid_choices
    """
    str_value = str(value)

    if case_sensitive:
        if str_value not in valid_choices:
            raise ValidationError(
                f"{field_name} must be one of {valid_choices}, got {value}",
                field_name=field_name,
                value=value
            )
        return str_value

    lower_choices = [choice.lower() for choice in valid_choices]
    lower_value = str_value.lower()
    if lower_value not in lower_choices:
        raise ValidationError(
            f"{field_name} must be one of {valid_choices}, got {value}",
            field_name=field_name,
            value=value
        )
    return valid_choices[lower_choices.index(lower_value)]
