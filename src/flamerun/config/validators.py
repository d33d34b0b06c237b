"""
Configuration validation utilities.

This module turns raw TOML sections into the typed configuration models,
applying defaults for missing keys and rejecting out-of-range values.
"""

import logging
from typing import Any, Dict

from ..models.config import (
    VALID_BACKENDS,
    VALID_LOG_LEVELS,
    VALID_RENDER_FORMATS,
    AppConfig,
    DtraceSettings,
    LoggingConfig,
    OutputConfig,
    PerfSettings,
    SamplingConfig,
    TransformConfig,
)
from ..validation import (
    ValidationError,
    validate_enum_choice,
    validate_positive_integer,
    validate_simple_command,
)

logger = logging.getLogger(__name__)


def _section(data: Dict[str, Any], key: str, prefix: str) -> Dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ValidationError(
            f"{prefix}{key} must be a table",
            field_name=f"{prefix}{key}",
            value=value,
        )
    return value


def validate_perf_settings(perf_data: Dict[str, Any]) -> PerfSettings:
    defaults = PerfSettings()
    return PerfSettings(
        executable=validate_simple_command(
            perf_data.get("executable", defaults.executable),
            field_name="sampling.perf.executable",
        ),
        frequency=validate_positive_integer(
            perf_data.get("frequency", defaults.frequency),
            min_value=1,
            max_value=100000,
            field_name="sampling.perf.frequency",
        ),
        call_graph=validate_enum_choice(
            perf_data.get("call_graph", defaults.call_graph),
            valid_choices=["dwarf", "fp", "lbr"],
            field_name="sampling.perf.call_graph",
        ),
    )


def validate_dtrace_settings(dtrace_data: Dict[str, Any]) -> DtraceSettings:
    defaults = DtraceSettings()
    stacks_file = dtrace_data.get("stacks_file", defaults.stacks_file)
    if not isinstance(stacks_file, str) or not stacks_file.strip():
        raise ValidationError(
            "sampling.dtrace.stacks_file must be a non-empty string",
            field_name="sampling.dtrace.stacks_file",
            value=stacks_file,
        )
    return DtraceSettings(
        executable=validate_simple_command(
            dtrace_data.get("executable", defaults.executable),
            field_name="sampling.dtrace.executable",
        ),
        frequency=validate_positive_integer(
            dtrace_data.get("frequency", defaults.frequency),
            min_value=1,
            max_value=100000,
            field_name="sampling.dtrace.frequency",
        ),
        ustack_frames=validate_positive_integer(
            dtrace_data.get("ustack_frames", defaults.ustack_frames),
            min_value=1,
            max_value=10000,
            field_name="sampling.dtrace.ustack_frames",
        ),
        stacks_file=stacks_file,
    )


def validate_sampling_config(sampling_data: Dict[str, Any]) -> SamplingConfig:
    """
    Validate and create a SamplingConfig from the ``[sampling]`` table.

    Raises:
        ValidationError: If validation fails
    """
    backend = validate_enum_choice(
        sampling_data.get("backend", "auto"),
        valid_choices=VALID_BACKENDS,
        field_name="sampling.backend",
        case_sensitive=False,
    )
    return SamplingConfig(
        backend=backend,
        perf=validate_perf_settings(_section(sampling_data, "perf", "sampling.")),
        dtrace=validate_dtrace_settings(_section(sampling_data, "dtrace", "sampling.")),
    )


def validate_transform_config(transform_data: Dict[str, Any]) -> TransformConfig:
    """
    Validate and create a TransformConfig from the ``[transform]`` table.

    Raises:
        ValidationError: If validation fails
    """
    defaults = TransformConfig()
    title = transform_data.get("title", defaults.title)
    if not isinstance(title, str):
        raise ValidationError(
            "transform.title must be a string",
            field_name="transform.title",
            value=title,
        )
    return TransformConfig(
        collapse_perf=validate_simple_command(
            transform_data.get("collapse_perf", defaults.collapse_perf),
            field_name="transform.collapse_perf",
        ),
        collapse_dtrace=validate_simple_command(
            transform_data.get("collapse_dtrace", defaults.collapse_dtrace),
            field_name="transform.collapse_dtrace",
        ),
        flamegraph=validate_simple_command(
            transform_data.get("flamegraph", defaults.flamegraph),
            field_name="transform.flamegraph",
        ),
        render_format=validate_enum_choice(
            transform_data.get("render_format", defaults.render_format),
            valid_choices=VALID_RENDER_FORMATS,
            field_name="transform.render_format",
            case_sensitive=False,
        ),
        title=title,
    )


def validate_output_config(output_data: Dict[str, Any]) -> OutputConfig:
    defaults = OutputConfig()
    default_output = output_data.get("default_output", defaults.default_output)
    if not isinstance(default_output, str) or not default_output.strip():
        raise ValidationError(
            "output.default_output must be a non-empty string",
            field_name="output.default_output",
            value=default_output,
        )
    return OutputConfig(
        default_output=default_output,
        top_frames=validate_positive_integer(
            output_data.get("top_frames", defaults.top_frames),
            min_value=0,
            max_value=1000,
            field_name="output.top_frames",
        ),
    )


def validate_logging_config(logging_data: Dict[str, Any]) -> LoggingConfig:
    return LoggingConfig(
        level=validate_enum_choice(
            logging_data.get("level", "INFO"),
            valid_choices=VALID_LOG_LEVELS,
            field_name="logging.level",
            case_sensitive=False,
        )
    )


def validate_app_config(config_data: Dict[str, Any]) -> AppConfig:
    """
    Validate the whole configuration document.

    Every section is optional; missing keys fall back to the model defaults.

    Raises:
        ValidationError: If any section fails validation
    """
    app_config = AppConfig(
        sampling=validate_sampling_config(_section(config_data, "sampling", "")),
        transform=validate_transform_config(_section(config_data, "transform", "")),
        output=validate_output_config(_section(config_data, "output", "")),
        logging=validate_logging_config(_section(config_data, "logging", "")),
    )
    logger.debug(
        f"Validated configuration: backend={app_config.sampling.backend}, "
        f"render_format={app_config.transform.render_format}"
    )
    return app_config
