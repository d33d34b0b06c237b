"""
Command-line interface for flamerun.

Runs a command under the platform's sampling profiler and writes a flame graph
of where it spent its CPU time.

Usage:
    flamerun [options] -- command [args...]

Example:
    flamerun -o build.svg -- make -j8
    flamerun --format html --top 20 -- ./target/release/server --bench
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path
from ..models.config import VALID_BACKENDS, VALID_RENDER_FORMATS
from ..orchestration import generate_flamegraph_by_running_command
from ..transform import create_render_stage
from ..validation import (
    ValidationError,
    handle_cli_error,
    validate_path_exists,
    validate_positive_integer,
    validate_workload_tokens,
)

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flamerun",
        description="Profile a command with perf or dtrace and render a flame graph.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file for the flame graph. Defaults to output.default_output from config.",
    )
    parser.add_argument(
        "--format",
        dest="render_format",
        choices=VALID_RENDER_FORMATS,
        help="'svg' renders with inferno-flamegraph, 'html' renders an interactive icicle chart.",
    )
    parser.add_argument(
        "--backend",
        choices=VALID_BACKENDS,
        help="Sampler to use. 'auto' picks perf on Linux and dtrace elsewhere.",
    )
    parser.add_argument(
        "--save-folded",
        type=Path,
        metavar="PATH",
        help="Also write the collapsed stacks to PATH.",
    )
    parser.add_argument(
        "--top",
        type=str,
        metavar="N",
        help="Log the N hottest frames after collapsing.",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to a config.toml file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="The command to profile, usually given after '--'.",
    )
    return parser


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for flamerun.

    Parses arguments, loads configuration and runs the sampling pipeline.

    Raises:
        SystemExit: With status 1 on configuration errors, invalid arguments
            or any failure of the pipeline.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    tokens = list(args.command)
    if tokens and tokens[0] == "--":
        tokens = tokens[1:]

    try:
        workload_tokens = validate_workload_tokens(tokens, field_name="command")
    except ValidationError as e:
        handle_cli_error(
            error=e,
            context="command validation",
            exit_code=1,
            logger=logger,
        )

    if args.config:
        try:
            set_config_path(Path(validate_path_exists(args.config, field_name="--config")))
        except ValidationError as e:
            handle_cli_error(
                error=e,
                context="configuration path",
                exit_code=1,
                logger=logger,
            )

    try:
        app_config = get_config()
    except Exception as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            include_traceback=args.verbose,
            logger=logger,
        )

    logging.getLogger().setLevel(logging.DEBUG if args.verbose else app_config.logging.level)

    top_frames = None
    if args.top is not None:
        try:
            top_frames = validate_positive_integer(
                args.top, min_value=0, max_value=1000, field_name="--top argument"
            )
        except ValidationError as e:
            handle_cli_error(
                error=e,
                context="--top validation",
                exit_code=1,
                logger=logger,
            )

    render_stage = create_render_stage(args.render_format, app_config.transform)
    output = args.output
    if output is None:
        output = Path(app_config.output.default_output).with_suffix(render_stage.file_suffix)

    report = generate_flamegraph_by_running_command(
        workload_tokens,
        output,
        backend_name=args.backend,
        render_stage=render_stage,
        folded_output=args.save_folded,
        top_frames=top_frames,
    )

    logger.info(
        f"Flame graph written to {report.artifact_path} "
        f"({report.sample_count} samples, sampled for {report.sampling_seconds:.1f}s)"
    )


if __name__ == "__main__":
    main_cli()
