"""
Command execution utilities.

This module provides helpers for running the external tools the pipeline
depends on (``perf script`` and the collapse/render filters).
"""

import logging
import subprocess
from typing import Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


def run_command(
    argv: Sequence[str],
    input_data: Optional[bytes] = None,
) -> Tuple[int, bytes, str]:
    """Execute a command, optionally feeding it stdin, and capture its output.

    Stdout is returned as raw bytes because profiler output is not guaranteed
    to be valid UTF-8; stderr is decoded for diagnostics.

    Args:
        argv: The command and its arguments.
        input_data: Bytes written to the command's stdin, or None.

    Returns:
        Tuple of (return_code, stdout_bytes, stderr_string).
        return_code is -1 when the command could not be launched.
    """
    command_str = " ".join(argv)
    logger.debug(f"Executing command: '{command_str}'")
    try:
        process = subprocess.run(
            list(argv),
            input=input_data,
            capture_output=True,
            check=False,
        )
        stderr = process.stderr.decode("utf-8", errors="replace") if process.stderr else ""
        return process.returncode, process.stdout or b"", stderr
    except FileNotFoundError as e:
        logger.error(f"Command not found: {argv[0]}: {type(e).__name__}: {e}")
        return -1, b"", f"Error: Command not found '{argv[0]}'"
    except OSError as e:
        logger.error(
            f"Unexpected error while running command '{command_str[:50]}': {type(e).__name__}: {e}"
        )
        return -1, b"", f"An unexpected error occurred: {e}"
