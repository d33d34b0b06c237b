"""
Pytest configuration and shared fixtures for the flamerun test suite.

This module provides common fixtures, in-process stand-ins for the external
collapse/render tools, and a sampler backend that runs a small Python script
instead of a real profiler.
"""

import shutil
import sys
import tempfile
from pathlib import Path
from typing import BinaryIO, List, Optional

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from flamerun.models.runtime import SamplingCommand, Workload  # noqa: E402
from flamerun.sampling.base import SamplerBackend  # noqa: E402
from flamerun.transform.base import CollapseStage, RenderStage  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Sample Data
# ============================================================================

SAMPLE_FOLDED = (
    b"main;parse_args 3\n"
    b"main;run;compute;multiply 40\n"
    b"main;run;compute 10\n"
    b"main;run;io_wait 7\n"
)

SAMPLE_PERF_SCRIPT = (
    b"myapp 12345 1000.000001:   10101010 cpu-clock:\n"
    b"\t    55d0c3a1b2c3 multiply+0x13 (/usr/bin/myapp)\n"
    b"\t    55d0c3a1b000 compute+0x20 (/usr/bin/myapp)\n"
    b"\t    55d0c3a1a000 main+0x40 (/usr/bin/myapp)\n"
    b"\n"
)

SAMPLE_DTRACE_STACKS = (
    b"\n"
    b"              myapp`_ZN5myapp7compute17h0123456789abcdefE+0x13\n"
    b"              myapp`main+0x40\n"
    b"               42\n"
)


# ============================================================================
# In-process pipeline stand-ins
# ============================================================================


class PassthroughCollapseStage(CollapseStage):
    """Treats the raw input as already folded and records how it was called."""

    def __init__(self):
        self.calls: List[bool] = []

    def collapse(self, reader: BinaryIO, writer: BinaryIO, demangle: bool = False) -> None:
        self.calls.append(demangle)
        writer.write(reader.read())


class TextRenderStage(RenderStage):
    """Wraps the folded lines in a minimal SVG document."""

    file_suffix = ".svg"

    def __init__(self):
        self.rendered: List[bytes] = []

    def render(self, reader: BinaryIO, writer: BinaryIO) -> None:
        folded = reader.read()
        self.rendered.append(folded)
        writer.write(b"<svg xmlns='http://www.w3.org/2000/svg'><!--\n" + folded + b"--></svg>\n")


class ScriptedBackend(SamplerBackend):
    """
    Runs ``python -c <script>`` as the "sampler" and hands back canned output.

    The workload tokens are ignored; the script decides how the sampler exits.
    """

    name = "scripted"
    collapse_format = "perf"
    demangle = False

    def __init__(self, script: str = "pass", raw_output: bytes = SAMPLE_FOLDED):
        super().__init__(sys.executable)
        self.script = script
        self.raw_output = raw_output
        self.built: List[Workload] = []
        self.retrievals = 0

    def build_command(self, workload: Workload) -> SamplingCommand:
        self.built.append(workload)
        return SamplingCommand(executable=self.executable, arguments=("-c", self.script))

    def retrieve_output(self) -> bytes:
        self.retrievals += 1
        return self.raw_output


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def collapse_stage():
    return PassthroughCollapseStage()


@pytest.fixture
def render_stage():
    return TextRenderStage()


@pytest.fixture
def scripted_backend():
    """Factory for ScriptedBackend instances."""

    def _make(script: str = "pass", raw_output: Optional[bytes] = None) -> ScriptedBackend:
        if raw_output is None:
            raw_output = SAMPLE_FOLDED
        return ScriptedBackend(script=script, raw_output=raw_output)

    return _make


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "sampling": {
            "backend": "auto",
            "perf": {"executable": "perf", "frequency": 99, "call_graph": "dwarf"},
            "dtrace": {
                "executable": "dtrace",
                "frequency": 997,
                "ustack_frames": 100,
                "stacks_file": "cargo-flamegraph.stacks",
            },
        },
        "transform": {
            "collapse_perf": "inferno-collapse-perf",
            "collapse_dtrace": "inferno-collapse-dtrace",
            "flamegraph": "inferno-flamegraph",
            "render_format": "svg",
            "title": "",
        },
        "output": {"default_output": "flamegraph.svg", "top_frames": 0},
        "logging": {"level": "INFO"},
    }


@pytest.fixture
def config_files(temp_dir, sample_config_data):
    """Write a config.toml built from sample_config_data."""
    import toml

    config_file = temp_dir / "config.toml"
    with open(config_file, "w") as f:
        toml.dump(sample_config_data, f)

    return {"config": config_file, "dir": temp_dir}


@pytest.fixture(autouse=True)
def isolated_config(tmp_path):
    """
    Point the configuration singleton at a missing file so every test starts
    from built-in defaults, and restore the default path afterwards.
    """
    from flamerun.config import clear_config_cache, set_config_path

    original_config_path = Path(__file__).parent.parent / "conf" / "config.toml"
    set_config_path(tmp_path / "no-config.toml")

    yield

    clear_config_cache()
    set_config_path(original_config_path)
