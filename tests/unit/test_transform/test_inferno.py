"""
Unit tests for the inferno-backed collapse and render stages.

run_command is patched so the inferno tools do not need to be installed.
"""

import io
from unittest.mock import patch

import pytest

from conftest import SAMPLE_FOLDED, SAMPLE_PERF_SCRIPT
from flamerun.models.config import TransformConfig
from flamerun.transform.factory import create_collapse_stage, create_render_stage
from flamerun.transform.icicle import IcicleRenderStage
from flamerun.transform.inferno import InfernoCollapseStage, InfernoRenderStage
from flamerun.validation import TransformError


@pytest.mark.unit
class TestInfernoCollapseStage:
    """Test cases for InfernoCollapseStage."""

    def test_command_with_and_without_demangle(self):
        stage = InfernoCollapseStage("inferno-collapse-dtrace")

        assert stage.command() == ["inferno-collapse-dtrace"]
        assert stage.command(demangle=True) == ["inferno-collapse-dtrace", "--demangle"]

    def test_collapse_pipes_input_through_tool(self):
        """Raw samples go to stdin; stdout lands in the writer."""
        stage = InfernoCollapseStage("inferno-collapse-perf")
        writer = io.BytesIO()

        with patch(
            "flamerun.transform.inferno.run_command",
            return_value=(0, SAMPLE_FOLDED, ""),
        ) as mock_run:
            stage.collapse(io.BytesIO(SAMPLE_PERF_SCRIPT), writer)

        mock_run.assert_called_once_with(["inferno-collapse-perf"], input_data=SAMPLE_PERF_SCRIPT)
        assert writer.getvalue() == SAMPLE_FOLDED

    def test_collapse_failure(self):
        """A failing collapser raises TransformError tagged with its stage."""
        stage = InfernoCollapseStage("inferno-collapse-perf")

        with patch(
            "flamerun.transform.inferno.run_command",
            return_value=(1, b"", "invalid input"),
        ):
            with pytest.raises(TransformError) as exc_info:
                stage.collapse(io.BytesIO(b"garbage"), io.BytesIO())

        assert exc_info.value.stage == "collapse"
        assert "unable to collapse generated profile data" in str(exc_info.value)
        assert "invalid input" in str(exc_info.value)

    def test_missing_tool(self):
        """An uninstalled collapser is reported rather than crashing."""
        stage = InfernoCollapseStage("inferno-collapse-not-installed-xyz")

        with pytest.raises(TransformError) as exc_info:
            stage.collapse(io.BytesIO(SAMPLE_PERF_SCRIPT), io.BytesIO())

        assert "Command not found" in str(exc_info.value)


@pytest.mark.unit
class TestInfernoRenderStage:
    """Test cases for InfernoRenderStage."""

    def test_command_with_title_and_extra_args(self):
        stage = InfernoRenderStage("inferno-flamegraph", title="build", extra_args=["--inverted"])

        assert stage.command() == ["inferno-flamegraph", "--title", "build", "--inverted"]

    def test_command_without_title(self):
        assert InfernoRenderStage().command() == ["inferno-flamegraph"]

    def test_render_writes_svg(self):
        """The renderer's stdout is the artifact."""
        svg = b"<?xml version='1.0'?><svg></svg>"
        writer = io.BytesIO()

        with patch("flamerun.transform.inferno.run_command", return_value=(0, svg, "")) as mock_run:
            InfernoRenderStage().render(io.BytesIO(SAMPLE_FOLDED), writer)

        mock_run.assert_called_once_with(["inferno-flamegraph"], input_data=SAMPLE_FOLDED)
        assert writer.getvalue() == svg

    def test_render_failure(self):
        """Empty input makes inferno-flamegraph fail; that is a TransformError."""
        with patch(
            "flamerun.transform.inferno.run_command",
            return_value=(1, b"", "No stack counts found"),
        ):
            with pytest.raises(TransformError) as exc_info:
                InfernoRenderStage().render(io.BytesIO(b""), io.BytesIO())

        assert exc_info.value.stage == "render"
        assert "unable to generate a flamegraph from the collapsed stack data" in str(exc_info.value)


@pytest.mark.unit
class TestStageFactories:
    """Test cases for the transform factories."""

    def test_collapse_stage_per_format(self):
        assert create_collapse_stage("perf").executable == "inferno-collapse-perf"
        assert create_collapse_stage("dtrace").executable == "inferno-collapse-dtrace"

    def test_collapse_stage_uses_config(self):
        config = TransformConfig(collapse_perf="/opt/inferno/collapse-perf")

        assert create_collapse_stage("perf", config).executable == "/opt/inferno/collapse-perf"

    def test_unknown_collapse_format(self):
        with pytest.raises(ValueError):
            create_collapse_stage("xperf")

    def test_render_stage_defaults_to_svg(self):
        stage = create_render_stage()

        assert isinstance(stage, InfernoRenderStage)
        assert stage.file_suffix == ".svg"
        assert stage.title is None

    def test_render_stage_html_with_title(self):
        stage = create_render_stage("HTML", TransformConfig(title="nightly build"))

        assert isinstance(stage, IcicleRenderStage)
        assert stage.title == "nightly build"
        assert stage.file_suffix == ".html"

    def test_render_format_from_config(self):
        assert isinstance(create_render_stage(None, TransformConfig(render_format="html")), IcicleRenderStage)

    def test_unknown_render_format(self):
        with pytest.raises(ValueError):
            create_render_stage("png")
