"""
Tests for the flamerun command-line interface.

The pipeline entry point is patched; these tests cover argument handling,
configuration selection and output naming.
"""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from flamerun.cli.main import build_parser, main_cli
from flamerun.models.results import RunReport
from flamerun.models.runtime import ExitOutcome, ExitOutcomeKind
from flamerun.transform.icicle import IcicleRenderStage
from flamerun.transform.inferno import InfernoRenderStage


def _report(path="flamegraph.svg"):
    return RunReport(
        outcome=ExitOutcome(ExitOutcomeKind.SUCCESS),
        artifact_path=Path(path),
        raw_bytes=10,
        collapsed_bytes=5,
        sample_count=3,
    )


@pytest.mark.unit
class TestCommandLine:
    """Test cases for main_cli."""

    def setup_method(self):
        self.root_level = logging.getLogger().level

    def teardown_method(self):
        logging.getLogger().setLevel(self.root_level)

    def test_parser_collects_command(self):
        args = build_parser().parse_args(["-o", "out.svg", "--", "./app", "-v"])

        assert args.output == Path("out.svg")
        assert args.command[-2:] == ["./app", "-v"]
        assert args.verbose is False

    def test_runs_pipeline_with_defaults(self):
        """Without options the default output and format are used."""
        with patch(
            "flamerun.cli.main.generate_flamegraph_by_running_command",
            return_value=_report(),
        ) as mock_generate:
            main_cli(["--", "./app", "--iterations", "10"])

        args, kwargs = mock_generate.call_args
        assert args == (("./app", "--iterations", "10"), Path("flamegraph.svg"))
        assert kwargs["backend_name"] is None
        assert isinstance(kwargs["render_stage"], InfernoRenderStage)
        assert kwargs["folded_output"] is None
        assert kwargs["top_frames"] is None

    def test_options_forwarded(self, temp_dir):
        folded = temp_dir / "stacks.folded"
        with patch(
            "flamerun.cli.main.generate_flamegraph_by_running_command",
            return_value=_report(),
        ) as mock_generate:
            main_cli([
                "-o", str(temp_dir / "g.svg"),
                "--backend", "dtrace",
                "--save-folded", str(folded),
                "--top", "15",
                "--", "make", "-j8",
            ])

        args, kwargs = mock_generate.call_args
        assert args == (("make", "-j8"), temp_dir / "g.svg")
        assert kwargs["backend_name"] == "dtrace"
        assert kwargs["folded_output"] == folded
        assert kwargs["top_frames"] == 15

    def test_html_format_changes_default_suffix(self):
        with patch(
            "flamerun.cli.main.generate_flamegraph_by_running_command",
            return_value=_report("flamegraph.html"),
        ) as mock_generate:
            main_cli(["--format", "html", "--", "./app"])

        args, kwargs = mock_generate.call_args
        assert args[1] == Path("flamegraph.html")
        assert isinstance(kwargs["render_stage"], IcicleRenderStage)

    def test_config_file_selected(self, temp_dir):
        config_file = temp_dir / "config.toml"
        config_file.write_text(
            '[transform]\nrender_format = "html"\n\n[output]\ndefault_output = "profile.svg"\n'
        )
        with patch(
            "flamerun.cli.main.generate_flamegraph_by_running_command",
            return_value=_report(),
        ) as mock_generate:
            main_cli(["--config", str(config_file), "--", "./app"])

        args, kwargs = mock_generate.call_args
        assert args[1] == Path("profile.html")
        assert isinstance(kwargs["render_stage"], IcicleRenderStage)

    def test_default_output_takes_render_stage_suffix(self, temp_dir):
        """The default output file gets the suffix of the selected renderer."""
        config_file = temp_dir / "config.toml"
        config_file.write_text('[output]\ndefault_output = "profile.data"\n')
        with patch(
            "flamerun.cli.main.generate_flamegraph_by_running_command",
            return_value=_report(),
        ) as mock_generate:
            main_cli(["--config", str(config_file), "--", "./app"])

        args, kwargs = mock_generate.call_args
        assert args[1] == Path("profile.svg")
        assert args[1].suffix == kwargs["render_stage"].file_suffix

    def test_verbose_enables_debug_logging(self):
        with patch(
            "flamerun.cli.main.generate_flamegraph_by_running_command",
            return_value=_report(),
        ):
            main_cli(["-v", "--", "./app"])

        assert logging.getLogger().level == logging.DEBUG

    def test_missing_command_exits_1(self):
        with pytest.raises(SystemExit) as exc_info:
            main_cli([])

        assert exc_info.value.code == 1

    def test_missing_config_exits_1(self, temp_dir):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(temp_dir / "nope.toml"), "--", "./app"])

        assert exc_info.value.code == 1

    def test_invalid_config_exits_1(self, temp_dir):
        config_file = temp_dir / "config.toml"
        config_file.write_text('[output]\ntop_frames = -3\n')

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(config_file), "--", "./app"])

        assert exc_info.value.code == 1

    @pytest.mark.parametrize("top", ["many", "-1", "5000"])
    def test_invalid_top_exits_1(self, top):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--top", top, "--", "./app"])

        assert exc_info.value.code == 1

    def test_pipeline_failure_propagates_exit(self):
        """The entry function's exit status is the CLI's exit status."""
        with patch(
            "flamerun.cli.main.generate_flamegraph_by_running_command",
            side_effect=SystemExit(1),
        ):
            with pytest.raises(SystemExit) as exc_info:
                main_cli(["--", "false"])

        assert exc_info.value.code == 1
