"""
Unit tests for sampler exit classification.
"""

import os
import signal

import pytest

from flamerun.models.runtime import ExitOutcomeKind, ExitStatus
from flamerun.orchestration.exit_classifier import USER_INTERRUPT_SIGNALS, classify


@pytest.mark.unit
class TestClassify:
    """Test cases for mapping exit statuses to outcomes."""

    def test_zero_exit_is_success(self):
        """A clean exit is a success with no reason attached."""
        outcome = classify(ExitStatus(code=0))

        assert outcome.kind is ExitOutcomeKind.SUCCESS
        assert outcome.is_success
        assert outcome.reason is None
        assert outcome.should_collect

    def test_sigint_is_user_interrupt(self):
        """Ctrl+C reaching the sampler is not a failure."""
        outcome = classify(ExitStatus(signal=signal.SIGINT))

        assert outcome.is_user_interrupted
        assert outcome.should_collect
        assert outcome.reason == "terminated by signal SIGINT"

    def test_sigterm_is_user_interrupt(self):
        """SIGTERM counts as a deliberate stop as well."""
        outcome = classify(ExitStatus(signal=signal.SIGTERM))

        assert outcome.kind is ExitOutcomeKind.USER_INTERRUPTED

    @pytest.mark.skipif(os.name != "posix", reason="SIGKILL is POSIX only")
    def test_other_signal_is_failure(self):
        """Signals outside the interrupt set are failures."""
        outcome = classify(ExitStatus(signal=signal.SIGKILL))

        assert outcome.is_failed
        assert not outcome.should_collect
        assert "SIGKILL" in outcome.reason

    def test_nonzero_exit_is_failure(self):
        """A non-zero exit code without a signal is a failure."""
        outcome = classify(ExitStatus(code=1))

        assert outcome.is_failed
        assert outcome.reason == "exited with status 1"

    def test_status_without_signal_information_is_failure(self):
        """Platforms that report neither code nor signal fall through to failure."""
        outcome = classify(ExitStatus())

        assert outcome.is_failed
        assert outcome.reason == "terminated with unknown status"

    def test_success_decided_by_exit_code_alone(self):
        """A zero exit code wins even if a signal is also reported."""
        outcome = classify(ExitStatus(code=0, signal=signal.SIGINT))

        assert outcome.is_success

    def test_interrupt_signal_set(self):
        """Only SIGINT and SIGTERM are treated as user interrupts."""
        assert USER_INTERRUPT_SIGNALS == frozenset({signal.SIGINT, signal.SIGTERM})


@pytest.mark.unit
class TestExitStatus:
    """Test cases for building ExitStatus from return codes."""

    def test_from_positive_returncode(self):
        """Positive return codes are plain exit codes."""
        status = ExitStatus.from_returncode(3)

        assert status.code == 3
        assert status.signal is None
        assert not status.success

    def test_from_zero_returncode(self):
        """Zero is success."""
        assert ExitStatus.from_returncode(0).success

    @pytest.mark.skipif(os.name != "posix", reason="negative return codes are POSIX signals")
    def test_from_negative_returncode(self):
        """Negative return codes carry the terminating signal."""
        status = ExitStatus.from_returncode(-signal.SIGINT)

        assert status.code is None
        assert status.signal == signal.SIGINT
        assert classify(status).is_user_interrupted

    def test_describe_unknown_signal_number(self):
        """Signal numbers without a name are described numerically."""
        assert ExitStatus(signal=250).describe() == "terminated by signal 250"
