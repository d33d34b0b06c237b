"""
Interpretation of the sampler's termination status.
"""

import logging
import signal

from ..models.runtime import ExitOutcome, ExitOutcomeKind, ExitStatus

logger = logging.getLogger(__name__)

# Signals that mean the user stopped the run on purpose.
USER_INTERRUPT_SIGNALS = frozenset({signal.SIGINT, signal.SIGTERM})


def classify(status: ExitStatus) -> ExitOutcome:
    """
    Map a sampler exit status to an outcome.

    Success is decided by the exit code alone. A failing status caused by
    SIGINT or SIGTERM is a user interrupt. Anything else is a failure,
    including a failing status that carries no signal information.
    """
    if status.success:
        return ExitOutcome(ExitOutcomeKind.SUCCESS)

    if status.signal is not None and status.signal in USER_INTERRUPT_SIGNALS:
        return ExitOutcome(ExitOutcomeKind.USER_INTERRUPTED, reason=status.describe())

    return ExitOutcome(ExitOutcomeKind.FAILED, reason=status.describe())
