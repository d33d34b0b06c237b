"""
Factory for choosing the sampler backend.
"""

import logging
from typing import Optional

import psutil

from ..models.config import SamplingConfig
from .base import SamplerBackend
from .dtrace import DtraceBackend
from .perf import PerfBackend

logger = logging.getLogger(__name__)


def resolve_backend_name(requested: str = "auto", platform_name: Optional[str] = None) -> str:
    """
    Resolve ``"auto"`` to a concrete backend name.

    Linux uses perf; every other platform uses dtrace.

    Args:
        requested: "auto", "perf" or "dtrace"
        platform_name: A ``sys.platform``-style name. When None the running
            platform is detected with psutil.
    """
    requested = requested.lower()
    if requested != "auto":
        return requested
    if platform_name is None:
        is_linux = psutil.LINUX
    else:
        is_linux = platform_name.lower().startswith("linux")
    return "perf" if is_linux else "dtrace"


def get_sampler_backend(
    platform_name: Optional[str] = None,
    sampling_config: Optional[SamplingConfig] = None,
) -> SamplerBackend:
    """
    Create the sampler backend for this run.

    Args:
        platform_name: Override for platform detection (see resolve_backend_name)
        sampling_config: Backend settings; defaults are used when None

    Returns:
        SamplerBackend instance

    Raises:
        ValueError: If an unsupported backend name is configured
    """
    sampling_config = sampling_config or SamplingConfig()
    backend_name = resolve_backend_name(sampling_config.backend, platform_name)

    if backend_name == "perf":
        backend: SamplerBackend = PerfBackend(sampling_config.perf)
    elif backend_name == "dtrace":
        backend = DtraceBackend(sampling_config.dtrace)
    else:
        raise ValueError(f"Unsupported sampler backend: {backend_name}")

    logger.debug(f"Selected sampler backend: {backend!r}")
    return backend
