"""
Sampler backends.

- SamplerBackend: common interface for building, spawning and waiting on a
  sampling tool and retrieving its raw output
- PerfBackend: Linux ``perf record`` / ``perf script``
- DtraceBackend: ``dtrace`` writing to an intermediate stacks file
- get_sampler_backend: platform/config based selection
"""

from .base import SamplerBackend
from .dtrace import DtraceBackend
from .factory import get_sampler_backend, resolve_backend_name
from .perf import PerfBackend

__all__ = [
    "SamplerBackend",
    "DtraceBackend",
    "PerfBackend",
    "get_sampler_backend",
    "resolve_backend_name",
]
