"""
Factories for the collapse and render stages.
"""

import logging
from typing import Optional

from ..models.config import TransformConfig
from .base import CollapseStage, RenderStage
from .icicle import IcicleRenderStage
from .inferno import InfernoCollapseStage, InfernoRenderStage

logger = logging.getLogger(__name__)


def create_collapse_stage(
    collapse_format: str,
    transform_config: Optional[TransformConfig] = None,
) -> CollapseStage:
    """
    Create the collapse stage matching a backend's output format.

    Raises:
        ValueError: If no collapser is known for the format
    """
    transform_config = transform_config or TransformConfig()
    if collapse_format == "perf":
        executable = transform_config.collapse_perf
    elif collapse_format == "dtrace":
        executable = transform_config.collapse_dtrace
    else:
        raise ValueError(f"Unsupported collapse format: {collapse_format}")

    logger.debug(f"Creating InfernoCollapseStage with {executable}")
    return InfernoCollapseStage(executable)


def create_render_stage(
    render_format: Optional[str] = None,
    transform_config: Optional[TransformConfig] = None,
) -> RenderStage:
    """
    Create the render stage for ``render_format`` ("svg" or "html").

    Raises:
        ValueError: If an unsupported format is requested
    """
    transform_config = transform_config or TransformConfig()
    render_format = (render_format or transform_config.render_format).lower()
    title = transform_config.title or None

    if render_format == "svg":
        return InfernoRenderStage(transform_config.flamegraph, title=title)
    elif render_format == "html":
        return IcicleRenderStage(title=title)
    else:
        raise ValueError(f"Unsupported render format: {render_format}")
