"""
Collapse and render stages of the flame graph pipeline.
"""

from .base import CollapseStage, RenderStage
from .factory import create_collapse_stage, create_render_stage
from .icicle import IcicleRenderStage, build_icicle_nodes
from .inferno import InfernoCollapseStage, InfernoRenderStage

__all__ = [
    "CollapseStage",
    "RenderStage",
    "create_collapse_stage",
    "create_render_stage",
    "IcicleRenderStage",
    "build_icicle_nodes",
    "InfernoCollapseStage",
    "InfernoRenderStage",
]
