"""
Interactive HTML flame graph rendered as a Plotly icicle chart.

Each distinct stack prefix becomes one rectangle whose width is the number of
samples passing through it; the chart is flipped so the root sits at the
bottom, as in a classic flame graph.
"""

import logging
from typing import BinaryIO, Dict, List, Optional, Tuple, Union

import plotly.graph_objects as go

from ..analysis.folded import FRAME_SEPARATOR, parse_folded
from ..validation import TransformError
from .base import RenderStage

logger = logging.getLogger(__name__)

ROOT_ID = "all"


def build_icicle_nodes(stacks: List[Tuple[str, int]]) -> Tuple[List[str], List[str], List[str], List[int]]:
    """
    Convert (stack, count) pairs into Plotly hierarchy columns.

    Returns:
        ids, labels, parents and values, with ``values`` holding the total
        samples under each node (suitable for ``branchvalues="total"``).
    """
    values: Dict[str, int] = {ROOT_ID: 0}
    labels: Dict[str, str] = {ROOT_ID: ROOT_ID}
    parents: Dict[str, str] = {ROOT_ID: ""}

    for stack, count in stacks:
        values[ROOT_ID] += count
        parent_id = ROOT_ID
        prefix: List[str] = []
        for frame in stack.split(FRAME_SEPARATOR):
            prefix.append(frame)
            node_id = f"{ROOT_ID}{FRAME_SEPARATOR}{FRAME_SEPARATOR.join(prefix)}"
            if node_id not in values:
                values[node_id] = 0
                labels[node_id] = frame
                parents[node_id] = parent_id
            values[node_id] += count
            parent_id = node_id

    ids = list(values)
    return ids, [labels[i] for i in ids], [parents[i] for i in ids], [values[i] for i in ids]


class IcicleRenderStage(RenderStage):
    """
    Renders folded stacks into a self-contained HTML page.

    Args:
        title: Chart title
        include_plotlyjs: Passed to ``Figure.to_html``; True embeds plotly.js,
            "cdn" references it from the CDN instead
    """

    file_suffix = ".html"

    def __init__(self, title: Optional[str] = None, include_plotlyjs: Union[bool, str] = True):
        self.title = title or "Flame Graph"
        self.include_plotlyjs = include_plotlyjs

    def build_figure(self, folded: bytes) -> go.Figure:
        stacks = parse_folded(folded)
        if stacks.height == 0:
            raise TransformError("no stack counts found", stage="render")

        ids, labels, parents, values = build_icicle_nodes(list(stacks.iter_rows()))
        logger.debug(f"Icicle chart with {len(ids)} nodes from {stacks.height} stacks")

        fig = go.Figure(
            go.Icicle(
                ids=ids,
                labels=labels,
                parents=parents,
                values=values,
                branchvalues="total",
                tiling=dict(orientation="v", flip="y"),
                hovertemplate="%{label}<br>%{value} samples (%{percentRoot:.2%})<extra></extra>",
            )
        )
        fig.update_layout(title=self.title, margin=dict(t=50, l=10, r=10, b=10))
        return fig

    def render(self, reader: BinaryIO, writer: BinaryIO) -> None:
        try:
            folded = reader.read()
        except OSError as e:
            raise TransformError(f"unable to read input of the render stage: {e}", stage="render") from e

        fig = self.build_figure(folded)
        html = fig.to_html(include_plotlyjs=self.include_plotlyjs, full_html=True)
        try:
            writer.write(html.encode("utf-8"))
            writer.flush()
        except OSError as e:
            raise TransformError(f"unable to write output of the render stage: {e}", stage="render") from e
