"""
Analysis of collapsed (folded) stack data using Polars.

Folded data is one stack per line, frames separated by ``;`` and followed by a
sample count: ``main;parse;read 42``. This module loads such data into a
DataFrame and derives per-frame statistics:

- self samples: samples in which the frame is the leaf (on-CPU code)
- total samples: samples in which the frame appears anywhere in the stack,
  counted once per stack even under recursion
"""

import logging
from typing import Union

import polars as pl

logger = logging.getLogger(__name__)

FOLDED_LINE_PATTERN = r"^(.*\S)\s+(\d+)$"
FRAME_SEPARATOR = ";"

FOLDED_SCHEMA = {"stack": pl.Utf8, "count": pl.Int64}
HOT_FRAMES_SCHEMA = {
    "frame": pl.Utf8,
    "self_samples": pl.Int64,
    "total_samples": pl.Int64,
    "self_pct": pl.Float64,
    "total_pct": pl.Float64,
}


def parse_folded(data: Union[bytes, str]) -> pl.DataFrame:
    """
    Parse folded stack lines into a DataFrame with ``stack`` and ``count`` columns.

    Lines that do not end in a sample count, or whose count does not fit in a
    64-bit integer, are skipped. Identical stacks are merged and the result is
    sorted by stack.
    """
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    lines = [line.strip() for line in text.splitlines() if line.strip()]

    lines_df = pl.DataFrame({"line": lines}, schema={"line": pl.Utf8})
    parsed = lines_df.select(
        pl.col("line").str.extract(FOLDED_LINE_PATTERN, 1).alias("stack"),
        pl.col("line").str.extract(FOLDED_LINE_PATTERN, 2).cast(pl.Int64, strict=False).alias("count"),
    )

    skipped = parsed.filter(pl.col("stack").is_null() | pl.col("count").is_null()).height
    if skipped:
        logger.debug(f"Skipped {skipped} malformed folded line(s)")

    return (
        parsed.drop_nulls()
        .group_by("stack")
        .agg(pl.col("count").sum())
        .sort("stack")
        .cast(FOLDED_SCHEMA)
    )


def hot_frames(folded: pl.DataFrame, top: int = 10) -> pl.DataFrame:
    """
    Rank frames by self samples.

    Args:
        folded: Output of parse_folded
        top: Maximum number of rows to return

    Returns:
        DataFrame with frame, self_samples, total_samples, self_pct, total_pct
    """
    total = folded["count"].sum() if folded.height else 0
    if not total:
        return pl.DataFrame(schema=HOT_FRAMES_SCHEMA)

    frames = folded.with_columns(pl.col("stack").str.split(FRAME_SEPARATOR).alias("frames"))

    self_counts = (
        frames.select(pl.col("frames").list.last().alias("frame"), pl.col("count"))
        .group_by("frame")
        .agg(pl.col("count").sum().alias("self_samples"))
    )

    total_counts = (
        frames.select(pl.col("frames").list.unique().alias("frame"), pl.col("count"))
        .explode("frame")
        .group_by("frame")
        .agg(pl.col("count").sum().alias("total_samples"))
    )

    return (
        total_counts.join(self_counts, on="frame", how="left")
        .with_columns(pl.col("self_samples").fill_null(0))
        .with_columns(
            (pl.col("self_samples") * 100.0 / total).alias("self_pct"),
            (pl.col("total_samples") * 100.0 / total).alias("total_pct"),
        )
        .sort(
            ["self_samples", "total_samples", "frame"],
            descending=[True, True, False],
        )
        .head(top)
        .select(list(HOT_FRAMES_SCHEMA))
        .cast(HOT_FRAMES_SCHEMA)
    )


def format_hot_frames(summary: pl.DataFrame) -> str:
    """Render a hot-frame summary as an aligned text table for logging."""
    if summary.height == 0:
        return "  (no samples)"
    rows = ["   self%  total%  frame"]
    for frame, _self, _total, self_pct, total_pct in summary.iter_rows():
        rows.append(f"  {self_pct:6.2f}  {total_pct:6.2f}  {frame}")
    return "\n".join(rows)
