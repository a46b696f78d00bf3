"""Tabular export of histogram bins with pandas."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:
    from histsketch.sketching.histogram import Histogram

__all__ = ["to_dataframe"]


def to_dataframe(hist: Histogram) -> pd.DataFrame:
    """One row per bin, in ascending value order.

    Columns:
        value: Bin position.
        count: Bin mass.
        fraction: ``count / hist.count()`` (nan when the total is 0).
        cumulative: Running sum of ``fraction``.
    """
    df = pd.DataFrame(list(hist), columns=["value", "count"], dtype=float)
    total = hist.count()
    df["fraction"] = df["count"] / total if total > 0 else float("nan")
    df["cumulative"] = df["fraction"].cumsum()
    return df
