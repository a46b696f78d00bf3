"""Bounded-memory streaming histograms.

Two variants share one bin-maintenance engine:
    Histogram: Plain histogram, exact mass bookkeeping
    WeightedHistogram: Recency-weighted histogram (exponential decay)

Example:
    from histsketch.sketching import Histogram, WeightedHistogram, alpha_for_window

    hist = Histogram(maxbins=20)
    for latency in latencies:
        hist.add(latency)
    print(hist.quantile(0.5), hist.mean(), hist.modes(3))

    recent = WeightedHistogram(maxbins=20, alpha=alpha_for_window(60))
"""

from histsketch.sketching.base import QuantileSketch, Sketch
from histsketch.sketching.bins import Bin, BinStore
from histsketch.sketching.histogram import (
    Histogram,
    HistogramSummary,
    WeightedHistogram,
    alpha_for_window,
    restore,
)

__all__ = [
    "Bin",
    "BinStore",
    "Histogram",
    "HistogramSummary",
    "QuantileSketch",
    "Sketch",
    "WeightedHistogram",
    "alpha_for_window",
    "restore",
]
