"""Base protocols for streaming histogram sketches.

A sketch summarizes an unbounded stream of samples in bounded memory. It
trades exact answers for a fixed footprint, which makes it suitable for
telemetry pipelines where storing every sample is impractical.

This module defines the protocols the histogram variants follow:
- Sketch: Common operations (add, merge, clear, sizing)
- QuantileSketch: Quantile, percentile and CDF queries
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class Sketch(ABC):
    """Base protocol for streaming sketches.

    Sketches process a stream of samples and answer approximate queries
    about it. They support:
    - Adding samples (with an optional weight)
    - Merging two sketches of the same family
    - Estimating memory usage
    - Clearing state for reuse
    """

    @abstractmethod
    def add(self, value: float, count: float = 1) -> None:
        """Add a sample to the sketch.

        Args:
            value: The sample to add.
            count: Weight of the sample (default 1).
        """

    @abstractmethod
    def merge(self, other: Sketch) -> None:
        """Merge another sketch of the same family into this one.

        Args:
            other: Another sketch of the same family.

        Raises:
            TypeError: If other is not a compatible sketch.
        """

    @property
    @abstractmethod
    def memory_bytes(self) -> int:
        """Estimated memory usage in bytes."""

    @property
    @abstractmethod
    def item_count(self) -> int:
        """Total (possibly decayed) mass of samples added to the sketch."""

    @abstractmethod
    def clear(self) -> None:
        """Reset the sketch to its initial empty state."""


class QuantileSketch(Sketch):
    """Protocol for sketches that estimate quantiles/percentiles.

    Used for estimating latency percentiles (p50, p95, p99) without storing
    all values.

    Implementations: Histogram, WeightedHistogram
    """

    @abstractmethod
    def quantile(self, q: float) -> float:
        """Estimate the value at a given quantile.

        Args:
            q: Quantile to estimate (0.0 to 1.0).
               - 0.5 = median (p50)
               - 0.95 = 95th percentile (p95)
               - 0.99 = 99th percentile (p99)

        Returns:
            Estimated value at the quantile.
        """

    @abstractmethod
    def cdf(self, value: float) -> float:
        """Estimate the cumulative distribution function at a value.

        Args:
            value: The value to get CDF for.

        Returns:
            Estimated probability that a random sample <= value (0.0 to 1.0).
        """

    def percentile(self, p: float) -> float:
        """Convenience method for percentile estimation.

        Args:
            p: Percentile (0 to 100).

        Returns:
            Estimated value at the percentile.

        Raises:
            ValueError: If p is not in [0, 100].
        """
        if not 0 <= p <= 100:
            raise ValueError(f"Percentile must be in [0, 100], got {p}")
        return self.quantile(p / 100.0)
