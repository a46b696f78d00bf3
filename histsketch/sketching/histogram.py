"""Bounded-memory streaming histograms.

A Histogram keeps at most ``maxbins`` weighted points, sorted by value.
Each new sample either lands on an existing point or becomes a new one;
whenever the budget is exceeded the two closest neighbouring points are
collapsed into their weighted average. Resolution therefore follows the
density of the data rather than a fixed grid.

WeightedHistogram adds recency bias: every insertion decays the mass of
all untouched bins by ``alpha``, so old data fades away geometrically.

Key properties:
- Space: O(maxbins) bins
- Update: O(maxbins)
- Query: O(maxbins), O(maxbins log maxbins) for modes

Reference:
    Ben-Haim, Tom-Tov. "A Streaming Parallel Decision Tree Algorithm" (2010)

Example:
    hist = Histogram(maxbins=64)
    for latency in latencies:
        hist.add(latency)
    print(f"p99: {hist.percentile(99)}")

    # Moving summary over roughly the last 60 samples
    recent = WeightedHistogram(maxbins=64, alpha=alpha_for_window(60))
"""

from __future__ import annotations

import math
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from operator import attrgetter
from typing import Self

from histsketch.render import render_text
from histsketch.sketching.base import QuantileSketch
from histsketch.sketching.bins import Bin, BinStore
from histsketch.state import HistogramState, StateError

__all__ = [
    "Histogram",
    "HistogramSummary",
    "WeightedHistogram",
    "alpha_for_window",
    "restore",
]


def alpha_for_window(n: float) -> float:
    """Decay factor approximating an ``n``-sample moving window.

    For example, a 60-second window with an average age of 30 seconds
    yields ``alpha_for_window(30) == 0.935483870967742``.

    Raises:
        ValueError: If n <= 1.
    """
    if not n > 1:
        raise ValueError(f"window must be > 1, got {n}")
    return 1 - 2 / (n + 1)


def _is_finite(x: float) -> bool:
    try:
        return math.isfinite(x)
    except OverflowError:
        return False


@dataclass(frozen=True, slots=True)
class HistogramSummary:
    """Summary of key statistics of a histogram."""

    p50: float
    p75: float
    p90: float
    p95: float
    p99: float
    mean: float
    variance: float
    count: int
    bins: int


class Histogram(QuantileSketch):
    """Streaming histogram with a fixed bin budget.

    There is no "optimal" bin count, but somewhere between 20 and 80 bins
    is usually sufficient.

    The structure is not synchronized; serialize access per instance.

    Args:
        maxbins: Maximum number of bins kept. Must be >= 1.
    """

    def __init__(self, maxbins: int):
        if isinstance(maxbins, bool) or not isinstance(maxbins, int):
            raise ValueError(f"maxbins must be an integer, got {maxbins!r}")
        if maxbins < 1:
            raise ValueError(f"maxbins must be positive, got {maxbins}")

        self._maxbins = maxbins
        self._store = BinStore()
        self._total = 0
        self._alpha = 1.0

    @property
    def maxbins(self) -> int:
        """Bin budget."""
        return self._maxbins

    @property
    def alpha(self) -> float:
        """Decay factor (1.0 means no decay)."""
        return self._alpha

    # === Insertion ===

    def add(self, value: float, count: float = 1) -> None:
        """Add a sample to the histogram.

        Args:
            value: The sample. Must be finite.
            count: Weight of the sample (default 1).

        Raises:
            ValueError: If value is not finite or count is negative.
        """
        if not _is_finite(value):
            raise ValueError(f"value must be finite, got {value}")
        if not _is_finite(count) or not count >= 0:
            raise ValueError(f"count must be finite and non-negative, got {count}")
        if count == 0:
            return

        index = self._store.add(float(value), float(count))
        self._after_insert(index)
        self._trim()

    def _after_insert(self, index: int) -> None:
        """Hook run after the bin at ``index`` received new mass."""

    def _trim(self) -> None:
        """Merge bins until the budget holds and refresh the cached total."""
        while len(self._store) > self._maxbins:
            self._store.merge_adjacent(self._store.closest_pair())
        self._total = int(self._store.mass())

    def merge(self, other: Histogram) -> None:
        """Fold another histogram's bins into this one.

        No decay is applied; the result is trimmed to this histogram's
        budget.

        Raises:
            TypeError: If other is not a Histogram.
        """
        if not isinstance(other, Histogram):
            raise TypeError(f"Can only merge with Histogram, got {type(other).__name__}")

        for b in other._store.copy():
            self._store.add(b.value, b.count)
        self._trim()

    def clear(self) -> None:
        """Reset the histogram to empty state."""
        self._store.clear()
        self._total = 0

    # === Queries ===

    def quantile(self, q: float) -> float:
        """Approximate value at quantile ``q``.

        Returns the value of the first bin at which the cumulative mass
        reaches ``q * count()``, or -1 when no bin does (empty histogram,
        or ``q`` above 1).
        """
        target = q * self._total
        for b in self._store:
            target -= b.count
            if target <= 0:
                return b.value
        return -1.0

    def cdf(self, value: float) -> float:
        """Fraction of the mass at or below ``value``.

        Returns nan on an empty histogram; check ``count() > 0`` first.
        """
        if self._total == 0:
            return math.nan
        mass = sum(b.count for b in self._store if b.value <= value)
        return mass / self._total

    def mean(self) -> float:
        """Mass-weighted mean of the bin values (0 when empty)."""
        if self._total == 0:
            return 0.0
        return sum(b.value * b.count for b in self._store) / self._total

    def variance(self) -> float:
        """Mass-weighted variance of the bin values (0 when empty)."""
        if self._total == 0:
            return 0.0
        mean = self.mean()
        return sum(b.count * (b.value - mean) ** 2 for b in self._store) / self._total

    def modes(self, n: int) -> list[float]:
        """Values of the ``n`` heaviest bins, heaviest first."""
        if self._total == 0 or n <= 0:
            return []
        ranked = sorted(self._store, key=attrgetter("count"), reverse=True)
        return [b.value for b in ranked[:n]]

    def count(self) -> int:
        """Cached total mass, truncated to an integer."""
        return self._total

    def bins_count(self) -> int:
        """Number of bins currently held."""
        return len(self._store)

    def bins(self, i: int) -> tuple[float, float]:
        """``(count, value)`` of bin ``i``; ``(0.0, 0.0)`` when out of range."""
        if i < 0 or i >= len(self._store):
            return 0.0, 0.0
        b = self._store[i]
        return b.count, b.value

    def summary(self) -> HistogramSummary:
        """Key percentiles and moments in one record."""
        return HistogramSummary(
            p50=self.quantile(0.50),
            p75=self.quantile(0.75),
            p90=self.quantile(0.90),
            p95=self.quantile(0.95),
            p99=self.quantile(0.99),
            mean=self.mean(),
            variance=self.variance(),
            count=self._total,
            bins=len(self._store),
        )

    @property
    def item_count(self) -> int:
        return self._total

    @property
    def memory_bytes(self) -> int:
        """Estimated memory usage in bytes."""
        # Each bin: value (8) + count (8)
        return len(self._store) * 16 + sys.getsizeof(self)

    # === State ===

    def to_state(self) -> HistogramState:
        """Snapshot the histogram exactly as it is held in memory."""
        return HistogramState(
            bins=tuple((b.value, b.count) for b in self._store),
            maxbins=self._maxbins,
            total=self._total,
            alpha=self._alpha,
        )

    def load_state(self, state: HistogramState) -> None:
        """Replace this histogram's contents with ``state``.

        Bins, budget, total and alpha are taken as validated; no merging or
        decay happens. On error the histogram is left untouched.

        Raises:
            StateError: If the state cannot be held by this variant.
        """
        self._check_alpha(state.alpha)
        store = BinStore([Bin(value=value, count=count) for value, count in state.bins])

        self._store = store
        self._maxbins = state.maxbins
        self._total = state.total
        self._alpha = state.alpha

    def _check_alpha(self, alpha: float) -> None:
        if alpha != 1.0:
            raise StateError(
                f"Histogram does not decay, state has alpha={alpha}; use WeightedHistogram"
            )

    @classmethod
    def from_state(cls, state: HistogramState) -> Self:
        hist = cls(state.maxbins)
        hist.load_state(state)
        return hist

    # === Dunder ===

    def __len__(self) -> int:
        return len(self._store)

    def __iter__(self) -> Iterator[tuple[float, float]]:
        """Yield ``(value, count)`` pairs in ascending value order."""
        for b in self._store:
            yield b.value, b.count

    def __str__(self) -> str:
        return render_text(self)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(maxbins={self._maxbins}, alpha={self._alpha}, "
            f"bins={len(self._store)}, total={self._total})"
        )


class WeightedHistogram(Histogram):
    """Histogram whose bins decay with every new sample.

    After each insertion, every bin other than the one that received the
    sample has its count replaced by the EWMA of the count and zero,
    ``count * alpha``. Older mass therefore fades at rate ``1 - alpha`` per
    insertion and ``count()`` becomes an approximate, decayed count.

    Args:
        maxbins: Maximum number of bins kept. Must be >= 1.
        alpha: Decay factor in (0, 1]. 1 disables decay. Use
            ``alpha_for_window(n)`` to derive it from a window size.

    Example:
        hist = WeightedHistogram(maxbins=20, alpha=alpha_for_window(60))
        for sample in stream:
            hist.add(sample)
            recent_p95 = hist.percentile(95)
    """

    def __init__(self, maxbins: int, alpha: float):
        if not 0 < alpha <= 1:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        super().__init__(maxbins)
        self._alpha = alpha

    def _after_insert(self, index: int) -> None:
        self._scale_down(index)

    def _scale_down(self, except_index: int) -> None:
        self._store.scale_except(except_index, self._alpha)

    def _check_alpha(self, alpha: float) -> None:
        pass

    @classmethod
    def from_state(cls, state: HistogramState) -> Self:
        hist = cls(state.maxbins, state.alpha)
        hist.load_state(state)
        return hist


def restore(state: HistogramState) -> Histogram:
    """Build the histogram variant matching ``state``.

    States with ``alpha < 1`` become a WeightedHistogram, all others a
    plain Histogram.
    """
    if state.alpha < 1:
        return WeightedHistogram.from_state(state)
    return Histogram.from_state(state)
