"""Sorted bin storage shared by the histogram variants.

A BinStore keeps ``(value, count)`` bins ordered by value with at most one
bin per distinct value. The owning histogram drives it through a small set
of primitives (locate, insert, increment, merge, scale) and is responsible
for restoring the ``maxbins`` budget before returning to its caller.
"""

from __future__ import annotations

import bisect
from collections.abc import Iterator
from dataclasses import dataclass
from operator import attrgetter

_by_value = attrgetter("value")


@dataclass(slots=True)
class Bin:
    """A cluster of observed values approximated by one point.

    ``count`` is a float: decay and weighted merging produce fractional mass.
    """

    value: float
    count: float

    def merge(self, other: Bin) -> Bin:
        """Merge two bins into one.

        Small combined mass falls back to the plain midpoint so that
        near-zero counts never dominate the division.
        """
        total = self.count + other.count
        if total <= 1:
            new_value = (self.value + other.value) / 2
        else:
            new_value = (self.value * self.count + other.value * other.count) / total
        return Bin(value=new_value, count=total)


class BinStore:
    """Value-ordered sequence of bins."""

    __slots__ = ("_bins",)

    def __init__(self, bins: list[Bin] | None = None) -> None:
        self._bins: list[Bin] = list(bins) if bins else []

    def __len__(self) -> int:
        return len(self._bins)

    def __getitem__(self, index: int) -> Bin:
        return self._bins[index]

    def __iter__(self) -> Iterator[Bin]:
        return iter(self._bins)

    def locate(self, value: float) -> tuple[int, bool]:
        """Find where ``value`` belongs.

        Returns:
            ``(index, exact)``: index of the bin holding ``value`` when
            ``exact`` is True, otherwise the position of the first bin with
            a greater value (``len(self)`` when there is none).
        """
        i = bisect.bisect_left(self._bins, value, key=_by_value)
        exact = i < len(self._bins) and self._bins[i].value == value
        return i, exact

    def insert_at(self, index: int, value: float, count: float) -> None:
        self._bins.insert(index, Bin(value=value, count=count))

    def increment(self, index: int, count: float) -> None:
        self._bins[index].count += count

    def add(self, value: float, count: float) -> int:
        """Coalesce ``count`` into the bin at ``value``, creating it if needed.

        Returns:
            Index of the touched bin.
        """
        i, exact = self.locate(value)
        if exact:
            self.increment(i, count)
        else:
            self.insert_at(i, value, count)
        return i

    def closest_pair(self) -> int:
        """Index ``i`` such that ``bins[i-1]`` and ``bins[i]`` have the smallest gap.

        The lowest index wins ties. Requires at least two bins.
        """
        bins = self._bins
        best = 1
        best_delta = bins[1].value - bins[0].value
        for i in range(2, len(bins)):
            delta = bins[i].value - bins[i - 1].value
            if delta < best_delta:
                best_delta = delta
                best = i
        return best

    def merge_adjacent(self, index: int) -> None:
        """Replace ``bins[index-1]`` and ``bins[index]`` with their merge."""
        merged = self._bins[index - 1].merge(self._bins[index])
        self._bins[index - 1 : index + 1] = [merged]

    def scale_except(self, index: int, factor: float) -> None:
        """Multiply every count by ``factor`` except the bin at ``index``."""
        for i, b in enumerate(self._bins):
            if i != index:
                b.count *= factor

    def mass(self) -> float:
        """Sum of all bin counts."""
        return sum(b.count for b in self._bins)

    def copy(self) -> BinStore:
        return BinStore([Bin(b.value, b.count) for b in self._bins])

    def clear(self) -> None:
        self._bins.clear()
