"""Plain-data snapshot of a histogram.

HistogramState is the interchange record used to persist or ship a
histogram: its bins in order, the bin budget, the cached total and the
decay factor. Construction validates the record completely so that a
histogram restored from it satisfies the same invariants as one built by
``add``.

Example::

    state = hist.to_state()
    payload = state.to_dict()          # plain dict, JSON friendly
    copy = restore(HistogramState.from_dict(payload))
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Self

__all__ = ["HistogramState", "StateError"]


class StateError(ValueError):
    """Raised when a histogram state record is structurally invalid."""


def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def _is_int(x: Any) -> bool:
    return isinstance(x, int) and not isinstance(x, bool)


def _finite_float(x: Any) -> float | None:
    """``x`` as a float, or None unless it is a finite real number."""
    if not _is_number(x):
        return None
    try:
        f = float(x)
    except OverflowError:
        return None
    return f if math.isfinite(f) else None


@dataclass(frozen=True, slots=True)
class HistogramState:
    """Snapshot of a histogram.

    Attributes:
        bins: ``(value, count)`` pairs in ascending value order, stored as
            floats.
        maxbins: Bin budget.
        total: Truncated sum of the bin counts.
        alpha: Decay factor; 1.0 for an undecayed histogram.
    """

    bins: tuple[tuple[float, float], ...]
    maxbins: int
    total: int
    alpha: float

    def __post_init__(self) -> None:
        if not _is_int(self.maxbins) or self.maxbins < 1:
            raise StateError(f"maxbins must be a positive integer, got {self.maxbins!r}")
        if not _is_int(self.total) or self.total < 0:
            raise StateError(f"total must be a non-negative integer, got {self.total!r}")
        alpha = _finite_float(self.alpha)
        if alpha is None or not 0 < alpha <= 1:
            raise StateError(f"alpha must be in (0, 1], got {self.alpha!r}")
        if len(self.bins) > self.maxbins:
            raise StateError(
                f"state holds {len(self.bins)} bins but maxbins is {self.maxbins}"
            )

        bins = []
        previous: float | None = None
        for i, pair in enumerate(self.bins):
            if not isinstance(pair, tuple) or len(pair) != 2:
                raise StateError(f"bin {i} must be a (value, count) pair, got {pair!r}")
            value, count = _finite_float(pair[0]), _finite_float(pair[1])
            if value is None:
                raise StateError(f"bin {i} value must be a finite number, got {pair[0]!r}")
            if count is None or count < 0:
                raise StateError(f"bin {i} count must be a non-negative number, got {pair[1]!r}")
            if previous is not None and value <= previous:
                raise StateError(
                    f"bin values must be strictly increasing, bin {i} has {value!r} after {previous!r}"
                )
            bins.append((value, count))
            previous = value

        # Summed in bin order, as the histogram does when it refreshes its total.
        mass = sum(count for _, count in bins)
        if not math.isfinite(mass) or self.total != int(mass):
            raise StateError(f"total {self.total} does not match bin counts summing to {mass!r}")

        object.__setattr__(self, "bins", tuple(bins))
        object.__setattr__(self, "alpha", alpha)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return {
            "bins": [{"value": value, "count": count} for value, count in self.bins],
            "maxbins": self.maxbins,
            "total": self.total,
            "alpha": self.alpha,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Deserialize from a plain dict.

        Args:
            data: Dict produced by ``to_dict()``.

        Raises:
            StateError: If a field is missing or has the wrong type.
        """
        if not isinstance(data, Mapping):
            raise StateError(f"state must be a mapping, got {type(data).__name__}")
        missing = [key for key in ("bins", "maxbins", "total", "alpha") if key not in data]
        if missing:
            raise StateError(f"state is missing fields: {', '.join(missing)}")

        raw_bins = data["bins"]
        if not isinstance(raw_bins, list):
            raise StateError(f"bins must be a list, got {type(raw_bins).__name__}")
        bins = []
        for i, raw in enumerate(raw_bins):
            if not isinstance(raw, Mapping) or "value" not in raw or "count" not in raw:
                raise StateError(f"bin {i} must be a mapping with 'value' and 'count', got {raw!r}")
            bins.append((raw["value"], raw["count"]))

        return cls(
            bins=tuple(bins),
            maxbins=data["maxbins"],
            total=data["total"],
            alpha=data["alpha"],
        )
