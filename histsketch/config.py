"""Histogram configuration.

HistogramConfig captures the two knobs of a histogram, the bin budget and
the decay factor, and builds the matching variant. It can be read from the
environment so that services embedding the library can tune it without
code changes.

Environment variables:
    HISTSKETCH_MAXBINS: Bin budget (default 64)
    HISTSKETCH_ALPHA: Decay factor in (0, 1] (default 1, no decay)
    HISTSKETCH_WINDOW: Moving-window size; derives alpha when
        HISTSKETCH_ALPHA is not set
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Self

from histsketch.sketching.histogram import Histogram, WeightedHistogram, alpha_for_window

__all__ = ["DEFAULT_MAXBINS", "HistogramConfig"]

logger = logging.getLogger(__name__)

DEFAULT_MAXBINS = 64


@dataclass(frozen=True)
class HistogramConfig:
    """Settings for building a histogram.

    Args:
        maxbins: Maximum number of bins (>= 1).
        alpha: Decay factor in (0, 1]; 1 builds an undecayed Histogram.
    """

    maxbins: int = DEFAULT_MAXBINS
    alpha: float = 1.0

    def __post_init__(self) -> None:
        if isinstance(self.maxbins, bool) or not isinstance(self.maxbins, int):
            raise ValueError(f"maxbins must be an integer, got {self.maxbins!r}")
        if self.maxbins < 1:
            raise ValueError(f"maxbins must be positive, got {self.maxbins}")
        if not 0 < self.alpha <= 1:
            raise ValueError(f"alpha must be in (0, 1], got {self.alpha}")

    @property
    def decayed(self) -> bool:
        return self.alpha < 1

    @classmethod
    def from_window(cls, maxbins: int, window: float) -> Self:
        """Config whose decay approximates a ``window``-sample moving average."""
        return cls(maxbins=maxbins, alpha=alpha_for_window(window))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        """Read the config from ``HISTSKETCH_*`` environment variables.

        Raises:
            ValueError: If a variable is set but malformed or out of range.
        """
        env = os.environ if environ is None else environ
        maxbins = int(env.get("HISTSKETCH_MAXBINS", DEFAULT_MAXBINS))
        alpha_raw = env.get("HISTSKETCH_ALPHA", "")
        window_raw = env.get("HISTSKETCH_WINDOW", "")

        if alpha_raw:
            if window_raw:
                logger.warning("HISTSKETCH_ALPHA is set; ignoring HISTSKETCH_WINDOW=%s", window_raw)
            config = cls(maxbins=maxbins, alpha=float(alpha_raw))
        elif window_raw:
            config = cls.from_window(maxbins, float(window_raw))
        else:
            config = cls(maxbins=maxbins)

        logger.debug("Histogram config from environment: %s", config)
        return config

    def build(self) -> Histogram:
        """Create an empty histogram with these settings."""
        if self.decayed:
            return WeightedHistogram(self.maxbins, self.alpha)
        return Histogram(self.maxbins)
