"""histsketch: bounded-memory streaming histograms.

Summarize unbounded numeric streams in O(maxbins) memory and read
approximate quantiles, CDF values, mean, variance and modes at any time.

The library is silent by default; see ``histsketch.logging_config`` to
enable logging.
"""

import logging

from histsketch.codec import dumps, load_into, loads
from histsketch.config import HistogramConfig
from histsketch.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_file_logging,
    enable_json_logging,
    enable_timed_file_logging,
    set_level,
    set_module_level,
)
from histsketch.render import render_text
from histsketch.sketching import (
    Histogram,
    HistogramSummary,
    QuantileSketch,
    Sketch,
    WeightedHistogram,
    alpha_for_window,
    restore,
)
from histsketch.state import HistogramState, StateError

logging.getLogger("histsketch").addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "Histogram",
    "HistogramConfig",
    "HistogramState",
    "HistogramSummary",
    "QuantileSketch",
    "Sketch",
    "StateError",
    "WeightedHistogram",
    "alpha_for_window",
    "configure_from_env",
    "disable_logging",
    "dumps",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_file_logging",
    "enable_json_logging",
    "enable_timed_file_logging",
    "load_into",
    "loads",
    "render_text",
    "restore",
    "set_level",
    "set_module_level",
]
