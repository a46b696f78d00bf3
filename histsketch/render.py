"""Human-readable views of a histogram.

``render_text`` produces the terminal form used by ``str(hist)``;
``plot_bins`` draws the bin masses with matplotlib.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from matplotlib.axes import Axes

    from histsketch.sketching.histogram import Histogram

__all__ = ["BAR_WIDTH", "plot_bins", "render_text"]

# Width of the bar drawn for a bin holding all of the mass.
BAR_WIDTH = 200


def render_text(hist: Histogram, width: int = BAR_WIDTH) -> str:
    """Render the histogram as text, one line per bin.

    Args:
        hist: Histogram to render.
        width: Bar length for a bin holding the whole total.

    Returns:
        ``Total: N`` followed by ``value<TAB>bar`` lines.
    """
    total = hist.count()
    lines = [f"Total: {total}"]
    for value, count in hist:
        bar = "." * int(count / total * width) if total > 0 else ""
        lines.append(f"{value}\t{bar}")
    return "\n".join(lines) + "\n"


def plot_bins(hist: Histogram, ax: Axes | None = None, **bar_kwargs) -> Axes:
    """Draw bin masses as a bar chart.

    Bars sit at each bin value; their width is half the gap to the nearest
    neighbour so adjacent bars never overlap.

    Args:
        hist: Histogram to plot.
        ax: Axes to draw on. A new figure is created when omitted.
        **bar_kwargs: Forwarded to ``Axes.bar``.

    Returns:
        The axes that were drawn on.
    """
    import matplotlib.pyplot as plt

    if ax is None:
        _fig, ax = plt.subplots(figsize=(8, 5))

    values = [value for value, _ in hist]
    counts = [count for _, count in hist]

    if len(values) > 1:
        gaps = [b - a for a, b in zip(values, values[1:])]
        widths = [
            min(gaps[max(i - 1, 0)], gaps[min(i, len(gaps) - 1)]) / 2
            for i in range(len(values))
        ]
    else:
        widths = [1.0] * len(values)

    bar_kwargs.setdefault("align", "center")
    ax.bar(values, counts, width=widths, **bar_kwargs)
    ax.set_xlabel("Value")
    ax.set_ylabel("Count")
    ax.set_title(f"Histogram ({hist.bins_count()} bins, total={hist.count()})")
    return ax
