"""JSON encoding of histogram state.

The encoder and decoder accept a logger per call instead of holding a
module-wide one, so embedding applications decide where diagnostics go.
When no logger is passed the module logger is used, which is silent unless
logging has been enabled (see ``histsketch.logging_config``).

Example::

    payload = dumps(hist)
    copy = loads(payload)
    assert copy.bins_count() == hist.bins_count()
"""

from __future__ import annotations

import json
import logging

from histsketch.sketching.histogram import Histogram, restore
from histsketch.state import HistogramState, StateError

__all__ = ["dumps", "load_into", "loads"]

_logger = logging.getLogger(__name__)


def dumps(hist: Histogram, logger: logging.Logger | None = None) -> str:
    """Encode a histogram's state as JSON text."""
    log = logger or _logger
    state = hist.to_state()
    try:
        text = json.dumps(state.to_dict(), allow_nan=False)
    except (TypeError, ValueError):
        log.exception("dumps: failed to encode %r", state)
        raise
    log.debug("dumps: encoded %d bins, total=%d", len(state.bins), state.total)
    return text


def _decode(text: str | bytes, log: logging.Logger) -> HistogramState:
    try:
        data = json.loads(text)
    except (ValueError, TypeError) as e:
        log.error("loads: malformed JSON: %s", e)
        raise StateError(f"malformed histogram JSON: {e}") from e

    try:
        state = HistogramState.from_dict(data)
    except StateError as e:
        log.error("loads: invalid histogram state: %s", e)
        raise
    log.debug("loads: decoded %d bins, total=%d", len(state.bins), state.total)
    return state


def loads(text: str | bytes, logger: logging.Logger | None = None) -> Histogram:
    """Decode JSON text into a new histogram of the matching variant.

    Raises:
        StateError: If the text is not valid JSON or not a valid state.
    """
    return restore(_decode(text, logger or _logger))


def load_into(hist: Histogram, text: str | bytes, logger: logging.Logger | None = None) -> None:
    """Replace ``hist``'s contents with the state encoded in ``text``.

    The histogram is left untouched if decoding fails.

    Raises:
        StateError: If the text is invalid or the state does not fit the
            histogram's variant.
    """
    log = logger or _logger
    state = _decode(text, log)
    try:
        hist.load_state(state)
    except StateError as e:
        log.error("load_into: %s", e)
        raise
