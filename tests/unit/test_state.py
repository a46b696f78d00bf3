"""Tests for histogram state snapshots."""

import math

import pytest

from histsketch.sketching import Histogram, WeightedHistogram, restore
from histsketch.state import HistogramState, StateError


def _filled(hist: Histogram, rng, n: int = 500) -> Histogram:
    for _ in range(n):
        hist.add(rng.gauss(10, 3))
    return hist


def _valid_dict() -> dict:
    return {
        "bins": [{"value": 1.0, "count": 2.0}, {"value": 3.0, "count": 0.5}],
        "maxbins": 4,
        "total": 2,
        "alpha": 0.5,
    }


class TestHistogramStateExport:
    """Tests for exporting state."""

    def test_export_matches_bins(self, rng):
        hist = _filled(Histogram(20), rng)

        state = hist.to_state()

        assert state.maxbins == 20
        assert state.total == hist.count()
        assert state.alpha == 1.0
        assert state.bins == tuple(hist)

    def test_to_dict_layout(self):
        hist = WeightedHistogram(4, 0.5)
        hist.add(1.0)
        hist.add(3.0)

        assert hist.to_state().to_dict() == {
            "bins": [{"value": 1.0, "count": 0.5}, {"value": 3.0, "count": 1.0}],
            "maxbins": 4,
            "total": 1,
            "alpha": 0.5,
        }

    def test_empty_histogram(self):
        state = Histogram(3).to_state()

        assert state.bins == ()
        assert state.total == 0


class TestHistogramStateRoundTrip:
    """Tests for export followed by import."""

    @pytest.mark.parametrize(
        "factory",
        [lambda: Histogram(20), lambda: WeightedHistogram(20, 0.97), lambda: Histogram(1)],
    )
    def test_round_trip_preserves_everything(self, factory, rng):
        hist = _filled(factory(), rng)

        copy = restore(HistogramState.from_dict(hist.to_state().to_dict()))

        assert copy.bins_count() == hist.bins_count()
        assert [copy.bins(i) for i in range(copy.bins_count())] == [
            hist.bins(i) for i in range(hist.bins_count())
        ]
        assert copy.count() == hist.count()
        assert copy.alpha == hist.alpha
        assert copy.maxbins == hist.maxbins

    def test_restore_picks_variant(self):
        plain = restore(HistogramState(bins=(), maxbins=5, total=0, alpha=1.0))
        weighted = restore(HistogramState(bins=(), maxbins=5, total=0, alpha=0.8))

        assert type(plain) is Histogram
        assert type(weighted) is WeightedHistogram
        assert weighted.alpha == 0.8

    def test_restored_histogram_keeps_decaying(self):
        hist = WeightedHistogram(5, 0.5)
        hist.add(1.0)

        copy = restore(hist.to_state())
        copy.add(2.0)

        assert list(copy) == [(1.0, 0.5), (2.0, 1.0)]

    def test_import_has_no_side_effects(self):
        """No merge or decay runs on import."""
        state = HistogramState(bins=((1.0, 0.4), (2.0, 0.4)), maxbins=2, total=0, alpha=0.5)

        hist = WeightedHistogram.from_state(state)

        assert list(hist) == [(1.0, 0.4), (2.0, 0.4)]
        assert hist.count() == 0

    def test_heavily_merged_state_round_trips(self, rng):
        hist = WeightedHistogram(5, 0.9)
        for _ in range(3000):
            hist.add(rng.uniform(0, 1) ** 3, count=rng.uniform(0.1, 3))

        copy = restore(HistogramState.from_dict(hist.to_state().to_dict()))

        assert copy.count() == hist.count()
        assert list(copy) == list(hist)


class TestLoadState:
    """Tests for replacing a histogram in place."""

    def test_replaces_contents(self, rng):
        source = _filled(Histogram(8), rng)
        target = Histogram(30)
        target.add(-100.0)

        target.load_state(source.to_state())

        assert list(target) == list(source)
        assert target.maxbins == 8
        assert target.count() == source.count()

    def test_loaded_bins_are_independent(self):
        source = Histogram(8)
        source.add(1.0)
        target = Histogram(8)
        target.load_state(source.to_state())

        target.add(1.0)

        assert source.bins(0) == (1.0, 1.0)
        assert target.bins(0) == (2.0, 1.0)

    def test_plain_rejects_decayed_state(self):
        hist = Histogram(8)
        hist.add(4.0)
        state = HistogramState(bins=((1.0, 1.0),), maxbins=3, total=1, alpha=0.5)

        with pytest.raises(StateError, match="WeightedHistogram"):
            hist.load_state(state)

        assert list(hist) == [(4.0, 1.0)]
        assert hist.maxbins == 8
        assert hist.count() == 1

    def test_weighted_accepts_any_alpha(self):
        hist = WeightedHistogram(8, 0.5)
        hist.load_state(HistogramState(bins=(), maxbins=3, total=0, alpha=0.9))

        assert hist.alpha == 0.9


class TestHistogramStateValidation:
    """Tests for rejecting malformed records."""

    def test_from_dict_accepts_valid(self):
        state = HistogramState.from_dict(_valid_dict())

        assert state.bins == ((1.0, 2.0), (3.0, 0.5))
        assert state.maxbins == 4

    def test_rejects_non_mapping(self):
        with pytest.raises(StateError, match="mapping"):
            HistogramState.from_dict([1, 2, 3])  # type: ignore

    def test_reports_missing_fields(self):
        data = _valid_dict()
        del data["total"]
        del data["alpha"]

        with pytest.raises(StateError, match="total, alpha"):
            HistogramState.from_dict(data)

    @pytest.mark.parametrize(
        "field, value, message",
        [
            ("maxbins", "4", "maxbins"),
            ("maxbins", 0, "maxbins"),
            ("maxbins", 4.0, "maxbins"),
            ("maxbins", True, "maxbins"),
            ("total", -1, "total"),
            ("total", 2.5, "total"),
            ("total", None, "total"),
            ("alpha", 0, "alpha"),
            ("alpha", 1.01, "alpha"),
            ("alpha", "0.5", "alpha"),
            ("alpha", math.nan, "alpha"),
            ("bins", {"value": 1.0}, "bins must be a list"),
            ("bins", [[1.0, 2.0]], "bin 0"),
            ("bins", [{"value": 1.0}], "bin 0"),
            ("bins", [{"value": "1", "count": 1.0}], "bin 0 value"),
            ("bins", [{"value": math.inf, "count": 1.0}], "bin 0 value"),
            ("bins", [{"value": 1.0, "count": -0.5}], "bin 0 count"),
            ("bins", [{"value": 1.0, "count": math.nan}], "bin 0 count"),
            ("bins", [{"value": 1.0, "count": False}], "bin 0 count"),
            ("bins", [{"value": 10**400, "count": 1.0}], "bin 0 value"),
            ("bins", [{"value": 1.0, "count": 10**400}], "bin 0 count"),
            ("alpha", 10**400, "alpha"),
        ],
    )
    def test_rejects_bad_field(self, field, value, message):
        data = _valid_dict()
        data[field] = value

        with pytest.raises(StateError, match=message):
            HistogramState.from_dict(data)

    def test_rejects_unsorted_bins(self):
        data = _valid_dict()
        data["bins"] = [{"value": 3.0, "count": 1.0}, {"value": 1.0, "count": 1.0}]

        with pytest.raises(StateError, match="strictly increasing"):
            HistogramState.from_dict(data)

    def test_rejects_duplicate_values(self):
        data = _valid_dict()
        data["bins"] = [{"value": 1.0, "count": 1.0}, {"value": 1.0, "count": 1.0}]

        with pytest.raises(StateError, match="strictly increasing"):
            HistogramState.from_dict(data)

    def test_rejects_too_many_bins(self):
        data = _valid_dict()
        data["maxbins"] = 1

        with pytest.raises(StateError, match="maxbins is 1"):
            HistogramState.from_dict(data)

    def test_state_error_is_value_error(self):
        assert issubclass(StateError, ValueError)

    def test_rejects_total_that_disagrees_with_bins(self):
        with pytest.raises(StateError, match="total 99"):
            HistogramState(bins=((1.0, 5.0),), maxbins=3, total=99, alpha=1.0)

    def test_total_is_truncated_sum_of_counts(self):
        state = HistogramState(bins=((1.0, 0.75), (2.0, 1.5)), maxbins=3, total=2, alpha=0.5)

        assert state.total == 2

    def test_integer_fields_become_floats(self):
        state = HistogramState.from_dict(
            {"bins": [{"value": 5, "count": 2}], "maxbins": 3, "total": 2, "alpha": 1}
        )

        assert state.bins == ((5.0, 2.0),)
        value, count = state.bins[0]
        assert isinstance(value, float)
        assert isinstance(count, float)
        assert isinstance(state.alpha, float)
