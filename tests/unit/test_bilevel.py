"""Tests for bi-level projection of numeric signals."""

from datetime import datetime, timedelta

import numpy as np
import pytest

from edfplus.exceptions import UnsupportedSignalKindError
from edfplus.processing.bilevel import BiLevelSignal, Level
from tests.helpers.synthetic_edf import (
    TestingSignal,
    annotation_signal,
    build_edf_bytes,
    decode_edf,
    ramp_signal,
)

START = datetime(2024, 3, 15, 22, 0, 0)
END = START + timedelta(seconds=10)


@pytest.fixture
def noisy_signal():
    """Twenty samples near 10 and 5 with one excursion to 7."""
    rng = np.random.default_rng(2017)
    means = [10, 10, 5, 5, 10, 10, 7, 5, 10, 10, 5, 5, 10, 10, 5, 5, 10, 10, 5, 5]
    values = [rng.random() + mean - 0.5 for mean in means]
    return TestingSignal(START, END, values)


class TestBiLevelBasics:
    """Tests for the wrapped signal's metadata."""

    def test_times_follow_wrapped_signal(self, noisy_signal):
        bilevel = BiLevelSignal(noisy_signal, 5, 10, 1)

        assert bilevel.start_time == START
        assert bilevel.end_time == END
        assert bilevel.sampling_period == noisy_signal.sampling_period

    def test_label_and_definition(self, noisy_signal):
        bilevel = BiLevelSignal(noisy_signal, 5, 10)

        assert bilevel.label == "Testing signal (bilevel)"
        assert bilevel.definition is None

    def test_annotation_signal_rejected(self):
        signals = [ramp_signal("Flow", 2, 1), annotation_signal([b"+0\x14\x14\x00"], 8)]
        edf = decode_edf(build_edf_bytes(signals, num_records=1))

        with pytest.raises(UnsupportedSignalKindError):
            BiLevelSignal(edf.get_signal(1), 0, 1)

    def test_wraps_decoded_numeric_signal(self, eight_sample_edf):
        bilevel = BiLevelSignal(eight_sample_edf.get_signal("Flow"), 0, 7)

        np.testing.assert_array_equal(bilevel.recording(), [0, 0, 0, 0, 7, 7, 7, 7])
        assert bilevel.label == "Flow (bilevel)"


class TestTolerance:
    """Tests for classification with a tolerance band."""

    def test_bilevel_recording(self, noisy_signal):
        bilevel = BiLevelSignal(noisy_signal, 5, 10, 1)

        H, L, T = Level.HIGH, Level.LOW, Level.TRANSITION
        expected = [H, H, L, L, H, H, T, L, H, H, L, L, H, H, L, L, H, H, L, L]
        assert bilevel.bilevel_recording(START, END) == expected

    def test_recording_snaps_only_within_tolerance(self):
        bilevel = BiLevelSignal(TestingSignal(START, END, [4.6, 7.0, 9.8]), 5, 10, 1)

        np.testing.assert_allclose(bilevel.recording(), [5.0, 7.0, 10.0])

    def test_low_checked_first(self):
        """Overlapping bands resolve to the low level."""
        bilevel = BiLevelSignal(TestingSignal(START, END, [1.5]), 1, 2, 1)

        assert bilevel.bilevel_recording() == [Level.LOW]
        np.testing.assert_allclose(bilevel.recording(), [1.0])

    def test_band_edge_is_transition(self):
        bilevel = BiLevelSignal(TestingSignal(START, END, [6.0]), 5, 10, 1)
        assert bilevel.bilevel_recording() == [Level.TRANSITION]

    def test_window_is_passed_through(self, noisy_signal):
        bilevel = BiLevelSignal(noisy_signal, 5, 10, 1)

        levels = bilevel.bilevel_recording(
            START + timedelta(seconds=2), START + timedelta(seconds=4)
        )
        assert levels == [Level.HIGH, Level.HIGH, Level.TRANSITION, Level.LOW]


class TestNearestLevel:
    """Tests for collapse without a tolerance."""

    def test_every_value_collapses_to_a_level(self):
        values = np.linspace(-5, 20, 100)
        bilevel = BiLevelSignal(TestingSignal(START, END, values), 5, 10)

        collapsed = bilevel.recording()
        assert set(np.unique(collapsed)) <= {5.0, 10.0}

        levels = bilevel.classify(values)
        expected_high = np.abs(values - 10) <= np.abs(values - 5)
        assert [level == Level.HIGH for level in levels] == expected_high.tolist()

    def test_tie_goes_to_high(self):
        bilevel = BiLevelSignal(TestingSignal(START, END, [7.5]), 5, 10)

        assert bilevel.bilevel_recording() == [Level.HIGH]
        np.testing.assert_allclose(bilevel.recording(), [10.0])

    def test_no_transitions(self, noisy_signal):
        bilevel = BiLevelSignal(noisy_signal, 5, 10)
        assert Level.TRANSITION not in bilevel.bilevel_recording()
