"""Numeric (calibrated) EDF signals."""

import numpy as np

from edfplus.constants import SAMPLE_DTYPE
from edfplus.signals.base import EDFSignal, SignalKind, TimeLike


class DataSignal(EDFSignal):
    """
    A signal measuring a physical quantity at regular intervals.

    Usage:
        signal = edf.get_signal("EEG Fpz-Cz")
        values = signal.recording(signal.start_time, signal.end_time)
    """

    kind = SignalKind.NUMERIC

    def __init__(self, edf, signal_index: int):
        super().__init__(edf, signal_index)
        # Fail at construction, not at first query, on unusable calibration
        _ = self.calibration

    def digital_recording(
        self, start: TimeLike | None = None, end: TimeLike | None = None
    ) -> np.ndarray:
        """
        Return raw int16 samples between two times.

        Args:
            start: Window start (default: recording start)
            end: Window end, exclusive (default: recording end)

        Returns:
            int16 array in chronological order

        Raises:
            OutOfRangeError: If the window extends outside the recording
            InvalidRangeError: If start is after end
        """
        start = self.start_time if start is None else start
        end = self.end_time if end is None else end
        window = self.resolve_window(start, end)

        if window.num_samples(self.samples_per_record) <= 0:
            return np.empty(0, dtype=SAMPLE_DTYPE)

        records = self.edf.records
        index = self.signal_index
        if window.start_record == window.end_record:
            return records[window.start_record].samples(index)[
                window.start_sample : window.end_sample
            ].copy()

        parts = [records[window.start_record].samples(index)[window.start_sample :]]
        for record_index in range(window.start_record + 1, window.end_record):
            parts.append(records[record_index].samples(index))
        parts.append(records[window.end_record].samples(index)[: window.end_sample])
        return np.concatenate(parts)

    def recording(
        self, start: TimeLike | None = None, end: TimeLike | None = None
    ) -> np.ndarray:
        """
        Return samples between two times, in physical units.

        Args:
            start: Window start (default: recording start)
            end: Window end, exclusive (default: recording end)

        Returns:
            float64 array in chronological order
        """
        return self.calibration.to_physical(self.digital_recording(start, end))

    def timestamps(
        self, start: TimeLike | None = None, end: TimeLike | None = None
    ) -> np.ndarray:
        """Offsets in seconds from the recording start of each sample in a window."""
        start = self.start_time if start is None else start
        end = self.end_time if end is None else end
        window = self.resolve_window(start, end)
        count = max(window.num_samples(self.samples_per_record), 0)
        first = window.start_record * self.samples_per_record + window.start_sample
        return (first + np.arange(count)) * self.sampling_period
