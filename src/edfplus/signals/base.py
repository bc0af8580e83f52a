"""
Signal views over a decoded EDF file.

A signal view is identified by ``(EDFFile, signal_index)``. It never owns
samples; it indexes into the file's data records and only copies when
producing a result.
"""

import math

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from functools import cached_property
from typing import TYPE_CHECKING, Union

import numpy as np

from edfplus.constants import INDEX_SNAP_EPSILON, TIMEDELTA_RESOLUTION_SLACK
from edfplus.exceptions import (
    InvalidCalibrationError,
    InvalidRangeError,
    MalformedHeaderFieldError,
    OutOfRangeError,
)
from edfplus.parsers.types import SignalDefinition

if TYPE_CHECKING:
    from edfplus.reader import EDFFile

# Absolute datetimes, offsets from the recording start, or seconds
TimeLike = Union[datetime, timedelta, float]


class SignalKind(str, Enum):
    """Kinds of signal stored in an EDF+ file."""

    NUMERIC = "numeric"
    ANNOTATION = "annotation"


@dataclass(frozen=True)
class Calibration:
    """Affine digital -> physical transform: ``physical = gain * digital + offset``."""

    gain: float
    offset: float

    @classmethod
    def from_definition(
        cls, definition: SignalDefinition, signal_index: int
    ) -> "Calibration":
        """
        Derive the transform from the header min/max fields.

        Raises:
            MalformedHeaderFieldError: If a min/max field is not a decimal
            InvalidCalibrationError: If digital minimum equals digital maximum
        """
        values = {}
        for name in (
            "physical_minimum",
            "physical_maximum",
            "digital_minimum",
            "digital_maximum",
        ):
            raw = getattr(definition, name)
            try:
                values[name] = float(raw)
            except ValueError:
                raise MalformedHeaderFieldError(name, raw, signal_index) from None

        digital_range = values["digital_maximum"] - values["digital_minimum"]
        if digital_range == 0:
            raise InvalidCalibrationError(signal_index)

        gain = (values["physical_maximum"] - values["physical_minimum"]) / digital_range
        offset = values["physical_minimum"] - gain * values["digital_minimum"]
        return cls(gain=gain, offset=offset)

    def to_physical(self, digital: np.ndarray) -> np.ndarray:
        """Convert digital samples to physical units (float64)."""
        return self.gain * np.asarray(digital, dtype=np.float64) + self.offset

    def to_digital(self, physical: np.ndarray) -> np.ndarray:
        """Inverse transform; returns float64, not rounded."""
        return (np.asarray(physical, dtype=np.float64) - self.offset) / self.gain


@dataclass(frozen=True)
class SampleWindow:
    """
    A resolved time window in record coordinates.

    Covers samples ``[start_sample, spr)`` of ``start_record``, every record
    strictly between, and ``[0, end_sample)`` of ``end_record``.
    """

    start_record: int
    start_sample: int
    end_record: int
    end_sample: int

    def num_samples(self, samples_per_record: int) -> int:
        return (
            (self.end_record - self.start_record) * samples_per_record
            + self.end_sample
            - self.start_sample
        )


def _floor_index(value: float, slack: float = 0.0) -> int:
    """Floor, snapping values within rounding distance (or ``slack``) of an integer."""
    nearest = round(value)
    tolerance = max(INDEX_SNAP_EPSILON * max(1.0, abs(value)), slack)
    if abs(value - nearest) <= tolerance:
        return int(nearest)
    return math.floor(value)


class EDFSignal:
    """Base view shared by numeric and annotation signals."""

    kind: SignalKind

    def __init__(self, edf: "EDFFile", signal_index: int):
        """
        Initialize a signal view.

        Args:
            edf: Decoded EDF file owning header and records
            signal_index: Index of this signal in the header
        """
        self.edf = edf
        self.signal_index = signal_index
        self._start_time = edf.header.start_datetime
        self._end_time = edf.header.end_datetime

    @property
    def definition(self) -> SignalDefinition | None:
        """Header definition of this signal."""
        return self.edf.header.signals[self.signal_index]

    @property
    def label(self) -> str:
        return self.edf.header.signals[self.signal_index].label

    @property
    def start_time(self) -> datetime:
        """Start date and time of the recording."""
        return self._start_time

    @property
    def end_time(self) -> datetime:
        """End date and time of the recording."""
        return self._end_time

    @property
    def samples_per_record(self) -> int:
        return self.edf.header.signals[self.signal_index].samples_per_record

    @property
    def record_duration(self) -> float:
        return self.edf.header.duration_data_records

    @property
    def sampling_period(self) -> float:
        """Seconds between two samples of this signal."""
        if self.samples_per_record == 0:
            return 0.0
        return self.record_duration / self.samples_per_record

    @property
    def sample_rate(self) -> float:
        """Samples per second (Hz)."""
        if self.record_duration == 0:
            return 0.0
        return self.samples_per_record / self.record_duration

    @cached_property
    def calibration(self) -> Calibration:
        """Digital -> physical transform for this signal."""
        return Calibration.from_definition(self.definition, self.signal_index)

    # ------------------------------------------------------------------
    # Time <-> index arithmetic
    # ------------------------------------------------------------------

    def to_offset(self, t: TimeLike) -> float:
        """Convert a datetime, timedelta, or seconds value to seconds from start."""
        if isinstance(t, datetime):
            return (t - self._start_time).total_seconds()
        if isinstance(t, timedelta):
            return t.total_seconds()
        return float(t)

    def _locate(self, offset: float, slack: float = 0.0) -> tuple[int, int]:
        """
        Map a non-negative offset to ``(record, sample)``, clamped to the data.

        ``slack`` is the uncertainty of ``offset`` in seconds.
        """
        spr = self.samples_per_record
        num_records = self.edf.header.num_data_records
        rd = self.record_duration
        if spr == 0 or rd <= 0 or num_records == 0:
            return 0, 0

        period = self.sampling_period
        index = max(_floor_index(offset / period, slack / period), 0)
        record, sample = divmod(index, spr)

        if record >= num_records:
            return num_records - 1, spr
        return record, sample

    @staticmethod
    def _slack(t: TimeLike) -> float:
        if isinstance(t, (datetime, timedelta)):
            return TIMEDELTA_RESOLUTION_SLACK
        return 0.0

    def _is_before(self, t: TimeLike) -> bool:
        if isinstance(t, datetime):
            return t < self._start_time
        return self.to_offset(t) < 0

    def _is_after(self, t: TimeLike) -> bool:
        # datetimes compare against end_time so that end_time itself, rounded
        # to microseconds, is always inside the recording
        if isinstance(t, datetime):
            return t > self._end_time
        return self.to_offset(t) > self.edf.header.duration_seconds

    def _bounded_offset(self, t: TimeLike) -> float:
        return min(max(self.to_offset(t), 0.0), self.edf.header.duration_seconds)

    def window_offsets(self, start: TimeLike, end: TimeLike) -> tuple[float, float] | None:
        """
        Window bounds in seconds, or None if outside the recording or reversed.
        """
        if self._is_before(start) or self._is_after(end):
            return None
        start_offset = self._bounded_offset(start)
        end_offset = self._bounded_offset(end)
        if self.to_offset(start) > self.to_offset(end):
            return None
        return start_offset, end_offset

    def check_window(self, start: TimeLike, end: TimeLike) -> tuple[float, float]:
        """
        Validate a window against the recording bounds.

        Returns:
            ``(start_offset, end_offset)`` in seconds

        Raises:
            OutOfRangeError: If the window extends outside the recording
            InvalidRangeError: If start is after end
        """
        if self._is_before(start):
            raise OutOfRangeError(start, self._start_time, before_recording=True)
        if self._is_after(end):
            raise OutOfRangeError(end, self._end_time, before_recording=False)
        if self.to_offset(start) > self.to_offset(end):
            raise InvalidRangeError(start, end, "Start is after end")
        return self._bounded_offset(start), self._bounded_offset(end)

    def resolve_window(self, start: TimeLike, end: TimeLike) -> SampleWindow:
        """Resolve ``[start, end)`` into record/sample coordinates."""
        start_offset, end_offset = self.check_window(start, end)
        start_record, start_sample = self._locate(start_offset, self._slack(start))
        end_record, end_sample = self._locate(end_offset, self._slack(end))
        return SampleWindow(start_record, start_sample, end_record, end_sample)

    def offset_to_index(self, offset: float) -> int:
        """Global sample index (across records) for an offset in seconds."""
        record, sample = self._locate(offset)
        return record * self.samples_per_record + sample

    def index_to_offset(self, index: int) -> float:
        """Offset in seconds of a global sample index."""
        spr = self.samples_per_record
        if spr == 0:
            return 0.0
        record, sample = divmod(index, spr)
        return record * self.record_duration + sample * self.sampling_period

    def time_to_index(self, t: TimeLike) -> int:
        """Global sample index of the sample covering ``t``."""
        start_offset, _ = self.check_window(t, t)
        record, sample = self._locate(start_offset, self._slack(t))
        return record * self.samples_per_record + sample

    def index_to_time(self, index: int) -> datetime:
        """Wall-clock time of a global sample index."""
        return self._start_time + timedelta(seconds=self.index_to_offset(index))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} index={self.signal_index} label={self.label!r}>"
