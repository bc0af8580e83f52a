"""Bi-level projection of numeric EDF signals."""

from datetime import datetime
from enum import IntEnum

import numpy as np

from edfplus.constants import BILEVEL_LABEL_SUFFIX
from edfplus.exceptions import UnsupportedSignalKindError
from edfplus.signals.base import EDFSignal, SignalKind, TimeLike


class Level(IntEnum):
    """Classification of a sample against two reference levels."""

    TRANSITION = 0
    LOW = 1
    HIGH = 2


class BiLevelSignal:
    """
    A numeric signal coerced into two levels.

    Without a tolerance every sample snaps to the nearer level (ties go to
    ``high``). With a tolerance, samples within ``tolerance`` of a level
    snap to it and the rest are transitions; ``low`` is checked first.
    """

    def __init__(
        self,
        signal: EDFSignal,
        low: float,
        high: float,
        tolerance: float | None = None,
    ):
        """
        Wrap a numeric signal.

        Raises:
            UnsupportedSignalKindError: If ``signal`` is not numeric
        """
        if getattr(signal, "kind", SignalKind.NUMERIC) != SignalKind.NUMERIC:
            raise UnsupportedSignalKindError("bi-level projection", signal.kind.value)
        self.signal = signal
        self.low = float(low)
        self.high = float(high)
        self.tolerance = None if tolerance is None else float(tolerance)

    @property
    def label(self) -> str:
        return self.signal.label + BILEVEL_LABEL_SUFFIX

    @property
    def definition(self) -> None:
        """Derived signals have no header definition."""
        return None

    @property
    def start_time(self) -> datetime:
        return self.signal.start_time

    @property
    def end_time(self) -> datetime:
        return self.signal.end_time

    @property
    def sampling_period(self) -> float:
        return self.signal.sampling_period

    def _nearest_is_low(self, values: np.ndarray) -> np.ndarray:
        return np.abs(values - self.low) < np.abs(values - self.high)

    def classify(self, values: np.ndarray) -> list[Level]:
        """Classify physical values into LOW, HIGH or TRANSITION."""
        values = np.asarray(values, dtype=np.float64)
        if self.tolerance is None:
            return [
                Level.LOW if is_low else Level.HIGH
                for is_low in self._nearest_is_low(values)
            ]

        levels = []
        for value in values:
            if abs(value - self.low) < self.tolerance:
                levels.append(Level.LOW)
            elif abs(value - self.high) < self.tolerance:
                levels.append(Level.HIGH)
            else:
                levels.append(Level.TRANSITION)
        return levels

    def collapse(self, values: np.ndarray) -> np.ndarray:
        """Project physical values onto the two levels."""
        values = np.asarray(values, dtype=np.float64)
        if self.tolerance is None:
            return np.where(self._nearest_is_low(values), self.low, self.high)

        in_low = np.abs(values - self.low) < self.tolerance
        in_high = ~in_low & (np.abs(values - self.high) < self.tolerance)
        result = values.copy()
        result[in_low] = self.low
        result[in_high] = self.high
        return result

    def recording(
        self, start: TimeLike | None = None, end: TimeLike | None = None
    ) -> np.ndarray:
        """Bi-level projection of the wrapped signal's physical recording."""
        return self.collapse(self.signal.recording(start, end))

    def bilevel_recording(
        self, start: TimeLike | None = None, end: TimeLike | None = None
    ) -> list[Level]:
        """Per-sample level classification of the wrapped signal's recording."""
        return self.classify(self.signal.recording(start, end))

    def __repr__(self) -> str:
        return (
            f"<BiLevelSignal label={self.label!r} low={self.low} high={self.high} "
            f"tolerance={self.tolerance}>"
        )
