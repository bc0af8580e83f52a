"""Signal views: numeric (calibrated) signals and EDF+ annotation channels."""

from edfplus.signals.annotations import AnnotationSignal
from edfplus.signals.base import Calibration, EDFSignal, SampleWindow, SignalKind
from edfplus.signals.data_signal import DataSignal
from edfplus.signals.types import TimestampedAnnotation

__all__ = [
    "AnnotationSignal",
    "Calibration",
    "DataSignal",
    "EDFSignal",
    "SampleWindow",
    "SignalKind",
    "TimestampedAnnotation",
]
