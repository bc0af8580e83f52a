"""
edfplus: EDF/EDF+ biosignal file decoder.

Decodes the fixed-width header and interleaved data records of an EDF+ file
and exposes time-addressable numeric signals and EDF+ annotations.
"""

from edfplus.exceptions import (
    EDFDecodeError,
    EDFError,
    EDFQueryError,
    InvalidCalibrationError,
    InvalidRangeError,
    MalformedAnnotationError,
    MalformedHeaderFieldError,
    OutOfRangeError,
    TruncatedHeaderError,
    TruncatedRecordError,
    UnsupportedSignalKindError,
)
from edfplus.processing import BiLevelSignal, Level
from edfplus.reader import EDFFile, read_edf, read_edf_stream
from edfplus.signals import AnnotationSignal, DataSignal, SignalKind

__all__ = [
    "AnnotationSignal",
    "BiLevelSignal",
    "DataSignal",
    "EDFDecodeError",
    "EDFError",
    "EDFFile",
    "EDFQueryError",
    "InvalidCalibrationError",
    "InvalidRangeError",
    "Level",
    "MalformedAnnotationError",
    "MalformedHeaderFieldError",
    "OutOfRangeError",
    "SignalKind",
    "TruncatedHeaderError",
    "TruncatedRecordError",
    "UnsupportedSignalKindError",
    "read_edf",
    "read_edf_stream",
]
