"""
EDF+ annotation channel decoding.

The annotation channel stores text, not measurements. Each data record's
int16 samples are reassembled into bytes (low byte first) holding one or
more Time-stamped Annotation Lists (TALs):

    +onset[\\x15duration]\\x14text\\x14[text\\x14...]\\x00

- \\x00 (0): End of a TAL; also pads the rest of the record
- \\x14 (20): Separates the timestamp and each annotation text
- \\x15 (21): Separates onset from duration

The first TAL of every record is its time-keeping TAL, whose onset is the
record's start relative to the recording start. A TAL without text
contributes no annotation.

Example: +120.5\\x1512.5\\x14Obstructive apnea\\x14\\x00
"""

import logging
import re

import numpy as np

from edfplus.constants import SAMPLE_DTYPE, TAL_DURATION, TAL_END, TAL_SEPARATOR
from edfplus.exceptions import (
    InvalidRangeError,
    MalformedAnnotationError,
    UnsupportedSignalKindError,
)
from edfplus.signals.base import EDFSignal, SignalKind, TimeLike
from edfplus.signals.types import TimestampedAnnotation

logger = logging.getLogger(__name__)

_ONSET_PATTERN = re.compile(rb"[+-]\d+(\.\d*)?")
_DURATION_PATTERN = re.compile(rb"\d+(\.\d*)?")

_END = bytes([TAL_END])
_SEPARATOR = bytes([TAL_SEPARATOR])
_DURATION = bytes([TAL_DURATION])


def samples_to_bytes(samples: np.ndarray) -> bytes:
    """Reassemble int16 samples into bytes, two per sample, low byte first."""
    return np.asarray(samples).astype(SAMPLE_DTYPE).tobytes()


def split_tals(data: bytes) -> list[bytes]:
    """Split a record's bytes into TAL entries, dropping padding."""
    return [entry for entry in data.split(_END) if entry]


def parse_timestamp(field: bytes, record_index: int) -> tuple[float, float]:
    """
    Parse a TAL timestamp ``+onset`` or ``+onset\\x15duration``.

    Returns:
        ``(onset, duration)`` in seconds; duration is 0 when absent

    Raises:
        MalformedAnnotationError: If onset or duration is not a non-negative decimal
    """
    onset_bytes, _, duration_bytes = field.partition(_DURATION)

    if not _ONSET_PATTERN.fullmatch(onset_bytes):
        raise MalformedAnnotationError(record_index, f"invalid onset {onset_bytes!r}")
    onset = float(onset_bytes.decode("ascii"))
    if onset < 0:
        raise MalformedAnnotationError(record_index, f"negative onset {onset_bytes!r}")

    duration = 0.0
    if _DURATION in field:
        if not _DURATION_PATTERN.fullmatch(duration_bytes):
            raise MalformedAnnotationError(
                record_index, f"invalid duration {duration_bytes!r}"
            )
        duration = float(duration_bytes.decode("ascii"))

    return onset, duration


def parse_tal(entry: bytes, record_index: int) -> tuple[float, float, list[str]]:
    """
    Parse one TAL entry into onset, duration and its annotation texts.

    Empty text fields (including the one before the terminator) are dropped.
    """
    timestamp, *texts = entry.split(_SEPARATOR)
    onset, duration = parse_timestamp(timestamp, record_index)
    decoded = [text.decode("utf-8", errors="replace") for text in texts if text]
    return onset, duration, decoded


def decode_annotation_record(
    samples: np.ndarray, base, record_index: int
) -> tuple[float | None, list[TimestampedAnnotation]]:
    """
    Decode the annotations stored in one data record.

    Args:
        samples: The annotation channel's int16 samples for this record
        base: Recording start datetime
        record_index: Index of the record (for error reporting)

    Returns:
        Tuple of (record onset from the time-keeping TAL, annotations)
    """
    record_onset = None
    annotations = []
    for position, entry in enumerate(split_tals(samples_to_bytes(samples))):
        onset, duration, texts = parse_tal(entry, record_index)
        if position == 0:
            record_onset = onset
        if not texts:
            continue
        annotations.append(
            TimestampedAnnotation(
                base=base,
                onset=onset,
                duration=duration,
                annotations=texts,
                record_index=record_index,
            )
        )
    return record_onset, annotations


class AnnotationSignal(EDFSignal):
    """
    A signal containing timestamped text annotations (the EDF+ annotation channel).

    All records are decoded at construction; queries only filter.
    """

    kind = SignalKind.ANNOTATION

    def __init__(self, edf, signal_index: int):
        super().__init__(edf, signal_index)
        self._annotations: list[TimestampedAnnotation] = []
        self._record_onsets: list[float | None] = []

        for record in edf.records:
            record_onset, annotations = decode_annotation_record(
                record.samples(signal_index), self.start_time, record.index
            )
            self._record_onsets.append(record_onset)
            self._annotations.extend(annotations)

        logger.debug(
            f"Decoded {len(self._annotations)} annotations from signal {signal_index}"
        )

    def all_annotations(self) -> list[TimestampedAnnotation]:
        """Every decoded annotation, in record order."""
        return list(self._annotations)

    def record_onsets(self) -> list[float | None]:
        """Onset of each record's time-keeping TAL (None for an empty record)."""
        return list(self._record_onsets)

    def annotations(
        self, start: TimeLike | None = None, end: TimeLike | None = None
    ) -> list[TimestampedAnnotation]:
        """
        Return annotations whose end time falls within ``[start, end]``.

        Filtering is by ``end()`` (onset plus duration), inclusive on both
        sides, preserving decode order.

        Raises:
            InvalidRangeError: If the window is outside the recording or reversed
        """
        start = self.start_time if start is None else start
        end = self.end_time if end is None else end
        offsets = self.window_offsets(start, end)
        if offsets is None:
            raise InvalidRangeError(start, end)

        start_offset, end_offset = offsets
        return [
            annotation
            for annotation in self._annotations
            if start_offset <= annotation.onset + annotation.duration <= end_offset
        ]

    def recording(self, start: TimeLike | None = None, end: TimeLike | None = None):
        raise UnsupportedSignalKindError("recording", self.kind.value)
