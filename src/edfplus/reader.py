"""
EDF/EDF+ File Reader

Decodes an entire EDF+ file into memory (header plus all data records) and
hands out signal views over it.

Usage:
    edf = read_edf("recording.edf")
    for label in edf.list_signal_labels():
        print(label)

    eeg = edf.get_signal("EEG Fpz-Cz")
    values = eeg.recording(eeg.start_time, eeg.end_time)

    for annotation in edf.get_signal("EDF Annotations").annotations():
        print(annotation.time(), annotation.annotations)
"""

import logging

from pathlib import Path
from typing import BinaryIO

from edfplus.parsers.header import read_header
from edfplus.parsers.records import read_records
from edfplus.parsers.stream import EDFStreamReader
from edfplus.parsers.types import DataRecord, Header
from edfplus.signals.annotations import AnnotationSignal
from edfplus.signals.base import EDFSignal, SignalKind
from edfplus.signals.data_signal import DataSignal

logger = logging.getLogger(__name__)


class EDFFile:
    """A fully decoded EDF+ file. Header and records are never mutated."""

    def __init__(self, header: Header, records: list[DataRecord], name: str = ""):
        self.header = header
        self.records = records
        self.name = name

    def signal_kind(self, signal_index: int) -> SignalKind:
        """Kind of the signal at ``signal_index``."""
        if self.header.signals[signal_index].is_annotation:
            return SignalKind.ANNOTATION
        return SignalKind.NUMERIC

    def list_signal_labels(self) -> list[str]:
        return [signal.label for signal in self.header.signals]

    def signal_index(self, label: str) -> int:
        """
        Index of the first signal with this label.

        Raises:
            KeyError: If no signal has this label
        """
        for index, signal in enumerate(self.header.signals):
            if signal.label == label:
                return index
        raise KeyError(
            f"Signal '{label}' not found. Available: {self.list_signal_labels()}"
        )

    def get_signal(self, key: int | str) -> EDFSignal:
        """
        Build the signal view for an index or label.

        Returns:
            DataSignal for numeric channels, AnnotationSignal for EDF+ annotations

        Raises:
            KeyError: If the label is unknown
            IndexError: If the index is out of range
            InvalidCalibrationError: If a numeric signal cannot be calibrated
            MalformedHeaderFieldError: If start or end time cannot be derived
        """
        index = self.signal_index(key) if isinstance(key, str) else key
        if not 0 <= index < self.header.num_signals:
            raise IndexError(
                f"Signal index {index} out of range (0..{self.header.num_signals - 1})"
            )

        kind = self.signal_kind(index)
        if kind == SignalKind.ANNOTATION:
            return AnnotationSignal(self, index)
        return DataSignal(self, index)

    def get_signals(self) -> list[EDFSignal]:
        """Signal views for every signal, in header order."""
        return [self.get_signal(index) for index in range(self.header.num_signals)]

    def annotation_signals(self) -> list[AnnotationSignal]:
        """Every annotation channel, each decoded independently."""
        return [
            AnnotationSignal(self, index)
            for index in self.header.annotation_signal_indices()
        ]

    def __repr__(self) -> str:
        return (
            f"<EDFFile name='{self.name}' signals={self.header.num_signals} "
            f"records={len(self.records)}>"
        )


def read_edf_stream(stream: BinaryIO, name: str = "") -> EDFFile:
    """
    Decode an EDF+ file from a binary stream positioned at offset 0.

    Args:
        stream: Binary file-like object
        name: Name used in log messages and repr

    Returns:
        Decoded EDFFile

    Raises:
        EDFDecodeError: If the header or records cannot be decoded
    """
    reader = EDFStreamReader(stream)
    header = read_header(reader)
    records = read_records(reader, header)
    logger.info(
        f"Decoded EDF{'+' if header.is_edf_plus else ''} file {name or '<stream>'}: "
        f"{header.num_signals} signals, {len(records)} records"
    )
    return EDFFile(header, records, name=name)


def read_edf(file_path: str | Path) -> EDFFile:
    """
    Read and decode an EDF+ file from disk.

    Raises:
        FileNotFoundError: If the file does not exist
        EDFDecodeError: If the header or records cannot be decoded
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"EDF file not found: {file_path}")

    with open(file_path, "rb") as f:
        return read_edf_stream(f, name=file_path.name)
