"""
EDF data record decoding.

Each data record is the concatenation, in signal order, of
``samples_per_record[i]`` little-endian int16 values for every signal ``i``.
"""

import logging

import numpy as np

from edfplus.constants import BYTES_PER_SAMPLE, SAMPLE_DTYPE
from edfplus.exceptions import TruncatedRecordError
from edfplus.parsers.stream import EDFStreamReader, ShortReadError
from edfplus.parsers.types import DataRecord, Header

logger = logging.getLogger(__name__)


def _signal_byte_offsets(header: Header) -> list[int]:
    """End offset (exclusive) of each signal's samples inside one record."""
    offsets = []
    total = 0
    for signal in header.signals:
        total += signal.samples_per_record * BYTES_PER_SAMPLE
        offsets.append(total)
    return offsets


def _truncated_signal(offsets: list[int], received: int) -> int:
    """Index of the first signal whose samples are incomplete."""
    for signal_index, end in enumerate(offsets):
        if received < end:
            return signal_index
    return len(offsets) - 1


def decode_record(data: bytes, header: Header, record_index: int) -> DataRecord:
    """
    Split one record's bytes into per-signal int16 arrays.

    Args:
        data: Exactly ``header.record_size_bytes`` bytes
        header: Decoded header
        record_index: Index of this record

    Returns:
        DataRecord with one array per signal
    """
    samples = np.frombuffer(data, dtype=SAMPLE_DTYPE)
    record = DataRecord(index=record_index)
    start = 0
    for signal in header.signals:
        end = start + signal.samples_per_record
        record.signals.append(samples[start:end])
        start = end
    return record


def read_records(reader: EDFStreamReader, header: Header) -> list[DataRecord]:
    """
    Read all data records following the header.

    Args:
        reader: Stream reader positioned immediately after the header
        header: Decoded header

    Returns:
        List of ``header.num_data_records`` DataRecords

    Raises:
        TruncatedRecordError: If the stream ends inside a record
    """
    record_size = header.record_size_bytes
    offsets = _signal_byte_offsets(header)
    records: list[DataRecord] = []

    for record_index in range(header.num_data_records):
        try:
            data = reader.read_bytes(record_size)
        except ShortReadError as e:
            raise TruncatedRecordError(
                record_index, _truncated_signal(offsets, e.received)
            ) from e
        records.append(decode_record(data, header, record_index))

    logger.debug(f"Decoded {len(records)} data records of {record_size} bytes")
    return records
