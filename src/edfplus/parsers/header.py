"""
EDF/EDF+ header decoding.

Header layout (all fields fixed-width ASCII, space padded):

    version(8) patient_id(80) recording_id(80) start_date(8) start_time(8)
    header_bytes(8) reserved(44) num_data_records(8) duration_data_records(8)
    num_signals(4)

followed by ``num_signals`` repetitions of each per-signal field, one full
pass per field: label(16) for every signal, then transducer_type(80) for
every signal, and so on through reserved(32).
"""

import logging
import math

from typing import Any

from edfplus.constants import HEADER_FIELDS, SIGNAL_FIELDS
from edfplus.exceptions import MalformedHeaderFieldError, TruncatedHeaderError
from edfplus.parsers.stream import EDFStreamReader
from edfplus.parsers.types import Header, SignalDefinition

logger = logging.getLogger(__name__)

_INT_FIELDS = {"header_bytes", "num_data_records", "num_signals", "samples_per_record"}
_FLOAT_FIELDS = {"duration_data_records"}


def _read_field(
    reader: EDFStreamReader, field: str, width: int, signal_index: int | None = None
) -> str:
    try:
        return reader.read_ascii(width)
    except EOFError as e:
        raise TruncatedHeaderError(field, signal_index) from e


def _parse_int(value: str, field: str, signal_index: int | None = None) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise MalformedHeaderFieldError(field, value, signal_index) from None
    if parsed < 0:
        raise MalformedHeaderFieldError(field, value, signal_index)
    return parsed


def _parse_float(value: str, field: str) -> float:
    try:
        parsed = float(value)
    except ValueError:
        raise MalformedHeaderFieldError(field, value) from None
    if parsed < 0 or not math.isfinite(parsed):
        raise MalformedHeaderFieldError(field, value)
    return parsed


def _convert(value: str, field: str, signal_index: int | None = None) -> Any:
    if field in _INT_FIELDS:
        return _parse_int(value, field, signal_index)
    if field in _FLOAT_FIELDS:
        return _parse_float(value, field)
    return value


def read_header(reader: EDFStreamReader) -> Header:
    """
    Read the EDF header from a stream positioned at offset 0.

    Args:
        reader: Stream reader at the start of the file

    Returns:
        Fully decoded Header

    Raises:
        TruncatedHeaderError: If the stream ends inside a header field
        MalformedHeaderFieldError: If a numeric field cannot be parsed
    """
    fields: dict[str, Any] = {}
    for name, width in HEADER_FIELDS:
        fields[name] = _convert(_read_field(reader, name, width), name)

    num_signals: int = fields["num_signals"]
    logger.debug(
        f"Fixed header: {fields['num_data_records']} records x "
        f"{fields['duration_data_records']}s, {num_signals} signals"
    )

    per_signal: list[dict[str, Any]] = [{} for _ in range(num_signals)]
    for name, width in SIGNAL_FIELDS:
        for signal_index in range(num_signals):
            raw = _read_field(reader, name, width, signal_index)
            per_signal[signal_index][name] = _convert(raw, name, signal_index)

    header = Header(
        **fields,
        signals=[SignalDefinition(**values) for values in per_signal],
    )

    if header.header_bytes != header.expected_header_bytes:
        logger.warning(
            f"Header declares {header.header_bytes} bytes but {num_signals} signals "
            f"imply {header.expected_header_bytes}"
        )

    return header
