"""Decoders for the EDF header and data records."""

from edfplus.parsers.header import read_header
from edfplus.parsers.records import read_records
from edfplus.parsers.stream import EDFStreamReader
from edfplus.parsers.types import DataRecord, Header, SignalDefinition

__all__ = [
    "DataRecord",
    "EDFStreamReader",
    "Header",
    "SignalDefinition",
    "read_header",
    "read_records",
]
