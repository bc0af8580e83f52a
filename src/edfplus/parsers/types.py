"""EDF format type definitions."""

import re

from dataclasses import dataclass, field
from datetime import datetime, timedelta

import numpy as np

from pydantic import BaseModel, Field

from edfplus.constants import (
    ANNOTATION_LABEL,
    BYTES_PER_SAMPLE,
    EDF_PLUS_CONTINUOUS,
    EDF_PLUS_DISCONTINUOUS,
    FIXED_HEADER_SIZE,
    RECORDING_STARTDATE_PREFIX,
    SIGNAL_HEADER_SIZE,
    START_DATE_FORMAT,
    START_TIME_FORMAT,
    YEAR_PIVOT,
)
from edfplus.exceptions import MalformedHeaderFieldError

_STARTDATE_PATTERN = re.compile(
    rf"^{RECORDING_STARTDATE_PREFIX}\s+\d{{2}}-[A-Za-z]{{3}}-(\d{{4}})\b"
)


class SignalDefinition(BaseModel):
    """Definition of a single EDF signal, as stored in the header."""

    label: str = Field(description="Signal name")
    transducer_type: str = Field(default="", description="Transducer type")
    physical_dimension: str = Field(default="", description="Units (e.g., 'uV')")
    physical_minimum: str = Field(description="Physical minimum (decimal string)")
    physical_maximum: str = Field(description="Physical maximum (decimal string)")
    digital_minimum: str = Field(description="Digital minimum (decimal string)")
    digital_maximum: str = Field(description="Digital maximum (decimal string)")
    prefiltering: str = Field(default="", description="Prefiltering info")
    samples_per_record: int = Field(ge=0, description="Samples per data record")
    reserved: str = Field(default="", description="Reserved text")

    @property
    def is_annotation(self) -> bool:
        """True for the EDF+ annotation channel."""
        return self.label == ANNOTATION_LABEL


class Header(BaseModel):
    """EDF file header information."""

    version: str = Field(description="EDF version")
    patient_id: str = Field(description="Patient identification")
    recording_id: str = Field(description="Recording identification")
    start_date: str = Field(description="Start date (dd.mm.yy)")
    start_time: str = Field(description="Start time (hh.mm.ss)")
    header_bytes: int = Field(ge=0, description="Header size in bytes")
    reserved: str = Field(default="", description="Reserved text")
    num_data_records: int = Field(ge=0, description="Number of data records")
    duration_data_records: float = Field(ge=0, description="Record duration (seconds)")
    num_signals: int = Field(ge=0, description="Number of signals")
    signals: list[SignalDefinition] = Field(
        default_factory=list, description="Per-signal definitions"
    )

    @property
    def expected_header_bytes(self) -> int:
        """Header size implied by the number of signals."""
        return FIXED_HEADER_SIZE + self.num_signals * SIGNAL_HEADER_SIZE

    @property
    def record_size_bytes(self) -> int:
        """Size of one data record in bytes."""
        return BYTES_PER_SAMPLE * sum(s.samples_per_record for s in self.signals)

    @property
    def duration_seconds(self) -> float:
        """Total recording duration in seconds."""
        return self.num_data_records * self.duration_data_records

    @property
    def is_edf_plus(self) -> bool:
        return self.reserved.startswith((EDF_PLUS_CONTINUOUS, EDF_PLUS_DISCONTINUOUS))

    @property
    def is_discontinuous(self) -> bool:
        return self.reserved.startswith(EDF_PLUS_DISCONTINUOUS)

    @property
    def start_datetime(self) -> datetime:
        """
        Combine start date and start time into a datetime.

        Two-digit years 85-99 map to 19xx and 00-84 to 20xx. When the
        recording identification carries an EDF+ "Startdate dd-MMM-yyyy"
        entry, its four-digit year is used instead.

        Raises:
            MalformedHeaderFieldError: If date or time cannot be parsed
        """
        try:
            date = datetime.strptime(self.start_date, START_DATE_FORMAT)
        except ValueError:
            raise MalformedHeaderFieldError("start_date", self.start_date) from None
        try:
            time = datetime.strptime(self.start_time, START_TIME_FORMAT)
        except ValueError:
            raise MalformedHeaderFieldError("start_time", self.start_time) from None

        two_digit_year = date.year % 100
        year = 2000 + two_digit_year if two_digit_year < YEAR_PIVOT else 1900 + two_digit_year

        match = _STARTDATE_PATTERN.match(self.recording_id)
        if match and int(match.group(1)) % 100 == two_digit_year:
            year = int(match.group(1))

        try:
            return datetime(
                year, date.month, date.day, time.hour, time.minute, time.second
            )
        except ValueError:
            # e.g. 29.02.00 moved to a non-leap Startdate year
            raise MalformedHeaderFieldError("start_date", self.start_date) from None

    @property
    def end_datetime(self) -> datetime:
        """
        Recording end: start plus the duration of all data records.

        Raises:
            MalformedHeaderFieldError: If the duration overflows a datetime
        """
        start = self.start_datetime
        try:
            return start + timedelta(seconds=self.duration_seconds)
        except OverflowError:
            raise MalformedHeaderFieldError(
                "duration_data_records", str(self.duration_data_records)
            ) from None

    def annotation_signal_indices(self) -> list[int]:
        """Indices of all annotation channels."""
        return [i for i, s in enumerate(self.signals) if s.is_annotation]


@dataclass
class DataRecord:
    """One data record: an int16 sample array per signal, in header order."""

    index: int
    signals: list[np.ndarray] = field(default_factory=list)

    def samples(self, signal_index: int) -> np.ndarray:
        return self.signals[signal_index]
