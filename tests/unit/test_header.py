"""Tests for EDF header decoding."""

import io
import logging

from datetime import datetime

import pytest

from edfplus.constants import FIXED_HEADER_SIZE, SIGNAL_FIELDS
from edfplus.exceptions import (
    EDFDecodeError,
    MalformedHeaderFieldError,
    TruncatedHeaderError,
)
from edfplus.parsers.header import read_header
from edfplus.parsers.stream import EDFStreamReader
from edfplus.parsers.types import Header
from tests.helpers.synthetic_edf import (
    SyntheticSignal,
    annotation_signal,
    build_edf_bytes,
    decode_edf,
    ramp_signal,
)


def parse(data: bytes) -> Header:
    return read_header(EDFStreamReader(io.BytesIO(data)))


def signal_field_offset(field: str, num_signals: int, signal_index: int) -> int:
    """Byte offset of one signal's field inside the header."""
    offset = FIXED_HEADER_SIZE
    for name, width in SIGNAL_FIELDS:
        if name == field:
            return offset + signal_index * width
        offset += width * num_signals
    raise KeyError(field)


def make_header(**overrides) -> Header:
    fields = {
        "version": "0",
        "patient_id": "X",
        "recording_id": "X",
        "start_date": "15.03.24",
        "start_time": "10.30.00",
        "header_bytes": 256,
        "num_data_records": 0,
        "duration_data_records": 1.0,
        "num_signals": 0,
    }
    fields.update(overrides)
    return Header(**fields)


class TestFixedHeader:
    """Tests for the fixed 256-byte part of the header."""

    def test_fields_are_decoded_and_trimmed(self):
        data = build_edf_bytes(
            [ramp_signal("Flow", 4, 2)],
            num_records=2,
            record_duration="0.5",
            patient_id="MCH-0234567 F 02-MAY-1951 Haagse_Harry",
        )
        header = parse(data)

        assert header.version == "0"
        assert header.patient_id == "MCH-0234567 F 02-MAY-1951 Haagse_Harry"
        assert header.start_date == "15.03.24"
        assert header.start_time == "10.30.00"
        assert header.header_bytes == 512
        assert header.reserved == "EDF+C"
        assert header.num_data_records == 2
        assert header.duration_data_records == 0.5
        assert header.num_signals == 1

    def test_derived_sizes(self):
        signals = [ramp_signal("A", 4, 3), ramp_signal("B", 10, 3)]
        header = parse(build_edf_bytes(signals, num_records=3, record_duration="2"))

        assert header.expected_header_bytes == 256 + 2 * 256
        assert header.record_size_bytes == 2 * (4 + 10)
        assert header.duration_seconds == 6.0

    def test_malformed_num_signals(self):
        data = build_edf_bytes(
            [ramp_signal("Flow", 4, 1)],
            num_records=1,
            header_overrides={"num_signals": "abcd"},
        )

        with pytest.raises(MalformedHeaderFieldError) as exc_info:
            parse(data)

        assert exc_info.value.field == "num_signals"
        assert exc_info.value.value == "abcd"
        assert exc_info.value.signal_index is None

    def test_malformed_duration(self):
        data = build_edf_bytes(
            [ramp_signal("Flow", 4, 1)],
            num_records=1,
            header_overrides={"duration_data_records": "one"},
        )

        with pytest.raises(MalformedHeaderFieldError, match="duration_data_records"):
            parse(data)

    @pytest.mark.parametrize("duration", ["inf", "-inf", "nan", "Infinity"])
    def test_non_finite_duration(self, duration):
        data = build_edf_bytes(
            [ramp_signal("Flow", 4, 1)],
            num_records=1,
            header_overrides={"duration_data_records": duration},
        )

        with pytest.raises(MalformedHeaderFieldError, match="duration_data_records"):
            parse(data)

    def test_overflowing_duration_fails_as_header_error(self):
        """A finite but huge duration decodes, then fails when times are derived."""
        edf = decode_edf(
            build_edf_bytes(
                [ramp_signal("Flow", 4, 1)], num_records=1, record_duration="1e300"
            )
        )

        with pytest.raises(MalformedHeaderFieldError) as exc_info:
            edf.get_signal(0)

        assert exc_info.value.field == "duration_data_records"

    def test_unknown_record_count_is_rejected(self):
        """A record count of -1 (unknown, still recording) cannot be decoded."""
        data = build_edf_bytes(
            [ramp_signal("Flow", 4, 1)],
            num_records=1,
            header_overrides={"num_data_records": "-1"},
        )

        with pytest.raises(MalformedHeaderFieldError, match="num_data_records"):
            parse(data)

    def test_truncated_fixed_header(self):
        data = build_edf_bytes([ramp_signal("Flow", 4, 1)], num_records=1)

        with pytest.raises(TruncatedHeaderError) as exc_info:
            parse(data[:100])

        assert exc_info.value.field == "recording_id"
        assert exc_info.value.signal_index is None

    def test_empty_stream(self):
        with pytest.raises(TruncatedHeaderError, match="version"):
            parse(b"")

    def test_decode_errors_share_base(self):
        assert issubclass(TruncatedHeaderError, EDFDecodeError)
        assert issubclass(MalformedHeaderFieldError, EDFDecodeError)

    def test_header_bytes_mismatch_warns(self, caplog):
        data = build_edf_bytes(
            [ramp_signal("Flow", 4, 1)],
            num_records=1,
            header_overrides={"header_bytes": "999"},
        )

        with caplog.at_level(logging.WARNING, logger="edfplus.parsers.header"):
            header = parse(data)

        assert header.header_bytes == 999
        assert "999" in caplog.text


class TestSignalHeader:
    """Tests for the per-signal part of the header."""

    def test_signal_definitions(self):
        flow = SyntheticSignal(
            label="Flow",
            samples_per_record=25,
            physical_minimum="-100",
            physical_maximum="100",
            digital_minimum="-2048",
            digital_maximum="2047",
            physical_dimension="L/min",
            transducer_type="Pneumotach",
            prefiltering="HP:0.1Hz",
        )
        pressure = ramp_signal("Pressure", 10, 1)
        header = parse(build_edf_bytes([flow, pressure], num_records=0))

        assert header.num_signals == 2
        assert [s.label for s in header.signals] == ["Flow", "Pressure"]

        first = header.signals[0]
        assert first.transducer_type == "Pneumotach"
        assert first.physical_dimension == "L/min"
        assert first.physical_minimum == "-100"
        assert first.physical_maximum == "100"
        assert first.digital_minimum == "-2048"
        assert first.digital_maximum == "2047"
        assert first.prefiltering == "HP:0.1Hz"
        assert first.samples_per_record == 25
        assert header.signals[1].samples_per_record == 10

    def test_fields_are_read_one_pass_per_field(self):
        """Labels of all signals come before any transducer type."""
        signals = [ramp_signal("A", 1, 1), ramp_signal("B", 1, 1)]
        data = build_edf_bytes(signals, num_records=1)

        assert data[256:272].rstrip() == b"A"
        assert data[272:288].rstrip() == b"B"

    def test_annotation_signal_detected(self):
        signals = [ramp_signal("Flow", 4, 1), annotation_signal([b"+0\x14\x14\x00"], 8)]
        header = parse(build_edf_bytes(signals, num_records=1))

        assert not header.signals[0].is_annotation
        assert header.signals[1].is_annotation
        assert header.annotation_signal_indices() == [1]

    def test_malformed_samples_per_record_reports_signal(self):
        signals = [ramp_signal("A", 4, 1), ramp_signal("B", 4, 1)]
        data = bytearray(build_edf_bytes(signals, num_records=1))
        offset = signal_field_offset("samples_per_record", 2, 1)
        data[offset : offset + 8] = b"four    "

        with pytest.raises(MalformedHeaderFieldError) as exc_info:
            parse(bytes(data))

        assert exc_info.value.field == "samples_per_record"
        assert exc_info.value.signal_index == 1

    def test_truncated_signal_header_reports_signal(self):
        signals = [ramp_signal("A", 4, 1), ramp_signal("B", 4, 1)]
        data = build_edf_bytes(signals, num_records=1)

        with pytest.raises(TruncatedHeaderError) as exc_info:
            parse(data[: 256 + 16 + 4])

        assert exc_info.value.field == "label"
        assert exc_info.value.signal_index == 1

    def test_min_max_kept_as_text(self):
        """Calibration fields are validated when a signal is built, not here."""
        signal = ramp_signal("Flow", 4, 1)
        signal.physical_minimum = "low"
        header = parse(build_edf_bytes([signal], num_records=1))

        assert header.signals[0].physical_minimum == "low"


class TestHeaderProperties:
    """Tests for values derived from the header text fields."""

    def test_edf_plus_continuous(self):
        header = make_header(reserved="EDF+C")
        assert header.is_edf_plus
        assert not header.is_discontinuous

    def test_edf_plus_discontinuous(self):
        header = make_header(reserved="EDF+D")
        assert header.is_edf_plus
        assert header.is_discontinuous

    def test_plain_edf(self):
        header = make_header(reserved="")
        assert not header.is_edf_plus
        assert not header.is_discontinuous

    def test_start_datetime(self):
        header = make_header()
        assert header.start_datetime == datetime(2024, 3, 15, 10, 30, 0)

    @pytest.mark.parametrize(
        "start_date,expected_year",
        [("01.01.85", 1985), ("01.01.99", 1999), ("01.01.00", 2000), ("01.01.84", 2084)],
    )
    def test_two_digit_year_pivot(self, start_date, expected_year):
        header = make_header(start_date=start_date)
        assert header.start_datetime.year == expected_year

    def test_recording_startdate_overrides_pivot(self):
        header = make_header(
            start_date="01.01.84", recording_id="Startdate 01-JAN-1984 X X X"
        )
        assert header.start_datetime.year == 1984

    def test_mismatched_recording_startdate_ignored(self):
        header = make_header(
            start_date="01.01.24", recording_id="Startdate 01-JAN-1999 X X X"
        )
        assert header.start_datetime.year == 2024

    def test_end_datetime(self):
        header = make_header(num_data_records=10, duration_data_records=30.0)
        assert header.end_datetime == datetime(2024, 3, 15, 10, 35, 0)

    def test_malformed_start_date(self):
        header = make_header(start_date="xx.03.24")
        with pytest.raises(MalformedHeaderFieldError) as exc_info:
            header.start_datetime
        assert exc_info.value.field == "start_date"

    def test_malformed_start_time(self):
        header = make_header(start_time="10:30:00")
        with pytest.raises(MalformedHeaderFieldError) as exc_info:
            header.start_datetime
        assert exc_info.value.field == "start_time"

    def test_startdate_year_making_date_invalid(self):
        """29 Feb 2000 exists, 29 Feb 2100 does not."""
        header = make_header(
            start_date="29.02.00", recording_id="Startdate 29-FEB-2100 X X X"
        )
        with pytest.raises(MalformedHeaderFieldError) as exc_info:
            header.start_datetime
        assert exc_info.value.field == "start_date"

    def test_end_datetime_overflow(self):
        header = make_header(num_data_records=1, duration_data_records=1e300)
        with pytest.raises(MalformedHeaderFieldError) as exc_info:
            header.end_datetime
        assert exc_info.value.field == "duration_data_records"
