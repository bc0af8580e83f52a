"""Pytest configuration and fixtures for edfplus tests."""

import pytest

from tests.helpers.synthetic_edf import (
    SyntheticSignal,
    annotation_signal,
    build_edf_bytes,
    decode_edf,
    ramp_signal,
)


def pytest_configure(config):
    """Register custom test markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that do not require external dependencies"
    )
    config.addinivalue_line("markers", "parser: Tests for header and record decoding")
    config.addinivalue_line(
        "markers", "integration: Integration tests combining multiple components"
    )


# =============================================================================
# Synthetic File Fixtures
# =============================================================================


@pytest.fixture
def eight_sample_signal():
    """
    One numeric signal, 4 samples per 1 s record, 2 records.

    Digital samples run 0..7 with an identity calibration.
    """
    signal = ramp_signal("Flow", samples_per_record=4, num_records=2)
    signal.physical_minimum = "-32768"
    signal.physical_maximum = "32767"
    return signal


@pytest.fixture
def eight_sample_edf(eight_sample_signal):
    """Decoded file holding only ``eight_sample_signal``."""
    return decode_edf(build_edf_bytes([eight_sample_signal], num_records=2))


@pytest.fixture
def mixed_edf_bytes():
    """
    EDF+C bytes with a numeric signal and an annotation channel, 3 records.

    The annotation channel holds one apnea event in record 1.
    """
    pressure = SyntheticSignal(
        label="Pressure",
        samples_per_record=2,
        records=[[0, 10], [20, 30], [40, 50]],
        physical_minimum="0",
        physical_maximum="100",
        digital_minimum="0",
        digital_maximum="100",
        physical_dimension="cmH2O",
    )
    tals = [
        b"+0\x14\x14\x00",
        b"+1\x14\x14\x00+1.5\x151\x14Apnea\x14\x00",
        b"+2\x14\x14\x00",
    ]
    return build_edf_bytes(
        [pressure, annotation_signal(tals, samples_per_record=16)], num_records=3
    )


@pytest.fixture
def mixed_edf(mixed_edf_bytes):
    """Decoded ``mixed_edf_bytes``."""
    return decode_edf(mixed_edf_bytes)


@pytest.fixture
def mixed_edf_path(tmp_path, mixed_edf_bytes):
    """``mixed_edf_bytes`` written to a temporary file."""
    path = tmp_path / "mixed.edf"
    path.write_bytes(mixed_edf_bytes)
    return path


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point the config file at a temporary directory."""
    config_path = tmp_path / "config" / "config.toml"
    monkeypatch.setattr("edfplus.config.get_config_path", lambda: config_path)
    return config_path
