"""
Constants for EDF/EDF+ decoding.

Field widths follow the published EDF format (Kemp et al., 1992) and the EDF+
extension (Kemp & Olivan, 2003).
"""

from pathlib import Path

# ============================================================================
# Fixed Header Layout
# ============================================================================

# (field name, width in bytes), in file order
HEADER_FIELDS: list[tuple[str, int]] = [
    ("version", 8),
    ("patient_id", 80),
    ("recording_id", 80),
    ("start_date", 8),
    ("start_time", 8),
    ("header_bytes", 8),
    ("reserved", 44),
    ("num_data_records", 8),
    ("duration_data_records", 8),
    ("num_signals", 4),
]

# One full pass per field across all signals, in file order
SIGNAL_FIELDS: list[tuple[str, int]] = [
    ("label", 16),
    ("transducer_type", 80),
    ("physical_dimension", 8),
    ("physical_minimum", 8),
    ("physical_maximum", 8),
    ("digital_minimum", 8),
    ("digital_maximum", 8),
    ("prefiltering", 80),
    ("samples_per_record", 8),
    ("reserved", 32),
]

FIXED_HEADER_SIZE = sum(width for _, width in HEADER_FIELDS)  # 256
SIGNAL_HEADER_SIZE = sum(width for _, width in SIGNAL_FIELDS)  # 256 per signal

BYTES_PER_SAMPLE = 2
SAMPLE_DTYPE = "<i2"  # little-endian int16

# ============================================================================
# EDF+ Markers
# ============================================================================

ANNOTATION_LABEL = "EDF Annotations"
EDF_PLUS_CONTINUOUS = "EDF+C"
EDF_PLUS_DISCONTINUOUS = "EDF+D"

# Start date/time formats (dd.mm.yy hh.mm.ss)
START_DATE_FORMAT = "%d.%m.%y"
START_TIME_FORMAT = "%H.%M.%S"

# Two-digit years below this pivot belong to the 2000s
YEAR_PIVOT = 85

# EDF+ recording identification: "Startdate 02-MAR-2002 ..."
RECORDING_STARTDATE_PREFIX = "Startdate"

# ============================================================================
# Time-stamped Annotation List (TAL) Delimiters
# ============================================================================

TAL_END = 0x00  # Terminates a TAL; also record padding
TAL_SEPARATOR = 0x14  # Separates timestamp and annotation texts
TAL_DURATION = 0x15  # Separates onset from duration

# ============================================================================
# Numeric Tolerances
# ============================================================================

# Index arithmetic snaps values this close to an integer before flooring
INDEX_SNAP_EPSILON = 1e-9

# datetime and timedelta carry whole microseconds; their offsets are off by up
# to half of one
TIMEDELTA_RESOLUTION_SLACK = 0.5e-6

BILEVEL_LABEL_SUFFIX = " (bilevel)"

# ============================================================================
# Default Settings
# ============================================================================

DEFAULT_CONFIG_DIR = Path.home() / ".edfplus"
DEFAULT_CONFIG_FILE = "config.toml"

# Logging configuration
DEFAULT_LOG_DIR = DEFAULT_CONFIG_DIR / "logs"
DEFAULT_LOG_FILE = "edfplus.log"
DEFAULT_LOG_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_LOG_BACKUP_COUNT = 5

# CLI display defaults
DEFAULT_RECORDING_LIMIT = 50
