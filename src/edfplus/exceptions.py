"""Exception types raised while decoding or querying EDF+ files."""


class EDFError(Exception):
    """Base exception for all EDF errors."""

    pass


# ============================================================================
# Decode Errors (fatal to the whole decode)
# ============================================================================


class EDFDecodeError(EDFError):
    """Error decoding an EDF file. No partial result is ever returned."""

    pass


class TruncatedHeaderError(EDFDecodeError):
    """Stream ended before a header field was fully read."""

    def __init__(self, field: str, signal_index: int | None = None):
        location = f" (signal {signal_index})" if signal_index is not None else ""
        super().__init__(f"Truncated header while reading '{field}'{location}")
        self.field = field
        self.signal_index = signal_index


class MalformedHeaderFieldError(EDFDecodeError):
    """A numeric header field could not be parsed."""

    def __init__(
        self, field: str, value: str = "", signal_index: int | None = None
    ):
        location = f" (signal {signal_index})" if signal_index is not None else ""
        super().__init__(f"Malformed header field '{field}'{location}: {value!r}")
        self.field = field
        self.value = value
        self.signal_index = signal_index


class TruncatedRecordError(EDFDecodeError):
    """Stream ended inside a data record."""

    def __init__(self, record_index: int, signal_index: int):
        super().__init__(
            f"Truncated data record {record_index} at signal {signal_index}"
        )
        self.record_index = record_index
        self.signal_index = signal_index


class InvalidCalibrationError(EDFDecodeError):
    """Digital minimum equals digital maximum; no calibration is possible."""

    def __init__(self, signal_index: int):
        super().__init__(
            f"Signal {signal_index} has digital minimum equal to digital maximum"
        )
        self.signal_index = signal_index


class MalformedAnnotationError(EDFDecodeError):
    """An annotation timestamp is not a valid non-negative decimal."""

    def __init__(self, record_index: int, detail: str = ""):
        suffix = f": {detail}" if detail else ""
        super().__init__(f"Malformed annotation in data record {record_index}{suffix}")
        self.record_index = record_index
        self.detail = detail


# ============================================================================
# Query Errors (local to one query; the decoded file stays valid)
# ============================================================================


class EDFQueryError(EDFError, ValueError):
    """Error answering a query against a decoded file."""

    pass


class OutOfRangeError(EDFQueryError):
    """Requested time lies outside the recording."""

    def __init__(self, requested: object, bound: object, before_recording: bool):
        where = "before the recording" if before_recording else "after the recording"
        super().__init__(f"Requesting data {where}: {requested} (bound {bound})")
        self.requested = requested
        self.bound = bound
        self.before_recording = before_recording


class InvalidRangeError(EDFQueryError):
    """Query window is malformed (start after end, or outside the recording)."""

    def __init__(self, start: object, end: object, reason: str = "Invalid start or end time"):
        super().__init__(f"{reason}: [{start}, {end}]")
        self.start = start
        self.end = end


class UnsupportedSignalKindError(EDFQueryError):
    """Operation is not available for this kind of signal."""

    def __init__(self, operation: str, kind: str):
        super().__init__(f"{operation} is not supported for {kind} signals")
        self.operation = operation
        self.kind = kind
