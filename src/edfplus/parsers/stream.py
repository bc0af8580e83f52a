"""
Sequential byte source for EDF decoding.

EDF files are read strictly front to back: fixed-width ASCII header fields
followed by little-endian int16 data records. The reader never seeks.
"""

from typing import BinaryIO


class ShortReadError(EOFError):
    """End of stream reached before the requested number of bytes."""

    def __init__(self, expected: int, received: int):
        super().__init__(f"Expected {expected} bytes, got {received}")
        self.expected = expected
        self.received = received


class EDFStreamReader:
    """
    Minimal sequential reader over a binary file-like object.

    Tracks the number of bytes consumed so errors can report a position.
    """

    def __init__(self, stream: BinaryIO):
        """
        Initialize EDF stream reader.

        Args:
            stream: Binary file-like object to read from
        """
        self.stream = stream
        self.position = 0

    def read_bytes(self, count: int) -> bytes:
        """
        Read exactly ``count`` bytes.

        Raises:
            ShortReadError: If fewer than ``count`` bytes remain
        """
        chunks = []
        remaining = count
        while remaining > 0:
            chunk = self.stream.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)

        data = b"".join(chunks)
        self.position += len(data)
        if len(data) != count:
            raise ShortReadError(count, len(data))
        return data

    def read_ascii(self, width: int) -> str:
        """Read a fixed-width ASCII field and strip its space padding."""
        data = self.read_bytes(width)
        return data.decode("ascii", errors="replace").strip()
