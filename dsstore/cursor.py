"""
Sequential reader over an in-memory byte buffer.

All multi-byte integers in a .DS_Store file are big-endian.
"""

import struct

from .errors import FormatError, InsufficientData, OutOfRange

_UINT16 = struct.Struct(">H")
_UINT32 = struct.Struct(">I")
_INT32 = struct.Struct(">i")


class ByteCursor:
    """Seekable read position over an immutable buffer."""

    def __init__(self, data: bytes, position: int = 0):
        self._data = bytes(data)
        self._pos = 0
        self.seek(position)

    def __len__(self) -> int:
        return len(self._data)

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def seek(self, position: int) -> None:
        if position < 0 or position > len(self._data):
            raise OutOfRange("seek beyond buffer", offset=position, expected=f"<= {len(self._data)}")
        self._pos = position

    def read_bytes(self, n: int) -> bytes:
        if n < 0:
            raise InsufficientData("negative read length", offset=self._pos, actual=n)
        if n > self.remaining:
            raise InsufficientData(
                "unexpected end of data", offset=self._pos, expected=f"{n} bytes", actual=f"{self.remaining} bytes"
            )
        start = self._pos
        self._pos += n
        return self._data[start : self._pos]

    def skip(self, n: int) -> None:
        self.read_bytes(n)

    def read_uint8(self) -> int:
        return self.read_bytes(1)[0]

    def read_uint16(self) -> int:
        return _UINT16.unpack(self.read_bytes(2))[0]

    def read_uint32(self) -> int:
        return _UINT32.unpack(self.read_bytes(4))[0]

    def read_int32(self) -> int:
        return _INT32.unpack(self.read_bytes(4))[0]

    def read_text16(self, n_chars: int) -> str:
        """Read ``n_chars`` UTF-16 code units (big-endian)."""
        start = self._pos
        raw = self.read_bytes(2 * n_chars)
        try:
            return raw.decode("utf-16-be")
        except UnicodeDecodeError as e:
            raise FormatError("invalid UTF-16 text", offset=start, actual=raw) from e

    def read_tag(self) -> bytes:
        return self.read_bytes(4)
