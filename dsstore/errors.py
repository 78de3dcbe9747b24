"""
Exception hierarchy for .DS_Store decoding.

Every error aborts the decode; no partial result is ever returned.
"""

from typing import Any, Optional


class DsStoreError(Exception):
    """Base class for all decoding failures."""

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        expected: Any = None,
        actual: Any = None,
    ):
        self.message = message
        self.offset = offset
        self.expected = expected
        self.actual = actual
        super().__init__(str(self))

    def __str__(self) -> str:
        parts = [self.message]
        if self.offset is not None:
            parts.append(f"at offset {self.offset} (0x{self.offset:x})")
        if self.expected is not None:
            parts.append(f"expected {self.expected!r}")
        if self.actual is not None:
            parts.append(f"got {self.actual!r}")
        return ", ".join(parts)


class InsufficientData(DsStoreError):
    pass


class OutOfRange(InsufficientData):
    """Seek target past the end of the buffer."""


class FormatError(DsStoreError):
    pass


class ConsistencyError(DsStoreError):
    pass
