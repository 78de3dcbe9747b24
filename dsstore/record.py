"""
Metadata record (entry) decoding.

An entry is:
- uint32 name length (in UTF-16 code units), then the UTF-16BE name
- 4-byte structure id, e.g. "Iloc" (icon location) or "fwi0" (window info)
- 4-byte value type, followed by a type-specific payload:

  long, shor  uint32 (both are 4 bytes on disk)
  bool        one byte, nonzero is true
  type        4-byte tag
  ustr        uint32 length, then UTF-16BE text
  blob        uint32 length, then payload bytes

Two blob payloads are decoded into structures: "fwi0" (window geometry)
and "Iloc" (icon location). Other blobs are returned as raw bytes.
"""

import string
from typing import Iterable, List, NamedTuple, Optional, Union

from .cursor import ByteCursor
from .errors import FormatError

_PRINTABLE = frozenset(string.printable.encode("ascii")) - frozenset(b"\t\n\r\x0b\x0c")


class Tag(NamedTuple):
    """An opaque 4-byte code."""

    raw: bytes

    @property
    def text(self) -> Optional[str]:
        """ASCII view of the tag, or None if it is not printable."""
        if all(b in _PRINTABLE for b in self.raw):
            return self.raw.decode("ascii")
        return None

    def __str__(self) -> str:
        text = self.text
        return text if text is not None else "0x" + self.raw.hex()


LONG = Tag(b"long")
SHOR = Tag(b"shor")
BOOL = Tag(b"bool")
TYPE = Tag(b"type")
USTR = Tag(b"ustr")
BLOB = Tag(b"blob")

ILOC = Tag(b"Iloc")
FWI0 = Tag(b"fwi0")

STRUCTURE_IDS = {
    b"BKGD": "background",
    b"GRP0": "group",
    b"ICVO": "icon view options",
    b"Iloc": "icon location",
    b"LSVO": "list view options",
    b"bwsp": "browser window settings",
    b"cmmt": "spotlight comment",
    b"dilc": "desktop icon location",
    b"dscl": "disclosed in list view",
    b"extn": "extension",
    b"fwi0": "finder window info",
    b"fwsw": "finder window sidebar width",
    b"fwvh": "finder window vertical height",
    b"icgo": "icon view grid offset",
    b"icsp": "icon view scroll position",
    b"icvo": "icon view options",
    b"icvp": "icon view properties",
    b"icvt": "icon view text size",
    b"lg1S": "logical size",
    b"logS": "logical size",
    b"lsvP": "list view properties",
    b"lsvp": "list view properties",
    b"moDD": "modification date",
    b"modD": "modification date",
    b"ph1S": "physical size",
    b"phyS": "physical size",
    b"pict": "background picture",
    b"vSrn": "version",
    b"vstl": "view style",
}

_FWI0_FIXED_SIZE = 14
_ILOC_FIXED_SIZE = 8


class WindowGeometry(NamedTuple):
    """Decoded "fwi0" blob."""

    top: int
    left: int
    bottom: int
    right: int
    view_mode: Tag
    sidebar_visible: bool


class IconLocation(NamedTuple):
    """Decoded "Iloc" blob."""

    x: int
    y: int


Value = Union[int, bool, Tag, str, bytes, WindowGeometry, IconLocation]


class Entry(NamedTuple):
    """One metadata record for one file name."""

    name: str
    structure_id: Tag
    value_type: Tag
    value: Value

    def describe(self) -> str:
        return STRUCTURE_IDS.get(self.structure_id.raw, "unknown")


def _read_window_geometry(cursor: ByteCursor, length: int) -> WindowGeometry:
    top = cursor.read_uint16()
    left = cursor.read_uint16()
    bottom = cursor.read_uint16()
    right = cursor.read_uint16()
    view_mode = Tag(cursor.read_tag())
    cursor.skip(1)
    sidebar_visible = cursor.read_uint8() != 0
    cursor.skip(length - _FWI0_FIXED_SIZE)
    return WindowGeometry(top, left, bottom, right, view_mode, sidebar_visible)


def _read_icon_location(cursor: ByteCursor, length: int) -> IconLocation:
    x = cursor.read_int32()
    y = cursor.read_int32()
    cursor.skip(length - _ILOC_FIXED_SIZE)
    return IconLocation(x, y)


_STRUCTURED_BLOBS = {
    FWI0: (_FWI0_FIXED_SIZE, _read_window_geometry),
    ILOC: (_ILOC_FIXED_SIZE, _read_icon_location),
}


def read_blob(cursor: ByteCursor, structure_id: Tag) -> Value:
    start = cursor.position
    length = cursor.read_uint32()

    structured = _STRUCTURED_BLOBS.get(structure_id)
    if structured is None:
        return cursor.read_bytes(length)

    fixed_size, read_fn = structured
    if length < fixed_size:
        raise FormatError(
            f"{structure_id} payload too short", offset=start, expected=f">= {fixed_size} bytes", actual=length
        )
    return read_fn(cursor, length)


def read_value(cursor: ByteCursor, structure_id: Tag, value_type: Tag) -> Value:  # noqa: C901
    if value_type in (LONG, SHOR):
        return cursor.read_uint32()
    elif value_type == BOOL:
        return cursor.read_uint8() != 0
    elif value_type == TYPE:
        return Tag(cursor.read_tag())
    elif value_type == USTR:
        return cursor.read_text16(cursor.read_uint32())
    elif value_type == BLOB:
        return read_blob(cursor, structure_id)
    else:
        raise FormatError("unsupported value type", offset=cursor.position - 4, actual=str(value_type))


def read_entry(cursor: ByteCursor) -> Entry:
    """Decode one entry at the cursor position."""
    name_length = cursor.read_uint32()
    name = cursor.read_text16(name_length)
    structure_id = Tag(cursor.read_tag())
    value_type = Tag(cursor.read_tag())
    value = read_value(cursor, structure_id, value_type)
    return Entry(name, structure_id, value_type, value)


def entries_for(entries: Iterable[Entry], name: str) -> List[Entry]:
    """Entries recorded for one file name, in stored order."""
    return [e for e in entries if e.name == name]
