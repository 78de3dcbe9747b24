"""
Buddy allocator structures of a .DS_Store file.

File layout:
- [0, 4):   alignment pad, always 00 00 00 01
- [4, 8):   "Bud1"
- [8, 12):  bookkeeping block offset
- [12, 16): bookkeeping block size

Every stored offset is relative to byte 4 of the file (ADDRESS_BIAS).

Bookkeeping block:
- uint32 block count, 4 reserved bytes
- block count allocator words, padded to BLOCK_TABLE_CAPACITY words
- uint32 directory count, then (uint8 name length, name, uint32 block id) entries
- FREE_LIST_CLASSES free lists of (uint32 count, count allocator words)

An allocator word packs an offset (low 5 bits cleared) with log2 of the block size.
"""

import logging
from typing import Dict, List, NamedTuple, Optional, Tuple

from .cursor import ByteCursor
from .errors import FormatError, InsufficientData

logger = logging.getLogger(__name__)

HEADER_MAGIC = b"\x00\x00\x00\x01"
BUD1_MAGIC = b"Bud1"
ADDRESS_BIAS = 4
BLOCK_TABLE_CAPACITY = 256
FREE_LIST_CLASSES = 32

_SIZE_MASK = 0x1F


class AllocatorAddress(NamedTuple):
    """A region of the file, relative to ADDRESS_BIAS."""

    offset: int
    size: int

    @property
    def file_offset(self) -> int:
        return self.offset + ADDRESS_BIAS


class Header(NamedTuple):
    """Parsed file header."""

    bookkeeping_offset: int
    bookkeeping_size: int


class Bookkeeping(NamedTuple):
    """Parsed bookkeeping (root) block."""

    block_count: int
    blocks: Tuple[AllocatorAddress, ...]  # only the first block_count are live
    directory: Dict[str, int]
    free_lists: Tuple[Tuple[AllocatorAddress, ...], ...]  # empty unless retained

    def block(self, block_id: int, offset: Optional[int] = None) -> AllocatorAddress:
        """Address of a live block; offset locates the id in the file for error reports."""
        if not 0 <= block_id < self.block_count:
            raise FormatError(
                "block id out of range", offset=offset, expected=f"< {self.block_count}", actual=block_id
            )
        return self.blocks[block_id]


def decode_address(word: int) -> AllocatorAddress:
    return AllocatorAddress(offset=word & ~_SIZE_MASK & 0xFFFFFFFF, size=1 << (word & _SIZE_MASK))


def parse_header(cursor: ByteCursor) -> Header:
    """
    Validate the magic bytes and read the bookkeeping block location.

    Raises:
        FormatError: if either magic value is wrong
        InsufficientData: if the buffer cannot hold the bookkeeping block
    """
    cursor.seek(0)
    for expected in (HEADER_MAGIC, BUD1_MAGIC):
        start = cursor.position
        actual = cursor.read_bytes(len(expected))
        if actual != expected:
            raise FormatError("bad magic", offset=start, expected=expected, actual=actual)

    offset = cursor.read_uint32()
    size = cursor.read_uint32()
    end = offset + ADDRESS_BIAS + size
    if end > len(cursor):
        raise InsufficientData(
            "bookkeeping block extends past end of data", offset=offset + ADDRESS_BIAS, expected=end, actual=len(cursor)
        )

    logger.debug("bookkeeping block at 0x%x, %d bytes", offset, size)
    return Header(bookkeeping_offset=offset, bookkeeping_size=size)


def _read_addresses(cursor: ByteCursor, count: int) -> List[AllocatorAddress]:
    return [decode_address(cursor.read_uint32()) for _ in range(count)]


def parse_bookkeeping(cursor: ByteCursor, header: Header, keep_free_lists: bool = False) -> Bookkeeping:
    """
    Decode the bookkeeping block.

    The free lists are always consumed; they are only kept when
    keep_free_lists is set.
    """
    cursor.seek(header.bookkeeping_offset + ADDRESS_BIAS)

    start = cursor.position
    block_count = cursor.read_uint32()
    if block_count > BLOCK_TABLE_CAPACITY:
        raise FormatError("too many blocks", offset=start, expected=f"<= {BLOCK_TABLE_CAPACITY}", actual=block_count)
    cursor.skip(4)

    blocks = _read_addresses(cursor, block_count)
    cursor.skip((BLOCK_TABLE_CAPACITY - block_count) * 4)
    # Unused slots are placeholders that must never be dereferenced
    blocks.extend(AllocatorAddress(0, 1) for _ in range(BLOCK_TABLE_CAPACITY - block_count))

    directory: Dict[str, int] = {}
    directory_count = cursor.read_uint32()
    for _ in range(directory_count):
        name_len = cursor.read_uint8()
        name_start = cursor.position
        raw_name = cursor.read_bytes(name_len)
        try:
            name = raw_name.decode("ascii")
        except UnicodeDecodeError as e:
            raise FormatError("non-ASCII directory name", offset=name_start, actual=raw_name) from e
        id_start = cursor.position
        block_id = cursor.read_uint32()
        if block_id >= block_count:
            raise FormatError(
                "directory block id out of range", offset=id_start, expected=f"< {block_count}", actual=block_id
            )
        directory[name] = block_id

    free_lists = []
    for _ in range(FREE_LIST_CLASSES):
        count = cursor.read_uint32()
        addresses = _read_addresses(cursor, count)
        if keep_free_lists:
            free_lists.append(tuple(addresses))

    logger.debug("%d blocks, directory %s", block_count, directory)
    return Bookkeeping(
        block_count=block_count,
        blocks=tuple(blocks),
        directory=directory,
        free_lists=tuple(free_lists),
    )
