"""
Entry points for decoding a whole .DS_Store file.
"""

import logging
import os
from typing import NamedTuple, Optional, Tuple, Union

from .allocator import Bookkeeping, Header, parse_bookkeeping, parse_header
from .btree import MasterRecord, read_master_record, read_tree
from .cursor import ByteCursor
from .record import Entry

logger = logging.getLogger(__name__)

Source = Union[bytes, bytearray, memoryview, str, "os.PathLike[str]"]


class DsStoreInfo(NamedTuple):
    """Everything decoded from a file, including allocator bookkeeping."""

    header: Header
    bookkeeping: Bookkeeping
    master: MasterRecord
    entries: Tuple[Entry, ...]


def _load(source: Source) -> bytes:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    with open(source, "rb") as f:
        return f.read()


def _log_bookkeeping(bookkeeping: Bookkeeping) -> None:
    logger.info("block table: %d blocks", bookkeeping.block_count)
    for block_id in range(bookkeeping.block_count):
        address = bookkeeping.blocks[block_id]
        logger.info("  block %d: offset 0x%x, size %d", block_id, address.offset, address.size)
    for name, block_id in bookkeeping.directory.items():
        logger.info("directory: %s -> block %d", name, block_id)
    for size_class, addresses in enumerate(bookkeeping.free_lists):
        if addresses:
            logger.info("free list 2^%d: %s", size_class, [hex(a.offset) for a in addresses])


def _decode(data: bytes, keep_free_lists: bool) -> DsStoreInfo:
    cursor = ByteCursor(data)
    header = parse_header(cursor)
    bookkeeping = parse_bookkeeping(cursor, header, keep_free_lists=keep_free_lists)
    if keep_free_lists:
        _log_bookkeeping(bookkeeping)
    master = read_master_record(cursor, bookkeeping)
    entries = read_tree(cursor, bookkeeping, master)
    logger.debug("decoded %d entries", len(entries))
    return DsStoreInfo(header, bookkeeping, master, entries)


def decode(data: bytes, diagnostics: bool = False) -> Tuple[Entry, ...]:
    """
    Decode an in-memory .DS_Store file.

    Args:
        data: Complete file contents
        diagnostics: Retain free lists and log the allocator bookkeeping

    Returns:
        Entries in stored order

    Raises:
        DsStoreError: on any structural violation
    """
    return _decode(bytes(data), keep_free_lists=diagnostics).entries


def read(source: Source, verbose: bool = False) -> Tuple[Entry, ...]:
    """Decode a .DS_Store file given as a path or as bytes."""
    return decode(_load(source), diagnostics=verbose)


def inspect(source: Source) -> DsStoreInfo:
    """Decode a file and keep all of its bookkeeping for display."""
    return _decode(_load(source), keep_free_lists=True)


def setup_logging(level: Optional[int] = None) -> None:
    """
    Route dsstore log records to stderr.

    Example:
        dsstore.setup_logging(logging.DEBUG)
    """
    level = level or logging.INFO
    logger = logging.getLogger("dsstore")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))
        logger.addHandler(handler)
