"""
B-tree traversal for the "DSDB" master record.

Master record (5 x uint32): root block id, level count, record count,
node count, signature (always 0x1000).

Node:
- uint32 link, uint32 entry count
- link == 0: leaf, followed by entry count entries
- link != 0: internal, followed by entry count (uint32 child block id, entry)
  pairs; link is the right-most child

Entries come out in the writer's (name, structure id) order: every child
subtree is yielded before the entry that follows its pointer.
"""

import logging
from typing import List, NamedTuple, Optional, Set, Tuple

from .allocator import Bookkeeping
from .cursor import ByteCursor
from .errors import ConsistencyError, FormatError
from .record import Entry, read_entry

logger = logging.getLogger(__name__)

MASTER_NAME = "DSDB"
MASTER_SIGNATURE = 0x1000


class MasterRecord(NamedTuple):
    """Parsed "DSDB" block."""

    root_block_id: int
    level_count: int
    record_count: int
    node_count: int
    signature: int


def read_master_record(cursor: ByteCursor, bookkeeping: Bookkeeping) -> MasterRecord:
    block_id = bookkeeping.directory.get(MASTER_NAME)
    if block_id is None:
        raise FormatError("missing DSDB", expected=MASTER_NAME, actual=sorted(bookkeeping.directory))

    cursor.seek(bookkeeping.block(block_id).file_offset)
    start = cursor.position
    master = MasterRecord(*(cursor.read_uint32() for _ in range(5)))
    if master.signature != MASTER_SIGNATURE:
        raise FormatError("bad signature", offset=start + 16, expected=MASTER_SIGNATURE, actual=master.signature)

    logger.debug(
        "master record: root=%d levels=%d records=%d nodes=%d",
        master.root_block_id,
        master.level_count,
        master.record_count,
        master.node_count,
    )
    return master


def _read_node(
    cursor: ByteCursor, bookkeeping: Bookkeeping, block_id: int, pointer: Optional[int], visited: Set[int]
) -> List[Entry]:
    # pointer is the file offset the block id was read from
    if block_id in visited:
        raise FormatError("tree node visited twice", offset=pointer, actual=block_id)
    visited.add(block_id)

    cursor.seek(bookkeeping.block(block_id, offset=pointer).file_offset)
    start = cursor.position
    link = cursor.read_uint32()
    count = cursor.read_uint32()
    logger.debug("node %d: link=%d entries=%d", block_id, link, count)

    entries: List[Entry] = []
    if link == 0:
        for _ in range(count):
            entries.append(read_entry(cursor))
        return entries

    for _ in range(count):
        child = cursor.read_uint32()
        resume = cursor.position
        entries.extend(_read_node(cursor, bookkeeping, child, resume - 4, visited))
        cursor.seek(resume)
        entries.append(read_entry(cursor))
    entries.extend(_read_node(cursor, bookkeeping, link, start, visited))
    return entries


def read_tree(cursor: ByteCursor, bookkeeping: Bookkeeping, master: Optional[MasterRecord] = None) -> Tuple[Entry, ...]:
    """
    Decode every entry reachable from the master record's root node.

    Raises:
        ConsistencyError: if the number of entries differs from the
            master record's record count
    """
    if master is None:
        master = read_master_record(cursor, bookkeeping)

    master_id = bookkeeping.directory.get(MASTER_NAME)
    root_pointer = None if master_id is None else bookkeeping.block(master_id).file_offset
    entries = _read_node(cursor, bookkeeping, master.root_block_id, root_pointer, set())
    if len(entries) != master.record_count:
        raise ConsistencyError("record count mismatch", expected=master.record_count, actual=len(entries))
    return tuple(entries)
