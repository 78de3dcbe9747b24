"""
.DS_Store decoding library.

Reads the "Bud1" buddy-allocator container Finder uses to store per-folder
display metadata and yields its records in stored order.
"""

from .allocator import (
    ADDRESS_BIAS,
    BLOCK_TABLE_CAPACITY,
    AllocatorAddress,
    Bookkeeping,
    Header,
    decode_address,
    parse_bookkeeping,
    parse_header,
)
from .btree import (
    MASTER_NAME,
    MASTER_SIGNATURE,
    MasterRecord,
    read_master_record,
    read_tree,
)
from .cursor import ByteCursor
from .errors import (
    ConsistencyError,
    DsStoreError,
    FormatError,
    InsufficientData,
    OutOfRange,
)
from .reader import (
    DsStoreInfo,
    decode,
    inspect,
    read,
    setup_logging,
)
from .record import (
    STRUCTURE_IDS,
    Entry,
    IconLocation,
    Tag,
    WindowGeometry,
    entries_for,
    read_entry,
)

__all__ = [
    # Reader
    "read",
    "decode",
    "inspect",
    "setup_logging",
    "DsStoreInfo",
    # Records
    "Entry",
    "Tag",
    "WindowGeometry",
    "IconLocation",
    "STRUCTURE_IDS",
    "read_entry",
    "entries_for",
    # Allocator
    "ADDRESS_BIAS",
    "BLOCK_TABLE_CAPACITY",
    "AllocatorAddress",
    "Header",
    "Bookkeeping",
    "decode_address",
    "parse_header",
    "parse_bookkeeping",
    # B-tree
    "MASTER_NAME",
    "MASTER_SIGNATURE",
    "MasterRecord",
    "read_master_record",
    "read_tree",
    # Cursor
    "ByteCursor",
    # Errors
    "DsStoreError",
    "InsufficientData",
    "OutOfRange",
    "FormatError",
    "ConsistencyError",
]
