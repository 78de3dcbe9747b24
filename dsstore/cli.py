#!/usr/bin/env python3
"""
Show the records stored in a .DS_Store file.

Usage:
    ds-store-info <path>
    ds-store-info <path> --verbose     # Also show allocator bookkeeping
    ds-store-info <path> --name foo    # Only records for "foo"
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .errors import DsStoreError
from .reader import inspect, setup_logging
from .record import Entry, entries_for

_BLOB_PREVIEW = 16


def format_value(entry: Entry, raw: bool = False) -> str:
    value = entry.value
    if isinstance(value, bytes):
        if raw or len(value) <= _BLOB_PREVIEW:
            return value.hex()
        return f"{value[:_BLOB_PREVIEW].hex()}... ({len(value)} bytes)"
    if isinstance(value, str):
        return repr(value)
    return str(value)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Show the records stored in a .DS_Store file")
    parser.add_argument("path", help="Path to .DS_Store file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show block table, directory and free lists")
    parser.add_argument("--name", default=None, help="Only show records for this file name")
    parser.add_argument("--raw", action="store_true", help="Show blob payloads in full")
    parser.add_argument("--debug", action="store_true", help="Log decoding steps")
    args = parser.parse_args(argv)

    if args.debug:
        setup_logging(logging.DEBUG)

    if not os.path.exists(args.path):
        print(f"Error: File not found: {args.path}", file=sys.stderr)
        return 1

    try:
        info = inspect(args.path)
    except (DsStoreError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"{args.path}")
    print("=" * 60)
    print(f"  Bookkeeping:     0x{info.header.bookkeeping_offset:x} ({info.header.bookkeeping_size} bytes)")
    print(f"  Root block:      {info.master.root_block_id}")
    print(f"  Levels:          {info.master.level_count}")
    print(f"  Records:         {info.master.record_count}")
    print(f"  Nodes:           {info.master.node_count}")

    if args.verbose:
        bookkeeping = info.bookkeeping
        print(f"\nBlocks ({bookkeeping.block_count}):")
        print("-" * 40)
        for block_id in range(bookkeeping.block_count):
            address = bookkeeping.blocks[block_id]
            print(f"  [{block_id:3d}] offset 0x{address.offset:x}, size {address.size}")

        print(f"\nDirectory ({len(bookkeeping.directory)}):")
        print("-" * 40)
        for name, block_id in bookkeeping.directory.items():
            print(f"  {name} -> block {block_id}")

        print("\nFree lists:")
        print("-" * 40)
        for size_class, addresses in enumerate(bookkeeping.free_lists):
            if addresses:
                offsets = ", ".join(f"0x{a.offset:x}" for a in addresses)
                print(f"  2^{size_class:<2d} {offsets}")

    entries = info.entries if args.name is None else entries_for(info.entries, args.name)
    print(f"\nEntries ({len(entries)}):")
    print("-" * 40)
    for entry in entries:
        print(
            f"  {entry.name!r} {entry.structure_id} ({entry.describe()}) "
            f"{entry.value_type}: {format_value(entry, args.raw)}"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
