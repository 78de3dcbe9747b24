import pytest
from builder import (
    build_store,
    internal_node,
    leaf_node,
    long_entry,
    master_block,
    two_level_store,
)
from dsstore import (
    ByteCursor,
    ConsistencyError,
    FormatError,
    MasterRecord,
    parse_bookkeeping,
    parse_header,
    read_master_record,
    read_tree,
)


def open_store(data):
    cursor = ByteCursor(data)
    return cursor, parse_bookkeeping(cursor, parse_header(cursor))


def test_read_master_record():
    cursor, bookkeeping = open_store(two_level_store())
    assert read_master_record(cursor, bookkeeping) == MasterRecord(1, 1, 5, 4, 0x1000)


def test_missing_master_record():
    data = build_store([master_block(root=1, record_count=0), leaf_node([])], directory={"icon": 0})
    cursor, bookkeeping = open_store(data)
    with pytest.raises(FormatError) as excinfo:
        read_master_record(cursor, bookkeeping)
    assert excinfo.value.message == "missing DSDB"


def test_bad_signature():
    data = build_store([master_block(root=1, record_count=0, signature=0x2000), leaf_node([])])
    cursor, bookkeeping = open_store(data)
    with pytest.raises(FormatError) as excinfo:
        read_master_record(cursor, bookkeeping)
    assert excinfo.value.message == "bad signature"
    assert excinfo.value.actual == 0x2000


def test_leaf_entries_in_file_order():
    names = ["z", "b", "a"]
    data = build_store(
        [master_block(root=1, record_count=3), leaf_node([long_entry(n, b"vSrn", 1) for n in names])]
    )
    cursor, bookkeeping = open_store(data)
    assert [e.name for e in read_tree(cursor, bookkeeping)] == names


def test_internal_node_order():
    cursor, bookkeeping = open_store(two_level_store())
    entries = read_tree(cursor, bookkeeping)
    assert [e.name for e in entries] == ["a", "f", "m", "t", "z"]
    assert [e.value for e in entries] == [1, 2, 3, 4, 5]


def test_three_level_order():
    leaves = {
        3: ["a", "b"],
        4: ["d"],
        5: ["f"],
        6: ["h", "i"],
    }
    blocks = [
        master_block(root=1, record_count=9, levels=2, nodes=7),
        internal_node([(2, long_entry("e", b"vSrn", 0))], link=7),
        internal_node([(3, long_entry("c", b"vSrn", 0))], link=4),
        leaf_node([long_entry(n, b"vSrn", 0) for n in leaves[3]]),
        leaf_node([long_entry(n, b"vSrn", 0) for n in leaves[4]]),
        leaf_node([long_entry(n, b"vSrn", 0) for n in leaves[5]]),
        leaf_node([long_entry(n, b"vSrn", 0) for n in leaves[6]]),
        internal_node([(5, long_entry("g", b"vSrn", 0))], link=6),
    ]
    cursor, bookkeeping = open_store(build_store(blocks))
    assert [e.name for e in read_tree(cursor, bookkeeping)] == list("abcdefghi")


def test_record_count_mismatch():
    data = build_store([master_block(root=1, record_count=2), leaf_node([long_entry("a", b"vSrn", 1)])])
    cursor, bookkeeping = open_store(data)
    with pytest.raises(ConsistencyError) as excinfo:
        read_tree(cursor, bookkeeping)
    assert excinfo.value.expected == 2
    assert excinfo.value.actual == 1


def test_cycle_is_rejected():
    data = build_store([master_block(root=1, record_count=1), internal_node([(1, long_entry("a", b"vSrn", 1))], link=1)])
    cursor, bookkeeping = open_store(data)
    with pytest.raises(FormatError) as excinfo:
        read_tree(cursor, bookkeeping)
    # The first child pointer follows the link and entry count fields
    assert excinfo.value.offset == bookkeeping.block(1).file_offset + 8


def test_child_block_id_out_of_range():
    data = build_store([master_block(root=1, record_count=1), internal_node([(9, long_entry("a", b"vSrn", 1))], link=1)])
    cursor, bookkeeping = open_store(data)
    with pytest.raises(FormatError) as excinfo:
        read_tree(cursor, bookkeeping)
    assert excinfo.value.actual == 9
    assert excinfo.value.offset == bookkeeping.block(1).file_offset + 8


def test_root_block_id_out_of_range():
    data = build_store([master_block(root=7, record_count=0), leaf_node([])])
    cursor, bookkeeping = open_store(data)
    with pytest.raises(FormatError) as excinfo:
        read_tree(cursor, bookkeeping)
    assert excinfo.value.actual == 7
    # Root block id is the first field of the master record
    assert excinfo.value.offset == bookkeeping.block(0).file_offset
