import logging

import pytest
from builder import bool_entry, iloc_entry, long_entry, single_leaf_store, ustr_entry

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s", force=True)


@pytest.fixture
def sample_store():
    return single_leaf_store(
        [
            long_entry(".", b"vSrn", 1),
            bool_entry("Documents", b"dscl", True),
            iloc_entry("Documents", 64, 96),
            ustr_entry("notes.txt", b"cmmt", "todo list"),
        ]
    )


@pytest.fixture
def sample_path(tmp_path, sample_store):
    path = tmp_path / ".DS_Store"
    path.write_bytes(sample_store)
    return path
