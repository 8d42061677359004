"""pytest fixture plugin.

Usage::

    # conftest.py
    pytest_plugins = ["bucketfs._pytest_plugin"]

This makes the ``mock_store`` and ``bfs`` fixtures available::

    def test_something(bfs):
        bfs.write_file("dir/a.txt", b"hello")
        assert bfs.read_dir("dir")[0].name == "a.txt"
"""

import pytest

from ._fs import S3FileSystem
from ._mock import MockObjectStore

BUCKET = "bucket"


@pytest.fixture
def mock_store(tmp_path) -> MockObjectStore:
    """A :class:`MockObjectStore` over ``tmp_path`` with an empty ``bucket``."""
    (tmp_path / BUCKET).mkdir()
    return MockObjectStore(tmp_path)


@pytest.fixture
def bfs(mock_store: MockObjectStore) -> S3FileSystem:
    """An :class:`S3FileSystem` over :func:`mock_store`.

    Provides an independent bucket per test (function scope).
    """
    return S3FileSystem(mock_store, BUCKET)
