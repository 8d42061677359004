import pytest

from bucketfs import S3FileSystem
from bucketfs._pytest_plugin import BUCKET, bfs, mock_store  # noqa: F401


@pytest.fixture
def bucket_dir(mock_store):
    """The directory backing the test bucket; files written here are objects."""
    return mock_store.root / BUCKET


@pytest.fixture
def dir0(bucket_dir, bfs) -> S3FileSystem:
    """A bucket holding ``dir0/file01.txt`` (5 bytes) and ``dir0/file02.txt`` (3 bytes)."""
    (bucket_dir / "dir0").mkdir()
    (bucket_dir / "dir0" / "file01.txt").write_bytes(b"hello")
    (bucket_dir / "dir0" / "file02.txt").write_bytes(b"abc")
    return bfs
