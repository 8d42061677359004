import pytest
from bucketfs import (
    ZERO_TIME,
    BFSInvalidArgumentError,
    BFSIsADirectoryError,
    BFSNotADirectoryError,
    BFSNotFoundError,
    DirectoryReader,
    S3FileHandle,
    S3FileSystem,
)
from bucketfs._pytest_plugin import BUCKET
from tests.helpers.stores import InMemoryStore


def test_open_file(dir0):
    with dir0.open("dir0/file01.txt") as f:
        assert isinstance(f, S3FileHandle)
        assert f.read() == b"hello"


def test_open_directory(dir0):
    with dir0.open("dir0") as d:
        assert isinstance(d, DirectoryReader)
        assert [e.name for e in d.read_dir()] == ["file01.txt", "file02.txt"]


def test_open_directory_probes_with_open_buffer_size(mock_store, dir0):
    fsys = S3FileSystem(mock_store, BUCKET, dir_open_buffer_size=7)
    mock_store.calls.clear()
    fsys.open("dir0").close()
    (probe,) = mock_store.calls_named("list_objects")
    assert probe.args == (BUCKET, "dir0/", "/", 7, "")


def test_open_root(dir0, mock_store):
    mock_store.calls.clear()
    with dir0.open(".") as d:
        assert [e.name for e in d.read_dir()] == ["dir0"]
    assert mock_store.calls_named("get_object") == []


def test_open_missing(bfs):
    with pytest.raises(BFSNotFoundError) as excinfo:
        bfs.open("nope")
    assert excinfo.value.op == "Open"
    assert isinstance(excinfo.value, FileNotFoundError)


@pytest.mark.parametrize("path", ["", "/dir0", "dir0/", "dir0/../x", "./dir0", "a//b"])
def test_invalid_paths_fail_before_any_call(bfs, mock_store, path):
    with pytest.raises(BFSInvalidArgumentError):
        bfs.open(path)
    with pytest.raises(BFSInvalidArgumentError):
        bfs.stat(path)
    with pytest.raises(BFSInvalidArgumentError):
        bfs.read_file(path)
    with pytest.raises(BFSInvalidArgumentError):
        bfs.read_dir(path)
    assert mock_store.calls == []


def test_stat_file(dir0):
    entry = dir0.stat("dir0/file01.txt")
    assert entry.name == "file01.txt"
    assert entry.size == 5
    assert not entry.is_dir
    assert entry.modified_at.tzinfo is not None


def test_stat_directory(dir0, mock_store):
    mock_store.calls.clear()
    entry = dir0.stat("dir0")
    assert entry.is_dir
    assert entry.name == "dir0"
    assert entry.size == 0
    assert entry.modified_at == ZERO_TIME
    (probe,) = mock_store.calls_named("list_objects")
    assert probe.args[3] == 1


def test_stat_root(bfs):
    entry = bfs.stat(".")
    assert entry.is_dir
    assert entry.name == "."


def test_stat_missing(dir0):
    with pytest.raises(BFSNotFoundError):
        dir0.stat("dir0/nope.txt")


def test_stat_partial_name_is_not_a_directory(dir0):
    # "dir0/file0" is a key prefix but not a directory
    with pytest.raises(BFSNotFoundError):
        dir0.stat("dir0/file0")


def test_read_file(dir0):
    assert dir0.read_file("dir0/file02.txt") == b"abc"


def test_read_file_on_directory(dir0):
    with pytest.raises(BFSIsADirectoryError):
        dir0.read_file("dir0")
    with pytest.raises(BFSIsADirectoryError):
        dir0.read_file(".")


def test_read_file_missing(dir0):
    with pytest.raises(BFSNotFoundError) as excinfo:
        dir0.read_file("dir0/nope")
    assert excinfo.value.op == "ReadFile"
    assert excinfo.value.path == "dir0/nope"


def test_read_dir(dir0):
    entries = dir0.read_dir("dir0")
    assert [(e.name, e.size, e.is_dir) for e in entries] == [
        ("file01.txt", 5, False),
        ("file02.txt", 3, False),
    ]


def test_read_dir_missing(dir0):
    with pytest.raises(BFSNotFoundError):
        dir0.read_dir("nope")


def test_read_dir_on_file(dir0):
    with pytest.raises(BFSNotADirectoryError):
        dir0.read_dir("dir0/file01.txt")


def test_read_dir_empty_root(bfs):
    assert bfs.read_dir(".") == []
    assert bfs.listdir() == []


def test_listdir(dir0):
    assert dir0.listdir("dir0") == ["file01.txt", "file02.txt"]


def test_exists_is_dir_is_file(dir0):
    assert dir0.exists("dir0")
    assert dir0.is_dir("dir0")
    assert not dir0.is_file("dir0")
    assert dir0.is_file("dir0/file01.txt")
    assert not dir0.is_dir("dir0/file01.txt")
    assert not dir0.exists("nope")
    assert not dir0.is_dir("nope")
    assert not dir0.is_file("nope")
    assert not dir0.exists("../escape")


def test_object_and_directory_with_the_same_name():
    store = InMemoryStore({"a": b"1", "a/b": b"2"})
    fsys = S3FileSystem(store, BUCKET)
    entries = fsys.read_dir(".")
    assert sorted((e.name, e.is_dir) for e in entries) == [("a", False), ("a", True)]
    assert not fsys.stat("a").is_dir
    assert fsys.read_file("a") == b"1"
    assert fsys.read_dir("a")[0].name == "b"
    assert fsys.glob("*") == ["a"]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"dir_open_buffer_size": 0},
        {"list_buffer_size": 0},
        {"max_pages": 0},
        {"root": "/abs"},
        {"root": "a/../b"},
    ],
)
def test_invalid_configuration(mock_store, kwargs):
    with pytest.raises(ValueError):
        S3FileSystem(mock_store, BUCKET, **kwargs)


def test_bucket_is_required(mock_store):
    with pytest.raises(ValueError):
        S3FileSystem(mock_store, "")


def test_repr(bfs):
    assert repr(bfs) == "S3FileSystem(bucket='bucket', root='')"
