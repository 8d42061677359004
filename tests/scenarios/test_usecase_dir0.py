"""A bucket holding dir0/file01.txt and dir0/file02.txt, end to end."""
import pytest
from bucketfs import BFSNotFoundError, ZERO_TIME


def test_read_dir(dir0):
    entries = dir0.read_dir("dir0")
    assert [(e.name, e.size, e.is_dir) for e in entries] == [
        ("file01.txt", 5, False),
        ("file02.txt", 3, False),
    ]


def test_root_lists_dir0(dir0):
    (entry,) = dir0.read_dir(".")
    assert entry.name == "dir0"
    assert entry.is_dir
    assert entry.modified_at == ZERO_TIME


def test_glob(dir0):
    assert dir0.glob("dir0/*") == ["dir0/file01.txt", "dir0/file02.txt"]
    assert dir0.glob("*") == ["dir0"]


def test_open_and_read(dir0):
    with dir0.open("dir0/file01.txt") as f:
        assert f.read() == b"hello"
        assert f.stat().size == 5


def test_sub_view(dir0):
    sub = dir0.sub("dir0")
    assert sub.listdir(".") == ["file01.txt", "file02.txt"]
    assert sub.read_file("file02.txt") == b"abc"


def test_remove_all(dir0):
    dir0.remove_all("dir0")
    with pytest.raises(BFSNotFoundError):
        dir0.read_dir("dir0")
    assert dir0.read_dir(".") == []


def test_add_and_remove_one_file(dir0):
    dir0.write_file("dir0/file03.txt", b"third")
    assert dir0.listdir("dir0") == ["file01.txt", "file02.txt", "file03.txt"]
    dir0.remove_file("dir0/file01.txt")
    assert dir0.listdir("dir0") == ["file02.txt", "file03.txt"]
