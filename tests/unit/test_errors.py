import errno
import io

import pytest
from bucketfs._errors import is_not_found, to_fs_error, to_store_error
from bucketfs._exceptions import (
    BFSClosedError,
    BFSInvalidArgumentError,
    BFSIsADirectoryError,
    BFSNotADirectoryError,
    BFSNotFoundError,
    BFSPathError,
    BFSTransportError,
    BFSUnsupportedError,
)
from bucketfs._store import KeyConflictError, NoSuchKeyError, StoreError


def test_no_such_key_becomes_not_found():
    err = to_fs_error(NoSuchKeyError("bucket", "a/b"), "Open", "a/b")
    assert isinstance(err, BFSNotFoundError)
    assert isinstance(err, FileNotFoundError)
    assert err.op == "Open"
    assert err.path == "a/b"
    assert err.errno == errno.ENOENT


def test_file_not_found_becomes_not_found():
    err = to_fs_error(FileNotFoundError("gone"), "Stat", "x")
    assert isinstance(err, BFSNotFoundError)


def test_other_errors_are_transport():
    cause = RuntimeError("connection reset")
    err = to_fs_error(cause, "ReadDir", "dir0")
    assert isinstance(err, BFSTransportError)
    assert "RuntimeError" in str(err)
    assert "connection reset" in str(err)


def test_fs_errors_are_wrapped_once():
    inner = BFSIsADirectoryError("ReadFile", "dir0")
    assert to_fs_error(inner, "Open", "other") is inner


def test_transport_error_keeps_cause():
    cause = StoreError("boom")
    with pytest.raises(BFSTransportError) as excinfo:
        try:
            raise cause
        except StoreError as exc:
            raise to_fs_error(exc, "Glob", "*") from exc
    assert excinfo.value.__cause__ is cause


def test_is_not_found():
    assert is_not_found(NoSuchKeyError("b", "k"))
    assert is_not_found(BFSNotFoundError("Open", "k"))
    assert not is_not_found(StoreError("k"))


def test_to_store_error():
    err = to_store_error(FileNotFoundError("k"), "bucket", "k")
    assert isinstance(err, NoSuchKeyError)
    assert err.key == "k"
    other = PermissionError("denied")
    assert to_store_error(other, "bucket", "k") is other


@pytest.mark.parametrize("cause", [NotADirectoryError("a"), FileExistsError("a")])
def test_parent_object_becomes_key_conflict(cause):
    err = to_store_error(cause, "bucket", "a/b")
    assert isinstance(err, KeyConflictError)
    assert isinstance(err, StoreError)
    assert err.key == "a/b"


def test_key_conflict_becomes_not_a_directory():
    err = to_fs_error(KeyConflictError("bucket", "a/b"), "Close", "a/b")
    assert isinstance(err, BFSNotADirectoryError)
    assert err.op == "Close"
    assert err.path == "a/b"


def test_message_format():
    err = BFSNotFoundError("Open", "dir0/x")
    assert str(err) == "Open 'dir0/x': no such file or directory"
    assert str(BFSInvalidArgumentError("Glob", "[", "bad pattern")) == "Glob '[': bad pattern"


@pytest.mark.parametrize(
    "cls,builtin",
    [
        (BFSNotFoundError, FileNotFoundError),
        (BFSInvalidArgumentError, ValueError),
        (BFSClosedError, ValueError),
        (BFSNotADirectoryError, NotADirectoryError),
        (BFSIsADirectoryError, IsADirectoryError),
        (BFSUnsupportedError, io.UnsupportedOperation),
        (BFSTransportError, OSError),
    ],
)
def test_taxonomy_maps_to_builtins(cls, builtin):
    err = cls("Op", "p")
    assert isinstance(err, builtin)
    assert isinstance(err, BFSPathError)
    assert isinstance(err, OSError)
