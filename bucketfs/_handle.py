from __future__ import annotations

import io
import warnings
from typing import Protocol

from ._entry import FileEntry
from ._errors import to_fs_error
from ._exceptions import BFSClosedError, BFSUnsupportedError
from ._path import base_name
from ._store import GetResult


class Uploader(Protocol):
    def _upload(self, path: str, data: bytes) -> None: ...


class S3FileHandle:
    """Read handle streaming the body of one object."""

    def __init__(self, path: str, result: GetResult) -> None:
        self._path = path
        self._body = result.body
        self._entry = FileEntry(
            name=base_name(path), size=result.size, modified_at=result.modified_at
        )
        self._is_closed: bool = False

    @property
    def name(self) -> str:
        return self._entry.name

    @property
    def closed(self) -> bool:
        return self._is_closed

    def _assert_open(self, op: str) -> None:
        if self._is_closed:
            raise BFSClosedError(op, self._path)

    def read(self, size: int = -1) -> bytes:
        self._assert_open("Read")
        try:
            if size < 0:
                return self._body.read()
            return self._body.read(size)
        except Exception as exc:  # noqa: BLE001
            raise to_fs_error(exc, "Read", self._path) from exc

    def write(self, data: bytes) -> int:
        raise BFSUnsupportedError("Write", self._path, "handle opened for reading")

    def readable(self) -> bool:
        self._assert_open("Read")
        return True

    def writable(self) -> bool:
        self._assert_open("Write")
        return False

    def stat(self) -> FileEntry:
        return self._entry

    def close(self) -> None:
        if self._is_closed:
            return
        self._is_closed = True
        self._body.close()

    def __enter__(self) -> S3FileHandle:
        return self

    def __exit__(self, *args) -> None:
        self.close()


class BufferedWriteHandle:
    """Write handle buffering the whole body in memory.

    Nothing is visible in the store until :meth:`close`, which uploads the
    buffer in a single call, and only if :meth:`write` was called at least
    once. Writing to or closing an already closed handle raises
    :class:`BFSClosedError`. Leaving a ``with`` block through an exception
    discards the buffer without uploading.
    """

    def __init__(self, fsys: Uploader, path: str) -> None:
        self._fsys = fsys
        self._path = path
        self._buffer: io.BytesIO | None = io.BytesIO()
        self._wrote: bool = False

    @property
    def name(self) -> str:
        return base_name(self._path)

    @property
    def closed(self) -> bool:
        return self._buffer is None

    def write(self, data: bytes) -> int:
        if self._buffer is None:
            raise BFSClosedError("Write", self._path)
        self._wrote = True
        return self._buffer.write(data)

    def read(self, size: int = -1) -> bytes:
        raise BFSUnsupportedError("Read", self._path, "handle opened for writing")

    def readable(self) -> bool:
        return False

    def writable(self) -> bool:
        return self._buffer is not None

    def close(self) -> None:
        if self._buffer is None:
            raise BFSClosedError("Close", self._path)
        buffer, self._buffer = self._buffer, None
        if not self._wrote:
            return
        self._fsys._upload(self._path, buffer.getvalue())

    def __enter__(self) -> BufferedWriteHandle:
        return self

    def __exit__(self, exc_type, *args) -> None:
        if self._buffer is None:
            return
        if exc_type is not None:
            # the with-block failed: drop the buffer instead of uploading
            self._buffer = None
            return
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_buffer", None) is not None and self._wrote:
            warnings.warn(
                f"BufferedWriteHandle for {self._path!r} was not closed; "
                "buffered data was not uploaded. "
                "Always use 'with fs.create_file(...) as f:' to ensure upload.",
                ResourceWarning,
                stacklevel=1,
            )
