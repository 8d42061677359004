from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ._entry import ObjectEntry


@runtime_checkable
class FileSystem(Protocol):
    """The capability surface shared by every filesystem variant.

    Paths are slash-separated and relative to the filesystem root, which
    is ``"."``. Failures are ``OSError`` subclasses from
    :mod:`bucketfs._exceptions`.
    """

    def open(self, path: str) -> Any: ...

    def stat(self, path: str) -> ObjectEntry: ...

    def read_dir(self, path: str) -> list[ObjectEntry]: ...

    def read_file(self, path: str) -> bytes: ...

    def sub(self, path: str) -> FileSystem: ...

    def glob(self, pattern: str) -> list[str]: ...

    def create_file(self, path: str) -> Any: ...

    def write_file(self, path: str, data: bytes) -> int: ...

    def remove_file(self, path: str) -> None: ...

    def remove_all(self, path: str) -> None: ...

    def mkdir_all(self, path: str) -> None: ...
