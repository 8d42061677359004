from __future__ import annotations

import logging
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path

from ._entry import DirectoryEntry, FileEntry, ObjectEntry
from ._errors import to_fs_error
from ._exceptions import (
    BFSInvalidArgumentError,
    BFSIsADirectoryError,
    BFSNotADirectoryError,
    BFSNotFoundError,
    BFSPathError,
)
from ._glob import compile_pattern
from ._handle import BufferedWriteHandle
from ._path import SEPARATOR, base_name, parent_path, validate_path

logger = logging.getLogger(__name__)


def _translate(exc: OSError, op: str, path: str) -> BFSPathError:
    if isinstance(exc, IsADirectoryError):
        return BFSIsADirectoryError(op, path)
    if isinstance(exc, (NotADirectoryError, FileExistsError)):
        return BFSNotADirectoryError(op, path)
    return to_fs_error(exc, op, path)


def _entry(name: str, local: Path) -> ObjectEntry:
    if local.is_dir():
        return DirectoryEntry(name)
    st = local.stat()
    return FileEntry(
        name=name,
        size=st.st_size,
        modified_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
    )


class DiskDirHandle:
    def __init__(self, fsys: DiskFileSystem, path: str) -> None:
        self._path = path
        self._entries = fsys.read_dir(path)

    def read_dir(self, n: int = -1) -> list[ObjectEntry]:
        if n <= 0:
            n = len(self._entries)
        entries, self._entries = self._entries[:n], self._entries[n:]
        return entries

    def stat(self) -> DirectoryEntry:
        return DirectoryEntry(base_name(self._path))

    def read(self, size: int = -1) -> bytes:
        raise BFSIsADirectoryError("Read", self._path)

    def close(self) -> None:
        self._entries = []

    def __enter__(self) -> DiskDirHandle:
        return self

    def __exit__(self, *args) -> None:
        self.close()


class DiskFileSystem:
    """The same filesystem surface as :class:`S3FileSystem` over a local directory.

    Used as the reference variant: a tree laid out on disk must read the
    same through this class as through ``S3FileSystem(MockObjectStore(...))``.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"DiskFileSystem(root={str(self.root)!r})"

    def _local(self, op: str, path: str) -> Path:
        if not validate_path(path):
            raise BFSInvalidArgumentError(op, path)
        if path == ".":
            return self.root
        return self.root.joinpath(*path.split(SEPARATOR))

    def _upload(self, path: str, data: bytes) -> None:
        local = self._local("Close", path)
        logger.debug("write %s size=%d", local, len(data))
        try:
            local.parent.mkdir(parents=True, exist_ok=True)
            local.write_bytes(data)
        except OSError as exc:
            raise _translate(exc, "Close", path) from exc

    def open(self, path: str):
        local = self._local("Open", path)
        if local.is_dir():
            return DiskDirHandle(self, path)
        try:
            return local.open("rb")
        except OSError as exc:
            raise _translate(exc, "Open", path) from exc

    def stat(self, path: str) -> ObjectEntry:
        local = self._local("Stat", path)
        try:
            return _entry(base_name(path), local)
        except OSError as exc:
            raise _translate(exc, "Stat", path) from exc

    def read_dir(self, path: str) -> list[ObjectEntry]:
        local = self._local("ReadDir", path)
        if not local.exists():
            raise BFSNotFoundError("ReadDir", path)
        if not local.is_dir():
            raise BFSNotADirectoryError("ReadDir", path)
        with os.scandir(local) as it:
            entries = [_entry(e.name, Path(e.path)) for e in it]
        entries.sort(key=lambda e: e.name)
        return entries

    def read_file(self, path: str) -> bytes:
        local = self._local("ReadFile", path)
        if local.is_dir():
            raise BFSIsADirectoryError("ReadFile", path)
        try:
            return local.read_bytes()
        except OSError as exc:
            raise _translate(exc, "ReadFile", path) from exc

    def sub(self, path: str) -> DiskFileSystem:
        return DiskFileSystem(self._local("Sub", path))

    def glob(self, pattern: str) -> list[str]:
        if pattern in ("", "*"):
            return sorted(os.listdir(self.root)) if self.root.is_dir() else []
        try:
            matchers = compile_pattern(pattern)
        except ValueError as exc:
            raise BFSInvalidArgumentError("Glob", pattern, f"bad pattern: {exc}") from exc
        frontier: list[str] = [""]
        last = len(matchers) - 1
        for depth, matcher in enumerate(matchers):
            next_frontier: list[str] = []
            for directory in frontier:
                local = self.root / directory if directory else self.root
                if not local.is_dir():
                    continue
                with os.scandir(local) as it:
                    for entry in it:
                        if not matcher.fullmatch(entry.name):
                            continue
                        if depth < last and not entry.is_dir():
                            continue
                        next_frontier.append(
                            f"{directory}{SEPARATOR}{entry.name}" if directory else entry.name
                        )
            frontier = next_frontier
        return sorted(set(frontier))

    def create_file(self, path: str) -> BufferedWriteHandle:
        local = self._local("CreateFile", path)
        if local.is_dir():
            raise BFSIsADirectoryError("CreateFile", path)
        parent = parent_path(path)
        if parent != "." and self._local("CreateFile", parent).is_file():
            raise BFSNotADirectoryError("CreateFile", parent)
        return BufferedWriteHandle(self, path)

    def write_file(self, path: str, data: bytes) -> int:
        handle = self.create_file(path)
        n = handle.write(data)
        handle.close()
        return n

    def remove_file(self, path: str) -> None:
        local = self._local("RemoveFile", path)
        if local.is_dir():
            raise BFSIsADirectoryError("RemoveFile", path)
        try:
            local.unlink(missing_ok=True)
        except OSError as exc:
            raise _translate(exc, "RemoveFile", path) from exc

    def remove_all(self, path: str) -> None:
        local = self._local("RemoveAll", path)
        try:
            if path == ".":
                # empty the root but keep the directory itself
                children = list(local.iterdir()) if local.is_dir() else []
                for child in children:
                    if child.is_dir():
                        shutil.rmtree(child)
                    else:
                        child.unlink()
            elif local.is_dir():
                shutil.rmtree(local)
            else:
                local.unlink(missing_ok=True)
        except OSError as exc:
            raise _translate(exc, "RemoveAll", path) from exc

    def mkdir_all(self, path: str) -> None:
        local = self._local("MkdirAll", path)
        try:
            local.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise _translate(exc, "MkdirAll", path) from exc
