from __future__ import annotations

from typing import TYPE_CHECKING

from ._entry import DirectoryEntry, FileEntry, ObjectEntry
from ._errors import to_fs_error
from ._exceptions import (
    BFSClosedError,
    BFSIsADirectoryError,
    BFSNotFoundError,
    BFSTransportError,
)
from ._path import SEPARATOR, base_name, normalize_prefix

if TYPE_CHECKING:
    from ._fs import S3FileSystem


class DirectoryReader:
    """Paginated enumeration of one directory's immediate children.

    Each list call is scoped to the directory prefix with a one-level
    delimiter and resumes after the greatest key seen so far. Entries
    fetched by :meth:`open` are cached and served first.

    Returned by :meth:`S3FileSystem.open` for directories; not shared
    between callers.
    """

    def __init__(self, fsys: S3FileSystem, path: str) -> None:
        self._fsys = fsys
        self._path = path
        self._prefix = normalize_prefix(fsys._key(path))
        self._start_after: str = ""
        self._at_end: bool = False
        self._cache: list[ObjectEntry] = []
        self._pages: int = 0
        self._is_closed: bool = False

    @property
    def name(self) -> str:
        return base_name(self._path)

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def at_end(self) -> bool:
        return self._at_end and not self._cache

    def _assert_open(self) -> None:
        if self._is_closed:
            raise BFSClosedError("ReadDir", self._path)

    def open(self, n: int, op: str = "Open") -> DirectoryReader:
        """Probe the directory with one batch of up to *n* entries.

        An empty first batch means no key has this prefix, so the
        directory does not exist. The root always exists.
        """
        entries = self.read_batch(n, op=op)
        if not entries and self._path != ".":
            raise BFSNotFoundError(op, self._path)
        self._cache = entries
        return self

    def read_batch(self, n: int, op: str = "ReadDir") -> list[ObjectEntry]:
        """Return up to *n* entries; an empty list only once exhausted."""
        self._assert_open()
        if n <= 0:
            raise ValueError(f"batch size must be > 0, got {n}")
        if self._cache:
            entries = self._cache[:n]
            self._cache = self._cache[n:]
            return entries
        entries = []
        while not entries and not self._at_end:
            entries = self._fetch(n, op)
        return entries

    def read_all(self, op: str = "ReadDir") -> list[ObjectEntry]:
        """Drain the directory and return its entries sorted by name."""
        batch_size = self._fsys.list_buffer_size
        entries: list[ObjectEntry] = []
        while not self.at_end:
            entries.extend(self.read_batch(batch_size, op=op))
        # prefixes and objects are merged per page, not across pages
        entries.sort(key=lambda e: e.name)
        return entries

    def _fetch(self, n: int, op: str) -> list[ObjectEntry]:
        fsys = self._fsys
        if fsys.max_pages is not None and self._pages >= fsys.max_pages:
            raise BFSTransportError(
                op, self._path, f"listing exceeded {fsys.max_pages} pages"
            )
        self._pages += 1
        try:
            result = fsys._client.list_objects(
                fsys.bucket,
                self._prefix,
                delimiter=SEPARATOR,
                max_keys=n,
                start_after=self._start_after,
            )
        except Exception as exc:  # noqa: BLE001
            raise to_fs_error(exc, op, self._path) from exc

        merged: list[tuple[str, ObjectEntry]] = []
        for prefix in result.common_prefixes:
            merged.append((prefix, DirectoryEntry.from_prefix(prefix)))
        for obj in result.objects:
            merged.append((obj.key, FileEntry.from_object(obj)))
        merged.sort(key=lambda item: item[0])
        if merged:
            self._start_after = max(self._start_after, merged[-1][0])
        self._at_end = not result.truncated
        # a zero-byte "dir/" marker object is the directory itself
        return [entry for key, entry in merged if key != self._prefix]

    # -- handle surface --

    def read_dir(self, n: int = -1) -> list[ObjectEntry]:
        """Read up to *n* entries, or all remaining entries if ``n <= 0``."""
        if n <= 0:
            return self.read_all()
        return self.read_batch(n)

    def stat(self) -> DirectoryEntry:
        return DirectoryEntry(name=self.name)

    def read(self, size: int = -1) -> bytes:
        raise BFSIsADirectoryError("Read", self._path)

    def close(self) -> None:
        self._is_closed = True
        self._cache = []

    def __enter__(self) -> DirectoryReader:
        return self

    def __exit__(self, *args) -> None:
        self.close()
