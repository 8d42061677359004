from __future__ import annotations

import logging
from collections.abc import Iterator

from ._entry import ObjectEntry
from ._errors import to_fs_error
from ._exceptions import (
    BFSInvalidArgumentError,
    BFSIsADirectoryError,
    BFSNotADirectoryError,
    BFSNotFoundError,
    BFSTransportError,
)
from ._glob import GlobEngine
from ._handle import BufferedWriteHandle, S3FileHandle
from ._path import join_key, normalize_prefix, parent_path, validate_path
from ._reader import DirectoryReader
from ._store import StoreClient

logger = logging.getLogger(__name__)

DEFAULT_DIR_OPEN_BUFFER_SIZE: int = 100
DEFAULT_LIST_BUFFER_SIZE: int = 1000

# ---------------------------------------------------------------------------
#  S3FileSystem
# ---------------------------------------------------------------------------


class S3FileSystem:
    """A read/write filesystem over the keys of one object-store bucket.

    Directories are synthesized from key prefixes: ``a/b.txt`` makes ``a``
    a directory. Paths are slash-separated and relative (``"."`` is the
    root); they are joined with :attr:`root` to build keys.

    Args:
        client: the object store client (see :class:`StoreClient`).
        bucket: bucket name passed to every store call.
        root: key prefix this filesystem is rooted at.
        dir_open_buffer_size: entries fetched when :meth:`open` probes a
            directory.
        list_buffer_size: ``max_keys`` for listings done by
            :meth:`read_dir`, :meth:`glob` and :meth:`remove_all`.
        max_pages: upper bound on list calls per paginated loop, or
            ``None`` for no bound.
    """

    def __init__(
        self,
        client: StoreClient,
        bucket: str,
        *,
        root: str = "",
        dir_open_buffer_size: int = DEFAULT_DIR_OPEN_BUFFER_SIZE,
        list_buffer_size: int = DEFAULT_LIST_BUFFER_SIZE,
        max_pages: int | None = None,
    ) -> None:
        if not bucket:
            raise ValueError("bucket is required")
        if root not in ("", ".") and not validate_path(root):
            raise ValueError(f"Invalid root: {root!r}")
        if dir_open_buffer_size <= 0:
            raise ValueError(
                f"dir_open_buffer_size must be > 0, got {dir_open_buffer_size}"
            )
        if list_buffer_size <= 0:
            raise ValueError(f"list_buffer_size must be > 0, got {list_buffer_size}")
        if max_pages is not None and max_pages <= 0:
            raise ValueError(f"max_pages must be > 0 or None, got {max_pages}")
        self._client = client
        self.bucket: str = bucket
        self.root: str = join_key("", root)
        self.dir_open_buffer_size: int = dir_open_buffer_size
        self.list_buffer_size: int = list_buffer_size
        self.max_pages: int | None = max_pages
        self._glob_engine = GlobEngine(self)

    def __repr__(self) -> str:
        return f"S3FileSystem(bucket={self.bucket!r}, root={self.root!r})"

    # -- key helpers --

    def _key(self, path: str) -> str:
        return join_key(self.root, path)

    def _check(self, op: str, path: str) -> None:
        if not validate_path(path):
            raise BFSInvalidArgumentError(op, path)

    def _get(self, op: str, path: str) -> S3FileHandle:
        self._check(op, path)
        if path == ".":
            raise BFSNotFoundError(op, path)
        try:
            result = self._client.get_object(self.bucket, self._key(path))
        except Exception as exc:  # noqa: BLE001
            raise to_fs_error(exc, op, path) from exc
        return S3FileHandle(path, result)

    def _object_exists(self, op: str, path: str) -> bool:
        try:
            handle = self._get(op, path)
        except BFSNotFoundError:
            return False
        handle.close()
        return True

    def _dir_exists(self, op: str, path: str) -> bool:
        try:
            DirectoryReader(self, path).open(1, op=op)
        except BFSNotFoundError:
            return False
        return True

    def _upload(self, path: str, data: bytes) -> None:
        key = self._key(path)
        logger.debug("upload bucket=%s key=%r size=%d", self.bucket, key, len(data))
        try:
            self._client.put_object(self.bucket, key, data)
        except Exception as exc:  # noqa: BLE001
            raise to_fs_error(exc, "Close", path) from exc

    # -- read API --

    def open(self, path: str) -> S3FileHandle | DirectoryReader:
        """Open a file for reading, or a directory for listing."""
        try:
            return self._get("Open", path)
        except BFSNotFoundError:
            return DirectoryReader(self, path).open(self.dir_open_buffer_size, op="Open")

    def stat(self, path: str) -> ObjectEntry:
        try:
            handle = self._get("Stat", path)
        except BFSNotFoundError:
            return DirectoryReader(self, path).open(1, op="Stat").stat()
        with handle:
            return handle.stat()

    def read_dir(self, path: str) -> list[ObjectEntry]:
        """Return all entries of a directory sorted by name."""
        self._check("ReadDir", path)
        entries = DirectoryReader(self, path).read_all(op="ReadDir")
        if not entries and path != ".":
            if self._object_exists("ReadDir", path):
                raise BFSNotADirectoryError("ReadDir", path)
            raise BFSNotFoundError("ReadDir", path)
        return entries

    def listdir(self, path: str = ".") -> list[str]:
        return [e.name for e in self.read_dir(path)]

    def read_file(self, path: str) -> bytes:
        try:
            handle = self._get("ReadFile", path)
        except BFSNotFoundError:
            if path == "." or self._dir_exists("ReadFile", path):
                raise BFSIsADirectoryError("ReadFile", path) from None
            raise
        with handle:
            return handle.read()

    def glob(self, pattern: str) -> list[str]:
        """Return the sorted paths matching a shell *pattern*.

        ``*``, ``?`` and ``[seq]`` match within one path segment.
        """
        return self._glob_engine.glob(pattern)

    def sub(self, path: str) -> S3FileSystem:
        """Return a filesystem rooted at *path*. Does no I/O."""
        self._check("Sub", path)
        return S3FileSystem(
            self._client,
            self.bucket,
            root=self._key(path),
            dir_open_buffer_size=self.dir_open_buffer_size,
            list_buffer_size=self.list_buffer_size,
            max_pages=self.max_pages,
        )

    def exists(self, path: str) -> bool:
        try:
            self.stat(path)
        except (BFSNotFoundError, BFSInvalidArgumentError):
            return False
        return True

    def is_dir(self, path: str) -> bool:
        try:
            return self.stat(path).is_dir
        except (BFSNotFoundError, BFSInvalidArgumentError):
            return False

    def is_file(self, path: str) -> bool:
        try:
            return not self.stat(path).is_dir
        except (BFSNotFoundError, BFSInvalidArgumentError):
            return False

    def walk(self, path: str = ".") -> Iterator[tuple[str, list[str], list[str]]]:
        """Recursively walk the directory tree (top-down).

        .. warning::
            Not a snapshot: each directory is listed when it is reached.
            Directories removed in the meantime are skipped.
        """
        yield from self._walk_dir(path, self.read_dir(path))

    def _walk_dir(
        self, dir_path: str, entries: list[ObjectEntry]
    ) -> Iterator[tuple[str, list[str], list[str]]]:
        dirnames = [e.name for e in entries if e.is_dir]
        filenames = [e.name for e in entries if not e.is_dir]
        yield dir_path, dirnames, filenames
        for name in dirnames:
            child = name if dir_path == "." else f"{dir_path}/{name}"
            try:
                child_entries = self.read_dir(child)
            except BFSNotFoundError:
                continue
            yield from self._walk_dir(child, child_entries)

    # -- write API --

    def create_file(self, path: str) -> BufferedWriteHandle:
        """Return a buffered write handle; the upload happens on close."""
        self._check("CreateFile", path)
        if path == ".":
            raise BFSIsADirectoryError("CreateFile", path)
        if not self._object_exists("CreateFile", path) and self._dir_exists(
            "CreateFile", path
        ):
            raise BFSIsADirectoryError("CreateFile", path)
        parent = parent_path(path)
        if parent != "." and self._object_exists("CreateFile", parent):
            raise BFSNotADirectoryError("CreateFile", parent)
        return BufferedWriteHandle(self, path)

    def write_file(self, path: str, data: bytes) -> int:
        handle = self.create_file(path)
        n = handle.write(data)
        handle.close()
        return n

    def mkdir_all(self, path: str) -> None:
        """Directories are implicit; only validates *path*."""
        self._check("MkdirAll", path)

    def remove_file(self, path: str) -> None:
        self._check("RemoveFile", path)
        if path == ".":
            raise BFSInvalidArgumentError("RemoveFile", path, "cannot remove the root")
        key = self._key(path)
        logger.debug("delete bucket=%s key=%r", self.bucket, key)
        try:
            self._client.delete_object(self.bucket, key)
        except Exception as exc:  # noqa: BLE001
            raise to_fs_error(exc, "RemoveFile", path) from exc

    def remove_all(self, path: str) -> None:
        """Remove *path* and every key below it. ``"."`` empties the view.

        Lists recursively one page at a time and deletes each page in one
        batch. Not atomic: a failing page stops the loop and earlier pages
        stay deleted. Keys the store reports as not deleted are raised as a
        :class:`BFSTransportError` once every page has been processed.
        """
        self._check("RemoveAll", path)
        prefix = normalize_prefix(self._key(path))
        start_after = ""
        failed: list[str] = []
        pages = 0
        while True:
            if self.max_pages is not None and pages >= self.max_pages:
                raise BFSTransportError(
                    "RemoveAll", path, f"listing exceeded {self.max_pages} pages"
                )
            pages += 1
            try:
                result = self._client.list_objects(
                    self.bucket,
                    prefix,
                    max_keys=self.list_buffer_size,
                    start_after=start_after,
                )
                keys = [obj.key for obj in result.objects]
                if keys:
                    start_after = keys[-1]
                    failed.extend(self._client.delete_objects(self.bucket, keys))
            except Exception as exc:  # noqa: BLE001
                raise to_fs_error(exc, "RemoveAll", path) from exc
            logger.debug(
                "remove_all bucket=%s prefix=%r page=%d deleted=%d",
                self.bucket,
                prefix,
                pages,
                len(keys),
            )
            if not result.truncated:
                break
        if path != ".":
            # the path itself may be a file
            key = self._key(path)
            logger.debug("delete bucket=%s key=%r", self.bucket, key)
            try:
                self._client.delete_object(self.bucket, key)
            except Exception as exc:  # noqa: BLE001
                raise to_fs_error(exc, "RemoveAll", path) from exc
        if failed:
            logger.warning(
                "remove_all bucket=%s prefix=%r: %d keys not deleted",
                self.bucket,
                prefix,
                len(failed),
            )
            shown = ", ".join(failed[:5])
            raise BFSTransportError(
                "RemoveAll", path, f"{len(failed)} keys could not be deleted: {shown}"
            )
