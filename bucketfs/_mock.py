"""Reference object store backed by an ordinary directory tree.

``MockObjectStore(root)`` maps ``(bucket, key)`` to ``root / bucket / key``
and re-derives the store's listing semantics from real filesystem entries:

* with ``delimiter="/"`` the next key segment is grouped into common
  prefixes, read from real subdirectories (empty ones are skipped, since a
  store has no empty directories);
* without a delimiter every file below the prefix is returned;
* results are sorted by key, filtered by ``start_after``, cut at
  ``max_keys`` and flagged ``truncated`` when more remain.

Every call is recorded in :attr:`MockObjectStore.calls`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from ._errors import to_store_error
from ._store import (
    DEFAULT_MAX_KEYS,
    GetResult,
    ListResult,
    NoSuchBucketError,
    NoSuchKeyError,
    StoreError,
    StoreObject,
)

logger = logging.getLogger(__name__)

_DELIMITER = "/"


@dataclass
class StoreCall:
    name: str
    args: tuple[object, ...]


def _key_parts(key: str) -> list[str] | None:
    parts = key.split(_DELIMITER)
    for part in parts:
        if part in ("", ".", ".."):
            return None
    return parts


def _mtime(st: os.stat_result) -> datetime:
    return datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)


def _has_files(directory: Path) -> bool:
    return any(p.is_file() for p in directory.rglob("*"))


class MockObjectStore:
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self.calls: list[StoreCall] = []

    # -- path helpers --

    def _bucket_dir(self, bucket: str) -> Path:
        if _key_parts(bucket) is None or _DELIMITER in bucket:
            raise ValueError(f"Invalid bucket name: {bucket!r}")
        bucket_dir = self.root / bucket
        if not bucket_dir.is_dir():
            raise NoSuchBucketError(bucket)
        return bucket_dir

    def _object_path(self, bucket: str, key: str) -> Path | None:
        parts = _key_parts(key)
        if parts is None:
            return None
        return self._bucket_dir(bucket).joinpath(*parts)

    def _prune_empty_parents(self, bucket_dir: Path, path: Path) -> None:
        parent = path.parent
        while parent != bucket_dir and bucket_dir in parent.parents:
            try:
                parent.rmdir()
            except OSError:
                return
            parent = parent.parent

    def calls_named(self, name: str) -> list[StoreCall]:
        return [c for c in self.calls if c.name == name]

    # -- listing --

    def list_objects(
        self,
        bucket: str,
        prefix: str,
        *,
        delimiter: str | None = None,
        max_keys: int = DEFAULT_MAX_KEYS,
        start_after: str = "",
    ) -> ListResult:
        self.calls.append(
            StoreCall("list_objects", (bucket, prefix, delimiter, max_keys, start_after))
        )
        if delimiter and delimiter != _DELIMITER:
            raise ValueError(f"Unsupported delimiter: {delimiter!r}")
        if max_keys <= 0:
            max_keys = DEFAULT_MAX_KEYS
        bucket_dir = self._bucket_dir(bucket)
        if delimiter:
            items = self._scan_level(bucket_dir, prefix)
        else:
            items = self._scan_tree(bucket_dir, prefix)
        items.sort(key=lambda item: item[0])

        result = ListResult()
        count = 0
        for key, obj in items:
            # a common prefix sorts before every key it groups, so once
            # start_after is inside a group the group itself is skipped too
            if key <= start_after:
                continue
            if count >= max_keys:
                result.truncated = True
                break
            if obj is None:
                result.common_prefixes.append(key)
            else:
                result.objects.append(obj)
            count += 1
        logger.debug(
            "list_objects bucket=%s prefix=%r delimiter=%r start_after=%r -> %d objects, "
            "%d prefixes, truncated=%s",
            bucket,
            prefix,
            delimiter,
            start_after,
            len(result.objects),
            len(result.common_prefixes),
            result.truncated,
        )
        return result

    def _split_prefix(self, bucket_dir: Path, prefix: str) -> tuple[Path | None, str, str]:
        slash = prefix.rfind(_DELIMITER)
        dir_part, name_part = prefix[: slash + 1], prefix[slash + 1 :]
        if not dir_part:
            return bucket_dir, dir_part, name_part
        parts = _key_parts(dir_part[:-1])
        if parts is None:
            return None, dir_part, name_part
        directory = bucket_dir.joinpath(*parts)
        if not directory.is_dir():
            return None, dir_part, name_part
        return directory, dir_part, name_part

    def _scan_level(
        self, bucket_dir: Path, prefix: str
    ) -> list[tuple[str, StoreObject | None]]:
        directory, dir_part, name_part = self._split_prefix(bucket_dir, prefix)
        if directory is None:
            return []
        items: list[tuple[str, StoreObject | None]] = []
        with os.scandir(directory) as it:
            for entry in it:
                if not entry.name.startswith(name_part):
                    continue
                key = dir_part + entry.name
                if entry.is_dir(follow_symlinks=False):
                    if _has_files(Path(entry.path)):
                        items.append((key + _DELIMITER, None))
                elif entry.is_file(follow_symlinks=False):
                    st = entry.stat(follow_symlinks=False)
                    items.append((key, StoreObject(key, st.st_size, _mtime(st))))
        return items

    def _scan_tree(
        self, bucket_dir: Path, prefix: str
    ) -> list[tuple[str, StoreObject | None]]:
        directory, _, _ = self._split_prefix(bucket_dir, prefix)
        if directory is None:
            return []
        items: list[tuple[str, StoreObject | None]] = []
        for dirpath, _dirnames, filenames in os.walk(directory):
            for filename in filenames:
                path = Path(dirpath) / filename
                key = path.relative_to(bucket_dir).as_posix()
                if not key.startswith(prefix):
                    continue
                st = path.stat()
                items.append((key, StoreObject(key, st.st_size, _mtime(st))))
        return items

    # -- objects --

    def get_object(self, bucket: str, key: str) -> GetResult:
        self.calls.append(StoreCall("get_object", (bucket, key)))
        logger.debug("get_object bucket=%s key=%r", bucket, key)
        path = self._object_path(bucket, key)
        if path is None or not path.is_file():
            raise NoSuchKeyError(bucket, key)
        try:
            st = path.stat()
            body = path.open("rb")
        except OSError as exc:
            err = to_store_error(exc, bucket, key)
            if err is exc:
                raise
            raise err from exc
        return GetResult(body=body, size=st.st_size, modified_at=_mtime(st))

    def put_object(self, bucket: str, key: str, data: bytes) -> None:
        self.calls.append(StoreCall("put_object", (bucket, key, len(data))))
        logger.debug("put_object bucket=%s key=%r size=%d", bucket, key, len(data))
        path = self._object_path(bucket, key)
        if path is None:
            raise StoreError(f"Invalid key for a directory-backed store: {key!r}")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            err = to_store_error(exc, bucket, key)
            if err is exc:
                # a key that is also a prefix of other keys cannot be a file here
                raise StoreError(f"Cannot store s3://{bucket}/{key}: {exc}") from exc
            raise err from exc

    def delete_object(self, bucket: str, key: str) -> None:
        self.calls.append(StoreCall("delete_object", (bucket, key)))
        logger.debug("delete_object bucket=%s key=%r", bucket, key)
        self._delete(bucket, key)

    def delete_objects(self, bucket: str, keys: list[str]) -> list[str]:
        self.calls.append(StoreCall("delete_objects", (bucket, list(keys))))
        logger.debug("delete_objects bucket=%s count=%d", bucket, len(keys))
        failed: list[str] = []
        for key in keys:
            try:
                self._delete(bucket, key)
            except OSError as exc:
                logger.warning("delete_objects: failed to delete %r: %s", key, exc)
                failed.append(key)
        return failed

    def _delete(self, bucket: str, key: str) -> None:
        path = self._object_path(bucket, key)
        if path is None or path.is_dir():
            return
        path.unlink(missing_ok=True)
        self._prune_empty_parents(self._bucket_dir(bucket), path)
