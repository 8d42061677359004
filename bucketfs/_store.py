from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO, Protocol

DEFAULT_MAX_KEYS: int = 1000


class StoreError(Exception):
    """Base error raised by store clients."""


class NoSuchKeyError(StoreError):
    """Raised by ``get_object`` when the key does not exist."""

    def __init__(self, bucket: str, key: str) -> None:
        self.bucket = bucket
        self.key = key
        super().__init__(f"NoSuchKey: s3://{bucket}/{key}")


class KeyConflictError(StoreError):
    """Raised by ``put_object`` when a parent segment of the key is an object.

    Only stores that keep a real hierarchy raise it; a flat bucket accepts
    any key.
    """

    def __init__(self, bucket: str, key: str) -> None:
        self.bucket = bucket
        self.key = key
        super().__init__(f"KeyConflict: s3://{bucket}/{key}: a parent key is an object")


class NoSuchBucketError(StoreError):
    def __init__(self, bucket: str) -> None:
        self.bucket = bucket
        super().__init__(f"NoSuchBucket: {bucket}")


@dataclass(frozen=True)
class StoreObject:
    key: str
    size: int
    modified_at: datetime


@dataclass
class ListResult:
    objects: list[StoreObject] = field(default_factory=list)
    common_prefixes: list[str] = field(default_factory=list)
    truncated: bool = False


@dataclass
class GetResult:
    body: BinaryIO
    size: int
    modified_at: datetime


class StoreClient(Protocol):
    """Synchronous object store contract used by :class:`S3FileSystem`.

    Keys are flat strings; ``/`` only has meaning when passed as
    ``delimiter`` to :meth:`list_objects`.
    """

    def list_objects(
        self,
        bucket: str,
        prefix: str,
        *,
        delimiter: str | None = None,
        max_keys: int = DEFAULT_MAX_KEYS,
        start_after: str = "",
    ) -> ListResult:
        """Return up to ``max_keys`` keys greater than ``start_after``.

        Keys are in ascending order. With a delimiter, keys having another
        delimiter after ``prefix`` are grouped into ``common_prefixes``.
        """

    def get_object(self, bucket: str, key: str) -> GetResult:
        """Open the object body. Raises :class:`NoSuchKeyError`."""

    def put_object(self, bucket: str, key: str, data: bytes) -> None:
        """Store ``data`` under ``key`` (overwrite)."""

    def delete_object(self, bucket: str, key: str) -> None:
        """Delete ``key``. Deleting a missing key is not an error."""

    def delete_objects(self, bucket: str, keys: list[str]) -> list[str]:
        """Delete ``keys`` quietly and return the keys that failed."""
