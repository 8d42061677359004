from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import ClassVar

from ._path import base_name
from ._store import StoreObject

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class FileEntry:
    """An object stored under an exact key."""

    name: str
    size: int
    modified_at: datetime

    is_dir: ClassVar[bool] = False

    @classmethod
    def from_object(cls, obj: StoreObject) -> FileEntry:
        return cls(name=base_name(obj.key), size=obj.size, modified_at=obj.modified_at)


@dataclass(frozen=True)
class DirectoryEntry:
    """A directory synthesized from a key prefix.

    Directories have no stored metadata: size is always 0 and the
    modification time is always :data:`ZERO_TIME`.
    """

    name: str

    is_dir: ClassVar[bool] = True
    size: ClassVar[int] = 0
    modified_at: ClassVar[datetime] = ZERO_TIME

    @classmethod
    def from_prefix(cls, prefix: str) -> DirectoryEntry:
        return cls(name=base_name(prefix))


ObjectEntry = FileEntry | DirectoryEntry
