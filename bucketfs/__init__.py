from typing import TYPE_CHECKING

from ._disk import DiskFileSystem
from ._entry import ZERO_TIME, DirectoryEntry, FileEntry, ObjectEntry
from ._exceptions import (
    BFSClosedError,
    BFSInvalidArgumentError,
    BFSIsADirectoryError,
    BFSNotADirectoryError,
    BFSNotFoundError,
    BFSPathError,
    BFSTransportError,
    BFSUnsupportedError,
)
from ._fs import S3FileSystem
from ._handle import BufferedWriteHandle, S3FileHandle
from ._mock import MockObjectStore, StoreCall
from ._protocol import FileSystem
from ._reader import DirectoryReader
from ._store import (
    GetResult,
    KeyConflictError,
    ListResult,
    NoSuchBucketError,
    NoSuchKeyError,
    StoreClient,
    StoreError,
    StoreObject,
)

if TYPE_CHECKING:
    from ._boto3 import Boto3StoreClient


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "Boto3StoreClient":
        from ._boto3 import Boto3StoreClient

        globals()["Boto3StoreClient"] = Boto3StoreClient
        return Boto3StoreClient
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "S3FileSystem",
    "DiskFileSystem",
    "FileSystem",
    "DirectoryReader",
    "S3FileHandle",
    "BufferedWriteHandle",
    "FileEntry",
    "DirectoryEntry",
    "ObjectEntry",
    "ZERO_TIME",
    "MockObjectStore",
    "StoreCall",
    "StoreClient",
    "StoreObject",
    "ListResult",
    "GetResult",
    "StoreError",
    "NoSuchKeyError",
    "NoSuchBucketError",
    "KeyConflictError",
    "Boto3StoreClient",
    "BFSPathError",
    "BFSNotFoundError",
    "BFSInvalidArgumentError",
    "BFSClosedError",
    "BFSNotADirectoryError",
    "BFSIsADirectoryError",
    "BFSUnsupportedError",
    "BFSTransportError",
]
__version__ = "0.1.0"
