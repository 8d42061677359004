from ._exceptions import (
    BFSNotADirectoryError,
    BFSNotFoundError,
    BFSPathError,
    BFSTransportError,
)
from ._store import KeyConflictError, NoSuchKeyError


def is_not_found(err: BaseException) -> bool:
    return isinstance(err, (NoSuchKeyError, FileNotFoundError))


def to_fs_error(err: BaseException, op: str, path: str) -> BFSPathError:
    """Translate a store failure into a filesystem error tagged with op/path.

    Errors that are already filesystem errors pass through unchanged, so an
    error is only ever wrapped once. The caller is expected to
    ``raise to_fs_error(exc, ...) from exc``.
    """
    if isinstance(err, BFSPathError):
        return err
    if is_not_found(err):
        return BFSNotFoundError(op, path)
    if isinstance(err, KeyConflictError):
        return BFSNotADirectoryError(op, path)
    return BFSTransportError(op, path, f"{type(err).__name__}: {err}")


def to_store_error(err: BaseException, bucket: str, key: str) -> BaseException:
    """Inverse of :func:`to_fs_error` for store implementations."""
    if is_not_found(err):
        return NoSuchKeyError(bucket, key)
    if isinstance(err, (NotADirectoryError, FileExistsError)):
        return KeyConflictError(bucket, key)
    return err
