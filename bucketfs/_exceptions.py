import errno
import io


class BFSPathError(OSError):
    """Base error for filesystem operations. Subclass of OSError.

    Carries the operation name and the path it was applied to.
    """

    errno_code: int | None = None

    def __init__(self, op: str, path: str, reason: str | None = None) -> None:
        self.op = op
        self.path = path
        self.reason = reason
        message = f"{op} {path!r}"
        if reason:
            message = f"{message}: {reason}"
        if self.errno_code is None:
            super().__init__(message)
        else:
            super().__init__(self.errno_code, message)

    def __str__(self) -> str:
        message = f"{self.op} {self.path!r}"
        if self.reason:
            message = f"{message}: {self.reason}"
        return message


class BFSNotFoundError(BFSPathError, FileNotFoundError):
    errno_code = errno.ENOENT

    def __init__(self, op: str, path: str, reason: str | None = None) -> None:
        super().__init__(op, path, reason or "no such file or directory")


class BFSInvalidArgumentError(BFSPathError, ValueError):
    errno_code = errno.EINVAL

    def __init__(self, op: str, path: str, reason: str | None = None) -> None:
        super().__init__(op, path, reason or "invalid argument")


class BFSClosedError(BFSPathError, ValueError):
    """Raised on write or close of an already closed handle."""

    def __init__(self, op: str, path: str, reason: str | None = None) -> None:
        super().__init__(op, path, reason or "file already closed")


class BFSNotADirectoryError(BFSPathError, NotADirectoryError):
    errno_code = errno.ENOTDIR

    def __init__(self, op: str, path: str, reason: str | None = None) -> None:
        super().__init__(op, path, reason or "not a directory")


class BFSIsADirectoryError(BFSPathError, IsADirectoryError):
    errno_code = errno.EISDIR

    def __init__(self, op: str, path: str, reason: str | None = None) -> None:
        super().__init__(op, path, reason or "is a directory")


class BFSUnsupportedError(BFSPathError, io.UnsupportedOperation):
    def __init__(self, op: str, path: str, reason: str | None = None) -> None:
        super().__init__(op, path, reason or "operation not supported")


class BFSTransportError(BFSPathError):
    """Wraps a store failure that has no filesystem meaning.

    The original exception is kept as ``__cause__``.
    """
