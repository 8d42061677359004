from __future__ import annotations

import re
from collections.abc import Iterator
from typing import TYPE_CHECKING

from ._errors import to_fs_error
from ._exceptions import BFSInvalidArgumentError, BFSTransportError
from ._path import (
    SEPARATOR,
    join_key,
    normalize_pattern_prefix,
    normalize_prefix,
    rel_key,
)
from ._reader import DirectoryReader

if TYPE_CHECKING:
    from ._fs import S3FileSystem


# ---------------------------------------------------------------------------
#  Segment patterns
# ---------------------------------------------------------------------------


def _class_char(segment: str, i: int) -> tuple[str, int]:
    if i >= len(segment):
        raise ValueError("unclosed character class")
    c = segment[i]
    if c in "-]":
        raise ValueError(f"unexpected {c!r} in character class")
    if c == "\\":
        i += 1
        if i >= len(segment):
            raise ValueError("trailing escape in character class")
        c = segment[i]
    return c, i + 1


def _translate_class(segment: str, i: int) -> tuple[str, int]:
    negate = False
    if i < len(segment) and segment[i] in "^!":
        negate = True
        i += 1
    parts: list[str] = []
    while True:
        if i >= len(segment):
            raise ValueError("unclosed character class")
        if segment[i] == "]" and parts:
            i += 1
            break
        lo, i = _class_char(segment, i)
        hi = lo
        if i < len(segment) and segment[i] == "-":
            hi, i = _class_char(segment, i + 1)
            if hi < lo:
                raise ValueError(f"bad range {lo}-{hi}")
        if lo == hi:
            parts.append(re.escape(lo))
        else:
            parts.append(f"{re.escape(lo)}-{re.escape(hi)}")
    return "[" + ("^" if negate else "") + "".join(parts) + "]", i


def compile_segment(segment: str) -> re.Pattern[str]:
    """Compile one path segment of a shell pattern.

    Supports ``*``, ``?``, ``[...]`` (``^`` or ``!`` negates, ``a-z``
    ranges) and ``\\`` escapes. None of them match ``/``. Raises
    ``ValueError`` for malformed patterns.
    """
    out: list[str] = []
    i = 0
    n = len(segment)
    while i < n:
        c = segment[i]
        i += 1
        if c == "*":
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "\\":
            if i >= n:
                raise ValueError("trailing escape")
            out.append(re.escape(segment[i]))
            i += 1
        elif c == "[":
            cls, i = _translate_class(segment, i)
            out.append(cls)
        else:
            out.append(re.escape(c))
    return re.compile("".join(out), re.DOTALL)


def compile_pattern(pattern: str) -> list[re.Pattern[str]]:
    segments = pattern.split(SEPARATOR)
    for segment in segments:
        if segment in ("", ".", ".."):
            raise ValueError(f"invalid path segment {segment!r}")
    return [compile_segment(segment) for segment in segments]


# ---------------------------------------------------------------------------
#  GlobEngine
# ---------------------------------------------------------------------------


class GlobEngine:
    """Match a shell pattern against the directories synthesized from keys.

    The pattern is processed one segment at a time: each pending directory
    is listed once (prefix-scoped by the
    segment's literal head, grouped by the delimiter) and its children are
    matched against the segment. Matches of inner segments become the next
    round's directories; matches of the last segment are the result.
    """

    def __init__(self, fsys: S3FileSystem) -> None:
        self._fsys = fsys

    def glob(self, pattern: str) -> list[str]:
        if pattern in ("", "*"):
            entries = DirectoryReader(self._fsys, ".").read_all(op="Glob")
            return sorted({e.name for e in entries})
        try:
            matchers = compile_pattern(pattern)
        except ValueError as exc:
            raise BFSInvalidArgumentError("Glob", pattern, f"bad pattern: {exc}") from exc

        segments = pattern.split(SEPARATOR)
        last = len(segments) - 1
        frontier: list[str] = [""]
        matches: set[str] = set()
        for depth, (segment, matcher) in enumerate(zip(segments, matchers)):
            is_last = depth == last
            next_frontier: dict[str, None] = {}
            for directory in frontier:
                for name, is_dir in self._candidates(directory, segment, is_last, pattern):
                    if not matcher.fullmatch(name):
                        continue
                    path = f"{directory}{SEPARATOR}{name}" if directory else name
                    if is_last:
                        matches.add(path)
                    elif is_dir:
                        next_frontier[path] = None
            frontier = list(next_frontier)
            if not frontier:
                break
        return sorted(matches)

    def _candidates(
        self, directory: str, segment: str, is_last: bool, pattern: str
    ) -> Iterator[tuple[str, bool]]:
        """Yield ``(name, is_dir)`` for children of *directory*.

        Inner segments only need directories; the last one takes files too.
        """
        fsys = self._fsys
        scope = normalize_prefix(join_key(fsys.root, directory))
        sub_pattern = f"{directory}{SEPARATOR}{segment}" if directory else segment
        prefix = normalize_pattern_prefix(fsys.root, sub_pattern)
        if not prefix.startswith(scope):
            prefix = scope
        start_after = ""
        pages = 0
        while True:
            if fsys.max_pages is not None and pages >= fsys.max_pages:
                raise BFSTransportError(
                    "Glob", pattern, f"listing exceeded {fsys.max_pages} pages"
                )
            pages += 1
            try:
                result = fsys._client.list_objects(
                    fsys.bucket,
                    prefix,
                    delimiter=SEPARATOR,
                    max_keys=fsys.list_buffer_size,
                    start_after=start_after,
                )
            except Exception as exc:  # noqa: BLE001
                raise to_fs_error(exc, "Glob", pattern) from exc

            for key in result.common_prefixes:
                name = _child_name(scope, key)
                if name:
                    yield name, True
            if is_last:
                for obj in result.objects:
                    name = _child_name(scope, obj.key)
                    if name:
                        yield name, False

            keys = result.common_prefixes + [obj.key for obj in result.objects]
            if keys:
                start_after = max(start_after, max(keys))
            if not result.truncated:
                return


def _child_name(scope: str, key: str) -> str | None:
    if not key.startswith(scope):
        return None
    name = rel_key(scope, key).rstrip(SEPARATOR)
    if not name or SEPARATOR in name:
        return None
    return name
