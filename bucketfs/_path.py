import posixpath

SEPARATOR = "/"
PATTERN_META = "*?[\\"


def validate_path(path: str) -> bool:
    # "." alone is the root; every other element must be a real name
    if path == ".":
        return True
    if not path:
        return False
    for part in path.split(SEPARATOR):
        if part in ("", ".", ".."):
            return False
    return True


def _clean(path: str) -> str:
    if not path:
        return ""
    cleaned = posixpath.normpath(path)
    if cleaned in (".", "/", "//"):
        return ""
    return cleaned


def normalize_prefix(path: str) -> str:
    cleaned = _clean(path)
    if cleaned and not cleaned.endswith(SEPARATOR):
        cleaned += SEPARATOR
    return cleaned


def normalize_pattern_prefix(root: str, pattern: str) -> str:
    prefix = normalize_prefix(root)
    for i, c in enumerate(pattern):
        if c in PATTERN_META:
            pattern = pattern[:i]
            break
    joined = _clean(SEPARATOR.join(p for p in (prefix, pattern) if p))
    if pattern.endswith(SEPARATOR) or (joined and not pattern):
        return joined + SEPARATOR
    return joined


def join_key(root: str, path: str) -> str:
    return _clean(SEPARATOR.join(p for p in (root, path) if p))


def rel_key(root: str, key: str) -> str:
    prefix = normalize_prefix(root)
    if prefix and key.startswith(prefix):
        return key[len(prefix):]
    return key


def base_name(key: str) -> str:
    return posixpath.basename(key.rstrip(SEPARATOR)) or "."


def parent_path(path: str) -> str:
    parent = posixpath.dirname(path)
    return parent or "."
