import re

from stashgate.core.errors import InvalidPath

SEPARATOR = "/"
_ALLOWED = re.compile(r"[A-Za-z0-9/_-]+")


def normalize_path(raw: str | None) -> str | None:
    """Canonicalize a virtual folder path.

    ``"/images/avatars/"`` becomes ``"images/avatars"``; blank input means no
    path. Parent segments, doubled separators and anything outside
    ``[A-Za-z0-9/_-]`` are rejected, which keeps a path from escaping the
    tenant's key prefix or making two keys ambiguous.
    """
    if raw is None:
        return None
    path = raw.strip().strip(SEPARATOR)
    if not path:
        return None
    if ".." in path:
        raise InvalidPath("Path must not contain '..' segments")
    if SEPARATOR * 2 in path:
        raise InvalidPath("Path must not contain empty segments")
    if not _ALLOWED.fullmatch(path):
        raise InvalidPath("Path may only contain letters, digits, '/', '_' and '-'")
    return path
