"""
Remote path resolution.

All remote paths inside the shell are canonical: absolute, '/'-separated,
with no '.' or '..' segments and no trailing slash (except root).
"""

import re

_PARENT_SEGMENT = re.compile(r"/([^/]+?)/\.\.(?=/|$)")


def resolve_path(path: str, pwd: str) -> str:
    """
    Expand a possibly relative remote path against the working directory.

    Args:
        path: Absolute or pwd-relative remote path.
        pwd: Canonical remote working directory.

    Returns:
        The canonical absolute path.
    """
    path = path if path.startswith("/") else f"{pwd}/{path}"
    path = re.sub(r"/{2,}", "/", path)

    while "/./" in path:
        path = path.replace("/./", "/")
    if path.endswith("/."):
        path = path[:-2]

    # Strip "/segment/.." pairs one at a time; ".." above root is a no-op
    while True:
        path, count = _PARENT_SEGMENT.subn("", path, count=1)
        if count:
            continue
        if path == "/.." or path.startswith("/../"):
            path = path[3:]
            continue
        break

    if path.endswith("/"):
        path = path[:-1]

    return path or "/"


def dirname(path: str) -> str:
    """Return the parent of a canonical path ('/' for root and top-level)."""
    parent = path.rsplit("/", 1)[0]
    return parent or "/"


def basename(path: str) -> str:
    """Return the final segment of a canonical path."""
    return path.rsplit("/", 1)[-1]


def join(directory: str, name: str) -> str:
    """Join a canonical directory path with a child name."""
    if directory.endswith("/"):
        return directory + name
    return f"{directory}/{name}"
