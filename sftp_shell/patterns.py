"""
Shell glob expansion over the remote namespace.

Only the final path segment of a pattern is a glob; ``*``, ``?`` and
``[...]`` follow fnmatch semantics and are matched against the names in the
parent directory's listing. There is no recursive descent.
"""

import logging
from fnmatch import fnmatchcase

from .cache import MetadataCache
from .metadata import PatternError
from .paths import basename, dirname, resolve_path

logger = logging.getLogger(__name__)


def expand_patterns(
    cache: MetadataCache, patterns: list[str], pwd: str, preserve_root: bool = False
) -> list[str | PatternError]:
    """
    Expand glob patterns into remote paths.

    Args:
        cache: Metadata cache used (and populated) for listings.
        patterns: Patterns as typed by the user, absolute or pwd-relative.
        pwd: Canonical remote working directory.
        preserve_root: Echo the user's own directory prefix instead of the
            resolved one.

    Returns:
        Matched paths, in pattern order then listing order, with a
        PatternError in place of each pattern that matched nothing.
    """
    results: list[str | PatternError] = []
    for pattern in patterns:
        path = resolve_path(pattern, pwd)
        if cache.is_directory(path):
            results.append(pattern if preserve_root else path)
        else:
            results.extend(_get_matches(cache, pattern, path, preserve_root))
    return results


def _get_matches(
    cache: MetadataCache, pattern: str, path: str, preserve_root: bool
) -> list[str | PatternError]:
    name = basename(path)
    matches = [entry for entry in cache.list(dirname(path)) if fnmatchcase(basename(entry), name)]
    if not matches:
        logger.debug("No matches for pattern: %s", pattern)
        return [PatternError(pattern)]

    if preserve_root:
        head, sep, _ = pattern.rpartition("/")
        return [head + sep + basename(match) for match in matches]
    return matches
