import logging

from .metadata import Metadata
from .paths import dirname
from .remote_client import RemoteClient

logger = logging.getLogger(__name__)


class MetadataCache:
    """
    Session-lifetime cache of remote metadata.

    Entries live in one flat dict keyed by canonical path, so nested
    directory entries sit at the same level as top-level ones. A directory
    entry only carries ``contents`` once its listing has been fetched.
    Population is lazy: lookups walk from the root down to the requested
    path and fetch whatever is not yet known.

    Only writes made through this session are reflected; there is no
    expiry.
    """

    def __init__(self, client: RemoteClient):
        self._client = client
        self._cache: dict[str, Metadata] = {}

    def __contains__(self, path: str) -> bool:
        return path in self._cache

    def __getitem__(self, path: str) -> Metadata:
        return self._cache[path]

    def has_all_info(self, path: str, require_children: bool = True) -> bool:
        """
        Return True if the cached entry for path is enough for a lookup.

        Args:
            path: Canonical remote path.
            require_children: Whether a directory's listing must be loaded.
        """
        entry = self._cache.get(path)
        if entry is None:
            return False
        return not require_children or not entry.is_dir or entry.contents is not None

    def get(self, path: str, require_children: bool = True) -> Metadata | None:
        """
        Return metadata for a path, fetching it and its ancestors as needed.

        Every ancestor from the root down is checked in order; any that is
        not sufficiently cached is fetched, which also caches its children.

        Args:
            path: Canonical remote path.
            require_children: Whether directories along the way must have
                their listings loaded.

        Returns:
            The cached Metadata, or None if the path (or an ancestor) does
            not exist.

        Raises:
            Any non-not-found error from the remote client, unchanged.
        """
        segments = [s for s in path.split("/") if s]

        for i in range(len(segments) + 1):
            partial_path = "/" + "/".join(segments[:i])
            if self.has_all_info(partial_path, require_children):
                continue

            logger.debug("Fetching metadata: %s", partial_path)
            try:
                data = self._client.metadata(partial_path)
            except FileNotFoundError:
                logger.debug("Not found: %s", partial_path)
                return None

            if data.is_deleted:
                logger.debug("Deleted on remote: %s", partial_path)
                return None

            self.add(data)

        return self._cache.get(path)

    def is_directory(self, path: str) -> bool:
        """Return True if path is a remote directory, False if not or absent."""
        self.get(dirname(path))
        entry = self._cache.get(path)
        return entry is not None and entry.is_dir

    def list(self, path: str) -> list[str]:
        """
        Return the paths of the immediate children of a directory.

        Args:
            path: Canonical remote directory path.

        Returns:
            Child paths in listing order; empty if the path does not exist.
        """
        self.get(path)
        prefix = path if path.endswith("/") else path + "/"
        return [
            key
            for key in self._cache
            if key.startswith(prefix) and key != prefix and "/" not in key[len(prefix):]
        ]

    def add(self, metadata: Metadata) -> None:
        """
        Insert metadata, and each child of a loaded listing, into the cache.

        If the parent directory's listing is loaded, the record replaces or
        joins the matching entry there too.
        """
        self._insert(metadata)

        parent = self._cache.get(dirname(metadata.path))
        if parent is None or parent.path == metadata.path or parent.contents is None:
            return
        for i, item in enumerate(parent.contents):
            if item.path == metadata.path:
                parent.contents[i] = metadata
                break
        else:
            parent.contents.append(metadata)

    def _insert(self, metadata: Metadata) -> None:
        self._cache[metadata.path] = metadata
        logger.debug("Cached: %s", metadata.path)
        if metadata.contents is not None:
            for child in metadata.contents:
                self._insert(child)

    def remove(self, path: str) -> None:
        """
        Remove a path and everything under it from the cache.

        Also drops the path from its parent's loaded listing so that no
        cached listing refers to an absent child.

        Args:
            path: Canonical remote path.
        """
        entry = self._cache.get(path)
        if entry is not None and entry.is_dir and entry.contents is not None:
            for child in list(entry.contents):
                self.remove(child.path)

        self._drop_descendants(path)
        if self._cache.pop(path, None) is not None:
            logger.debug("Removed from cache: %s", path)

        parent = self._cache.get(dirname(path))
        if parent is not None and parent.path != path and parent.contents is not None:
            parent.contents = [item for item in parent.contents if item.path != path]

    def forget_children(self, path: str) -> bool:
        """
        Drop a directory's listing and all cached descendants.

        The directory's own entry is kept, so the next listing refetches it.

        Args:
            path: Canonical remote directory path.

        Returns:
            False if there was no loaded listing to forget.
        """
        entry = self._cache.get(path)
        if entry is None or entry.contents is None:
            return False

        entry.contents = None
        self._drop_descendants(path)
        logger.debug("Forgot contents of %s", path)
        return True

    def _drop_descendants(self, path: str) -> None:
        prefix = path if path.endswith("/") else path + "/"
        for key in [k for k in self._cache if k.startswith(prefix) and k != prefix]:
            del self._cache[key]
