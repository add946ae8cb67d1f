import logging
import os

from .cache import MetadataCache
from .metadata import Metadata, PatternError
from .patterns import expand_patterns
from .paths import resolve_path
from .remote_client import RemoteClient
from .settings import Settings

logger = logging.getLogger(__name__)


class State:
    """
    Session state of the shell.

    Owns the metadata cache and the working directory bookkeeping. Every
    path taken by the pass-through methods may be relative; it is resolved
    against the current remote working directory first.
    """

    def __init__(self, client: RemoteClient, settings: Settings | None = None):
        self.client = client
        self.settings = settings
        self.cache = MetadataCache(client)
        self._pwd = "/"
        self._oldpwd = (settings["oldpwd"] if settings is not None else None) or "/"
        self._exit_requested = False
        self.local_oldpwd = os.getcwd()

    @property
    def pwd(self) -> str:
        return self._pwd

    @pwd.setter
    def pwd(self, value: str) -> None:
        self._oldpwd, self._pwd = self._pwd, value
        logger.debug("Remote working directory: %s (was %s)", self._pwd, self._oldpwd)
        if self.settings is not None:
            self.settings["oldpwd"] = self._oldpwd

    @property
    def oldpwd(self) -> str:
        return self._oldpwd

    @property
    def exit_requested(self) -> bool:
        return self._exit_requested

    @exit_requested.setter
    def exit_requested(self, value: bool) -> None:
        # Latched: once set, an exit cannot be cancelled
        self._exit_requested = self._exit_requested or bool(value)

    def resolve_path(self, path: str) -> str:
        return resolve_path(path, self._pwd)

    def metadata(self, path: str, require_children: bool = True) -> Metadata | None:
        """``MetadataCache.get`` for a path relative to the working directory."""
        return self.cache.get(self.resolve_path(path), require_children)

    def is_directory(self, path: str) -> bool:
        return self.cache.is_directory(self.resolve_path(path))

    def contents(self, path: str) -> list[str]:
        """``MetadataCache.list`` for a path relative to the working directory."""
        return self.cache.list(self.resolve_path(path))

    def add(self, metadata: Metadata) -> None:
        """Record the result of a successful remote write."""
        self.cache.add(metadata)

    def remove(self, path: str) -> None:
        """Record a successful remote delete."""
        self.cache.remove(self.resolve_path(path))

    def forget_children(self, path: str) -> bool:
        return self.cache.forget_children(self.resolve_path(path))

    def expand_patterns(
        self, patterns: list[str], preserve_root: bool = False
    ) -> list[str | PatternError]:
        return expand_patterns(self.cache, patterns, self._pwd, preserve_root)
