"""
Remote client protocol definition.

Defines the interface the metadata cache and the shell commands consume,
so the session layer does not depend on a particular transport.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .metadata import Metadata


@runtime_checkable
class RemoteClient(Protocol):
    """Protocol defining the remote storage client interface.

    Paths are canonical shell paths. Not-found conditions raise
    FileNotFoundError; every other failure raises a standard exception
    (PermissionError, ConnectionError, TimeoutError, OSError) that callers
    propagate as-is.
    """

    def connect(self) -> None:
        """Establish connection to the remote server."""
        ...

    def disconnect(self) -> None:
        """Close connection to the remote server."""
        ...

    def metadata(self, path: str) -> Metadata:
        """Get metadata for a file or directory.

        Args:
            path: Absolute remote path.

        Returns:
            Metadata record. Directories carry their immediate children
            in ``contents``.

        Raises:
            FileNotFoundError: If path does not exist.
        """
        ...

    def create_directory(self, path: str) -> Metadata:
        """Create a directory and return its metadata."""
        ...

    def put(self, path: str, data: bytes) -> Metadata:
        """Upload bytes to a file and return its metadata."""
        ...

    def get(self, path: str) -> bytes:
        """Download a file's content."""
        ...

    def delete(self, path: str) -> None:
        """Delete a file, or a directory and everything in it."""
        ...

    def share_link(self, path: str) -> str:
        """Return a URL that refers to the remote path."""
        ...
