from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Metadata:
    """Metadata for one remote path, keyed by its canonical shell path."""

    path: str
    is_dir: bool
    size: int = 0
    mtime: datetime | None = None
    # None until the directory listing has been fetched
    contents: list[Metadata] | None = field(default=None, repr=False)
    is_deleted: bool = False

    def __post_init__(self):
        if not self.is_dir and self.contents is not None:
            raise ValueError(f"File metadata cannot carry contents: {self.path}")

    @property
    def name(self) -> str:
        if self.path == "/":
            return "/"
        return self.path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class PatternError:
    """A glob pattern that matched nothing.

    Returned alongside matched paths by pattern expansion, never raised.
    """

    pattern: str

    def __str__(self) -> str:
        return f"{self.pattern}: No such file or directory"
