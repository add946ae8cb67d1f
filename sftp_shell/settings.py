"""
Settings persisted between shell sessions.

Stored as a small INI file with a single [settings] section. Every
assignment is written through to disk immediately.
"""

import configparser
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SECTION = "settings"


class Settings:
    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()
        self._parser = configparser.ConfigParser(interpolation=None)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            self._parser.read(self.path, encoding="utf-8")
        except configparser.Error as e:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, e)
            self._parser = configparser.ConfigParser(interpolation=None)

    def __getitem__(self, key: str) -> str | None:
        return self._parser.get(SECTION, key, fallback=None)

    def __setitem__(self, key: str, value: str) -> None:
        if not self._parser.has_section(SECTION):
            self._parser.add_section(SECTION)
        self._parser.set(SECTION, key, value)
        self.save()

    def save(self) -> None:
        """
        Write settings to disk, creating the parent directory if needed.

        A failed write is logged and otherwise ignored; the values stay in
        memory for the rest of the session.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                self._parser.write(f)
        except OSError as e:
            logger.warning("Could not save settings to %s: %s", self.path, e)
            return
        logger.debug("Saved settings to %s", self.path)
