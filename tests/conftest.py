"""
Shared pytest fixtures for SFTP-Shell tests.
"""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from sftp_shell.cache import MetadataCache
from sftp_shell.config import (
    AppConfig,
    ConnectionConfig,
    LogConfig,
    ShellConfig,
    SSHConfig,
)
from sftp_shell.metadata import Metadata
from sftp_shell.settings import Settings
from sftp_shell.sftp_client import SFTPClient
from sftp_shell.state import State


def build_metadata(tree: dict[str, bool], path: str) -> Metadata:
    """Build the Metadata a server would report for path in tree."""
    if path not in tree:
        raise FileNotFoundError(f"No such file or directory: {path}")

    record = Metadata(path=path, is_dir=tree[path])
    if record.is_dir:
        prefix = path if path.endswith("/") else path + "/"
        record.contents = [
            Metadata(path=child, is_dir=tree[child])
            for child in tree
            if child.startswith(prefix) and child != prefix and "/" not in child[len(prefix):]
        ]
    return record


@pytest.fixture
def remote_tree() -> dict[str, bool]:
    """
    In-memory remote namespace: path -> is_dir, in listing order.

    Tests may mutate it to simulate changes on the server.
    """
    return {
        "/": True,
        "/a": True,
        "/a/b": True,
        "/a/b/notes.txt": False,
        "/a/readme.md": False,
        "/d": True,
        "/d/a.txt": False,
        "/d/b.txt": False,
        "/d/c.md": False,
        "/empty": True,
        "/top.txt": False,
    }


@pytest.fixture
def mock_client(remote_tree: dict[str, bool]) -> Generator[MagicMock, None, None]:
    """
    Creates a mocked SFTPClient whose metadata() answers from remote_tree.

    Returns:
        Mocked SFTPClient; metadata.call_args_list records every fetch.
    """
    mock = MagicMock(spec=SFTPClient)
    mock.metadata.side_effect = lambda path: build_metadata(remote_tree, path)
    mock.get.return_value = b"remote content"
    mock.share_link.side_effect = lambda path: f"sftp://test.ssh.local:22{path}"
    yield mock


@pytest.fixture
def cache(mock_client: MagicMock) -> MetadataCache:
    return MetadataCache(mock_client)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(tmp_path / "settings.ini")


@pytest.fixture
def state(mock_client: MagicMock, settings: Settings) -> State:
    return State(mock_client, settings)


@pytest.fixture
def ssh_config() -> SSHConfig:
    """Creates a standard SSHConfig for testing."""
    return SSHConfig(
        host="test.ssh.local",
        port=22,
        username="testuser",
        password="testpass",
        use_agent=False,
    )


@pytest.fixture
def conn_config() -> ConnectionConfig:
    """Creates a standard ConnectionConfig for testing."""
    return ConnectionConfig(
        timeout_seconds=30,
        retry_attempts=3,
        retry_delay_seconds=0,  # No delay in tests
    )


@pytest.fixture
def app_config(ssh_config: SSHConfig, conn_config: ConnectionConfig, tmp_path: Path) -> AppConfig:
    """Creates a complete AppConfig for testing."""
    return AppConfig(
        ssh=ssh_config,
        connection=conn_config,
        logging=LogConfig(level="DEBUG", file="", console=False),
        shell=ShellConfig(settings_file=str(tmp_path / "settings.ini")),
    )


@pytest.fixture
def tmp_config_file(tmp_path: Path) -> Generator[Path, None, None]:
    """
    Creates a temporary INI configuration file for config tests.

    Returns:
        Path to the temporary config file.
    """
    config_content = """[ssh]
host = testserver.local
port = 2222
username = testuser
password = testpass
key_file = ~/.ssh/id_test
use_agent = false
root = /srv/files/

[connection]
timeout_seconds = 45
retry_attempts = 5
retry_delay_seconds = 2

[logging]
level = DEBUG
file = test.log
console = true

[shell]
settings_file = /tmp/sftp-shell-test/settings.ini
"""
    config_path = tmp_path / "test_config.ini"
    config_path.write_text(config_content, encoding="utf-8")
    yield config_path


@pytest.fixture
def minimal_config_file(tmp_path: Path) -> Generator[Path, None, None]:
    """
    Creates a minimal INI configuration file with only required fields.

    Returns:
        Path to the temporary config file.
    """
    config_content = """[ssh]
host = minimal.server.com
"""
    config_path = tmp_path / "minimal_config.ini"
    config_path.write_text(config_content, encoding="utf-8")
    yield config_path
