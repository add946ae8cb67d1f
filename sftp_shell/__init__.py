__version__ = "0.1.0"

# Public API exports
from .cache import MetadataCache
from .commands import COMMANDS, Command, UsageError, exec_line
from .config import (
    AppConfig,
    ConnectionConfig,
    LogConfig,
    ShellConfig,
    SSHConfig,
    load_config,
)
from .metadata import Metadata, PatternError
from .paths import resolve_path
from .patterns import expand_patterns
from .remote_client import RemoteClient
from .settings import Settings
from .sftp_client import SFTPClient
from .state import State

__all__ = [
    "__version__",
    # Configuration
    "AppConfig",
    "SSHConfig",
    "ConnectionConfig",
    "LogConfig",
    "ShellConfig",
    "load_config",
    # Clients
    "RemoteClient",
    "SFTPClient",
    # Namespace
    "Metadata",
    "PatternError",
    "MetadataCache",
    "resolve_path",
    "expand_patterns",
    # Session
    "Settings",
    "State",
    # Commands
    "COMMANDS",
    "Command",
    "UsageError",
    "exec_line",
]
