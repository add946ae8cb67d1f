"""
SFTP client implementation using paramiko.

Implements the RemoteClient protocol over SSH/SFTP. Shell paths are mapped
onto the server underneath the configured remote root.
"""

import logging
import os
import stat
import time
from datetime import datetime
from pathlib import Path
from urllib.parse import quote

import paramiko

from .config import ConnectionConfig, SSHConfig
from .metadata import Metadata
from .paths import join

logger = logging.getLogger(__name__)


class TrustOnFirstUsePolicy(paramiko.MissingHostKeyPolicy):
    """
    Trust-on-first-use host key policy (same model as OpenSSH).

    - Unknown host: accept and save key to ~/.ssh/known_hosts
    - Known host, same key: accept
    - Known host, CHANGED key: reject (possible MITM attack)
    """

    def __init__(self):
        self._known_hosts_path = Path.home() / ".ssh" / "known_hosts"

    def missing_host_key(self, client, hostname, key):
        host_keys = client.get_host_keys()
        existing = host_keys.lookup(hostname)

        if existing is not None:
            key_type = key.get_name()
            existing_key = existing.get(key_type)
            if existing_key is not None and existing_key != key:
                raise paramiko.SSHException(
                    f"Host key for {hostname} has CHANGED. "
                    f"This could indicate a man-in-the-middle attack. "
                    f"If the server key was legitimately changed, remove the old "
                    f"entry from {self._known_hosts_path} and try again."
                )

        logger.info("Adding host key for %s to known_hosts", hostname)
        host_keys.add(hostname, key.get_name(), key)

        try:
            self._known_hosts_path.parent.mkdir(parents=True, exist_ok=True)
            host_keys.save(str(self._known_hosts_path))
        except OSError as e:
            logger.warning("Could not save known_hosts: %s", e)


class SFTPClient:
    """
    High-level wrapper around paramiko's SSH/SFTP with connection management,
    retry logic, and metadata records shaped for the shell's cache.
    """

    def __init__(self, ssh_config: SSHConfig, conn_config: ConnectionConfig):
        self.ssh_config = ssh_config
        self.conn_config = conn_config
        self._ssh: paramiko.SSHClient | None = None
        self._sftp: paramiko.SFTPClient | None = None
        self._connected = False

    def connect(self) -> None:
        """Establish SSH connection and open SFTP session."""
        try:
            self._ssh = paramiko.SSHClient()
            self._ssh.load_system_host_keys()
            try:
                known_hosts = str(Path.home() / ".ssh" / "known_hosts")
                self._ssh.load_host_keys(known_hosts)
            except FileNotFoundError:
                pass
            self._ssh.set_missing_host_key_policy(TrustOnFirstUsePolicy())

            connect_kwargs: dict = {
                "hostname": self.ssh_config.host,
                "port": self.ssh_config.port,
                "timeout": self.conn_config.timeout_seconds,
                "allow_agent": self.ssh_config.use_agent,
            }

            if self.ssh_config.username:
                connect_kwargs["username"] = self.ssh_config.username

            # Auth priority: key file -> password -> agent/default keys
            if self.ssh_config.key_file:
                key_path = os.path.expanduser(self.ssh_config.key_file)
                connect_kwargs["key_filename"] = key_path
                if self.ssh_config.key_passphrase:
                    connect_kwargs["passphrase"] = self.ssh_config.key_passphrase
                connect_kwargs["look_for_keys"] = True
                logger.debug(
                    "Connecting to SSH %s:%d with key file: %s",
                    self.ssh_config.host,
                    self.ssh_config.port,
                    key_path,
                )
            elif self.ssh_config.password:
                connect_kwargs["password"] = self.ssh_config.password
                connect_kwargs["look_for_keys"] = False
                logger.debug(
                    "Connecting to SSH %s:%d with password",
                    self.ssh_config.host,
                    self.ssh_config.port,
                )
            else:
                connect_kwargs["look_for_keys"] = True
                logger.debug(
                    "Connecting to SSH %s:%d with agent/default keys",
                    self.ssh_config.host,
                    self.ssh_config.port,
                )

            self._ssh.connect(**connect_kwargs)
            self._sftp = self._ssh.open_sftp()
            self._connected = True
            logger.info(
                "Connected to SSH server %s:%d",
                self.ssh_config.host,
                self.ssh_config.port,
            )

        except paramiko.AuthenticationException as e:
            self._connected = False
            self._cleanup_connections()
            logger.error("SSH authentication failed: %s", e)
            raise PermissionError(f"SSH authentication failed: {e}") from e
        except TimeoutError as e:
            self._connected = False
            self._cleanup_connections()
            logger.error("SSH connection timeout: %s", e)
            raise TimeoutError(f"SSH connection timeout: {e}") from e
        except OSError as e:
            self._connected = False
            self._cleanup_connections()
            logger.error("SSH connection failed: %s", e)
            raise ConnectionError(f"SSH connection failed: {e}") from e
        except paramiko.SSHException as e:
            self._connected = False
            self._cleanup_connections()
            logger.error("SSH error: %s", e)
            raise ConnectionError(f"SSH error: {e}") from e

    def _cleanup_connections(self) -> None:
        """Close SFTP and SSH without raising."""
        if self._sftp:
            try:
                self._sftp.close()
            except Exception:
                pass
            self._sftp = None
        if self._ssh:
            try:
                self._ssh.close()
            except Exception:
                pass
            self._ssh = None

    def disconnect(self) -> None:
        """Close SFTP session and SSH connection."""
        self._cleanup_connections()
        self._connected = False
        logger.debug("SSH connection closed")

    def _ensure_connected(self) -> None:
        """Ensure connection is active, reconnect if needed."""
        if not self._connected or not self._sftp or not self._ssh:
            logger.debug("SSH connection not active, reconnecting")
            self.connect()
            return

        transport = self._ssh.get_transport()
        if transport is None or not transport.is_active():
            logger.debug("SSH transport lost, reconnecting")
            self.disconnect()
            self.connect()

    def _server_path(self, path: str) -> str:
        """Map a shell path onto the server beneath the remote root."""
        path = path.replace("\\", "/")
        if not path.startswith("/"):
            path = "/" + path
        root = self.ssh_config.root.rstrip("/")
        if path == "/":
            return root or "/"
        return root + path

    def _with_retry(self, operation: str, func, *args, **kwargs):
        """Execute a function with retry logic."""
        last_exception = None

        for attempt in range(self.conn_config.retry_attempts):
            try:
                self._ensure_connected()
                return func(*args, **kwargs)
            except FileNotFoundError:
                raise
            except PermissionError:
                raise
            except (TimeoutError, OSError, paramiko.SSHException) as e:
                last_exception = e
                logger.warning(
                    "%s failed (attempt %d/%d): %s",
                    operation,
                    attempt + 1,
                    self.conn_config.retry_attempts,
                    e,
                )

                if attempt < self.conn_config.retry_attempts - 1:
                    time.sleep(self.conn_config.retry_delay_seconds)
                    self.disconnect()

        logger.error("%s failed after %d attempts", operation, self.conn_config.retry_attempts)
        raise OSError(f"{operation} failed: {last_exception}") from last_exception

    def _translate_io_error(self, error: OSError, path: str) -> Exception:
        """Translate SFTP IOError to standard Python exceptions."""
        errno = getattr(error, "errno", None)
        if errno == 2:  # ENOENT
            return FileNotFoundError(f"No such file or directory: {path}")
        elif errno == 13:  # EACCES
            return PermissionError(f"Permission denied: {path}")
        else:
            return OSError(str(error))

    def _to_metadata(self, path: str, attr) -> Metadata:
        is_dir = stat.S_ISDIR(attr.st_mode) if attr.st_mode else False
        size = attr.st_size if attr.st_size and not is_dir else 0
        mtime = datetime.fromtimestamp(attr.st_mtime) if attr.st_mtime else None
        return Metadata(path=path, is_dir=is_dir, size=size, mtime=mtime)

    def metadata(self, path: str) -> Metadata:
        """Get metadata for a path, including the listing of a directory."""
        server_path = self._server_path(path)
        logger.debug("Getting metadata: %s (%s)", path, server_path)

        def _metadata_internal() -> Metadata:
            record = self._to_metadata(path, self._sftp.stat(server_path))
            if record.is_dir:
                record.contents = [
                    self._to_metadata(join(path, attr.filename), attr)
                    for attr in self._sftp.listdir_attr(server_path)
                    if attr.filename not in (".", "..")
                ]
                logger.debug("Listed %d entries in %s", len(record.contents), path)
            return record

        try:
            return self._with_retry(f"metadata({path})", _metadata_internal)
        except OSError as e:
            raise self._translate_io_error(e, path)

    def create_directory(self, path: str) -> Metadata:
        """Create a directory and return its (empty) metadata."""
        server_path = self._server_path(path)
        logger.debug("Creating directory: %s", server_path)

        def _create_directory_internal() -> Metadata:
            self._sftp.mkdir(server_path)
            record = self._to_metadata(path, self._sftp.stat(server_path))
            record.contents = []
            return record

        try:
            return self._with_retry(f"create_directory({path})", _create_directory_internal)
        except OSError as e:
            raise self._translate_io_error(e, path)

    def put(self, path: str, data: bytes) -> Metadata:
        """Write bytes to a file, replacing it, and return its metadata."""
        server_path = self._server_path(path)
        logger.debug("Uploading %d bytes to %s", len(data), server_path)

        def _put_internal() -> Metadata:
            with self._sftp.open(server_path, "wb") as f:
                f.write(data)
            return self._to_metadata(path, self._sftp.stat(server_path))

        try:
            return self._with_retry(f"put({path})", _put_internal)
        except OSError as e:
            raise self._translate_io_error(e, path)

    def get(self, path: str) -> bytes:
        """Read a whole file."""
        server_path = self._server_path(path)
        logger.debug("Downloading: %s", server_path)

        def _get_internal() -> bytes:
            with self._sftp.open(server_path, "rb") as f:
                data = f.read()
            logger.debug("Read %d bytes from %s", len(data), server_path)
            return data

        try:
            return self._with_retry(f"get({path})", _get_internal)
        except OSError as e:
            raise self._translate_io_error(e, path)

    def delete(self, path: str) -> None:
        """Delete a file, or a directory and everything beneath it."""
        server_path = self._server_path(path)
        logger.debug("Deleting: %s", server_path)

        def _delete_tree(target: str) -> None:
            attr = self._sftp.stat(target)
            if attr.st_mode and stat.S_ISDIR(attr.st_mode):
                for child in self._sftp.listdir_attr(target):
                    if child.filename not in (".", ".."):
                        _delete_tree(f"{target.rstrip('/')}/{child.filename}")
                self._sftp.rmdir(target)
            else:
                self._sftp.remove(target)
            logger.debug("Deleted: %s", target)

        try:
            self._with_retry(f"delete({path})", _delete_tree, server_path)
        except OSError as e:
            raise self._translate_io_error(e, path)

    def share_link(self, path: str) -> str:
        """Return an sftp:// URL for the path."""
        user = f"{quote(self.ssh_config.username)}@" if self.ssh_config.username else ""
        return (
            f"sftp://{user}{self.ssh_config.host}:{self.ssh_config.port}"
            f"{quote(self._server_path(path))}"
        )
