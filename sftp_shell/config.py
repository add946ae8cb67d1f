import configparser
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_SETTINGS_FILE = str(Path.home() / ".sftp-shell" / "settings.ini")


@dataclass
class SSHConfig:
    host: str
    port: int = 22
    username: str | None = None
    password: str | None = None
    key_file: str | None = None  # Path to SSH private key
    key_passphrase: str | None = None  # Passphrase for encrypted keys
    use_agent: bool = True  # Try SSH agent for auth
    root: str = "/"  # Server directory shown as the shell's "/"


@dataclass
class ConnectionConfig:
    timeout_seconds: int = 30
    retry_attempts: int = 3
    retry_delay_seconds: int = 1


@dataclass
class LogConfig:
    level: str = "INFO"
    file: str = "sftp-shell.log"
    console: bool = False


@dataclass
class ShellConfig:
    settings_file: str = DEFAULT_SETTINGS_FILE


@dataclass
class AppConfig:
    ssh: SSHConfig
    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    logging: LogConfig = field(default_factory=LogConfig)
    shell: ShellConfig = field(default_factory=ShellConfig)


def _is_true(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


def _parse_int(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid {name} value in config: '{value}' - must be an integer")


def load_config(config_path: str | None = None, **cli_args) -> AppConfig:
    """
    Load configuration from an INI file and/or CLI arguments.
    CLI arguments take precedence over config file.

    Args:
        config_path: Path to the INI configuration file.
        **cli_args: Key-value pairs from command line arguments.

    Returns:
        AppConfig: The populated configuration object.

    Raises:
        FileNotFoundError: If config_path is provided but does not exist.
        ValueError: If the host is missing or a numeric field is malformed.
    """
    # Initialize with defaults
    ssh_config = {
        "host": None,
        "port": 22,
        "username": None,
        "password": None,
        "key_file": None,
        "key_passphrase": None,
        "use_agent": True,
        "root": "/",
    }
    connection_config = {
        "timeout_seconds": 30,
        "retry_attempts": 3,
        "retry_delay_seconds": 1,
    }
    log_config = {
        "level": "INFO",
        "file": "sftp-shell.log",
        "console": False,
    }
    shell_config = {
        "settings_file": DEFAULT_SETTINGS_FILE,
    }

    # Parse INI file if provided
    if config_path is not None:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        parser = configparser.ConfigParser()
        parser.read(config_file, encoding="utf-8")

        # Load [ssh] section
        if parser.has_section("ssh"):
            ssh_section = parser["ssh"]
            for key in ("host", "username", "password", "key_file", "key_passphrase", "root"):
                if ssh_section.get(key):
                    ssh_config[key] = ssh_section.get(key)
            if ssh_section.get("port"):
                ssh_config["port"] = _parse_int(ssh_section.get("port"), "port")
            if ssh_section.get("use_agent"):
                ssh_config["use_agent"] = _is_true(ssh_section.get("use_agent"))

        # Load [connection] section
        if parser.has_section("connection"):
            conn_section = parser["connection"]
            for key in connection_config:
                if conn_section.get(key):
                    connection_config[key] = _parse_int(conn_section.get(key), key)

        # Load [logging] section
        if parser.has_section("logging"):
            log_section = parser["logging"]
            if log_section.get("level"):
                log_config["level"] = log_section.get("level")
            if "file" in log_section:
                log_config["file"] = log_section.get("file")
            if log_section.get("console"):
                log_config["console"] = _is_true(log_section.get("console"))

        # Load [shell] section
        if parser.has_section("shell"):
            shell_section = parser["shell"]
            if shell_section.get("settings_file"):
                shell_config["settings_file"] = shell_section.get("settings_file")

    # Override with CLI arguments (cli_args take precedence)
    if cli_args.get("host") is not None:
        ssh_config["host"] = cli_args["host"]
    if cli_args.get("port") is not None:
        ssh_config["port"] = int(cli_args["port"])
    if cli_args.get("username") is not None:
        ssh_config["username"] = cli_args["username"] or None
    if cli_args.get("password") is not None:
        ssh_config["password"] = cli_args["password"] or None
    if cli_args.get("key_file") is not None:
        ssh_config["key_file"] = cli_args["key_file"]
    if cli_args.get("key_passphrase") is not None:
        ssh_config["key_passphrase"] = cli_args["key_passphrase"]
    if cli_args.get("root") is not None:
        ssh_config["root"] = cli_args["root"]
    if cli_args.get("debug"):
        log_config["level"] = "DEBUG"
        log_config["console"] = True

    # Validate required fields
    if not ssh_config["host"]:
        raise ValueError("Missing required configuration fields: host")

    # Normalize remote root (leading slash, no trailing slash)
    root = "/" + ssh_config["root"].replace("\\", "/").strip("/")
    ssh_config["root"] = root

    return AppConfig(
        ssh=SSHConfig(**ssh_config),
        connection=ConnectionConfig(**connection_config),
        logging=LogConfig(**log_config),
        shell=ShellConfig(**shell_config),
    )
