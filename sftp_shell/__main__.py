"""
SFTP-Shell - Main Entry Point

This module provides the CLI interface and wires up the configuration,
the SFTP client and the session state, then runs either a single command
or the interactive loop.
"""

import argparse
import logging
import shlex
import sys

from .commands import exec_line
from .config import load_config
from .logger import setup_logging
from .settings import Settings
from .sftp_client import SFTPClient
from .state import State

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="SFTP-Shell - Interactive shell for a remote SFTP server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sftp-shell --host myserver.com --user me --key-file ~/.ssh/id_rsa
  sftp-shell --config config.ini
  sftp-shell --config config.ini ls /backups
        """,
    )
    parser.add_argument("--config", help="Path to configuration file")
    parser.add_argument("--host", help="SSH Host")
    parser.add_argument("--port", type=int, help="SSH Port")
    parser.add_argument("--user", help="SSH Username")
    parser.add_argument("--password", help="SSH Password")
    parser.add_argument("--key-file", help="Path to SSH private key")
    parser.add_argument("--key-passphrase", help="Passphrase for encrypted SSH key")
    parser.add_argument("--root", help="Remote directory to present as / (default: /)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Run a single shell command and exit instead of starting the shell",
    )
    return parser.parse_args(argv)


def prompt(state: State) -> str:
    return f"sftp-shell:{state.pwd}> "


def run_interactive(client, state: State) -> None:
    """
    Read and execute lines until exit is requested or input ends.

    Ctrl+C abandons the current line; Ctrl+D exits.
    """
    while not state.exit_requested:
        try:
            line = input(prompt(state))
        except EOFError:
            print()
            state.exit_requested = True
            continue
        except KeyboardInterrupt:
            print()
            continue

        try:
            exec_line(line, client, state)
        except KeyboardInterrupt:
            print()
        except ConnectionError as e:
            logger.error("Connection lost: %s", e)
            print(f"[ERROR] Connection lost: {e}")


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    client = None

    try:
        config = load_config(
            config_path=args.config,
            host=args.host,
            port=args.port,
            username=args.user,
            password=args.password,
            key_file=args.key_file,
            key_passphrase=args.key_passphrase,
            root=args.root,
            debug=args.verbose,
        )
    except ValueError as e:
        print(f"[ERROR] Configuration error: {e}")
        return 1
    except FileNotFoundError as e:
        print(f"[ERROR] {e}")
        return 1

    setup_logging(config.logging)
    from . import __version__

    logger.info("Starting SFTP-Shell v%s", __version__)

    try:
        client = SFTPClient(config.ssh, config.connection)
        server_desc = f"{config.ssh.host}:{config.ssh.port}"
        try:
            client.connect()
        except PermissionError as e:
            print(f"[ERROR] Authentication failed: {e}")
            return 1
        except TimeoutError:
            print(f"[ERROR] Connection to {server_desc} timed out")
            return 1
        except ConnectionError as e:
            print(f"[ERROR] Could not connect to server at {server_desc}")
            print(f"        {e}")
            return 1

        state = State(client, Settings(config.shell.settings_file))

        if args.command:
            exec_line(shlex.join(args.command), client, state)
        else:
            run_interactive(client, state)
        return 0

    except Exception as e:
        logger.exception("Fatal error: %s", e)
        print(f"[ERROR] Fatal error: {e}")
        return 1
    finally:
        if client is not None:
            try:
                logger.info("Disconnecting from server...")
                client.disconnect()
            except Exception as e:
                logger.warning("Error disconnecting: %s", e)


if __name__ == "__main__":
    sys.exit(main() or 0)
