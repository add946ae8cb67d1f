"""
Shell commands and the line dispatcher.

Each command receives the remote client, the session state, its argument
list and an output callable that takes one line at a time. Remote failures
are reported one line per failing argument; the remaining arguments are
still processed.
"""

import logging
import os
import shlex
import subprocess
from collections.abc import Callable, Iterator
from fnmatch import fnmatchcase
from pathlib import Path

from . import text
from .metadata import PatternError
from .paths import basename, dirname, join
from .remote_client import RemoteClient
from .state import State

logger = logging.getLogger(__name__)

Output = Callable[[str], None]
Procedure = Callable[[RemoteClient, State, list[str], Output], None]


class UsageError(ValueError):
    """A command was given the wrong number of arguments."""


class Command:
    """
    A shell command: its man-page style usage synopsis, a description, and
    the procedure that runs it.

    In the synopsis, optional arguments are enclosed in brackets and
    variadic arguments end with an ellipsis.
    """

    def __init__(self, usage: str, description: str, procedure: Procedure):
        self.usage = usage
        self.description = " ".join(description.split())
        self._procedure = procedure

    @property
    def name(self) -> str:
        return self.usage.split()[0]

    def exec(self, client: RemoteClient, state: State, args: list[str], output: Output = print):
        """
        Run the command.

        Raises:
            UsageError: If the number of arguments does not fit the usage.
        """
        if not self._num_args_ok(len(args)):
            raise UsageError(self.usage)
        self._procedure(client, state, list(args), output)

    def _num_args_ok(self, num_args: int) -> bool:
        args = self.usage.split()[1:]
        min_args = len([arg for arg in args if not arg.startswith("[")])
        if not args:
            max_args = 0
        elif args[-1].endswith("..."):
            max_args = num_args
        else:
            max_args = len(args)
        return min_args <= num_args <= max_args


COMMANDS: dict[str, Command] = {}


def command(usage: str, description: str):
    """Register the decorated function as a shell command."""

    def decorator(procedure: Procedure) -> Procedure:
        cmd = Command(usage, description, procedure)
        COMMANDS[cmd.name] = cmd
        return procedure

    return decorator


def _expand_each(state: State, args: list[str], name: str, output: Output) -> Iterator[str]:
    """Yield matched paths for each pattern, reporting failures per pattern."""
    for arg in args:
        try:
            results = state.expand_patterns([arg])
        except OSError as e:
            output(f"{name}: {arg}: {e}")
            continue
        for result in results:
            if isinstance(result, PatternError):
                output(f"{name}: {result}")
            else:
                yield result


@command(
    "cd [REMOTE_DIR]",
    """Change the remote working directory. With no arguments, changes to the
    remote root. With a remote directory name as the argument, changes to
    that directory. With - as the argument, changes to the previous working
    directory.""",
)
def cd(client, state, args, output):
    if not args:
        state.pwd = "/"
    elif args[0] == "-":
        state.pwd = state.oldpwd
    else:
        path = state.resolve_path(args[0])
        try:
            is_dir = state.is_directory(path)
        except OSError as e:
            output(f"cd: {args[0]}: {e}")
            return
        if is_dir:
            state.pwd = path
        else:
            output(f"cd: {args[0]}: Not a directory")


@command("exit", "Exit the program.")
def exit_(client, state, args, output):
    state.exit_requested = True


@command(
    "forget [REMOTE_DIR]...",
    """Clear the cached listings of remote directories so that they are
    fetched again on next use. With no arguments, forgets the working
    directory.""",
)
def forget(client, state, args, output):
    for arg in args or [state.pwd]:
        if not state.forget_children(arg):
            output(f"forget: {arg}: Nothing to forget")


@command(
    "get REMOTE_FILE...",
    """Download each specified remote file to a file of the same name in the
    local working directory.""",
)
def get(client, state, args, output):
    for path in _expand_each(state, args, "get", output):
        try:
            if state.is_directory(path):
                output(f"get: {path}: Is a directory")
                continue
            data = client.get(path)
            Path(basename(path)).write_bytes(data)
            logger.info("Downloaded %s (%d bytes)", path, len(data))
        except OSError as e:
            output(f"get: {path}: {e}")


@command(
    "help [COMMAND]",
    """Print usage and help information about a command. If no command is
    given, print a list of commands instead.""",
)
def help_(client, state, args, output):
    if not args:
        for line in text.table(sorted(COMMANDS)):
            output(line)
        return

    cmd = COMMANDS.get(args[0])
    if cmd is None:
        output(f"Unrecognized command: {args[0]}")
        return
    output(cmd.usage)
    for line in text.wrap(cmd.description):
        output(line)


@command(
    "lcd [LOCAL_DIR]",
    """Change the local working directory. With no arguments, changes to the
    home directory. With a local directory name as the argument, changes to
    that directory. With - as the argument, changes to the previous working
    directory.""",
)
def lcd(client, state, args, output):
    if not args:
        path = os.path.expanduser("~")
    elif args[0] == "-":
        path = state.local_oldpwd
    else:
        path = os.path.abspath(os.path.expanduser(args[0]))

    if os.path.isdir(path):
        state.local_oldpwd = os.getcwd()
        os.chdir(path)
    else:
        output(f"lcd: {args[0] if args else path}: No such file or directory")


@command(
    "ls [REMOTE_FILE]...",
    """List remote files. With no arguments, list the contents of the working
    directory. When given remote directories as arguments, list the contents
    of the directories. When given remote files or patterns as arguments,
    list the matching files.""",
)
def ls(client, state, args, output):
    targets = []
    if not args:
        targets.append((state.pwd, join(state.pwd, "*"), True))
    for arg in args:
        path = state.resolve_path(arg)
        try:
            if state.is_directory(path):
                targets.append((arg, join(path, "*"), True))
            else:
                targets.append((arg, path, False))
        except OSError as e:
            output(f"ls: {arg}: {e}")

    items = []
    for arg, pattern, is_listing in targets:
        try:
            entries = state.contents(dirname(pattern))
        except OSError as e:
            output(f"ls: {arg}: {e}")
            continue
        name = basename(pattern)
        matched = [basename(entry) for entry in entries if fnmatchcase(basename(entry), name)]
        if not matched and not is_listing:
            output(f"ls: {arg}: No such file or directory")
        items.extend(matched)

    for line in text.table(items):
        output(line)


@command("mkdir REMOTE_DIR...", "Create remote directories.")
def mkdir(client, state, args, output):
    for arg in args:
        path = state.resolve_path(arg)
        try:
            state.add(client.create_directory(path))
        except OSError as e:
            output(f"mkdir: {arg}: {e}")


@command(
    "put LOCAL_FILE [REMOTE_FILE]",
    """Upload a local file to a remote path, replacing any remote file of the
    same name. When given only a local file path, or a remote directory as
    the destination, the file keeps its name.""",
)
def put(client, state, args, output):
    local_path = Path(args[0]).expanduser()
    to_path = state.resolve_path(args[1] if len(args) == 2 else local_path.name)

    try:
        if state.is_directory(to_path):
            to_path = join(to_path, local_path.name)
        data = local_path.read_bytes()
        state.add(client.put(to_path, data))
        logger.info("Uploaded %s to %s (%d bytes)", local_path, to_path, len(data))
    except OSError as e:
        output(f"put: {e}")


@command("rm REMOTE_FILE...", "Remove each specified remote file or directory.")
def rm(client, state, args, output):
    for path in _expand_each(state, args, "rm", output):
        if path == "/":
            output("rm: /: Cannot remove the root directory")
            continue
        try:
            client.delete(path)
            state.remove(path)
        except OSError as e:
            output(f"rm: {path}: {e}")


@command(
    "share REMOTE_FILE...",
    "Print a URL referring to each specified remote file.",
)
def share(client, state, args, output):
    for path in _expand_each(state, args, "share", output):
        try:
            output(f"{path}: {client.share_link(path)}")
        except OSError as e:
            output(f"share: {path}: {e}")


def shell(command_line: str, output: Output = print) -> None:
    """Run a local shell command and pass its output through line by line."""
    try:
        result = subprocess.run(command_line, shell=True, capture_output=True, text=True)
    except OSError as e:
        output(str(e))
        return
    except KeyboardInterrupt:
        return

    for line in (result.stdout + result.stderr).splitlines():
        output(line)


def exec_line(line: str, client: RemoteClient, state: State, output: Output = print) -> None:
    """
    Parse and execute one line of user input.

    Lines starting with ``!`` run in the local shell. Otherwise the line is
    split shell-style (quotes and backslash escapes) into a command name
    and its arguments.
    """
    line = line.strip()
    if line.startswith("!"):
        shell(line[1:], output)
        return
    if not line:
        return

    try:
        tokens = shlex.split(line)
    except ValueError as e:
        output(f"Parse error: {e}")
        return
    if not tokens:
        return

    name, args = tokens[0], tokens[1:]
    cmd = COMMANDS.get(name)
    if cmd is None:
        output(f"Unrecognized command: {name}")
        return

    logger.debug("Executing: %s %s", name, args)
    try:
        cmd.exec(client, state, args, output)
    except UsageError as e:
        output(f"Usage: {e}")
