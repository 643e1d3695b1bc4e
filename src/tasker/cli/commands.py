# src/tasker/cli/commands.py

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import ClassVar

from ..tasks.task_store import TaskStore

CommandEmitter = Callable[[str], None]

logger = logging.getLogger(__name__)

PROG = "tasker"
ABOUT = "A simple CLI task manager with SQLite"
HELP_FLAGS = frozenset({"-h", "--help"})
VERSION_FLAGS = frozenset({"-V", "--version"})
MAX_TASK_ID = 2**32 - 1

_NEGATIVE_NUMBER_RE = re.compile(r"-\d+")


class UsageError(ValueError):
    """Bad command line. Reported with the usage text; the store is never opened."""


class HelpRequested(Exception):
    """`help`, -h or --help was given."""


class VersionRequested(Exception):
    """-V or --version was given."""


# ---- typed commands ----


@dataclass(frozen=True, slots=True)
class AddCommand:
    verb: ClassVar[str] = "add"
    description: str


@dataclass(frozen=True, slots=True)
class ListCommand:
    verb: ClassVar[str] = "list"


@dataclass(frozen=True, slots=True)
class CompleteCommand:
    verb: ClassVar[str] = "complete"
    task_id: int


@dataclass(frozen=True, slots=True)
class DeleteCommand:
    verb: ClassVar[str] = "delete"
    task_id: int


Command = AddCommand | ListCommand | CompleteCommand | DeleteCommand
CommandParser = Callable[[list[str]], Command]
CommandHandler = Callable[[TaskStore, Command, CommandEmitter], None]


@dataclass(frozen=True, slots=True)
class _Entry:
    parser: CommandParser
    handler: CommandHandler
    usage: str
    help_text: str


class CommandRegistry:
    """Verb registry: parses argv into a typed command and runs its handler."""

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}

    def register(
        self,
        name: str,
        parser: CommandParser,
        handler: CommandHandler,
        *,
        usage: str,
        help_text: str,
    ) -> None:
        self._entries[name] = _Entry(parser, handler, usage, help_text)

    def parse(self, argv: Sequence[str]) -> Command:
        """
        Turn process arguments (without the program name) into one command.

        Raises UsageError, HelpRequested or VersionRequested; never returns
        a partially parsed command.
        """
        args = list(argv)
        if not args:
            raise UsageError("missing command")

        verb, rest = args[0], args[1:]
        if verb == "help" or verb in HELP_FLAGS:
            raise HelpRequested()
        if verb in VERSION_FLAGS:
            raise VersionRequested()

        entry = self._entries.get(verb)
        if entry is None:
            raise UsageError(f"unrecognized command '{verb}'")

        return entry.parser(_positionals(rest))

    def dispatch(self, store: TaskStore, command: Command, emit: CommandEmitter = print) -> None:
        entry = self._entries[command.verb]
        logger.debug("Dispatching %r", command)
        entry.handler(store, command, emit)

    def build_usage(self) -> str:
        width = max((len(e.usage) for e in self._entries.values()), default=0)
        width = max(width, len("help"))
        lines = [f"Usage: {PROG} <command> [args]", "", ABOUT, "", "Commands:"]
        for entry in self._entries.values():
            lines.append(f"  {entry.usage.ljust(width)}  {entry.help_text}")
        lines.append(f"  {'help'.ljust(width)}  Show this help")
        return "\n".join(lines)


def _positionals(tokens: list[str]) -> list[str]:
    """
    Split off positional arguments.

    `--` ends option parsing. Before it, -h/--help requests help and any other
    dash-prefixed token is rejected (negative numbers are left for the id parser).
    """
    out: list[str] = []
    for i, tok in enumerate(tokens):
        if tok == "--":
            out.extend(tokens[i + 1 :])
            break
        if tok in HELP_FLAGS:
            raise HelpRequested()
        if tok.startswith("-") and tok != "-" and not _NEGATIVE_NUMBER_RE.fullmatch(tok):
            raise UsageError(f"unexpected option '{tok}'")
        out.append(tok)
    return out


def _exactly_one(verb: str, what: str, args: list[str]) -> str:
    if not args:
        raise UsageError(f"'{verb}' requires <{what}>")
    if len(args) > 1:
        raise UsageError(f"unexpected argument '{args[1]}' for '{verb}'")
    return args[0]


def parse_task_id(raw: str) -> int:
    """Parse a task id: ASCII digits only, within the unsigned 32-bit range."""
    if not (raw.isascii() and raw.isdigit()):
        raise UsageError(f"invalid task id '{raw}': expected a non-negative integer")
    value = int(raw)
    if value > MAX_TASK_ID:
        raise UsageError(f"invalid task id '{raw}': must be at most {MAX_TASK_ID}")
    return value


# ---- parsers ----


def parse_add(args: list[str]) -> AddCommand:
    description = _exactly_one("add", "description", args)
    if description == "":
        raise UsageError("task description must not be empty")
    try:
        description.encode("utf-8")
    except UnicodeEncodeError:
        raise UsageError("task description is not valid UTF-8") from None
    return AddCommand(description=description)


def parse_list(args: list[str]) -> ListCommand:
    if args:
        raise UsageError(f"unexpected argument '{args[0]}' for 'list'")
    return ListCommand()


def parse_complete(args: list[str]) -> CompleteCommand:
    return CompleteCommand(task_id=parse_task_id(_exactly_one("complete", "id", args)))


def parse_delete(args: list[str]) -> DeleteCommand:
    return DeleteCommand(task_id=parse_task_id(_exactly_one("delete", "id", args)))


# ---- handlers ----


def cmd_add(store: TaskStore, command: AddCommand, emit: CommandEmitter) -> None:
    task_id = store.add_task(command.description)
    emit(f"Added task with ID: {task_id}")


def cmd_list(store: TaskStore, command: ListCommand, emit: CommandEmitter) -> None:
    for task in store.list_tasks():
        emit(f"{task.id} {task.status_mark}: {task.description}")


def cmd_complete(store: TaskStore, command: CompleteCommand, emit: CommandEmitter) -> None:
    if store.complete_task(command.task_id) == 0:
        emit(f"Task {command.task_id} not found")
    else:
        emit(f"Completed task: {command.task_id}")


def cmd_delete(store: TaskStore, command: DeleteCommand, emit: CommandEmitter) -> None:
    if store.delete_task(command.task_id) == 0:
        emit(f"Task {command.task_id} not found")
    else:
        emit(f"Deleted task: {command.task_id}")


registry = CommandRegistry()

registry.register("add", parse_add, cmd_add, usage="add <description>", help_text="Add a new task")
registry.register("list", parse_list, cmd_list, usage="list", help_text="List all tasks")
registry.register(
    "complete",
    parse_complete,
    cmd_complete,
    usage="complete <id>",
    help_text="Mark a task as completed",
)
registry.register("delete", parse_delete, cmd_delete, usage="delete <id>", help_text="Delete a task")


def parse_args(argv: Sequence[str]) -> Command:
    return registry.parse(argv)


def dispatch(store: TaskStore, command: Command, emit: CommandEmitter = print) -> None:
    registry.dispatch(store, command, emit)
