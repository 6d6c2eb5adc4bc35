"""Command registry and dispatcher.

Every command is a :class:`Command` descriptor naming itself by subject
and predicate (each with an alias), declaring its flags on an
``argparse`` parser, binding the parsed namespace into a typed argument
object, and executing against a
:class:`~metalcloud_cli.core.protocols.MetalCloudClient`.

Flags follow the ``-name=value`` style (``--name value`` also works).
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from metalcloud_cli.core.protocols import MetalCloudClient
from metalcloud_cli.exceptions import ArgumentError, CommandNotFoundError

logger = logging.getLogger(__name__)

PROG = "metalcloud-cli"


@dataclass(frozen=True, slots=True)
class Command:
    """Static description of one CLI command."""

    description: str
    subject: str
    alt_subject: str
    predicate: str
    alt_predicate: str
    init: Callable[[argparse.ArgumentParser], None]
    """Declare the command's flags."""
    bind: Callable[[argparse.Namespace], Any]
    """Validate parsed flags and build the typed argument object."""
    execute: Callable[[Any, MetalCloudClient], str]
    """Run the command; returns the text to print (possibly empty)."""

    def matches(self, subject: str, predicate: str) -> bool:
        return (
            subject in (self.subject, self.alt_subject)
            and predicate in (self.predicate, self.alt_predicate)
        )

    def names(self) -> set[tuple[str, str]]:
        """Every (subject, predicate) spelling that selects this command."""
        return {
            (subject, predicate)
            for subject in (self.subject, self.alt_subject)
            for predicate in (self.predicate, self.alt_predicate)
        }


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def ensure_unique(commands: Iterable[Command]) -> tuple[Command, ...]:
    """Return *commands* as a tuple, rejecting ambiguous spellings.

    Raises
    ------
    ValueError
        If two commands answer to the same (subject, predicate) pair.
    """
    seen: dict[tuple[str, str], Command] = {}
    result = tuple(commands)
    for command in result:
        for name in command.names():
            if name in seen:
                raise ValueError(
                    f"duplicate command {' '.join(name)!r}: "
                    f"{seen[name].description!r} and {command.description!r}",
                )
            seen[name] = command
    return result


def find_command(
    commands: Sequence[Command],
    subject: str,
    predicate: str,
) -> Command:
    """Return the command selected by *subject* and *predicate*.

    Matching is case-sensitive against primary and alternate names.

    Raises
    ------
    CommandNotFoundError
        If no command matches.
    """
    for command in commands:
        if command.matches(subject, predicate):
            return command
    raise CommandNotFoundError(
        f"Command not found: {subject} {predicate}".rstrip(),
        hint=f"Run '{PROG} help' to list available commands.",
    )


# ---------------------------------------------------------------------------
# Flag helpers shared by command modules
# ---------------------------------------------------------------------------

def add_id_flag(parser: argparse.ArgumentParser, dest: str, help_text: str) -> None:
    parser.add_argument("-id", "--id", dest=dest, type=int, default=None, help=help_text)


def add_format_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-format",
        "--format",
        dest="format",
        default="",
        help="The output format. Supported values are 'json','csv'. "
        "The default format is human readable.",
    )


def add_autoconfirm_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-autoconfirm",
        "--autoconfirm",
        dest="autoconfirm",
        action="store_true",
        help="If true it does not ask for confirmation anymore",
    )


def require(value: Any, message: str) -> Any:
    """Return *value*, or raise :class:`ArgumentError` when it is unset."""
    if value is None or value == "":
        raise ArgumentError(message)
    return value


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def build_parser(command: Command) -> argparse.ArgumentParser:
    """Create the flag parser for *command* and run its init hook."""
    parser = argparse.ArgumentParser(
        prog=f"{PROG} {command.subject} {command.predicate}",
        description=command.description,
        allow_abbrev=False,
    )
    command.init(parser)
    return parser


def dispatch(
    command: Command,
    argv: Sequence[str],
    client_factory: Callable[[], MetalCloudClient],
) -> str:
    """Parse *argv* for *command*, bind its arguments and execute it.

    The client is only created once the arguments are valid, so flag
    errors never touch configuration or the network.  The execute hook's
    output is returned unchanged and its exceptions propagate.
    """
    parser = build_parser(command)
    namespace = parser.parse_args(list(argv))
    arguments = command.bind(namespace)
    logger.debug("dispatching %s %s with %s", command.subject, command.predicate, arguments)
    return command.execute(arguments, client_factory())
