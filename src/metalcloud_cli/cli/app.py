"""CLI application entry point and command routing for metalcloud-cli.

This module is the **sole error boundary** for the entire application.
It catches :class:`~metalcloud_cli.exceptions.MetalCloudError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — commands are looked up in the registry
  and executed by :func:`~metalcloud_cli.cli.registry.dispatch`.
* Command output is written to stdout; diagnostics go to stderr.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
from collections.abc import Callable

from metalcloud_cli.cli import exit_codes
from metalcloud_cli.cli.console import configure_logging, console
from metalcloud_cli.cli.instance import INSTANCE_COMMANDS
from metalcloud_cli.cli.registry import PROG, Command, dispatch, ensure_unique, find_command
from metalcloud_cli.cli.rendering import render_table
from metalcloud_cli.cli.variable import VARIABLE_COMMANDS
from metalcloud_cli.core.protocols import MetalCloudClient
from metalcloud_cli.core.schema import FieldType, SchemaField
from metalcloud_cli.exceptions import MetalCloudError
from metalcloud_cli.version import __version__

logger = logging.getLogger(__name__)

COMMANDS: tuple[Command, ...] = ensure_unique([*INSTANCE_COMMANDS, *VARIABLE_COMMANDS])

ClientFactory = Callable[[], MetalCloudClient]


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Only the subject and predicate are parsed here; everything after
    them is handed to the selected command's own parser:

    * ``metalcloud-cli <subject> <predicate> [flags]``
    * ``metalcloud-cli help``
    * ``metalcloud-cli --version``
    """
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Command-line client for the Metal Cloud API.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every API call to stderr (accepted anywhere on the line).",
    )
    parser.add_argument("subject", nargs="?", default=None, help="e.g. instance")
    parser.add_argument("predicate", nargs="?", default=None, help="e.g. credentials")
    parser.add_argument(
        "arguments",
        nargs=argparse.REMAINDER,
        help="Command flags, e.g. -id=42 -format=json",
    )
    return parser


# ---------------------------------------------------------------------------
# Command list and client construction
# ---------------------------------------------------------------------------

_COMMAND_LIST_SCHEMA: list[SchemaField] = [
    SchemaField("SUBJECT", FieldType.STRING, 10),
    SchemaField("PREDICATE", FieldType.STRING, 10),
    SchemaField("ALIASES", FieldType.STRING, 10),
    SchemaField("DESCRIPTION", FieldType.STRING, 20),
]


def render_command_list(commands: tuple[Command, ...]) -> str:
    """Render every registered command as a table."""
    rows = [
        [
            command.subject,
            command.predicate,
            f"{command.alt_subject} {command.alt_predicate}",
            command.description,
        ]
        for command in commands
    ]
    return render_table(
        "Commands",
        f"Usage: {PROG} <subject> <predicate> [-flag=value ...]",
        "",
        rows,
        _COMMAND_LIST_SCHEMA,
    )


def _open_client(stack: contextlib.ExitStack) -> MetalCloudClient:
    """Build the API service from settings; the transport closes with *stack*."""
    from metalcloud_cli.config import load_settings
    from metalcloud_cli.core.api_service import MetalCloudService
    from metalcloud_cli.infra.jsonrpc_transport import JsonRpcTransport

    settings = load_settings()
    if settings.logging_enabled:
        configure_logging(True)
    endpoint, api_key = settings.require_credentials()
    transport = stack.enter_context(
        JsonRpcTransport(endpoint, api_key, timeout=settings.timeout_seconds),
    )
    logger.debug("using endpoint %s", endpoint)
    return MetalCloudService(transport, user_email=settings.user_email)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(
    argv: list[str] | None = None,
    *,
    client_factory: ClientFactory | None = None,
) -> int:
    """Run the metalcloud-cli CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.
    client_factory:
        Builds the API client.  Defaults to one configured from
        ``METALCLOUD_*`` settings.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    arguments = [arg for arg in args.arguments if arg != "--debug"]
    configure_logging(args.debug or len(arguments) != len(args.arguments))

    if args.subject is None or args.subject == "help":
        print(render_command_list(COMMANDS), end="")
        return exit_codes.SUCCESS

    command = find_command(COMMANDS, args.subject, args.predicate or "")

    with contextlib.ExitStack() as stack:
        factory = client_factory or (lambda: _open_client(stack))
        output = dispatch(command, arguments, factory)

    if output:
        print(output, end="" if output.endswith("\n") else "\n")
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except MetalCloudError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
