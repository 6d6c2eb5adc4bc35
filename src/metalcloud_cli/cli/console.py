"""CLI console and logging helpers with optional Rich support.

This module avoids module-level imports of optional UI dependencies so
bootstrap paths (``--help``, ``--version``) remain functional even when
Rich is not installed.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from metalcloud_cli.exceptions import EnvironmentError

PACKAGE_LOGGER = "metalcloud_cli"


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console() -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain stderr print."""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(*objects, file=sys.stderr)
			return
		rich_console.print(*objects)


console = _ConsoleProxy()


def configure_logging(verbose: bool) -> None:
	"""Set the package log level; attach a Rich handler when *verbose*.

	At the default ``WARNING`` level no handler is attached and Python's
	last-resort stderr handler applies.
	"""
	logger = logging.getLogger(PACKAGE_LOGGER)
	if not verbose:
		logger.setLevel(logging.WARNING)
		return

	logger.setLevel(logging.DEBUG)
	try:
		from rich.logging import RichHandler
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc

	if any(isinstance(handler, RichHandler) for handler in logger.handlers):
		return
	handler = RichHandler(console=get_rich_console(), rich_tracebacks=True, show_path=False)
	handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
	logger.addHandler(handler)
