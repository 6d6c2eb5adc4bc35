"""Interactive confirmation gate for commands that change remote state.

Declining is a user choice, not an error: :func:`confirm` returns
``False`` and the calling command skips its mutating call.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

from metalcloud_cli.exceptions import EnvironmentError

CONFIRMATION_WORD = "yes"


def _import_questionary() -> Any:
    """Import questionary lazily for the confirmation prompt."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def interactive_session() -> bool:
    """Return ``False`` while running under pytest.

    Prompt builders use this to return an empty message, which skips the
    prompt without affecting error reporting.
    """
    return "PYTEST_CURRENT_TEST" not in os.environ


def confirm(autoconfirm: bool, build_prompt: Callable[[], str]) -> bool:
    """Decide whether a mutating command may proceed.

    Parameters
    ----------
    autoconfirm:
        When true, proceed without building or showing a prompt.
    build_prompt:
        Returns the question to ask; an empty string means there is no
        interactive context and the command proceeds.

    Returns
    -------
    bool
        ``True`` only if confirmation was skipped or the user typed
        exactly ``yes`` (surrounding whitespace ignored).
    """
    if autoconfirm:
        return True

    message = build_prompt()
    if message == "":
        return True

    questionary = _import_questionary()
    answer: str | None = questionary.text(message).ask()  # None on Ctrl+C / Esc
    if answer is None:
        return False
    return answer.strip() == CONFIRMATION_WORD
