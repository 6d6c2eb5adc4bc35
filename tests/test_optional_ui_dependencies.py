"""Regression tests for optional CLI UI dependencies (rich/questionary).

These tests verify bootstrap commands and machine-readable output are
resilient when optional UI packages are missing, and that the paths
which do need them fail cleanly.
"""

from __future__ import annotations

import sys
from unittest.mock import MagicMock

import pytest

from metalcloud_cli.cli.app import main
from metalcloud_cli.cli.confirm import confirm
from metalcloud_cli.core.models import Variable
from metalcloud_cli.exceptions import EnvironmentError


def _hide_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "rich", None)
    monkeypatch.setitem(sys.modules, "rich.box", None)
    monkeypatch.setitem(sys.modules, "rich.cells", None)
    monkeypatch.setitem(sys.modules, "rich.console", None)
    monkeypatch.setitem(sys.modules, "rich.logging", None)
    monkeypatch.setitem(sys.modules, "rich.table", None)
    monkeypatch.setitem(sys.modules, "rich.text", None)


def _hide_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "questionary", None)


def _client() -> MagicMock:
    client = MagicMock()
    client.variables.return_value = {"test": Variable(variable_id=0, variable_name="test")}
    return client


def test_help_works_without_rich_or_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    _hide_questionary(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_version_works_without_rich_or_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    _hide_questionary(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0


def test_json_output_works_without_rich(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)

    client = _client()
    code = main(["variable", "list", "-format=json"], client_factory=lambda: client)
    assert code == 0
    assert '"NAME": "test"' in capsys.readouterr().out


def test_table_output_errors_cleanly_when_rich_missing(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _hide_rich(monkeypatch)

    client = _client()
    with pytest.raises(EnvironmentError, match="rich is not installed"):
        main(["variable", "list"], client_factory=lambda: client)


def test_debug_logging_errors_cleanly_when_rich_missing(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(EnvironmentError, match="rich is not installed"):
        main(["--debug", "help"])


def test_prompt_errors_cleanly_when_questionary_missing(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _hide_questionary(monkeypatch)

    with pytest.raises(EnvironmentError, match="questionary is not installed"):
        confirm(False, lambda: "Are you sure?")
