"""Shared pytest fixtures and configuration for the metalcloud-cli test suite.

Guidelines
----------
* No network access in any test; the API is mocked at the client or
  transport boundary.
* No ``METALCLOUD_*`` variable from the developer's shell may leak in.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Strip ``METALCLOUD_*`` variables and run from an empty directory."""
    for name in list(os.environ):
        if name.startswith("METALCLOUD_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)  # no stray .env file
