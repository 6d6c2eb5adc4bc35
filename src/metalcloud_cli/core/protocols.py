"""Protocols (interfaces) consumed by the core and CLI layers.

These define the contracts that infrastructure adapters must satisfy.
Commands depend ONLY on these protocols — never on concrete
implementations — so tests can hand them a ``MagicMock``.
"""

from __future__ import annotations

from typing import Any, Protocol

from metalcloud_cli.core.models import Infrastructure, Instance, InstanceArray, Variable


class RpcTransport(Protocol):
    """Contract for the wire-level API backend.

    Any object that implements :meth:`call` with the correct signature
    satisfies this protocol structurally (no explicit inheritance
    required).
    """

    def call(self, method: str, *params: Any) -> Any:
        """Invoke the remote *method* with positional *params*.

        Returns the decoded ``result`` member of the response.

        Raises
        ------
        RemoteCallError
            When the server answers with an error object or the request
            cannot be completed.
        """
        ...  # pragma: no cover


class MetalCloudClient(Protocol):
    """Typed view over the remote API used by every command."""

    def instance_get(self, instance_id: int) -> Instance:
        ...  # pragma: no cover

    def instance_array_get(self, instance_array_id: int) -> InstanceArray:
        ...  # pragma: no cover

    def infrastructure_get(self, infrastructure_id: int) -> Infrastructure:
        ...  # pragma: no cover

    def instance_server_power_set(self, instance_id: int, operation: str) -> None:
        """Change the power state of the server behind *instance_id*.

        *operation* is one of ``on``, ``off``, ``reset`` or ``soft``.
        """
        ...  # pragma: no cover

    def variables(self, usage: str = "") -> dict[str, Variable]:
        """Return the account's variables keyed by name, optionally filtered."""
        ...  # pragma: no cover
