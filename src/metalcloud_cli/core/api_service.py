"""Core API service — typed operations over a JSON-RPC transport.

This is the client object handed to every command.  It depends on a
:class:`~metalcloud_cli.core.protocols.RpcTransport` injected at
construction time (dependency inversion), keeping the core free of any
HTTP imports.

Guarantees
----------
* Pure orchestration — no I/O of its own, no ``print()``.
* Only :class:`~metalcloud_cli.exceptions.MetalCloudError` subclasses escape.
* Remote error messages are passed through unaltered.
"""

from __future__ import annotations

import contextlib
from collections.abc import Callable, Iterator
from typing import Any, TypeVar

from metalcloud_cli.core.models import (
    Infrastructure,
    Instance,
    InstanceArray,
    InstanceCredentials,
    IPAddress,
    ISCSIInitiator,
    RDPCredentials,
    SharedDriveTarget,
    SSHCredentials,
    Variable,
)
from metalcloud_cli.core.protocols import RpcTransport
from metalcloud_cli.exceptions import ArgumentError, MetalCloudError, RemoteCallError

_T = TypeVar("_T")

POWER_OPERATIONS: tuple[str, ...] = ("on", "off", "reset", "soft")
"""Operations accepted by ``instance_server_power_set``."""


class MetalCloudService:
    """Stateless service implementing the ``MetalCloudClient`` protocol.

    Parameters
    ----------
    transport:
        Any object satisfying the :class:`RpcTransport` protocol.
    user_email:
        Account identifier for user-scoped calls (``variables``).
    """

    def __init__(self, transport: RpcTransport, *, user_email: str | None = None) -> None:
        self._transport: RpcTransport = transport
        self._user_email: str | None = user_email

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def instance_get(self, instance_id: int) -> Instance:
        return self._fetch("instance_get", self._parse_instance, instance_id)

    def instance_array_get(self, instance_array_id: int) -> InstanceArray:
        return self._fetch("instance_array_get", self._parse_instance_array, instance_array_id)

    def infrastructure_get(self, infrastructure_id: int) -> Infrastructure:
        return self._fetch("infrastructure_get", self._parse_infrastructure, infrastructure_id)

    def instance_server_power_set(self, instance_id: int, operation: str) -> None:
        """Set the server power state.

        Raises
        ------
        ArgumentError
            If *operation* is not one of :data:`POWER_OPERATIONS`.
        RemoteCallError
            If the remote call fails.
        """
        if operation not in POWER_OPERATIONS:
            raise ArgumentError(
                f"Invalid power operation: {operation!r}",
                hint=f"Use one of: {', '.join(POWER_OPERATIONS)}",
            )
        self._call("instance_server_power_set", instance_id, operation)

    def variables(self, usage: str = "") -> dict[str, Variable]:
        params: list[Any] = [self._user_email]
        if usage:
            params.append(usage)
        raw = self._call("variables", *params)
        with _parsing("variables"):
            return {
                variable.variable_name: variable
                for variable in (self._parse_variable(entry) for entry in _entries(raw))
            }

    # ------------------------------------------------------------------
    # Transport delegation (safe boundary)
    # ------------------------------------------------------------------

    def _call(self, method: str, *params: Any) -> Any:
        """Call the transport and ensure only our exceptions escape."""
        try:
            return self._transport.call(method, *params)
        except MetalCloudError:
            # Already one of ours — let it propagate unchanged.
            raise
        except Exception as exc:
            raise RemoteCallError(str(exc)) from exc

    def _fetch_object(self, method: str, *params: Any) -> dict[str, Any]:
        """Like :meth:`_call` but require a JSON object result."""
        raw = self._call(method, *params)
        if not isinstance(raw, dict):
            raise RemoteCallError(
                f"{method} returned an unexpected data structure.",
            )
        return raw

    def _fetch(self, method: str, parser: Callable[[dict[str, Any]], _T], *params: Any) -> _T:
        """Fetch a JSON object and parse it, mapping malformed fields to our errors."""
        raw = self._fetch_object(method, *params)
        with _parsing(method):
            return parser(raw)

    # ------------------------------------------------------------------
    # Raw-dict → domain-model parsers (pure)
    # ------------------------------------------------------------------

    @classmethod
    def _parse_instance(cls, raw: dict[str, Any]) -> Instance:
        return Instance(
            instance_id=_int(raw, "instance_id"),
            instance_label=_str(raw, "instance_label"),
            instance_array_id=_int(raw, "instance_array_id"),
            instance_subdomain_permanent=_str(raw, "instance_subdomain_permanent"),
            instance_credentials=cls._parse_credentials(raw.get("instance_credentials")),
        )

    @staticmethod
    def _parse_instance_array(raw: dict[str, Any]) -> InstanceArray:
        return InstanceArray(
            instance_array_id=_int(raw, "instance_array_id"),
            instance_array_label=_str(raw, "instance_array_label"),
            infrastructure_id=_int(raw, "infrastructure_id"),
        )

    @staticmethod
    def _parse_infrastructure(raw: dict[str, Any]) -> Infrastructure:
        return Infrastructure(
            infrastructure_id=_int(raw, "infrastructure_id"),
            infrastructure_label=_str(raw, "infrastructure_label"),
        )

    @staticmethod
    def _parse_ips(raw: object) -> tuple[IPAddress, ...]:
        return tuple(
            IPAddress(
                ip_human_readable=_str(entry, "ip_human_readable"),
                ip_type=_str(entry, "ip_type", "ipv4"),
            )
            for entry in _entries(raw)
        )

    @classmethod
    def _parse_credentials(cls, raw: object) -> InstanceCredentials:
        if not isinstance(raw, dict):
            return InstanceCredentials()
        ssh = raw.get("ssh")
        rdp = raw.get("rdp")
        iscsi = raw.get("iscsi")
        return InstanceCredentials(
            ip_addresses_public=cls._parse_ips(raw.get("ip_addresses_public")),
            ip_addresses_private=cls._parse_ips(raw.get("ip_addresses_private")),
            ssh=SSHCredentials(
                username=_str(ssh, "username"),
                initial_password=_str(ssh, "initial_password"),
                port=_int(ssh, "port", 22),
            ) if isinstance(ssh, dict) else None,
            rdp=RDPCredentials(
                username=_str(rdp, "username"),
                initial_password=_str(rdp, "initial_password"),
                port=_int(rdp, "port", 3389),
            ) if isinstance(rdp, dict) else None,
            iscsi=ISCSIInitiator(
                initiator_iqn=_str(iscsi, "initiator_iqn"),
                username=_str(iscsi, "username"),
                password=_str(iscsi, "password"),
            ) if isinstance(iscsi, dict) else None,
            shared_drives=tuple(
                SharedDriveTarget(
                    storage_ip_address=_str(entry, "storage_ip_address"),
                    storage_port=_int(entry, "storage_port", 0),
                    target_iqn=_str(entry, "target_iqn"),
                    lun_id=_str(entry, "lun_id"),
                )
                for entry in _entries(raw.get("shared_drives"))
            ),
        )

    @staticmethod
    def _parse_variable(raw: dict[str, Any]) -> Variable:
        return Variable(
            variable_id=_int(raw, "variable_id", 0),
            variable_name=_str(raw, "variable_name"),
            variable_usage=_str(raw, "variable_usage"),
            variable_json=_str(raw, "variable_json"),
            variable_created_timestamp=_str(raw, "variable_created_timestamp"),
            variable_updated_timestamp=_str(raw, "variable_updated_timestamp"),
        )


def _entries(raw: object) -> list[dict[str, Any]]:
    """Normalise a JSON list-or-object collection into a list of dicts.

    The API encodes empty collections as ``[]`` and keyed ones as objects;
    objects are walked in key order.  Malformed entries are skipped.
    """
    if isinstance(raw, dict):
        values: list[object] = [raw[key] for key in sorted(raw)]
    elif isinstance(raw, list):
        values = list(raw)
    else:
        return []
    return [entry for entry in values if isinstance(entry, dict)]


def _int(raw: dict[str, Any], key: str, default: int = 0) -> int:
    """Read an integer field; a missing or ``null`` value yields *default*."""
    value = raw.get(key)
    return default if value is None else int(value)


def _str(raw: dict[str, Any], key: str, default: str = "") -> str:
    """Read a text field; a missing or ``null`` value yields *default*."""
    value = raw.get(key)
    return default if value is None else str(value)


@contextlib.contextmanager
def _parsing(method: str) -> Iterator[None]:
    """Map malformed field values in *method*'s result to :class:`RemoteCallError`."""
    try:
        yield
    except (TypeError, ValueError, AttributeError) as exc:
        raise RemoteCallError(
            f"{method} returned an unexpected data structure.",
        ) from exc
