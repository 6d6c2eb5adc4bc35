"""Domain models for metalcloud-cli.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O, zero dependencies on
external packages, and are discarded at the end of each command.
"""

from __future__ import annotations

from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class IPAddress:
    """A single IP address assigned to an instance."""

    ip_human_readable: str
    """Dotted (IPv4) or colon (IPv6) notation."""

    ip_type: str = "ipv4"


@dataclass(frozen=True, slots=True)
class SSHCredentials:
    username: str
    initial_password: str
    port: int


@dataclass(frozen=True, slots=True)
class RDPCredentials:
    username: str
    initial_password: str
    port: int


@dataclass(frozen=True, slots=True)
class ISCSIInitiator:
    """iSCSI initiator identity used to reach the instance's drives."""

    initiator_iqn: str
    username: str
    password: str


@dataclass(frozen=True, slots=True)
class SharedDriveTarget:
    """Connection details for one shared drive attached to an instance."""

    storage_ip_address: str
    storage_port: int
    target_iqn: str
    lun_id: str


@dataclass(frozen=True, slots=True)
class InstanceCredentials:
    """Access details of an instance.

    Each optional block is ``None`` when the remote side did not send it.
    """

    ip_addresses_public: tuple[IPAddress, ...] = ()
    ip_addresses_private: tuple[IPAddress, ...] = ()
    ssh: SSHCredentials | None = None
    rdp: RDPCredentials | None = None
    iscsi: ISCSIInitiator | None = None
    shared_drives: tuple[SharedDriveTarget, ...] = ()


# ---------------------------------------------------------------------------
# Infrastructure hierarchy
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Instance:
    """A single compute unit belonging to an instance array."""

    instance_id: int
    instance_label: str
    instance_array_id: int
    instance_subdomain_permanent: str
    instance_credentials: InstanceCredentials = field(
        default_factory=InstanceCredentials,
    )


@dataclass(frozen=True, slots=True)
class InstanceArray:
    """A group of instances sharing configuration."""

    instance_array_id: int
    instance_array_label: str
    infrastructure_id: int


@dataclass(frozen=True, slots=True)
class Infrastructure:
    """Top-level container of instance arrays."""

    infrastructure_id: int
    infrastructure_label: str


# ---------------------------------------------------------------------------
# Variables
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Variable:
    """A user-scoped variable available to templates and workflows."""

    variable_id: int
    variable_name: str
    variable_usage: str = ""
    variable_json: str = ""
    variable_created_timestamp: str = ""
    variable_updated_timestamp: str = ""
