"""``instance`` commands — power control and credentials.

Both commands resolve the instance's owning array and infrastructure
first (three sequential reads; any failure short-circuits with the
remote error) so that output and prompts can name all three.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass

from metalcloud_cli.cli.confirm import confirm, interactive_session
from metalcloud_cli.cli.registry import (
    Command,
    add_autoconfirm_flag,
    add_format_flag,
    add_id_flag,
    require,
)
from metalcloud_cli.cli.rendering import render_transposed_table
from metalcloud_cli.core.api_service import POWER_OPERATIONS
from metalcloud_cli.core.models import (
    Infrastructure,
    Instance,
    InstanceArray,
    IPAddress,
)
from metalcloud_cli.core.protocols import MetalCloudClient
from metalcloud_cli.core.schema import FieldType, SchemaBuilder, SchemaField
from metalcloud_cli.exceptions import ArgumentError

logger = logging.getLogger(__name__)

_ID_HELP = (
    "(Required) Instance's id. Note that the 'label' may be ambiguous "
    "in certain situations."
)

_OPERATION_LABELS: dict[str, str] = {
    "on": "Turning on",
    "off": "Turning off (hard)",
    "reset": "Rebooting",
    "soft": "Shutting down",
}


# ---------------------------------------------------------------------------
# Typed arguments
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PowerControlArgs:
    instance_id: int
    operation: str
    autoconfirm: bool = False


@dataclass(frozen=True, slots=True)
class CredentialsArgs:
    instance_id: int
    format: str = ""


def _resolve(
    client: MetalCloudClient,
    instance_id: int,
) -> tuple[Instance, InstanceArray, Infrastructure]:
    """Fetch an instance together with its array and infrastructure."""
    instance = client.instance_get(instance_id)
    instance_array = client.instance_array_get(instance.instance_array_id)
    infrastructure = client.infrastructure_get(instance_array.infrastructure_id)
    return instance, instance_array, infrastructure


# ---------------------------------------------------------------------------
# instance power_control
# ---------------------------------------------------------------------------

def _init_power_control(parser: argparse.ArgumentParser) -> None:
    add_id_flag(parser, "instance_id", _ID_HELP)
    parser.add_argument(
        "-operation",
        "--operation",
        dest="operation",
        default=None,
        help="(Required) Power control operation, one of: on, off, reset, soft",
    )
    add_autoconfirm_flag(parser)


def _bind_power_control(namespace: argparse.Namespace) -> PowerControlArgs:
    instance_id = require(namespace.instance_id, "-id is required (instance id)")
    operation = require(
        namespace.operation,
        "-operation is required (one of: on, off, reset, soft)",
    )
    if operation not in POWER_OPERATIONS:
        raise ArgumentError(
            f"Invalid -operation: {operation}",
            hint="Use one of: on, off, reset, soft",
        )
    return PowerControlArgs(
        instance_id=instance_id,
        operation=operation,
        autoconfirm=bool(namespace.autoconfirm),
    )


def power_control_prompt(
    operation: str,
    instance: Instance,
    instance_array: InstanceArray,
    infrastructure: Infrastructure,
) -> str:
    """Build the question asked before changing an instance's power state."""
    return (
        f"{_OPERATION_LABELS.get(operation, '')} instance "
        f"{instance.instance_label} ({instance.instance_id}) "
        f"of instance array {instance_array.instance_array_label} "
        f"(#{instance_array.instance_array_id}) "
        f"infrastructure {infrastructure.infrastructure_label} "
        f"(#{infrastructure.infrastructure_id}).  "
        'Are you sure? Type "yes" to continue:'
    )


def instance_power_control(args: PowerControlArgs, client: MetalCloudClient) -> str:
    instance, instance_array, infrastructure = _resolve(client, args.instance_id)

    def build_prompt() -> str:
        if not interactive_session():
            return ""
        return power_control_prompt(
            args.operation, instance, instance_array, infrastructure,
        )

    if confirm(args.autoconfirm, build_prompt):
        client.instance_server_power_set(args.instance_id, args.operation)
        logger.info("power %s sent to instance %d", args.operation, args.instance_id)
    else:
        logger.info("power %s on instance %d declined", args.operation, args.instance_id)
    return ""


# ---------------------------------------------------------------------------
# instance credentials
# ---------------------------------------------------------------------------

def _init_credentials(parser: argparse.ArgumentParser) -> None:
    add_id_flag(parser, "instance_id", _ID_HELP)
    add_format_flag(parser)


def _bind_credentials(namespace: argparse.Namespace) -> CredentialsArgs:
    return CredentialsArgs(
        instance_id=require(namespace.instance_id, "-id is required (instance id)"),
        format=namespace.format or "",
    )


def _join_ips(ips: tuple[IPAddress, ...]) -> str:
    return " ".join(ip.ip_human_readable for ip in ips)


def credentials_schema(
    instance: Instance,
    instance_array: InstanceArray,
    infrastructure: Infrastructure,
) -> SchemaBuilder:
    """Build the credentials record; optional blocks add their own columns."""
    credentials = instance.instance_credentials
    builder = SchemaBuilder()
    builder.extend(
        [
            SchemaField("ID", FieldType.INT, 6),
            SchemaField("SUBDOMAIN", FieldType.STRING, 10),
            SchemaField("INSTANCE_ARRAY", FieldType.STRING, 10),
            SchemaField("INFRASTRUCTURE", FieldType.STRING, 10),
            SchemaField("PUBLIC_IPs", FieldType.STRING, 6),
            SchemaField("PRIVATE_IPs", FieldType.STRING, 6),
        ],
        [
            instance.instance_id,
            instance.instance_subdomain_permanent,
            instance_array.instance_array_label,
            infrastructure.infrastructure_label,
            _join_ips(credentials.ip_addresses_public),
            _join_ips(credentials.ip_addresses_private),
        ],
    )

    if (ssh := credentials.ssh) is not None:
        builder.extend(
            [
                SchemaField("SSH_USERNAME", FieldType.STRING, 10),
                SchemaField("SSH_PASSWORD", FieldType.STRING, 10),
                SchemaField("SSH_PORT", FieldType.INT, 10),
            ],
            [ssh.username, ssh.initial_password, ssh.port],
        )

    if (rdp := credentials.rdp) is not None:
        builder.extend(
            [
                SchemaField("RDP_USERNAME", FieldType.STRING, 5),
                SchemaField("RDP_PASSWORD", FieldType.STRING, 5),
                SchemaField("RDP_PORT", FieldType.INT, 5),
            ],
            [rdp.username, rdp.initial_password, rdp.port],
        )

    if (iscsi := credentials.iscsi) is not None:
        builder.extend(
            [
                SchemaField("INITIATOR_IQN", FieldType.STRING, 5),
                SchemaField("ISCSI_USERNAME", FieldType.STRING, 5),
                SchemaField("ISCSI_PASSWORD", FieldType.STRING, 5),
            ],
            [iscsi.initiator_iqn, iscsi.username, iscsi.password],
        )

    for index, drive in enumerate(credentials.shared_drives):
        prefix = f"SHARED_DRIVE_{index}"
        builder.extend(
            [
                SchemaField(f"{prefix}_TARGET_IP_ADDRESS", FieldType.STRING, 5),
                SchemaField(f"{prefix}_TARGET_PORT", FieldType.INT, 5),
                SchemaField(f"{prefix}_TARGET_IQN", FieldType.STRING, 5),
                SchemaField(f"{prefix}_LUN_ID", FieldType.STRING, 5),
            ],
            [drive.storage_ip_address, drive.storage_port, drive.target_iqn, drive.lun_id],
        )

    return builder


def instance_credentials(args: CredentialsArgs, client: MetalCloudClient) -> str:
    instance, instance_array, infrastructure = _resolve(client, args.instance_id)
    builder = credentials_schema(instance, instance_array, infrastructure)
    return render_transposed_table(
        "Records",
        f"Instance {instance.instance_subdomain_permanent}",
        args.format,
        [builder.row],
        builder.schema,
    )


INSTANCE_COMMANDS: list[Command] = [
    Command(
        description="Control power an instance",
        subject="instance",
        alt_subject="inst",
        predicate="power_control",
        alt_predicate="pwr",
        init=_init_power_control,
        bind=_bind_power_control,
        execute=instance_power_control,
    ),
    Command(
        description="Show an instance's credentials",
        subject="instance",
        alt_subject="inst",
        predicate="credentials",
        alt_predicate="creds",
        init=_init_credentials,
        bind=_bind_credentials,
        execute=instance_credentials,
    ),
]
