"""Core / service layer — domain models, schemas and the API service.

Rules
-----
* No ``print()`` calls.
* No direct network or filesystem I/O.
* No imports from ``cli`` or ``infra``.
"""

from metalcloud_cli.core.api_service import POWER_OPERATIONS, MetalCloudService
from metalcloud_cli.core.models import (
    Infrastructure,
    Instance,
    InstanceArray,
    InstanceCredentials,
    Variable,
)
from metalcloud_cli.core.protocols import MetalCloudClient, RpcTransport
from metalcloud_cli.core.schema import FieldType, SchemaBuilder, SchemaField

__all__: list[str] = [
    "POWER_OPERATIONS",
    "FieldType",
    "Infrastructure",
    "Instance",
    "InstanceArray",
    "InstanceCredentials",
    "MetalCloudClient",
    "MetalCloudService",
    "RpcTransport",
    "SchemaBuilder",
    "SchemaField",
    "Variable",
]
