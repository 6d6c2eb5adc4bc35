"""Tests for MetalCloudService (core/api_service.py).

The :class:`RpcTransport` dependency is **mocked** — no network access.
These tests verify:

* Method names and parameters sent to the transport
* Raw-dict → domain-model parsing, including optional credential blocks
* Exception mapping (transport errors → our hierarchy)
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from metalcloud_cli.core.api_service import MetalCloudService
from metalcloud_cli.core.models import Instance
from metalcloud_cli.exceptions import ArgumentError, RemoteCallError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _fake_transport(result: Any | Exception) -> MagicMock:
    """Return a mock RpcTransport.

    If *result* is an exception, ``call`` raises it; otherwise returns it.
    """
    transport = MagicMock()
    if isinstance(result, Exception):
        transport.call.side_effect = result
    else:
        transport.call.return_value = result
    return transport


def _raw_instance(**credentials: Any) -> dict[str, Any]:
    return {
        "instance_id": 100,
        "instance_label": "instance-100",
        "instance_array_id": 10,
        "instance_subdomain_permanent": "instance-100.vanilla.bigstep.io",
        "instance_credentials": {
            "ip_addresses_public": [{"ip_human_readable": "84.40.58.10", "ip_type": "ipv4"}],
            "ip_addresses_private": [],
            **credentials,
        },
    }


# ---------------------------------------------------------------------------
# instance_get
# ---------------------------------------------------------------------------

class TestInstanceGet:
    def test_calls_transport(self) -> None:
        transport = _fake_transport(_raw_instance())
        MetalCloudService(transport).instance_get(100)
        transport.call.assert_called_once_with("instance_get", 100)

    def test_parses_fields(self) -> None:
        instance = MetalCloudService(_fake_transport(_raw_instance())).instance_get(100)
        assert isinstance(instance, Instance)
        assert instance.instance_array_id == 10
        assert instance.instance_subdomain_permanent == "instance-100.vanilla.bigstep.io"
        assert instance.instance_credentials.ip_addresses_public[0].ip_human_readable == (
            "84.40.58.10"
        )

    def test_absent_blocks_are_none(self) -> None:
        creds = MetalCloudService(_fake_transport(_raw_instance())).instance_get(1).instance_credentials
        assert creds.ssh is None
        assert creds.rdp is None
        assert creds.iscsi is None
        assert creds.shared_drives == ()

    def test_null_blocks_are_none(self) -> None:
        raw = _raw_instance(ssh=None, rdp=None, iscsi=None, shared_drives=[])
        creds = MetalCloudService(_fake_transport(raw)).instance_get(1).instance_credentials
        assert creds.ssh is None
        assert creds.shared_drives == ()

    def test_ssh_block(self) -> None:
        raw = _raw_instance(ssh={"username": "root", "initial_password": "pw", "port": "2222"})
        ssh = MetalCloudService(_fake_transport(raw)).instance_get(1).instance_credentials.ssh
        assert ssh is not None
        assert ssh.username == "root"
        assert ssh.port == 2222

    def test_shared_drives_object_is_walked_in_key_order(self) -> None:
        raw = _raw_instance(
            shared_drives={
                "drive-b": {"storage_ip_address": "10.0.0.2", "storage_port": 3260,
                            "target_iqn": "iqn.b", "lun_id": 2},
                "drive-a": {"storage_ip_address": "10.0.0.1", "storage_port": 3260,
                            "target_iqn": "iqn.a", "lun_id": 1},
            },
        )
        drives = MetalCloudService(_fake_transport(raw)).instance_get(1).instance_credentials.shared_drives
        assert [d.target_iqn for d in drives] == ["iqn.a", "iqn.b"]
        assert drives[0].lun_id == "1"

    def test_null_fields_fall_back_to_defaults(self) -> None:
        raw = _raw_instance(ssh={"username": None, "initial_password": "pw", "port": None})
        raw["instance_label"] = None
        raw["instance_array_id"] = None
        instance = MetalCloudService(_fake_transport(raw)).instance_get(1)
        assert instance.instance_label == ""
        assert instance.instance_array_id == 0
        ssh = instance.instance_credentials.ssh
        assert ssh is not None
        assert ssh.username == ""
        assert ssh.port == 22

    def test_zero_lun_id_is_kept(self) -> None:
        raw = _raw_instance(shared_drives=[{"target_iqn": "iqn.a", "lun_id": 0}])
        drives = MetalCloudService(_fake_transport(raw)).instance_get(1).instance_credentials.shared_drives
        assert drives[0].lun_id == "0"

    def test_malformed_field_raises_remote_call_error(self) -> None:
        raw = _raw_instance(ssh={"port": "not-a-port"})
        with pytest.raises(RemoteCallError, match="instance_get returned an unexpected data structure"):
            MetalCloudService(_fake_transport(raw)).instance_get(1)

    def test_non_object_result_raises(self) -> None:
        with pytest.raises(RemoteCallError, match="unexpected data structure"):
            MetalCloudService(_fake_transport([])).instance_get(1)


# ---------------------------------------------------------------------------
# Array / infrastructure
# ---------------------------------------------------------------------------

class TestHierarchy:
    def test_instance_array_get(self) -> None:
        transport = _fake_transport(
            {"instance_array_id": 10, "instance_array_label": "workers", "infrastructure_id": 1},
        )
        ia = MetalCloudService(transport).instance_array_get(10)
        transport.call.assert_called_once_with("instance_array_get", 10)
        assert ia.infrastructure_id == 1

    def test_infrastructure_get(self) -> None:
        transport = _fake_transport({"infrastructure_id": 1, "infrastructure_label": "demo"})
        infra = MetalCloudService(transport).infrastructure_get(1)
        transport.call.assert_called_once_with("infrastructure_get", 1)
        assert infra.infrastructure_label == "demo"

    def test_null_ids_and_labels(self) -> None:
        transport = _fake_transport(
            {"instance_array_id": None, "instance_array_label": None, "infrastructure_id": None},
        )
        ia = MetalCloudService(transport).instance_array_get(10)
        assert ia.instance_array_id == 0
        assert ia.instance_array_label == ""
        assert ia.infrastructure_id == 0


# ---------------------------------------------------------------------------
# Power
# ---------------------------------------------------------------------------

class TestPowerSet:
    @pytest.mark.parametrize("operation", ["on", "off", "reset", "soft"])
    def test_valid_operations(self, operation: str) -> None:
        transport = _fake_transport(None)
        MetalCloudService(transport).instance_server_power_set(100, operation)
        transport.call.assert_called_once_with("instance_server_power_set", 100, operation)

    def test_invalid_operation_rejected_before_call(self) -> None:
        transport = _fake_transport(None)
        with pytest.raises(ArgumentError):
            MetalCloudService(transport).instance_server_power_set(100, "sort")
        transport.call.assert_not_called()


# ---------------------------------------------------------------------------
# Variables
# ---------------------------------------------------------------------------

class TestVariables:
    def test_keyed_by_name(self) -> None:
        transport = _fake_transport(
            {"x": {"variable_id": 3, "variable_name": "x", "variable_usage": None}},
        )
        result = MetalCloudService(transport, user_email="a@b.c").variables()
        transport.call.assert_called_once_with("variables", "a@b.c")
        assert result["x"].variable_id == 3
        assert result["x"].variable_usage == ""

    def test_usage_is_forwarded(self) -> None:
        transport = _fake_transport([])
        assert MetalCloudService(transport, user_email="a@b.c").variables("workflow") == {}
        transport.call.assert_called_once_with("variables", "a@b.c", "workflow")


# ---------------------------------------------------------------------------
# Exception mapping
# ---------------------------------------------------------------------------

class TestExceptionMapping:
    def test_our_errors_propagate_unchanged(self) -> None:
        original = RemoteCallError("Instance not found.", code=-32000)
        with pytest.raises(RemoteCallError) as exc_info:
            MetalCloudService(_fake_transport(original)).instance_get(1)
        assert exc_info.value is original

    def test_unexpected_errors_are_wrapped(self) -> None:
        with pytest.raises(RemoteCallError, match="socket closed"):
            MetalCloudService(_fake_transport(OSError("socket closed"))).instance_get(1)
