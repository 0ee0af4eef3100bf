"""Tests for the operation catalog."""

import pytest

from iaas_client.catalog import REGISTRY, SERVICE_TYPES, actions, lookup
from iaas_client.schema import Placement, describe
from iaas_client.services.cache import CacheService
from iaas_client.services.zone import ZoneService


def test_every_service_operation_registered():
    for service_type in SERVICE_TYPES:
        for op_def in service_type.operations:
            assert REGISTRY[op_def.action].service_type is service_type


def test_lookup():
    entry = lookup("GetCacheMonitor")
    assert entry.service_type is CacheService
    assert entry.op_def.method == "GET"


def test_lookup_unknown():
    with pytest.raises(KeyError, match="Unknown action 'RunInstances'"):
        lookup("RunInstances")


def test_actions_sorted():
    names = actions()
    assert names == sorted(names)
    assert len(names) == len(REGISTRY)


def test_only_describe_zones_is_global():
    global_actions = [name for name, entry in REGISTRY.items() if not entry.op_def.zone_scoped]
    assert global_actions == ["DescribeZones"]
    assert REGISTRY["DescribeZones"].service_type is ZoneService


@pytest.mark.parametrize("action", sorted(REGISTRY))
def test_models_describe_cleanly(action):
    op_def = REGISTRY[action].op_def
    input_fields = describe(op_def.input_type).fields
    output_fields = describe(op_def.output_type).fields

    assert all(f.placement is Placement.REQUEST for f in input_fields)
    assert all(f.placement is Placement.RESPONSE for f in output_fields)
    assert {"action", "ret_code"} <= {f.wire_name for f in output_fields}
