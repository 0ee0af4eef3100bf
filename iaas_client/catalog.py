"""Catalog - Registry of every known operation, keyed by action name."""

from __future__ import annotations

from dataclasses import dataclass

from iaas_client.models import OperationDef
from iaas_client.service import Service
from iaas_client.services.cache import CacheService
from iaas_client.services.cluster import ClusterService
from iaas_client.services.job import JobService
from iaas_client.services.load_balancer import LoadBalancerService
from iaas_client.services.monitor import MonitorService
from iaas_client.services.tag import TagService
from iaas_client.services.user_data import UserDataService
from iaas_client.services.zone import ZoneService

SERVICE_TYPES: tuple[type[Service], ...] = (
    CacheService,
    ClusterService,
    JobService,
    LoadBalancerService,
    MonitorService,
    TagService,
    UserDataService,
    ZoneService,
)


@dataclass(frozen=True)
class CatalogEntry:
    """An operation and the service that runs it."""

    service_type: type[Service]
    op_def: OperationDef


def _build_registry() -> dict[str, CatalogEntry]:
    registry: dict[str, CatalogEntry] = {}
    for service_type in SERVICE_TYPES:
        for op_def in service_type.operations:
            if op_def.action in registry:
                raise ValueError(f"Duplicate action in catalog: {op_def.action}")
            registry[op_def.action] = CatalogEntry(service_type, op_def)
    return registry


REGISTRY: dict[str, CatalogEntry] = _build_registry()


def lookup(action: str) -> CatalogEntry:
    """Return the catalog entry for an action.

    Raises:
        KeyError: If the action is not registered.
    """
    try:
        return REGISTRY[action]
    except KeyError:
        raise KeyError(f"Unknown action '{action}'") from None


def actions() -> list[str]:
    return sorted(REGISTRY)
