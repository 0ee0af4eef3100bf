"""Client - Explicit factory for services.

    with IaaSService(load_user_config()) as iaas:
        caches = iaas.cache("pek3a").describe_caches()

There is no process-wide default client; every service is built from the
Config and zone passed in here.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, TypeVar

import httpx
import pydantic

from iaas_client.catalog import lookup
from iaas_client.dispatcher import Dispatcher
from iaas_client.errors import ClientValidationError
from iaas_client.models import Config, SignedRequest
from iaas_client.service import Service
from iaas_client.services.cache import CacheService
from iaas_client.services.cluster import ClusterService
from iaas_client.services.job import JobService
from iaas_client.services.load_balancer import LoadBalancerService
from iaas_client.services.monitor import MonitorService
from iaas_client.services.tag import TagService
from iaas_client.services.user_data import UserDataService
from iaas_client.services.zone import DescribeZonesInput, DescribeZonesOutput, ZoneService

logger = logging.getLogger(__name__)

ServiceT = TypeVar("ServiceT", bound=Service)


class IaaSService:
    """Entry point binding one Config to one Dispatcher.

    Owns the dispatcher (and closes it) only when it created it.
    """

    def __init__(
        self,
        config: Config,
        dispatcher: Dispatcher | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        self._owns_dispatcher = dispatcher is None
        self._dispatcher = dispatcher or Dispatcher(config, transport=transport)

    def __enter__(self) -> IaaSService:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_dispatcher:
            self._dispatcher.close()

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    def service(self, service_type: type[ServiceT], zone: str | None = None) -> ServiceT:
        """Build a service of the given type scoped to zone (or config.zone)."""
        return service_type(self.config, self._dispatcher, zone=zone)

    def cache(self, zone: str | None = None) -> CacheService:
        return self.service(CacheService, zone)

    def cluster(self, zone: str | None = None) -> ClusterService:
        return self.service(ClusterService, zone)

    def job(self, zone: str | None = None) -> JobService:
        return self.service(JobService, zone)

    def load_balancer(self, zone: str | None = None) -> LoadBalancerService:
        return self.service(LoadBalancerService, zone)

    def monitor(self, zone: str | None = None) -> MonitorService:
        return self.service(MonitorService, zone)

    def tag(self, zone: str | None = None) -> TagService:
        return self.service(TagService, zone)

    def user_data(self, zone: str | None = None) -> UserDataService:
        return self.service(UserDataService, zone)

    def describe_zones(self, input_value: DescribeZonesInput | None = None) -> DescribeZonesOutput:
        return self.service(ZoneService).describe_zones(input_value)

    def call(self, action: str, zone: str | None = None, **fields: Any) -> Any:
        """Invoke any catalogued action by name.

        Args:
            action: API action name, e.g. DescribeCaches.
            zone: Zone for zone-scoped actions; falls back to config.zone.
            **fields: Input model fields, by attribute name.

        Raises:
            KeyError: If the action is unknown.
            ClientValidationError: If the fields do not fit the Input model.
        """
        service, op_def, input_value = self._resolve(action, zone, fields)
        return service.invoke(op_def, input_value)

    def build_call(
        self,
        action: str,
        zone: str | None = None,
        timestamp: datetime | None = None,
        **fields: Any,
    ) -> SignedRequest:
        """Like call(), but stop after signing."""
        service, op_def, input_value = self._resolve(action, zone, fields)
        return service.build(op_def, input_value, timestamp=timestamp)

    def _resolve(self, action: str, zone: str | None, fields: dict[str, Any]) -> tuple[Service, Any, Any]:
        entry = lookup(action)
        try:
            input_value = entry.op_def.input_type.model_validate(fields)
        except pydantic.ValidationError as e:
            raise ClientValidationError(f"Invalid input for {action}: {e}") from e
        service = self.service(entry.service_type, zone)
        logger.debug("Resolved %s to %s", action, type(service).__name__)
        return service, entry.op_def, input_value
