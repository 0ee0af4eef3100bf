"""Service - Base class for groups of related API operations.

A service binds the shared Config, a Dispatcher and its scope (the zone)
and turns OperationDefs into calls. Subclasses only declare their
OperationDefs and thin typed methods.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel

from iaas_client.dispatcher import Dispatcher
from iaas_client.errors import ConfigError
from iaas_client.models import Config, Operation, OperationDef, SignedRequest
from iaas_client.request import Request


class Service:
    """Operations sharing one configuration and zone."""

    name: ClassVar[str] = ""
    zone_scoped: ClassVar[bool] = True
    operations: ClassVar[tuple[OperationDef, ...]] = ()

    def __init__(self, config: Config, dispatcher: Dispatcher, zone: str | None = None) -> None:
        """Initialize the service.

        Args:
            config: Shared read-only configuration.
            dispatcher: Transport used for every call.
            zone: Zone for zone-scoped operations; falls back to config.zone.

        Raises:
            ConfigError: If the service is zone-scoped and no zone is known.
        """
        zone = zone or config.zone
        if self.zone_scoped and not zone:
            raise ConfigError(f"{type(self).__name__} requires a zone")
        self.config = config
        self.zone = zone
        self._dispatcher = dispatcher

    def __repr__(self) -> str:
        return f"{type(self).__name__}(zone={self.zone!r})"

    def properties(self, op_def: OperationDef) -> dict[str, str]:
        if op_def.zone_scoped and self.zone:
            return {"zone": self.zone}
        return {}

    def operation(self, op_def: OperationDef) -> Operation:
        """Create the per-call Operation for a catalogue entry."""
        return Operation(
            action=op_def.action,
            method=op_def.method,
            config=self.config,
            properties=self.properties(op_def),
            idempotent=op_def.idempotent,
        )

    def request(self, op_def: OperationDef, input_value: BaseModel | None = None) -> Request[Any]:
        if input_value is None:
            input_value = op_def.input_type()
        elif not isinstance(input_value, op_def.input_type):
            raise TypeError(
                f"{op_def.action} expects {op_def.input_type.__name__}, "
                f"got {type(input_value).__name__}"
            )
        return Request(self.operation(op_def), input_value, op_def.output_type, self._dispatcher)

    def invoke(
        self,
        op_def: OperationDef,
        input_value: BaseModel | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Run one operation and return its Output model."""
        return self.request(op_def, input_value).send(timeout=timeout)

    def build(
        self,
        op_def: OperationDef,
        input_value: BaseModel | None = None,
        timestamp: datetime | None = None,
    ) -> SignedRequest:
        """Validate, marshal and sign an operation without sending it."""
        return self.request(op_def, input_value).build(timestamp=timestamp)
