"""Zone listing: the only account-wide (unscoped) operation."""

from typing import Annotated

from pydantic import BaseModel

from iaas_client.models import OperationDef
from iaas_client.schema import INPUT_CONFIG, OUTPUT_CONFIG, element, param, wire
from iaas_client.service import Service


class Zone(BaseModel):
    model_config = OUTPUT_CONFIG

    status: Annotated[str | None, wire("status")] = None
    zone_id: Annotated[str | None, wire("zone_id")] = None


class DescribeZonesInput(BaseModel):
    model_config = INPUT_CONFIG

    status: Annotated[list[str] | None, param("status")] = None
    zones: Annotated[list[str] | None, param("zones")] = None


class DescribeZonesOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None
    total_count: Annotated[int | None, element("total_count")] = None
    zone_set: Annotated[list[Zone] | None, element("zone_set")] = None


DESCRIBE_ZONES = OperationDef(
    action="DescribeZones",
    input_type=DescribeZonesInput,
    output_type=DescribeZonesOutput,
    zone_scoped=False,
)


class ZoneService(Service):
    name = "zone"
    zone_scoped = False
    operations = (DESCRIBE_ZONES,)

    def describe_zones(self, input_value: DescribeZonesInput | None = None) -> DescribeZonesOutput:
        return self.invoke(DESCRIBE_ZONES, input_value)
