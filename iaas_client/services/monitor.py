"""Monitor operations and types."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel

from iaas_client.models import OperationDef
from iaas_client.schema import INPUT_CONFIG, OUTPUT_CONFIG, element, param, wire
from iaas_client.service import Service

MONITOR_STEPS = ("5m", "15m", "2h", "1d")


class Meter(BaseModel):
    model_config = OUTPUT_CONFIG

    # Samples are heterogeneous (numbers, [timestamp, value] pairs, dicts)
    data: Annotated[Any, wire("data")] = None
    data_set: Annotated[list[Any] | None, wire("data_set")] = None
    meter_id: Annotated[str | None, wire("meter_id")] = None
    sequence: Annotated[int | None, wire("sequence")] = None
    vxnet_id: Annotated[str | None, wire("vxnet_id")] = None


class GetMonitorInput(BaseModel):
    model_config = INPUT_CONFIG

    end_time: Annotated[datetime | None, param("end_time")] = None
    meters: Annotated[list[str] | None, param("meters")] = None
    resource: Annotated[str | None, param("resource")] = None
    start_time: Annotated[datetime | None, param("start_time")] = None
    step: Annotated[str | None, param("step", allowed=MONITOR_STEPS)] = None


class GetMonitorOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    meter_set: Annotated[list[Meter] | None, element("meter_set")] = None
    resource_id: Annotated[str | None, element("resource_id")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None


GET_MONITOR = OperationDef(action="GetMonitor", input_type=GetMonitorInput, output_type=GetMonitorOutput)


class MonitorService(Service):
    name = "monitor"
    operations = (GET_MONITOR,)

    def get_monitor(self, input_value: GetMonitorInput | None = None) -> GetMonitorOutput:
        return self.invoke(GET_MONITOR, input_value)
