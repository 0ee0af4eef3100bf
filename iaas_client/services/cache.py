"""Cache operations and types."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel

from iaas_client.models import OperationDef
from iaas_client.schema import INPUT_CONFIG, OUTPUT_CONFIG, element, param, wire
from iaas_client.service import Service
from iaas_client.services.monitor import MONITOR_STEPS, Meter
from iaas_client.services.tag import Tag


class CachePrivateIP(BaseModel):
    model_config = INPUT_CONFIG

    cache_node_id: Annotated[str | None, wire("cache_node_id")] = None
    cache_role: Annotated[str | None, wire("cache_role", allowed=["master", "slave"])] = None
    private_ips: Annotated[str | None, wire("private_ips")] = None


class CacheNode(BaseModel):
    model_config = OUTPUT_CONFIG

    alarm_status: Annotated[str | None, wire("alarm_status")] = None
    cache_id: Annotated[str | None, wire("cache_id")] = None
    cache_node_id: Annotated[str | None, wire("cache_node_id")] = None
    cache_node_name: Annotated[str | None, wire("cache_node_name")] = None
    cache_role: Annotated[str | None, wire("cache_role")] = None
    cache_type: Annotated[str | None, wire("cache_type")] = None
    create_time: Annotated[datetime | None, wire("create_time")] = None
    private_ip: Annotated[str | None, wire("private_ip")] = None
    slaveof: Annotated[str | None, wire("slaveof")] = None
    status: Annotated[str | None, wire("status")] = None
    status_time: Annotated[datetime | None, wire("status_time")] = None
    transition_status: Annotated[str | None, wire("transition_status")] = None


class VxNet(BaseModel):
    model_config = OUTPUT_CONFIG

    available_ip_count: Annotated[int | None, wire("available_ip_count")] = None
    create_time: Annotated[datetime | None, wire("create_time")] = None
    description: Annotated[str | None, wire("description")] = None
    instance_ids: Annotated[list[str] | None, wire("instance_ids")] = None
    owner: Annotated[str | None, wire("owner")] = None
    tags: Annotated[list[Tag] | None, wire("tags")] = None
    vpc_router_id: Annotated[str | None, wire("vpc_router_id")] = None
    vxnet_id: Annotated[str | None, wire("vxnet_id")] = None
    vxnet_name: Annotated[str | None, wire("vxnet_name")] = None
    vxnet_type: Annotated[int | None, wire("vxnet_type")] = None


class Cache(BaseModel):
    model_config = OUTPUT_CONFIG

    auto_backup_time: Annotated[int | None, wire("auto_backup_time")] = None
    cache_class: Annotated[int | None, wire("cache_class")] = None
    cache_id: Annotated[str | None, wire("cache_id")] = None
    cache_name: Annotated[str | None, wire("cache_name")] = None
    cache_parameter_group_id: Annotated[str | None, wire("cache_parameter_group_id")] = None
    cache_port: Annotated[int | None, wire("cache_port")] = None
    cache_size: Annotated[int | None, wire("cache_size")] = None
    cache_type: Annotated[str | None, wire("cache_type")] = None
    cache_version: Annotated[str | None, wire("cache_version")] = None
    create_time: Annotated[datetime | None, wire("create_time")] = None
    description: Annotated[str | None, wire("description")] = None
    is_applied: Annotated[int | None, wire("is_applied")] = None
    master_count: Annotated[int | None, wire("master_count")] = None
    max_memory: Annotated[int | None, wire("max_memory")] = None
    node_count: Annotated[int | None, wire("node_count")] = None
    nodes: Annotated[list[CacheNode] | None, wire("nodes")] = None
    replicate_count: Annotated[int | None, wire("replicate_count")] = None
    security_group_id: Annotated[str | None, wire("security_group_id")] = None
    status: Annotated[str | None, wire("status")] = None
    status_time: Annotated[datetime | None, wire("status_time")] = None
    sub_code: Annotated[int | None, wire("sub_code")] = None
    tags: Annotated[list[Tag] | None, wire("tags")] = None
    transition_status: Annotated[str | None, wire("transition_status")] = None
    vxnet: Annotated[VxNet | None, wire("vxnet")] = None


# =============================================================================
# Inputs and outputs
# =============================================================================


class AddCacheNodesInput(BaseModel):
    model_config = INPUT_CONFIG

    cache: Annotated[str | None, param("cache", required=True)] = None
    node_count: Annotated[int | None, param("node_count", required=True)] = None
    private_ips: Annotated[list[CachePrivateIP] | None, param("private_ips")] = None


class AddCacheNodesOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    cache_nodes: Annotated[list[str] | None, element("cache_nodes")] = None
    job_id: Annotated[str | None, element("job_id")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None


class CreateCacheInput(BaseModel):
    model_config = INPUT_CONFIG

    auto_backup_time: Annotated[int | None, param("auto_backup_time", default=-1)] = None
    cache_class: Annotated[int | None, param("cache_class", allowed=[0, 1])] = None
    cache_name: Annotated[str | None, param("cache_name")] = None
    cache_parameter_group: Annotated[str | None, param("cache_parameter_group")] = None
    cache_size: Annotated[int | None, param("cache_size", required=True)] = None
    cache_type: Annotated[str | None, param("cache_type", required=True)] = None
    master_count: Annotated[int | None, param("master_count")] = None
    network_type: Annotated[int | None, param("network_type")] = None
    node_count: Annotated[int | None, param("node_count", default=1)] = None
    private_ips: Annotated[list[CachePrivateIP] | None, param("private_ips")] = None
    replicate_count: Annotated[int | None, param("replicate_count")] = None
    vxnet: Annotated[str | None, param("vxnet", required=True)] = None


class CreateCacheOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    cache_id: Annotated[str | None, element("cache_id")] = None
    cache_nodes: Annotated[list[str] | None, element("cache_nodes")] = None
    job_id: Annotated[str | None, element("job_id")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None


class DeleteCacheNodesInput(BaseModel):
    model_config = INPUT_CONFIG

    cache: Annotated[str | None, param("cache", required=True)] = None
    cache_nodes: Annotated[list[str] | None, param("cache_nodes", required=True)] = None


class DeleteCacheNodesOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    cache_nodes: Annotated[list[str] | None, element("cache_nodes")] = None
    job_id: Annotated[str | None, element("job_id")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None


class DeleteCachesInput(BaseModel):
    model_config = INPUT_CONFIG

    caches: Annotated[list[str] | None, param("caches", required=True)] = None


class DeleteCachesOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    cache_ids: Annotated[list[str] | None, element("cache_ids")] = None
    job_id: Annotated[str | None, element("job_id")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None


class DescribeCachesInput(BaseModel):
    model_config = INPUT_CONFIG

    cache_type: Annotated[list[str] | None, param("cache_type")] = None
    caches: Annotated[list[str] | None, param("caches")] = None
    limit: Annotated[int | None, param("limit", default=20)] = None
    offset: Annotated[int | None, param("offset", default=0)] = None
    search_word: Annotated[str | None, param("search_word")] = None
    status: Annotated[list[str] | None, param("status")] = None
    tags: Annotated[list[str] | None, param("tags")] = None
    verbose: Annotated[int | None, param("verbose")] = None


class DescribeCachesOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    cache_set: Annotated[list[Cache] | None, element("cache_set")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None
    total_count: Annotated[int | None, element("total_count")] = None


class GetCacheMonitorInput(BaseModel):
    model_config = INPUT_CONFIG

    end_time: Annotated[datetime | None, param("end_time", required=True)] = None
    meters: Annotated[list[str] | None, param("meters", required=True)] = None
    resource: Annotated[str | None, param("resource", required=True)] = None
    start_time: Annotated[datetime | None, param("start_time", required=True)] = None
    step: Annotated[str | None, param("step", required=True, allowed=MONITOR_STEPS)] = None


class GetCacheMonitorOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    meter_set: Annotated[list[Meter] | None, element("meter_set")] = None
    resource_id: Annotated[str | None, element("resource_id")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None


ADD_CACHE_NODES = OperationDef(
    action="AddCacheNodes", input_type=AddCacheNodesInput, output_type=AddCacheNodesOutput
)
CREATE_CACHE = OperationDef(
    action="CreateCache", input_type=CreateCacheInput, output_type=CreateCacheOutput
)
DELETE_CACHE_NODES = OperationDef(
    action="DeleteCacheNodes", input_type=DeleteCacheNodesInput, output_type=DeleteCacheNodesOutput
)
DELETE_CACHES = OperationDef(
    action="DeleteCaches", input_type=DeleteCachesInput, output_type=DeleteCachesOutput
)
DESCRIBE_CACHES = OperationDef(
    action="DescribeCaches", input_type=DescribeCachesInput, output_type=DescribeCachesOutput
)
GET_CACHE_MONITOR = OperationDef(
    action="GetCacheMonitor", input_type=GetCacheMonitorInput, output_type=GetCacheMonitorOutput
)


class CacheService(Service):
    name = "cache"
    operations = (
        ADD_CACHE_NODES,
        CREATE_CACHE,
        DELETE_CACHE_NODES,
        DELETE_CACHES,
        DESCRIBE_CACHES,
        GET_CACHE_MONITOR,
    )

    def add_cache_nodes(self, input_value: AddCacheNodesInput | None = None) -> AddCacheNodesOutput:
        return self.invoke(ADD_CACHE_NODES, input_value)

    def create_cache(self, input_value: CreateCacheInput | None = None) -> CreateCacheOutput:
        return self.invoke(CREATE_CACHE, input_value)

    def delete_cache_nodes(
        self, input_value: DeleteCacheNodesInput | None = None
    ) -> DeleteCacheNodesOutput:
        return self.invoke(DELETE_CACHE_NODES, input_value)

    def delete_caches(self, input_value: DeleteCachesInput | None = None) -> DeleteCachesOutput:
        return self.invoke(DELETE_CACHES, input_value)

    def describe_caches(self, input_value: DescribeCachesInput | None = None) -> DescribeCachesOutput:
        return self.invoke(DESCRIBE_CACHES, input_value)

    def get_cache_monitor(
        self, input_value: GetCacheMonitorInput | None = None
    ) -> GetCacheMonitorOutput:
        return self.invoke(GET_CACHE_MONITOR, input_value)
