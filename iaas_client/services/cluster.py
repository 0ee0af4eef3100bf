"""Cluster operations and types.

Clusters carry app-defined documents (app_info, endpoints, service
definitions) whose shape the API does not fix; those fields are opaque.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel

from iaas_client.models import OperationDef
from iaas_client.schema import INPUT_CONFIG, OUTPUT_CONFIG, element, param, wire
from iaas_client.service import Service
from iaas_client.services.cache import VxNet


class ClusterNode(BaseModel):
    model_config = OUTPUT_CONFIG

    advanced_actions: Annotated[str | None, wire("advanced_actions")] = None
    alarm_status: Annotated[str | None, wire("alarm_status")] = None
    app_id: Annotated[str | None, wire("app_id")] = None
    app_version: Annotated[str | None, wire("app_version")] = None
    cluster_id: Annotated[str | None, wire("cluster_id")] = None
    cpu: Annotated[int | None, wire("cpu")] = None
    create_time: Annotated[datetime | None, wire("create_time")] = None
    custom_service: Annotated[Any, wire("custom_service")] = None
    eip: Annotated[str | None, wire("eip")] = None
    health_check: Annotated[Any, wire("health_check")] = None
    health_status: Annotated[str | None, wire("health_status")] = None
    image_id: Annotated[str | None, wire("image_id")] = None
    instance_id: Annotated[str | None, wire("instance_id")] = None
    memory: Annotated[int | None, wire("memory")] = None
    name: Annotated[str | None, wire("name")] = None
    node_id: Annotated[str | None, wire("node_id")] = None
    owner: Annotated[str | None, wire("owner")] = None
    private_ip: Annotated[str | None, wire("private_ip")] = None
    role: Annotated[str | None, wire("role")] = None
    server_id: Annotated[int | None, wire("server_id")] = None
    status: Annotated[str | None, wire("status")] = None
    status_time: Annotated[datetime | None, wire("status_time")] = None
    storage_size: Annotated[int | None, wire("storage_size")] = None
    transition_status: Annotated[str | None, wire("transition_status")] = None
    vxnet_id: Annotated[str | None, wire("vxnet_id")] = None


class Cluster(BaseModel):
    model_config = OUTPUT_CONFIG

    advanced_actions: Annotated[dict[str, str | None] | None, wire("advanced_actions")] = None
    app_id: Annotated[str | None, wire("app_id")] = None
    app_info: Annotated[Any, wire("app_info")] = None
    app_version: Annotated[str | None, wire("app_version")] = None
    app_version_info: Annotated[Any, wire("app_version_info")] = None
    auto_backup_time: Annotated[int | None, wire("auto_backup_time")] = None
    backup: Annotated[dict[str, bool | None] | None, wire("backup")] = None
    cluster_id: Annotated[str | None, wire("cluster_id")] = None
    cluster_type: Annotated[int | None, wire("cluster_type")] = None
    console_id: Annotated[str | None, wire("console_id")] = None
    create_time: Annotated[datetime | None, wire("create_time")] = None
    debug: Annotated[bool | None, wire("debug")] = None
    description: Annotated[str | None, wire("description")] = None
    endpoints: Annotated[Any, wire("endpoints")] = None
    links: Annotated[dict[str, str | None] | None, wire("links")] = None
    name: Annotated[str | None, wire("name")] = None
    node_count: Annotated[int | None, wire("node_count")] = None
    nodes: Annotated[list[ClusterNode] | None, wire("nodes")] = None
    owner: Annotated[str | None, wire("owner")] = None
    role_count: Annotated[dict[str, int | None] | None, wire("role_count")] = None
    roles: Annotated[list[str] | None, wire("roles")] = None
    security_group_id: Annotated[str | None, wire("security_group_id")] = None
    status: Annotated[str | None, wire("status")] = None
    status_time: Annotated[datetime | None, wire("status_time")] = None
    sub_code: Annotated[int | None, wire("sub_code")] = None
    transition_status: Annotated[str | None, wire("transition_status")] = None
    upgrade_status: Annotated[str | None, wire("upgrade_status")] = None
    upgrade_time: Annotated[datetime | None, wire("upgrade_time")] = None
    vxnet: Annotated[VxNet | None, wire("vxnet")] = None


class DescribeClustersInput(BaseModel):
    model_config = INPUT_CONFIG

    app_versions: Annotated[list[str] | None, param("app_versions")] = None
    apps: Annotated[list[str] | None, param("apps")] = None
    cfgmgmt_id: Annotated[str | None, param("cfgmgmt_id")] = None
    clusters: Annotated[list[str] | None, param("clusters")] = None
    console: Annotated[str | None, param("console")] = None
    external_cluster_id: Annotated[str | None, param("external_cluster_id")] = None
    limit: Annotated[int | None, param("limit")] = None
    link: Annotated[str | None, param("link")] = None
    name: Annotated[str | None, param("name")] = None
    offset: Annotated[int | None, param("offset")] = None
    owner: Annotated[str | None, param("owner")] = None
    reverse: Annotated[int | None, param("reverse")] = None
    role: Annotated[str | None, param("role")] = None
    scope: Annotated[str | None, param("scope", allowed=["all", "cfgmgmt"])] = None
    search_word: Annotated[str | None, param("search_word")] = None
    sort_key: Annotated[str | None, param("sort_key")] = None
    status: Annotated[str | None, param("status")] = None
    transition_status: Annotated[str | None, param("transition_status")] = None
    users: Annotated[list[str] | None, param("users")] = None
    verbose: Annotated[int | None, param("verbose")] = None
    vxnet: Annotated[str | None, param("vxnet")] = None


class DescribeClustersOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    cluster_set: Annotated[list[Cluster] | None, element("cluster_set")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None
    total_count: Annotated[int | None, element("total_count")] = None


class StartClustersInput(BaseModel):
    model_config = INPUT_CONFIG

    clusters: Annotated[list[str] | None, param("clusters", required=True)] = None


class StartClustersOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    job_ids: Annotated[dict[str, str | None] | None, element("job_ids")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None


class StopClustersInput(BaseModel):
    model_config = INPUT_CONFIG

    clusters: Annotated[list[str] | None, param("clusters", required=True)] = None
    force: Annotated[int | None, param("force")] = None


class StopClustersOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    job_ids: Annotated[dict[str, str | None] | None, element("job_ids")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None


DESCRIBE_CLUSTERS = OperationDef(
    action="DescribeClusters", input_type=DescribeClustersInput, output_type=DescribeClustersOutput
)
START_CLUSTERS = OperationDef(
    action="StartClusters", input_type=StartClustersInput, output_type=StartClustersOutput
)
STOP_CLUSTERS = OperationDef(
    action="StopClusters", input_type=StopClustersInput, output_type=StopClustersOutput
)


class ClusterService(Service):
    name = "cluster"
    operations = (DESCRIBE_CLUSTERS, START_CLUSTERS, STOP_CLUSTERS)

    def describe_clusters(
        self, input_value: DescribeClustersInput | None = None
    ) -> DescribeClustersOutput:
        return self.invoke(DESCRIBE_CLUSTERS, input_value)

    def start_clusters(self, input_value: StartClustersInput | None = None) -> StartClustersOutput:
        return self.invoke(START_CLUSTERS, input_value)

    def stop_clusters(self, input_value: StopClustersInput | None = None) -> StopClustersOutput:
        return self.invoke(STOP_CLUSTERS, input_value)
