"""Load balancer operations and types."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel

from iaas_client.models import OperationDef
from iaas_client.schema import INPUT_CONFIG, OUTPUT_CONFIG, element, param, wire
from iaas_client.service import Service
from iaas_client.services.tag import Tag


class LoadBalancer(BaseModel):
    model_config = OUTPUT_CONFIG

    create_time: Annotated[datetime | None, wire("create_time")] = None
    description: Annotated[str | None, wire("description")] = None
    is_applied: Annotated[int | None, wire("is_applied")] = None
    loadbalancer_id: Annotated[str | None, wire("loadbalancer_id")] = None
    loadbalancer_name: Annotated[str | None, wire("loadbalancer_name")] = None
    loadbalancer_type: Annotated[int | None, wire("loadbalancer_type")] = None
    node_count: Annotated[int | None, wire("node_count")] = None
    private_ips: Annotated[list[str] | None, wire("private_ips")] = None
    security_group_id: Annotated[str | None, wire("security_group_id")] = None
    status: Annotated[str | None, wire("status")] = None
    status_time: Annotated[datetime | None, wire("status_time")] = None
    tags: Annotated[list[Tag] | None, wire("tags")] = None
    transition_status: Annotated[str | None, wire("transition_status")] = None
    vxnet_id: Annotated[str | None, wire("vxnet_id")] = None


class DescribeLoadBalancersInput(BaseModel):
    model_config = INPUT_CONFIG

    limit: Annotated[int | None, param("limit", default=20)] = None
    loadbalancers: Annotated[list[str] | None, param("loadbalancers")] = None
    offset: Annotated[int | None, param("offset", default=0)] = None
    search_word: Annotated[str | None, param("search_word")] = None
    status: Annotated[list[str] | None, param("status")] = None
    tags: Annotated[list[str] | None, param("tags")] = None
    verbose: Annotated[int | None, param("verbose", default=0)] = None


class DescribeLoadBalancersOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    loadbalancer_set: Annotated[list[LoadBalancer] | None, element("loadbalancer_set")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None
    total_count: Annotated[int | None, element("total_count")] = None


class CreateServerCertificateInput(BaseModel):
    model_config = INPUT_CONFIG

    certificate_content: Annotated[str | None, param("certificate_content", required=True)] = None
    private_key: Annotated[str | None, param("private_key", required=True)] = None
    server_certificate_name: Annotated[str | None, param("server_certificate_name")] = None


class CreateServerCertificateOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None
    server_certificate_id: Annotated[str | None, element("server_certificate_id")] = None


DESCRIBE_LOAD_BALANCERS = OperationDef(
    action="DescribeLoadBalancers",
    input_type=DescribeLoadBalancersInput,
    output_type=DescribeLoadBalancersOutput,
)
# PEM bodies are too large for a query string
CREATE_SERVER_CERTIFICATE = OperationDef(
    action="CreateServerCertificate",
    method="POST",
    input_type=CreateServerCertificateInput,
    output_type=CreateServerCertificateOutput,
)


class LoadBalancerService(Service):
    name = "load_balancer"
    operations = (DESCRIBE_LOAD_BALANCERS, CREATE_SERVER_CERTIFICATE)

    def describe_load_balancers(
        self, input_value: DescribeLoadBalancersInput | None = None
    ) -> DescribeLoadBalancersOutput:
        return self.invoke(DESCRIBE_LOAD_BALANCERS, input_value)

    def create_server_certificate(
        self, input_value: CreateServerCertificateInput | None = None
    ) -> CreateServerCertificateOutput:
        return self.invoke(CREATE_SERVER_CERTIFICATE, input_value)
