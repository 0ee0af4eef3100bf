"""Job operations and types."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel

from iaas_client.models import OperationDef
from iaas_client.schema import INPUT_CONFIG, OUTPUT_CONFIG, element, param, wire
from iaas_client.service import Service

JOB_PENDING = "pending"
JOB_WORKING = "working"
JOB_FAILED = "failed"
JOB_SUCCESSFUL = "successful"
JOB_DONE_WITH_FAILURE = "done with failure"


class Job(BaseModel):
    model_config = OUTPUT_CONFIG

    create_time: Annotated[datetime | None, wire("create_time")] = None
    job_action: Annotated[str | None, wire("job_action")] = None
    job_id: Annotated[str | None, wire("job_id")] = None
    owner: Annotated[str | None, wire("owner")] = None
    resource_ids: Annotated[str | None, wire("resource_ids")] = None
    status: Annotated[str | None, wire("status")] = None
    status_time: Annotated[datetime | None, wire("status_time")] = None


class DescribeJobsInput(BaseModel):
    model_config = INPUT_CONFIG

    jobs: Annotated[list[str] | None, param("jobs")] = None
    limit: Annotated[int | None, param("limit", default=20)] = None
    offset: Annotated[int | None, param("offset", default=0)] = None
    status: Annotated[list[str] | None, param("status")] = None
    verbose: Annotated[int | None, param("verbose", default=0, allowed=[0])] = None


class DescribeJobsOutput(BaseModel):
    model_config = OUTPUT_CONFIG

    message: Annotated[str | None, element("message")] = None
    action: Annotated[str | None, element("action")] = None
    job_set: Annotated[list[Job] | None, element("job_set")] = None
    ret_code: Annotated[int | None, element("ret_code")] = None
    total_count: Annotated[int | None, element("total_count")] = None


DESCRIBE_JOBS = OperationDef(
    action="DescribeJobs", input_type=DescribeJobsInput, output_type=DescribeJobsOutput
)


class JobService(Service):
    name = "job"
    operations = (DESCRIBE_JOBS,)

    def describe_jobs(self, input_value: DescribeJobsInput | None = None) -> DescribeJobsOutput:
        return self.invoke(DESCRIBE_JOBS, input_value)
