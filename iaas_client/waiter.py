"""Waiter - Polls asynchronous operations until they settle.

Mutating calls return a job_id and finish in the background. These helpers
poll DescribeJobs or a Describe* call until the job completes or the
resource reaches a status. Transport, service and decode failures while
polling are logged and polling continues. Configuration and validation
errors propagate at once.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from iaas_client.errors import ErrorKind, IaaSError, JobFailedError, WaitTimeoutError, classify
from iaas_client.services.cache import CacheService, DescribeCachesInput
from iaas_client.services.job import (
    JOB_DONE_WITH_FAILURE,
    JOB_FAILED,
    JOB_PENDING,
    JOB_SUCCESSFUL,
    JOB_WORKING,
    DescribeJobsInput,
    JobService,
)
from iaas_client.services.load_balancer import DescribeLoadBalancersInput, LoadBalancerService

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 180.0
DEFAULT_INTERVAL = 10.0
MAX_DESCRIBE_ERRORS = 3

_TRANSIENT_KINDS = (ErrorKind.TRANSPORT, ErrorKind.SERVICE, ErrorKind.DECODE)


def wait_for(
    predicate: Callable[[], bool],
    timeout: float = DEFAULT_TIMEOUT,
    interval: float = DEFAULT_INTERVAL,
) -> None:
    """Call predicate every `interval` seconds until it returns True.

    Exceptions raised by the predicate propagate immediately.

    Raises:
        WaitTimeoutError: If the predicate is still False after `timeout` seconds.
    """
    deadline = time.monotonic() + timeout
    while True:
        if predicate():
            return
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise WaitTimeoutError(f"Condition not met within {timeout}s")
        time.sleep(min(interval, remaining))


def wait_job(
    job_service: JobService,
    job_id: str,
    timeout: float = DEFAULT_TIMEOUT,
    interval: float = DEFAULT_INTERVAL,
) -> None:
    """Wait until a job is successful.

    Raises:
        JobFailedError: The job failed or does not exist.
        WaitTimeoutError: The job is still pending/working at the deadline.
    """
    logger.debug("Waiting for job %s", job_id)

    def job_done() -> bool:
        try:
            output = job_service.describe_jobs(DescribeJobsInput(jobs=[job_id]))
        except IaaSError as e:
            if classify(e) not in _TRANSIENT_KINDS:
                raise
            # Network or API trouble says nothing about the job itself
            logger.warning("DescribeJobs for %s failed: %s", job_id, e)
            return False

        if not output.job_set:
            raise JobFailedError(job_id, "not found")
        status = output.job_set[0].status
        if status in (JOB_PENDING, JOB_WORKING):
            return False
        if status == JOB_SUCCESSFUL:
            return True
        if status in (JOB_FAILED, JOB_DONE_WITH_FAILURE):
            raise JobFailedError(job_id, status)

        logger.error("Unknown status %r for job %s", status, job_id)
        return False

    wait_for(job_done, timeout=timeout, interval=interval)
    logger.debug("Job %s finished", job_id)


def wait_status(
    describe: Callable[[str], Any],
    resource_id: str,
    status: str,
    timeout: float = DEFAULT_TIMEOUT,
    interval: float = DEFAULT_INTERVAL,
) -> Any:
    """Wait until a resource reports `status` with no transition in progress.

    Args:
        describe: Returns the resource model for an id (or None if not found).
        resource_id: Resource to poll.
        status: Target status, e.g. "active".

    Returns:
        The resource as last described.

    Raises:
        IaaSError: describe failed more than three times in a row.
        WaitTimeoutError: The status was not reached in time.
    """
    logger.debug("Waiting for %s to become %s", resource_id, status)
    errors = 0
    found: list[Any] = []

    def reached() -> bool:
        nonlocal errors
        try:
            resource = describe(resource_id)
        except IaaSError as e:
            if classify(e) not in _TRANSIENT_KINDS:
                raise
            errors += 1
            logger.error("Describe %s failed (%d): %s", resource_id, errors, e)
            if errors > MAX_DESCRIBE_ERRORS:
                raise
            return False

        errors = 0
        if resource is None or resource.status != status:
            return False
        if resource.transition_status:
            return False
        found.append(resource)
        return True

    wait_for(reached, timeout=timeout, interval=interval)
    logger.debug("%s is %s", resource_id, status)
    return found[-1]


def describe_cache(cache_service: CacheService) -> Callable[[str], Any]:
    """Describe callable for wait_status over caches."""

    def describe(cache_id: str) -> Any:
        output = cache_service.describe_caches(DescribeCachesInput(caches=[cache_id]))
        return output.cache_set[0] if output.cache_set else None

    return describe


def describe_load_balancer(lb_service: LoadBalancerService) -> Callable[[str], Any]:
    """Describe callable for wait_status over load balancers."""

    def describe(loadbalancer_id: str) -> Any:
        output = lb_service.describe_load_balancers(
            DescribeLoadBalancersInput(loadbalancers=[loadbalancer_id])
        )
        return output.loadbalancer_set[0] if output.loadbalancer_set else None

    return describe
