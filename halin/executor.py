"""
Fan-out of a single operation across every member of a cluster.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional

from halin.member import ClusterMember
from halin.reporting import ErrorReporter, safe
from halin.result import (
    AggregatedResult,
    ClusterOpFailure,
    ClusterOpResult,
    ClusterOpSuccess,
    cluster_op_failure,
    cluster_op_success,
    package,
)

logger = logging.getLogger(__name__)


MemberOperation = Callable[[ClusterMember], Awaitable[Any]]


async def settle(
    member: ClusterMember,
    operation: MemberOperation,
    reporter: Optional[ErrorReporter] = None,
) -> ClusterOpResult:
    """
    Run ``operation`` against ``member`` and capture its outcome.

    Never raises (other than cancellation): any error becomes a
    ``ClusterOpFailure`` and is reported.
    """
    try:
        value = await operation(member)
    except Exception as e:
        logger.debug("[%s] Operation failed", member.address, exc_info=True)
        safe(reporter).report_error(e)
        return cluster_op_failure(member, e)
    if isinstance(value, (ClusterOpSuccess, ClusterOpFailure)):
        return value
    return cluster_op_success(member, value)


async def map_across_cluster(
    members: Iterable[ClusterMember],
    operation: MemberOperation,
    reporter: Optional[ErrorReporter] = None,
) -> AggregatedResult:
    reporter = safe(reporter)
    # Every branch is scheduled before any is awaited.
    tasks = [
        asyncio.ensure_future(settle(member, operation, reporter))
        for member in members
    ]
    results = await asyncio.gather(*tasks)
    aggregated = package(results)
    logger.debug(
        "Fan-out across %d member(s) settled; success=%s",
        len(aggregated),
        aggregated.success,
    )
    return aggregated


async def map_query_across_cluster(
    members: Iterable[ClusterMember],
    query: str,
    params: Optional[Mapping[str, Any]] = None,
    reporter: Optional[ErrorReporter] = None,
) -> AggregatedResult:
    """
    Run a query against every member in parallel.

    The result is successful only if the query succeeded on every
    member; per-member results are kept in member order so that
    individual failures can be inspected.
    """

    async def run(member: ClusterMember):
        return await member.run(query, params)

    return await map_across_cluster(members, run, reporter)
