import asyncio
import pytest
from typing import List

from halin import queries
from halin.executor import map_across_cluster, map_query_across_cluster
from halin.member import ClusterMember, Topology
from halin.reporting import ErrorReporter
from halin.result import ClusterOpFailure, ClusterOpSuccess, cluster_op_success
from halin.testing.cluster import (
    InMemoryMember,
    MemberUnavailable,
    StatementError,
    in_memory_cluster,
)


class RecordingReporter(ErrorReporter):
    def __init__(self):
        self.errors: List[BaseException] = []

    def report_error(self, err, message=None):
        self.errors.append(err)

    def info(self, msg, *args):
        pass

    def fine(self, msg, *args):
        pass


class BrokenReporter(ErrorReporter):
    def report_error(self, err, message=None):
        raise RuntimeError("reporter down")

    def info(self, msg, *args):
        raise RuntimeError("reporter down")

    def fine(self, msg, *args):
        raise RuntimeError("reporter down")


@pytest.mark.asyncio
@pytest.mark.parametrize("size,failing", [(1, 0), (1, 1), (3, 0), (3, 1), (3, 3), (5, 2)])
async def test_success_iff_no_member_fails(size: int, failing: int):
    topology = in_memory_cluster(size)
    for member in list(topology)[:failing]:
        member.available = False

    result = await map_query_across_cluster(topology, queries.CREATE_ROLE, {"role": "writer"})

    assert len(result.results) == size
    assert result.success is (failing == 0)
    assert len(result.failures) == failing
    assert len(result.successes) == size - failing


@pytest.mark.asyncio
async def test_results_keep_member_order():
    topology = Topology(
        [
            InMemoryMember("slow:7687", latency=0.05),
            InMemoryMember("medium:7687", latency=0.02),
            InMemoryMember("fast:7687", latency=0.0),
        ]
    )

    async def operation(member: ClusterMember):
        await member.run(queries.CREATE_ROLE, {"role": "writer"})
        return member.address

    result = await map_across_cluster(topology, operation)

    assert [r.address for r in result.results] == ["slow:7687", "medium:7687", "fast:7687"]
    assert [r.payload for r in result.results] == ["slow:7687", "medium:7687", "fast:7687"]


@pytest.mark.asyncio
async def test_failure_is_captured_and_reported():
    topology = in_memory_cluster(3)
    topology.members()[0].available = False
    topology.members()[1].failing.add(queries.CREATE_ROLE)
    reporter = RecordingReporter()

    async def operation(member: ClusterMember):
        if member.address == "core3:7687":
            return "pong"
        return await member.run(queries.CREATE_ROLE, {"role": "writer"})

    result = await map_across_cluster(topology, operation, reporter)

    first, second, third = result.results
    assert isinstance(first, ClusterOpFailure)
    assert isinstance(first.error, MemberUnavailable)
    assert first.payload is None
    assert isinstance(second, ClusterOpFailure)
    assert isinstance(second.error, StatementError)
    assert isinstance(third, ClusterOpSuccess)
    assert third.payload == "pong"
    assert third.error is None
    assert len(reporter.errors) == 2
    assert any(e is first.error for e in reporter.errors)
    assert any(e is second.error for e in reporter.errors)


@pytest.mark.asyncio
async def test_does_not_short_circuit():
    finished = []

    async def operation(member: ClusterMember):
        if member.address == "core1:7687":
            raise ValueError("boom")
        await asyncio.sleep(0.01)
        finished.append(member.address)
        return None

    result = await map_across_cluster(in_memory_cluster(3), operation)

    assert not result.success
    assert sorted(finished) == ["core2:7687", "core3:7687"]


@pytest.mark.asyncio
async def test_branches_run_concurrently():
    started = asyncio.Event()
    waiting = []

    async def operation(member: ClusterMember):
        waiting.append(member.address)
        if len(waiting) == 3:
            started.set()
        await asyncio.wait_for(started.wait(), timeout=1)

    result = await map_across_cluster(in_memory_cluster(3), operation)

    assert result.success


@pytest.mark.asyncio
async def test_operation_results_pass_through():
    async def operation(member: ClusterMember):
        return cluster_op_success(member, "summary")

    result = await map_across_cluster(in_memory_cluster(2), operation)

    assert [r.payload for r in result.results] == ["summary", "summary"]


@pytest.mark.asyncio
async def test_broken_reporter_does_not_change_result():
    topology = in_memory_cluster(2)
    topology.members()[0].available = False

    result = await map_query_across_cluster(
        topology, queries.CREATE_ROLE, {"role": "writer"}, reporter=BrokenReporter()
    )

    assert not result.success
    assert result.results[0].success is False
    assert len(result.results) == 2
