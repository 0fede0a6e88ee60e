"""
Converge a user's role membership on every cluster member.

For each member, independently and concurrently:

1. Gather the roles the user currently holds on that member.
2. Diff them against the desired roles.
3. Apply the grants and revokes.

Lots of ways for this to fail: the user may not exist on a member,
a role may not exist on a member, or an individual grant/revoke may
fail. Each only fails the member it happened on. Grants and revokes
are not wrapped in a transaction, so a failing member may be left
partially reconciled.
"""
import asyncio
import attr
from attr.validators import instance_of
from functools import partial
import logging
from pyrsistent import PSet, pset
from typing import Iterable, List

from halin import queries
from halin.executor import map_across_cluster
from halin.member import ClusterMember
from halin.reporting import SafeReporter, safe
from halin.result import (
    AggregatedResult,
    ClusterOpResult,
    cluster_op_failure,
    cluster_op_success,
)
from halin.unpack import unpack_results

logger = logging.getLogger(__name__)


@attr.s(frozen=True)
class RoleDiff:
    to_add: PSet = attr.ib(converter=pset, validator=instance_of(PSet))
    to_delete: PSet = attr.ib(converter=pset, validator=instance_of(PSet))
    to_preserve: PSet = attr.ib(converter=pset, validator=instance_of(PSet))

    @property
    def is_converged(self) -> bool:
        return not self.to_add and not self.to_delete


def diff_roles(existing: Iterable[str], desired: Iterable[str]) -> RoleDiff:
    existing = pset(existing)
    desired = pset(desired)
    return RoleDiff(
        to_add=desired - existing,
        to_delete=existing - desired,
        to_preserve=existing & desired,
    )


def summarise(username: str, diff: RoleDiff) -> str:
    parts = [f"Assigned roles to {username}."]
    if diff.to_add:
        parts.append("Added: " + ", ".join(sorted(diff.to_add)))
    if diff.to_delete:
        parts.append("Removed: " + ", ".join(sorted(diff.to_delete)))
    return " ".join(parts)


@attr.s(frozen=True)
class RoleReconciler:
    # Anything providing ``add_node_role`` and ``remove_node_role``
    # coroutines, normally the ClusterManager.
    node_roles = attr.ib()
    reporter: SafeReporter = attr.ib(converter=safe, default=None)

    async def gather_roles(self, member: ClusterMember, username: str) -> List[str]:
        records = await member.run(
            queries.DBMS_SECURITY_USER_ROLES, {"username": username}
        )
        roles = [row["value"] for row in unpack_results(records, required=["value"])]
        self.reporter.fine("[%s] Gathered roles for %s: %s", member.address, username, roles)
        return roles

    def determine_differences(
        self, member: ClusterMember, existing: Iterable[str], desired: PSet
    ) -> RoleDiff:
        diff = diff_roles(existing, desired)
        self.reporter.fine(
            "[%s] Role modification: adding %s removing %s preserving %s",
            member.address,
            sorted(diff.to_add),
            sorted(diff.to_delete),
            sorted(diff.to_preserve),
        )
        return diff

    async def apply_changes(
        self, member: ClusterMember, username: str, diff: RoleDiff
    ) -> ClusterOpResult:
        changes = [
            self.node_roles.add_node_role(member, username, role)
            for role in sorted(diff.to_add)
        ] + [
            self.node_roles.remove_node_role(member, username, role)
            for role in sorted(diff.to_delete)
        ]
        outcomes = await asyncio.gather(*changes, return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
        errors = [o for o in outcomes if isinstance(o, Exception)]
        if errors:
            for error in errors:
                self.reporter.report_error(
                    error, "Cluster operation failure applying role changes"
                )
            return cluster_op_failure(member, errors[0])
        return cluster_op_success(member, summarise(username, diff))

    async def reconcile(
        self, member: ClusterMember, username: str, desired: PSet
    ) -> ClusterOpResult:
        existing = await self.gather_roles(member, username)
        diff = self.determine_differences(member, existing, desired)
        return await self.apply_changes(member, username, diff)

    async def associate(
        self, members: Iterable[ClusterMember], username: str, desired: PSet
    ) -> AggregatedResult:
        return await map_across_cluster(
            members,
            partial(self.reconcile, username=username, desired=desired),
            self.reporter,
        )
