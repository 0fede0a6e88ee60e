"""
Coordination of administrative actions across a cluster.

By "cluster" we mean any number of database instances; a standalone
instance is a cluster of one. Actions that should apply cluster-wide
(adding a user, creating a role, assigning roles...) go through the
``ClusterManager`` so that they reach every member and leave an entry
in the event log.
"""
import logging
from pyrsistent import PSet
from typing import Any, Awaitable, Optional

from halin import queries
from halin.config import Settings
from halin.event_log import EventLog, EventLogEntry
from halin.executor import map_query_across_cluster
from halin.member import ClusterMember, Topology
from halin.reconciler import RoleReconciler
from halin.reporting import ErrorReporter, safe
from halin.result import AggregatedResult
from halin.user import (
    User,
    as_roles,
    require_credentials,
    require_role,
    require_username,
)

logger = logging.getLogger(__name__)


class ClusterManager:
    def __init__(
        self,
        topology: Topology,
        settings: Optional[Settings] = None,
        reporter: Optional[ErrorReporter] = None,
    ):
        if not isinstance(topology, Topology):
            topology = Topology(topology)
        self.topology = topology
        self.settings = settings or Settings()
        self.reporter = safe(reporter)
        self.event_log = EventLog(capacity=self.settings.event_log_capacity)
        self.reconciler = RoleReconciler(node_roles=self, reporter=self.reporter)

    def members(self):
        return self.topology.members()

    def add_event(self, type: str, message: str, payload: Any = None) -> EventLogEntry:
        return self.event_log.append(type=type, message=message, payload=payload)

    def get_event_log(self):
        return self.event_log.snapshot()

    async def map_query_across_cluster(self, query: str, params=None) -> AggregatedResult:
        return await map_query_across_cluster(
            self.members(), query, params, self.reporter
        )

    # Public operations raise ArgumentError when called, before any
    # coroutine exists.

    def add_user(self, user) -> Awaitable[AggregatedResult]:
        return self._add_user(require_credentials(user))

    async def _add_user(self, user: User) -> AggregatedResult:
        result = await self.map_query_across_cluster(
            queries.CREATE_USER,
            {"username": user.username, "password": user.password},
        )
        self.add_event(
            type="adduser",
            message=f'Added user "{user.username}"',
            payload=user.username,
        )
        return result

    def delete_user(self, user) -> Awaitable[AggregatedResult]:
        return self._delete_user(require_username(user))

    async def _delete_user(self, user: User) -> AggregatedResult:
        result = await self.map_query_across_cluster(
            queries.DELETE_USER, {"username": user.username}
        )
        self.add_event(
            type="deleteuser",
            message=f'Deleted user "{user.username}"',
            payload=user.username,
        )
        return result

    def add_role(self, role: str) -> Awaitable[AggregatedResult]:
        return self._add_role(require_role(role))

    async def _add_role(self, role: str) -> AggregatedResult:
        result = await self.map_query_across_cluster(
            queries.CREATE_ROLE, {"role": role}
        )
        self.add_event(
            type="addrole", message=f'Created role "{role}"', payload=role
        )
        return result

    def delete_role(self, role: str) -> Awaitable[AggregatedResult]:
        return self._delete_role(require_role(role))

    async def _delete_role(self, role: str) -> AggregatedResult:
        result = await self.map_query_across_cluster(
            queries.DELETE_ROLE, {"role": role}
        )
        self.add_event(
            type="deleterole", message=f'Deleted role "{role}"', payload=role
        )
        return result

    async def add_node_role(self, member: ClusterMember, username: str, role: str):
        """Specific to a particular member."""
        self.reporter.info("[%s] Add role %s to %s", member.address, role, username)
        return await member.run(
            queries.ADD_ROLE_TO_USER, {"username": username, "role": role}
        )

    async def remove_node_role(self, member: ClusterMember, username: str, role: str):
        """Specific to a particular member."""
        self.reporter.info(
            "[%s] Remove role %s from %s", member.address, role, username
        )
        return await member.run(
            queries.REMOVE_ROLE_FROM_USER, {"username": username, "role": role}
        )

    def associate_user_to_roles(self, user, roles) -> Awaitable[AggregatedResult]:
        """
        Make ``roles`` the exact role set of ``user`` on every member.

        The event log records the requested roles, not what each
        member actually ended up with; inspect the result for that.
        """
        desired = as_roles(roles)
        user = require_username(user)
        return self._associate_user_to_roles(user, desired)

    async def _associate_user_to_roles(
        self, user: User, desired: PSet
    ) -> AggregatedResult:
        logger.debug("Associate %s to %s", user.username, sorted(desired))

        result = await self.reconciler.associate(
            self.members(), user.username, desired
        )

        requested = sorted(desired)
        self.add_event(
            type="roleassoc",
            message=f'Associated "{user.username}" to roles '
            + ", ".join(f'"{role}"' for role in requested),
            payload={"username": user.username, "roles": requested},
        )
        return result
