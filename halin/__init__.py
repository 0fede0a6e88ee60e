from halin.config import Settings
from halin.errors import ArgumentError, UnpackError, ValidationError
from halin.event_log import EventLog, EventLogEntry
from halin.executor import map_across_cluster, map_query_across_cluster
from halin.manager import ClusterManager
from halin.member import ClusterMember, Topology
from halin.reconciler import RoleDiff, diff_roles
from halin.result import AggregatedResult, ClusterOpFailure, ClusterOpSuccess
from halin.user import User
