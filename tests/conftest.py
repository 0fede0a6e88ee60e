import pytest

from halin.manager import ClusterManager
from halin.member import Topology
from halin.testing.cluster import in_memory_cluster


@pytest.fixture
def topology() -> Topology:
    return in_memory_cluster(3)


@pytest.fixture
def manager(topology: Topology) -> ClusterManager:
    return ClusterManager(topology)
