import asyncio

from halin.config import Settings, configure_logging
from halin.manager import ClusterManager
from halin.testing.cluster import in_memory_cluster


async def async_main(settings: Settings):
    topology = in_memory_cluster(3)
    manager = ClusterManager(topology, settings=settings)

    await manager.add_role("writer")
    await manager.add_user({"username": "alice", "password": "secret"})

    # Drift one member away from the others.
    topology.members()[2].users["alice"].add("admin")

    result = await manager.associate_user_to_roles(
        {"username": "alice"}, {"reader", "writer"}
    )
    for member_result in result.results:
        print(member_result.address, member_result.success, member_result.payload)

    # Take one member down and try again.
    topology.members()[1].available = False
    result = await manager.delete_role("writer")
    print("delete role succeeded everywhere:", result.success)
    for failure in result.failures:
        print("  failed on", failure.address, "-", failure.error)

    for entry in manager.get_event_log():
        print(entry.date, entry.type, entry.message)


if __name__ == "__main__":
    settings = Settings.from_env()
    configure_logging(settings)
    asyncio.run(async_main(settings))
