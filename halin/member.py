from abc import ABC, abstractmethod
import attr
from attr.validators import deep_iterable, instance_of
from pyrsistent import PVector, pvector
from typing import Any, Iterable, Mapping, Optional, Sequence

from halin.errors import ArgumentError


Record = Mapping[str, Any]


class ClusterMember(ABC):
    """
    Handle to a single database instance.

    A standalone instance is treated as a cluster of one.
    """

    @property
    @abstractmethod
    def address(self) -> str:
        raise NotImplementedError

    @property
    @abstractmethod
    def role(self) -> str:
        raise NotImplementedError

    @abstractmethod
    async def run(
        self, query: str, params: Optional[Mapping[str, Any]] = None
    ) -> Sequence[Record]:
        raise NotImplementedError

    def __str__(self) -> str:
        return f"{self.role}@{self.address}"


def _to_members(members: Iterable[ClusterMember]) -> PVector:
    return pvector(members)


@attr.s(frozen=True)
class Topology:
    """
    A fixed, ordered collection of cluster members.
    """

    _members: PVector = attr.ib(
        converter=_to_members,
        validator=deep_iterable(
            member_validator=instance_of(ClusterMember),
            iterable_validator=instance_of(PVector),
        ),
    )

    @_members.validator
    def check(self, attribute, value: PVector):
        if not value:
            raise ArgumentError("A cluster must have at least one member.")

    def members(self) -> PVector:
        return self._members

    def __iter__(self):
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)
