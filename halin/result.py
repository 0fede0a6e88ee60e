"""
Per-member operation results and their cluster-wide aggregation.
"""
import attr
from attr.validators import deep_iterable, instance_of
from pyrsistent import PVector, pvector
from typing import Any, Iterable, Union

from halin.member import ClusterMember


@attr.s(frozen=True)
class ClusterOpSuccess:
    member: ClusterMember = attr.ib(validator=instance_of(ClusterMember))
    address: str = attr.ib(validator=instance_of(str))
    payload: Any = attr.ib(default=None)

    success = True
    error = None


@attr.s(frozen=True)
class ClusterOpFailure:
    member: ClusterMember = attr.ib(validator=instance_of(ClusterMember))
    address: str = attr.ib(validator=instance_of(str))
    error: BaseException = attr.ib(validator=instance_of(BaseException))

    success = False
    payload = None


ClusterOpResult = Union[ClusterOpSuccess, ClusterOpFailure]


def cluster_op_success(member: ClusterMember, payload: Any = None) -> ClusterOpSuccess:
    return ClusterOpSuccess(member=member, address=member.address, payload=payload)


def cluster_op_failure(member: ClusterMember, error: BaseException) -> ClusterOpFailure:
    return ClusterOpFailure(member=member, address=member.address, error=error)


@attr.s(frozen=True)
class AggregatedResult:
    """
    The outcome of one operation across every targeted member.

    ``success`` holds only if every member succeeded; ``results``
    keeps one entry per member in member order.
    """

    results: PVector = attr.ib(
        converter=pvector,
        validator=deep_iterable(
            member_validator=instance_of((ClusterOpSuccess, ClusterOpFailure)),
            iterable_validator=instance_of(PVector),
        ),
    )

    @property
    def success(self) -> bool:
        return all(result.success for result in self.results)

    @property
    def failures(self) -> PVector:
        return pvector(result for result in self.results if not result.success)

    @property
    def successes(self) -> PVector:
        return pvector(result for result in self.results if result.success)

    def __len__(self) -> int:
        return len(self.results)


def package(results: Iterable[ClusterOpResult]) -> AggregatedResult:
    return AggregatedResult(results=results)
