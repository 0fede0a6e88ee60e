import attr
from attr.validators import instance_of, optional
from collections.abc import Iterable, Mapping
from multimethod import multimethod
from pyrsistent import PSet, pset
from typing import Optional

from halin.errors import ArgumentError


@attr.s(frozen=True, repr=False)
class User:
    username: str = attr.ib(validator=instance_of(str))
    password: Optional[str] = attr.ib(default=None, validator=optional(instance_of(str)))

    def __repr__(self) -> str:
        return f"User(username={self.username!r})"


@multimethod
def as_user(user: User) -> User:
    return user


@multimethod
def as_user(user: Mapping) -> User:
    username = user.get("username")
    password = user.get("password")
    if not isinstance(username, str):
        raise ArgumentError("user must carry a string `username`")
    if password is not None and not isinstance(password, str):
        raise ArgumentError("`password` must be a string")
    return User(username=username, password=password)


@multimethod
def as_user(user: object) -> User:
    raise ArgumentError(
        f"user must be a User or a mapping with a username, got {type(user).__name__}"
    )


def require_username(user) -> User:
    user = as_user(user)
    if not user.username:
        raise ArgumentError("Call with an object containing key `username`")
    return user


def require_credentials(user) -> User:
    user = require_username(user)
    if not user.password:
        raise ArgumentError("Call with an object containing keys `username`, `password`")
    return user


@multimethod
def as_roles(roles: str) -> PSet:
    raise ArgumentError("roles must be a collection of role names, not a string")


@multimethod
def as_roles(roles: Mapping) -> PSet:
    raise ArgumentError("roles must be a collection of role names, not a mapping")


@multimethod
def as_roles(roles: Iterable) -> PSet:
    try:
        roles = pset(roles)
    except TypeError as e:
        raise ArgumentError(f"roles must be hashable role names: {e}") from e
    for role in roles:
        require_role(role)
    return roles


@multimethod
def as_roles(roles: object) -> PSet:
    raise ArgumentError(f"roles must be a collection, got {type(roles).__name__}")


def require_role(role) -> str:
    if not isinstance(role, str) or not role:
        raise ArgumentError(f"Must provide a role name, got {role!r}")
    return role
