"""Core schema data structures for the Lass object model."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from ..constants import PRIVATE, PRIVATE_PREFIX, PROTECTED, PUBLIC


class Shared:
    """Runtime object kept by reference when a field default is copied."""

    __slots__ = ()

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


class Absent(Shared):
    """Placeholder default standing in for ``None`` inside a class body.

    ``HARD_ABSENT`` always wins when parents are merged. ``SOFT_ABSENT``
    yields to any value already supplied by another parent.
    """

    def __init__(self, kind: str):
        self.kind = kind

    def __repr__(self) -> str:
        return f"<{self.kind}>"

    def __bool__(self) -> bool:
        return False


HARD_ABSENT = Absent("HardAbsent")
SOFT_ABSENT = Absent("SoftAbsent")


def is_absent(value: Any) -> bool:
    return value is HARD_ABSENT or value is SOFT_ABSENT


def private_scope(owner: str) -> str:
    return f"{PRIVATE_PREFIX}{owner}"


def is_private(scope: str) -> bool:
    return scope.startswith(PRIVATE_PREFIX)


def scope_owner(scope: str) -> str | None:
    if is_private(scope):
        return scope[len(PRIVATE_PREFIX):]
    return None


def describe_scope(scope: str) -> str:
    """Name a scope for error messages without leaking a private owner."""
    return PRIVATE if is_private(scope) else scope


def permits(visibility: str, scope: str) -> bool:
    """Return whether code running in *scope* may touch a *visibility* field."""
    if visibility == PUBLIC or visibility == scope:
        return True
    return visibility == PROTECTED and scope != PUBLIC


@dataclass(frozen=True)
class FieldDefinition:
    name: Any
    visibility: str = PUBLIC
    default: Any = None
    constant: bool = False
    reference: bool = False
    instance: bool = False
    method: bool = False
    origin: str | None = None

    @property
    def private(self) -> bool:
        return is_private(self.visibility)


class ClassDefinition(Shared):
    """Registered, merged schema of a class."""

    inheritable = True

    def __init__(
        self,
        name: str,
        parents: Iterable[str],
        composition: Iterable[str],
        fields: Mapping[Any, FieldDefinition],
    ):
        self.name = name
        self.parents = tuple(parents)
        self.composition = frozenset(composition)
        self.fields = MappingProxyType(dict(fields))

    @property
    def constructor(self) -> FieldDefinition | None:
        return self.fields.get(self.name)

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"<ClassDefinition {self.name} fields={len(self.fields)}>"


class ExternalAdapter(Shared):
    """Non-inheritable pseudo-class whose instantiation calls a host factory."""

    inheritable = False
    parents: tuple = ()
    composition: frozenset = frozenset()
    fields: Mapping = MappingProxyType({})

    def __init__(self, name: str, factory: Callable[..., Any]):
        self.name = name
        self.factory = factory

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"<ExternalAdapter {self.name}>"


__all__ = [
    "Absent",
    "ClassDefinition",
    "ExternalAdapter",
    "FieldDefinition",
    "HARD_ABSENT",
    "SOFT_ABSENT",
    "Shared",
    "describe_scope",
    "is_absent",
    "is_private",
    "permits",
    "private_scope",
    "scope_owner",
]
