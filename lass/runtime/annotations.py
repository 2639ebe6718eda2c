"""Decoder for the field-name modifier micro-syntax.

A class body key such as ``protected_const__speed`` carries a prefix block
terminated by two or more underscores. The block is split on single
underscores into modifier tokens; the remainder is the field name. Keys
without such a block are plain field names with no modifiers, and numeric
keys bypass decoding entirely.
"""
from __future__ import annotations

from dataclasses import dataclass
import re

from ..constants import (
    ACCESS_MODIFIERS,
    MODIFIERS,
    OPERATOR_ALIASES,
    OPERATORS,
    PRIVATE,
    PRIVATE_PREFIX,
)
from .errors import DefinitionError

_PREFIX_PATTERN = re.compile(r"^(.*?)__+(.*)$", re.DOTALL)


@dataclass(frozen=True)
class Modifiers:
    """Structured result of decoding one field key."""

    access: str | None = None
    const: bool = False
    reference: bool = False
    instance: bool = False
    nonmethod: bool = False
    operator: bool = False

    @property
    def empty(self) -> bool:
        return self == NO_MODIFIERS

    def visibility(self, owner: str) -> str | None:
        """Return the visibility tag requested for a field declared in *owner*."""
        if self.access == PRIVATE:
            return f"{PRIVATE_PREFIX}{owner}"
        return self.access


NO_MODIFIERS = Modifiers()


def is_numeric_key(key) -> bool:
    return isinstance(key, (int, float)) and not isinstance(key, bool)


def operator_hook(name: str) -> str:
    """Map an ``operator__`` field name to the Python hook it overloads."""
    hook = OPERATOR_ALIASES.get(name, name)
    if hook not in OPERATORS:
        raise DefinitionError(f"Unknown operator '{name}'")
    return f"__{hook}__"


def decode_field_key(key):
    """Split a raw class-body key into ``(field_name, Modifiers)``."""

    if is_numeric_key(key):
        return key, NO_MODIFIERS
    if not isinstance(key, str):
        raise DefinitionError(
            f"Invalid field key {key!r} of type {type(key).__name__}; "
            "field keys must be strings or numbers"
        )

    match = _PREFIX_PATTERN.match(key)
    if not match:
        return key, NO_MODIFIERS

    prefix, name = match.groups()
    tokens = set(prefix.split("_"))
    for token in sorted(tokens):
        if token not in MODIFIERS:
            raise DefinitionError(
                f"Unknown access modifier '{token}' in variable '{name}'"
            )
    access = [token for token in ACCESS_MODIFIERS if token in tokens]
    if len(access) > 1:
        raise DefinitionError(
            f"Variable '{name}' is attempting to be {' and '.join(access)} "
            "at the same time"
        )
    if not name:
        raise DefinitionError(f"Field key '{key}' has modifiers but no name")

    if "operator" in tokens:
        name = operator_hook(name)

    return name, Modifiers(
        access=access[0] if access else None,
        const="const" in tokens,
        reference="reference" in tokens,
        instance="instance" in tokens,
        nonmethod="nonmethod" in tokens,
        operator="operator" in tokens,
    )


__all__ = [
    "Modifiers",
    "NO_MODIFIERS",
    "decode_field_key",
    "is_numeric_key",
    "operator_hook",
]
