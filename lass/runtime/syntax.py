"""Fluent declaration syntax on top of :meth:`Registry.define_class`.

::

    lass = Registry()
    lass("Animal")({"public__name": "", "Animal": init})
    lass("Cat").from_("Animal")({"speak": speak})
    lass("Tiger").from_("Cat")("Striped")({})

The statement also works as a class decorator, harvesting the attributes of
a plain Python class as the class body.
"""
from __future__ import annotations

from typing import Mapping

from .errors import DefinitionError, UsageError

_USAGE = "lass('Class').from_(['ParentA', 'ParentB'])({...})"


def harvest_body(cls) -> dict:
    """Collect the non-dunder attributes of a Python class as a class body."""
    if cls.__bases__ != (object,):
        raise UsageError(
            f"Python class '{cls.__name__}' must not use Python inheritance; "
            f"use {_USAGE} instead"
        )
    return {
        key: value
        for key, value in vars(cls).items()
        if not (key.startswith("__") and key.endswith("__"))
    }


class ClassStatement:
    """A class declaration in progress: a name plus the parents named so far."""

    def __init__(self, registry, name):
        if not isinstance(name, str):
            raise UsageError(
                f"Class name is of type {type(name).__name__} instead of string. "
                f"To create a class, use: lass('ClassName')({{...}})"
            )
        if name in registry:
            raise DefinitionError(f"Class '{name}' is already defined")
        self.registry = registry
        self.name = name
        self.parents: list[str] = []
        self.definition = None

    def from_(self, parents):
        if isinstance(parents, str):
            self.parents.append(parents)
            return self
        if isinstance(parents, (list, tuple)):
            if not parents:
                raise UsageError(
                    f"Attempting to inherit from an empty list. Please use: {_USAGE}"
                )
            for parent in parents:
                if not isinstance(parent, str):
                    raise UsageError(
                        f"Trying to inherit from a non-string type ({type(parent).__name__})"
                    )
            self.parents.extend(parents)
            return self
        raise UsageError(
            f"Trying to inherit from a non-string type ({type(parents).__name__})"
        )

    D = from_
    _ = from_

    def __call__(self, body):
        if isinstance(body, str):
            self.parents.append(body)
            return self
        if isinstance(body, type):
            body = harvest_body(body)
        elif not isinstance(body, Mapping):
            raise UsageError(
                f"Class body isn't a mapping ({type(body).__name__}). Please use: {_USAGE}"
            )
        if self.definition is not None:
            raise UsageError(f"Class '{self.name}' has already been defined")
        self.definition = self.registry.define_class(self.name, self.parents, body)
        return self.definition

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"<ClassStatement {self.name} from {self.parents}>"


__all__ = ["ClassStatement", "harvest_body"]
