"""Class definition registry and instance construction.

A :class:`Registry` is created once by the host process. Registration is
additive and single-writer: classes are never removed or mutated after
``define_class`` returns, and two overlapping definitions of the same name
are not arbitrated.
"""
from __future__ import annotations

from copy import deepcopy
from functools import partial
from types import BuiltinFunctionType, FunctionType, MappingProxyType, MethodType
from typing import Any, Mapping

from ..config import LassConfig
from ..constants import INHERIT_CONSTRUCTOR, PROTECTED, PUBLIC
from ..log import get_logger
from .annotations import decode_field_key, is_numeric_key
from .core import (
    HARD_ABSENT,
    SOFT_ABSENT,
    ClassDefinition,
    ExternalAdapter,
    FieldDefinition,
    describe_scope,
    is_absent,
    is_private,
    scope_owner,
)
from .errors import DefinitionError, UsageError
from .instance import Instance, Method, Super, make_gate

logger = get_logger(__name__)


def _is_function(value: Any) -> bool:
    return isinstance(value, (FunctionType, BuiltinFunctionType, MethodType, partial))


def _resolve_default(existing: FieldDefinition, incoming: FieldDefinition) -> FieldDefinition:
    """Pick the field whose default survives a merge.

    *incoming* comes from a higher-priority parent than *existing*.
    """
    if existing.default is HARD_ABSENT:
        return existing
    if incoming.default is SOFT_ABSENT:
        return existing
    return incoming


def _merge_parent(fields, parent: ClassDefinition, reserved) -> None:
    for key, incoming in parent.fields.items():
        if key in reserved:
            if key == parent.name or isinstance(incoming.default, Super):
                continue
            raise DefinitionError(
                f"Variable '{key}' inherited from '{parent.name}' collides with "
                f"the inherited class '{key}'"
            )
        existing = fields.get(key)
        if existing is None:
            fields[key] = incoming
            continue
        if existing.visibility != incoming.visibility:
            if existing.private and incoming.private:
                raise DefinitionError(
                    f"Ambiguous private variable '{key}': it is declared private by "
                    f"both '{scope_owner(existing.visibility)}' and "
                    f"'{scope_owner(incoming.visibility)}'"
                )
            raise DefinitionError(
                f"Variable '{key}' is inherited as both "
                f"{describe_scope(existing.visibility)} and "
                f"{describe_scope(incoming.visibility)}"
            )
        if existing.constant != incoming.constant:
            raise DefinitionError(
                f"Variable '{key}' is inherited as both constant and non-constant"
            )
        fields[key] = _resolve_default(existing, incoming)


def _inherited_constructor(name: str, supers):
    """Build a constructor forwarding its arguments to every parent's one."""

    def constructor(self, *args, **kwargs):
        for handle in supers:
            if handle._lass_definition.constructor is not None:
                handle(self, *args, **kwargs)

    constructor.__name__ = name
    constructor.__qualname__ = f"{name}.{name}"
    return constructor


def _declare_field(owner, key, modifiers, value, existing):
    """Turn one decoded class-body entry into a FieldDefinition."""

    if is_numeric_key(key):
        return FieldDefinition(key, PUBLIC, value, origin=owner)

    function = _is_function(value)
    is_method = function and not modifiers.nonmethod and not modifiers.instance

    if modifiers.operator:
        if not function:
            raise DefinitionError(f"Operator '{key}' must be a function")
        if modifiers.access not in (None, PUBLIC):
            raise DefinitionError(f"Operator '{key}' must be public")
    if modifiers.instance and not (isinstance(value, str) or callable(value)):
        raise DefinitionError(
            f"Instance variable '{key}' needs a class name or a factory, "
            f"not {type(value).__name__}"
        )

    requested = modifiers.visibility(owner)
    if existing is None:
        visibility = requested or PUBLIC
        constant = modifiers.const or is_method
        reference = modifiers.reference
        instance = modifiers.instance
    else:
        visibility = existing.visibility
        if requested is not None and requested != visibility:
            if is_private(requested) and existing.private:
                raise DefinitionError(
                    f"Ambiguous private variable '{key}': it is already declared "
                    f"private by '{scope_owner(existing.visibility)}'"
                )
            raise DefinitionError(
                f"Attempting to change access level of variable '{key}' from "
                f"{describe_scope(existing.visibility)} to {describe_scope(requested)}"
            )
        if modifiers.empty:
            constant = existing.constant
            reference = existing.reference
            instance = existing.instance
            if is_method and not constant:
                raise DefinitionError(
                    f"Variable '{key}' is not a method in a parent class; "
                    f"declare it as 'nonmethod__{key}' to store a function"
                )
        else:
            constant = modifiers.const or is_method
            reference = modifiers.reference
            instance = modifiers.instance
            if constant != existing.constant:
                raise DefinitionError(
                    f"Attempting to change constancy of variable '{key}'"
                )

    default = Method(value, owner, key) if is_method else value
    return FieldDefinition(
        key,
        visibility,
        default,
        constant=constant,
        reference=reference,
        instance=instance,
        method=is_method,
        origin=owner,
    )


class Registry:
    """Every class defined by a host process, plus how their instances behave."""

    def __init__(self, config: LassConfig | None = None):
        self.config = config if config is not None else LassConfig()
        self.gate = make_gate(self.config)
        self._classes: dict[str, ClassDefinition | ExternalAdapter] = {}

    def __call__(self, name):
        from .syntax import ClassStatement

        return ClassStatement(self, name)

    def __contains__(self, name) -> bool:
        return name in self._classes

    def __iter__(self):
        return iter(self._classes)

    def __len__(self) -> int:
        return len(self._classes)

    @property
    def classes(self) -> Mapping[str, ClassDefinition | ExternalAdapter]:
        return MappingProxyType(self._classes)

    def get(self, name):
        """Return the definition registered under *name* (or passed directly)."""
        if isinstance(name, (ClassDefinition, ExternalAdapter)):
            name = name.name
        if not isinstance(name, str):
            raise UsageError(
                f"Class name is of type {type(name).__name__} instead of string"
            )
        try:
            return self._classes[name]
        except KeyError:
            raise UsageError(f"Class '{name}' has not been defined") from None

    # -- definition -------------------------------------------------------

    def _check_new_name(self, name) -> None:
        if not isinstance(name, str):
            raise UsageError(
                f"Class name is of type {type(name).__name__} instead of string"
            )
        if not name:
            raise UsageError("Class name must not be empty")
        if name in self._classes:
            raise DefinitionError(f"Class '{name}' is already defined")

    def _check_parents(self, parents) -> list[str]:
        if isinstance(parents, str):
            parents = [parents]
        elif not isinstance(parents, (list, tuple)):
            raise UsageError(
                f"Trying to inherit from a non-string type ({type(parents).__name__})"
            )
        checked: list[str] = []
        for parent in parents:
            if not isinstance(parent, str):
                raise UsageError(
                    f"Trying to inherit from a non-string type ({type(parent).__name__})"
                )
            definition = self._classes.get(parent)
            if definition is None:
                raise DefinitionError(
                    f"Trying to inherit from a class that hasn't been defined ('{parent}')"
                )
            if not definition.inheritable:
                raise DefinitionError(
                    f"Class '{parent}' wraps an external constructor and cannot be inherited"
                )
            if parent in checked:
                raise DefinitionError(f"Class '{parent}' is listed as a parent twice")
            checked.append(parent)
        return checked

    def define_class(self, name, parents=(), body=None) -> ClassDefinition:
        """Merge *parents* (first has priority) and *body* into a new class."""

        self._check_new_name(name)
        parents = self._check_parents(parents)
        body = {} if body is None else body
        if not isinstance(body, Mapping):
            raise UsageError(
                f"Class body isn't a mapping ({type(body).__name__})"
            )

        composition: set[str] = set()
        for parent in parents:
            composition.add(parent)
            composition.update(self._classes[parent].composition)

        fields: dict[Any, FieldDefinition] = {}
        for parent in reversed(parents):
            _merge_parent(fields, self._classes[parent], composition)
        for ancestor in sorted(composition):
            fields[ancestor] = FieldDefinition(
                ancestor,
                PROTECTED,
                Super(self._classes[ancestor]),
                constant=True,
                reference=True,
                origin=ancestor,
            )

        declared = set()
        for raw_key, value in body.items():
            key, modifiers = decode_field_key(raw_key)
            if key in declared:
                raise DefinitionError(f"Duplicate variable '{key}'")
            declared.add(key)
            if key in composition:
                raise DefinitionError(
                    f"Variable '{key}' is reserved for the inherited class '{key}'"
                )
            if key == name:
                if modifiers.nonmethod or modifiers.instance:
                    raise DefinitionError(
                        f"Constructor of class '{name}' must be a plain method; "
                        "drop the nonmethod and instance modifiers"
                    )
                if isinstance(value, str) and value == INHERIT_CONSTRUCTOR:
                    if not parents:
                        raise DefinitionError(
                            f"Class '{name}' cannot inherit a constructor without parents"
                        )
                    value = _inherited_constructor(
                        name, [fields[parent].default for parent in reversed(parents)]
                    )
                elif not _is_function(value):
                    raise DefinitionError(
                        f"Constructor of class '{name}' must be a function or "
                        f"'{INHERIT_CONSTRUCTOR}', not {type(value).__name__}"
                    )
            fields[key] = _declare_field(name, key, modifiers, value, fields.get(key))

        constructor = fields.get(name)
        if constructor is not None and not (
            constructor.method or _is_function(constructor.default)
        ):
            raise DefinitionError(
                f"Inherited variable '{name}' collides with the name of class '{name}'"
            )

        definition = ClassDefinition(name, parents, composition, fields)
        self._classes[name] = definition
        logger.debug(
            "class_defined", name=name, parents=list(parents), fields=len(fields)
        )
        return definition

    def define_external_adapter(self, name, factory) -> ExternalAdapter:
        """Let ``new(name, ...)`` call *factory* for a foreign constructor."""

        self._check_new_name(name)
        if not callable(factory):
            raise UsageError(f"Factory for '{name}' is not callable")
        adapter = ExternalAdapter(name, factory)
        self._classes[name] = adapter
        logger.debug("adapter_defined", name=name)
        return adapter

    # -- instances --------------------------------------------------------

    def _initial_value(self, field: FieldDefinition):
        default = field.default
        if is_absent(default):
            return None
        if field.instance:
            if isinstance(default, str):
                return self.new(default)
            return default()
        if field.reference:
            return default
        return deepcopy(default)

    def _populate(self, instance: Instance) -> None:
        storage = instance._lass_storage
        for key, field in instance._lass_definition.fields.items():
            storage[key] = self._initial_value(field)

    def _construct(self, instance: Instance, args, kwargs) -> None:
        constructor = instance._lass_definition.constructor
        if constructor is not None:
            constructor.default(instance, *args, **kwargs)

    def new(self, name, *args, **kwargs):
        """Create an instance of *name* and run its constructor, if any."""

        definition = self.get(name)
        if isinstance(definition, ExternalAdapter):
            return definition.factory(*args, **kwargs)
        instance = Instance(definition, self.gate)
        self._populate(instance)
        self._construct(instance, args, kwargs)
        return instance

    def reset(self, instance, *args, **kwargs) -> None:
        """Restore every declared field to its default and rerun the constructor."""

        if not isinstance(instance, Instance):
            raise UsageError(f"Cannot reset {type(instance).__name__}; not a class instance")
        self._populate(instance)
        self._construct(instance, args, kwargs)
        logger.debug("instance_reset", name=instance._lass_definition.name)

    def _class_name(self, value) -> str:
        if isinstance(value, Instance):
            return value._lass_definition.name
        if isinstance(value, (ClassDefinition, ExternalAdapter)):
            return value.name
        if isinstance(value, str):
            return value
        raise UsageError(
            f"Expected a class name or instance, got {type(value).__name__}"
        )

    def is_subtype(self, child, parent) -> bool:
        child_name = self._class_name(child)
        parent_name = self._class_name(parent)
        if child_name == parent_name:
            return True
        return parent_name in self.get(child_name).composition

    def get_class_name(self, instance) -> str:
        if not isinstance(instance, Instance):
            raise UsageError(
                f"Cannot get the class name of {type(instance).__name__}; "
                "not a class instance"
            )
        return instance._lass_definition.name


__all__ = ["Registry"]
