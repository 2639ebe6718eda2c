"""Instances and the access gate guarding every field read and write."""
from __future__ import annotations

from contextlib import contextmanager, nullcontext
from types import MethodType
from typing import Any

from ..constants import PUBLIC
from .annotations import is_numeric_key
from .core import ClassDefinition, Shared, describe_scope, permits, private_scope
from .errors import AccessError, UsageError


class Method(Shared):
    """A function declared by a class body.

    Calling it raises the receiver's current scope to the declaring class's
    private scope for the duration of the call.
    """

    __slots__ = ("function", "owner", "name", "scope")

    def __init__(self, function, owner: str, name: str):
        self.function = function
        self.owner = owner
        self.name = name
        self.scope = private_scope(owner)

    def __call__(self, receiver, *args, **kwargs):
        if not isinstance(receiver, Instance):
            raise UsageError(
                f"Method '{self.name}' of class '{self.owner}' was called without "
                f"an instance receiver; use obj.{self.name}(...) instead"
            )
        with receiver._lass_gate.entered(receiver, self.scope):
            return self.function(receiver, *args, **kwargs)

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"<Method {self.owner}.{self.name}>"


class Super(Shared):
    """Handle on an ancestor class, stored in a field named after it.

    Attribute access yields the ancestor's own (unbound) methods, and calling
    the handle runs the ancestor's constructor: ``self.Parent(self, *args)``.
    """

    def __init__(self, definition: ClassDefinition):
        self._lass_definition = definition
        self._lass_methods = {
            name: field.default
            for name, field in definition.fields.items()
            if field.method and field.constant
        }

    def __getattr__(self, name):
        if name.startswith("_lass_") or (name.startswith("__") and name.endswith("__")):
            raise AttributeError(name)
        try:
            return self._lass_methods[name]
        except KeyError:
            raise UsageError(
                f"Class '{self._lass_definition.name}' has no method '{name}'"
            ) from None

    def __call__(self, receiver, *args, **kwargs):
        definition = self._lass_definition
        if not isinstance(receiver, Instance):
            raise UsageError(
                f"The constructor of '{definition.name}' must be called with an "
                f"instance receiver: self.{definition.name}(self, ...)"
            )
        constructor = definition.constructor
        if constructor is None:
            raise UsageError(f"Class '{definition.name}' has no constructor")
        return constructor.default(receiver, *args, **kwargs)

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"<Super {self._lass_definition.name}>"


def _bind(instance, value):
    if isinstance(value, Method):
        return MethodType(value, instance)
    return value


class CheckedAccess:
    """Gate enforcing visibility, constancy and the undefined-field policy."""

    tracks_scope = True

    def __init__(self, config):
        self.config = config

    @contextmanager
    def entered(self, instance, scope):
        previous = instance._lass_scope
        object.__setattr__(instance, "_lass_scope", scope)
        try:
            yield
        finally:
            object.__setattr__(instance, "_lass_scope", previous)

    def _check_scope(self, action, key, field, scope):
        if not permits(field.visibility, scope):
            raise AccessError(
                f"Trying to {action} {describe_scope(field.visibility)} variable "
                f"'{key}' from the {describe_scope(scope)} scope"
            )

    def read(self, instance, key):
        storage = instance._lass_storage
        if is_numeric_key(key):
            return storage.get(key)
        field = instance._lass_definition.fields.get(key)
        if field is None:
            if not self.config.allows_undefined_read:
                raise AccessError(f"Trying to access undefined variable '{key}'")
            return _bind(instance, storage.get(key))
        self._check_scope("access", key, field, instance._lass_scope)
        return _bind(instance, storage.get(key))

    def write(self, instance, key, value):
        storage = instance._lass_storage
        if is_numeric_key(key):
            storage[key] = value
            return
        field = instance._lass_definition.fields.get(key)
        if field is None:
            if not self.config.allows_undefined_write:
                raise AccessError(f"Trying to set undefined variable '{key}'")
            storage[key] = value
            return
        self._check_scope("set", key, field, instance._lass_scope)
        if field.constant:
            if field.method:
                raise AccessError(f"Trying to overwrite a method ('{key}')")
            raise AccessError(f"Trying to overwrite a constant value ('{key}')")
        storage[key] = value


class DirectAccess:
    """Optimized gate: plain storage access without any checks."""

    tracks_scope = False

    def __init__(self, config):
        self.config = config

    def entered(self, instance, scope):
        return nullcontext()

    def read(self, instance, key):
        return _bind(instance, instance._lass_storage.get(key))

    def write(self, instance, key, value):
        instance._lass_storage[key] = value


def make_gate(config):
    if config.checked:
        return CheckedAccess(config)
    return DirectAccess(config)


def _binary(hook):
    def operator(self, other):
        handler = self._lass_hook(hook)
        if handler is None:
            return NotImplemented
        return handler(other)

    operator.__name__ = hook
    return operator


def _unary(hook, symbol):
    def operator(self):
        handler = self._lass_hook(hook)
        if handler is None:
            raise TypeError(
                f"bad operand type for unary {symbol}: '{self._lass_definition.name}'"
            )
        return handler()

    operator.__name__ = hook
    return operator


class Instance(Shared):
    """An object of a Lass class.

    Attribute and item access are routed through the registry's access gate;
    numeric item keys are array-like slots that are always public.
    """

    __slots__ = (
        "_lass_definition",
        "_lass_storage",
        "_lass_scope",
        "_lass_gate",
        "__weakref__",
    )

    def __init__(self, definition: ClassDefinition, gate):
        object.__setattr__(self, "_lass_definition", definition)
        object.__setattr__(self, "_lass_storage", {})
        object.__setattr__(self, "_lass_scope", PUBLIC)
        object.__setattr__(self, "_lass_gate", gate)

    def __getattr__(self, name):
        if name.startswith("_lass_") or (name.startswith("__") and name.endswith("__")):
            raise AttributeError(name)
        return self._lass_gate.read(self, name)

    def __setattr__(self, name, value):
        self._lass_gate.write(self, name, value)

    def __delattr__(self, name):
        self._lass_gate.write(self, name, None)

    def __getitem__(self, key):
        return self._lass_gate.read(self, key)

    def __setitem__(self, key, value):
        self._lass_gate.write(self, key, value)

    def _lass_hook(self, hook) -> Any:
        handler = self._lass_storage.get(hook)
        if handler is None:
            return None
        return MethodType(handler, self)

    __add__ = _binary("__add__")
    __sub__ = _binary("__sub__")
    __mul__ = _binary("__mul__")
    __truediv__ = _binary("__truediv__")
    __floordiv__ = _binary("__floordiv__")
    __mod__ = _binary("__mod__")
    __pow__ = _binary("__pow__")
    __radd__ = _binary("__radd__")
    __rsub__ = _binary("__rsub__")
    __rmul__ = _binary("__rmul__")
    __rtruediv__ = _binary("__rtruediv__")
    __rfloordiv__ = _binary("__rfloordiv__")
    __rmod__ = _binary("__rmod__")
    __rpow__ = _binary("__rpow__")
    __lt__ = _binary("__lt__")
    __le__ = _binary("__le__")
    __gt__ = _binary("__gt__")
    __ge__ = _binary("__ge__")
    __neg__ = _unary("__neg__", "-")
    __pos__ = _unary("__pos__", "+")
    __abs__ = _unary("__abs__", "abs()")

    def __eq__(self, other):
        handler = self._lass_hook("__eq__")
        if handler is None:
            return self is other
        return handler(other)

    __hash__ = object.__hash__
    __iter__ = None

    def __bool__(self):
        return True

    def __len__(self):
        handler = self._lass_hook("__len__")
        if handler is None:
            raise TypeError(
                f"object of type '{self._lass_definition.name}' has no len()"
            )
        return handler()

    def __contains__(self, item):
        handler = self._lass_hook("__contains__")
        if handler is None:
            raise TypeError(
                f"argument of type '{self._lass_definition.name}' is not iterable"
            )
        return bool(handler(item))

    def __call__(self, *args, **kwargs):
        handler = self._lass_hook("__call__")
        if handler is None:
            raise TypeError(f"'{self._lass_definition.name}' object is not callable")
        return handler(*args, **kwargs)

    def __str__(self):
        handler = self._lass_hook("__str__")
        if handler is None:
            return repr(self)
        return str(handler())

    def __repr__(self):
        return f"<{self._lass_definition.name} instance at {id(self):#x}>"


__all__ = [
    "CheckedAccess",
    "DirectAccess",
    "Instance",
    "Method",
    "Super",
    "make_gate",
]
