"""Exception taxonomy for the Lass runtime."""


class LassError(RuntimeError):
    """Base class for every failure raised by the object model."""


class DefinitionError(LassError):
    """A class definition is malformed or conflicts with its ancestors."""


class AccessError(LassError):
    """A field read or write violated the instance's access rules."""


class UsageError(LassError):
    """The library was called the wrong way (bad syntax, missing receiver)."""


__all__ = ["AccessError", "DefinitionError", "LassError", "UsageError"]
