"""Shared constant values for the Lass runtime."""

PUBLIC = "public"
PROTECTED = "protected"
PRIVATE = "private"
PRIVATE_PREFIX = "private:"

ACCESS_MODIFIERS = [PUBLIC, PROTECTED, PRIVATE]

MODIFIERS = [
    PUBLIC,
    PROTECTED,
    PRIVATE,
    "const",
    "reference",
    "instance",
    "nonmethod",
    "operator",
]

# Python hook names accepted after ``operator__``.
OPERATORS = [
    "add",
    "sub",
    "mul",
    "truediv",
    "floordiv",
    "mod",
    "pow",
    "radd",
    "rsub",
    "rmul",
    "rtruediv",
    "rfloordiv",
    "rmod",
    "rpow",
    "neg",
    "pos",
    "abs",
    "eq",
    "lt",
    "le",
    "gt",
    "ge",
    "len",
    "call",
    "str",
    "contains",
]

OPERATOR_ALIASES = {
    "div": "truediv",
    "idiv": "floordiv",
    "unm": "neg",
    "tostring": "str",
    "concat": "add",
    "rdiv": "rtruediv",
    "ridiv": "rfloordiv",
    "rconcat": "radd",
}

INHERIT_CONSTRUCTOR = "inherit"

DEFAULT_UNDEFINED_POLICY = "strict"
DEFAULT_ACCESS_MODE = "checked"

ENV_PREFIX = "LASS_"

CLASS_COLOR = "#8BC34A"
ADAPTER_COLOR = "#B0BEC5"

__all__ = [
    "ACCESS_MODIFIERS",
    "ADAPTER_COLOR",
    "CLASS_COLOR",
    "DEFAULT_ACCESS_MODE",
    "DEFAULT_UNDEFINED_POLICY",
    "ENV_PREFIX",
    "INHERIT_CONSTRUCTOR",
    "MODIFIERS",
    "OPERATORS",
    "OPERATOR_ALIASES",
    "PRIVATE",
    "PRIVATE_PREFIX",
    "PROTECTED",
    "PUBLIC",
]
