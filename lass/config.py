"""Registry configuration, fixed before any class is defined.

Env vars:
    LASS_UNDEFINED: strict, permissive-read or relaxed
    LASS_ACCESS: checked or optimized
"""

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_ACCESS_MODE, DEFAULT_UNDEFINED_POLICY, ENV_PREFIX

UndefinedPolicy = Literal["strict", "permissive-read", "relaxed"]
AccessMode = Literal["checked", "optimized"]


class LassConfig(BaseSettings):
    """How a registry treats undefined fields and whether access is checked.

    ``undefined`` is one of ``strict`` (reads and writes of undeclared fields
    fail), ``permissive-read`` (reads yield ``None``, writes fail) or
    ``relaxed`` (both succeed, writes define the field on the instance).
    ``access`` is ``checked`` or ``optimized``; the optimized mode skips every
    visibility and constancy check.

    Keyword arguments win over ``LASS_*`` environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        frozen=True,
    )

    undefined: UndefinedPolicy = DEFAULT_UNDEFINED_POLICY
    access: AccessMode = DEFAULT_ACCESS_MODE

    @field_validator("undefined", "access", mode="before")
    @classmethod
    def normalise(cls, v):
        if isinstance(v, str):
            return v.strip().lower().replace("_", "-")
        return v

    @property
    def checked(self):
        return self.access == "checked"

    @property
    def allows_undefined_read(self):
        return self.undefined != "strict"

    @property
    def allows_undefined_write(self):
        return self.undefined == "relaxed"

    def to_dict(self):
        return self.model_dump()

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise TypeError("Lass configuration must be built from a mapping")
        values = {}
        if data.get("undefined"):
            values["undefined"] = data["undefined"]
        access = data.get("access") or data.get("access_mode")
        if access:
            values["access"] = access
        return cls(**values)


__all__ = ["AccessMode", "LassConfig", "UndefinedPolicy"]
