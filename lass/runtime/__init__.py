"""
Lass: classes with access control on top of plain mappings.

  Class Definition Registry: merges parent schemas and a class body.
  Instance Runtime: copies defaults into per-instance storage and guards it.
  Front-End Syntax: ``lass("Cat").from_("Animal")({...})``.

| Visibility  | Readable/writable from                                  |
<------------- + ------------------------------------------------------->
| public      | anywhere                                                |
| protected   | any method running on the instance                      |
| private     | methods declared by the owning class only               |
"""

from . import analysis as _analysis
from . import annotations as _annotations
from . import core as _core
from . import errors as _errors
from . import instance as _instance
from . import registry as _registry
from . import syntax as _syntax
from .cli import load_registry, main, parse_args

from .analysis import *
from .annotations import *
from .core import *
from .errors import *
from .instance import *
from .registry import *
from .syntax import *

__all__ = []
for module in (_errors, _annotations, _core, _instance, _registry, _syntax, _analysis):
    __all__.extend(getattr(module, '__all__', []))
__all__ += ['load_registry', 'main', 'parse_args']
__all__ = list(dict.fromkeys(__all__))
