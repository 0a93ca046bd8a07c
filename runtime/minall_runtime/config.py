"""
MinAll Runtime Configuration

Language policies and limits for one runtime instance. Values can come
from keyword arguments, from MINALL_* environment variables, or both
(RuntimeConfig.from_env(**overrides)).
"""

import os
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional, TextIO


DEFAULT_MAX_CALL_DEPTH = 3000

_TRUE_STRINGS = {'1', 'true', 'yes', 'on'}
_FALSE_STRINGS = {'0', 'false', 'no', 'off', ''}


def _parse_bool(name: str, text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    raise ValueError(f"{name}: expected a boolean, got {text!r}")


@dataclass
class RuntimeConfig:
    """Runtime configuration

    Attributes:
        max_call_depth: nested user-function calls allowed before StackOverflowError
        strict_assignment: assigning an undeclared name is an error instead of
            creating it in the current scope
        strict_arity: calling a function with the wrong number of arguments is an
            error instead of padding with undefined / dropping extras
        output: stream print writes to (None means sys.stdout at call time)
    """
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH
    strict_assignment: bool = False
    strict_arity: bool = False
    output: Optional[TextIO] = None

    def __post_init__(self):
        if not isinstance(self.max_call_depth, int) or isinstance(self.max_call_depth, bool):
            raise ValueError(f"max_call_depth must be an integer, got {self.max_call_depth!r}")
        if self.max_call_depth < 1:
            raise ValueError(f"max_call_depth must be at least 1, got {self.max_call_depth}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> 'RuntimeConfig':
        """Build a config from MINALL_* variables, then apply non-None overrides"""
        environ = os.environ if environ is None else environ
        values = {}

        depth = environ.get('MINALL_MAX_CALL_DEPTH')
        if depth is not None:
            try:
                values['max_call_depth'] = int(depth)
            except ValueError:
                raise ValueError(f"MINALL_MAX_CALL_DEPTH: expected an integer, got {depth!r}") from None

        for key, attr in (('MINALL_STRICT_ASSIGNMENT', 'strict_assignment'),
                          ('MINALL_STRICT_ARITY', 'strict_arity')):
            if key in environ:
                values[attr] = _parse_bool(key, environ[key])

        known = {f.name for f in fields(cls)}
        for key, value in overrides.items():
            if key not in known:
                raise TypeError(f"Unknown config option: {key}")
            if value is not None:
                values[key] = value

        return cls(**values)

    def with_output(self, output: Optional[TextIO]) -> 'RuntimeConfig':
        return replace(self, output=output)


__all__ = ['RuntimeConfig', 'DEFAULT_MAX_CALL_DEPTH']
