"""
MinAll Environment - Chained lexical scopes

Each Environment maps names to values and links to the scope it was
created in. Lookup walks outward from the innermost scope; the first
match wins. A new Environment is made for every function call and for
every block body, so when the call or block exits its scope simply
becomes unreachable.
"""

from typing import Any, Dict, Iterator, Optional

from .errors import MinAllRuntimeError, E_NAME_ERROR


class Environment:
    """One scope in the chain"""
    __slots__ = ('vars', 'parent')

    def __init__(self, parent: Optional['Environment'] = None):
        self.vars: Dict[str, Any] = {}
        self.parent = parent

    def define(self, name: str, value: Any):
        """Declare (or redeclare) name in this scope"""
        self.vars[name] = value

    def lookup(self, name: str) -> Any:
        """Value bound to name in the nearest enclosing scope"""
        env = self
        while env is not None:
            vars = env.vars
            if name in vars:
                return vars[name]
            env = env.parent
        raise MinAllRuntimeError(f"Undefined variable: {name}", E_NAME_ERROR)

    def assign(self, name: str, value: Any, create: bool = True):
        """Rebind name where it is declared.

        An undeclared name is created in this (innermost) scope when
        ``create`` is set, otherwise it is an error.
        """
        env = self
        while env is not None:
            vars = env.vars
            if name in vars:
                vars[name] = value
                return
            env = env.parent
        if not create:
            raise MinAllRuntimeError(f"Assignment to undeclared variable: {name}", E_NAME_ERROR)
        self.vars[name] = value

    def resolve(self, name: str) -> Optional['Environment']:
        """Scope that declares name, or None"""
        env = self
        while env is not None:
            if name in env.vars:
                return env
            env = env.parent
        return None

    def is_defined(self, name: str) -> bool:
        return self.resolve(name) is not None

    def chain(self) -> Iterator['Environment']:
        """Iterate from this scope out to the root"""
        env = self
        while env is not None:
            yield env
            env = env.parent

    def depth(self) -> int:
        return sum(1 for _ in self.chain()) - 1

    def __repr__(self):
        return f"<Environment {sorted(self.vars)} depth={self.depth()}>"
