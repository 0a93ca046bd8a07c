"""
MinAll Built-ins

Intrinsics live in a root scope above the program's globals and are
called through the same path as user functions. A builtin receives the
evaluated argument values positionally and returns a MinAll value.
"""

import sys
from typing import Any, Callable, Dict, Optional, TextIO

from .values import UNDEFINED, Builtin, to_display


def make_print(output: Optional[TextIO] = None) -> Builtin:
    """print(...): display forms joined by one space, newline terminated"""

    def _print(*args: Any) -> Any:
        stream = output if output is not None else sys.stdout
        stream.write(' '.join(to_display(arg) for arg in args) + '\n')
        return UNDEFINED

    return Builtin('print', _print)


BUILTIN_FACTORIES: Dict[str, Callable[[Optional[TextIO]], Builtin]] = {
    'print': make_print,
}


def create_builtins(output: Optional[TextIO] = None) -> Dict[str, Builtin]:
    """Fresh builtin table bound to the given output stream"""
    return {name: factory(output) for name, factory in BUILTIN_FACTORIES.items()}


__all__ = ['make_print', 'create_builtins', 'BUILTIN_FACTORIES']
