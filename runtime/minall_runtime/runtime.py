"""
MinAll Runtime - Host-facing interface

MinAllRuntime owns one explicitly constructed global scope for the
lifetime of the instance; each execute() call runs against it, so a host
can feed a program in pieces or inspect variables afterwards.

Example:
    >>> runtime = MinAllRuntime()
    >>> runtime.execute('function sq(x) { return x * x; } sq(7);')
    49.0
    >>> runtime.get_var('sq')
    [Function sq]
"""

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .ast_nodes import Program
from .config import RuntimeConfig
from .errors import MinAllError, E_NAME_ERROR, MinAllRuntimeError
from .evaluator import MinAllEvaluator
from .parser import parse
from .values import from_python

logger = logging.getLogger(__name__)


class MinAllRuntime:
    """Main MinAll runtime interface"""

    def __init__(self, config: Optional[RuntimeConfig] = None):
        self.config = config or RuntimeConfig()
        self.evaluator = MinAllEvaluator(self.config)

    def parse(self, source: str) -> Program:
        """Lex and parse source into a Program"""
        start = time.perf_counter()
        program = parse(source, self.config.max_call_depth)
        logger.debug("Parsed %d top-level statements in %.6fs",
                     len(program.statements), time.perf_counter() - start)
        return program

    def run(self, program: Program) -> Any:
        """Execute an already parsed Program against the global scope"""
        start = time.perf_counter()
        try:
            return self.evaluator.run(program)
        finally:
            logger.debug("Evaluated in %.6fs", time.perf_counter() - start)

    def execute(self, source: str) -> Any:
        """Execute MinAll source code.

        Returns the value of the final top-level expression statement, or
        undefined. Raises LexError, ParseError or MinAllRuntimeError.
        """
        return self.run(self.parse(source))

    def execute_file(self, filepath: Union[str, Path]) -> Any:
        """Execute a MinAll source file"""
        path = Path(filepath)
        logger.debug("Loading %s", path)
        source = path.read_text(encoding='utf-8')
        return self.execute(source)

    def get_var(self, name: str) -> Any:
        """Get a global (or builtin) by name"""
        try:
            return self.evaluator.globals.lookup(name)
        except MinAllError:
            raise MinAllRuntimeError(f"Undefined variable: {name}", E_NAME_ERROR) from None

    def set_var(self, name: str, value: Any):
        """Declare a global, converting plain host values (int, None) first"""
        self.evaluator.globals.define(name, from_python(value))

    def get_env(self) -> Dict[str, Any]:
        """Copy of the program's global bindings (builtins excluded)"""
        return dict(self.evaluator.globals.vars)

    def clear_env(self):
        """Start a fresh global scope, keeping builtins"""
        self.evaluator.reset_globals()


def execute_minall(source: str, config: Optional[RuntimeConfig] = None) -> Any:
    """
    Execute MinAll source code (convenience function)

    Args:
        source: MinAll source code
        config: optional runtime configuration

    Returns:
        Value of the final top-level expression statement

    Example:
        >>> execute_minall('2 + 3 * 4')
        14.0
    """
    return MinAllRuntime(config).execute(source)


__all__ = ['MinAllRuntime', 'execute_minall']
