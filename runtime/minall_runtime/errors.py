"""
MinAll Errors - Error codes and exception taxonomy

Every layer raises its own exception class. All of them carry a string
error code and, where known, the source position of the offending token:

    LexError            E_LEX_ERROR        malformed token
    ParseError          E_PARSE_ERROR      grammar violation
    MinAllRuntimeError  E_RUNTIME_ERROR    evaluation failure (and the codes below)
    StackOverflowError  E_STACK_OVERFLOW   call depth exhausted

Nothing inside the runtime recovers from these; they propagate whole to the host.
"""

from typing import Optional


# ============================================================================
# Error Codes
# ============================================================================

E_LEX_ERROR = "E_LEX_ERROR"
E_PARSE_ERROR = "E_PARSE_ERROR"
E_RUNTIME_ERROR = "E_RUNTIME_ERROR"
E_NAME_ERROR = "E_NAME_ERROR"
E_TYPE_ERROR = "E_TYPE_ERROR"
E_ARITY_ERROR = "E_ARITY_ERROR"
E_STACK_OVERFLOW = "E_STACK_OVERFLOW"


# ============================================================================
# Exceptions
# ============================================================================

class MinAllError(Exception):
    """Base exception for MinAll errors"""

    def __init__(self, code: str, message: str,
                 line: Optional[int] = None, column: Optional[int] = None):
        self.code = code
        self.message = message
        self.line = line
        self.column = column
        super().__init__(self.format())

    def format(self) -> str:
        text = f"[{self.code}] {self.message}"
        if self.line is not None:
            text += f" (line {self.line}, column {self.column})"
        return text

    def at(self, line: Optional[int], column: Optional[int]) -> 'MinAllError':
        """Attach a source position if none is recorded yet"""
        if self.line is None and line:
            self.line = line
            self.column = column
            self.args = (self.format(),)
        return self


class LexError(MinAllError):
    """Unterminated string or unrecognized character"""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(E_LEX_ERROR, message, line, column)


class ParseError(MinAllError):
    """Token stream does not match the grammar"""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(E_PARSE_ERROR, message, line, column)


class MinAllRuntimeError(MinAllError):
    """Error raised while evaluating a program"""

    def __init__(self, message: str, code: str = E_RUNTIME_ERROR,
                 line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(code, message, line, column)


class StackOverflowError(MinAllRuntimeError):
    """Call depth exceeded the configured limit or the host stack"""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message, E_STACK_OVERFLOW, line, column)


__all__ = [
    'MinAllError', 'LexError', 'ParseError', 'MinAllRuntimeError', 'StackOverflowError',
    'E_LEX_ERROR', 'E_PARSE_ERROR', 'E_RUNTIME_ERROR', 'E_NAME_ERROR',
    'E_TYPE_ERROR', 'E_ARITY_ERROR', 'E_STACK_OVERFLOW',
]
