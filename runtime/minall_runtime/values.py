"""
MinAll Values - Runtime value model and operator semantics

The value model is a closed set of Python types, checked with exact
``type(...) is`` tests so that bool never passes for a number:

    Number      float       (the only numeric kind)
    String      str
    Boolean     bool
    Undefined   Undefined   (the UNDEFINED singleton)
    Function    Function    (user-defined, closes over its defining scope)
    Builtin     Builtin     (host intrinsic such as print)

Numbers, strings and booleans are stored directly, never wrapped, so the
arithmetic fast path (float op float) produces a bare float with no extra
wrapper object. Booleans and Undefined are shared singletons.
"""

import math
from decimal import Decimal
from typing import Any, Callable, Optional, Tuple

from .errors import MinAllRuntimeError, E_TYPE_ERROR


# ============================================================================
# Value Types
# ============================================================================

class Undefined:
    """The undefined value; use the UNDEFINED singleton"""
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return 'undefined'

    def __bool__(self):
        return False


UNDEFINED = Undefined()


class Function:
    """User-defined function: name, parameters, body and defining scope"""
    __slots__ = ('name', 'params', 'body', 'closure')

    def __init__(self, name: str, params: Tuple[str, ...], body, closure):
        self.name = name
        self.params = params
        self.body = body
        self.closure = closure

    def __repr__(self):
        return f"[Function {self.name}]"


class Builtin:
    """Host-provided function invoked through the ordinary call path"""
    __slots__ = ('name', 'fn')

    def __init__(self, name: str, fn: Callable[..., Any]):
        self.name = name
        self.fn = fn

    def __repr__(self):
        return f"[Builtin {self.name}]"


def type_name(value: Any) -> str:
    """Language-level type name of a value"""
    t = type(value)
    if t is float:
        return 'number'
    if t is str:
        return 'string'
    if t is bool:
        return 'boolean'
    if t is Undefined:
        return 'undefined'
    if t is Function or t is Builtin:
        return 'function'
    raise MinAllRuntimeError(f"Not a MinAll value: {value!r}", E_TYPE_ERROR)


def from_python(value: Any) -> Any:
    """Convert a host value into a MinAll value"""
    if value is None:
        return UNDEFINED
    t = type(value)
    if t is bool or t is str or t is float or t is Undefined or t is Function or t is Builtin:
        return value
    if t is int:
        return float(value)
    raise MinAllRuntimeError(f"Cannot convert host value of type {t.__name__}", E_TYPE_ERROR)


# ============================================================================
# Truthiness and Display
# ============================================================================

def is_truthy(value: Any) -> bool:
    """Undefined, false, 0, -0 and NaN are falsy; everything else is truthy"""
    t = type(value)
    if t is bool:
        return value
    if t is float:
        return value != 0.0 and value == value
    if t is Undefined:
        return False
    return True


_EXACT_INTEGER_LIMIT = 2.0 ** 53


def format_number(number: float) -> str:
    """Render a number the way JavaScript prints it.

    Uses the shortest digits that round-trip. Plain decimal notation is
    used for magnitudes from 1e-6 up to (but excluding) 1e21, exponent
    notation otherwise: 42, 3.14, 0.00001, 1e-7, 1e+21.
    """
    if number != number:
        return 'NaN'
    if number == math.inf:
        return 'Infinity'
    if number == -math.inf:
        return '-Infinity'
    if number == 0.0:
        return '0'
    # Integers below 2**53 are their own shortest representation.
    if number.is_integer() and abs(number) < _EXACT_INTEGER_LIMIT:
        return str(int(number))

    sign = '-' if number < 0 else ''
    shortest = Decimal(repr(abs(number))).normalize().as_tuple()
    digits = ''.join(map(str, shortest.digits))
    k = len(digits)
    point = shortest.exponent + k

    if k <= point <= 21:
        return sign + digits + '0' * (point - k)
    if 0 < point <= 21:
        return f"{sign}{digits[:point]}.{digits[point:]}"
    if -6 < point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"
    exponent = point - 1
    mantissa = digits[0] if k == 1 else f"{digits[0]}.{digits[1:]}"
    return f"{sign}{mantissa}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"


def to_display(value: Any) -> str:
    """Display-string form used by print and string concatenation"""
    t = type(value)
    if t is str:
        return value
    if t is float:
        return format_number(value)
    if t is bool:
        return 'true' if value else 'false'
    if t is Undefined:
        return 'undefined'
    if t is Function or t is Builtin:
        return repr(value)
    raise MinAllRuntimeError(f"Not a MinAll value: {value!r}", E_TYPE_ERROR)


# ============================================================================
# Operators
# ============================================================================

def to_number(value: Any, op: str) -> float:
    """Numeric coercion: numbers as-is, booleans to 1/0, anything else fails"""
    t = type(value)
    if t is float:
        return value
    if t is bool:
        return 1.0 if value else 0.0
    raise MinAllRuntimeError(f"Operator '{op}' cannot be applied to {type_name(value)}", E_TYPE_ERROR)


def add(left: Any, right: Any) -> Any:
    """'+': string concatenation if either side is a string, else numeric addition"""
    tl = type(left)
    tr = type(right)
    if tl is float and tr is float:
        return left + right
    if tl is str or tr is str:
        return to_display(left) + to_display(right)
    return to_number(left, '+') + to_number(right, '+')


def subtract(left: Any, right: Any) -> float:
    if type(left) is float and type(right) is float:
        return left - right
    return to_number(left, '-') - to_number(right, '-')


def multiply(left: Any, right: Any) -> float:
    if type(left) is float and type(right) is float:
        return left * right
    return to_number(left, '*') * to_number(right, '*')


def divide(left: Any, right: Any) -> float:
    """IEEE division: x/0 is +/-Infinity, 0/0 is NaN"""
    left = to_number(left, '/')
    right = to_number(right, '/')
    if right == 0.0:
        if left == 0.0 or left != left:
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def modulo(left: Any, right: Any) -> float:
    """Floating remainder truncated toward the dividend's sign"""
    left = to_number(left, '%')
    right = to_number(right, '%')
    if right == 0.0 or math.isinf(left):
        return math.nan
    return math.fmod(left, right)


def negate(value: Any) -> float:
    if type(value) is float:
        return -value
    return -to_number(value, '-')


def _relational(op: str, compare: Callable[[float, float], bool]):
    def apply(left: Any, right: Any) -> bool:
        if type(left) is float and type(right) is float:
            return compare(left, right)
        raise MinAllRuntimeError(
            f"Operator '{op}' requires numbers, got {type_name(left)} and {type_name(right)}",
            E_TYPE_ERROR)
    return apply


less = _relational('<', lambda a, b: a < b)
less_equal = _relational('<=', lambda a, b: a <= b)
greater = _relational('>', lambda a, b: a > b)
greater_equal = _relational('>=', lambda a, b: a >= b)


def values_equal(left: Any, right: Any) -> bool:
    """Strict equality: different kinds are never equal"""
    t = type(left)
    if t is not type(right):
        return False
    if t is float or t is str or t is bool:
        return left == right
    return left is right


def values_not_equal(left: Any, right: Any) -> bool:
    return not values_equal(left, right)


BINARY_OPERATORS = {
    '+': add,
    '-': subtract,
    '*': multiply,
    '/': divide,
    '%': modulo,
    '<': less,
    '<=': less_equal,
    '>': greater,
    '>=': greater_equal,
    '==': values_equal,
    '!=': values_not_equal,
}


def binary_operator(op: str) -> Optional[Callable[[Any, Any], Any]]:
    """Implementation of a (non short-circuit) binary operator, or None"""
    return BINARY_OPERATORS.get(op)


__all__ = [
    'Undefined', 'UNDEFINED', 'Function', 'Builtin',
    'type_name', 'from_python', 'is_truthy', 'format_number', 'to_display',
    'to_number', 'add', 'subtract', 'multiply', 'divide', 'modulo', 'negate',
    'less', 'less_equal', 'greater', 'greater_equal',
    'values_equal', 'values_not_equal', 'BINARY_OPERATORS', 'binary_operator',
]
