"""
MinAll AST - Immutable syntax tree nodes

Nodes are frozen dataclasses holding tuples, so a parsed Program can be
shared and re-run without the evaluator ever changing its shape. Source
positions ride along for error reporting but are excluded from equality,
which makes two parses of equivalent source compare equal.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class ASTNode:
    """Base AST node"""
    pass


def _pos():
    return field(default=0, compare=False, repr=False)


# ============================================================================
# Expressions
# ============================================================================

@dataclass(frozen=True)
class Literal(ASTNode):
    """Number, string or boolean literal"""
    value: Union[float, str, bool]
    line: int = _pos()
    column: int = _pos()

    # bool is an int subclass, so True == 1.0; the value's type has to match too
    def __eq__(self, other):
        if type(other) is not Literal:
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self):
        return hash((type(self.value), self.value))


@dataclass(frozen=True)
class Identifier(ASTNode):
    """Variable reference"""
    name: str
    line: int = _pos()
    column: int = _pos()


@dataclass(frozen=True)
class BinaryOp(ASTNode):
    """Binary operation, including the short-circuit && and ||"""
    op: str
    left: ASTNode
    right: ASTNode
    line: int = _pos()
    column: int = _pos()


@dataclass(frozen=True)
class UnaryOp(ASTNode):
    """Unary - or !"""
    op: str
    operand: ASTNode
    line: int = _pos()
    column: int = _pos()


@dataclass(frozen=True)
class Assign(ASTNode):
    """Assignment: name = value"""
    name: str
    value: ASTNode
    line: int = _pos()
    column: int = _pos()


@dataclass(frozen=True)
class Call(ASTNode):
    """Call expression: callee(args...)"""
    callee: ASTNode
    args: Tuple[ASTNode, ...]
    line: int = _pos()
    column: int = _pos()


# ============================================================================
# Statements
# ============================================================================

@dataclass(frozen=True)
class ExpressionStatement(ASTNode):
    """Expression evaluated for its side effects"""
    expression: ASTNode
    line: int = _pos()
    column: int = _pos()


@dataclass(frozen=True)
class VarDecl(ASTNode):
    """Variable declaration: var name = value; (value optional)"""
    name: str
    value: Optional[ASTNode]
    line: int = _pos()
    column: int = _pos()


@dataclass(frozen=True)
class Block(ASTNode):
    """Braced block of statements"""
    statements: Tuple[ASTNode, ...]
    line: int = _pos()
    column: int = _pos()


@dataclass(frozen=True)
class If(ASTNode):
    """if/else; an else-if chain nests another If in else_branch"""
    condition: ASTNode
    then_branch: ASTNode
    else_branch: Optional[ASTNode]
    line: int = _pos()
    column: int = _pos()


@dataclass(frozen=True)
class While(ASTNode):
    """while loop"""
    condition: ASTNode
    body: ASTNode
    line: int = _pos()
    column: int = _pos()


@dataclass(frozen=True)
class For(ASTNode):
    """for (init; condition; update) body - every clause optional"""
    init: Optional[ASTNode]
    condition: Optional[ASTNode]
    update: Optional[ASTNode]
    body: ASTNode
    line: int = _pos()
    column: int = _pos()


@dataclass(frozen=True)
class FunctionDecl(ASTNode):
    """function name(params...) { body }"""
    name: str
    params: Tuple[str, ...]
    body: Block
    line: int = _pos()
    column: int = _pos()


@dataclass(frozen=True)
class Return(ASTNode):
    """return statement (value optional)"""
    value: Optional[ASTNode]
    line: int = _pos()
    column: int = _pos()


@dataclass(frozen=True)
class Program(ASTNode):
    """Ordered top-level statements"""
    statements: Tuple[ASTNode, ...]


__all__ = [
    'ASTNode', 'Literal', 'Identifier', 'BinaryOp', 'UnaryOp', 'Assign', 'Call',
    'ExpressionStatement', 'VarDecl', 'Block', 'If', 'While', 'For',
    'FunctionDecl', 'Return', 'Program',
]
