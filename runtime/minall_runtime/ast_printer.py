"""
MinAll AST Printer

Two renderings of a parsed program:

    format_ast(node)  - indented debugging tree (the `--ast` view)
    to_source(node)   - canonical source text that parses back to an
                        equal AST; every binary and unary expression is
                        parenthesized so precedence never has to be
                        reconstructed
"""

from decimal import Decimal
from typing import List

from .ast_nodes import (
    ASTNode, Literal, Identifier, BinaryOp, UnaryOp, Assign, Call,
    ExpressionStatement, VarDecl, Block, If, While, For, FunctionDecl, Return, Program,
)
from .config import DEFAULT_MAX_CALL_DEPTH
from .hoststack import raised_recursion_limit, recursion_budget
from .values import format_number

INDENT = '  '


# ============================================================================
# Debug Tree
# ============================================================================

def format_ast(node: ASTNode, max_call_depth: int = DEFAULT_MAX_CALL_DEPTH) -> str:
    """Render node as an indented tree.

    Uses the same recursion budget as parse(), so any tree that parsed
    under max_call_depth can be printed.
    """
    lines: List[str] = []
    with raised_recursion_limit(recursion_budget(max_call_depth)):
        _format(node, 0, lines)
    return '\n'.join(lines)


def _format(node: ASTNode, depth: int, lines: List[str]):
    if node is None:
        return
    pad = INDENT * depth

    if isinstance(node, (Program, Block)):
        lines.append(f"{pad}Block ({len(node.statements)} statements)")
        for stmt in node.statements:
            _format(stmt, depth + 1, lines)
    elif isinstance(node, ExpressionStatement):
        _format(node.expression, depth, lines)
    elif isinstance(node, VarDecl):
        lines.append(f"{pad}VarDecl: {node.name}")
        _format(node.value, depth + 1, lines)
    elif isinstance(node, FunctionDecl):
        lines.append(f"{pad}FuncDecl: {node.name} ({len(node.params)} params)")
        _format(node.body, depth + 1, lines)
    elif isinstance(node, BinaryOp):
        lines.append(f"{pad}BinaryOp: {node.op}")
        _format(node.left, depth + 1, lines)
        _format(node.right, depth + 1, lines)
    elif isinstance(node, UnaryOp):
        lines.append(f"{pad}UnaryOp: {node.op}")
        _format(node.operand, depth + 1, lines)
    elif isinstance(node, Assign):
        lines.append(f"{pad}Assign: {node.name}")
        _format(node.value, depth + 1, lines)
    elif isinstance(node, Call):
        lines.append(f"{pad}Call ({len(node.args)} args)")
        _format(node.callee, depth + 1, lines)
        for arg in node.args:
            _format(arg, depth + 1, lines)
    elif isinstance(node, If):
        lines.append(f"{pad}If")
        _format(node.condition, depth + 1, lines)
        _format(node.then_branch, depth + 1, lines)
        _format(node.else_branch, depth + 1, lines)
    elif isinstance(node, While):
        lines.append(f"{pad}While")
        _format(node.condition, depth + 1, lines)
        _format(node.body, depth + 1, lines)
    elif isinstance(node, For):
        lines.append(f"{pad}For")
        _format(node.init, depth + 1, lines)
        _format(node.condition, depth + 1, lines)
        _format(node.update, depth + 1, lines)
        _format(node.body, depth + 1, lines)
    elif isinstance(node, Return):
        lines.append(f"{pad}Return")
        _format(node.value, depth + 1, lines)
    elif isinstance(node, Identifier):
        lines.append(f"{pad}Identifier: {node.name}")
    elif isinstance(node, Literal):
        value = node.value
        if type(value) is bool:
            lines.append(f"{pad}Boolean: {'true' if value else 'false'}")
        elif type(value) is str:
            lines.append(f"{pad}String: {value}")
        else:
            lines.append(f"{pad}Number: {format_number(value)}")
    else:
        lines.append(f"{pad}Unknown node {type(node).__name__}")


# ============================================================================
# Source Serialization
# ============================================================================

def to_source(node: ASTNode, max_call_depth: int = DEFAULT_MAX_CALL_DEPTH) -> str:
    """Serialize node back into MinAll source"""
    with raised_recursion_limit(recursion_budget(max_call_depth)):
        if isinstance(node, Program):
            return '\n'.join([_statement(stmt, 0) for stmt in node.statements])
        if isinstance(node, (ExpressionStatement, VarDecl, Block, If, While, For, FunctionDecl, Return)):
            return _statement(node, 0)
        return _expression(node)


def _number_source(value: float) -> str:
    if value < 0 or value != value or value in (float('inf'), float('-inf')):
        raise ValueError(f"Number literal {value!r} has no source form")
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), 'f')


def _string_source(value: str) -> str:
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    raise ValueError("String literal containing both quote characters has no source form")


def _expression(node: ASTNode) -> str:
    if isinstance(node, Literal):
        value = node.value
        if type(value) is bool:
            return 'true' if value else 'false'
        if type(value) is str:
            return _string_source(value)
        return _number_source(value)
    if isinstance(node, Identifier):
        return node.name
    if isinstance(node, BinaryOp):
        return f"({_expression(node.left)} {node.op} {_expression(node.right)})"
    if isinstance(node, UnaryOp):
        return f"({node.op}{_expression(node.operand)})"
    if isinstance(node, Assign):
        return f"({node.name} = {_expression(node.value)})"
    if isinstance(node, Call):
        args = ', '.join([_expression(arg) for arg in node.args])
        return f"{_expression(node.callee)}({args})"
    raise ValueError(f"Not an expression node: {type(node).__name__}")


def _ends_with_open_if(node: ASTNode) -> bool:
    """True when an else written after node would attach inside it"""
    if isinstance(node, If):
        return node.else_branch is None or _ends_with_open_if(node.else_branch)
    if isinstance(node, (While, For)):
        return _ends_with_open_if(node.body)
    return False


def _statement(node: ASTNode, depth: int) -> str:
    pad = INDENT * depth

    if isinstance(node, ExpressionStatement):
        return f"{pad}{_expression(node.expression)};"
    if isinstance(node, VarDecl):
        return f"{pad}{_var_decl(node)};"
    if isinstance(node, Block):
        if not node.statements:
            return f"{pad}{{}}"
        inner = '\n'.join([_statement(stmt, depth + 1) for stmt in node.statements])
        return f"{pad}{{\n{inner}\n{pad}}}"
    if isinstance(node, If):
        text = f"{pad}if ({_expression(node.condition)})\n{_statement(node.then_branch, depth + 1)}"
        if node.else_branch is not None:
            if _ends_with_open_if(node.then_branch):
                raise ValueError("if/else cannot be written without changing which if the else binds to")
            text += f"\n{pad}else\n{_statement(node.else_branch, depth + 1)}"
        return text
    if isinstance(node, While):
        return f"{pad}while ({_expression(node.condition)})\n{_statement(node.body, depth + 1)}"
    if isinstance(node, For):
        init = ''
        if isinstance(node.init, VarDecl):
            init = _var_decl(node.init)
        elif isinstance(node.init, ExpressionStatement):
            init = _expression(node.init.expression)
        condition = '' if node.condition is None else _expression(node.condition)
        update = '' if node.update is None else _expression(node.update)
        return f"{pad}for ({init}; {condition}; {update})\n{_statement(node.body, depth + 1)}"
    if isinstance(node, FunctionDecl):
        params = ', '.join(node.params)
        return f"{pad}function {node.name}({params}) {_statement(node.body, depth).lstrip()}"
    if isinstance(node, Return):
        if node.value is None:
            return f"{pad}return;"
        return f"{pad}return {_expression(node.value)};"
    raise ValueError(f"Not a statement node: {type(node).__name__}")


def _var_decl(node: VarDecl) -> str:
    if node.value is None:
        return f"var {node.name}"
    return f"var {node.name} = {_expression(node.value)}"


__all__ = ['format_ast', 'to_source']
