"""
MinAll Runtime - Minimal scripting language interpreter

This package provides the complete MinAll pipeline:

**Front End:**
- Lexer: lazy tokenizer (numbers, strings, identifiers, keywords, operators)
- Parser: recursive descent with one token of lookahead, building an immutable AST

**Execution:**
- Evaluator: tree walker over chained lexical scopes with first-class functions
- Values: float numbers, strings, booleans, undefined, functions
- Builtins: print

**Host Surface:**
- MinAllRuntime / execute_minall: run source text or files
- RuntimeConfig: call depth limit and strictness policies
- format_ast / to_source: AST debugging and serialization

Version: 1.0.0
"""

import logging

__version__ = '1.0.0'

# ============================================================================
# Errors
# ============================================================================

from .errors import (
    MinAllError, LexError, ParseError, MinAllRuntimeError, StackOverflowError,
    E_LEX_ERROR, E_PARSE_ERROR, E_RUNTIME_ERROR, E_NAME_ERROR,
    E_TYPE_ERROR, E_ARITY_ERROR, E_STACK_OVERFLOW,
)

# ============================================================================
# Front End
# ============================================================================

from .lexer import Token, TokenType, MinAllTokenizer, tokenize
from .ast_nodes import (
    ASTNode, Literal, Identifier, BinaryOp, UnaryOp, Assign, Call,
    ExpressionStatement, VarDecl, Block, If, While, For, FunctionDecl, Return, Program,
)
from .parser import MinAllParser, parse

# ============================================================================
# Execution
# ============================================================================

from .values import UNDEFINED, Undefined, Function, Builtin, to_display, is_truthy
from .environment import Environment
from .config import RuntimeConfig
from .evaluator import MinAllEvaluator
from .runtime import MinAllRuntime, execute_minall
from .ast_printer import format_ast, to_source

logging.getLogger(__name__).addHandler(logging.NullHandler())

# ============================================================================
# Exports
# ============================================================================

__all__ = [
    # Version
    '__version__',

    # Errors
    'MinAllError', 'LexError', 'ParseError', 'MinAllRuntimeError', 'StackOverflowError',
    'E_LEX_ERROR', 'E_PARSE_ERROR', 'E_RUNTIME_ERROR', 'E_NAME_ERROR',
    'E_TYPE_ERROR', 'E_ARITY_ERROR', 'E_STACK_OVERFLOW',

    # Front end
    'Token', 'TokenType', 'MinAllTokenizer', 'tokenize',
    'ASTNode', 'Literal', 'Identifier', 'BinaryOp', 'UnaryOp', 'Assign', 'Call',
    'ExpressionStatement', 'VarDecl', 'Block', 'If', 'While', 'For',
    'FunctionDecl', 'Return', 'Program',
    'MinAllParser', 'parse',

    # Execution
    'UNDEFINED', 'Undefined', 'Function', 'Builtin', 'to_display', 'is_truthy',
    'Environment', 'RuntimeConfig', 'MinAllEvaluator',
    'MinAllRuntime', 'execute_minall',
    'format_ast', 'to_source',
]
