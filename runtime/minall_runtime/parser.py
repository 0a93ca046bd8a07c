"""
MinAll Parser - Recursive descent from tokens to AST

Precedence, lowest to highest:
    assignment      =            (right associative)
    logical or      ||
    logical and     &&
    equality        == !=
    relational      < > <= >=
    additive        + -
    multiplicative  * / %
    unary           - !
    call            primary(args...)
    primary         literal, identifier, ( expression )

Statements:
    var name = expr;            function name(a, b) { ... }
    if (cond) stmt else stmt    while (cond) stmt
    for (init; cond; update) stmt
    return expr;                { ... }                expr;

Semicolons after simple statements are optional. The parser pulls tokens
from the lazy tokenizer with a single token of lookahead.
"""

from typing import Iterable, Iterator, List

from .ast_nodes import (
    ASTNode, Literal, Identifier, BinaryOp, UnaryOp, Assign, Call,
    ExpressionStatement, VarDecl, Block, If, While, For, FunctionDecl, Return, Program,
)
from .config import DEFAULT_MAX_CALL_DEPTH
from .errors import ParseError
from .hoststack import raised_recursion_limit, recursion_budget
from .lexer import MinAllTokenizer, Token, TokenType


_EQUALITY_OPS = {TokenType.EQUAL_EQUAL: '==', TokenType.NOT_EQUAL: '!='}
_RELATIONAL_OPS = {
    TokenType.LESS: '<',
    TokenType.LESS_EQUAL: '<=',
    TokenType.GREATER: '>',
    TokenType.GREATER_EQUAL: '>=',
}
_ADDITIVE_OPS = {TokenType.PLUS: '+', TokenType.MINUS: '-'}
_MULTIPLICATIVE_OPS = {TokenType.STAR: '*', TokenType.SLASH: '/', TokenType.PERCENT: '%'}
_UNARY_OPS = {TokenType.MINUS: '-', TokenType.NOT: '!'}


def describe_token(token: Token) -> str:
    """Human-readable name of a token for error messages"""
    if token.type == TokenType.EOF:
        return "end of input"
    if token.type == TokenType.STRING:
        return f'string "{token.value}"'
    if token.type == TokenType.NUMBER:
        return f"number {token.value:g}"
    if token.type == TokenType.IDENTIFIER:
        return f"identifier '{token.value}'"
    return f"'{token.value}'"


class MinAllParser:
    """Parse MinAll tokens into an AST"""

    def __init__(self, tokens: Iterable[Token]):
        self._tokens: Iterator[Token] = iter(tokens)
        self._current: Token = self._next_token()

    @classmethod
    def from_source(cls, source: str) -> 'MinAllParser':
        return cls(MinAllTokenizer(source).tokens())

    def parse(self) -> Program:
        """Parse all statements up to end of input"""
        statements = []
        while not self._is_at_end():
            statements.append(self._parse_statement())
        return Program(statements=tuple(statements))

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _parse_statement(self) -> ASTNode:
        """Parse a single statement"""
        kind = self._current.type
        if kind == TokenType.VAR:
            return self._parse_var_declaration()
        if kind == TokenType.FUNCTION:
            return self._parse_function_declaration()
        if kind == TokenType.IF:
            return self._parse_if()
        if kind == TokenType.WHILE:
            return self._parse_while()
        if kind == TokenType.FOR:
            return self._parse_for()
        if kind == TokenType.RETURN:
            return self._parse_return()
        if kind == TokenType.LBRACE:
            return self._parse_block()

        start = self._current
        expr = self._parse_expression()
        self._match(TokenType.SEMICOLON)
        return ExpressionStatement(expression=expr, line=start.line, column=start.column)

    def _parse_var_declaration(self, require_end: bool = True) -> VarDecl:
        """Parse var declaration; the for-loop header parses it without the ';'"""
        keyword = self._advance()
        name = self._expect(TokenType.IDENTIFIER, "variable name after 'var'").value

        value = None
        if self._match(TokenType.EQUAL):
            value = self._parse_expression()

        if require_end:
            self._match(TokenType.SEMICOLON)
        return VarDecl(name=name, value=value, line=keyword.line, column=keyword.column)

    def _parse_function_declaration(self) -> FunctionDecl:
        """Parse function declaration"""
        keyword = self._advance()
        name = self._expect(TokenType.IDENTIFIER, "function name after 'function'").value
        self._expect(TokenType.LPAREN, "'(' after function name")

        params: List[str] = []
        if not self._check(TokenType.RPAREN):
            params.append(self._expect(TokenType.IDENTIFIER, "parameter name").value)
            while self._match(TokenType.COMMA):
                params.append(self._expect(TokenType.IDENTIFIER, "parameter name").value)
        self._expect(TokenType.RPAREN, "')' after parameters")

        if len(set(params)) != len(params):
            raise ParseError(f"Duplicate parameter name in function '{name}'",
                             keyword.line, keyword.column)

        if not self._check(TokenType.LBRACE):
            self._error("'{' before function body")
        body = self._parse_block()
        return FunctionDecl(name=name, params=tuple(params), body=body,
                            line=keyword.line, column=keyword.column)

    def _parse_if(self) -> If:
        """Parse if/else; else binds to the nearest unmatched if"""
        keyword = self._advance()
        self._expect(TokenType.LPAREN, "'(' after 'if'")
        condition = self._parse_expression()
        self._expect(TokenType.RPAREN, "')' after if condition")

        then_branch = self._parse_statement()
        else_branch = None
        if self._match(TokenType.ELSE):
            else_branch = self._parse_statement()

        return If(condition=condition, then_branch=then_branch, else_branch=else_branch,
                  line=keyword.line, column=keyword.column)

    def _parse_while(self) -> While:
        """Parse while loop"""
        keyword = self._advance()
        self._expect(TokenType.LPAREN, "'(' after 'while'")
        condition = self._parse_expression()
        self._expect(TokenType.RPAREN, "')' after while condition")
        body = self._parse_statement()
        return While(condition=condition, body=body, line=keyword.line, column=keyword.column)

    def _parse_for(self) -> For:
        """Parse for loop"""
        keyword = self._advance()
        self._expect(TokenType.LPAREN, "'(' after 'for'")

        init = None
        if self._check(TokenType.VAR):
            init = self._parse_var_declaration(require_end=False)
        elif not self._check(TokenType.SEMICOLON):
            start = self._current
            init = ExpressionStatement(expression=self._parse_expression(),
                                       line=start.line, column=start.column)
        self._expect(TokenType.SEMICOLON, "';' after for-loop initializer")

        condition = None
        if not self._check(TokenType.SEMICOLON):
            condition = self._parse_expression()
        self._expect(TokenType.SEMICOLON, "';' after for-loop condition")

        update = None
        if not self._check(TokenType.RPAREN):
            update = self._parse_expression()
        self._expect(TokenType.RPAREN, "')' after for-loop clauses")

        body = self._parse_statement()
        return For(init=init, condition=condition, update=update, body=body,
                   line=keyword.line, column=keyword.column)

    def _parse_return(self) -> Return:
        """Parse return statement"""
        keyword = self._advance()
        value = None
        if not self._check(TokenType.SEMICOLON, TokenType.RBRACE, TokenType.EOF):
            value = self._parse_expression()
        self._match(TokenType.SEMICOLON)
        return Return(value=value, line=keyword.line, column=keyword.column)

    def _parse_block(self) -> Block:
        """Parse braced block"""
        brace = self._advance()
        statements = []
        while not self._check(TokenType.RBRACE):
            if self._is_at_end():
                raise ParseError(
                    f"Expected '}}' to close block opened at line {brace.line}, column {brace.column}, "
                    f"found end of input", self._current.line, self._current.column)
            statements.append(self._parse_statement())
        self._advance()
        return Block(statements=tuple(statements), line=brace.line, column=brace.column)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_expression(self) -> ASTNode:
        """Parse expression"""
        return self._parse_assignment()

    def _parse_assignment(self) -> ASTNode:
        """Parse assignment (right associative)"""
        expr = self._parse_or()
        if self._check(TokenType.EQUAL):
            equals = self._advance()
            if not isinstance(expr, Identifier):
                raise ParseError("Invalid assignment target", equals.line, equals.column)
            value = self._parse_assignment()
            return Assign(name=expr.name, value=value, line=expr.line, column=expr.column)
        return expr

    def _parse_or(self) -> ASTNode:
        """Parse logical OR"""
        left = self._parse_and()
        while self._check(TokenType.OR):
            op = self._advance()
            right = self._parse_and()
            left = BinaryOp(op='||', left=left, right=right, line=op.line, column=op.column)
        return left

    def _parse_and(self) -> ASTNode:
        """Parse logical AND"""
        left = self._parse_equality()
        while self._check(TokenType.AND):
            op = self._advance()
            right = self._parse_equality()
            left = BinaryOp(op='&&', left=left, right=right, line=op.line, column=op.column)
        return left

    def _parse_equality(self) -> ASTNode:
        return self._parse_binary_level(_EQUALITY_OPS, self._parse_relational)

    def _parse_relational(self) -> ASTNode:
        return self._parse_binary_level(_RELATIONAL_OPS, self._parse_additive)

    def _parse_additive(self) -> ASTNode:
        return self._parse_binary_level(_ADDITIVE_OPS, self._parse_multiplicative)

    def _parse_multiplicative(self) -> ASTNode:
        return self._parse_binary_level(_MULTIPLICATIVE_OPS, self._parse_unary)

    def _parse_binary_level(self, ops, operand) -> ASTNode:
        """Parse one left-associative binary precedence level"""
        left = operand()
        while self._current.type in ops:
            token = self._advance()
            right = operand()
            left = BinaryOp(op=ops[token.type], left=left, right=right,
                            line=token.line, column=token.column)
        return left

    def _parse_unary(self) -> ASTNode:
        """Parse unary operators"""
        if self._current.type in _UNARY_OPS:
            token = self._advance()
            operand = self._parse_unary()
            return UnaryOp(op=_UNARY_OPS[token.type], operand=operand,
                           line=token.line, column=token.column)
        return self._parse_call()

    def _parse_call(self) -> ASTNode:
        """Parse call suffixes: f(a)(b) is (f(a))(b)"""
        expr = self._parse_primary()

        while self._check(TokenType.LPAREN):
            paren = self._advance()
            args = []
            if not self._check(TokenType.RPAREN):
                args.append(self._parse_expression())
                while self._match(TokenType.COMMA):
                    args.append(self._parse_expression())
            self._expect(TokenType.RPAREN, "')' after call arguments")
            expr = Call(callee=expr, args=tuple(args), line=paren.line, column=paren.column)

        return expr

    def _parse_primary(self) -> ASTNode:
        """Parse primary expression"""
        token = self._current

        if token.type in (TokenType.NUMBER, TokenType.STRING, TokenType.TRUE, TokenType.FALSE):
            self._advance()
            return Literal(value=token.value, line=token.line, column=token.column)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return Identifier(name=token.value, line=token.line, column=token.column)

        if token.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_expression()
            self._expect(TokenType.RPAREN, "')' after expression")
            return expr

        self._error("expression")

    # ------------------------------------------------------------------
    # Parser utilities
    # ------------------------------------------------------------------

    def _next_token(self) -> Token:
        return next(self._tokens)

    def _advance(self) -> Token:
        """Consume current token and return it"""
        token = self._current
        if token.type != TokenType.EOF:
            self._current = self._next_token()
        return token

    def _check(self, *types: str) -> bool:
        """Check if current token is any of the given types"""
        return self._current.type in types

    def _match(self, token_type: str) -> bool:
        """Consume current token if it matches"""
        if self._current.type == token_type:
            self._advance()
            return True
        return False

    def _expect(self, token_type: str, expected: str) -> Token:
        """Consume a token of the given type or fail naming what was expected"""
        if self._current.type != token_type:
            self._error(expected)
        return self._advance()

    def _error(self, expected: str):
        token = self._current
        raise ParseError(f"Expected {expected}, found {describe_token(token)}",
                         token.line, token.column)

    def _is_at_end(self) -> bool:
        return self._current.type == TokenType.EOF


def parse(source: str, max_call_depth: int = DEFAULT_MAX_CALL_DEPTH) -> Program:
    """Parse source text into a Program (convenience function)

    Runs with the host recursion limit sized for max_call_depth, the same
    budget the evaluator gets, so nesting in the thousands parses. Nesting
    past that budget is a ParseError rather than a RecursionError.
    """
    with raised_recursion_limit(recursion_budget(max_call_depth)):
        try:
            return MinAllParser.from_source(source).parse()
        except RecursionError:
            raise ParseError("Program is nested too deeply to parse") from None


__all__ = ['MinAllParser', 'parse', 'describe_token']
