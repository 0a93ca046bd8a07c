"""
MinAll Lexer - Source text to tokens

The tokenizer is a generator: tokens are produced one at a time as the
parser asks for them and are not retained, ending with a single EOF token.

Recognized lexemes:
    42  3.14            - Number literals (always floating point)
    "text"  'text'      - String literals, taken verbatim (no escapes)
    var function if else while for return true false
    + - * / % = == != < > <= >= && || !
    ( ) { } , ;
    // comment          - skipped to end of line
"""

import string
from dataclasses import dataclass
from typing import Any, Iterator, List

from .errors import LexError


# ============================================================================
# Token Types
# ============================================================================

@dataclass
class Token:
    """Token from MinAll source"""
    type: str
    value: Any
    line: int
    column: int


class TokenType:
    """Token type constants"""
    # Literals
    NUMBER = "NUMBER"
    STRING = "STRING"
    TRUE = "TRUE"
    FALSE = "FALSE"

    # Identifiers and keywords
    IDENTIFIER = "IDENTIFIER"
    VAR = "VAR"
    FUNCTION = "FUNCTION"
    IF = "IF"
    ELSE = "ELSE"
    WHILE = "WHILE"
    FOR = "FOR"
    RETURN = "RETURN"

    # Operators
    PLUS = "PLUS"
    MINUS = "MINUS"
    STAR = "STAR"
    SLASH = "SLASH"
    PERCENT = "PERCENT"
    EQUAL = "EQUAL"
    EQUAL_EQUAL = "EQUAL_EQUAL"
    NOT_EQUAL = "NOT_EQUAL"
    LESS = "LESS"
    LESS_EQUAL = "LESS_EQUAL"
    GREATER = "GREATER"
    GREATER_EQUAL = "GREATER_EQUAL"
    AND = "AND"
    OR = "OR"
    NOT = "NOT"

    # Delimiters
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"
    COMMA = "COMMA"
    SEMICOLON = "SEMICOLON"

    # Special
    EOF = "EOF"


DIGITS = frozenset(string.digits)
IDENT_START = frozenset(string.ascii_letters + '_')
IDENT_CHARS = IDENT_START | DIGITS

KEYWORDS = {
    'var': TokenType.VAR,
    'function': TokenType.FUNCTION,
    'if': TokenType.IF,
    'else': TokenType.ELSE,
    'while': TokenType.WHILE,
    'for': TokenType.FOR,
    'return': TokenType.RETURN,
    'true': TokenType.TRUE,
    'false': TokenType.FALSE,
}

# Two-character operators are matched before the single-character table.
DOUBLE_CHAR_TOKENS = {
    '==': TokenType.EQUAL_EQUAL,
    '!=': TokenType.NOT_EQUAL,
    '<=': TokenType.LESS_EQUAL,
    '>=': TokenType.GREATER_EQUAL,
    '&&': TokenType.AND,
    '||': TokenType.OR,
}

SINGLE_CHAR_TOKENS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '%': TokenType.PERCENT,
    '=': TokenType.EQUAL,
    '<': TokenType.LESS,
    '>': TokenType.GREATER,
    '!': TokenType.NOT,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    ',': TokenType.COMMA,
    ';': TokenType.SEMICOLON,
}


# ============================================================================
# Tokenizer
# ============================================================================

class MinAllTokenizer:
    """Tokenize MinAll source code"""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.line_start = 0

    def __iter__(self) -> Iterator[Token]:
        return self.tokens()

    def tokenize(self) -> List[Token]:
        """Tokenize entire source into a list (EOF included)"""
        return list(self.tokens())

    def tokens(self) -> Iterator[Token]:
        """Yield tokens lazily, ending with EOF"""
        source = self.source
        length = len(source)

        while True:
            self._skip_whitespace_and_comments()
            if self.pos >= length:
                break

            ch = source[self.pos]
            column = self._column()

            if ch in DIGITS:
                yield self._read_number(column)
            elif ch == '"' or ch == "'":
                yield self._read_string(column)
            elif ch in IDENT_START:
                yield self._read_identifier(column)
            else:
                pair = source[self.pos:self.pos + 2]
                if pair in DOUBLE_CHAR_TOKENS:
                    self.pos += 2
                    yield Token(DOUBLE_CHAR_TOKENS[pair], pair, self.line, column)
                elif ch in SINGLE_CHAR_TOKENS:
                    self.pos += 1
                    yield Token(SINGLE_CHAR_TOKENS[ch], ch, self.line, column)
                else:
                    raise LexError(f"Unexpected character '{ch}'", self.line, column)

        yield Token(TokenType.EOF, None, self.line, self._column())

    def _column(self) -> int:
        return self.pos - self.line_start + 1

    def _newline(self):
        self.line += 1
        self.line_start = self.pos

    def _skip_whitespace_and_comments(self):
        """Skip whitespace and // comments"""
        source = self.source
        length = len(source)
        while self.pos < length:
            ch = source[self.pos]
            if ch == '\n':
                self.pos += 1
                self._newline()
            elif ch in ' \t\r':
                self.pos += 1
            elif ch == '/' and source.startswith('//', self.pos):
                while self.pos < length and source[self.pos] != '\n':
                    self.pos += 1
            else:
                break

    def _read_number(self, column: int) -> Token:
        """Read numeric literal"""
        source = self.source
        start = self.pos
        has_dot = False

        while self.pos < len(source):
            ch = source[self.pos]
            if ch in DIGITS:
                self.pos += 1
            elif ch == '.' and not has_dot:
                has_dot = True
                self.pos += 1
            else:
                break

        text = source[start:self.pos]
        return Token(TokenType.NUMBER, float(text), self.line, column)

    def _read_string(self, column: int) -> Token:
        """Read string literal up to the matching quote"""
        quote = self.source[self.pos]
        line = self.line
        end = self.source.find(quote, self.pos + 1)
        if end == -1:
            raise LexError("Unterminated string literal", line, column)

        text = self.source[self.pos + 1:end]
        # Strings may span lines; keep line accounting exact.
        newlines = text.count('\n')
        if newlines:
            self.line += newlines
            self.line_start = self.pos + 1 + text.rfind('\n') + 1
        self.pos = end + 1
        return Token(TokenType.STRING, text, line, column)

    def _read_identifier(self, column: int) -> Token:
        """Read identifier or keyword"""
        source = self.source
        start = self.pos

        while self.pos < len(source):
            ch = source[self.pos]
            if ch in IDENT_CHARS:
                self.pos += 1
            else:
                break

        text = source[start:self.pos]
        kind = KEYWORDS.get(text, TokenType.IDENTIFIER)
        if kind == TokenType.TRUE:
            return Token(kind, True, self.line, column)
        if kind == TokenType.FALSE:
            return Token(kind, False, self.line, column)
        return Token(kind, text, self.line, column)


def tokenize(source: str) -> List[Token]:
    """Tokenize source into a list of tokens (convenience function)"""
    return MinAllTokenizer(source).tokenize()


__all__ = ['Token', 'TokenType', 'MinAllTokenizer', 'KEYWORDS', 'tokenize']
