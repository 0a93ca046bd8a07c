"""
Test suite for the MinAll recursive-descent parser
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from minall_runtime.parser import MinAllParser, parse
from minall_runtime.lexer import MinAllTokenizer
from minall_runtime.errors import ParseError, LexError, E_PARSE_ERROR
from minall_runtime.ast_nodes import (
    Literal, Identifier, BinaryOp, UnaryOp, Assign, Call,
    ExpressionStatement, VarDecl, Block, If, While, For, FunctionDecl, Return, Program,
)


def expr(source):
    """Parse a single expression statement and return its expression"""
    program = parse(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


def num(value):
    return Literal(float(value))


class TestPrecedence:
    """Test operator precedence and associativity"""

    def test_multiplication_binds_tighter(self):
        assert expr('1 + 2 * 3') == BinaryOp('+', num(1), BinaryOp('*', num(2), num(3)))

    def test_left_associative_subtraction(self):
        assert expr('10 - 4 - 3') == BinaryOp('-', BinaryOp('-', num(10), num(4)), num(3))

    def test_left_associative_division(self):
        assert expr('8 / 4 / 2') == BinaryOp('/', BinaryOp('/', num(8), num(4)), num(2))

    def test_parentheses(self):
        assert expr('(1 + 2) * 3') == BinaryOp('*', BinaryOp('+', num(1), num(2)), num(3))

    def test_relational_over_equality(self):
        assert expr('1 < 2 == 3 > 4') == BinaryOp(
            '==', BinaryOp('<', num(1), num(2)), BinaryOp('>', num(3), num(4)))

    def test_and_over_or(self):
        a, b, c = Identifier('a'), Identifier('b'), Identifier('c')
        assert expr('a || b && c') == BinaryOp('||', a, BinaryOp('&&', b, c))

    def test_equality_over_and(self):
        assert expr('a == 1 && b') == BinaryOp(
            '&&', BinaryOp('==', Identifier('a'), num(1)), Identifier('b'))

    def test_unary_binds_tighter_than_binary(self):
        assert expr('-2 * 3') == BinaryOp('*', UnaryOp('-', num(2)), num(3))

    def test_nested_unary(self):
        assert expr('!!x') == UnaryOp('!', UnaryOp('!', Identifier('x')))

    def test_negative_literal_is_unary(self):
        assert expr('-17') == UnaryOp('-', num(17))

    def test_assignment_right_associative(self):
        assert expr('a = b = 3') == Assign('a', Assign('b', num(3)))

    def test_assignment_lowest(self):
        assert expr('x = 1 + 2') == Assign('x', BinaryOp('+', num(1), num(2)))


class TestCalls:
    """Test call expressions"""

    def test_no_args(self):
        assert expr('f()') == Call(Identifier('f'), ())

    def test_args(self):
        assert expr('add(1, x)') == Call(Identifier('add'), (num(1), Identifier('x')))

    def test_chained_calls(self):
        assert expr('f(1)(2)') == Call(Call(Identifier('f'), (num(1),)), (num(2),))

    def test_call_binds_tighter_than_unary(self):
        assert expr('-f(1)') == UnaryOp('-', Call(Identifier('f'), (num(1),)))

    def test_nested_call_args(self):
        assert expr('add(square(3), square(4))') == Call(Identifier('add'), (
            Call(Identifier('square'), (num(3),)),
            Call(Identifier('square'), (num(4),)),
        ))


class TestStatements:
    """Test statement forms"""

    def test_var_declaration(self):
        assert parse('var x = 5;').statements == (VarDecl('x', num(5)),)

    def test_var_without_initializer(self):
        assert parse('var x;').statements == (VarDecl('x', None),)

    def test_optional_semicolons(self):
        assert parse('var x = 1\nx = x + 1\nprint(x)') == parse('var x = 1; x = x + 1; print(x);')

    def test_function_declaration(self):
        program = parse('function add(a, b) { return a + b; }')
        assert program.statements == (FunctionDecl(
            'add', ('a', 'b'),
            Block((Return(BinaryOp('+', Identifier('a'), Identifier('b'))),)),
        ),)

    def test_function_no_params(self):
        fn = parse('function f() {}').statements[0]
        assert fn.params == ()
        assert fn.body == Block(())

    def test_bare_return(self):
        body = parse('function f() { return; }').statements[0].body
        assert body.statements == (Return(None),)

    def test_return_before_brace(self):
        body = parse('function f() { return }').statements[0].body
        assert body.statements == (Return(None),)

    def test_if_else(self):
        stmt = parse('if (x) y = 1; else y = 2;').statements[0]
        assert stmt == If(Identifier('x'),
                          ExpressionStatement(Assign('y', num(1))),
                          ExpressionStatement(Assign('y', num(2))))

    def test_dangling_else_binds_inner(self):
        outer = parse('if (a) if (b) x(); else y();').statements[0]
        assert outer.else_branch is None
        inner = outer.then_branch
        assert isinstance(inner, If)
        assert inner.else_branch == ExpressionStatement(Call(Identifier('y'), ()))

    def test_else_if_chain(self):
        stmt = parse('if (a) {} else if (b) {} else {}').statements[0]
        assert isinstance(stmt.else_branch, If)
        assert stmt.else_branch.else_branch == Block(())

    def test_while(self):
        stmt = parse('while (i < 3) i = i + 1;').statements[0]
        assert stmt == While(BinaryOp('<', Identifier('i'), num(3)),
                             ExpressionStatement(Assign('i', BinaryOp('+', Identifier('i'), num(1)))))

    def test_for_full(self):
        stmt = parse('for (var i = 0; i < 10; i = i + 1) {}').statements[0]
        assert stmt == For(VarDecl('i', num(0)),
                           BinaryOp('<', Identifier('i'), num(10)),
                           Assign('i', BinaryOp('+', Identifier('i'), num(1))),
                           Block(()))

    def test_for_empty_clauses(self):
        stmt = parse('for (;;) {}').statements[0]
        assert stmt == For(None, None, None, Block(()))

    def test_for_expression_init(self):
        stmt = parse('for (i = 0; i < 1;) {}').statements[0]
        assert stmt.init == ExpressionStatement(Assign('i', num(0)))
        assert stmt.update is None

    def test_nested_blocks(self):
        assert parse('{ { } }').statements == (Block((Block(()),)),)

    def test_empty_program(self):
        assert parse('') == Program(())
        assert parse('// just a comment\n') == Program(())


class TestPositionsAndEquality:
    """Test that positions are tracked but ignored by equality"""

    def test_positions_recorded(self):
        stmt = parse('\n  var x = 1;').statements[0]
        assert (stmt.line, stmt.column) == (2, 3)

    def test_binary_position_is_operator(self):
        node = expr('1 +\n 2')
        assert (node.line, node.column) == (1, 3)

    def test_equal_despite_layout(self):
        assert parse('var x=1;') == parse('var   x\n=\n1')

    def test_nodes_are_immutable(self):
        node = expr('x')
        with pytest.raises(Exception):
            node.name = 'y'

    def test_nodes_hashable(self):
        assert hash(expr('1 + 2')) == hash(expr('1+2'))

    def test_boolean_literal_differs_from_number(self):
        assert parse('true') != parse('1')
        assert parse('false') != parse('0')
        assert Literal(True) != Literal(1.0)

    def test_literal_equality_keeps_value_type(self):
        assert Literal(1.0) == Literal(1.0)
        assert Literal('1') != Literal(1.0)
        assert len({Literal(True), Literal(1.0)}) == 2


class TestParserInterface:
    """Test parser entry points"""

    def test_from_source(self):
        program = MinAllParser.from_source('1;').parse()
        assert program.statements == (ExpressionStatement(num(1)),)

    def test_accepts_token_list(self):
        tokens = MinAllTokenizer('x').tokenize()
        assert MinAllParser(tokens).parse() == parse('x')

    def test_lex_error_propagates(self):
        with pytest.raises(LexError):
            parse('var s = "open')


class TestParseErrors:
    """Test syntax errors"""

    def test_missing_close_paren(self):
        with pytest.raises(ParseError) as exc:
            parse('print((1 + 2)')
        assert exc.value.code == E_PARSE_ERROR
        assert "')'" in exc.value.message
        assert 'end of input' in exc.value.message

    def test_unclosed_block(self):
        with pytest.raises(ParseError) as exc:
            parse('function f() {\n  return 1;\n')
        assert "'}'" in exc.value.message
        assert 'line 1' in exc.value.message

    def test_invalid_assignment_target(self):
        with pytest.raises(ParseError) as exc:
            parse('1 = 2;')
        assert 'Invalid assignment target' in exc.value.message

    def test_call_is_not_assignable(self):
        with pytest.raises(ParseError):
            parse('f() = 2;')

    def test_var_requires_name(self):
        with pytest.raises(ParseError) as exc:
            parse('var 5 = 1;')
        assert 'variable name' in exc.value.message
        assert 'number 5' in exc.value.message

    def test_function_requires_braces(self):
        with pytest.raises(ParseError):
            parse('function f() return 1;')

    def test_duplicate_params(self):
        with pytest.raises(ParseError) as exc:
            parse('function f(a, a) {}')
        assert 'Duplicate parameter' in exc.value.message

    def test_stray_operator(self):
        with pytest.raises(ParseError) as exc:
            parse('var x = * 2;')
        assert 'Expected expression' in exc.value.message
        assert (exc.value.line, exc.value.column) == (1, 9)

    def test_unexpected_closing_brace(self):
        with pytest.raises(ParseError):
            parse('}')

    def test_trailing_comma(self):
        with pytest.raises(ParseError):
            parse('f(1,)')

    def test_error_message_rendering(self):
        with pytest.raises(ParseError) as exc:
            parse('if x')
        assert str(exc.value).startswith('[E_PARSE_ERROR] Expected')
        assert str(exc.value).endswith('(line 1, column 4)')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
