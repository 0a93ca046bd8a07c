"""
Test suite for MinAll built-ins
"""

import io

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from minall_runtime.builtins import make_print, create_builtins, BUILTIN_FACTORIES
from minall_runtime.values import UNDEFINED, Builtin


class TestPrint:
    """Test print output formatting"""

    def test_no_arguments(self, run):
        assert run('print()') == '\n'

    def test_single_argument(self, run):
        assert run('print("hello")') == 'hello\n'

    def test_arguments_joined_by_space(self, run):
        assert run('print("x =", 42)') == 'x = 42\n'

    def test_mixed_values(self, run):
        assert run('var u; print(1.5, true, false, u, "s")') == '1.5 true false undefined s\n'

    def test_number_display(self, run):
        assert run('print(10 / 4, 6 / 3, 1 / 0, -1 / 0, 0 / 0)') == '2.5 2 Infinity -Infinity NaN\n'

    def test_small_and_large_numbers(self, run):
        source = 'print(0.00001, 0.0000001, 10000000000000000000000, 0.1 + 0.2)'
        assert run(source) == '0.00001 1e-7 1e+22 0.30000000000000004\n'

    def test_returns_undefined(self, runtime):
        assert runtime.execute('print("x")') is UNDEFINED

    def test_escape_sequences_verbatim(self, run):
        assert run(r'print("\nTest 1")') == '\\nTest 1\n'

    def test_each_call_one_line(self, run):
        assert run('print("a"); print("b");') == 'a\nb\n'

    def test_default_stream_is_stdout(self, capsys):
        make_print().fn('to stdout')
        assert capsys.readouterr().out == 'to stdout\n'


class TestRegistry:
    """Test the builtin table"""

    def test_print_registered(self):
        assert 'print' in BUILTIN_FACTORIES

    def test_create_builtins(self):
        stream = io.StringIO()
        builtins = create_builtins(stream)
        assert isinstance(builtins['print'], Builtin)
        assert builtins['print'].name == 'print'
        builtins['print'].fn(1.0, 2.0)
        assert stream.getvalue() == '1 2\n'

    def test_fresh_tables(self):
        assert create_builtins()['print'] is not create_builtins()['print']


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
