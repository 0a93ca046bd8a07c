"""
Test suite for host recursion limit handling
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from minall_runtime.hoststack import (
    FRAMES_PER_CALL, STACK_HEADROOM, recursion_budget, raised_recursion_limit,
)
from minall_runtime.config import DEFAULT_MAX_CALL_DEPTH
from minall_runtime.errors import ParseError
from minall_runtime.parser import parse


class TestRaisedRecursionLimit:
    """Test the recursion limit context manager"""

    def test_budget(self):
        assert recursion_budget(10) == 10 * FRAMES_PER_CALL + STACK_HEADROOM

    def test_raises_and_restores(self):
        before = sys.getrecursionlimit()
        with raised_recursion_limit(before + 5000):
            assert sys.getrecursionlimit() == before + 5000
        assert sys.getrecursionlimit() == before

    def test_never_lowers(self):
        before = sys.getrecursionlimit()
        with raised_recursion_limit(10):
            assert sys.getrecursionlimit() == before
        assert sys.getrecursionlimit() == before

    def test_restores_on_error(self):
        before = sys.getrecursionlimit()
        with pytest.raises(KeyError):
            with raised_recursion_limit(before + 100):
                raise KeyError('boom')
        assert sys.getrecursionlimit() == before


class TestParseDepth:
    """Test nesting depth accepted by parse()"""

    def test_nesting_in_the_thousands(self):
        program = parse('(' * 2000 + 'x' + ')' * 2000)
        assert len(program.statements) == 1

    def test_small_budget_rejects_deep_nesting(self):
        with pytest.raises(ParseError) as exc:
            parse('(' * 2000 + 'x' + ')' * 2000, max_call_depth=1)
        assert 'nested too deeply' in exc.value.message

    def test_default_budget(self):
        assert recursion_budget(DEFAULT_MAX_CALL_DEPTH) > 50000


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
