"""
Test suite for MinAll scope chains
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from minall_runtime.environment import Environment
from minall_runtime.errors import MinAllRuntimeError, E_NAME_ERROR


class TestLookup:
    """Test name resolution"""

    def test_define_and_lookup(self):
        env = Environment()
        env.define('x', 1.0)
        assert env.lookup('x') == 1.0

    def test_lookup_walks_outward(self):
        outer = Environment()
        outer.define('x', 1.0)
        inner = Environment(outer)
        assert inner.lookup('x') == 1.0

    def test_innermost_wins(self):
        outer = Environment()
        outer.define('x', 1.0)
        inner = Environment(outer)
        inner.define('x', 2.0)
        assert inner.lookup('x') == 2.0
        assert outer.lookup('x') == 1.0

    def test_undefined_name(self):
        with pytest.raises(MinAllRuntimeError) as exc:
            Environment().lookup('missing')
        assert exc.value.code == E_NAME_ERROR
        assert exc.value.message == 'Undefined variable: missing'

    def test_redefine_replaces(self):
        env = Environment()
        env.define('x', 1.0)
        env.define('x', 'two')
        assert env.lookup('x') == 'two'


class TestAssign:
    """Test assignment to existing and new names"""

    def test_assign_updates_declaring_scope(self):
        outer = Environment()
        outer.define('x', 1.0)
        inner = Environment(outer)
        inner.assign('x', 5.0)
        assert outer.vars['x'] == 5.0
        assert 'x' not in inner.vars

    def test_assign_undeclared_creates_locally(self):
        outer = Environment()
        inner = Environment(outer)
        inner.assign('y', 3.0)
        assert inner.vars['y'] == 3.0
        assert not outer.is_defined('y')

    def test_assign_undeclared_strict(self):
        with pytest.raises(MinAllRuntimeError) as exc:
            Environment().assign('y', 3.0, create=False)
        assert exc.value.code == E_NAME_ERROR


class TestChain:
    """Test chain inspection helpers"""

    def test_resolve(self):
        root = Environment()
        root.define('a', 1.0)
        child = Environment(root)
        assert child.resolve('a') is root
        assert child.resolve('b') is None

    def test_depth(self):
        root = Environment()
        assert root.depth() == 0
        assert Environment(Environment(root)).depth() == 2

    def test_chain_order(self):
        root = Environment()
        child = Environment(root)
        assert list(child.chain()) == [child, root]

    def test_repr(self):
        env = Environment()
        env.define('b', 1.0)
        env.define('a', 2.0)
        assert repr(env) == "<Environment ['a', 'b'] depth=0>"


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
