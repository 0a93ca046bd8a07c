"""
MinAll Evaluator - Tree-walking execution

Walks the immutable AST with an explicit Environment passed to every
handler. Dispatch is a dictionary keyed by node class. User function
calls push a CallFrame; `return` unwinds to the nearest frame with
_ReturnSignal. Call depth is bounded by RuntimeConfig.max_call_depth,
and the host recursion limit is raised for the duration of a run so that
the configured depth is reachable. Either limit surfaces as
StackOverflowError.
"""

import logging
from typing import Any, List, Optional, Sequence

from .ast_nodes import (
    ASTNode, Literal, Identifier, BinaryOp, UnaryOp, Assign, Call,
    ExpressionStatement, VarDecl, Block, If, While, For, FunctionDecl, Return, Program,
)
from .builtins import create_builtins
from .config import RuntimeConfig
from .environment import Environment
from .errors import (
    MinAllError, MinAllRuntimeError, StackOverflowError,
    E_RUNTIME_ERROR, E_TYPE_ERROR, E_ARITY_ERROR,
)
from .hoststack import raised_recursion_limit, recursion_budget
from .values import (
    UNDEFINED, Builtin, Function, BINARY_OPERATORS, is_truthy, negate, type_name,
)

logger = logging.getLogger(__name__)

# Statements that bind a name in the scope they run in.
_DECLARATIONS = (VarDecl, FunctionDecl)


class _ReturnSignal(Exception):
    """Unwinds a function body carrying the returned value"""
    __slots__ = ('value',)

    def __init__(self, value: Any):
        self.value = value


class CallFrame:
    """One in-progress user function invocation"""
    __slots__ = ('function', 'args', 'env', 'line', 'column')

    def __init__(self, function: Function, args: Sequence[Any], env: Environment,
                 line: int = 0, column: int = 0):
        self.function = function
        self.args = args
        self.env = env
        self.line = line
        self.column = column

    def __repr__(self):
        return f"<CallFrame {self.function.name} line={self.line}>"


class MinAllEvaluator:
    """Evaluate MinAll AST"""

    def __init__(self, config: Optional[RuntimeConfig] = None):
        self.config = config or RuntimeConfig()
        self.builtins_env = Environment()
        for name, builtin in create_builtins(self.config.output).items():
            self.builtins_env.define(name, builtin)
        self.globals = Environment(self.builtins_env)
        self.frames: List[CallFrame] = []

        self._statements = {
            ExpressionStatement: self._exec_expression_statement,
            VarDecl: self._exec_var_decl,
            FunctionDecl: self._exec_function_decl,
            Block: self._exec_block,
            If: self._exec_if,
            While: self._exec_while,
            For: self._exec_for,
            Return: self._exec_return,
        }
        self._expressions = {
            Literal: self._eval_literal,
            Identifier: self._eval_identifier,
            BinaryOp: self._eval_binary,
            UnaryOp: self._eval_unary,
            Assign: self._eval_assign,
            Call: self._eval_call,
        }

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def run(self, program: Program, env: Optional[Environment] = None) -> Any:
        """Execute top-level statements in order.

        Returns the value of the final statement when it is an expression
        statement, otherwise undefined.
        """
        env = self.globals if env is None else env
        result = UNDEFINED
        with self._host_stack():
            try:
                for stmt in program.statements:
                    if type(stmt) is ExpressionStatement:
                        result = self.evaluate(stmt.expression, env)
                    else:
                        self.execute(stmt, env)
                        result = UNDEFINED
            except RecursionError:
                depth = len(self.frames)
                logger.debug("RecursionError at call depth %d", depth)
                self.frames.clear()
                raise StackOverflowError(
                    f"Host stack exhausted at call depth {depth}") from None
        return result

    def reset_globals(self):
        """Drop all program globals, keeping the builtins"""
        self.globals = Environment(self.builtins_env)

    def evaluate(self, node: ASTNode, env: Optional[Environment] = None) -> Any:
        """Evaluate an expression node to a value"""
        handler = self._expressions.get(type(node))
        if handler is None:
            raise MinAllRuntimeError(f"Unknown expression node: {type(node).__name__}")
        return handler(node, self.globals if env is None else env)

    def execute(self, node: ASTNode, env: Optional[Environment] = None):
        """Execute a statement node"""
        handler = self._statements.get(type(node))
        if handler is None:
            raise MinAllRuntimeError(f"Unknown statement node: {type(node).__name__}")
        handler(node, self.globals if env is None else env)

    def _host_stack(self):
        return raised_recursion_limit(recursion_budget(self.config.max_call_depth))

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _exec_expression_statement(self, node: ExpressionStatement, env: Environment):
        self._expressions[type(node.expression)](node.expression, env)

    def _exec_var_decl(self, node: VarDecl, env: Environment):
        value = UNDEFINED if node.value is None else self._expressions[type(node.value)](node.value, env)
        env.define(node.name, value)

    def _exec_function_decl(self, node: FunctionDecl, env: Environment):
        env.define(node.name, Function(node.name, node.params, node.body, env))

    def _exec_block(self, node: Block, env: Environment):
        scope = Environment(env)
        statements = self._statements
        for stmt in node.statements:
            statements[type(stmt)](stmt, scope)

    def _exec_body(self, node: ASTNode, env: Environment):
        """Run an if/while/for body in its own scope"""
        if isinstance(node, _DECLARATIONS):
            env = Environment(env)
        self._statements[type(node)](node, env)

    def _exec_if(self, node: If, env: Environment):
        if is_truthy(self._expressions[type(node.condition)](node.condition, env)):
            self._exec_body(node.then_branch, env)
        elif node.else_branch is not None:
            self._exec_body(node.else_branch, env)

    def _exec_while(self, node: While, env: Environment):
        condition = node.condition
        cond_handler = self._expressions[type(condition)]
        body = node.body
        while is_truthy(cond_handler(condition, env)):
            self._exec_body(body, env)

    def _exec_for(self, node: For, env: Environment):
        loop_env = Environment(env)
        if node.init is not None:
            self._statements[type(node.init)](node.init, loop_env)

        condition = node.condition
        update = node.update
        expressions = self._expressions
        while condition is None or is_truthy(expressions[type(condition)](condition, loop_env)):
            self._exec_body(node.body, loop_env)
            if update is not None:
                expressions[type(update)](update, loop_env)

    def _exec_return(self, node: Return, env: Environment):
        if not self.frames:
            raise MinAllRuntimeError("'return' outside of a function body", E_RUNTIME_ERROR,
                                     node.line, node.column)
        value = UNDEFINED if node.value is None else self._expressions[type(node.value)](node.value, env)
        raise _ReturnSignal(value)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _eval_literal(self, node: Literal, env: Environment) -> Any:
        return node.value

    def _eval_identifier(self, node: Identifier, env: Environment) -> Any:
        name = node.name
        scope = env
        while scope is not None:
            vars = scope.vars
            if name in vars:
                return vars[name]
            scope = scope.parent
        try:
            return env.lookup(name)
        except MinAllError as err:
            raise err.at(node.line, node.column)

    def _eval_assign(self, node: Assign, env: Environment) -> Any:
        value = self._expressions[type(node.value)](node.value, env)
        try:
            env.assign(node.name, value, create=not self.config.strict_assignment)
        except MinAllError as err:
            raise err.at(node.line, node.column)
        return value

    def _eval_binary(self, node: BinaryOp, env: Environment) -> Any:
        op = node.op
        expressions = self._expressions
        left = expressions[type(node.left)](node.left, env)

        # Short-circuit operators yield a boolean.
        if op == '&&':
            if not is_truthy(left):
                return False
            return is_truthy(expressions[type(node.right)](node.right, env))
        if op == '||':
            if is_truthy(left):
                return True
            return is_truthy(expressions[type(node.right)](node.right, env))

        right = expressions[type(node.right)](node.right, env)
        try:
            return BINARY_OPERATORS[op](left, right)
        except MinAllError as err:
            raise err.at(node.line, node.column)
        except KeyError:
            raise MinAllRuntimeError(f"Unknown binary operator: {op}", E_RUNTIME_ERROR,
                                     node.line, node.column) from None

    def _eval_unary(self, node: UnaryOp, env: Environment) -> Any:
        operand = self._expressions[type(node.operand)](node.operand, env)
        if node.op == '!':
            return not is_truthy(operand)
        if node.op == '-':
            try:
                return negate(operand)
            except MinAllError as err:
                raise err.at(node.line, node.column)
        raise MinAllRuntimeError(f"Unknown unary operator: {node.op}", E_RUNTIME_ERROR,
                                 node.line, node.column)

    def _eval_call(self, node: Call, env: Environment) -> Any:
        expressions = self._expressions
        callee = expressions[type(node.callee)](node.callee, env)
        args = [expressions[type(arg)](arg, env) for arg in node.args]

        kind = type(callee)
        if kind is Function:
            return self.call_function(callee, args, node.line, node.column)
        if kind is Builtin:
            return callee.fn(*args)
        raise MinAllRuntimeError(f"Cannot call non-function: {type_name(callee)}", E_TYPE_ERROR,
                                 node.line, node.column)

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    def call_function(self, function: Function, args: Sequence[Any],
                      line: int = 0, column: int = 0) -> Any:
        """Invoke a user function with already-evaluated arguments"""
        if len(self.frames) >= self.config.max_call_depth:
            raise StackOverflowError(
                f"Maximum call depth of {self.config.max_call_depth} exceeded calling '{function.name}'",
                line or None, column or None)

        params = function.params
        if len(args) != len(params) and self.config.strict_arity:
            raise MinAllRuntimeError(
                f"Function '{function.name}' expects {len(params)} arguments, got {len(args)}",
                E_ARITY_ERROR, line or None, column or None)

        env = Environment(function.closure)
        vars = env.vars
        count = len(args)
        for index, param in enumerate(params):
            vars[param] = args[index] if index < count else UNDEFINED

        frames = self.frames
        frames.append(CallFrame(function, args, env, line, column))
        statements = self._statements
        try:
            for stmt in function.body.statements:
                statements[type(stmt)](stmt, env)
        except _ReturnSignal as signal:
            return signal.value
        finally:
            frames.pop()
        return UNDEFINED

    def call(self, callee: Any, args: Sequence[Any]) -> Any:
        """Call a MinAll callable from the host"""
        if type(callee) is Builtin:
            return callee.fn(*args)
        if type(callee) is not Function:
            raise MinAllRuntimeError(f"Cannot call non-function: {type_name(callee)}", E_TYPE_ERROR)
        with self._host_stack():
            try:
                return self.call_function(callee, list(args))
            except RecursionError:
                self.frames.clear()
                raise StackOverflowError("Host stack exhausted") from None


__all__ = ['MinAllEvaluator', 'CallFrame']
