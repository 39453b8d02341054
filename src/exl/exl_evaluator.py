"""Tree-walking evaluator for EXL Abstract Syntax Trees with detailed error messages."""

import logging
import operator
import sys
from typing import Any, Callable, Dict

from exl.exl_ast import (
    EXLASTNode, EXLASTNumber, EXLASTBoolean, EXLASTIf, EXLASTArithmetic, EXLASTComparison,
    EXLASTVariable, EXLASTLambda, EXLASTApply, EXLASTFunctionDef, EXLASTNil, EXLASTCons,
    EXLASTHead, EXLASTTail, EXLASTIsEmpty, EXLASTTry, EXLASTRaise,
    EXLArithmeticOperator, EXLComparisonOperator
)
from exl.exl_call_stack import EXLCallStack
from exl.exl_environment import EXLEnvironment
from exl.exl_error import EXLEvalError, EXLTypeError, EXLDepthError
from exl.exl_value import (
    EXLValue, EXLNumber, EXLBoolean, EXLList, EXLClosure, EXLRaiseSignal, EXLRecursivePlaceholder
)


class EXLEvaluator:
    """
    Evaluates EXL Abstract Syntax Trees.

    Evaluation is strict and single-threaded.  The environment is threaded
    through every call as an explicit argument; nothing about a particular
    evaluation is ever stored on the tree.

    Two kinds of failure are kept apart:
    - the raise signal (EXLRaiseSignal) is an ordinary value that propagates
      through every composite expression until a try expression catches it
    - type faults (EXLTypeError) are Python exceptions that abort evaluation
    """

    ARITHMETIC_OPERATIONS: Dict[EXLArithmeticOperator, Callable[[int, int], int]] = {
        EXLArithmeticOperator.ADD: operator.add,
        EXLArithmeticOperator.SUB: operator.sub,
        EXLArithmeticOperator.MUL: operator.mul,
    }

    COMPARISON_OPERATIONS: Dict[EXLComparisonOperator, Callable[[int, int], bool]] = {
        EXLComparisonOperator.GT: operator.gt,
        EXLComparisonOperator.GE: operator.ge,
        EXLComparisonOperator.EQ: operator.eq,
        EXLComparisonOperator.NE: operator.ne,
        EXLComparisonOperator.LE: operator.le,
        EXLComparisonOperator.LT: operator.lt,
    }

    # Upper bound on Python frames per level of evaluation depth (application uses three)
    FRAMES_PER_DEPTH = 3

    def __init__(self, max_depth: int = 1000):
        """
        Initialize evaluator.

        Args:
            max_depth: Maximum evaluation nesting depth
        """
        self.max_depth = max_depth
        self.call_stack = EXLCallStack()
        self._logger = logging.getLogger("EXLEvaluator")

        # One handler per node class; the node set is closed so this table is complete
        self._dispatch_table = self._build_dispatch_table()

    def _build_dispatch_table(self) -> Dict[type, Callable[[Any, EXLEnvironment, int], EXLValue]]:
        """Build the node-class to handler table."""
        return {
            EXLASTNumber: self._evaluate_number,
            EXLASTBoolean: self._evaluate_boolean,
            EXLASTIf: self._evaluate_if,
            EXLASTArithmetic: self._evaluate_arithmetic,
            EXLASTComparison: self._evaluate_comparison,
            EXLASTVariable: self._evaluate_variable,
            EXLASTLambda: self._evaluate_lambda,
            EXLASTApply: self._evaluate_apply,
            EXLASTFunctionDef: self._evaluate_function_def,
            EXLASTNil: self._evaluate_nil,
            EXLASTCons: self._evaluate_cons,
            EXLASTHead: self._evaluate_head,
            EXLASTTail: self._evaluate_tail,
            EXLASTIsEmpty: self._evaluate_is_empty,
            EXLASTTry: self._evaluate_try,
            EXLASTRaise: self._evaluate_raise,
        }

    def evaluate(
        self,
        expr: EXLASTNode,
        env: EXLEnvironment | None = None,
        depth: int = 0
    ) -> EXLValue:
        """
        Recursively evaluate AST.

        Args:
            expr: Expression to evaluate
            env: Environment for variable lookups (a fresh root environment if None)
            depth: Current recursion depth

        Returns:
            Evaluation result as EXLValue; EXLRaiseSignal if a raise was not caught

        Raises:
            EXLTypeError: If the program applies an operation to the wrong kind of value
            EXLDepthError: If evaluation nests deeper than max_depth
            EXLEvalError: If evaluation fails for any other reason
        """
        if env is None:
            env = EXLEnvironment(name="global")

        # Make room on the Python stack for max_depth levels of evaluation
        saved_limit = sys.getrecursionlimit()
        sys.setrecursionlimit(saved_limit + self.FRAMES_PER_DEPTH * (self.max_depth + 10))

        try:
            return self._evaluate_expression(expr, env, depth)

        except EXLEvalError as e:
            self._logger.debug("Evaluation aborted: %s", e.message)
            raise

        except RecursionError as e:
            raise EXLDepthError(
                message="Expression too deeply nested for the Python call stack",
                context=f"Configured max depth: {self.max_depth}",
                suggestion="Check for unbounded recursion or lower max_depth"
            ) from e

        except Exception as e:
            stack_trace = self.call_stack.format_stack_trace()
            raise EXLEvalError(
                message=f"Unexpected error during evaluation: {e}",
                context=f"Call stack:\n{stack_trace}",
                suggestion="This is an internal error - please report this issue"
            ) from e

        finally:
            sys.setrecursionlimit(saved_limit)

    def _evaluate_expression(
        self,
        expr: EXLASTNode,
        env: EXLEnvironment,
        depth: int
    ) -> EXLValue:
        """Internal expression evaluation with type dispatch."""
        if depth > self.max_depth:
            stack_trace = self.call_stack.format_stack_trace()
            raise EXLDepthError(
                message=f"Expression too deeply nested (max depth: {self.max_depth})",
                context=f"Call stack:\n{stack_trace}",
                suggestion="Reduce nesting depth or increase max_depth limit"
            )

        handler = self._dispatch_table.get(type(expr))
        if handler is None:
            raise EXLEvalError(
                message=f"Invalid expression type: {type(expr).__name__}",
                received=f"Expression: {expr!r}",
                expected="An EXL AST node",
                suggestion="Build programs from the node classes in exl.exl_ast"
            )

        return handler(expr, env, depth)

    def _type_fault(self, node: EXLASTNode, value: EXLValue, expected: str, suggestion: str) -> EXLTypeError:
        """Build a type fault for `node` having received `value`."""
        stack_trace = self.call_stack.format_stack_trace()
        self._logger.debug("Type fault in '%s': got %s", node.kind(), value.type_name())
        return EXLTypeError(
            operation=node.kind(),
            received_type=value.type_name(),
            message=f"Operation '{node.kind()}' cannot be applied to a {value.type_name()}",
            received=f"{value.describe()} ({value.type_name()}) in {node.describe()}",
            expected=expected,
            context=f"Call stack:\n{stack_trace}",
            suggestion=suggestion,
            position=node.position()
        )

    def _evaluate_number(self, expr: EXLASTNumber, _env: EXLEnvironment, _depth: int) -> EXLNumber:
        return EXLNumber(expr.value)

    def _evaluate_boolean(self, expr: EXLASTBoolean, _env: EXLEnvironment, _depth: int) -> EXLBoolean:
        return EXLBoolean(expr.value)

    def _evaluate_variable(self, expr: EXLASTVariable, env: EXLEnvironment, _depth: int) -> EXLValue:
        """Look up a variable; an unbound name raises rather than faults."""
        value = env.lookup(expr.name)
        if value is None:
            if self._logger.isEnabledFor(logging.DEBUG):
                self._logger.debug(
                    "Unbound variable '%s' raises (available: %s)", expr.name, env.get_available_bindings()
                )

            return EXLRaiseSignal()

        return value

    def _evaluate_if(self, expr: EXLASTIf, env: EXLEnvironment, depth: int) -> EXLValue:
        """
        Evaluate an if expression.

        Args:
            expr: If node
            env: Current environment
            depth: Current recursion depth

        Returns:
            Result of the chosen branch, or the raise signal from the condition
        """
        condition = self._evaluate_expression(expr.condition, env, depth + 1)
        if isinstance(condition, EXLRaiseSignal):
            return condition

        if not isinstance(condition, EXLBoolean):
            raise self._type_fault(
                expr,
                condition,
                expected="Boolean condition",
                suggestion="Use a comparison such as (x == 0) as the condition"
            )

        if condition.value:
            return self._evaluate_expression(expr.then_branch, env, depth + 1)

        return self._evaluate_expression(expr.else_branch, env, depth + 1)

    def _evaluate_arithmetic(self, expr: EXLASTArithmetic, env: EXLEnvironment, depth: int) -> EXLValue:
        left = self._evaluate_expression(expr.left, env, depth + 1)
        right = self._evaluate_expression(expr.right, env, depth + 1)
        if isinstance(left, EXLRaiseSignal):
            return left

        if isinstance(right, EXLRaiseSignal):
            return right

        left_number = self._ensure_number(expr, left)
        right_number = self._ensure_number(expr, right)
        return EXLNumber(self.ARITHMETIC_OPERATIONS[expr.operator](left_number.value, right_number.value))

    def _evaluate_comparison(self, expr: EXLASTComparison, env: EXLEnvironment, depth: int) -> EXLValue:
        left = self._evaluate_expression(expr.left, env, depth + 1)
        right = self._evaluate_expression(expr.right, env, depth + 1)
        if isinstance(left, EXLRaiseSignal):
            return left

        if isinstance(right, EXLRaiseSignal):
            return right

        left_number = self._ensure_number(expr, left)
        right_number = self._ensure_number(expr, right)
        return EXLBoolean(self.COMPARISON_OPERATIONS[expr.operator](left_number.value, right_number.value))

    def _ensure_number(self, expr: EXLASTNode, value: EXLValue) -> EXLNumber:
        if not isinstance(value, EXLNumber):
            raise self._type_fault(
                expr,
                value,
                expected="Number operands",
                suggestion=f"Both operands of '{expr.kind()}' must evaluate to numbers"
            )

        return value

    def _evaluate_lambda(self, expr: EXLASTLambda, env: EXLEnvironment, _depth: int) -> EXLClosure:
        """Capture the defining environment verbatim."""
        return EXLClosure(
            parameter=expr.parameter,
            body=expr.body,
            closure_environment=env
        )

    def _evaluate_apply(self, expr: EXLASTApply, env: EXLEnvironment, depth: int) -> EXLValue:
        """
        Evaluate a function application.

        The callee is evaluated and checked first; the argument is then
        evaluated in the caller's environment.

        Args:
            expr: Apply node
            env: Caller's environment
            depth: Current recursion depth

        Returns:
            Result of the function body, or the raise signal
        """
        func_value = self._evaluate_expression(expr.function, env, depth + 1)
        if isinstance(func_value, EXLRaiseSignal):
            return func_value

        if not isinstance(func_value, EXLClosure):
            raise self._type_fault(
                expr,
                func_value,
                expected="Function",
                suggestion=f"'{expr.function.describe()}' is not a function - check what it evaluates to"
            )

        arg_value = self._evaluate_expression(expr.argument, env, depth + 1)
        if isinstance(arg_value, EXLRaiseSignal):
            return arg_value

        return self._call_closure(func_value, arg_value, depth)

    def _call_closure(self, func: EXLClosure, arg_value: EXLValue, depth: int) -> EXLValue:
        """
        Call a closure with an evaluated argument.

        Args:
            func: Closure to call
            arg_value: Already-evaluated argument value
            depth: Current recursion depth

        Returns:
            Function result
        """
        func_env = func.closure_environment.extend(func.parameter, arg_value, f"{func.name}-call")

        self.call_stack.push(
            function_name=func.name,
            parameter=func.parameter,
            argument=arg_value,
            expression=func.body.describe()
        )

        try:
            return self._evaluate_expression(func.body, func_env, depth + 1)

        finally:
            self.call_stack.pop()

    def _evaluate_function_def(self, expr: EXLASTFunctionDef, env: EXLEnvironment, depth: int) -> EXLValue:
        """
        Evaluate a named function definition, then its scope.

        A recursive function closes over a frame binding its own name to a
        placeholder that is resolved to the function immediately after the
        closure is built.  A non-recursive function closes over the current
        environment, so its body cannot see its own name.
        """
        if env.has_binding(expr.name):
            self._logger.debug("Function '%s' shadows an outer binding", expr.name)

        if expr.recursive:
            placeholder = EXLRecursivePlaceholder(expr.name)
            self_env = env.extend(expr.name, placeholder, f"{expr.name}-rec")
            func_value = EXLClosure(expr.parameter, expr.body, self_env, expr.name)
            placeholder.resolve(func_value)

        else:
            func_value = EXLClosure(expr.parameter, expr.body, env, expr.name)

        return self._evaluate_expression(expr.scope, env.extend(expr.name, func_value), depth + 1)

    def _evaluate_nil(self, _expr: EXLASTNil, _env: EXLEnvironment, _depth: int) -> EXLList:
        return EXLList()

    def _evaluate_cons(self, expr: EXLASTCons, env: EXLEnvironment, depth: int) -> EXLValue:
        head = self._evaluate_expression(expr.head, env, depth + 1)
        tail = self._evaluate_expression(expr.tail, env, depth + 1)
        if isinstance(head, EXLRaiseSignal):
            return head

        if isinstance(tail, EXLRaiseSignal):
            return tail

        if not isinstance(tail, EXLList):
            raise self._type_fault(
                expr,
                tail,
                expected="List on the right of '::'",
                suggestion="End every list with nil, e.g. 1 :: (2 :: nil)"
            )

        return tail.cons(head)

    def _evaluate_list_operand(self, expr: EXLASTHead | EXLASTTail | EXLASTIsEmpty,
                               env: EXLEnvironment, depth: int) -> EXLList | EXLRaiseSignal:
        """Evaluate the operand of a list primitive, faulting on non-lists."""
        value = self._evaluate_expression(expr.operand, env, depth + 1)
        if isinstance(value, (EXLList, EXLRaiseSignal)):
            return value

        raise self._type_fault(
            expr,
            value,
            expected="List",
            suggestion=f"'{expr.kind()}' only works on lists"
        )

    def _evaluate_head(self, expr: EXLASTHead, env: EXLEnvironment, depth: int) -> EXLValue:
        value = self._evaluate_list_operand(expr, env, depth)
        if isinstance(value, EXLRaiseSignal):
            return value

        if value.is_empty():
            self._logger.debug("Head of empty list raises")
            return EXLRaiseSignal()

        return value.first()

    def _evaluate_tail(self, expr: EXLASTTail, env: EXLEnvironment, depth: int) -> EXLValue:
        value = self._evaluate_list_operand(expr, env, depth)
        if isinstance(value, EXLRaiseSignal):
            return value

        if value.is_empty():
            self._logger.debug("Tail of empty list raises")
            return EXLRaiseSignal()

        return value.rest()

    def _evaluate_is_empty(self, expr: EXLASTIsEmpty, env: EXLEnvironment, depth: int) -> EXLValue:
        value = self._evaluate_list_operand(expr, env, depth)
        if isinstance(value, EXLRaiseSignal):
            return value

        return EXLBoolean(value.is_empty())

    def _evaluate_try(self, expr: EXLASTTry, env: EXLEnvironment, depth: int) -> EXLValue:
        """Evaluate the body; a raise signal is replaced by the handler's result."""
        result = self._evaluate_expression(expr.body, env, depth + 1)
        if isinstance(result, EXLRaiseSignal):
            self._logger.debug("Raise caught by try, evaluating handler")
            return self._evaluate_expression(expr.handler, env, depth + 1)

        return result

    def _evaluate_raise(self, _expr: EXLASTRaise, _env: EXLEnvironment, _depth: int) -> EXLRaiseSignal:
        return EXLRaiseSignal()
