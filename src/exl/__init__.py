"""EXL (Expression Language) package: a tree-walking evaluator for a small functional language."""

# Main API
from exl.exl import EXL

# Exceptions (for error handling)
from exl.exl_error import EXLError, EXLEvalError, EXLTypeError, EXLDepthError

# AST node types (tree-construction API)
from exl.exl_ast import (
    EXLASTNode, EXLASTNumber, EXLASTBoolean, EXLASTIf, EXLASTArithmetic, EXLASTComparison,
    EXLASTVariable, EXLASTLambda, EXLASTApply, EXLASTFunctionDef, EXLASTNil, EXLASTCons,
    EXLASTHead, EXLASTTail, EXLASTIsEmpty, EXLASTTry, EXLASTRaise,
    EXLArithmeticOperator, EXLComparisonOperator
)

# Value types
from exl.exl_value import (
    EXLValue, EXLNumber, EXLBoolean, EXLList, EXLClosure, EXLRaiseSignal, EXLRecursivePlaceholder
)

# Lower-level components (for advanced usage)
from exl.exl_evaluator import EXLEvaluator
from exl.exl_environment import EXLEnvironment
from exl.exl_call_stack import EXLCallStack, EXLCallFrame


__all__ = [
    # Main API
    "EXL",

    # Exceptions
    "EXLError", "EXLEvalError", "EXLTypeError", "EXLDepthError",

    # AST node types
    "EXLASTNode", "EXLASTNumber", "EXLASTBoolean", "EXLASTIf", "EXLASTArithmetic", "EXLASTComparison",
    "EXLASTVariable", "EXLASTLambda", "EXLASTApply", "EXLASTFunctionDef", "EXLASTNil", "EXLASTCons",
    "EXLASTHead", "EXLASTTail", "EXLASTIsEmpty", "EXLASTTry", "EXLASTRaise",
    "EXLArithmeticOperator", "EXLComparisonOperator",

    # Value types
    "EXLValue", "EXLNumber", "EXLBoolean", "EXLList", "EXLClosure", "EXLRaiseSignal",
    "EXLRecursivePlaceholder",

    # Lower-level components
    "EXLEvaluator", "EXLEnvironment", "EXLCallStack", "EXLCallFrame"
]
