"""Main EXL (Expression Language) class."""

import logging
from typing import Any

from exl.exl_ast import EXLASTNode
from exl.exl_evaluator import EXLEvaluator
from exl.exl_value import EXLValue


class EXL:
    """
    EXL evaluator front door.

    Programs are built directly as trees of EXL AST nodes; this class evaluates
    them in a fresh, empty root environment.  Each call uses a new evaluator,
    so successive evaluations share no state.

    The result is either a value or EXLRaiseSignal when a raise was never
    caught.  Type faults are reported as EXLTypeError exceptions.
    """

    def __init__(self, max_depth: int = 1000):
        """
        Initialize EXL.

        Args:
            max_depth: Maximum evaluation nesting depth
        """
        self.max_depth = max_depth
        self._logger = logging.getLogger("EXL")

    def evaluate(self, program: EXLASTNode) -> EXLValue:
        """
        Evaluate an EXL program.

        Args:
            program: Root node of the program tree

        Returns:
            The resulting EXLValue (EXLRaiseSignal for an uncaught raise)

        Raises:
            EXLTypeError: If the program applies an operation to the wrong kind of value
            EXLDepthError: If evaluation nests deeper than max_depth
            EXLEvalError: If evaluation fails for any other reason
        """
        evaluator = EXLEvaluator(max_depth=self.max_depth)
        result = evaluator.evaluate(program)
        self._logger.debug("Program evaluated to %s", result.type_name())
        return result

    def evaluate_to_python(self, program: EXLASTNode) -> Any:
        """
        Evaluate an EXL program and convert the result to Python types.

        Numbers become int, booleans bool and lists Python lists; closures and
        the raise signal are returned as they are.

        Args:
            program: Root node of the program tree

        Returns:
            The result converted to Python types
        """
        return self.evaluate(program).to_python()
