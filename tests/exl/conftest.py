"""Shared fixtures and utilities for EXL tests."""

import pytest
from typing import Any

from exl import (
    EXL, EXLASTNode, EXLASTNumber, EXLASTBoolean, EXLASTArithmetic, EXLASTComparison,
    EXLASTVariable, EXLASTNil, EXLASTCons, EXLASTIf, EXLASTApply, EXLASTFunctionDef,
    EXLArithmeticOperator, EXLComparisonOperator
)


@pytest.fixture
def exl():
    """Create a fresh EXL instance for each test."""
    return EXL()


@pytest.fixture
def exl_custom():
    """Factory for EXL instances with custom configuration."""
    def _create_exl(max_depth: int = 100) -> EXL:
        return EXL(max_depth=max_depth)
    return _create_exl


class EXLTestHelpers:
    """Helper utilities for building and checking EXL programs."""

    @staticmethod
    def num(value: int) -> EXLASTNumber:
        return EXLASTNumber(value)

    @staticmethod
    def boolean(value: bool) -> EXLASTBoolean:
        return EXLASTBoolean(value)

    @staticmethod
    def var(name: str) -> EXLASTVariable:
        return EXLASTVariable(name)

    @staticmethod
    def add(left: EXLASTNode, right: EXLASTNode) -> EXLASTArithmetic:
        return EXLASTArithmetic(EXLArithmeticOperator.ADD, left, right)

    @staticmethod
    def sub(left: EXLASTNode, right: EXLASTNode) -> EXLASTArithmetic:
        return EXLASTArithmetic(EXLArithmeticOperator.SUB, left, right)

    @staticmethod
    def mul(left: EXLASTNode, right: EXLASTNode) -> EXLASTArithmetic:
        return EXLASTArithmetic(EXLArithmeticOperator.MUL, left, right)

    @staticmethod
    def eq(left: EXLASTNode, right: EXLASTNode) -> EXLASTComparison:
        return EXLASTComparison(EXLComparisonOperator.EQ, left, right)

    @staticmethod
    def list_of(*elements: EXLASTNode) -> EXLASTNode:
        """Build a cons chain ending in nil from the given element expressions."""
        result: EXLASTNode = EXLASTNil()
        for element in reversed(elements):
            result = EXLASTCons(element, result)

        return result

    @staticmethod
    def factorial_program(n: int) -> EXLASTFunctionDef:
        """Build a recursive factorial definition applied to n."""
        h = EXLTestHelpers
        return EXLASTFunctionDef(
            "fact",
            "x",
            EXLASTIf(
                h.eq(h.var("x"), h.num(0)),
                h.num(1),
                h.mul(h.var("x"), EXLASTApply(h.var("fact"), h.sub(h.var("x"), h.num(1))))
            ),
            EXLASTApply(h.var("fact"), h.num(n)),
            recursive=True
        )

    @staticmethod
    def build_nested_addition(depth: int) -> EXLASTNode:
        """Build 1 + (1 + (... + 1)) nested `depth` times."""
        expr: EXLASTNode = EXLASTNumber(1)
        for _ in range(depth):
            expr = EXLTestHelpers.add(EXLASTNumber(1), expr)

        return expr

    @staticmethod
    def assert_python_result(exl: EXL, program: EXLASTNode, expected: Any) -> None:
        """Assert that a program evaluates to the expected Python object."""
        result = exl.evaluate_to_python(program)
        assert result == expected, f"Expected Python result {expected!r}, got {result!r}"


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return EXLTestHelpers
