"""Tests for the EXL raise/try control-flow protocol."""

import pytest

from exl import (
    EXLASTTry, EXLASTRaise, EXLASTNumber, EXLASTBoolean, EXLASTNil, EXLASTHead, EXLASTVariable,
    EXLASTArithmetic, EXLASTComparison, EXLASTIf, EXLASTApply, EXLASTLambda, EXLASTFunctionDef, EXLASTTail,
    EXLArithmeticOperator, EXLComparisonOperator, EXLNumber, EXLRaiseSignal, EXLTypeError
)


class TestEXLRaise:
    """Test raise and its propagation through every operand position."""

    def test_raise_evaluates_to_signal(self, exl):
        """Test that raise is the raise signal."""
        assert exl.evaluate(EXLASTRaise()) == EXLRaiseSignal()

    def test_uncaught_raise_is_program_result(self, exl, helpers):
        """Test that an uncaught raise deep inside is the program's result, not an exception."""
        program = helpers.add(helpers.num(1), helpers.mul(helpers.num(2), EXLASTRaise()))
        result = exl.evaluate(program)
        assert isinstance(result, EXLRaiseSignal)

    @pytest.mark.parametrize("operator", list(EXLArithmeticOperator))
    def test_arithmetic_left_operand(self, exl, operator):
        """Test raise in the left arithmetic operand."""
        assert exl.evaluate(EXLASTArithmetic(operator, EXLASTRaise(), EXLASTNumber(1))) == EXLRaiseSignal()

    @pytest.mark.parametrize("operator", list(EXLArithmeticOperator))
    def test_arithmetic_right_operand(self, exl, operator):
        """Test raise in the right arithmetic operand."""
        assert exl.evaluate(EXLASTArithmetic(operator, EXLASTNumber(1), EXLASTRaise())) == EXLRaiseSignal()

    @pytest.mark.parametrize("operator", list(EXLComparisonOperator))
    def test_comparison_operands(self, exl, operator):
        """Test raise in either comparison operand."""
        assert exl.evaluate(EXLASTComparison(operator, EXLASTRaise(), EXLASTNumber(1))) == EXLRaiseSignal()
        assert exl.evaluate(EXLASTComparison(operator, EXLASTNumber(1), EXLASTRaise())) == EXLRaiseSignal()

    def test_raise_takes_priority_over_type_fault(self, exl):
        """Test true + raise is the raise signal rather than a type fault."""
        program = EXLASTArithmetic(EXLArithmeticOperator.ADD, EXLASTBoolean(True), EXLASTRaise())
        assert exl.evaluate(program) == EXLRaiseSignal()

        program = EXLASTArithmetic(EXLArithmeticOperator.ADD, EXLASTRaise(), EXLASTNil())
        assert exl.evaluate(program) == EXLRaiseSignal()

    def test_callee_position(self, exl):
        """Test raise as the function being applied."""
        assert exl.evaluate(EXLASTApply(EXLASTRaise(), EXLASTNumber(1))) == EXLRaiseSignal()

    def test_argument_position(self, exl):
        """Test raise as the argument of an application."""
        program = EXLASTApply(EXLASTLambda("x", EXLASTNumber(1)), EXLASTRaise())
        assert exl.evaluate(program) == EXLRaiseSignal()

    def test_non_function_callee_faults_before_argument(self, exl):
        """Test that a non-function callee faults even when the argument would raise."""
        with pytest.raises(EXLTypeError):
            exl.evaluate(EXLASTApply(EXLASTNumber(3), EXLASTRaise()))

    def test_unbound_variable_raises(self, exl):
        """Test that an unbound variable is the raise signal, not an error."""
        assert exl.evaluate(EXLASTVariable("missing")) == EXLRaiseSignal()

    def test_raise_inside_function_body(self, exl, helpers):
        """Test raise from a function body reaches the caller."""
        program = helpers.add(
            helpers.num(1),
            EXLASTApply(EXLASTLambda("x", EXLASTHead(EXLASTNil())), helpers.num(0))
        )
        assert exl.evaluate(program) == EXLRaiseSignal()


class TestEXLTry:
    """Test try expressions."""

    def test_try_catches_raise(self, exl):
        """Test try raise with 5."""
        assert exl.evaluate(EXLASTTry(EXLASTRaise(), EXLASTNumber(5))) == EXLNumber(5)

    def test_try_passes_through_value(self, exl, helpers):
        """Test try (2 + 3) with 0."""
        program = EXLASTTry(helpers.add(helpers.num(2), helpers.num(3)), helpers.num(0))
        assert exl.evaluate(program) == EXLNumber(5)

    def test_handler_not_evaluated_without_raise(self, exl):
        """Test that a faulting handler is never evaluated when the body succeeds."""
        faulty = EXLASTHead(EXLASTNumber(1))
        assert exl.evaluate(EXLASTTry(EXLASTNumber(9), faulty)) == EXLNumber(9)

    def test_try_catches_nested_raise(self, exl, helpers):
        """Test that try catches a raise buried several operations deep."""
        program = EXLASTTry(
            helpers.add(helpers.num(1), helpers.mul(helpers.num(2), EXLASTHead(EXLASTNil()))),
            helpers.num(-1)
        )
        assert exl.evaluate_to_python(program) == -1

    def test_try_catches_unbound_variable(self, exl):
        """Test try x with 0 where x is unbound."""
        assert exl.evaluate(EXLASTTry(EXLASTVariable("x"), EXLASTNumber(0))) == EXLNumber(0)

    def test_handler_may_raise(self, exl):
        """Test that a raising handler propagates to the enclosing try."""
        inner = EXLASTTry(EXLASTRaise(), EXLASTRaise())
        assert exl.evaluate(inner) == EXLRaiseSignal()
        assert exl.evaluate(EXLASTTry(inner, EXLASTNumber(3))) == EXLNumber(3)

    def test_nearest_try_catches(self, exl, helpers):
        """Test that the innermost enclosing try handles the raise."""
        program = EXLASTTry(
            helpers.add(helpers.num(100), EXLASTTry(EXLASTRaise(), helpers.num(1))),
            helpers.num(0)
        )
        assert exl.evaluate_to_python(program) == 101

    def test_handler_sees_enclosing_environment(self, exl, helpers):
        """Test that the handler is evaluated in the try's environment."""
        program = EXLASTApply(
            EXLASTLambda("y", EXLASTTry(EXLASTRaise(), helpers.mul(EXLASTVariable("y"), helpers.num(2)))),
            helpers.num(21)
        )
        assert exl.evaluate_to_python(program) == 42

    def test_try_does_not_catch_type_fault(self, exl):
        """Test that type faults abort evaluation through try."""
        program = EXLASTTry(EXLASTIf(EXLASTNumber(1), EXLASTNumber(2), EXLASTNumber(3)), EXLASTNumber(0))
        with pytest.raises(EXLTypeError):
            exl.evaluate(program)

    def test_try_does_not_catch_apply_of_non_function(self, exl):
        """Test that applying a number inside try still faults."""
        program = EXLASTTry(EXLASTApply(EXLASTNumber(1), EXLASTNumber(2)), EXLASTNumber(0))
        with pytest.raises(EXLTypeError):
            exl.evaluate(program)

    def test_safe_head_with_default(self, exl, helpers):
        """Test a recursive list sum that treats an empty list as zero via try."""
        body = EXLASTTry(
            helpers.add(
                EXLASTHead(EXLASTVariable("l")),
                EXLASTApply(EXLASTVariable("sum"), EXLASTTail(EXLASTVariable("l")))
            ),
            helpers.num(0)
        )
        program = EXLASTFunctionDef(
            "sum", "l", body,
            EXLASTApply(EXLASTVariable("sum"), helpers.list_of(helpers.num(1), helpers.num(2), helpers.num(3))),
            recursive=True
        )
        assert exl.evaluate_to_python(program) == 6

    def test_raise_signals_are_equal(self):
        """Test that any two raise signals compare equal."""
        assert EXLRaiseSignal() == EXLRaiseSignal()
        assert EXLRaiseSignal() != EXLNumber(0)
