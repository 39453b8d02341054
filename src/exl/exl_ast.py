"""EXL AST Node hierarchy - program representation with optional source location metadata.

This module defines the closed set of expression node types a program is built
from.  A parser (or a test) constructs trees of these nodes directly; the
evaluator walks them and produces runtime values (see exl_value).

Key points:
- AST nodes are immutable and never carry environments
- Source location fields are optional, keyword-only and ignored by equality
- Runtime values (EXLValue) are separate classes with no location metadata
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum


class EXLArithmeticOperator(Enum):
    """Binary arithmetic operators."""
    ADD = "+"
    SUB = "-"
    MUL = "*"


class EXLComparisonOperator(Enum):
    """Binary comparison operators."""
    GT = ">"
    GE = ">="
    EQ = "=="
    NE = "!="
    LE = "<="
    LT = "<"


@dataclass(frozen=True)
class EXLASTNode(ABC):
    """
    Abstract base class for all EXL AST nodes.

    Source location fields are keyword-only so node fields can be given
    positionally.
    """
    line: int | None = field(default=None, kw_only=True, compare=False)
    column: int | None = field(default=None, kw_only=True, compare=False)

    @abstractmethod
    def kind(self) -> str:
        """Return the node kind name used in error messages."""

    @abstractmethod
    def describe(self) -> str:
        """Describe the expression."""

    def position(self) -> str | None:
        """Return a printable source position, or None if the node has none."""
        if self.line is None:
            return None

        if self.column is None:
            return f"line {self.line}"

        return f"line {self.line}, column {self.column}"


@dataclass(frozen=True)
class EXLASTNumber(EXLASTNode):
    """Integer literal."""
    value: int

    def kind(self) -> str:
        return "number"

    def describe(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class EXLASTBoolean(EXLASTNode):
    """Boolean literal."""
    value: bool

    def kind(self) -> str:
        return "boolean"

    def describe(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class EXLASTIf(EXLASTNode):
    """Conditional expression; only the chosen branch is evaluated."""
    condition: EXLASTNode
    then_branch: EXLASTNode
    else_branch: EXLASTNode

    def kind(self) -> str:
        return "if"

    def describe(self) -> str:
        return (
            f"if {self.condition.describe()} then {self.then_branch.describe()} "
            f"else {self.else_branch.describe()}"
        )


@dataclass(frozen=True)
class EXLASTArithmetic(EXLASTNode):
    """Binary arithmetic on two numbers."""
    operator: EXLArithmeticOperator
    left: EXLASTNode
    right: EXLASTNode

    def kind(self) -> str:
        return self.operator.value

    def describe(self) -> str:
        return f"({self.left.describe()} {self.operator.value} {self.right.describe()})"


@dataclass(frozen=True)
class EXLASTComparison(EXLASTNode):
    """Binary comparison of two numbers, producing a boolean."""
    operator: EXLComparisonOperator
    left: EXLASTNode
    right: EXLASTNode

    def kind(self) -> str:
        return self.operator.value

    def describe(self) -> str:
        return f"({self.left.describe()} {self.operator.value} {self.right.describe()})"


@dataclass(frozen=True)
class EXLASTVariable(EXLASTNode):
    """Reference to a name, resolved against the environment at evaluation time."""
    name: str

    def kind(self) -> str:
        return "variable"

    def describe(self) -> str:
        return self.name


@dataclass(frozen=True)
class EXLASTLambda(EXLASTNode):
    """Anonymous single-parameter function."""
    parameter: str
    body: EXLASTNode

    def kind(self) -> str:
        return "lambda"

    def describe(self) -> str:
        return f"(fn {self.parameter} => {self.body.describe()})"


@dataclass(frozen=True)
class EXLASTApply(EXLASTNode):
    """Application of a function to a single argument."""
    function: EXLASTNode
    argument: EXLASTNode

    def kind(self) -> str:
        return "apply"

    def describe(self) -> str:
        return f"{self.function.describe()}({self.argument.describe()})"


@dataclass(frozen=True)
class EXLASTFunctionDef(EXLASTNode):
    """
    Named function definition.

    Binds `name` while evaluating `scope`.  When `recursive` is set the name is
    also bound inside `body`, so the function can call itself.
    """
    name: str
    parameter: str
    body: EXLASTNode
    scope: EXLASTNode
    recursive: bool = False

    def kind(self) -> str:
        return "fun rec" if self.recursive else "fun"

    def describe(self) -> str:
        keyword = "fun rec" if self.recursive else "fun"
        return f"{keyword} {self.name} {self.parameter} = {self.body.describe()} in {self.scope.describe()}"


@dataclass(frozen=True)
class EXLASTNil(EXLASTNode):
    """The empty list."""

    def kind(self) -> str:
        return "nil"

    def describe(self) -> str:
        return "nil"


@dataclass(frozen=True)
class EXLASTCons(EXLASTNode):
    """Prepend `head` to the list `tail`."""
    head: EXLASTNode
    tail: EXLASTNode

    def kind(self) -> str:
        return "::"

    def describe(self) -> str:
        return f"({self.head.describe()} :: {self.tail.describe()})"


@dataclass(frozen=True)
class EXLASTHead(EXLASTNode):
    """First element of a list."""
    operand: EXLASTNode

    def kind(self) -> str:
        return "hd"

    def describe(self) -> str:
        return f"hd({self.operand.describe()})"


@dataclass(frozen=True)
class EXLASTTail(EXLASTNode):
    """All but the first element of a list."""
    operand: EXLASTNode

    def kind(self) -> str:
        return "tl"

    def describe(self) -> str:
        return f"tl({self.operand.describe()})"


@dataclass(frozen=True)
class EXLASTIsEmpty(EXLASTNode):
    """Test whether a list is empty."""
    operand: EXLASTNode

    def kind(self) -> str:
        return "isEmpty"

    def describe(self) -> str:
        return f"isEmpty({self.operand.describe()})"


@dataclass(frozen=True)
class EXLASTTry(EXLASTNode):
    """Evaluate `body`; if it raises, evaluate `handler` instead."""
    body: EXLASTNode
    handler: EXLASTNode

    def kind(self) -> str:
        return "try"

    def describe(self) -> str:
        return f"try {self.body.describe()} with {self.handler.describe()}"


@dataclass(frozen=True)
class EXLASTRaise(EXLASTNode):
    """Explicit raise."""

    def kind(self) -> str:
        return "raise"

    def describe(self) -> str:
        return "raise"
