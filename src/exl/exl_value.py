"""EXL Value hierarchy - immutable runtime value types produced by evaluation."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Tuple

from exl.exl_error import EXLEvalError


class EXLValue(ABC):
    """
    Abstract base class for all EXL runtime values.

    All EXL values are immutable.
    """

    @abstractmethod
    def to_python(self) -> Any:
        """Convert to Python value."""

    @abstractmethod
    def type_name(self) -> str:
        """Return EXL type name for error messages."""

    @abstractmethod
    def describe(self) -> str:
        """Describe the value."""


@dataclass(frozen=True)
class EXLNumber(EXLValue):
    """Represents integer values."""
    value: int

    def to_python(self) -> int:
        return self.value

    def type_name(self) -> str:
        return "number"

    def describe(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class EXLBoolean(EXLValue):
    """Represents boolean values."""
    value: bool

    def to_python(self) -> bool:
        return self.value

    def type_name(self) -> str:
        return "boolean"

    def describe(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class EXLList(EXLValue):
    """
    Represents singly-linked lists of EXL values.

    Lists are never modified in place: every operation that produces a
    different list allocates a new one, so a list shared by several
    expressions always looks the same to all of them.
    """
    elements: Tuple[EXLValue, ...] = ()

    def to_python(self) -> List[Any]:
        """Convert to Python list with Python values."""
        return [elem.to_python() for elem in self.elements]

    def type_name(self) -> str:
        return "list"

    def describe(self) -> str:
        if not self.elements:
            return "[]"

        return "[" + ", ".join(elem.describe() for elem in self.elements) + "]"

    def is_empty(self) -> bool:
        """Check if the list is empty."""
        return len(self.elements) == 0

    def first(self) -> EXLValue:
        """Get the first element (raises IndexError if empty)."""
        if not self.elements:
            raise IndexError("Cannot get first element of empty list")

        return self.elements[0]

    def rest(self) -> 'EXLList':
        """Get all elements except the first (raises IndexError if empty)."""
        if not self.elements:
            raise IndexError("Cannot get rest of empty list")

        return EXLList(self.elements[1:])

    def cons(self, element: EXLValue) -> 'EXLList':
        """Prepend an element, returning a new list."""
        return EXLList((element,) + self.elements)


@dataclass(frozen=True, eq=False)
class EXLClosure(EXLValue):
    """
    Represents a user-defined function together with its defining environment.

    Closures compare by identity only.
    """
    parameter: str
    body: Any  # EXLASTNode
    closure_environment: Any  # EXLEnvironment, avoiding circular import
    name: str = "<lambda>"

    def to_python(self) -> 'EXLClosure':
        """Functions return themselves as Python values."""
        return self

    def type_name(self) -> str:
        return "function"

    def describe(self) -> str:
        if self.name == "<lambda>":
            return f"<lambda ({self.parameter})>"

        return f"<function {self.name} ({self.parameter})>"


@dataclass(frozen=True)
class EXLRaiseSignal(EXLValue):
    """
    The catchable raise signal.

    Produced by an explicit raise, by looking up an unbound variable, and by
    taking the head or tail of an empty list.  It flows through evaluation as
    an ordinary value until a try expression replaces it with its handler's
    result.  All raise signals are equal to each other.
    """

    def to_python(self) -> 'EXLRaiseSignal':
        return self

    def type_name(self) -> str:
        return "raise"

    def describe(self) -> str:
        return "<raise>"


class EXLRecursivePlaceholder(EXLValue):
    """Placeholder for recursive bindings that resolves to actual value when accessed."""

    def __init__(self, name: str):
        self._name = name
        self._resolved_value: EXLValue | None = None

    def resolve(self, value: EXLValue) -> None:
        """Resolve the placeholder to an actual value (only once)."""
        if self.is_resolved():
            raise EXLEvalError(f"Recursive placeholder '{self._name}' resolved more than once")

        self._resolved_value = value

    def is_resolved(self) -> bool:
        """Check whether the placeholder has been resolved."""
        return self._resolved_value is not None

    def get_resolved_value(self) -> EXLValue:
        """Get the resolved value, handling recursive calls."""
        if self._resolved_value is None:
            raise EXLEvalError(f"Recursive placeholder '{self._name}' accessed before resolution")

        return self._resolved_value

    def to_python(self) -> Any:
        return self.get_resolved_value().to_python()

    def type_name(self) -> str:
        return f"recursive-placeholder({self._name})"

    def describe(self) -> str:
        return f"<placeholder {self._name}>"
