"""Exception classes for EXL (Expression Language) fatal faults with detailed context."""

from typing import Optional


class EXLError(Exception):
    """Base exception for EXL errors with detailed context information."""

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        expected: Optional[str] = None,
        received: Optional[str] = None,
        suggestion: Optional[str] = None,
        position: Optional[str] = None
    ):
        """
        Initialize detailed error.

        Args:
            message: Core error description
            context: Additional context information
            expected: What was expected
            received: What was actually received
            suggestion: Suggestion for fixing the error
            position: Source position of the offending node, if known
        """
        self.message = message
        self.context = context
        self.expected = expected
        self.received = received
        self.suggestion = suggestion
        self.position = position

        super().__init__(self._format_detailed_message())

    def _format_detailed_message(self) -> str:
        """Format the error message with all available details."""
        parts = [f"Error: {self.message}"]

        if self.position is not None:
            parts.append(f"Position: {self.position}")

        if self.received:
            parts.append(f"Received: {self.received}")
        if self.expected:
            parts.append(f"Expected: {self.expected}")

        if self.context:
            parts.append(f"Context: {self.context}")

        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")

        return "\n".join(parts)


class EXLEvalError(EXLError):
    """Evaluation faults with detailed context."""


class EXLTypeError(EXLEvalError):
    """
    A type fault: the program applied an operation to the wrong kind of value.

    Type faults abort evaluation and are never intercepted by a try expression.
    """

    def __init__(
        self,
        operation: str,
        received_type: str,
        message: str,
        context: Optional[str] = None,
        expected: Optional[str] = None,
        received: Optional[str] = None,
        suggestion: Optional[str] = None,
        position: Optional[str] = None
    ):
        self.operation = operation
        self.received_type = received_type
        super().__init__(
            message=message,
            context=context,
            expected=expected,
            received=received,
            suggestion=suggestion,
            position=position
        )


class EXLDepthError(EXLEvalError):
    """Evaluation nested deeper than the configured limit."""
