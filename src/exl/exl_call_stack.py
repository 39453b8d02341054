"""Record of active EXL function applications, reported when evaluation faults."""

from typing import List
from dataclasses import dataclass

from exl.exl_value import EXLValue


@dataclass(frozen=True)
class EXLCallFrame:
    """One active application: the function, its bound argument and its body."""
    function_name: str
    parameter: str
    argument: EXLValue
    expression: str = ""

    def describe(self) -> str:
        """Describe the call as it would read in source, e.g. fact(n=3)."""
        return f"{self.function_name}({self.parameter}={self.argument.describe()})"


class EXLCallStack:
    """
    Active function applications, outermost first.

    The stack is only consulted when building fault messages; variable
    lookup goes through environments, never through these frames.
    """

    def __init__(self) -> None:
        self.frames: List[EXLCallFrame] = []

    def push(self, function_name: str, parameter: str, argument: EXLValue, expression: str = "") -> None:
        """
        Record entry into a function body.

        Args:
            function_name: Name of the function being called
            parameter: Name of the function's parameter
            argument: Value bound to the parameter
            expression: Description of the function body
        """
        self.frames.append(EXLCallFrame(function_name, parameter, argument, expression))

    def pop(self) -> EXLCallFrame | None:
        """Record exit from the innermost function body; None if nothing is active."""
        return self.frames.pop() if self.frames else None

    def depth(self) -> int:
        return len(self.frames)

    def format_stack_trace(self, max_frames: int = 10) -> str:
        """
        Render the innermost `max_frames` calls, each nested one level deeper than its caller.

        Args:
            max_frames: Maximum number of frames to include

        Returns:
            Indented multi-line trace
        """
        if not self.frames:
            return "  (no function calls)"

        hidden = max(0, len(self.frames) - max_frames)
        lines = [f"  ... ({hidden} more frames)"] if hidden else []

        for level, frame in enumerate(self.frames[hidden:], start=1):
            indent = "  " * level
            lines.append(indent + frame.describe())
            if frame.expression:
                lines.append(f"{indent}  -> {frame.expression}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        innermost = self.frames[-1].function_name if self.frames else None
        return f"EXLCallStack(depth={len(self.frames)}, innermost={innermost})"
