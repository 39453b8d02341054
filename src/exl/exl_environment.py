"""Environment management for EXL variable and function scoping."""

from typing import Dict, List
from dataclasses import dataclass, field

from exl.exl_value import EXLValue, EXLRecursivePlaceholder


@dataclass(frozen=True)
class EXLEnvironment:
    """
    Immutable environment for variable and function bindings with lexical scoping.

    Environments form a chain of frames.  Extending an environment creates a new
    child frame and never changes the parent, so any environment captured by a
    closure keeps exactly the bindings it had when it was captured.
    """
    bindings: Dict[str, EXLValue] = field(default_factory=dict)
    parent: 'EXLEnvironment | None' = None
    name: str = "anonymous"

    def extend(self, name: str, value: EXLValue, frame_name: str | None = None) -> 'EXLEnvironment':
        """
        Return a new environment frame binding a single name.

        Args:
            name: Variable name
            value: Variable value (EXLValue)
            frame_name: Name of the new frame for diagnostics (defaults to the variable name)

        Returns:
            New environment whose parent is this one
        """
        return EXLEnvironment({name: value}, self, frame_name or name)

    def lookup(self, name: str) -> EXLValue | None:
        """
        Look up a variable in this environment or parent environments.

        Args:
            name: Variable name to look up

        Returns:
            Variable value, or None if the name is not bound anywhere in the chain
        """
        env: EXLEnvironment | None = self
        while env is not None:
            if name in env.bindings:
                value = env.bindings[name]

                # Handle recursive placeholders
                if isinstance(value, EXLRecursivePlaceholder):
                    return value.get_resolved_value()

                return value

            env = env.parent

        return None

    def has_binding(self, name: str) -> bool:
        """
        Check if a variable has a binding in this environment or parent environments.

        Args:
            name: Variable name to check

        Returns:
            True if variable has a binding, False otherwise
        """
        env: EXLEnvironment | None = self
        while env is not None:
            if name in env.bindings:
                return True

            env = env.parent

        return False

    def get_available_bindings(self) -> List[str]:
        """Get all visible binding names, innermost first, without duplicates."""
        available: List[str] = []
        env: EXLEnvironment | None = self
        while env is not None:
            for name in env.bindings:
                if name not in available:
                    available.append(name)

            env = env.parent

        return available

    def __repr__(self) -> str:
        """String representation for debugging."""
        local_bindings = list(self.bindings.keys())
        parent_info = f" (parent: {self.parent.name})" if self.parent else ""
        return f"EXLEnvironment({self.name}: {local_bindings}{parent_info})"
