"""
Lexical environments for the Jerboa interpreter.

An environment frame maps names to values and links to an optional outer
frame. Frames are shared: the defining scope, every closure created in it,
and any active call may all hold the same frame. A frame lives as long as
its longest-lived holder.
"""

from typing import Dict, List, Optional

from .values import Value
from ..errors import error_identifier_not_found


class Environment:
    """
    A single scope frame.

    Frames form a chain via `outer`. Lookups walk outward; bindings always
    go into the frame they are made on, shadowing any outer binding.
    """

    def __init__(self, outer: Optional["Environment"] = None, name: str = "block"):
        self.variables: Dict[str, Value] = {}
        self.outer = outer
        self.name = name  # For debugging

    def __repr__(self) -> str:
        return f"<Environment {self.name} {sorted(self.variables)}>"

    @classmethod
    def enclose(cls, outer: "Environment", name: str = "block") -> "Environment":
        """Create an empty frame chained to `outer`."""
        return cls(outer=outer, name=name)

    def get(self, name: str) -> Value:
        """Look up a name in this frame or any outer frame.

        Raises:
            EvalLookupError: If no frame in the chain binds `name`
        """
        env = self
        while env is not None:
            if name in env.variables:
                return env.variables[name]
            env = env.outer
        raise error_identifier_not_found(name)

    def set(self, name: str, value: Value) -> None:
        """Bind a name in this frame (shadowing outer frames if bound there)."""
        self.variables[name] = value

    def contains(self, name: str) -> bool:
        """Check if a name is bound in this frame or its outer frames."""
        env = self
        while env is not None:
            if name in env.variables:
                return True
            env = env.outer
        return False

    def names(self) -> List[str]:
        """Names visible from this frame, innermost first, without duplicates."""
        seen: List[str] = []
        env = self
        while env is not None:
            for name in env.variables:
                if name not in seen:
                    seen.append(name)
            env = env.outer
        return seen

    @property
    def depth(self) -> int:
        """Number of frames from here to the outermost one."""
        count = 0
        env = self.outer
        while env is not None:
            count += 1
            env = env.outer
        return count
