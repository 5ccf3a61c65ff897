"""Where names live while an expression is being compiled."""

from __future__ import annotations

from dataclasses import dataclass, field

from coolcgen.classtable import NO_CLASS, CgenNode


@dataclass
class Environment:
    """Scoped stack variables, method parameters and the enclosing class."""

    class_node: CgenNode | None = None
    scope_lengths: list[int] = field(default_factory=list)
    variables: list[str] = field(default_factory=list)
    params: list[str] = field(default_factory=list)

    def copy(self) -> Environment:
        """An independent copy sharing the same class node."""
        return Environment(
            self.class_node,
            list(self.scope_lengths),
            list(self.variables),
            list(self.params),
        )

    def enter_scope(self) -> None:
        self.scope_lengths.append(0)

    def exit_scope(self) -> None:
        """Drop the innermost scope and every variable it introduced."""
        if not self.scope_lengths:
            raise RuntimeError("no scope to exit")
        count = self.scope_lengths.pop()
        if count:
            del self.variables[-count:]

    def add_var(self, name: str) -> int:
        """Push ``name`` in the innermost scope; return its position from the bottom."""
        if not self.scope_lengths:
            raise RuntimeError("no open scope to add a variable to")
        self.variables.append(name)
        self.scope_lengths[-1] += 1
        return len(self.variables) - 1

    def add_obstacle(self) -> int:
        """Reserve one unnamed stack slot in a fresh scope."""
        self.enter_scope()
        return self.add_var(NO_CLASS)

    def add_param(self, name: str) -> int:
        self.params.append(name)
        return len(self.params) - 1

    def lookup_var(self, name: str) -> int | None:
        """Distance of the innermost ``name`` from the stack top, or None."""
        for distance, var in enumerate(reversed(self.variables)):
            if var == name:
                return distance
        return None

    def lookup_param(self, name: str) -> int | None:
        """Offset of parameter ``name`` counted from the last one, or None."""
        for idx, param in enumerate(self.params):
            if param == name:
                return len(self.params) - 1 - idx
        return None

    def lookup_attrib(self, name: str) -> int | None:
        """Slot of attribute ``name`` in the enclosing class, or None."""
        if self.class_node is None:
            return None
        return self.class_node.attrib_index().get(name)