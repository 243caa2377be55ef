"""Exceptions raised while building or traversing a graph."""


class BayesNetError(Exception):
    """Base class for graph construction and traversal errors."""


class UnknownDependencyError(BayesNetError, LookupError):
    """Raised when a variable has no binding in the variables record."""

    def __init__(self, name: str, required_by: str | None = None) -> None:
        self.name = name
        self.required_by = required_by
        msg = f"No value bound for '{name}'"
        if required_by is not None and required_by != name:
            msg += f" (required by '{required_by}')"
        super().__init__(msg)


class CyclicGraphError(BayesNetError):
    """Raised when a node is reached again while its dependencies are still resolving."""

    def __init__(self, cycle: tuple[str, ...]) -> None:
        self.cycle = cycle
        super().__init__(f"Cycle detected in graph: {' -> '.join(cycle)}")


class ShapeMismatchError(BayesNetError, ValueError):
    """Raised when array shapes cannot be broadcast against each other."""

    def __init__(self, *shapes: tuple[int, ...]) -> None:
        self.shapes = shapes
        super().__init__(f"Incompatible shapes: {', '.join(str(s) for s in shapes)}")


class NameCollisionError(BayesNetError, ValueError):
    """Raised when two distinct nodes in one graph share a name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Two different nodes are named '{name}'")
