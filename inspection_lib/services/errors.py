"""Wiring errors raised by the composition registry.

Both indicate a static defect in the startup wiring and are not meant to be
retried; callers let them propagate and abort startup.
"""
from typing import Sequence


class UnregisteredTypeError(KeyError):
    """Raised when resolving a type identifier that was never registered."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"No service registered for '{self.name}'"


class CyclicDependencyError(RuntimeError):
    """Raised when factories resolve each other in a loop."""

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = list(chain)
        super().__init__("Cyclic dependency: " + " -> ".join(self.chain))
