from .memory import InMemoryQuerySource

__all__ = ["InMemoryQuerySource"]
