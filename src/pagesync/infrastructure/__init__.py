from .memory_service import InMemoryService

__all__ = ["InMemoryService"]
