from .memory import InMemoryStore
from .skyd_registry import SkydRegistryStore

__all__ = ["InMemoryStore", "SkydRegistryStore"]
