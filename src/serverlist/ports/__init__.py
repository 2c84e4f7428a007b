from .store import RemoteStorePort
from .identity import IdentityPort

__all__ = ["RemoteStorePort", "IdentityPort"]
