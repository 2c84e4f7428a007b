from .ipify import HttpIdentity

__all__ = ["HttpIdentity"]
