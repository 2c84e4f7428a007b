"""Shared server list kept in a single optimistic-concurrency record."""

__version__ = "0.1.0"
