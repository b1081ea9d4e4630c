"""Helper utilities for tests (async polling, in-memory collaborators)."""

from .eventually import eventually

__all__ = ["eventually"]
