"""Shared ownership tracking for resources that must be released once."""

from __future__ import annotations

import threading


class _ReferenceCount:
    def __init__(self) -> None:
        self.value = 1
        self.lock = threading.Lock()


class Resource:
    """Base for objects whose underlying resource is shared between copies.

    Only a resource that has never been copied owns its underlying resource.
    """

    def __init__(self) -> None:
        self._references = _ReferenceCount()

    @property
    def reference_count(self) -> int:
        return self._references.value

    def copy(self) -> Resource:
        """Return a shallow copy sharing the underlying resource."""
        duplicate = object.__new__(type(self))
        duplicate.__dict__.update(self.__dict__)
        with self._references.lock:
            self._references.value += 1
        return duplicate

    __copy__ = copy

    def can_deallocate(self) -> bool:
        """True if this object alone owns the resource."""
        return self._references.value == 1