"""Completion sync errors for studynext."""

from typing import Optional


class CompletionError(Exception):
    """Base class for completion sync failures."""


class RemoteWriteError(CompletionError):
    """The remote store could not apply a write (network, transient, stale record)."""


class PermissionDeniedError(CompletionError):
    """The remote store rejected a write on ownership grounds."""

    def __init__(self, message: str, owner_id: Optional[str] = None):
        super().__init__(message)
        self.owner_id = owner_id
