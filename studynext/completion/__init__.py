"""Completion state tracking for studynext."""

from studynext.completion.errors import CompletionError, RemoteWriteError, PermissionDeniedError
from studynext.completion.backends import CompletionStore, LocalBackend, LocalEntry, RemoteBackend
from studynext.completion.manager import CompletionManager

__all__ = [
    "CompletionError",
    "RemoteWriteError",
    "PermissionDeniedError",
    "CompletionStore",
    "LocalBackend",
    "LocalEntry",
    "RemoteBackend",
    "CompletionManager",
]
