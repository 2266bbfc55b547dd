"""Completion state backends for studynext.

`CompletionStore` is the interface; `LocalBackend` is the in-process cache and
`RemoteBackend` writes through to the course record store.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from studynext.completion.errors import RemoteWriteError
from studynext.models.constants import STATUS_COMPLETED
from studynext.models.task import Task, default_status

logger = logging.getLogger(__name__)


class CompletionStore(Protocol):
    """Somewhere completion state can be read from and written to.

    `write` may return a version token for the write (the local cache does);
    stores without versions return None.
    """

    def read(self, task: Task) -> Optional[bool]:
        ...

    def write(self, task: Task, completed: bool, owner_id: Optional[str] = None) -> Optional[int]:
        ...


@dataclass
class LocalEntry:
    completed: bool
    seq: int
    synced: bool = False


class LocalBackend:
    """Local completion cache for one identity.

    Every write gets a sequence number so that only the latest toggle of a task
    can be confirmed or reverted; earlier toggles finishing late never override it.
    """

    def __init__(self):
        self._entries: Dict[str, LocalEntry] = {}
        self._seq = 0

    def read(self, task: Task) -> Optional[bool]:
        entry = self._entries.get(task.id)
        return entry.completed if entry else None

    def write(self, task: Task, completed: bool, owner_id: Optional[str] = None) -> int:
        """Record a toggle as not yet confirmed by the remote store."""
        self._seq += 1
        self._entries[task.id] = LocalEntry(completed=completed, seq=self._seq)
        return self._seq

    def version(self, task_id: str) -> int:
        """Sequence number of the latest write to a task (0 if never written)."""
        entry = self._entries.get(task_id)
        return entry.seq if entry else 0

    def has_unsynced(self, task_id: str) -> bool:
        entry = self._entries.get(task_id)
        return entry is not None and not entry.synced

    def confirm(self, task_id: str, seq: int) -> None:
        """Mark a remote write as landed.

        Only the latest toggle counts as synced; a superseded write may have
        reached the store out of order, so the local value stays authoritative.
        """
        entry = self._entries.get(task_id)
        if entry is None:
            return
        entry.synced = entry.seq == seq

    def revert(self, task_id: str, seq: int, previous: bool) -> None:
        """Undo an optimistic toggle unless a later toggle replaced it."""
        entry = self._entries.get(task_id)
        if entry is not None and entry.seq == seq:
            entry.completed = previous
            entry.synced = True

    def pending(self) -> Dict[str, bool]:
        """Toggles the remote store has not confirmed, as task id -> completed.

        Confirmed entries are left out so the stored status wins once a write
        has landed.
        """
        return {
            task_id: entry.completed
            for task_id, entry in self._entries.items()
            if not entry.synced
        }


class RemoteBackend:
    """Completion state stored in course records.

    Takes a `CourseRecordRepository`; calls are blocking and meant to run in a
    worker thread.
    """

    def __init__(self, repository):
        self.repository = repository

    def read(self, task: Task) -> Optional[bool]:
        """Stored status of the task, or None when the record can't be read."""
        try:
            record = self.repository.get(task.chat_id)
        except SQLAlchemyError as e:
            logger.warning(f"Could not read course record {task.chat_id}: {type(e).__name__}: {str(e)}")
            return None
        if record is None:
            return None
        entries = record.exams if task.is_exam else record.assignments
        for entry in entries:
            if entry.name == task.name:
                return entry.status == STATUS_COMPLETED
        return None

    def write(self, task: Task, completed: bool, owner_id: Optional[str] = None) -> Optional[int]:
        """Persist the new status.

        Raises:
            PermissionDeniedError: The record belongs to someone else
            RemoteWriteError: Anything else went wrong
        """
        status = STATUS_COMPLETED if completed else default_status(task.type)
        try:
            self.repository.set_task_status(task.chat_id, task.type, task.name, status, owner_id)
        except SQLAlchemyError as e:
            raise RemoteWriteError(f"{type(e).__name__}: {str(e)}") from e
