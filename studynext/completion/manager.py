"""Completion toggling with optimistic writes and local fallback.

The remote store is the source of truth when it accepts writes. The local cache
is updated first, so reads elsewhere in the app are immediately consistent, and
it stays authoritative for guests and whenever a remote write fails.
"""

import logging
import random
from datetime import datetime
from typing import Dict, Optional, Sequence

from fastapi.concurrency import run_in_threadpool

from studynext.completion.backends import CompletionStore, LocalBackend
from studynext.completion.errors import PermissionDeniedError, RemoteWriteError
from studynext.engine.celebration import celebration_message, incomplete_message
from studynext.engine.dates import days_until
from studynext.engine.nudges import is_completed
from studynext.models.completion import CompletionOutcome, CompletionResult
from studynext.models.constants import HEAVY_WEIGHT_THRESHOLD, STATUS_COMPLETED
from studynext.models.identity import Identity
from studynext.models.task import Task, default_status

logger = logging.getLogger(__name__)


class CompletionManager:
    """Reconciles a local cache with an optional remote backend for one identity."""

    def __init__(
        self,
        identity: Identity,
        local: Optional[LocalBackend] = None,
        remote: Optional[CompletionStore] = None,
        rng: Optional[random.Random] = None,
    ):
        self.identity = identity
        self.local = local if local is not None else LocalBackend()
        self.remote = remote
        self.rng = rng

    def completion_state(self) -> Dict[str, bool]:
        """Local overrides to lay over stored statuses (unconfirmed toggles only)."""
        return self.local.pending()

    async def current_completion(self, task: Task) -> bool:
        """Resolve whether a task is currently completed.

        An unconfirmed local toggle wins; otherwise the remote record's status;
        otherwise any local entry; otherwise the task's own status.
        """
        if self.local.has_unsynced(task.id):
            return self.local.read(task)
        if self.remote is not None and not self.identity.is_ephemeral:
            remote_value = await run_in_threadpool(self.remote.read, task)
            if remote_value is not None:
                return remote_value
        local_value = self.local.read(task)
        if local_value is not None:
            return local_value
        return task.status == STATUS_COMPLETED

    async def toggle_completion(
        self,
        task: Task,
        upcoming: Sequence[Task] = (),
        now: Optional[datetime] = None,
    ) -> CompletionResult:
        """Flip a task's completion.

        Never raises for backend problems: guests and failed remote writes keep
        the change locally. Only a write rejected because the record belongs to
        a different owner is reported back as permission denied.

        Args:
            task: Task to toggle
            upcoming: Other tasks, used to phrase the completion message
            now: Reference time (defaults to the current local time)

        Returns:
            CompletionResult describing the new state and where it landed
        """
        seen = self.local.version(task.id)
        previous = await self.current_completion(task)
        if self.local.version(task.id) != seen:
            # Another toggle of this task landed while the store was being read
            previous = self.local.read(task)
        target = not previous
        seq = self.local.write(task, target)
        status = STATUS_COMPLETED if target else default_status(task.type)

        if self.identity.is_ephemeral or self.remote is None:
            return self._result(task, target, status, CompletionOutcome.LOCAL, upcoming, now)

        try:
            await run_in_threadpool(self.remote.write, task, target, self.identity.owner_id)
        except PermissionDeniedError as e:
            if e.owner_id and e.owner_id != self.identity.owner_id:
                logger.warning(f"Permission denied toggling {task.id} for {self.identity.owner_id}: {str(e)}")
                self.local.revert(task.id, seq, previous)
                return CompletionResult(
                    task_id=task.id,
                    completed=previous,
                    status=STATUS_COMPLETED if previous else default_status(task.type),
                    outcome=CompletionOutcome.PERMISSION_DENIED,
                    message=(
                        f"{task.name} belongs to a course you don't own, so the change "
                        "was not saved."
                    ),
                )
            logger.warning(f"Remote write for {task.id} rejected, keeping local state: {str(e)}")
            return self._result(task, target, status, CompletionOutcome.LOCAL, upcoming, now)
        except RemoteWriteError as e:
            logger.warning(f"Remote write for {task.id} failed, keeping local state: {str(e)}")
            return self._result(task, target, status, CompletionOutcome.LOCAL, upcoming, now)
        except Exception as e:
            logger.error(f"Unexpected error syncing {task.id}, keeping local state: {type(e).__name__}: {str(e)}")
            return self._result(task, target, status, CompletionOutcome.LOCAL, upcoming, now)

        self.local.confirm(task.id, seq)
        logger.debug(f"Synced completion of {task.id} -> {status}")
        return self._result(task, target, status, CompletionOutcome.SYNCED, upcoming, now)

    def _result(
        self,
        task: Task,
        completed: bool,
        status: str,
        outcome: CompletionOutcome,
        upcoming: Sequence[Task],
        now: Optional[datetime],
    ) -> CompletionResult:
        if completed:
            message = celebration_message(
                task.name,
                task.type,
                is_priority=task.weight >= HEAVY_WEIGHT_THRESHOLD,
                days_until_next=self._days_until_next(task, upcoming, now),
                rng=self.rng,
            )
        else:
            message = incomplete_message(task.name)
        return CompletionResult(
            task_id=task.id,
            completed=completed,
            status=status,
            outcome=outcome,
            message=message,
        )

    def _days_until_next(self, task: Task, upcoming: Sequence[Task], now: Optional[datetime]) -> Optional[int]:
        state = self.local.pending()
        remaining = sorted(
            (t for t in upcoming if t.id != task.id and not is_completed(t, state)),
            key=lambda t: t.date,
        )
        if not remaining:
            return None
        return days_until(remaining[0].date, now or datetime.now())
