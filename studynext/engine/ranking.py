"""Priority ranking for studynext.

Ranks tasks due inside the lookahead window: earliest date first, then heaviest
weight, then input order. This produces a deterministic ordering for the
"Upcoming Work" list.
"""

from datetime import datetime
from typing import List, Optional, Sequence

from studynext.engine.dates import days_until
from studynext.models.task import Task, PriorityRankedTask
from studynext.models.constants import AGENDA_LIMIT, LABELLED_PRIORITY_LIMIT, LOOKAHEAD_DAYS


def rank(tasks: Sequence[Task], now: Optional[datetime] = None) -> List[PriorityRankedTask]:
    """Assign priority ranks to tasks in the lookahead window.

    A task qualifies when it is not completed and is due within LOOKAHEAD_DAYS
    whole days of `now`. Qualifying tasks get priorities 1..N; every other task
    gets 0. Output keeps the input order.

    This function is deterministic - same inputs always produce same outputs.

    Args:
        tasks: Normalized tasks
        now: Reference time (defaults to the current local time)

    Returns:
        One PriorityRankedTask per input task, in input order
    """
    if now is None:
        now = datetime.now()

    qualifying = [
        (index, task)
        for index, task in enumerate(tasks)
        if _in_lookahead_window(task, now)
    ]
    ordered = sorted(qualifying, key=lambda item: _rank_sort_key(item[1], item[0]))
    priorities = {index: position for position, (index, _) in enumerate(ordered, start=1)}

    return [
        PriorityRankedTask(**{**task.model_dump(), "priority": priorities.get(index, 0)})
        for index, task in enumerate(tasks)
    ]


def lookahead(ranked: Sequence[PriorityRankedTask]) -> List[PriorityRankedTask]:
    """Ranked tasks only, most urgent first."""
    return sorted((t for t in ranked if t.priority > 0), key=lambda t: t.priority)


def build_agenda(ranked: Sequence[PriorityRankedTask], limit: int = AGENDA_LIMIT) -> List[PriorityRankedTask]:
    """First `limit` tasks by date for the agenda card."""
    return sorted(ranked, key=lambda t: t.date)[:limit]


def priority_label(priority: int) -> Optional[str]:
    """Display label for a rank; only the top ranks are labelled."""
    if priority < 1 or priority > LABELLED_PRIORITY_LIMIT:
        return None
    return f"Priority {priority}"


def _in_lookahead_window(task: Task, now: datetime) -> bool:
    if task.is_completed:
        return False
    return 0 <= days_until(task.date, now) <= LOOKAHEAD_DAYS


def _rank_sort_key(task: Task, index: int) -> tuple:
    """Earlier date, then higher weight, then input position."""
    return (task.date, -task.weight, index)
