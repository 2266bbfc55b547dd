"""Overload ("triage mode") detection for studynext.

Groups tasks by Sunday-anchored calendar week and flags the first week that
holds TRIAGE_TASK_THRESHOLD or more deadlines. Only one week is ever reported.
"""

from collections import OrderedDict
from datetime import date
from typing import Dict, List, Optional, Sequence

from studynext.engine.dates import week_label, week_start
from studynext.models.task import Task
from studynext.models.suggestions import TriageMode
from studynext.models.constants import HEAVY_WEIGHT_THRESHOLD, TRIAGE_TASK_THRESHOLD


def detect_overload(tasks: Sequence[Task]) -> Optional[TriageMode]:
    """Return triage mode for the earliest overloaded week, or None.

    Completed tasks still count toward a week's load. Detection stops at the
    first qualifying week in ascending date order. Callers own any "shown once"
    bookkeeping, keyed by the returned week label.

    Args:
        tasks: Normalized future tasks

    Returns:
        TriageMode for the first week with enough tasks, or None
    """
    for start, week_tasks in group_by_week(tasks).items():
        if len(week_tasks) >= TRIAGE_TASK_THRESHOLD:
            label = week_label(start)
            return TriageMode(
                is_active=True,
                week=label,
                tasks=week_tasks,
                suggestion=_build_suggestion(label, week_tasks),
            )
    return None


def group_by_week(tasks: Sequence[Task]) -> Dict[date, List[Task]]:
    """Group tasks by week start, weeks and tasks in ascending date order."""
    weeks: Dict[date, List[Task]] = OrderedDict()
    for task in sorted(tasks, key=lambda t: t.date):
        weeks.setdefault(week_start(task.date), []).append(task)
    return weeks


def _build_suggestion(label: str, week_tasks: List[Task]) -> str:
    heavy = [t for t in week_tasks if t.weight >= HEAVY_WEIGHT_THRESHOLD]
    light = [t for t in week_tasks if t.weight < HEAVY_WEIGHT_THRESHOLD]

    suggestion = f"I noticed {label} is looking brutal with {len(week_tasks)} deadlines. "
    if not (heavy and light):
        return suggestion + (
            "Consider starting early and breaking these into smaller chunks. "
            "I can help you create a study plan."
        )

    light_task = light[0]
    # max() keeps the earliest of equally heavy tasks
    heavy_task = max(heavy, key=lambda t: t.weight)
    light_kind = "exam prep" if light_task.is_exam else "assignment"
    heavy_kind = "midterm" if heavy_task.is_exam else "major assignment"
    return suggestion + (
        f"I've drafted a modified study plan that moves your lighter {light_task.course_code} "
        f"{light_kind} ({light_task.name}) to this weekend so you can focus entirely on the "
        f"{heavy_kind} ({heavy_task.name}) next {heavy_task.date.strftime('%A')}."
    )
