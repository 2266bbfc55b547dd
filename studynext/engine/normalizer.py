"""Task normalization for studynext.

Turns loosely-shaped course records into strict `Task` objects. This is the only
validation boundary: everything downstream assumes well-formed tasks.
"""

import logging
import re
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from studynext.engine.dates import parse_task_date
from studynext.models.course import CourseRecord, RawTask
from studynext.models.task import Task, TaskType, default_status
from studynext.models.constants import (
    DEFAULT_ASSIGNMENT_NAME,
    DEFAULT_ASSIGNMENT_WEIGHT,
    DEFAULT_COURSE_LABEL,
    DEFAULT_EXAM_NAME,
    DEFAULT_EXAM_WEIGHT,
    STATUS_COMPLETED,
    STATUS_NOT_STARTED,
    STATUS_UPCOMING,
)

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"\s*[-+]?(\d+(\.\d*)?|\.\d+)")


def make_task_id(chat_id: str, name: str, task_type: str) -> str:
    """Deterministic task id; exams get a suffix so same-named pairs don't collide."""
    if task_type == TaskType.EXAM:
        return f"{chat_id}-{name}-exam"
    return f"{chat_id}-{name}"


def coerce_weight(value: Any, default: float) -> float:
    """Accept a number or a numeric string ("15", "15%"), else the default."""
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        weight = float(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return default
        weight = float(match.group(0))
    else:
        return default
    # NaN and infinities are as good as missing
    if weight != weight or weight in (float("inf"), float("-inf")):
        return default
    return weight


def normalize(
    course_records: Iterable[CourseRecord],
    now: Optional[datetime] = None,
    include_past: bool = False,
) -> List[Task]:
    """Normalize course records into tasks sorted by date.

    Entries without a parseable date are dropped. Entries dated strictly before
    `now` are dropped unless `include_past` is set (used to build completion
    history). Ties on date keep source order: courses in input order, each
    course's assignments before its exams.

    Args:
        course_records: Course record snapshot
        now: Reference time (defaults to the current local time)
        include_past: Keep entries dated before `now`

    Returns:
        List of tasks sorted by date
    """
    if now is None:
        now = datetime.now()

    tasks: List[Task] = []
    for record in course_records:
        course_code = record.label or DEFAULT_COURSE_LABEL
        course_name = record.course_name or course_code
        for raw in record.assignments:
            task = _to_task(record, raw, TaskType.ASSIGNMENT, course_name, course_code)
            if task is not None and (include_past or task.date >= now):
                tasks.append(task)
        for raw in record.exams:
            task = _to_task(record, raw, TaskType.EXAM, course_name, course_code)
            if task is not None and (include_past or task.date >= now):
                tasks.append(task)

    return sorted(tasks, key=lambda t: t.date)


def _to_task(
    record: CourseRecord,
    raw: RawTask,
    task_type: TaskType,
    course_name: str,
    course_code: str,
) -> Optional[Task]:
    if task_type == TaskType.EXAM:
        raw_date = raw.date
        name = raw.name or DEFAULT_EXAM_NAME
        weight = coerce_weight(raw.weight, DEFAULT_EXAM_WEIGHT)
        status = raw.status or STATUS_UPCOMING
    else:
        raw_date = raw.due_date
        name = raw.name or DEFAULT_ASSIGNMENT_NAME
        weight = coerce_weight(raw.weight, DEFAULT_ASSIGNMENT_WEIGHT)
        status = raw.status or STATUS_NOT_STARTED

    when = parse_task_date(raw_date)
    if when is None:
        logger.debug(f"Skipping {task_type.value} '{name}' in {record.id}: unparseable date {raw_date!r}")
        return None

    return Task(
        id=make_task_id(record.id, name, task_type),
        type=task_type,
        name=name,
        date=when,
        course=course_name,
        course_code=course_code,
        chat_id=record.id,
        weight=weight,
        status=status,
        description=raw.description,
    )


def apply_completion(tasks: Iterable[Task], completion: Dict[str, bool]) -> List[Task]:
    """Tasks with their status overridden by the local completion cache."""
    applied: List[Task] = []
    for task in tasks:
        cached = completion.get(task.id)
        if cached is None or cached == task.is_completed:
            applied.append(task)
        else:
            status = STATUS_COMPLETED if cached else default_status(task.type)
            applied.append(task.model_copy(update={"status": status}))
    return applied
