"""Next-best-step selection for studynext."""

from datetime import datetime
from typing import Optional, Sequence

from studynext.engine.dates import chat_link, days_until
from studynext.engine.nudges import CompletionState, is_completed
from studynext.models.course import CourseRecord
from studynext.models.task import Task
from studynext.models.suggestions import NextStep, NextStepKind
from studynext.models.constants import DEFAULT_COURSE_LABEL


def next_best_step(
    tasks: Sequence[Task],
    completion: Optional[CompletionState] = None,
    now: Optional[datetime] = None,
    courses: Sequence[CourseRecord] = (),
) -> Optional[NextStep]:
    """Closest open deadline as a single step, or a review step when nothing is due."""
    if not courses:
        return None
    if now is None:
        now = datetime.now()
    completion = completion or {}

    upcoming = sorted(
        (t for t in tasks if t.date >= now and not is_completed(t, completion)),
        key=lambda t: t.date,
    )
    if not upcoming:
        course = courses[0]
        label = course.label or DEFAULT_COURSE_LABEL
        return NextStep(
            kind=NextStepKind.REVIEW,
            title="Review a key concept",
            course_label=label,
            detail="No urgent deadlines detected. Spend 10 minutes reinforcing concepts so they stay fresh.",
            cta="Start a quick review",
            href=chat_link(course.id, f"Give me a quick review session for {label}."),
        )

    task = upcoming[0]
    days = days_until(task.date, now)
    if days <= 0:
        urgency = "Due today"
    elif days == 1:
        urgency = "Due tomorrow"
    else:
        urgency = f"Due in {days} days"

    if task.is_exam:
        return NextStep(
            kind=NextStepKind.EXAM,
            title="Next best step: get exam-ready",
            course_label=task.course_code,
            detail=(
                f'You have "{task.name}" coming up in {task.course_code}. A short focused review '
                "now will make exam week less chaotic."
            ),
            cta="Open chat to review for this exam",
            href=chat_link(task.chat_id, f'Help me review for "{task.name}" in {task.course_code}.'),
            urgency_label=urgency,
        )
    return NextStep(
        kind=NextStepKind.ASSIGNMENT,
        title="Next best step: move one assignment forward",
        course_label=task.course_code,
        detail=(
            f'Work on "{task.name}" for {task.course_code}. Even 20-30 minutes now will make it '
            "much easier before the deadline."
        ),
        cta="Open chat to work on this assignment",
        href=chat_link(task.chat_id, f'Help me make progress on "{task.name}" for {task.course_code}.'),
        urgency_label=urgency,
    )
