"""Proactive nudge generation for studynext.

The nudge is chosen by an ordered list of rules. Each rule is a predicate plus a
constructor; the first rule whose predicate holds decides the outcome (its
constructor may return None to mean "no nudge"). Later rules are fallbacks.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence

from studynext.engine.dates import chat_link, days_until, start_of_tomorrow
from studynext.models.task import Task
from studynext.models.suggestions import NudgeSuggestion, NudgeType, NudgePriority
from studynext.models.constants import (
    HEAVY_SOON_DAYS,
    HEAVY_WEIGHT_THRESHOLD,
    LOOKAHEAD_DAYS,
    PREP_KEYWORDS,
    STATUS_COMPLETED,
)

CompletionState = Dict[str, bool]


def is_completed(task: Task, completion: CompletionState) -> bool:
    """Completion as known locally; the cache overrides the stored status."""
    return completion.get(task.id, task.status == STATUS_COMPLETED)


@dataclass
class NudgeContext:
    """Everything the rules look at, derived once per generation."""

    tasks: List[Task]
    history: List[Task]
    completion: CompletionState
    now: datetime

    def __post_init__(self):
        self.tasks = sorted(self.tasks, key=lambda t: t.date)
        self.active = [t for t in self.tasks if not is_completed(t, self.completion)]
        heavy = [t for t in self.active if t.weight >= HEAVY_WEIGHT_THRESHOLD]
        self.next_heavy_task: Optional[Task] = heavy[0] if heavy else None
        self.heavy_days: Optional[int] = (
            days_until(self.next_heavy_task.date, self.now) if self.next_heavy_task else None
        )

    def due_tomorrow(self) -> Optional[Task]:
        # Literal window: tomorrow 00:00 through 24 hours later, both ends inclusive
        window_start = start_of_tomorrow(self.now)
        window_end = window_start + timedelta(hours=24)
        for task in self.active:
            if window_start <= task.date <= window_end:
                return task
        return None

    def heavy_within_week(self) -> bool:
        return self.heavy_days is not None and 1 <= self.heavy_days <= LOOKAHEAD_DAYS

    def completed_prep_work(self) -> Optional[Task]:
        """Completed reading/prep work in the same course as the next heavy task."""
        if self.next_heavy_task is None:
            return None
        for task in self.history:
            if task.chat_id != self.next_heavy_task.chat_id or task.id == self.next_heavy_task.id:
                continue
            if not is_completed(task, self.completion):
                continue
            lowered = task.name.lower()
            if any(keyword in lowered for keyword in PREP_KEYWORDS):
                return task
        return None


class NudgeRule(NamedTuple):
    name: str
    applies: Callable[[NudgeContext], bool]
    build: Callable[[NudgeContext], Optional[NudgeSuggestion]]


def _all_complete(ctx: NudgeContext) -> Optional[NudgeSuggestion]:
    course_task = (ctx.history or ctx.tasks)[0]
    course_code = course_task.course_code
    return NudgeSuggestion(
        type=NudgeType.OPPORTUNITY,
        message=(
            "Great job! You've completed all your upcoming tasks. This is a perfect time to "
            "review key concepts or explore new topics. Want to strengthen your understanding?"
        ),
        action_text=f"Review {course_code}",
        action_href=chat_link(course_task.chat_id, f"Help me review key concepts for {course_code}."),
        priority=NudgePriority.LOW,
    )


def _due_tomorrow_warning(ctx: NudgeContext) -> Optional[NudgeSuggestion]:
    task = ctx.due_tomorrow()
    follow_up = "Time to review!" if task.is_exam else "Want to make sure you're on track?"
    return NudgeSuggestion(
        type=NudgeType.WARNING,
        message=f"{task.name} for {task.course_code} is due tomorrow. {follow_up}",
        action_text=f"Work on {task.name}",
        action_href=chat_link(task.chat_id, f"Help me with {task.name} for {task.course_code}."),
        priority=NudgePriority.HIGH,
    )


def _prepare_action(task: Task) -> dict:
    return {
        "action_text": f"Start preparing for {task.name}",
        "action_href": chat_link(task.chat_id, f"Help me prepare for {task.name} in {task.course_code}."),
    }


def _when_phrase(days: int, two_days: bool = False) -> str:
    if days == 1:
        return "tomorrow"
    if two_days and days == 2:
        return "the day after tomorrow"
    return f"in {days} days"


def _heavy_with_prep(ctx: NudgeContext) -> Optional[NudgeSuggestion]:
    task = ctx.next_heavy_task
    prep = ctx.completed_prep_work()
    if task.is_exam:
        follow_on = "pre-exam review"
    elif "lab" in task.name.lower():
        follow_on = "pre-lab quiz"
    else:
        follow_on = "preparation work"
    return NudgeSuggestion(
        type=NudgeType.OPPORTUNITY,
        message=(
            f"You've got a heavy {task.name} {_when_phrase(ctx.heavy_days, two_days=True)} for "
            f"{task.course_code}, but you finished the {prep.name} early. Since you have a free "
            f"hour now, want to knock out the {follow_on} while the info is fresh?"
        ),
        priority=NudgePriority.HIGH,
        **_prepare_action(task),
    )


def _heavy_soon(ctx: NudgeContext) -> Optional[NudgeSuggestion]:
    task = ctx.next_heavy_task
    return NudgeSuggestion(
        type=NudgeType.OPPORTUNITY,
        message=(
            f"You've got a heavy {task.name} {_when_phrase(ctx.heavy_days)} for {task.course_code}. "
            "Since your schedule is clear now, want to get a head start?"
        ),
        priority=NudgePriority.MEDIUM,
        **_prepare_action(task),
    )


def _heavy_this_week(ctx: NudgeContext) -> Optional[NudgeSuggestion]:
    task = ctx.next_heavy_task
    return NudgeSuggestion(
        type=NudgeType.OPPORTUNITY,
        message=(
            f"You've got {task.name} for {task.course_code} coming up in {ctx.heavy_days} days. "
            "Want to get ahead while you have time?"
        ),
        priority=NudgePriority.LOW,
        **_prepare_action(task),
    )


def _next_task_fallback(ctx: NudgeContext) -> Optional[NudgeSuggestion]:
    task = ctx.active[0]
    days = days_until(task.date, ctx.now)
    if days <= LOOKAHEAD_DAYS:
        return NudgeSuggestion(
            type=NudgeType.OPPORTUNITY,
            message=(
                f"You've got {task.name} for {task.course_code} coming up {_when_phrase(days)}. "
                "Want to get ahead while you have time?"
            ),
            priority=NudgePriority.LOW,
            **_prepare_action(task),
        )
    return NudgeSuggestion(
        type=NudgeType.OPPORTUNITY,
        message=(
            f"You've got {task.name} for {task.course_code} coming up in {days} days. Your schedule "
            "looks good - this is a great time to strengthen your understanding of the material."
        ),
        action_text=f"Review {task.course_code}",
        action_href=chat_link(task.chat_id, f"Help me review concepts for {task.course_code}."),
        priority=NudgePriority.LOW,
    )


NUDGE_RULES: List[NudgeRule] = [
    NudgeRule(
        "all_complete",
        lambda ctx: bool(ctx.tasks) and not ctx.active,
        _all_complete,
    ),
    NudgeRule(
        "no_tasks",
        lambda ctx: not ctx.tasks,
        lambda ctx: None,
    ),
    NudgeRule(
        "due_tomorrow",
        lambda ctx: ctx.due_tomorrow() is not None,
        _due_tomorrow_warning,
    ),
    NudgeRule(
        "heavy_with_prep",
        lambda ctx: (
            ctx.heavy_within_week()
            and ctx.heavy_days <= HEAVY_SOON_DAYS
            and ctx.completed_prep_work() is not None
        ),
        _heavy_with_prep,
    ),
    NudgeRule(
        "heavy_soon",
        lambda ctx: ctx.heavy_within_week() and ctx.heavy_days <= HEAVY_SOON_DAYS,
        _heavy_soon,
    ),
    NudgeRule(
        "heavy_this_week",
        lambda ctx: ctx.heavy_within_week(),
        _heavy_this_week,
    ),
    NudgeRule(
        "next_task",
        # Nothing to get ahead on when the earliest open task is already due
        lambda ctx: bool(ctx.active) and days_until(ctx.active[0].date, ctx.now) > 0,
        _next_task_fallback,
    ),
]


def generate_nudge(
    tasks: Sequence[Task],
    completion: Optional[CompletionState] = None,
    now: Optional[datetime] = None,
    history: Optional[Sequence[Task]] = None,
    rules: Sequence[NudgeRule] = NUDGE_RULES,
) -> Optional[NudgeSuggestion]:
    """Pick the single live nudge.

    Pure: the same (tasks, completion, now, history) always yields the same nudge.

    Args:
        tasks: Normalized future tasks
        completion: Local completion cache (task id -> completed)
        now: Reference time (defaults to the current local time)
        history: Tasks including past ones, searched for completed prep work
            (defaults to `tasks`)
        rules: Ordered rules, first match wins

    Returns:
        NudgeSuggestion, or None when nothing applies
    """
    ctx = _context(tasks, completion, now, history)
    for rule in rules:
        if rule.applies(ctx):
            return rule.build(ctx)
    return None


def matching_rule(
    tasks: Sequence[Task],
    completion: Optional[CompletionState] = None,
    now: Optional[datetime] = None,
    history: Optional[Sequence[Task]] = None,
) -> Optional[str]:
    """Name of the rule that would decide the nudge (for diagnostics and tests)."""
    ctx = _context(tasks, completion, now, history)
    for rule in NUDGE_RULES:
        if rule.applies(ctx):
            return rule.name
    return None


def _context(
    tasks: Sequence[Task],
    completion: Optional[CompletionState],
    now: Optional[datetime],
    history: Optional[Sequence[Task]],
) -> NudgeContext:
    return NudgeContext(
        tasks=list(tasks),
        history=list(history) if history is not None else list(tasks),
        completion=dict(completion or {}),
        now=now or datetime.now(),
    )
