"""Deadline aggregation engine for studynext."""

from studynext.engine.normalizer import normalize, apply_completion, make_task_id, coerce_weight
from studynext.engine.ranking import rank, lookahead, build_agenda, priority_label
from studynext.engine.triage import detect_overload, group_by_week
from studynext.engine.nudges import generate_nudge, is_completed, NUDGE_RULES, NudgeRule
from studynext.engine.next_step import next_best_step
from studynext.engine.celebration import celebration_message, incomplete_message

__all__ = [
    "normalize",
    "apply_completion",
    "make_task_id",
    "coerce_weight",
    "rank",
    "lookahead",
    "build_agenda",
    "priority_label",
    "detect_overload",
    "group_by_week",
    "generate_nudge",
    "is_completed",
    "NUDGE_RULES",
    "NudgeRule",
    "next_best_step",
    "celebration_message",
    "incomplete_message",
]
