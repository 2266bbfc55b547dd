"""Completion feedback messages for studynext."""

import random
from typing import Optional

from studynext.models.task import TaskType

CELEBRATIONS = [
    "Boom!",
    "Nice work!",
    "Awesome!",
    "You crushed it!",
    "Excellent!",
    "Way to go!",
]


def celebration_message(
    task_name: str,
    task_type: str,
    is_priority: bool = False,
    days_until_next: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """Toast text shown after a task is marked complete."""
    opener = (rng or random).choice(CELEBRATIONS)

    if is_priority:
        return (
            f"{opener} That's the hardest thing on your plate this week done. You're officially "
            "ahead of schedule. Take 15 minutes off, you earned it."
        )
    if task_type == TaskType.EXAM:
        return f"{opener} {task_name} is done! You're making great progress. Keep that momentum going!"
    if days_until_next is not None and days_until_next > 3:
        return (
            f"{opener} {task_name} completed! You've got {days_until_next} days until your next "
            "deadline. Great time management!"
        )
    return f"{opener} {task_name} is complete! Every task you finish builds your confidence. Keep it up!"


def incomplete_message(task_name: str) -> str:
    return f"{task_name} has been marked as incomplete."
