"""Constants for studynext.

This module centralizes all magic numbers and default values used by the engine.
"""

# Task status strings (stored verbatim in course records)
STATUS_COMPLETED = "Completed"
STATUS_NOT_STARTED = "Not Started"
STATUS_UPCOMING = "Upcoming"

# Weight defaults when a raw entry has no usable weight
DEFAULT_ASSIGNMENT_WEIGHT = 10.0
DEFAULT_EXAM_WEIGHT = 20.0

# Tasks at or above this weight count as "heavy"
HEAVY_WEIGHT_THRESHOLD = 15.0

# Ranking
LOOKAHEAD_DAYS = 7
LABELLED_PRIORITY_LIMIT = 3  # Only "Priority 1".."Priority 3" get a display label

# Triage mode
TRIAGE_TASK_THRESHOLD = 3

# Nudges
HEAVY_SOON_DAYS = 3
PREP_KEYWORDS = ("reading", "prep")

# Agenda card
AGENDA_LIMIT = 5

# Placeholder names for raw entries without one
DEFAULT_ASSIGNMENT_NAME = "Assignment"
DEFAULT_EXAM_NAME = "Exam"
DEFAULT_COURSE_LABEL = "Course"

# Deep links into the chat surface
CHAT_PATH = "/dashboard/chat"
