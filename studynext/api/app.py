"""FastAPI web application for studynext."""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Set
from fastapi import FastAPI, HTTPException, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from studynext import __version__
from studynext.auth.dependencies import get_current_identity
from studynext.completion import CompletionManager, LocalBackend, RemoteBackend
from studynext.database.database import get_db
from studynext.database.repository import CourseRecordRepository
from studynext.engine import (
    apply_completion,
    build_agenda,
    detect_overload,
    generate_nudge,
    lookahead,
    next_best_step,
    normalize,
    rank,
)
from studynext.models.completion import CompletionOutcome, CompletionResult
from studynext.models.course import CourseRecord, RawTask
from studynext.models.identity import Identity
from studynext.models.suggestions import NextStep, NudgeSuggestion, TriageMode
from studynext.models.task import PriorityRankedTask

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="studynext API",
    description="Tells students which deadline to work on next",
    version=__version__,
)

# In-memory, per-identity state (single process)
local_caches: Dict[str, LocalBackend] = {}
guest_courses: Dict[str, Dict[str, CourseRecord]] = {}
triage_shown: Dict[str, Set[str]] = {}


# Request/response models
class CourseRecordRequest(BaseModel):
    """Course record handed over by document ingestion."""
    id: str = Field(..., description="Course record (chat) id")
    title: Optional[str] = None
    course_code: Optional[str] = None
    course_name: Optional[str] = None
    assignments: List[RawTask] = Field(default_factory=list)
    exams: List[RawTask] = Field(default_factory=list)


class CoursesResponse(BaseModel):
    """Response for course listing."""
    courses: List[CourseRecord]
    count: int


class DashboardResponse(BaseModel):
    """Everything the dashboard's "what next" surface renders."""
    priorities: List[PriorityRankedTask] = Field(default_factory=list, description="Lookahead window, most urgent first")
    agenda: List[PriorityRankedTask] = Field(default_factory=list, description="Next few tasks by date")
    triage: Optional[TriageMode] = None
    show_triage_dialog: bool = Field(False, description="True the first time a triage week is reported")
    nudge: Optional[NudgeSuggestion] = None
    next_step: Optional[NextStep] = None


def _load_courses(identity: Identity, db: Session) -> List[CourseRecord]:
    if identity.is_ephemeral:
        return list(guest_courses.get(identity.cache_key, {}).values())
    return CourseRecordRepository(db).get_all(identity.owner_id)


def _completion_manager(identity: Identity, db: Session) -> CompletionManager:
    local = local_caches.setdefault(identity.cache_key, LocalBackend())
    remote = None if identity.is_ephemeral else RemoteBackend(CourseRecordRepository(db))
    return CompletionManager(identity, local=local, remote=remote)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.post("/courses", response_model=CourseRecord, status_code=status.HTTP_201_CREATED)
def save_course(
    request: CourseRecordRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Create or replace a course record."""
    record = CourseRecord(
        id=request.id,
        title=request.title,
        course_code=request.course_code,
        course_name=request.course_name,
        assignments=request.assignments,
        exams=request.exams,
    )
    if identity.is_ephemeral:
        guest_courses.setdefault(identity.cache_key, {})[record.id] = record
        return record

    repository = CourseRecordRepository(db)
    existing = repository.get(record.id)
    if existing and existing.user_id and existing.user_id != identity.owner_id:
        raise HTTPException(status_code=403, detail="Course record belongs to another user")
    try:
        return repository.upsert(record.model_copy(update={"user_id": identity.owner_id}))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to save course record: {str(e)}")


@app.get("/courses", response_model=CoursesResponse)
def list_courses(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """List the caller's course records."""
    courses = _load_courses(identity, db)
    return CoursesResponse(courses=courses, count=len(courses))


@app.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Recompute priorities, triage, nudge and next step from the current snapshot."""
    now = datetime.now()
    courses = _load_courses(identity, db)
    completion = _completion_manager(identity, db).completion_state()

    tasks = normalize(courses, now)
    history = normalize(courses, now, include_past=True)
    effective = apply_completion(tasks, completion)

    ranked = rank(effective, now)
    triage = detect_overload(effective)

    show_triage_dialog = False
    if triage is not None:
        shown = triage_shown.setdefault(identity.cache_key, set())
        if triage.week not in shown:
            shown.add(triage.week)
            show_triage_dialog = True

    return DashboardResponse(
        priorities=lookahead(ranked),
        agenda=build_agenda(ranked),
        triage=triage,
        show_triage_dialog=show_triage_dialog,
        nudge=generate_nudge(tasks, completion, now, history=history),
        next_step=next_best_step(tasks, completion, now, courses),
    )


@app.post("/tasks/{task_id}/completion", response_model=CompletionResult)
async def toggle_task_completion(
    task_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Toggle a task between completed and not completed."""
    now = datetime.now()
    courses = _load_courses(identity, db)
    history = normalize(courses, now, include_past=True)
    task = next((t for t in history if t.id == task_id), None)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")

    manager = _completion_manager(identity, db)
    result = await manager.toggle_completion(task, upcoming=normalize(courses, now), now=now)
    logger.debug(f"Toggled {task_id} for {identity.cache_key}: {result.outcome}")

    if result.outcome == CompletionOutcome.PERMISSION_DENIED:
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content=result.model_dump())
    return result


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
