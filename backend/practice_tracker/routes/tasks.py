from __future__ import annotations
from datetime import datetime, timezone as dt_tz
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from practice_tracker.schemas.matrix import MatrixView, QuestionCompletion, TaskProgress
from practice_tracker.schemas.submission import Submission
from practice_tracker.schemas.task import Difficulty, TaskStatusFilter, TaskSummary
from practice_tracker.services.deadlines import filter_tasks
from practice_tracker.services.export import export_filename, matrix_csv
from practice_tracker.services.matrix import (
    TaskSubmissionFilter, build_matrix, filter_task_submissions, question_completion, question_rollups, task_progress,
)
from practice_tracker.upstream import UpstreamClient, get_upstream, render_clock

router = APIRouter(prefix="/tasks", tags=["tasks"])

@router.get("", response_model=list[TaskSummary])
async def list_tasks(
    search: str | None = Query(default=None),
    status: TaskStatusFilter = Query(default="all"),
    difficulty: Difficulty | None = Query(default=None),
    include_inactive: bool = Query(default=False),
    upstream: UpstreamClient = Depends(get_upstream),
):
    tasks = await upstream.list_tasks(include_inactive=include_inactive)
    # task lists have no snapshot of their own; both clocks read the current time
    return filter_tasks(tasks, datetime.now(dt_tz.utc), search=search, status=status,
                        difficulty=difficulty, include_inactive=include_inactive)

@router.get("/{task_id}/matrix", response_model=MatrixView)
async def task_matrix(task_id: str, upstream: UpstreamClient = Depends(get_upstream)):
    snap = await upstream.task_snapshot(task_id)
    rows = build_matrix(snap.task, snap.users, snap.submissions, now=render_clock(snap))
    return MatrixView(
        task_id=snap.task.id,
        task_title=snap.task.title,
        deadline=snap.task.deadline,
        fetched_at=snap.fetched_at,
        rows=rows,
        questions=question_rollups(snap.task, rows),
    )

@router.get("/{task_id}/matrix.csv")
async def task_matrix_csv(task_id: str, upstream: UpstreamClient = Depends(get_upstream)):
    snap = await upstream.task_snapshot(task_id)
    rows = build_matrix(snap.task, snap.users, snap.submissions, now=render_clock(snap))
    filename = export_filename(snap.task, snap.fetched_at.date().isoformat())
    return Response(
        content=matrix_csv(snap.task, rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

@router.get("/{task_id}/submissions", response_model=list[Submission])
async def task_submissions(
    task_id: str,
    question: int | None = Query(default=None),
    status: TaskSubmissionFilter = Query(default="all"),
    upstream: UpstreamClient = Depends(get_upstream),
):
    task = await upstream.get_task(task_id)
    subs = await upstream.get_task_submissions(task_id)
    return filter_task_submissions(subs, task.deadline, question_number=question, status=status)

@router.get("/{task_id}/progress/{user_id}", response_model=TaskProgress)
async def user_progress(task_id: str, user_id: str, upstream: UpstreamClient = Depends(get_upstream)):
    task = await upstream.get_task(task_id)
    subs = await upstream.get_task_submissions(task_id, user_id=user_id)
    return task_progress(task, user_id, subs)

@router.get("/{task_id}/questions/{question_number}/completion", response_model=QuestionCompletion)
async def completion(task_id: str, question_number: int, upstream: UpstreamClient = Depends(get_upstream)):
    snap = await upstream.task_snapshot(task_id)
    rows = build_matrix(snap.task, snap.users, snap.submissions, now=render_clock(snap))
    view = question_completion(snap.task, question_number, rows)
    if view is None:
        raise HTTPException(status_code=404, detail="Question not part of this task")
    return view
