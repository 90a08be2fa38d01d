from __future__ import annotations
from collections import defaultdict
from datetime import datetime, timezone as dt_tz
from typing import Iterable, Literal
import structlog
from practice_tracker.schemas.matrix import (
    CompletionEntry, QuestionCell, QuestionCompletion, QuestionRollup, TaskProgress, UserRow,
)
from practice_tracker.schemas.submission import Submission
from practice_tracker.schemas.task import Question, Task
from practice_tracker.schemas.user import User
from practice_tracker.services.status import absent_status, classify, is_late, latest

log = structlog.get_logger()

TaskSubmissionFilter = Literal["all", "submitted", "late"]


def task_columns(task: Task) -> list[Question]:
    """Questions in task order; a repeated question number keeps its first position and last definition."""
    by_number: dict[int, Question] = {}
    for q in task.questions:
        if q.question_number in by_number:
            log.warning("task_duplicate_question", task_id=task.id, question_number=q.question_number)
        by_number[q.question_number] = q
    return list(by_number.values())


def resolve_cohort(task: Task, users: Iterable[User]) -> list[User]:
    """Assigned users when the task names any, otherwise every non-admin user. Order follows `users`."""
    users = list(users)
    if not task.assigned_users:
        return [u for u in users if u.role != "admin"]
    assigned = set(task.assigned_users)
    cohort = [u for u in users if u.id in assigned]
    unknown = assigned - {u.id for u in cohort}
    if unknown:
        log.info("cohort_unknown_users", task_id=task.id, user_ids=sorted(unknown))
    return cohort


def _index(submissions: Iterable[Submission]) -> dict[tuple[str, int], list[Submission]]:
    by_pair: dict[tuple[str, int], list[Submission]] = defaultdict(list)
    for s in submissions:
        if s.user_id is None:
            continue
        by_pair[(s.user_id, s.question_number)].append(s)
    return by_pair


def _cell(question: Question, attempts: list[Submission], deadline: datetime | None, now: datetime) -> QuestionCell:
    sub = latest(attempts)
    if sub is None:
        return QuestionCell(
            question_number=question.question_number,
            status="missing",
            display_status=absent_status(deadline, now),
        )
    return QuestionCell(
        question_number=question.question_number,
        status="late" if is_late(sub, deadline) else "submitted",
        display_status=classify(sub, deadline),
        attempts=len(attempts),
        submission=sub,
    )


def build_matrix(
    task: Task,
    users: Iterable[User],
    submissions: Iterable[Submission],
    now: datetime | None = None,
) -> list[UserRow]:
    """
    Build the user x question completion matrix of a task.

    One row per cohort user (see `resolve_cohort`), one cell per task question in task
    order. A cell is `missing` when the user never submitted that question, otherwise the
    user's latest attempt decides `submitted` vs `late`. `now` only affects the display
    badge of missing cells (missing once the deadline passed, no badge before).
    """
    now = now or datetime.now(dt_tz.utc)
    columns = task_columns(task)
    by_pair = _index(submissions)
    rows: list[UserRow] = []
    for user in resolve_cohort(task, users):
        cells = [_cell(q, by_pair.get((user.id, q.question_number), []), task.deadline, now) for q in columns]
        total_submitted = sum(1 for c in cells if c.status != "missing")
        rows.append(UserRow(
            user=user,
            question_status=cells,
            total_submitted=total_submitted,
            total_late=sum(1 for c in cells if c.status == "late"),
            completion=(total_submitted / len(columns)) if columns else 0.0,
        ))
    return rows


def _entry(user: User, cell: QuestionCell) -> CompletionEntry:
    sub = cell.submission
    return CompletionEntry(
        user_id=user.id,
        name=user.name,
        email=user.email,
        status=cell.status,
        language=sub.language if sub else None,
        submitted_at=sub.created_at if sub else None,
    )


def question_rollups(task: Task, rows: list[UserRow]) -> list[QuestionRollup]:
    """Transpose of the matrix: per question, who submitted (with timestamp/status/language) and who did not."""
    out: list[QuestionRollup] = []
    for idx, q in enumerate(task_columns(task)):
        submitted: list[CompletionEntry] = []
        missing: list[CompletionEntry] = []
        for row in rows:
            cell = row.question_status[idx]
            (missing if cell.status == "missing" else submitted).append(_entry(row.user, cell))
        out.append(QuestionRollup(
            question_number=q.question_number,
            title=q.title,
            difficulty=q.difficulty,
            submitted_count=len(submitted),
            late_count=sum(1 for e in submitted if e.status == "late"),
            missing_count=len(missing),
            submitted_users=submitted,
            not_submitted_users=missing,
        ))
    return out


def question_completion(task: Task, question_number: int, rows: list[UserRow]) -> QuestionCompletion | None:
    """Completion view of one question, or None if the task has no such question."""
    for rollup in question_rollups(task, rows):
        if rollup.question_number != question_number:
            continue
        return QuestionCompletion(
            question_number=rollup.question_number,
            title=rollup.title,
            total_assigned=len(rows),
            completed_count=rollup.submitted_count,
            not_completed_count=rollup.missing_count,
            completed_users=rollup.submitted_users,
            not_completed_users=rollup.not_submitted_users,
        )
    return None


def task_progress(task: Task, user_id: str, submissions: Iterable[Submission]) -> TaskProgress:
    columns = task_columns(task)
    done = {s.question_number for s in submissions if s.user_id == user_id}
    remaining = [q for q in columns if q.question_number not in done]
    completed = len(columns) - len(remaining)
    return TaskProgress(
        task_id=task.id,
        user_id=user_id,
        total_questions=len(columns),
        completed_questions=completed,
        incomplete_questions=len(remaining),
        progress=round(completed * 100 / len(columns)) if columns else 0,
        incomplete_question_details=remaining,
    )


def filter_task_submissions(
    submissions: Iterable[Submission],
    deadline: datetime | None,
    question_number: int | None = None,
    status: TaskSubmissionFilter = "all",
) -> list[Submission]:
    out = []
    for s in submissions:
        if question_number is not None and s.question_number != question_number:
            continue
        if status == "late" and not is_late(s, deadline):
            continue
        if status == "submitted" and is_late(s, deadline):
            continue
        out.append(s)
    return out
