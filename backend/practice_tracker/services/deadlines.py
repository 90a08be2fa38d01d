from __future__ import annotations
import math
from datetime import datetime
from typing import Iterable
from practice_tracker.schemas.task import DeadlineBadge, Difficulty, Task, TaskStatusFilter, TaskSummary
from practice_tracker.services.status import as_instant


def deadline_status(deadline: datetime | None, now: datetime) -> DeadlineBadge:
    """
    Badge for a task deadline as seen at `now`.

    Examples:
        >>> from datetime import datetime, timezone
        >>> now = datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc)
        >>> deadline_status(datetime(2025, 1, 10, 18, 0, tzinfo=timezone.utc), now).status
        'due-today'
        >>> deadline_status(datetime(2025, 1, 14, 9, 0, tzinfo=timezone.utc), now).days_left
        4
    """
    if deadline is None:
        return DeadlineBadge(status="no-deadline")
    due, now = as_instant(deadline), as_instant(now)
    if due < now:
        return DeadlineBadge(status="overdue", days_left=0)
    days_left = math.ceil((due - now).total_seconds() / 86400)
    if due.date() == now.date():
        return DeadlineBadge(status="due-today", days_left=0)
    if days_left <= 1:
        return DeadlineBadge(status="due-tomorrow", days_left=1)
    if days_left <= 7:
        return DeadlineBadge(status="due-soon", days_left=days_left)
    return DeadlineBadge(status="upcoming", days_left=days_left)


def _matches_search(task: Task, term: str) -> bool:
    needle = term.casefold()
    if needle in task.title.casefold() or needle in (task.description or "").casefold():
        return True
    return any(term in str(q.question_number) or needle in q.title.casefold() for q in task.questions)


def _matches_status(task: Task, status: TaskStatusFilter, now: datetime) -> bool:
    if status == "all":
        return True
    if task.deadline is None:
        return status == "active"
    due, now = as_instant(task.deadline), as_instant(now)
    due_today = due.date() == now.date()
    if status == "active":
        return now < due or due_today
    if status == "upcoming":
        return due > now and not due_today
    return due < now and not due_today


def filter_tasks(
    tasks: Iterable[Task],
    now: datetime,
    search: str | None = None,
    status: TaskStatusFilter = "all",
    difficulty: Difficulty | None = None,
    include_inactive: bool = False,
) -> list[TaskSummary]:
    out: list[TaskSummary] = []
    term = (search or "").strip()
    for t in tasks:
        if not t.is_active and not include_inactive:
            continue
        if term and not _matches_search(t, term):
            continue
        if not _matches_status(t, status, now):
            continue
        if difficulty and not any(q.difficulty == difficulty for q in t.questions):
            continue
        out.append(TaskSummary(task=t, deadline_badge=deadline_status(t.deadline, now)))
    return out
