from __future__ import annotations
import csv, io
from practice_tracker.schemas.matrix import UserRow
from practice_tracker.schemas.task import Task
from practice_tracker.services.matrix import task_columns


def matrix_csv(task: Task, rows: list[UserRow]) -> str:
    """One line per cohort user: identity, one status column per question, then totals."""
    columns = task_columns(task)
    buf = io.StringIO()
    w = csv.writer(buf)
    w.writerow(
        ["name", "email"]
        + [f"Q{q.question_number}" for q in columns]
        + ["total_submitted", "total_late", "completion_pct"]
    )
    for row in rows:
        w.writerow(
            [row.user.name, row.user.email]
            + [c.status for c in row.question_status]
            + [row.total_submitted, row.total_late, round(row.completion * 100)]
        )
    return buf.getvalue()


def export_filename(task: Task, stamp: str) -> str:
    return f"task_{task.id}_submissions_{stamp}.csv"
