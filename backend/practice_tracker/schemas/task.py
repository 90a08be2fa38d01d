from __future__ import annotations
from typing import Literal, List
from pydantic import Field, field_validator
from practice_tracker.schemas.base import Instant, RecordModel, id_field

Difficulty = Literal["Easy", "Medium", "Hard"]
TaskStatus = Literal["draft", "active", "completed", "archived"]

class Question(RecordModel):
    question_number: int
    title: str = ""
    difficulty: Difficulty = "Easy"
    url: str = ""

class Task(RecordModel):
    id: str = id_field()
    title: str
    description: str | None = None
    deadline: Instant | None = None
    questions: List[Question] = Field(default_factory=list)
    assigned_users: List[str] = Field(default_factory=list, description="empty = all non-admin users")
    status: TaskStatus = "active"
    is_active: bool = True

    @field_validator("assigned_users", mode="before")
    @classmethod
    def normalize_assigned(cls, v):
        # upstream may populate assigned users as objects
        if v is None:
            return []
        out = []
        for item in v:
            if isinstance(item, dict):
                item = item.get("_id") or item.get("id")
            if item is not None:
                out.append(str(item))
        return out

DeadlineState = Literal["no-deadline", "overdue", "due-today", "due-tomorrow", "due-soon", "upcoming"]
TaskStatusFilter = Literal["all", "active", "upcoming", "expired"]

class DeadlineBadge(RecordModel):
    status: DeadlineState
    days_left: int | None = None

class TaskSummary(RecordModel):
    task: Task
    deadline_badge: DeadlineBadge
