from __future__ import annotations
from datetime import datetime
from typing import Literal, List
from pydantic import Field
from practice_tracker.schemas.base import RecordModel
from practice_tracker.schemas.submission import DisplayStatus, Submission
from practice_tracker.schemas.task import Difficulty, Question
from practice_tracker.schemas.user import User

CellStatus = Literal["submitted", "late", "missing"]

class QuestionCell(RecordModel):
    question_number: int
    status: CellStatus
    display_status: DisplayStatus | None = None  # None = not yet due, no badge
    attempts: int = 0
    submission: Submission | None = None  # latest attempt

class UserRow(RecordModel):
    user: User
    question_status: List[QuestionCell]
    total_submitted: int
    total_late: int
    completion: float

class CompletionEntry(RecordModel):
    user_id: str
    name: str
    email: str
    status: CellStatus
    language: str | None = None
    submitted_at: datetime | None = None

class QuestionRollup(RecordModel):
    question_number: int
    title: str
    difficulty: Difficulty
    submitted_count: int  # includes late
    late_count: int
    missing_count: int
    submitted_users: List[CompletionEntry] = Field(default_factory=list)
    not_submitted_users: List[CompletionEntry] = Field(default_factory=list)

class QuestionCompletion(RecordModel):
    question_number: int
    title: str
    total_assigned: int
    completed_count: int
    not_completed_count: int
    completed_users: List[CompletionEntry]
    not_completed_users: List[CompletionEntry]

class TaskProgress(RecordModel):
    task_id: str
    user_id: str
    total_questions: int
    completed_questions: int
    incomplete_questions: int
    progress: int  # whole percent
    incomplete_question_details: List[Question]

class MatrixView(RecordModel):
    task_id: str
    task_title: str
    deadline: datetime | None
    fetched_at: datetime
    rows: List[UserRow]
    questions: List[QuestionRollup]
