from __future__ import annotations
from typing import Literal, List
from practice_tracker.schemas.base import RecordModel
from practice_tracker.schemas.submission import Submission
from practice_tracker.schemas.user import UserRef

SortKey = Literal["recent", "popular", "question", "user"]

class QuestionStat(RecordModel):
    question_number: int
    question_title: str
    submission_count: int
    unique_user_count: int

class LeaderboardEntry(RecordModel):
    rank: int
    user: UserRef
    submission_count: int
    total_likes_received: int
    unique_question_count: int

class QuestionGroup(RecordModel):
    question_number: int
    question_title: str
    submissions: List[Submission]

class PracticeOverlap(RecordModel):
    question_number: int
    is_used: bool
    user_count: int
    submission_count: int

class OverlapReport(RecordModel):
    questions: List[PracticeOverlap]
    practiced_count: int
    stats_available: bool
