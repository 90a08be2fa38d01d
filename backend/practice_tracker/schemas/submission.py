from __future__ import annotations
from typing import Literal, List
from pydantic import Field, field_validator
from practice_tracker.schemas.base import Instant, RecordModel, id_field
from practice_tracker.schemas.comment import Comment
from practice_tracker.schemas.user import UserRef

RawStatus = Literal["pending", "accepted", "rejected"]
DisplayStatus = Literal["accepted", "pending", "rejected", "late", "missing"]

class Submission(RecordModel):
    id: str = id_field()
    user: UserRef | None = None
    task_id: str | None = None
    question_number: int
    question_title: str = ""
    language: str = ""
    code: str = ""
    explanation: str | None = None
    is_personal_practice: bool = False
    status: RawStatus = "pending"  # author/self-reported, never computed here
    created_at: Instant
    likes: List[str] = Field(default_factory=list)
    comments: List[Comment] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def lower_status(cls, v):
        # older records carry "Accepted"/"Rejected"/"submitted"
        if v is None:
            return "pending"
        v = str(v).lower()
        return v if v in ("accepted", "rejected") else "pending"

    @field_validator("likes", mode="before")
    @classmethod
    def none_means_no_likes(cls, v):
        if v is None:
            return []
        return [str(x.get("_id") or x.get("id")) if isinstance(x, dict) else str(x) for x in v]

    @field_validator("comments", mode="before")
    @classmethod
    def none_means_no_comments(cls, v):
        return [] if v is None else v

    @field_validator("task_id", mode="before")
    @classmethod
    def task_ref(cls, v):
        if isinstance(v, dict):
            v = v.get("_id") or v.get("id")
        return None if v in (None, "") else str(v)

    @property
    def user_id(self) -> str | None:
        return self.user.id if self.user else None
