from __future__ import annotations
from typing import List
from pydantic import Field, field_validator
from practice_tracker.schemas.base import Instant, RecordModel, id_field
from practice_tracker.schemas.user import UserRef

class Comment(RecordModel):
    id: str = id_field()
    submission_id: str | None = None
    user: UserRef | None = None
    text: str = ""
    parent_comment_id: str | None = None
    likes: List[str] = Field(default_factory=list)
    is_edited: bool = False
    created_at: Instant

    @field_validator("likes", mode="before")
    @classmethod
    def none_means_no_likes(cls, v):
        return [] if v is None else [str(x) for x in v]

    @field_validator("parent_comment_id", "submission_id", mode="before")
    @classmethod
    def stringify_ref(cls, v):
        return None if v in (None, "") else str(v)

class CommentNode(Comment):
    replies: List[CommentNode] = Field(default_factory=list)
    replies_count: int = 0
