from __future__ import annotations
from typing import Any, Literal
from pydantic import model_validator
from practice_tracker.schemas.base import RecordModel, id_field

Role = Literal["user", "admin"]

class User(RecordModel):
    id: str = id_field()
    name: str = ""
    email: str = ""
    role: Role = "user"

class UserRef(RecordModel):
    """A user reference as embedded in submissions/comments: either a bare id or a populated object."""

    id: str = id_field()
    name: str = ""
    email: str = ""

    @model_validator(mode="before")
    @classmethod
    def from_bare_id(cls, data: Any):
        if isinstance(data, (str, int)):
            return {"id": str(data)}
        return data
