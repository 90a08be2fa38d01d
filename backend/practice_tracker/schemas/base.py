from __future__ import annotations
from datetime import datetime, timezone as dt_tz
from typing import Annotated
from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _as_utc(value: datetime) -> datetime:
    # Naive instants are taken as already resolved; only the tzinfo is attached.
    if value.tzinfo is None:
        return value.replace(tzinfo=dt_tz.utc)
    return value.astimezone(dt_tz.utc)


Instant = Annotated[datetime, AfterValidator(_as_utc)]


class RecordModel(BaseModel):
    """Upstream records are camelCase JSON with Mongo-style `_id` keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def id_field(**kwargs):
    return Field(validation_alias=AliasChoices("id", "_id"), serialization_alias="id", **kwargs)
