"""Shared Pydantic configuration for the JSON API."""

from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Convert an incoming timestamp to naive UTC, the storage convention."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_aware_utc(value: datetime) -> datetime:
    """Tag a stored (naive UTC) timestamp so it serializes with a ``Z``."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# Request side: what the database columns hold
NaiveUTCDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]
# Response side: explicit UTC offset on the wire
UTCDateTime = Annotated[datetime, AfterValidator(to_aware_utc)]


class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python.

    Accepts either spelling on input and reads ORM attributes directly.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int


class MessageResponse(CamelModel):
    message: str
