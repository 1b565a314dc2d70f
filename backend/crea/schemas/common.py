from pydantic import BaseModel, model_validator
from pydantic.alias_generators import to_camel
from typing import Any, Optional
from datetime import datetime, timezone


def to_naive_utc(value: datetime) -> datetime:
    """Timestamps are stored as naive UTC"""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class CreaSchema(BaseModel):
    """
    Base schema for the portal API.

    Fields are snake_case in Python and camelCase on the wire; input accepts
    either spelling.
    """

    @model_validator(mode="after")
    def normalize_datetimes(self):
        for name in type(self).model_fields:
            value = getattr(self, name, None)
            if isinstance(value, datetime) and value.tzinfo is not None:
                object.__setattr__(self, name, to_naive_utc(value))
        return self

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class SuccessResponse(CreaSchema):
    success: bool = True
    message: Optional[str] = None


class DataResponse(CreaSchema):
    """Envelope used by the donation endpoints"""
    success: bool = True
    message: Optional[str] = None
    data: Any = None
