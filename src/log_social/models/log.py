"""
Log wire models: records read from the log and the message payload
carried inside them.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from log_social.models.roster import ClientState

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class LogRecord(BaseModel):
    """One log entry as returned by the log: {from, msg, time}."""

    model_config = ConfigDict(populate_by_name=True)

    sender: str = Field(alias="from")
    msg: str = ""
    time: datetime

    @field_validator("msg", mode="before")
    @classmethod
    def _msg_as_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("time")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class DirectMessage(BaseModel):
    """Payload of a user message, serialized as JSON into LogRecord.msg."""

    to: str
    msg: Any = None


class IncomingMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sender: ClientState = Field(alias="from")
    message: Any = None
