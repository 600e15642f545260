import datetime as dt
from pydantic import BaseModel, field_validator


class FileMeta(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    file_name: str
    content_type: str
    file_size: int
    uploaded_date: dt.datetime

    @field_validator("uploaded_date")
    @classmethod
    def _as_utc(cls, v: dt.datetime) -> dt.datetime:
        # sqlite hands back naive values; they are always written in UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=dt.timezone.utc)
        return v.astimezone(dt.timezone.utc)
