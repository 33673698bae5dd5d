from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

HHMM_PATTERN = r"^\d{2}:\d{2}$"


class BlockCreate(BaseModel):
    date: dt.date
    is_full_day: bool = True
    start_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    end_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    reason: str = Field(default="", max_length=255)


class BlockOut(BaseModel):
    id: str
    venue_id: str
    date: dt.date
    is_full_day: bool
    start_time: str | None
    end_time: str | None
    reason: str

    class Config:
        from_attributes = True
