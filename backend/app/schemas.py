import re

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List, Optional, Tuple

from shared.config import settings


class TrackingData(BaseModel):
    userId: str
    event: str
    timestamp: datetime


class EventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    userId: str = Field(..., validation_alias="user_id")
    event: str
    timestamp: datetime


class EventsMeta(BaseModel):
    total: int
    limit: int
    offset: int


class EventsResponse(BaseModel):
    events: List[EventOut]
    meta: EventsMeta


class UserIdResponse(BaseModel):
    userId: str


class ErrorResponse(BaseModel):
    error: str


INTEGER_RE = re.compile(r"[+-]?[0-9]+")
INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


def _parse_int(raw: Optional[str], default: int) -> int:
    # Plain signed decimal only: no whitespace, underscores or values past 64 bits.
    if raw is None or not INTEGER_RE.fullmatch(raw):
        return default
    value = int(raw)
    if not INT64_MIN <= value <= INT64_MAX:
        return default
    return value


def resolve_page(limit: Optional[str], offset: Optional[str]) -> Tuple[int, int]:
    """
    Turn raw ``limit``/``offset`` query values into the page actually served.

    Missing or non-integer values fall back to the defaults (limit 100,
    offset 0). Negative values are clamped to 0 instead of being handed to
    the storage engine, whose treatment of them differs between backends.
    """
    resolved_limit = max(_parse_int(limit, settings.DEFAULT_LIMIT), 0)
    resolved_offset = max(_parse_int(offset, 0), 0)
    return resolved_limit, resolved_offset
