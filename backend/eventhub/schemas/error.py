"""Error response body shared by every exception handler."""
from __future__ import annotations
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field

from eventhub.clock import utcnow


class FieldError(BaseModel):
    field: str
    rejected_value: Any = None
    message: str


class ApiError(BaseModel):
    timestamp: datetime = Field(default_factory=utcnow)
    status: int
    error: str
    message: str
    path: str
    validation_errors: Optional[list[FieldError]] = None
