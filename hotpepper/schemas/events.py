from typing import Literal

from pydantic import BaseModel


class ProgressEvent(BaseModel):
    type: Literal["progress"] = "progress"
    phase: Literal["collecting", "processing"]
    current: int
    total: int
    message: str | None = None


class CompleteEvent(BaseModel):
    type: Literal["complete"] = "complete"
    total: int
    csv: str


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    message: str


ScrapeEvent = ProgressEvent | CompleteEvent | ErrorEvent
