from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.hrhub.core.pagination import PaginationParams
from app.hrhub.schemas.types import UtcDatetime


class PerformanceCycleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    year: int = Field(ge=2000, le=2100)
    half: Literal["H1", "H2", "ANNUAL"]
    goal_start: UtcDatetime
    goal_end: UtcDatetime
    eval_start: UtcDatetime
    eval_end: UtcDatetime

    @model_validator(mode="after")
    def ensure_windows(self):
        if self.goal_start >= self.goal_end:
            raise ValueError("goal_start must be before goal_end")
        if self.eval_start >= self.eval_end:
            raise ValueError("eval_start must be before eval_end")
        return self


class PerformanceCycleQuery(PaginationParams):
    year: int | None = Field(default=None, ge=2000, le=2100)
    status: Literal["DRAFT", "ACTIVE", "EVAL_OPEN", "CALIBRATION", "CLOSED"] | None = None


class PerformanceCycleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    name: str
    year: int
    half: str
    goal_start: datetime
    goal_end: datetime
    eval_start: datetime
    eval_end: datetime
    status: str
    created_at: datetime
