from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.hrhub.core.pagination import PaginationParams

ChecklistStatus = Literal["IN_PROGRESS", "COMPLETED", "CANCELLED"]
ResignType = Literal["VOLUNTARY", "INVOLUNTARY", "RETIREMENT", "CONTRACT_END"]


class ChecklistQuery(PaginationParams):
    status: ChecklistStatus | None = None
    employee_id: UUID | None = None


class OnboardingCreate(BaseModel):
    employee_id: UUID


class OnboardingForceComplete(BaseModel):
    reason: str = Field(min_length=1, max_length=500)


class OffboardingStart(BaseModel):
    resign_type: ResignType
    last_working_date: date
    reason: str | None = Field(default=None, max_length=1000)


class ChecklistTaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    is_required: bool
    sort_order: int
    status: str
    completed_at: datetime | None = None
    completed_by: UUID | None = None


class OnboardingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    employee_id: UUID
    status: str
    started_at: datetime
    completed_at: datetime | None = None
    tasks: list[ChecklistTaskOut] = []


class OffboardingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    employee_id: UUID
    resign_type: str
    last_working_date: date
    reason: str | None = None
    status: str
    started_at: datetime
    completed_at: datetime | None = None
    tasks: list[ChecklistTaskOut] = []


class ChecklistTemplateTaskIn(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    is_required: bool = True


class OnboardingTemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    tasks: list[ChecklistTemplateTaskIn] = Field(min_length=1, max_length=50)


class OffboardingChecklistCreate(OnboardingTemplateCreate):
    resign_type: ResignType


class ChecklistTemplateTaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    is_required: bool
    sort_order: int


class ChecklistTemplateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    kind: str
    target_type: str | None = None
    name: str
    is_active: bool
    tasks: list[ChecklistTemplateTaskOut] = []
