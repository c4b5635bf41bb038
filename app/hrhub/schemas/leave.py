from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.hrhub.core.pagination import PaginationParams

LeaveStatus = Literal["PENDING", "APPROVED", "REJECTED", "CANCELLED"]


class LeaveRequestCreate(BaseModel):
    policy_id: UUID
    start_date: date
    end_date: date
    days: float = Field(ge=0.25, le=365)
    half_day_type: Literal["AM", "PM"] | None = None
    reason: str = Field(min_length=1, max_length=1000)

    @model_validator(mode="after")
    def ensure_date_order(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class LeaveRejectRequest(BaseModel):
    rejection_reason: str = Field(min_length=1, max_length=500)


class LeaveRequestQuery(PaginationParams):
    status: LeaveStatus | None = None
    date_from: date | None = None
    date_to: date | None = None


class LeaveAdminQuery(LeaveRequestQuery):
    employee_id: UUID | None = None


class LeaveBalanceQuery(BaseModel):
    year: int | None = Field(default=None, ge=2000, le=2100)


class LeaveRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    employee_id: UUID
    policy_id: UUID
    start_date: date
    end_date: date
    days: float
    half_day_type: str | None = None
    reason: str
    status: str
    approved_by: UUID | None = None
    approved_at: datetime | None = None
    rejection_reason: str | None = None
    cancelled_at: datetime | None = None
    created_at: datetime


class LeaveBalanceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID
    policy_id: UUID
    year: int
    granted_days: float
    carry_over_days: float
    used_days: float
    pending_days: float
    remaining_days: float


class LeavePolicyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    name: str
    leave_type: str
    default_days: float
    is_active: bool


class LeavePolicyCreate(BaseModel):
    code: str = Field(pattern=r"^[A-Z0-9_]{1,50}$")
    name: str = Field(min_length=1, max_length=100)
    leave_type: str = Field(default="ANNUAL", pattern=r"^[A-Z_]{1,30}$")
    default_days: float = Field(default=0, ge=0, le=365)


class LeavePolicyUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    leave_type: str | None = Field(default=None, pattern=r"^[A-Z_]{1,30}$")
    default_days: float | None = Field(default=None, ge=0, le=365)
    is_active: bool | None = None


class LeaveBulkGrant(BaseModel):
    policy_id: UUID
    employee_ids: list[UUID] = Field(min_length=1, max_length=500)
    year: int = Field(ge=2000, le=2100)
    days: float = Field(gt=0, le=365)


class LeaveBulkGrantResult(BaseModel):
    granted_count: int
    balances: list[LeaveBalanceOut]
