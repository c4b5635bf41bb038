from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.hrhub.core.pagination import PaginationParams
from app.hrhub.schemas.types import UtcDatetime

PayrollStatus = Literal["DRAFT", "CALCULATING", "REVIEW", "APPROVED", "PAID", "CANCELLED"]


class PayrollRunCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    run_type: Literal["MONTHLY", "BONUS", "SEVERANCE", "SPECIAL"] = "MONTHLY"
    year_month: str = Field(pattern=r"^\d{4}-\d{2}$")
    period_start: UtcDatetime
    period_end: UtcDatetime
    pay_date: UtcDatetime | None = None
    currency: str = Field(default="KRW", min_length=3, max_length=3)

    @model_validator(mode="after")
    def ensure_period_order(self):
        if self.period_end < self.period_start:
            raise ValueError("period_end must be on or after period_start")
        return self


class PayrollRunQuery(PaginationParams):
    status: PayrollStatus | None = None
    year_month: str | None = Field(default=None, pattern=r"^\d{4}-\d{2}$")
    run_type: Literal["MONTHLY", "BONUS", "SEVERANCE", "SPECIAL"] | None = None


class PayrollItemAdjust(BaseModel):
    gross_pay: float | None = Field(default=None, ge=0)
    deductions: float | None = Field(default=None, ge=0)
    adjustment_reason: str = Field(min_length=1, max_length=500)


class PayrollItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    run_id: UUID
    employee_id: UUID
    base_salary: float
    gross_pay: float
    deductions: float
    net_pay: float
    is_manually_adjusted: bool
    adjustment_reason: str | None = None


class PayrollRunOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    name: str
    run_type: str
    year_month: str
    period_start: datetime
    period_end: datetime
    pay_date: datetime | None = None
    currency: str
    status: str
    total_gross: float | None = None
    total_deductions: float | None = None
    total_net: float | None = None
    headcount: int
    calculated_at: datetime | None = None
    approved_by: UUID | None = None
    approved_at: datetime | None = None
    paid_at: datetime | None = None
    created_at: datetime


class PayrollRunDetail(PayrollRunOut):
    items: list[PayrollItemOut] = []
