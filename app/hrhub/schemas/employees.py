from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.hrhub.core.pagination import PaginationParams

EmployeeStatus = Literal["ACTIVE", "ON_LEAVE", "OFFBOARDING", "RESIGNED", "TERMINATED"]


class EmployeeListQuery(PaginationParams):
    status: EmployeeStatus | None = None
    department: str | None = Field(default=None, max_length=100)
    search: str | None = Field(default=None, max_length=100)


class EmployeeCreate(BaseModel):
    employee_no: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    department: str | None = Field(default=None, max_length=100)
    job_title: str | None = Field(default=None, max_length=100)
    manager_id: UUID | None = None
    hire_date: date
    base_salary: float = Field(default=0, ge=0)


class EmployeeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    department: str | None = Field(default=None, max_length=100)
    job_title: str | None = Field(default=None, max_length=100)
    manager_id: UUID | None = None
    status: Literal["ACTIVE", "ON_LEAVE"] | None = None
    base_salary: float | None = Field(default=None, ge=0)


class EmployeeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    employee_no: str
    name: str
    email: str
    department: str | None = None
    job_title: str | None = None
    manager_id: UUID | None = None
    status: str
    hire_date: date
    resign_date: date | None = None
    base_salary: float
    onboarded_at: datetime | None = None
    created_at: datetime
