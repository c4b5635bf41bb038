from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.hrhub.core.pagination import PaginationParams
from app.hrhub.schemas.types import UtcDatetime

ConsentPurpose = Literal[
    "EMPLOYMENT_PROCESSING",
    "PAYROLL_PROCESSING",
    "BENEFITS_ADMINISTRATION",
    "PERFORMANCE_MANAGEMENT",
    "TRAINING_RECORDS",
    "HEALTH_SAFETY",
    "MARKETING_COMMUNICATION",
    "THIRD_PARTY_TRANSFER",
]


class ConsentCreate(BaseModel):
    employee_id: UUID
    purpose: ConsentPurpose
    legal_basis: str | None = Field(default=None, max_length=500)
    expires_at: UtcDatetime | None = None


class ConsentRevoke(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


class ConsentQuery(PaginationParams):
    employee_id: UUID | None = None
    purpose: ConsentPurpose | None = None
    status: Literal["ACTIVE", "REVOKED", "EXPIRED"] | None = None


class ConsentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    employee_id: UUID
    purpose: str
    legal_basis: str | None = None
    status: str
    consented_at: datetime
    expires_at: datetime | None = None
    revoked_at: datetime | None = None
    revoke_reason: str | None = None


class ConsentExpiryResult(BaseModel):
    expired: int
    consent_ids: list[UUID]
