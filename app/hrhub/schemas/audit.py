from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.hrhub.core.pagination import PaginationParams
from app.hrhub.schemas.types import UtcDatetime


class AuditLogQuery(PaginationParams):
    action: str | None = Field(default=None, max_length=100)
    resource_type: str | None = Field(default=None, max_length=100)
    resource_id: str | None = Field(default=None, max_length=100)
    actor_id: UUID | None = None
    created_from: UtcDatetime | None = None
    created_to: UtcDatetime | None = None


class AuditLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID | None = None
    actor_id: UUID | None = None
    action: str
    resource_type: str
    resource_id: str | None = None
    changes: dict | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    trace_id: str | None = None
    created_at: datetime
