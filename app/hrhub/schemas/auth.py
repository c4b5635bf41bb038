from uuid import UUID

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "example": {"username_or_email": "hr.admin@example.com", "password": "Secret123"},
        }
    }

    username_or_email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=255)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class MeResponse(BaseModel):
    user_id: UUID
    employee_id: UUID | None = None
    role: str
    company_id: UUID
    company_code: str | None = None
    company_name: str | None = None
    permissions: list[str]
