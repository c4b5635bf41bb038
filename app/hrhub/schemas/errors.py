from pydantic import BaseModel


class ValidationIssue(BaseModel):
    field: str | None = None
    message: str
    type: str


class ApiErrorBody(BaseModel):
    code: str
    message: str
    details: dict | None = None
    trace_id: str | None = None


class ApiErrorResponse(BaseModel):
    error: ApiErrorBody


ERROR_RESPONSES = {
    400: {"model": ApiErrorResponse, "description": "Invalid request"},
    401: {"model": ApiErrorResponse, "description": "Authentication required"},
    403: {"model": ApiErrorResponse, "description": "Permission denied"},
    404: {"model": ApiErrorResponse, "description": "Resource not found"},
}
