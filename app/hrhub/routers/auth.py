import logging

from fastapi import APIRouter, Depends, Request, Response

from app.hrhub.core.config import settings
from app.hrhub.core.error_catalog import AppError
from app.hrhub.core.logging import log_json
from app.hrhub.db.session import get_db
from app.hrhub.schemas.auth import LoginRequest, LoginResponse
from app.hrhub.schemas.envelope import DataEnvelope, envelope
from app.hrhub.services.audit import AuditEntry, AuditSink, extract_request_meta, get_audit_sink
from app.hrhub.services.auth import AuthService

logger = logging.getLogger("hrhub.auth")

router = APIRouter()


@router.post("/login", response_model=DataEnvelope[LoginResponse])
def login(
    request: Request,
    response: Response,
    payload: LoginRequest,
    audit: AuditSink = Depends(get_audit_sink),
    db=Depends(get_db),
):
    service = AuthService(db)
    ip, user_agent = extract_request_meta(request)
    trace_id = getattr(request.state, "trace_id", None)
    try:
        user, token = service.login(payload.username_or_email, payload.password)
    except AppError:
        log_json(logger, {"event": "login_failed", "trace_id": trace_id, "ip": ip}, level=logging.WARNING)
        raise

    max_age = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        max_age=max_age,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    audit.log(
        AuditEntry(
            action="auth.login",
            resource_type="user",
            resource_id=str(user.id),
            company_id=str(user.company_id),
            actor_id=str(user.employee_id or user.id),
            ip=ip,
            user_agent=user_agent,
            trace_id=trace_id,
        )
    )
    return envelope(LoginResponse(access_token=token, expires_in=max_age))


@router.post("/logout", response_model=DataEnvelope[dict])
def logout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return envelope({"logged_out": True})
