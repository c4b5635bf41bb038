import logging

from fastapi import Depends, Request
from jose import JWTError
from pydantic import ValidationError

from app.hrhub.core.context import Principal, get_principal
from app.hrhub.core.error_catalog import forbidden, unauthorized
from app.hrhub.core.logging import log_json
from app.hrhub.core.metrics import metrics
from app.hrhub.core.scope import TenantScope, build_tenant_scope
from app.hrhub.core.security import TokenData, decode_token, extract_session_token
from app.hrhub.db.session import get_db
from app.hrhub.repos.users import UserRepository
from app.hrhub.services.access_control import AccessControlService

logger = logging.getLogger("hrhub.rbac")


def _permission_cache(request: Request) -> dict:
    cache = getattr(request.state, "permission_cache", None)
    if cache is None:
        cache = {}
        request.state.permission_cache = cache
    return cache


def get_current_principal(request: Request, db=Depends(get_db)) -> Principal:
    principal = get_principal(request)
    if principal is not None:
        return principal

    token = extract_session_token(request)
    if not token:
        raise unauthorized()
    try:
        token_data = TokenData(**decode_token(token))
    except (JWTError, ValidationError, TypeError) as exc:
        raise unauthorized() from exc

    user = UserRepository(db).get_by_id(token_data.sub)
    if user is None or not user.is_active:
        raise unauthorized()

    service = AccessControlService(db, cache=_permission_cache(request))
    principal = Principal(
        user_id=str(user.id),
        employee_id=str(user.employee_id) if user.employee_id else None,
        role=user.role,
        company_id=str(user.company_id),
        trace_id=getattr(request.state, "trace_id", ""),
        permissions=frozenset(service.permissions_for_role(user.role)),
    )
    request.state.principal = principal
    request.state.user_id = principal.user_id
    request.state.company_id = principal.company_id
    request.state.role = principal.role
    return principal


def require_permission(module: str, action: str):
    def dependency(request: Request, principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.has_permission(module, action):
            metrics.increment_rbac_denied(module, action)
            log_json(
                logger,
                {
                    "event": "permission_denied",
                    "trace_id": getattr(request.state, "trace_id", ""),
                    "user_id": principal.user_id,
                    "role": principal.role,
                    "module": module,
                    "action": action,
                },
                level=logging.WARNING,
            )
            raise forbidden(f"{module}:{action} permission required")
        return principal

    return dependency


def get_tenant_scope(request: Request, principal: Principal = Depends(get_current_principal)) -> TenantScope:
    return build_tenant_scope(principal, request.query_params.get("company_id"))


__all__ = [
    "get_current_principal",
    "require_permission",
    "get_tenant_scope",
]
